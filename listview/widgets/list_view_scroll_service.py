from listview.utils.flow_log import log_flow
from listview.utils.throttle import Throttle
from listview.widgets.list_view_context import ScrollDirection, ScrollState


def is_at_end(viewport_height: float, position: float, scroll_height: float) -> bool:
    """True once the bottom of the viewport reaches the end of the content."""
    return viewport_height + position >= scroll_height


class ScrollTracker:
    """Derives scroll direction from consecutive offsets."""

    def __init__(self, state: ScrollState | None = None):
        self.state = state if state is not None else ScrollState()

    def update(self, offset: float) -> ScrollDirection:
        offset = float(offset)
        direction = ScrollDirection.UP if offset < self.state.position else ScrollDirection.DOWN
        self.state.position = offset
        self.state.direction = direction
        return direction


class ListViewScrollService:
    """Owns rate-limited scroll handling for ListView."""

    def __init__(self, view):
        self._view = view
        self.tracker = ScrollTracker(view.scroll_state)
        self._throttled = Throttle(self.handle_scroll, view.config.throttle_ms)
        self.detached = False

    def on_raw_scroll(self, *_args):
        """Slot for the scroll source; bursts collapse to one update per interval."""
        if self.detached:
            return
        self._throttled()

    def handle_scroll(self):
        v = self._view
        if v.root() is None:
            return
        v.batcher.measure(self._measure_scroll)

    def _measure_scroll(self):
        v = self._view
        if v.root() is None:
            return
        offset = v.scroll_offset()
        direction = self.tracker.update(offset)
        log_flow("SCROLL", f"offset={offset} dir={direction.name}", throttle_key="scroll_offset", every_s=0.5)

        if is_at_end(v.config.viewport_height, offset, v._cached_scroll_height):
            self.notify_end()

        v._check_visibility(direction)

    def notify_end(self):
        """Call `load_more`, or emit `scrolled_to_end` when no callback is set."""
        v = self._view
        log_flow("SCROLL", "Reached end of list", level="INFO", throttle_key="scroll_end", every_s=1.0)
        if v.config.load_more is not None:
            v.config.load_more()
        else:
            v.scrolled_to_end.emit()

    def detach(self):
        """Stop reacting to scroll events and drop any pending throttled call."""
        self.detached = True
        self._throttled.cancel()
