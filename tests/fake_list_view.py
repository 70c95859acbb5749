from listview.models.placeholder_cache import PlaceholderCache
from listview.models.visibility_table import VisibilityTable
from listview.utils.frame_batch import FrameBatcher
from listview.widgets.list_view_context import ListViewConfig, ScrollDirection, ScrollState
from listview.widgets.list_view_window_scanner_service import WindowScannerService


class FakeSignal:
    def __init__(self):
        self.emit_count = 0

    def emit(self, *args):
        self.emit_count += 1


class FakeListView:
    """Single-column layout with known row heights, standing in for ListView."""

    def __init__(self, heights=(), *, viewport_height=500, preload_screens=1, throttle_ms=1000,
                 load_more=None, element_count=None):
        self.config = ListViewConfig(
            preload_screens=preload_screens,
            throttle_ms=throttle_ms,
            load_more=load_more,
            viewport_height=viewport_height,
        )
        self.scroll_state = ScrollState()
        self.placeholders = PlaceholderCache()
        self.visibility = VisibilityTable()
        # Flushed explicitly by tests.
        self.batcher = FrameBatcher(schedule=lambda callback: None)
        self.scrolled_to_end = FakeSignal()
        self.visibility_updated = FakeSignal()
        self._cached_scroll_height = 0
        self.heights = list(heights)
        self.element_limit = element_count
        self.offset = 0
        self.torn_down = False
        self.render_requests = 0
        self.scan_directions = []
        self.measure_calls = []
        self.scanner = WindowScannerService(self)

    # Layout access
    def root(self):
        return None if self.torn_down else self

    def scroll_offset(self):
        return self.offset

    def scroll_height(self):
        return sum(self.heights)

    def element_count(self):
        count = len(self.heights)
        if self.element_limit is not None:
            count = min(count, self.element_limit)
        return count

    def has_element(self, index):
        return 0 <= index < self.element_count()

    def offset_top(self, index):
        return sum(self.heights[:index])

    def offset_height(self, index):
        self.measure_calls.append(index)
        return self.heights[index]

    # Hooks called by services
    def _request_render(self):
        self.render_requests += 1

    def _check_visibility(self, direction=ScrollDirection.UNKNOWN):
        self.scan_directions.append(direction)
        self.scanner.check_visibility(direction)

    # Test helpers
    def seed(self, measure=True):
        """Start with every row visible and measured, as after a first load."""
        self.visibility.resize(len(self.heights), fill=True)
        self.placeholders.resize(len(self.heights))
        if measure:
            for i, height in enumerate(self.heights):
                self.placeholders.set(i, height)

    def scan(self, direction):
        self.scanner.check_visibility(direction)
        self.batcher.flush()

    def expected_flags(self):
        preload = self.config.preload_distance
        flags = []
        for i in range(len(self.visibility)):
            top = self.offset_top(i) - self.scroll_state.position
            bottom = top + self.placeholders.height_or_zero(i)
            flags.append(bottom > -preload and top < preload)
        return flags
