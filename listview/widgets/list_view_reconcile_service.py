from listview.utils.flow_log import log_flow
from listview.widgets.list_view_context import ScrollDirection


class ListViewReconcileService:
    """Owns item-list mutation handling for ListView.

    Reconciliation runs in two phases. `on_items_changed` resizes the
    visibility table and placeholder cache and asks the host to mount the new
    slots. Heights only exist after the host has laid those slots out, so
    measurement and the follow-up scan wait for `on_render_complete`.
    """

    def __init__(self, view):
        self._view = view
        self._pending = False
        self._pending_shrink = False

    @property
    def pending(self) -> bool:
        return self._pending

    def on_items_changed(self, old_len: int, new_len: int):
        """Phase 1: seed state for the new length and request a mount."""
        v = self._view
        v.placeholders.resize(new_len)
        # New tail entries render optimistically until a scan proves them off-window.
        v.visibility.resize(new_len, fill=True)

        shrunk = new_len < old_len
        self._pending = True
        self._pending_shrink = self._pending_shrink or shrunk
        log_flow("RECONCILE", f"Items {old_len} -> {new_len} shrunk={shrunk}", level="INFO")
        v._request_render()

    def on_render_complete(self):
        """Phase 2: the host has mounted the slots; measure and scan."""
        v = self._view
        if not self._pending or v.root() is None:
            return
        v.batcher.measure(self._measure_phase)

    def _measure_phase(self) -> int:
        v = self._view
        if not self._pending or v.root() is None:
            return 0
        shrunk = self._pending_shrink
        self._pending = False
        self._pending_shrink = False

        v._cached_scroll_height = v.scroll_height()

        placeholders = v.placeholders
        measured = 0
        count = min(v.element_count(), len(placeholders))
        for i in range(count):
            if placeholders.is_measured(i):
                continue
            if placeholders.set(i, v.offset_height(i)):
                measured += 1

        # New items are appended after scrolling to the end, so only the run
        # and what follows it can change. A shrink may have removed the run.
        direction = ScrollDirection.UNKNOWN if shrunk else ScrollDirection.DOWN
        log_flow(
            "RECONCILE",
            f"Measured {measured}/{count} scroll_height={v._cached_scroll_height} scan={direction.name}",
        )
        v._check_visibility(direction)
        return measured
