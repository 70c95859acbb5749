from dataclasses import dataclass, field

from listview.utils.flow_log import log_flow
from listview.widgets.list_view_context import ScrollDirection


@dataclass
class ScanPlan:
    """Visibility writes computed by one read pass of the scanner."""

    direction: ScrollDirection
    start: int = 0
    end: int = -1
    writes: list = field(default_factory=list)
    measured: int = 0
    skipped: int = 0
    untouched: int = 0
    changed: int = 0


class WindowScannerService:
    """Keeps the visibility table in step with the preload window.

    Only the indices that can have changed for a given scroll direction are
    visited. Moving up, the new run cannot extend past the old run's end;
    moving down, it cannot start before the old run's start. Once the scan
    leaves the run (a true -> false transition in travel order) every index
    after it is switched off without reading its layout.
    """

    def __init__(self, view):
        self._view = view

    def check_visibility(self, direction: ScrollDirection = ScrollDirection.UNKNOWN):
        """Queue a scan: layout reads now, visibility writes after the read phase."""
        v = self._view
        if v.root() is None:
            return
        v.batcher.measure(lambda: self._measure_phase(direction))

    def _measure_phase(self, direction: ScrollDirection):
        v = self._view
        if v.root() is None:
            return
        plan = self.plan_scan(direction)
        v.batcher.mutate(lambda: self.apply_plan(plan))

    def scan_range(self, direction: ScrollDirection) -> range:
        """Indices to visit, in visiting order."""
        table = self._view.visibility
        n = len(table)
        if not self._view.config.monotonic_layout:
            return range(0, n)
        if direction == ScrollDirection.UP:
            check_end = table.last_index_of(True)
            if check_end >= 0:
                return range(check_end, -1, -1)
        elif direction == ScrollDirection.DOWN:
            check_start = table.index_of(True)
            if check_start >= 0:
                return range(check_start, n)
        # Unknown direction, or no previous run to start from.
        return range(0, n)

    def in_window(self, index: int) -> bool:
        """Overlap test for one index against the current preload window."""
        v = self._view
        preload = v.config.preload_distance
        top = v.offset_top(index) - v.scroll_state.position
        bottom = top + v.placeholders.height_or_zero(index)
        return bottom > -preload and top < preload

    def plan_scan(self, direction: ScrollDirection) -> ScanPlan:
        v = self._view
        table = v.visibility
        indices = self.scan_range(direction)
        plan = ScanPlan(direction=direction)
        if len(indices):
            plan.start, plan.end = indices[0], indices[-1]

        allow_skip = v.config.monotonic_layout
        planned = {}
        skip = False
        prev = None
        for i in indices:
            if skip:
                plan.skipped += 1
                if table.get(i):
                    planned[i] = False
                continue
            if v.has_element(i):
                visible = self.in_window(i)
                planned[i] = visible
                plan.measured += 1
                if allow_skip and prev is not None and not visible and planned.get(prev, table.get(prev)):
                    skip = True
            else:
                # Not mounted yet; the next reconciliation measures and scans it.
                plan.untouched += 1
            prev = i

        plan.writes = list(planned.items())
        log_flow(
            "SCAN",
            f"dir={direction.name} range={plan.start}..{plan.end} measured={plan.measured} "
            f"skipped={plan.skipped} untouched={plan.untouched}",
            throttle_key="scan_plan",
            every_s=0.25,
        )
        return plan

    def apply_plan(self, plan: ScanPlan) -> int:
        v = self._view
        if v.root() is None:
            return 0
        table = v.visibility
        changed = 0
        for index, visible in plan.writes:
            # The list may have been truncated between the read and write phase.
            if index < len(table) and table.set(index, visible):
                changed += 1
        plan.changed = changed
        if changed:
            v.visibility_updated.emit()
        return changed
