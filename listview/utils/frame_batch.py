"""Read/write batching for layout access.

Layout reads (positions, heights, scroll extents) are queued with
``measure`` and layout writes (visibility changes that mount or unmount
widgets) with ``mutate``. A flush runs every queued read before any queued
write, so a pass never interleaves a write between two reads. Jobs queued
while a flush is running are picked up by the same flush, still in
read-then-write order.
"""

import traceback
from collections import deque

from PySide6.QtCore import QTimer

from listview.utils.flow_log import log_flow


class FrameBatcher:
    """Queues layout reads and writes and runs them in read/write phases."""

    def __init__(self, schedule=None):
        # `schedule(callback)` requests a flush on the next event loop turn.
        self._schedule = schedule or (lambda callback: QTimer.singleShot(0, callback))
        self._reads = deque()
        self._writes = deque()
        self._scheduled = False
        self._flushing = False

    def measure(self, job):
        self._reads.append(job)
        self._request_flush()
        return job

    def mutate(self, job):
        self._writes.append(job)
        self._request_flush()
        return job

    def clear(self, job) -> bool:
        """Drop a queued job; returns True if it was still pending."""
        for queue in (self._reads, self._writes):
            try:
                queue.remove(job)
                return True
            except ValueError:
                continue
        return False

    def discard_pending(self):
        self._reads.clear()
        self._writes.clear()

    def pending(self) -> int:
        return len(self._reads) + len(self._writes)

    def _request_flush(self):
        if self._scheduled or self._flushing:
            return
        self._scheduled = True
        self._schedule(self.flush)

    def flush(self):
        """Run queued reads, then queued writes, until both queues drain."""
        self._scheduled = False
        if self._flushing:
            return
        self._flushing = True
        try:
            while self._reads or self._writes:
                self._run_phase(self._reads, "read")
                self._run_phase(self._writes, "write")
        finally:
            self._flushing = False

    def _run_phase(self, queue, phase: str):
        # Snapshot: jobs queued by this phase run in the next round.
        jobs = list(queue)
        queue.clear()
        for job in jobs:
            try:
                job()
            except Exception as e:
                log_flow("BATCH", f"{phase} job failed: {e}\n{traceback.format_exc()}", level="ERROR")
