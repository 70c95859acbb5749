from listview.utils import frame_batch as frame_batch_module
from listview.utils.frame_batch import FrameBatcher


def _manual_batcher():
    scheduled = []
    batcher = FrameBatcher(schedule=scheduled.append)
    return batcher, scheduled


def test_reads_run_before_writes():
    batcher, _ = _manual_batcher()
    order = []

    batcher.mutate(lambda: order.append("write-1"))
    batcher.measure(lambda: order.append("read-1"))
    batcher.mutate(lambda: order.append("write-2"))
    batcher.measure(lambda: order.append("read-2"))
    batcher.flush()

    assert order == ["read-1", "read-2", "write-1", "write-2"]


def test_flush_is_scheduled_once_per_batch():
    batcher, scheduled = _manual_batcher()

    batcher.measure(lambda: None)
    batcher.measure(lambda: None)
    batcher.mutate(lambda: None)

    assert scheduled == [batcher.flush]

    batcher.flush()
    batcher.measure(lambda: None)

    assert len(scheduled) == 2


def test_jobs_queued_during_flush_run_in_same_flush():
    batcher, scheduled = _manual_batcher()
    order = []

    def read():
        order.append("read")
        batcher.mutate(lambda: order.append("write"))
        batcher.measure(lambda: order.append("nested-read"))

    batcher.measure(read)
    batcher.flush()

    assert order == ["read", "write", "nested-read"]
    assert batcher.pending() == 0
    assert len(scheduled) == 1


def test_failing_job_is_reported_and_batch_continues(monkeypatch):
    batcher, _ = _manual_batcher()
    logged = []
    order = []
    monkeypatch.setattr(frame_batch_module, "log_flow", lambda *args, **kwargs: logged.append((args, kwargs)))

    def broken():
        raise RuntimeError("layout gone")

    batcher.measure(broken)
    batcher.measure(lambda: order.append("read"))
    batcher.mutate(lambda: order.append("write"))
    batcher.flush()

    assert order == ["read", "write"]
    assert len(logged) == 1
    assert "layout gone" in logged[0][0][1]
    assert logged[0][1]["level"] == "ERROR"


def test_clear_removes_pending_job():
    batcher, _ = _manual_batcher()
    order = []
    job = batcher.measure(lambda: order.append("read"))

    assert batcher.clear(job) is True
    assert batcher.clear(job) is False
    batcher.flush()

    assert order == []
