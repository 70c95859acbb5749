from fake_list_view import FakeListView
from listview.widgets.list_view_context import ScrollDirection, ScrollState
from listview.widgets.list_view_scroll_service import ListViewScrollService, ScrollTracker, is_at_end


def _prepared_view(**kwargs):
    view = FakeListView([100] * 20, viewport_height=500, preload_screens=1, throttle_ms=0, **kwargs)
    view.seed()
    view._cached_scroll_height = view.scroll_height()
    return view


def test_tracker_derives_direction_from_previous_offset():
    tracker = ScrollTracker(ScrollState(position=300))

    assert tracker.update(200) == ScrollDirection.UP
    assert tracker.update(250) == ScrollDirection.DOWN
    assert tracker.update(250) == ScrollDirection.DOWN
    assert tracker.state.position == 250
    assert tracker.state.direction == ScrollDirection.DOWN


def test_end_of_list_boundary():
    assert is_at_end(500, 400, 900) is True
    assert is_at_end(500, 399, 900) is False


def test_handle_scroll_updates_state_and_scans_in_direction():
    view = _prepared_view()
    service = ListViewScrollService(view)
    view.offset = 700

    service.handle_scroll()
    assert view.scan_directions == []  # read is batched
    view.batcher.flush()

    assert view.scroll_state.position == 700
    assert view.scroll_state.direction == ScrollDirection.DOWN
    assert view.scan_directions == [ScrollDirection.DOWN]
    assert view.visibility.snapshot()[:2] == [False, False]

    view.offset = 100
    service.handle_scroll()
    view.batcher.flush()

    assert view.scan_directions[-1] == ScrollDirection.UP
    assert view.visibility.snapshot()[:2] == [True, True]


def test_end_of_list_calls_load_more_every_time_past_threshold():
    calls = []
    view = _prepared_view(load_more=lambda: calls.append(True))
    service = ListViewScrollService(view)

    view.offset = 1500
    service.handle_scroll()
    view.batcher.flush()
    view.offset = 1600
    service.handle_scroll()
    view.batcher.flush()

    assert calls == [True, True]
    assert view.scrolled_to_end.emit_count == 0


def test_end_of_list_emits_signal_without_callback():
    view = _prepared_view()
    service = ListViewScrollService(view)

    view.offset = 1500
    service.handle_scroll()
    view.batcher.flush()

    assert view.scrolled_to_end.emit_count == 1


def test_no_end_notification_before_threshold():
    view = _prepared_view()
    service = ListViewScrollService(view)

    view.offset = 1499
    service.handle_scroll()
    view.batcher.flush()

    assert view.scrolled_to_end.emit_count == 0


def test_raw_scroll_passes_through_throttle():
    view = _prepared_view()
    service = ListViewScrollService(view)
    view.offset = 300

    service.on_raw_scroll(300)
    view.batcher.flush()

    assert view.scroll_state.position == 300


def test_handle_scroll_after_teardown_is_ignored():
    view = _prepared_view()
    service = ListViewScrollService(view)
    view.torn_down = True

    service.handle_scroll()
    view.batcher.flush()

    assert view.scan_directions == []
    assert view.scroll_state.position == 0


def test_teardown_while_read_is_queued_skips_it():
    view = _prepared_view()
    service = ListViewScrollService(view)
    view.offset = 900
    service.handle_scroll()
    view.torn_down = True

    view.batcher.flush()

    assert view.scroll_state.position == 0
    assert view.scan_directions == []


def test_raw_scroll_after_detach_is_ignored():
    view = _prepared_view()
    service = ListViewScrollService(view)
    service.detach()
    view.offset = 300

    service.on_raw_scroll(300)

    assert service.detached is True
    assert view.batcher.pending() == 0
    assert view.scroll_state.position == 0
