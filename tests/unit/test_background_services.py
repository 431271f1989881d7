"""
Unit tests for the background services: FilePoller and ChannelSelector

Threaded tests use short intervals and poll for the expected state with a
deadline instead of sleeping a fixed amount.
"""

import threading
import time

import pytest

from omnipane.overlays import FilePoller
from omnipane.pane import ActiveChannelIndex, ChannelSelector


def wait_until(predicate, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class TestFilePoller:
    def test_initial_state(self, tmp_path):
        poller = FilePoller(tmp_path / "sensor", poll_interval=1.0)

        assert poller.content() == ""
        assert poller.last_update is None
        assert not poller.is_alive()

    def test_poll_once_publishes_content(self, tmp_path):
        path = tmp_path / "sensor"
        path.write_text("t=21000")
        poller = FilePoller(path, poll_interval=1.0)

        assert poller.poll_once() is True
        assert poller.content() == "t=21000"
        assert poller.last_update is not None

    def test_failed_read_keeps_previous_content(self, tmp_path):
        path = tmp_path / "sensor"
        path.write_text("first")
        poller = FilePoller(path, poll_interval=1.0)
        poller.poll_once()
        first_update = poller.last_update

        path.unlink()

        assert poller.poll_once() is False
        assert poller.content() == "first"
        assert poller.last_update == first_update

    def test_recovers_after_failure(self, tmp_path):
        path = tmp_path / "sensor"
        poller = FilePoller(path, poll_interval=1.0)

        assert poller.poll_once() is False
        path.write_text("back")

        assert poller.poll_once() is True
        assert poller.content() == "back"

    def test_thread_picks_up_changes(self, tmp_path):
        path = tmp_path / "sensor"
        path.write_text("one")
        poller = FilePoller(path, poll_interval=0.02)
        cancel = threading.Event()

        poller.start(cancel)
        try:
            assert wait_until(lambda: poller.content() == "one")
            path.write_text("two")
            assert wait_until(lambda: poller.content() == "two")
        finally:
            poller.stop()

        assert not poller.is_alive()

    def test_cancel_event_wakes_thread_mid_interval(self, tmp_path):
        poller = FilePoller(tmp_path / "sensor", poll_interval=2.0)
        cancel = threading.Event()

        poller.start(cancel)
        time.sleep(0.05)
        cancel.set()

        assert wait_until(lambda: not poller.is_alive(), timeout=0.5)
        poller.stop()

    def test_stop_sets_shared_cancel_event(self, tmp_path):
        poller = FilePoller(tmp_path / "sensor", poll_interval=2.0)
        cancel = threading.Event()
        poller.start(cancel)

        started = time.monotonic()
        poller.stop()

        assert cancel.is_set()
        assert time.monotonic() - started < 1.0
        assert not poller.is_alive()

    def test_start_twice_keeps_one_thread(self, tmp_path):
        poller = FilePoller(tmp_path / "sensor", poll_interval=0.5)
        cancel = threading.Event()

        poller.start(cancel)
        thread = poller._thread
        poller.start(cancel)

        assert poller._thread is thread
        poller.stop()


class TestActiveChannelIndex:
    def test_load_store(self):
        index = ActiveChannelIndex()
        assert index.load() == 0

        index.store(3)
        assert index.load() == 3


class TestChannelSelector:
    def test_advance_wraps_around(self):
        index = ActiveChannelIndex()
        selector = ChannelSelector(index, channel_count=3)

        assert [selector.advance() for _ in range(4)] == [1, 2, 0, 1]
        assert index.load() == 1

    def test_advance_from_out_of_range_index(self):
        index = ActiveChannelIndex(7)
        selector = ChannelSelector(index, channel_count=3)

        assert selector.advance() == 2

    @pytest.mark.parametrize("channel_count, interval", [(0, 1.0), (2, 0.0), (2, -1.0)])
    def test_invalid_arguments(self, channel_count, interval):
        with pytest.raises(ValueError):
            ChannelSelector(ActiveChannelIndex(), channel_count, interval)

    def test_single_channel_does_not_rotate(self):
        selector = ChannelSelector(ActiveChannelIndex(), channel_count=1, interval=0.01)

        selector.start(threading.Event())

        assert not selector.is_alive()
        selector.stop()

    def test_rotates_in_background(self):
        index = ActiveChannelIndex()
        selector = ChannelSelector(index, channel_count=2, interval=0.02)
        cancel = threading.Event()

        selector.start(cancel)
        try:
            assert selector.is_alive()
            assert wait_until(lambda: index.load() == 1)
        finally:
            selector.stop()

        assert not selector.is_alive()

    def test_cancel_event_wakes_rotation_mid_interval(self):
        index = ActiveChannelIndex()
        selector = ChannelSelector(index, channel_count=2, interval=2.0)
        cancel = threading.Event()

        selector.start(cancel)
        time.sleep(0.05)
        cancel.set()

        assert wait_until(lambda: not selector.is_alive(), timeout=0.5)
        assert index.load() == 0
        selector.stop()

    def test_rotation_happens_at_the_interval(self):
        index = ActiveChannelIndex()
        selector = ChannelSelector(index, channel_count=2, interval=0.4)
        cancel = threading.Event()

        selector.start(cancel)
        try:
            # Well before the interval: unchanged
            time.sleep(0.2)
            assert index.load() == 0

            # Past the first interval, before the second: advanced once (mod 2)
            time.sleep(0.4)
            assert index.load() == 1
        finally:
            selector.stop()
