"""Tests for the background autosaver."""

import threading

from petty_cash.services.autosave import AutoSaver


class CountingStore:
    """Minimal stand-in exposing the async save() the saver calls."""

    def __init__(self, result: bool = True):
        self.saves = 0
        self.result = result
        self.saved = threading.Event()

    async def save(self):
        self.saves += 1
        self.saved.set()
        return self.result


class TestAutoSaver:
    def test_save_now(self):
        store = CountingStore()
        assert AutoSaver(store, interval=60).save_now() is True
        assert store.saves == 1

    def test_save_now_reports_failure(self):
        assert AutoSaver(CountingStore(result=False), interval=60).save_now() is False

    def test_saves_periodically_until_stopped(self):
        store = CountingStore()
        saver = AutoSaver(store, interval=0.01)
        saver.start()
        try:
            assert store.saved.wait(timeout=5)
            assert saver.is_running
        finally:
            saver.stop(timeout=5)
        assert not saver.is_running
        assert store.saves >= 1

    def test_start_is_idempotent(self):
        saver = AutoSaver(CountingStore(), interval=60)
        saver.start()
        first = saver._thread
        saver.start()
        assert saver._thread is first
        saver.stop(timeout=5)
