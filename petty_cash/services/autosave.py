"""
Periodic background save.

A daemon thread wakes every `interval` seconds and writes the store to its
storage backend. Mutations save immediately as well, so the timer only
matters when an immediate save failed.
"""

import asyncio
import threading
from typing import Optional

import structlog

from petty_cash.config import get_settings


logger = structlog.get_logger(__name__)


class AutoSaver:
    """Saves a TransactionStore on a fixed interval until stopped."""

    def __init__(self, store, interval: Optional[float] = None):
        self._store = store
        self._interval = (
            interval if interval is not None
            else get_settings().app.autosave_interval_seconds
        )
        self._stop_event = threading.Event()
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def save_now(self) -> bool:
        """Run one save; returns whether it succeeded."""
        with self._lock:
            return asyncio.run(self._store.save())

    def _run(self) -> None:
        logger.info("autosave_started", interval=self._interval)
        while not self._stop_event.wait(self._interval):
            if not self.save_now():
                logger.warning("autosave_failed")
        logger.info("autosave_stopped")

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            name="petty-cash-autosave",
            daemon=True,
        )
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        """Signal the thread to exit and wait for it."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
