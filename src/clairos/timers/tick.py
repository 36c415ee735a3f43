"""Periodic refresh driver for values derived from the wall clock."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_MS = 50


class LiveTimerTick:
    """Invoke ``on_tick`` every ``interval_ms`` while enabled.

    The driver holds a background thread only while enabled. Disabling,
    closing or changing the interval always stops the running trigger first,
    so no recurring callback outlives its owner. Use as a context manager to
    scope the trigger to a block.
    """

    def __init__(
        self,
        on_tick: Callable[[], None],
        *,
        interval_ms: float = DEFAULT_INTERVAL_MS,
        enabled: bool = False,
    ) -> None:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be greater than 0")
        self._on_tick = on_tick
        self._interval_ms = float(interval_ms)
        self._enabled = False
        self._lock = threading.Lock()
        self._stop_event: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None
        if enabled:
            self.set_enabled(True)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def interval_ms(self) -> float:
        return self._interval_ms

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def set_enabled(self, enabled: bool) -> None:
        with self._lock:
            if enabled == self._enabled:
                return
            self._enabled = enabled
            if enabled:
                self._attach()
            else:
                self._detach()

    def set_interval(self, interval_ms: float) -> None:
        """Change the cadence; an active trigger is torn down and restarted."""

        if interval_ms <= 0:
            raise ValueError("interval_ms must be greater than 0")
        with self._lock:
            if float(interval_ms) == self._interval_ms:
                return
            self._interval_ms = float(interval_ms)
            if self._enabled:
                self._detach()
                self._attach()

    def close(self) -> None:
        """Release the trigger; equivalent to disabling on unmount."""

        self.set_enabled(False)

    def __enter__(self) -> "LiveTimerTick":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _attach(self) -> None:
        stop_event = threading.Event()
        thread = threading.Thread(
            target=self._run_loop,
            args=(stop_event, self._interval_ms / 1000.0),
            name="live-timer-tick",
            daemon=True,
        )
        self._stop_event = stop_event
        self._thread = thread
        logger.debug("Starting timer tick interval_ms=%s", self._interval_ms)
        thread.start()

    def _detach(self) -> None:
        if self._stop_event is None or self._thread is None:
            return
        logger.debug("Stopping timer tick")
        self._stop_event.set()
        if self._thread is not threading.current_thread():
            self._thread.join(timeout=self._interval_ms / 1000.0 + 1)
        self._stop_event = None
        self._thread = None

    def _run_loop(self, stop_event: threading.Event, interval_s: float) -> None:
        while not stop_event.wait(interval_s):
            try:
                self._on_tick()
            except Exception:
                logger.exception("Timer tick callback failed")


__all__ = ["DEFAULT_INTERVAL_MS", "LiveTimerTick"]
