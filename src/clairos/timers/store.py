"""In-memory kitchen timer store."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

TimerStatus = Literal["idle", "running", "paused", "completed"]


def _now_ms() -> int:
    return int(time.time() * 1000)


class Timer(BaseModel):
    """Countdown timer; ``started_at`` is the wall clock (ms) it last started running."""

    id: str
    label: str
    duration_ms: int = Field(gt=0)
    remaining_ms: int = Field(ge=0)
    status: TimerStatus = "idle"
    started_at: Optional[int] = None
    recipe_id: Optional[str] = None

    model_config = ConfigDict(frozen=True)


def live_remaining_ms(timer: Timer, now_ms: Optional[int] = None) -> int:
    """Remaining time for display, floored at zero; never mutates the timer."""

    if timer.status == "running" and timer.started_at is not None:
        now = _now_ms() if now_ms is None else now_ms
        return max(0, timer.remaining_ms - (now - timer.started_at))
    return timer.remaining_ms


def format_remaining(ms: int) -> str:
    total_seconds = max(0, ms // 1000)
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes}:{seconds:02d}"


def progress_percent(timer: Timer, now_ms: Optional[int] = None) -> float:
    progress = live_remaining_ms(timer, now_ms) / timer.duration_ms * 100
    return max(0.0, min(100.0, progress))


class TimerStore:
    """Holds timers and applies start/pause/reset/complete transitions."""

    def __init__(self, clock: Callable[[], int] = _now_ms) -> None:
        self._clock = clock
        self._timers: Dict[str, Timer] = {}
        self._lock = threading.Lock()

    def list_timers(self) -> List[Timer]:
        with self._lock:
            return list(self._timers.values())

    def get(self, timer_id: str) -> Timer:
        with self._lock:
            return self._require(timer_id)

    def add(
        self,
        timer_id: str,
        label: str,
        duration_ms: int,
        recipe_id: Optional[str] = None,
    ) -> Timer:
        """Register a timer; an existing id only gains a missing recipe link."""

        with self._lock:
            existing = self._timers.get(timer_id)
            if existing is not None:
                if recipe_id and not existing.recipe_id:
                    existing = existing.model_copy(update={"recipe_id": recipe_id})
                    self._timers[timer_id] = existing
                return existing
            timer = Timer(
                id=timer_id,
                label=label,
                duration_ms=duration_ms,
                remaining_ms=duration_ms,
                recipe_id=recipe_id,
            )
            self._timers[timer_id] = timer
            return timer

    def remove(self, timer_id: str) -> None:
        with self._lock:
            self._require(timer_id)
            del self._timers[timer_id]

    def start(self, timer_id: str) -> Timer:
        with self._lock:
            timer = self._require(timer_id)
            if timer.status == "running":
                return timer
            # A completed timer restarts from its full duration.
            base = timer.duration_ms if timer.status == "completed" else timer.remaining_ms
            return self._put(
                timer,
                remaining_ms=base,
                status="running",
                started_at=self._clock(),
            )

    def pause(self, timer_id: str) -> Timer:
        with self._lock:
            timer = self._require(timer_id)
            if timer.status != "running" or timer.started_at is None:
                return timer
            return self._put(
                timer,
                status="paused",
                remaining_ms=live_remaining_ms(timer, self._clock()),
                started_at=None,
            )

    def reset(self, timer_id: str) -> Timer:
        with self._lock:
            timer = self._require(timer_id)
            return self._put(
                timer,
                status="idle",
                remaining_ms=timer.duration_ms,
                started_at=None,
            )

    def complete(self, timer_id: str) -> Timer:
        with self._lock:
            timer = self._require(timer_id)
            if timer.status == "completed":
                return timer
            return self._put(timer, status="completed", remaining_ms=0, started_at=None)

    def check_completions(self) -> List[str]:
        """Complete every running timer whose live remaining time reached zero."""

        now = self._clock()
        completed: List[str] = []
        with self._lock:
            for timer_id, timer in list(self._timers.items()):
                if timer.status == "running" and live_remaining_ms(timer, now) <= 0:
                    self._put(timer, status="completed", remaining_ms=0, started_at=None)
                    completed.append(timer_id)
        if completed:
            logger.info("Completed %s timer(s): %s", len(completed), ", ".join(completed))
        return completed

    def _require(self, timer_id: str) -> Timer:
        timer = self._timers.get(timer_id)
        if timer is None:
            raise ValueError(f"Timer {timer_id} not found")
        return timer

    def _put(self, timer: Timer, **changes) -> Timer:
        updated = timer.model_copy(update=changes)
        self._timers[timer.id] = updated
        return updated


__all__ = [
    "Timer",
    "TimerStatus",
    "TimerStore",
    "format_remaining",
    "live_remaining_ms",
    "progress_percent",
]
