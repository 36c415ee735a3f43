"""Kitchen timers and the live refresh driver."""

from clairos.timers.store import Timer, TimerStore, format_remaining, live_remaining_ms
from clairos.timers.tick import LiveTimerTick

__all__ = ["LiveTimerTick", "Timer", "TimerStore", "format_remaining", "live_remaining_ms"]
