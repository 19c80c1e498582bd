"""Timer package."""

from .engine import (
    TimerEngine,
    TimerSnapshot,
    SessionResult,
    Phase,
    Cue,
    PREPARE_SECONDS,
    COUNTDOWN_CUE_SECONDS,
    TICK_INTERVAL_MS,
)

__all__ = [
    "TimerEngine",
    "TimerSnapshot",
    "SessionResult",
    "Phase",
    "Cue",
    "PREPARE_SECONDS",
    "COUNTDOWN_CUE_SECONDS",
    "TICK_INTERVAL_MS",
]
