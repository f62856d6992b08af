"""Timer package."""

from .engine import (
    TimerEngine,
    TimerState,
    TimerMode,
    PomodoroPhase,
    PomodoroConfig,
    PHASE_LABELS,
    format_time,
)
from .errors import TimerError, InvalidDuration, InvalidState

__all__ = [
    "TimerEngine",
    "TimerState",
    "TimerMode",
    "PomodoroPhase",
    "PomodoroConfig",
    "PHASE_LABELS",
    "format_time",
    "TimerError",
    "InvalidDuration",
    "InvalidState",
]
