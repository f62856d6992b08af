"""UI package."""

from .timer_widget import TimerWidget
from .toast import Toast

__all__ = ["TimerWidget", "Toast"]
