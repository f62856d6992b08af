"""Per-mode usage counter.

Keeps a count of how often each timer mode is opened so the app can
rank modes by use.
"""

from __future__ import annotations

from datetime import datetime

from ..timer.engine import TimerMode
from .db import get_session
from .models import ModeUsage

DEFAULT_ORDER: tuple[TimerMode, ...] = (
    TimerMode.STOPWATCH,
    TimerMode.COUNTDOWN,
    TimerMode.POMODORO,
)


class UsageTracker:
    """Thin service over the ``mode_usage`` table."""

    def record(self, mode: TimerMode) -> int:
        """Count one use of *mode*; returns the new total."""
        with get_session() as db:
            row = db.query(ModeUsage).filter_by(mode=mode.value).first()
            if row is None:
                row = ModeUsage(mode=mode.value, use_count=0)
                db.add(row)
            row.use_count += 1
            row.last_used = datetime.now()
            return row.use_count

    def top_modes(self, limit: int = 3) -> list[TimerMode]:
        """Modes by use count, most used first.

        Modes never used follow the used ones.  Ties, including the
        all-unused case, keep the default order.
        """
        with get_session() as db:
            counts = {row.mode: row.use_count for row in db.query(ModeUsage).all()}
        ranked = sorted(
            DEFAULT_ORDER, key=lambda m: counts.get(m.value, 0), reverse=True,
        )
        return ranked[:limit]

    def clear(self) -> None:
        """Forget all recorded uses."""
        with get_session() as db:
            db.query(ModeUsage).delete()
