"""Shared test helpers for MultiTimer."""

from multitimer.timer.engine import TimerEngine


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeClock:
    """Monotonic millisecond clock that only moves when told to."""

    def __init__(self, start: float = 10_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


def advance(engine: TimerEngine, clock: FakeClock, ms: float) -> None:
    """Move the clock forward by *ms* and deliver one tick."""
    clock.advance(ms)
    engine.tick()
