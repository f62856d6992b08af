"""Timer error taxonomy.

Neither error escapes the engine: ``InvalidDuration`` becomes a
user-facing message, ``InvalidState`` is dropped silently.
"""


class TimerError(Exception):
    """Base class for timer failures."""


class InvalidDuration(TimerError):
    """A configured duration is zero, negative, or not a number."""


class InvalidState(TimerError):
    """The operation is not permitted in the engine's current state."""
