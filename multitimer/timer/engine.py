"""Multi-mode timer state machine for MultiTimer.

Modes
-----
STOPWATCH     Counts up from zero.  Laps may be recorded while running.
COUNTDOWN     Counts down from a configured target.  Reaching zero pauses
              the timer and fires ``finished`` once.
POMODORO      Counts down the current phase.  Reaching zero switches
              phase on the same tick and keeps running.

Pomodoro phases
---------------
FOCUS --(session % N == 0)--> LONG_BREAK
FOCUS --(session % N != 0)--> SHORT_BREAK
SHORT_BREAK / LONG_BREAK  --> FOCUS   (session += 1)

Time keeping
------------
Elapsed time is never accumulated tick by tick.  ``start()`` stores
``start_epoch = now - elapsed`` and every later reading is
``now - start_epoch``, so paused time is never counted and a late tick
never loses time.  The clock is injected and must be monotonic.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from .errors import InvalidDuration, InvalidState
from .parsing import parse_int, positive_or_default

logger = logging.getLogger(__name__)


# ── enums ─────────────────────────────────────────────────────────────────


class TimerMode(Enum):
    STOPWATCH = "stopwatch"
    COUNTDOWN = "countdown"
    POMODORO = "pomodoro"


class PomodoroPhase(Enum):
    FOCUS = "focus"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"


PHASE_LABELS: dict[PomodoroPhase, str] = {
    PomodoroPhase.FOCUS:       "Focus Time",
    PomodoroPhase.SHORT_BREAK: "Short Break",
    PomodoroPhase.LONG_BREAK:  "Long Break",
}


# ── constants ─────────────────────────────────────────────────────────────

MINUTE_MS = 60 * 1000

DEFAULT_FOCUS_MIN = 25
DEFAULT_SHORT_BREAK_MIN = 5
DEFAULT_LONG_BREAK_MIN = 15
DEFAULT_SESSIONS_BEFORE_LONG_BREAK = 4

DEFAULT_TICK_INTERVAL_MS = 50
MAX_TICK_INTERVAL_MS = 100  # coarser ticks make the seconds display drift

# cue names handed to the audible-cue callback
CUE_COUNTDOWN_FINISHED = "countdown_finished"
CUE_BREAK_START = "break_start"
CUE_FOCUS_START = "focus_start"


# ── value types ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class PomodoroConfig:
    """Phase durations in milliseconds plus the long-break cadence."""

    focus: int = DEFAULT_FOCUS_MIN * MINUTE_MS
    short_break: int = DEFAULT_SHORT_BREAK_MIN * MINUTE_MS
    long_break: int = DEFAULT_LONG_BREAK_MIN * MINUTE_MS
    sessions_before_long_break: int = DEFAULT_SESSIONS_BEFORE_LONG_BREAK

    def duration_for(self, phase: PomodoroPhase) -> int:
        if phase == PomodoroPhase.FOCUS:
            return self.focus
        if phase == PomodoroPhase.SHORT_BREAK:
            return self.short_break
        return self.long_break


@dataclass
class TimerState:
    """Everything the engine knows.  Process-local, never persisted."""

    mode: TimerMode = TimerMode.STOPWATCH
    is_running: bool = False
    start_epoch: float = 0.0
    elapsed: float = 0.0
    countdown_target: int = 0
    pomodoro: PomodoroConfig = field(default_factory=PomodoroConfig)
    phase: PomodoroPhase = PomodoroPhase.FOCUS
    session: int = 1
    laps: list[int] = field(default_factory=list)


def format_time(milliseconds: float) -> str:
    """``HH:MM:SS`` for a duration in milliseconds (floored, zero padded)."""
    total_seconds = max(0, int(milliseconds // 1000))
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine(QObject):
    """Qt-driven stopwatch / countdown / Pomodoro engine.

    Collaborators are injected: ``clock`` (monotonic milliseconds),
    ``render`` (receives the formatted display string) and ``cue``
    (receives a cue name when a boundary is crossed).

    Signals
    -------
    display_changed(display_ms: int)
        Emitted after every tick and whenever the display value changes.
    running_changed(is_running: bool)
    mode_changed(mode: TimerMode)
    lap_recorded(lap_number: int, lap_ms: int)
    finished(data: dict)
        Countdown reached zero.  Keys: ``mode``, ``target_ms``,
        ``elapsed_ms``, ``message``.
    phase_changed(data: dict)
        Pomodoro phase switched.  Keys: ``previous_phase``, ``phase``,
        ``session``, ``sessions_before_long_break``, ``message``.
    message(text: str)
        Transient user-facing text (warnings and confirmations).
    """

    display_changed = pyqtSignal(int)
    running_changed = pyqtSignal(bool)
    mode_changed = pyqtSignal(object)
    lap_recorded = pyqtSignal(int, int)
    finished = pyqtSignal(object)
    phase_changed = pyqtSignal(object)
    message = pyqtSignal(str)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        clock: Callable[[], float] | None = None,
        render: Callable[[str], None] | None = None,
        cue: Callable[[str], None] | None = None,
        tick_interval_ms: int = DEFAULT_TICK_INTERVAL_MS,
    ) -> None:
        super().__init__(parent)

        # ── collaborators ─────────────────────────────────────────────
        self._clock: Callable[[], float] = clock or _monotonic_ms
        self._render = render
        self._cue = cue

        # ── state ─────────────────────────────────────────────────────
        self._state = TimerState()

        # ── Qt timer (the one and only tick source) ───────────────────
        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(
            max(1, min(tick_interval_ms, MAX_TICK_INTERVAL_MS))
        )
        self._qt_timer.timeout.connect(self._on_tick)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def mode(self) -> TimerMode:
        return self._state.mode

    @property
    def is_running(self) -> bool:
        return self._state.is_running

    @property
    def elapsed(self) -> int:
        """Milliseconds elapsed in the current run (or phase)."""
        return int(self._current_elapsed())

    @property
    def countdown_target(self) -> int:
        return self._state.countdown_target

    @property
    def pomodoro_config(self) -> PomodoroConfig:
        return self._state.pomodoro

    @property
    def phase(self) -> PomodoroPhase:
        return self._state.phase

    @property
    def phase_label(self) -> str:
        return PHASE_LABELS[self._state.phase]

    @property
    def session(self) -> int:
        """1-based Pomodoro session counter."""
        return self._state.session

    @property
    def laps(self) -> tuple[int, ...]:
        return tuple(self._state.laps)

    @property
    def state(self) -> TimerState:
        """A detached copy of the current state."""
        return replace(self._state, laps=list(self._state.laps))

    @property
    def tick_interval_ms(self) -> int:
        return self._qt_timer.interval()

    @property
    def display_ms(self) -> int:
        """What the clock face shows, in milliseconds."""
        elapsed = self._current_elapsed()
        mode = self._state.mode
        if mode == TimerMode.STOPWATCH:
            return int(elapsed)
        if mode == TimerMode.COUNTDOWN:
            return int(max(0.0, self._state.countdown_target - elapsed))
        duration = self._state.pomodoro.duration_for(self._state.phase)
        return int(max(0.0, duration - elapsed))

    @property
    def display_text(self) -> str:
        return format_time(self.display_ms)

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def set_mode(self, mode: TimerMode) -> None:
        """Switch mode.  Always a full reset, even to the same mode."""
        self._state.mode = mode
        self.reset()
        logger.debug("Timer mode set to %s", mode.value)
        self.mode_changed.emit(mode)

    def start(self) -> None:
        """Start or resume.  No-op while running."""
        s = self._state
        if s.is_running:
            return

        if s.mode == TimerMode.COUNTDOWN:
            if s.countdown_target <= 0:
                self._warn("Please set countdown time first")
                return
            if s.elapsed >= s.countdown_target:
                # previous run finished; this is a new run
                s.elapsed = 0.0
        elif s.mode == TimerMode.POMODORO and not s.pomodoro.focus:
            self._warn("Please set Pomodoro settings first")
            return

        s.start_epoch = self._clock() - s.elapsed
        s.is_running = True
        self._qt_timer.start()
        logger.debug("Timer started (%s, elapsed=%dms)", s.mode.value, s.elapsed)
        self.running_changed.emit(True)

    def pause(self) -> None:
        """Freeze the elapsed time.  No-op while not running."""
        s = self._state
        if not s.is_running:
            return
        if self._boundary_due(self._clock() - s.start_epoch):
            # deliver the finish / phase switch the next tick would have
            self._on_tick()
            if not s.is_running:
                return
        self._halt()
        logger.debug("Timer paused at %dms", s.elapsed)

    def reset(self) -> None:
        """Stop and return to the mode's initial display."""
        s = self._state
        was_running = s.is_running
        self._stop_ticking()
        s.is_running = False
        s.elapsed = 0.0
        s.start_epoch = 0.0
        s.laps = []
        s.phase = PomodoroPhase.FOCUS
        s.session = 1
        if was_running:
            self.running_changed.emit(False)
        self._publish()

    def lap(self) -> None:
        """Record the current elapsed time.  Stopwatch only, while running."""
        try:
            self._require_lap_allowed()
        except InvalidState as exc:
            logger.debug("Lap ignored: %s", exc)
            return
        lap_ms = int(self._current_elapsed())
        self._state.laps.append(lap_ms)
        self.lap_recorded.emit(len(self._state.laps), lap_ms)

    def tick(self) -> None:
        """Process one tick now (the QTimer calls this periodically)."""
        self._on_tick()

    # ══════════════════════════════════════════════════════════════════
    #  CONFIGURATION
    # ══════════════════════════════════════════════════════════════════

    def set_countdown_target(
        self, hours: object, minutes: object, seconds: object,
    ) -> bool:
        """Set the countdown duration from user input.

        Returns ``False`` (and emits a message) when the input does not
        describe a positive duration; the previous target is kept.
        """
        try:
            target = _countdown_ms(hours, minutes, seconds)
        except InvalidDuration as exc:
            logger.info("Countdown target rejected: %s", exc)
            self._warn("Please set a valid time")
            return False

        self._state.countdown_target = target
        logger.debug("Countdown target set to %dms", target)
        if self._state.mode == TimerMode.COUNTDOWN:
            self.reset()
        self.message.emit("Countdown time set!")
        return True

    def set_pomodoro_config(
        self,
        focus_min: object = None,
        short_min: object = None,
        long_min: object = None,
        sessions: object = None,
    ) -> PomodoroConfig:
        """Apply Pomodoro settings typed by the user (minutes / count).

        Missing or non-positive values fall back to 25 / 5 / 15 / 4.
        """
        config = PomodoroConfig(
            focus=positive_or_default(focus_min, DEFAULT_FOCUS_MIN) * MINUTE_MS,
            short_break=positive_or_default(
                short_min, DEFAULT_SHORT_BREAK_MIN,
            ) * MINUTE_MS,
            long_break=positive_or_default(
                long_min, DEFAULT_LONG_BREAK_MIN,
            ) * MINUTE_MS,
            sessions_before_long_break=positive_or_default(
                sessions, DEFAULT_SESSIONS_BEFORE_LONG_BREAK,
            ),
        )
        self.configure_pomodoro(config)
        self.message.emit("Pomodoro settings applied!")
        return config

    def configure_pomodoro(self, config: PomodoroConfig) -> None:
        """Install *config* (milliseconds) and restart the session count."""
        if config.sessions_before_long_break < 1:
            raise ValueError("sessions_before_long_break must be >= 1")
        s = self._state
        s.pomodoro = config
        s.phase = PomodoroPhase.FOCUS
        s.session = 1
        if s.mode == TimerMode.POMODORO:
            self.reset()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: TIMER MECHANICS
    # ══════════════════════════════════════════════════════════════════

    def _on_tick(self) -> None:
        s = self._state
        if not s.is_running:
            return
        now = self._clock()
        s.elapsed = max(0.0, now - s.start_epoch)

        if self._boundary_due(s.elapsed):
            if s.mode == TimerMode.COUNTDOWN:
                self._finish_countdown()
            else:
                self._advance_phase(now)
            return

        self._publish()

    def _boundary_due(self, elapsed: float) -> bool:
        """True when *elapsed* has reached the end of the countdown or phase."""
        s = self._state
        if s.mode == TimerMode.COUNTDOWN:
            return s.countdown_target - elapsed <= 0
        if s.mode == TimerMode.POMODORO:
            return s.pomodoro.duration_for(s.phase) - elapsed <= 0
        return False

    def _halt(self) -> None:
        s = self._state
        self._stop_ticking()
        s.elapsed = max(0.0, self._clock() - s.start_epoch)
        s.is_running = False
        self.running_changed.emit(False)
        self._publish()

    def _finish_countdown(self) -> None:
        s = self._state
        self._halt()
        text = "Countdown finished!"
        logger.info("Countdown of %dms finished", s.countdown_target)
        self.finished.emit({
            "mode": s.mode,
            "target_ms": s.countdown_target,
            "elapsed_ms": int(s.elapsed),
            "message": text,
        })
        self.message.emit(text)
        self._play(CUE_COUNTDOWN_FINISHED)

    def _advance_phase(self, now: float) -> None:
        """Switch phase and restart the phase clock on the same tick."""
        s = self._state
        previous = s.phase
        if previous == PomodoroPhase.FOCUS:
            if s.session % s.pomodoro.sessions_before_long_break == 0:
                s.phase = PomodoroPhase.LONG_BREAK
                text = "Focus session completed! Time for a long break."
            else:
                s.phase = PomodoroPhase.SHORT_BREAK
                text = "Focus session completed! Time for a short break."
            cue = CUE_BREAK_START
        else:
            s.phase = PomodoroPhase.FOCUS
            s.session += 1
            text = "Break finished! Time to focus."
            cue = CUE_FOCUS_START

        s.elapsed = 0.0
        s.start_epoch = now

        logger.info(
            "Pomodoro phase %s -> %s (session %d)",
            previous.value, s.phase.value, s.session,
        )
        self.phase_changed.emit({
            "previous_phase": previous,
            "phase": s.phase,
            "session": s.session,
            "sessions_before_long_break": s.pomodoro.sessions_before_long_break,
            "message": text,
        })
        self.message.emit(text)
        self._play(cue)
        self._publish()

    def _current_elapsed(self) -> float:
        s = self._state
        if s.is_running:
            return max(0.0, self._clock() - s.start_epoch)
        return s.elapsed

    def _require_lap_allowed(self) -> None:
        if self._state.mode != TimerMode.STOPWATCH:
            raise InvalidState(f"laps are not recorded in {self._state.mode.value} mode")
        if not self._state.is_running:
            raise InvalidState("laps are only recorded while running")

    def _stop_ticking(self) -> None:
        if self._qt_timer.isActive():
            self._qt_timer.stop()

    def _publish(self) -> None:
        display = self.display_ms
        self.display_changed.emit(display)
        if self._render is not None:
            self._render(format_time(display))

    def _play(self, cue: str) -> None:
        if self._cue is not None:
            self._cue(cue)

    def _warn(self, text: str) -> None:
        logger.info("Timer warning: %s", text)
        self.message.emit(text)


# ── validation ────────────────────────────────────────────────────────────


def _countdown_ms(hours: object, minutes: object, seconds: object) -> int:
    """Total milliseconds for h/m/s input, or raise ``InvalidDuration``."""
    parts = [parse_int(v) for v in (hours, minutes, seconds)]
    if any(p < 0 for p in parts):
        raise InvalidDuration(f"negative component in {parts}")
    h, m, sec = parts
    total = (h * 3600 + m * 60 + sec) * 1000
    if total <= 0:
        raise InvalidDuration("countdown duration must be greater than zero")
    return total
