"""Main timer card.

Layout (top → bottom):
    - Mode tabs (Stopwatch / Countdown / Pomodoro)
    - Pomodoro info (phase + session, Pomodoro only)
    - Large HH:MM:SS display
    - Setup panel for the current mode (Countdown / Pomodoro only)
    - Control row: Reset · Start/Pause · Lap
    - Laps list (Stopwatch only)
"""

from __future__ import annotations

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QFormLayout,
    QLabel, QPushButton, QFrame, QSpinBox, QTabBar, QListWidget,
)

from ..timer.engine import TimerEngine, TimerMode, format_time
from .styles import PALETTE, time_color

MODES: tuple[TimerMode, ...] = (
    TimerMode.STOPWATCH,
    TimerMode.COUNTDOWN,
    TimerMode.POMODORO,
)

MODE_LABELS: dict[TimerMode, str] = {
    TimerMode.STOPWATCH: "Stopwatch",
    TimerMode.COUNTDOWN: "Countdown",
    TimerMode.POMODORO:  "Pomodoro",
}


def lap_text(number: int, lap_ms: int) -> str:
    return f"Lap {number}: {format_time(lap_ms)}"


class TimerWidget(QWidget):
    """Renders a ``TimerEngine`` and forwards user input to it."""

    mode_selected = pyqtSignal(object)
    countdown_applied = pyqtSignal(int, int, int)
    pomodoro_applied = pyqtSignal(int, int, int, int)

    def __init__(self, engine: TimerEngine, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._engine = engine
        self._build_ui()
        self._connect_signals()
        self._sync_mode(engine.mode)

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(0)

        card = QFrame(self)
        card.setObjectName("card")
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(28, 20, 28, 24)
        layout.setSpacing(10)

        # ── mode tabs ────────────────────────────────────────────────
        self._tabs = QTabBar(card)
        for mode in MODES:
            self._tabs.addTab(MODE_LABELS[mode])
        self._tabs.setExpanding(True)
        layout.addWidget(self._tabs)

        # ── pomodoro info ────────────────────────────────────────────
        self._phase_label = QLabel("", card)
        self._phase_label.setObjectName("phaseLabel")
        self._phase_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._phase_label)

        self._session_label = QLabel("", card)
        self._session_label.setObjectName("sessionLabel")
        self._session_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._session_label)

        # ── time display ─────────────────────────────────────────────
        self._time_label = QLabel("00:00:00", card)
        self._time_label.setObjectName("timeLabel")
        self._time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._time_label)

        # ── countdown setup ──────────────────────────────────────────
        self._countdown_setup = QFrame(card)
        cd_row = QHBoxLayout(self._countdown_setup)
        cd_row.setContentsMargins(0, 0, 0, 0)
        self._hours_spin = self._spin(0, 99, " h")
        self._minutes_spin = self._spin(0, 59, " m")
        self._seconds_spin = self._spin(0, 59, " s")
        self._set_time_btn = QPushButton("Set", self._countdown_setup)
        self._set_time_btn.setObjectName("secondaryButton")
        for w in (self._hours_spin, self._minutes_spin,
                  self._seconds_spin, self._set_time_btn):
            cd_row.addWidget(w)
        layout.addWidget(self._countdown_setup)

        # ── pomodoro setup ───────────────────────────────────────────
        self._pomodoro_setup = QFrame(card)
        pomo_form = QFormLayout(self._pomodoro_setup)
        pomo_form.setContentsMargins(0, 0, 0, 0)
        self._focus_spin = self._spin(1, 180, " min", 25)
        self._short_spin = self._spin(1, 60, " min", 5)
        self._long_spin = self._spin(1, 120, " min", 15)
        self._sessions_spin = self._spin(1, 12, "", 4)
        pomo_form.addRow("Focus:", self._focus_spin)
        pomo_form.addRow("Short break:", self._short_spin)
        pomo_form.addRow("Long break:", self._long_spin)
        pomo_form.addRow("Sessions before long break:", self._sessions_spin)
        self._set_pomodoro_btn = QPushButton("Apply", self._pomodoro_setup)
        self._set_pomodoro_btn.setObjectName("secondaryButton")
        pomo_form.addRow("", self._set_pomodoro_btn)
        layout.addWidget(self._pomodoro_setup)

        # ── controls ─────────────────────────────────────────────────
        btn_row = QHBoxLayout()
        btn_row.setSpacing(12)
        btn_row.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._reset_btn = QPushButton("Reset", card)
        self._reset_btn.setObjectName("dangerButton")

        self._start_pause_btn = QPushButton("Start", card)
        self._start_pause_btn.setObjectName("primaryButton")

        self._lap_btn = QPushButton("Lap", card)
        self._lap_btn.setObjectName("secondaryButton")

        btn_row.addWidget(self._reset_btn)
        btn_row.addWidget(self._start_pause_btn)
        btn_row.addWidget(self._lap_btn)
        layout.addLayout(btn_row)

        # ── laps ─────────────────────────────────────────────────────
        self._laps_list = QListWidget(card)
        self._laps_list.setMaximumHeight(160)
        layout.addWidget(self._laps_list)

    def _spin(self, lo: int, hi: int, suffix: str, value: int = 0) -> QSpinBox:
        spin = QSpinBox(self)
        spin.setRange(lo, hi)
        spin.setSuffix(suffix)
        spin.setValue(value)
        return spin

    # ── signals ───────────────────────────────────────────────────────────

    def _connect_signals(self) -> None:
        self._tabs.currentChanged.connect(self._on_tab_changed)
        self._start_pause_btn.clicked.connect(self.toggle_start_pause)
        self._reset_btn.clicked.connect(self._engine.reset)
        self._lap_btn.clicked.connect(self._engine.lap)
        self._set_time_btn.clicked.connect(self._on_set_countdown)
        self._set_pomodoro_btn.clicked.connect(self._on_set_pomodoro)

        self._engine.display_changed.connect(self._refresh_display)
        self._engine.running_changed.connect(self._on_running_changed)
        self._engine.mode_changed.connect(self._sync_mode)
        self._engine.lap_recorded.connect(self._on_lap_recorded)
        self._engine.phase_changed.connect(self._refresh_pomodoro_info)

    # ── public ────────────────────────────────────────────────────────────

    def toggle_start_pause(self) -> None:
        if self._engine.is_running:
            self._engine.pause()
        else:
            self._engine.start()

    def select_mode(self, mode: TimerMode) -> None:
        """Select *mode* as if its tab had been clicked."""
        index = MODES.index(mode)
        if self._tabs.currentIndex() == index:
            self._on_tab_changed(index)
        else:
            self._tabs.setCurrentIndex(index)

    def set_countdown_inputs(self, hours: int, minutes: int, seconds: int) -> None:
        self._hours_spin.setValue(hours)
        self._minutes_spin.setValue(minutes)
        self._seconds_spin.setValue(seconds)

    def countdown_inputs(self) -> tuple[int, int, int]:
        return (
            self._hours_spin.value(),
            self._minutes_spin.value(),
            self._seconds_spin.value(),
        )

    def set_pomodoro_inputs(
        self, focus: int, short: int, long: int, sessions: int,
    ) -> None:
        self._focus_spin.setValue(focus)
        self._short_spin.setValue(short)
        self._long_spin.setValue(long)
        self._sessions_spin.setValue(sessions)

    def pomodoro_inputs(self) -> tuple[int, int, int, int]:
        return (
            self._focus_spin.value(),
            self._short_spin.value(),
            self._long_spin.value(),
            self._sessions_spin.value(),
        )

    # ── slots ─────────────────────────────────────────────────────────────

    def _on_tab_changed(self, index: int) -> None:
        mode = MODES[index]
        self._engine.set_mode(mode)
        self.mode_selected.emit(mode)

    def _on_set_countdown(self) -> None:
        h, m, s = self.countdown_inputs()
        if self._engine.set_countdown_target(h, m, s):
            self.countdown_applied.emit(h, m, s)

    def _on_set_pomodoro(self) -> None:
        values = self.pomodoro_inputs()
        self._engine.set_pomodoro_config(*values)
        self.pomodoro_applied.emit(*values)

    def _on_running_changed(self, running: bool) -> None:
        self._start_pause_btn.setText("Pause" if running else "Start")
        self._lap_btn.setEnabled(
            running and self._engine.mode == TimerMode.STOPWATCH
        )
        self._refresh_display(self._engine.display_ms)

    def _on_lap_recorded(self, number: int, lap_ms: int) -> None:
        self._laps_list.addItem(lap_text(number, lap_ms))
        self._laps_list.scrollToBottom()

    def _sync_mode(self, mode: TimerMode) -> None:
        """Match tabs and panels to the engine's mode."""
        self._tabs.blockSignals(True)
        self._tabs.setCurrentIndex(MODES.index(mode))
        self._tabs.blockSignals(False)

        is_pomodoro = mode == TimerMode.POMODORO
        self._countdown_setup.setVisible(mode == TimerMode.COUNTDOWN)
        self._pomodoro_setup.setVisible(is_pomodoro)
        self._phase_label.setVisible(is_pomodoro)
        self._session_label.setVisible(is_pomodoro)
        self._lap_btn.setVisible(mode == TimerMode.STOPWATCH)
        self._laps_list.setVisible(mode == TimerMode.STOPWATCH)
        self._on_running_changed(self._engine.is_running)

    def _refresh_pomodoro_info(self, _data: object = None) -> None:
        cfg = self._engine.pomodoro_config
        self._phase_label.setText(self._engine.phase_label)
        self._session_label.setText(
            f"Session {self._engine.session} · long break every "
            f"{cfg.sessions_before_long_break}"
        )

    def _refresh_display(self, display_ms: int) -> None:
        engine = self._engine
        self._time_label.setText(format_time(display_ms))
        color = time_color(engine.mode, engine.phase, engine.is_running, PALETTE)
        self._time_label.setStyleSheet(f"color: {color};")

        if engine.mode == TimerMode.POMODORO:
            self._refresh_pomodoro_info()
        if not engine.laps and self._laps_list.count():
            self._laps_list.clear()

    # ── introspection (used by the window and tests) ──────────────────────

    @property
    def time_text(self) -> str:
        return self._time_label.text()

    @property
    def phase_text(self) -> str:
        return self._phase_label.text()

    @property
    def lap_items(self) -> list[str]:
        return [self._laps_list.item(i).text() for i in range(self._laps_list.count())]

    @property
    def current_tab_mode(self) -> TimerMode:
        return MODES[self._tabs.currentIndex()]
