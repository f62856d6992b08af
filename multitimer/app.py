"""Main application window for MultiTimer."""

from __future__ import annotations

import logging

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QAction, QActionGroup, QColor, QIcon, QKeySequence, QPainter, QPixmap
from PyQt6.QtWidgets import (
    QApplication, QMainWindow, QMenu, QStatusBar, QSystemTrayIcon,
    QVBoxLayout, QWidget,
)

from .audio.sounds import SoundManager
from .database.usage import UsageTracker
from .settings import Settings, load_settings, save_settings
from .timer.engine import TimerEngine, TimerMode, format_time
from .ui.styles import PALETTE, build_stylesheet
from .ui.timer_widget import MODE_LABELS, TimerWidget
from .ui.toast import Toast

logger = logging.getLogger(__name__)

VOLUME_LEVELS = (("Quiet", 30), ("Normal", 70), ("Loud", 100))


def _make_icon(running: bool) -> QIcon:
    """Filled circle while running, outline when stopped."""
    size = 64
    pixmap = QPixmap(size, size)
    pixmap.fill(QColor(0, 0, 0, 0))
    p = QPainter(pixmap)
    p.setRenderHint(QPainter.RenderHint.Antialiasing)
    colour = QColor(PALETTE["accent"])
    p.setPen(colour)
    if running:
        p.setBrush(colour)
    p.drawEllipse(6, 6, size - 12, size - 12)
    p.end()
    return QIcon(pixmap)


def _initial_mode(settings: Settings, usage: UsageTracker) -> TimerMode:
    try:
        return TimerMode(settings.last_mode)
    except ValueError:
        return usage.top_modes(limit=1)[0]


class MultiTimerApp(QMainWindow):
    """Main application window."""

    def __init__(self, *, settings: Settings | None = None) -> None:
        super().__init__()
        self.setWindowTitle("MultiTimer")
        self.setMinimumSize(420, 520)

        # ── settings + collaborators ──────────────────────────────────
        self._settings: Settings = settings or load_settings()
        self._usage = UsageTracker()

        self._sound_manager = SoundManager(parent=self)
        self._sound_manager.set_volume(self._settings.sound_volume)
        self._sound_manager.set_enabled(self._settings.sound_enabled)

        # ── engine ────────────────────────────────────────────────────
        self._engine = TimerEngine(
            self,
            cue=self._sound_manager.play,
            tick_interval_ms=self._settings.tick_interval_ms,
        )
        self._apply_saved_timer_settings()

        # ── central widget ────────────────────────────────────────────
        self.setStyleSheet(build_stylesheet(PALETTE))
        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(16, 12, 16, 12)

        self._timer_widget = TimerWidget(self._engine, central)
        s = self._settings
        self._timer_widget.set_countdown_inputs(
            s.countdown_hours, s.countdown_minutes, s.countdown_seconds,
        )
        self._timer_widget.set_pomodoro_inputs(
            s.focus_minutes, s.short_break_minutes,
            s.long_break_minutes, s.sessions_before_long_break,
        )
        layout.addWidget(self._timer_widget)

        self._toast = Toast(central)

        self._status_bar = QStatusBar(self)
        self.setStatusBar(self._status_bar)

        # ── tray (notifications) ──────────────────────────────────────
        self._tray_icon = QSystemTrayIcon(_make_icon(False), self)
        self._tray_icon.setToolTip("MultiTimer")
        self._build_tray_menu()
        if QSystemTrayIcon.isSystemTrayAvailable():
            self._tray_icon.show()

        self._build_menu_bar()
        self._connect_signals()

        self._engine.set_mode(_initial_mode(self._settings, self._usage))
        self._restore_geometry()
        logger.debug("Window ready in %s mode", self._engine.mode.value)

    # ══════════════════════════════════════════════════════════════════
    #  SETUP
    # ══════════════════════════════════════════════════════════════════

    def _apply_saved_timer_settings(self) -> None:
        """Push persisted durations into the engine (before any UI exists)."""
        s = self._settings
        if s.countdown_hours or s.countdown_minutes or s.countdown_seconds:
            self._engine.set_countdown_target(
                s.countdown_hours, s.countdown_minutes, s.countdown_seconds,
            )
        self._engine.set_pomodoro_config(
            s.focus_minutes, s.short_break_minutes,
            s.long_break_minutes, s.sessions_before_long_break,
        )

    def _connect_signals(self) -> None:
        self._engine.message.connect(self._show_message)
        self._engine.finished.connect(self._on_finished)
        self._engine.phase_changed.connect(self._on_phase_changed)
        self._engine.running_changed.connect(self._on_running_changed)
        self._engine.display_changed.connect(self._on_display_changed)

        self._timer_widget.mode_selected.connect(self._on_mode_selected)
        self._timer_widget.countdown_applied.connect(self._on_countdown_applied)
        self._timer_widget.pomodoro_applied.connect(self._on_pomodoro_applied)

    def _build_menu_bar(self) -> None:
        menu_bar = self.menuBar()

        self._modes_menu = menu_bar.addMenu("Timer")
        self._refresh_modes_menu()

        sound_menu = menu_bar.addMenu("Sound")
        self._sound_action = QAction("Sound Cues", self, checkable=True)
        self._sound_action.setChecked(self._settings.sound_enabled)
        self._sound_action.toggled.connect(self._on_sound_toggled)
        sound_menu.addAction(self._sound_action)
        sound_menu.addSeparator()
        volume_group = QActionGroup(self)
        for label, level in VOLUME_LEVELS:
            action = QAction(label, self, checkable=True)
            action.setChecked(level == self._settings.sound_volume)
            action.triggered.connect(
                lambda _checked=False, v=level: self._set_volume(v)
            )
            volume_group.addAction(action)
            sound_menu.addAction(action)

        window_menu = menu_bar.addMenu("Window")
        quit_action = QAction("Quit MultiTimer", self)
        quit_action.setShortcut(QKeySequence("Ctrl+Q"))
        quit_action.triggered.connect(self._quit_app)
        window_menu.addAction(quit_action)

    def _refresh_modes_menu(self) -> None:
        """List modes most-used first."""
        self._modes_menu.clear()
        for mode in self._usage.top_modes():
            action = self._modes_menu.addAction(MODE_LABELS[mode])
            action.triggered.connect(
                lambda _checked=False, m=mode: self._timer_widget.select_mode(m)
            )
        self._modes_menu.addSeparator()
        clear_action = self._modes_menu.addAction("Reset Mode Order")
        clear_action.triggered.connect(self._clear_usage)

    def _clear_usage(self) -> None:
        self._usage.clear()
        self._refresh_modes_menu()

    def _build_tray_menu(self) -> None:
        menu = QMenu(self)
        self._tray_start_action = menu.addAction("Start")
        self._tray_start_action.triggered.connect(
            lambda: self._timer_widget.toggle_start_pause()
        )
        reset_action = menu.addAction("Reset")
        reset_action.triggered.connect(self._engine.reset)
        menu.addSeparator()
        show_action = menu.addAction("Show MultiTimer")
        show_action.triggered.connect(self._show_window)
        quit_action = menu.addAction("Quit")
        quit_action.triggered.connect(self._quit_app)
        self._tray_icon.setContextMenu(menu)

    # ══════════════════════════════════════════════════════════════════
    #  ENGINE SIGNALS
    # ══════════════════════════════════════════════════════════════════

    def _show_message(self, text: str) -> None:
        self._toast.show_message(text)
        self._status_bar.showMessage(text, Toast.DISPLAY_MS)

    def _send_notification(self, title: str, body: str) -> None:
        if not self._settings.notifications_enabled:
            return
        if not self._tray_icon.isVisible():
            return
        self._tray_icon.showMessage(title, body)

    def _on_finished(self, data: dict) -> None:
        self._send_notification("MultiTimer", data["message"])

    def _on_phase_changed(self, data: dict) -> None:
        self._send_notification(f"Session {data['session']}", data["message"])

    def _on_running_changed(self, running: bool) -> None:
        self._tray_icon.setIcon(_make_icon(running))
        self._tray_start_action.setText("Pause" if running else "Start")

    def _on_display_changed(self, display_ms: int) -> None:
        self._tray_icon.setToolTip(f"MultiTimer · {format_time(display_ms)}")

    # ══════════════════════════════════════════════════════════════════
    #  WIDGET SIGNALS (persist user choices)
    # ══════════════════════════════════════════════════════════════════

    def _on_mode_selected(self, mode: TimerMode) -> None:
        self._usage.record(mode)
        self._settings.last_mode = mode.value
        save_settings(self._settings)
        self._refresh_modes_menu()

    def _on_sound_toggled(self, enabled: bool) -> None:
        self._sound_manager.set_enabled(enabled)
        self._settings.sound_enabled = enabled
        save_settings(self._settings)

    def _set_volume(self, level: int) -> None:
        self._sound_manager.set_volume(level)
        self._sound_manager.play("click")
        self._settings.sound_volume = self._sound_manager.volume
        save_settings(self._settings)

    def _on_countdown_applied(self, hours: int, minutes: int, seconds: int) -> None:
        s = self._settings
        s.countdown_hours, s.countdown_minutes, s.countdown_seconds = (
            hours, minutes, seconds,
        )
        save_settings(s)

    def _on_pomodoro_applied(
        self, focus: int, short: int, long: int, sessions: int,
    ) -> None:
        s = self._settings
        s.focus_minutes = focus
        s.short_break_minutes = short
        s.long_break_minutes = long
        s.sessions_before_long_break = sessions
        save_settings(s)

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW STATE
    # ══════════════════════════════════════════════════════════════════

    def _restore_geometry(self) -> None:
        s = self._settings
        if s.window_x is not None and s.window_y is not None:
            self.move(s.window_x, s.window_y)
        self.resize(s.window_width, s.window_height)

    def _save_geometry(self) -> None:
        if not self.isVisible():
            return
        pos, size = self.pos(), self.size()
        self._settings.window_x = pos.x()
        self._settings.window_y = pos.y()
        self._settings.window_width = size.width()
        self._settings.window_height = size.height()
        save_settings(self._settings)

    def _show_window(self) -> None:
        self.show()
        self.raise_()
        self.activateWindow()

    def _quit_app(self) -> None:
        self._save_geometry()
        self._engine.reset()
        self._tray_icon.hide()
        QApplication.instance().quit()

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW EVENTS
    # ══════════════════════════════════════════════════════════════════

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._save_geometry()
        self._engine.reset()
        self._tray_icon.hide()
        event.accept()

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        # keep the toast centred
        if hasattr(self, "_toast") and self._toast.isVisible():
            QTimer.singleShot(0, self._toast.reposition)

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        """Space toggles, Escape resets, L records a lap."""
        key = event.key()
        if event.modifiers() != Qt.KeyboardModifier.NoModifier:
            super().keyPressEvent(event)
            return
        if key == Qt.Key.Key_Space:
            self._timer_widget.toggle_start_pause()
        elif key == Qt.Key.Key_Escape:
            self._engine.reset()
        elif key == Qt.Key.Key_L:
            self._engine.lap()
        else:
            super().keyPressEvent(event)
            return
        event.accept()
