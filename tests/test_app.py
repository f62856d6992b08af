"""Integration tests for the main window wiring."""

import pytest

from PyQt6.QtWidgets import QWidget

from multitimer.app import MultiTimerApp
from multitimer.database.usage import UsageTracker
from multitimer.settings import Settings, load_settings
from multitimer.timer.engine import PomodoroPhase, TimerMode
from multitimer.ui.toast import Toast


@pytest.fixture
def settings_path(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    monkeypatch.setattr("multitimer.settings.SETTINGS_PATH", path)
    monkeypatch.setattr("multitimer.settings.APP_DIR", tmp_path)
    return path


@pytest.fixture
def window(qapp, settings_path):
    win = MultiTimerApp(settings=Settings(last_mode="countdown", countdown_minutes=2))
    yield win
    win.close()
    win.deleteLater()


class TestStartup:

    def test_opens_on_saved_mode(self, window):
        assert window._engine.mode is TimerMode.COUNTDOWN
        assert window._timer_widget.current_tab_mode is TimerMode.COUNTDOWN

    def test_saved_countdown_applied(self, window):
        assert window._engine.countdown_target == 120_000
        assert window._timer_widget.time_text == "00:02:00"

    def test_saved_pomodoro_applied(self, qapp, settings_path):
        win = MultiTimerApp(settings=Settings(last_mode="pomodoro", focus_minutes=40))
        try:
            assert win._engine.pomodoro_config.focus == 40 * 60_000
            assert win._engine.phase is PomodoroPhase.FOCUS
            assert win._timer_widget.time_text == "00:40:00"
        finally:
            win.close()

    def test_unknown_saved_mode_falls_back_to_most_used(self, qapp, settings_path):
        UsageTracker().record(TimerMode.POMODORO)
        win = MultiTimerApp(settings=Settings(last_mode="bogus"))
        try:
            assert win._engine.mode is TimerMode.POMODORO
        finally:
            win.close()

    def test_no_startup_toast(self, window):
        assert window._toast.text == ""


class TestModeSelection:

    @staticmethod
    def _menu_labels(window):
        return [a.text() for a in window._modes_menu.actions() if not a.isSeparator()]

    def test_selection_records_usage(self, window):
        window._timer_widget.select_mode(TimerMode.POMODORO)
        assert UsageTracker().record(TimerMode.POMODORO) == 2

    def test_selection_persists_last_mode(self, window, settings_path):
        window._timer_widget.select_mode(TimerMode.STOPWATCH)
        assert load_settings().last_mode == "stopwatch"

    def test_modes_menu_lists_most_used_first(self, window):
        window._timer_widget.select_mode(TimerMode.POMODORO)
        assert self._menu_labels(window) == [
            "Pomodoro", "Stopwatch", "Countdown", "Reset Mode Order",
        ]

    def test_reset_mode_order(self, window):
        window._timer_widget.select_mode(TimerMode.POMODORO)
        window._clear_usage()
        assert self._menu_labels(window) == [
            "Stopwatch", "Countdown", "Pomodoro", "Reset Mode Order",
        ]


class TestMessages:

    def test_engine_message_shown_in_toast(self, window):
        window._engine.set_mode(TimerMode.COUNTDOWN)
        window._engine.set_countdown_target(0, 0, 0)
        assert window._toast.text == "Please set a valid time"

    def test_countdown_apply_persists(self, window, settings_path):
        window._timer_widget.set_countdown_inputs(1, 2, 3)
        window._timer_widget._set_time_btn.click()
        s = load_settings()
        assert (s.countdown_hours, s.countdown_minutes, s.countdown_seconds) == (1, 2, 3)
        assert window._toast.text == "Countdown time set!"


class TestSoundMenu:

    def test_toggle_persists(self, window, settings_path):
        window._sound_action.setChecked(False)
        assert window._sound_manager.enabled is False
        assert load_settings().sound_enabled is False

    def test_volume_level_persists(self, window, settings_path):
        window._set_volume(30)
        assert window._sound_manager.volume == 30
        assert load_settings().sound_volume == 30


class TestToast:

    def test_reposition_centres_near_top(self, qapp):
        parent = QWidget()
        parent.resize(600, 400)
        toast = Toast(parent)
        toast.reposition()
        assert toast.x() == (600 - toast.width()) // 2
        assert toast.y() == 40

    def test_show_message_sets_text(self, qapp):
        parent = QWidget()
        parent.resize(600, 400)
        toast = Toast(parent)
        toast.show_message("Countdown finished!")
        assert toast.text == "Countdown finished!"
