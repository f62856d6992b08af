"""Tests for the timer card: tabs, display, setup panels, laps."""

from __future__ import annotations

import pytest

from multitimer.timer.engine import TimerMode, PomodoroConfig, MINUTE_MS
from multitimer.ui.timer_widget import TimerWidget, lap_text

from helpers import SignalCollector, advance


@pytest.fixture
def widget(engine):
    return TimerWidget(engine)


class TestModeTabs:

    def test_starts_on_engine_mode(self, widget):
        assert widget.current_tab_mode == TimerMode.STOPWATCH
        assert widget.time_text == "00:00:00"

    def test_select_mode_switches_engine(self, widget, engine):
        c = SignalCollector()
        widget.mode_selected.connect(c)

        widget.select_mode(TimerMode.POMODORO)

        assert engine.mode == TimerMode.POMODORO
        assert widget.current_tab_mode == TimerMode.POMODORO
        assert widget.time_text == "00:25:00"
        assert widget.phase_text == "Focus Time"
        assert c.last == TimerMode.POMODORO

    def test_reselecting_current_mode_resets(self, widget, engine, clock):
        engine.start()
        clock.advance(3000)
        widget.select_mode(TimerMode.STOPWATCH)
        assert engine.is_running is False
        assert widget.time_text == "00:00:00"

    def test_engine_mode_change_moves_tab(self, widget, engine):
        engine.set_mode(TimerMode.COUNTDOWN)
        assert widget.current_tab_mode == TimerMode.COUNTDOWN


class TestControls:

    def test_start_pause_button(self, widget, engine, clock):
        widget._start_pause_btn.click()
        assert engine.is_running is True
        assert widget._start_pause_btn.text() == "Pause"

        advance(engine, clock, 2000)
        assert widget.time_text == "00:00:02"

        widget._start_pause_btn.click()
        assert engine.is_running is False
        assert widget._start_pause_btn.text() == "Start"

    def test_lap_button_only_enabled_while_running(self, widget, engine):
        assert not widget._lap_btn.isEnabled()
        engine.start()
        assert widget._lap_btn.isEnabled()
        engine.pause()
        assert not widget._lap_btn.isEnabled()

    def test_laps_listed_and_cleared(self, widget, engine, clock):
        engine.start()
        advance(engine, clock, 1000)
        widget._lap_btn.click()
        advance(engine, clock, 61_500)
        widget._lap_btn.click()

        assert widget.lap_items == ["Lap 1: 00:00:01", "Lap 2: 00:01:02"]

        widget._reset_btn.click()
        assert widget.lap_items == []

    def test_lap_text(self):
        assert lap_text(3, 3_661_000) == "Lap 3: 01:01:01"


class TestSetupPanels:

    def test_set_countdown_from_inputs(self, widget, engine):
        c = SignalCollector()
        widget.countdown_applied.connect(c)
        widget.select_mode(TimerMode.COUNTDOWN)

        widget.set_countdown_inputs(0, 1, 30)
        widget._set_time_btn.click()

        assert engine.countdown_target == 90_000
        assert widget.time_text == "00:01:30"
        assert c.last == (0, 1, 30)

    def test_zero_countdown_not_applied(self, widget, engine):
        c = SignalCollector()
        widget.countdown_applied.connect(c)
        widget.set_countdown_inputs(0, 0, 0)
        widget._set_time_btn.click()
        assert engine.countdown_target == 0
        assert len(c) == 0

    def test_apply_pomodoro_from_inputs(self, widget, engine):
        c = SignalCollector()
        widget.pomodoro_applied.connect(c)
        widget.select_mode(TimerMode.POMODORO)

        widget.set_pomodoro_inputs(50, 10, 30, 2)
        widget._set_pomodoro_btn.click()

        assert engine.pomodoro_config == PomodoroConfig(
            50 * MINUTE_MS, 10 * MINUTE_MS, 30 * MINUTE_MS, 2,
        )
        assert widget.time_text == "00:50:00"
        assert c.last == (50, 10, 30, 2)

    def test_phase_label_follows_engine(self, widget, engine, clock):
        engine.configure_pomodoro(PomodoroConfig(1000, 1000, 1000, 1))
        widget.select_mode(TimerMode.POMODORO)
        engine.start()
        advance(engine, clock, 1000)
        assert widget.phase_text == "Long Break"
        advance(engine, clock, 1000)
        assert widget.phase_text == "Focus Time"
