"""Tests for settings persistence and cue synthesis.

Covers:
- Settings dataclass defaults and JSON round-trip
- WAV generation for every cue
- SoundManager caching and playback API
"""

from __future__ import annotations

import io
import json
import wave

import numpy as np
import pytest

from multitimer.settings import Settings, load_settings, save_settings
from multitimer.audio.sounds import (
    SoundManager,
    SOUND_NAMES,
    SAMPLE_RATE,
    _GENERATORS,
    _exp_decay,
    _generate_beep,
)


@pytest.fixture
def settings_path(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    monkeypatch.setattr("multitimer.settings.SETTINGS_PATH", path)
    monkeypatch.setattr("multitimer.settings.APP_DIR", tmp_path)
    return path


# ═══════════════════════════════════════════════════════════════════════
#  SETTINGS
# ═══════════════════════════════════════════════════════════════════════


class TestSettingsDefaults:
    def test_timer_defaults(self):
        s = Settings()
        assert s.last_mode == "stopwatch"
        assert (s.countdown_hours, s.countdown_minutes, s.countdown_seconds) == (0, 0, 0)
        assert s.focus_minutes == 25
        assert s.short_break_minutes == 5
        assert s.long_break_minutes == 15
        assert s.sessions_before_long_break == 4

    def test_tick_interval_default(self):
        assert 0 < Settings().tick_interval_ms <= 100

    def test_sound_defaults(self):
        s = Settings()
        assert s.sound_enabled is True
        assert s.sound_volume == 70


class TestSettingsPersistence:
    def test_round_trip(self, settings_path):
        original = Settings(last_mode="pomodoro", focus_minutes=50, window_x=10)
        save_settings(original)
        loaded = load_settings()
        assert loaded == original

    def test_missing_file_returns_defaults(self, settings_path):
        assert load_settings() == Settings()

    def test_invalid_json_returns_defaults(self, settings_path):
        settings_path.write_text("NOT VALID JSON", encoding="utf-8")
        assert load_settings() == Settings()

    def test_non_object_json_returns_defaults(self, settings_path):
        settings_path.write_text("[1, 2, 3]", encoding="utf-8")
        assert load_settings() == Settings()

    def test_mistyped_values_fall_back_to_defaults(self, settings_path):
        data = {
            "tick_interval_ms": "fast",
            "sound_enabled": "yes",
            "sound_volume": True,
            "last_mode": 3,
            "focus_minutes": 45,
        }
        settings_path.write_text(json.dumps(data), encoding="utf-8")
        s = load_settings()
        assert s.tick_interval_ms == Settings().tick_interval_ms
        assert s.sound_enabled is True
        assert s.sound_volume == 70
        assert s.last_mode == "stopwatch"
        assert s.focus_minutes == 45

    def test_window_position_may_be_null(self, settings_path):
        data = {"window_x": None, "window_y": 120, "window_width": None}
        settings_path.write_text(json.dumps(data), encoding="utf-8")
        s = load_settings()
        assert s.window_x is None
        assert s.window_y == 120
        assert s.window_width == 480

    def test_extra_keys_ignored(self, settings_path):
        data = {"focus_minutes": 45, "theme": "dark"}
        settings_path.write_text(json.dumps(data), encoding="utf-8")
        s = load_settings()
        assert s.focus_minutes == 45
        assert not hasattr(s, "theme")


# ═══════════════════════════════════════════════════════════════════════
#  SOUND SYNTHESIS
# ═══════════════════════════════════════════════════════════════════════


class TestSoundGeneration:

    def test_every_cue_has_a_generator(self):
        assert set(_GENERATORS) == set(SOUND_NAMES)

    @pytest.mark.parametrize("name", SOUND_NAMES)
    def test_wav_is_parseable(self, name):
        data = _GENERATORS[name]()
        assert data[:4] == b"RIFF"
        with wave.open(io.BytesIO(data), "rb") as wf:
            assert wf.getnchannels() == 1
            assert wf.getsampwidth() == 2
            assert wf.getframerate() == SAMPLE_RATE
            assert wf.getnframes() > 0

    def test_beep_is_half_a_second(self):
        with wave.open(io.BytesIO(_generate_beep()), "rb") as wf:
            assert wf.getnframes() == SAMPLE_RATE // 2

    def test_exp_decay_endpoints(self):
        ramp = _exp_decay(1000, 0.3, 0.01)
        assert ramp[0] == pytest.approx(0.3)
        assert ramp[-1] == pytest.approx(0.01)
        assert np.all(np.diff(ramp) < 0)


@pytest.mark.usefixtures("qapp")
class TestSoundManager:
    def test_wav_files_generated(self, tmp_path):
        SoundManager(parent=None, sounds_dir=tmp_path)
        for name in SOUND_NAMES:
            path = tmp_path / f"{name}.wav"
            assert path.exists(), f"Missing WAV: {name}"
            assert path.stat().st_size > 100

    def test_existing_files_kept(self, tmp_path):
        cached = tmp_path / "click.wav"
        cached.write_bytes(_GENERATORS["click"]())
        before = cached.stat().st_mtime_ns
        SoundManager(parent=None, sounds_dir=tmp_path)
        assert cached.stat().st_mtime_ns == before

    def test_all_cues_loaded(self, tmp_path):
        mgr = SoundManager(parent=None, sounds_dir=tmp_path)
        assert set(mgr.loaded) == set(SOUND_NAMES)

    @pytest.mark.parametrize("level, expected", [(30, 30), (200, 100), (-10, 0)])
    def test_set_volume_clamps(self, tmp_path, level, expected):
        mgr = SoundManager(parent=None, sounds_dir=tmp_path)
        mgr.set_volume(level)
        assert mgr.volume == expected

    def test_play_unknown_cue_is_noop(self, tmp_path):
        mgr = SoundManager(parent=None, sounds_dir=tmp_path)
        mgr.play("nonexistent_sound")

    def test_play_while_disabled_is_noop(self, tmp_path):
        mgr = SoundManager(parent=None, sounds_dir=tmp_path)
        mgr.set_enabled(False)
        assert mgr.enabled is False
        mgr.play("countdown_finished")
