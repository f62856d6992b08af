"""Cue synthesis and playback using numpy + QSoundEffect.

Cues are generated as WAV files with sine-wave synthesis and cached to
disk, so later launches only load them.

Cue names
---------
- ``countdown_finished``: 800 Hz beep with exponential fade (0.5 s)
- ``break_start``: soft bell when a focus phase ends
- ``focus_start``: short ascending chime when a break ends
- ``click``: subtle tick played when the volume level changes
"""

from __future__ import annotations

import io
import logging
import wave
from pathlib import Path
from typing import Callable

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

from ..settings import APP_DIR

logger = logging.getLogger(__name__)


# ── paths ────────────────────────────────────────────────────────────────

SOUNDS_DIR = APP_DIR / "sounds"

SOUND_NAMES = (
    "countdown_finished",
    "break_start",
    "focus_start",
    "click",
)

SAMPLE_RATE = 44100


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def _make_envelope(
    length: int,
    attack: int = 200,
    decay: int = 400,
    sustain_level: float = 0.7,
    release: int = 800,
) -> np.ndarray:
    """ADSR envelope (all durations in samples)."""
    env = np.ones(length, dtype=np.float64)
    a = min(attack, length)
    if a > 0:
        env[:a] = np.linspace(0.0, 1.0, a)
    d_end = min(a + decay, length)
    if decay > 0 and d_end > a:
        env[a:d_end] = np.linspace(1.0, sustain_level, d_end - a)
    s_end = max(length - release, d_end)
    if s_end > d_end:
        env[d_end:s_end] = sustain_level
    if release > 0 and s_end < length:
        env[s_end:] = np.linspace(sustain_level, 0.0, length - s_end)
    return env


def _exp_decay(length: int, start: float, end: float) -> np.ndarray:
    """Exponential gain ramp from *start* to *end* over *length* samples."""
    if length <= 0:
        return np.zeros(0)
    return start * np.power(end / start, np.linspace(0.0, 1.0, length))


def _sine(freq: float, duration_s: float) -> np.ndarray:
    """Pure sine wave at *freq* Hz for *duration_s* seconds."""
    t = np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)
    return np.sin(2 * np.pi * freq * t)


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Convert a float64 numpy array (-1..1) to 16-bit PCM WAV bytes."""
    samples = np.clip(samples, -1.0, 1.0)
    int_samples = (samples * 32767).astype(np.int16)

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(int_samples.tobytes())
    return buf.getvalue()


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND GENERATORS
# ═══════════════════════════════════════════════════════════════════════════


def _generate_beep() -> bytes:
    """Countdown finished: 800 Hz sine, gain 0.3 → 0.01 over 0.5 s."""
    tone = _sine(800.0, 0.5)
    return _to_wav_bytes(tone * _exp_decay(len(tone), 0.3, 0.01))


def _generate_bell() -> bytes:
    """Break start: soft bell (A4, 440Hz), slow attack, long decay."""
    duration = 1.0
    combined = _sine(440.0, duration) * 0.35 + _sine(880.0, duration) * 0.08
    env = _make_envelope(
        len(combined),
        attack=int(SAMPLE_RATE * 0.08),
        decay=int(SAMPLE_RATE * 0.3),
        sustain_level=0.25,
        release=int(SAMPLE_RATE * 0.55),
    )
    return _to_wav_bytes(combined * env)


def _generate_chime() -> bytes:
    """Focus start: 3 ascending notes (C5→E5→G5)."""
    notes = [523.25, 659.25, 783.99]
    gap = np.zeros(int(SAMPLE_RATE * 0.03))
    parts: list[np.ndarray] = []
    for freq in notes:
        tone = _sine(freq, 0.12) * 0.6
        env = _make_envelope(len(tone), attack=100, decay=200, sustain_level=0.4, release=300)
        parts.extend([tone * env, gap])
    parts.append(np.zeros(int(SAMPLE_RATE * 0.05)))
    return _to_wav_bytes(np.concatenate(parts))


def _generate_click() -> bytes:
    """Button click: very short high tick."""
    duration = 0.015
    n_samples = int(SAMPLE_RATE * duration)
    tick = _sine(1200.0, duration) * 0.2
    env = _make_envelope(n_samples, attack=20, decay=50, sustain_level=0.0, release=n_samples - 70)
    # Pad with silence so QSoundEffect doesn't clip
    padded = np.concatenate([tick * env, np.zeros(int(SAMPLE_RATE * 0.03))])
    return _to_wav_bytes(padded)


_GENERATORS: dict[str, Callable[[], bytes]] = {
    "countdown_finished": _generate_beep,
    "break_start": _generate_bell,
    "focus_start": _generate_chime,
    "click": _generate_click,
}


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Manages cue synthesis, caching, and playback.

    ``play`` has the signature the timer engine expects for its ``cue``
    callback::

        mgr = SoundManager(parent=self)
        engine = TimerEngine(cue=mgr.play)
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._volume = 0.7  # 0.0–1.0
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effects: dict[str, QSoundEffect] = {}

        self._ensure_wav_files()
        self._load_effects()

    # ── public API ────────────────────────────────────────────────────

    def set_volume(self, level: int) -> None:
        """Set volume (0-100).  Updates all loaded effects."""
        self._volume = max(0, min(level, 100)) / 100.0
        for effect in self._effects.values():
            effect.setVolume(self._volume)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def play(self, name: str) -> None:
        """Play a cue by name.  No-op if disabled or name unknown."""
        if not self._enabled:
            return
        effect = self._effects.get(name)
        if effect is None:
            logger.debug("No sound loaded for cue %r", name)
            return
        effect.play()

    @property
    def volume(self) -> int:
        """Current volume as 0-100 integer."""
        return round(self._volume * 100)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def loaded(self) -> tuple[str, ...]:
        return tuple(self._effects)

    # ── internal ──────────────────────────────────────────────────────

    def _ensure_wav_files(self) -> None:
        """Generate any missing WAV files to the cache directory."""
        self._sounds_dir.mkdir(parents=True, exist_ok=True)
        for name, gen_fn in _GENERATORS.items():
            path = self._sounds_dir / f"{name}.wav"
            if not path.exists():
                path.write_bytes(gen_fn())
                logger.debug("Generated %s", path)

    def _load_effects(self) -> None:
        """Create QSoundEffect instances from cached WAV files."""
        for name in SOUND_NAMES:
            path = self._sounds_dir / f"{name}.wav"
            if path.exists():
                effect = QSoundEffect(self)
                effect.setSource(QUrl.fromLocalFile(str(path)))
                effect.setVolume(self._volume)
                self._effects[name] = effect
