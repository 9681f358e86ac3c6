"""Completion sounds: numpy synthesis + QSoundEffect playback.

Every sound is generated as a WAV file (sine partials shaped by ADSR or
exponential-decay envelopes) and cached on disk, so later launches only
load the files.

Sound names
-----------
- ``Default``: two-tone alarm beep, three times
- ``Subtle``: single soft low tone
- ``Loud``: fast, bright beeps, five times
- ``Gentle``: slow descending chime
- ``Bell``: hotel desk bell "ding" (the countdown alert)
"""

from __future__ import annotations

import io
import logging
import wave
from collections.abc import Callable
from pathlib import Path

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect


logger = logging.getLogger(__name__)


# ── paths ────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "CountDown"
SOUNDS_DIR = APP_SUPPORT_DIR / "sounds"

SOUND_NAMES = ("Default", "Subtle", "Loud", "Gentle", "Bell")

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


def _decay_envelope(length: int, time_constant_s: float) -> np.ndarray:
    """Struck-object envelope: instant attack, exponential fade."""
    t = np.arange(length) / SAMPLE_RATE
    env = np.exp(-t / time_constant_s)
    # 2 ms fade-in avoids a click
    ramp = min(length, int(SAMPLE_RATE * 0.002))
    if ramp:
        env[:ramp] *= np.linspace(0.0, 1.0, ramp)
    return env


def _sine(freq: float, duration_s: float) -> np.ndarray:
    """Pure sine wave at *freq* Hz for *duration_s* seconds."""
    t = np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)
    return np.sin(2 * np.pi * freq * t)


def _silence(duration_s: float) -> np.ndarray:
    return np.zeros(int(SAMPLE_RATE * duration_s))


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


def _generate_default() -> bytes:
    """Two-tone beep (A5 then E6), repeated three times."""
    parts: list[np.ndarray] = []
    for _ in range(3):
        for freq in (880.0, 1318.51):
            tone = _sine(freq, 0.09) * 0.5
            env = _make_envelope(len(tone), attack=80, decay=200, sustain_level=0.6, release=300)
            parts.append(tone * env)
        parts.append(_silence(0.18))
    return _to_wav_bytes(np.concatenate(parts))


def _generate_subtle() -> bytes:
    """One soft, low tone (E4) with a slow swell."""
    duration = 0.6
    tone = _sine(329.63, duration) * 0.25
    env = _make_envelope(
        len(tone),
        attack=int(SAMPLE_RATE * 0.1),
        decay=int(SAMPLE_RATE * 0.15),
        sustain_level=0.5,
        release=int(SAMPLE_RATE * 0.3),
    )
    return _to_wav_bytes(tone * env)


def _generate_loud() -> bytes:
    """Five bright beeps (C6 with its octave), short gaps."""
    parts: list[np.ndarray] = []
    for _ in range(5):
        tone = _sine(1046.50, 0.12) * 0.7 + _sine(2093.0, 0.12) * 0.2
        env = _make_envelope(len(tone), attack=40, decay=100, sustain_level=0.9, release=200)
        parts.append(tone * env)
        parts.append(_silence(0.07))
    return _to_wav_bytes(np.concatenate(parts))


def _generate_gentle() -> bytes:
    """Slow descending chime (G5 → E5 → C5)."""
    parts: list[np.ndarray] = []
    for freq in (783.99, 659.25, 523.25):
        tone = _sine(freq, 0.45) * 0.35
        parts.append(tone * _decay_envelope(len(tone), 0.18))
        parts.append(_silence(0.05))
    return _to_wav_bytes(np.concatenate(parts))


def _generate_bell() -> bytes:
    """Desk-bell ding: inharmonic partials over a long exponential decay."""
    duration = 1.6
    partials = (
        (2093.0, 0.45, 0.55),   # fundamental (C7)
        (5441.8, 0.20, 0.25),   # ×2.6
        (8790.6, 0.10, 0.12),   # ×4.2
        (1046.5, 0.08, 0.70),   # low hum
    )
    length = int(SAMPLE_RATE * duration)
    combined = np.zeros(length)
    for freq, amplitude, time_constant in partials:
        combined += _sine(freq, duration)[:length] * amplitude * _decay_envelope(length, time_constant)
    return _to_wav_bytes(combined)


# Map sound names to generator functions
_GENERATORS: dict[str, Callable[[], bytes]] = {
    "Default": _generate_default,
    "Subtle": _generate_subtle,
    "Loud": _generate_loud,
    "Gentle": _generate_gentle,
    "Bell": _generate_bell,
}


def _file_name(name: str) -> str:
    return f"timer-{name.lower()}.wav"


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Synthesises, caches and plays the completion sounds.

    Usage::

        mgr = SoundManager(parent=self)
        mgr.set_volume(70)
        mgr.play("Bell")
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
        """Play a sound by name.  No-op if disabled or name unknown."""
        if not self._enabled:
            return
        effect = self._effects.get(name)
        if effect is None:
            logger.debug("Sound not found: %s", name)
            return
        if effect.isPlaying():
            effect.stop()
        effect.play()

    def sound_names(self) -> list[str]:
        """Names that :meth:`play` accepts, sorted."""
        return sorted(self._effects)

    @property
    def volume(self) -> int:
        """Current volume as 0-100 integer."""
        return round(self._volume * 100)

    @property
    def enabled(self) -> bool:
        return self._enabled

    # ── internal ──────────────────────────────────────────────────────

    def _ensure_wav_files(self) -> None:
        """Generate any missing WAV files to the cache directory."""
        self._sounds_dir.mkdir(parents=True, exist_ok=True)
        for name, gen_fn in _GENERATORS.items():
            path = self._sounds_dir / _file_name(name)
            if not path.exists():
                logger.debug("Synthesising %s → %s", name, path)
                path.write_bytes(gen_fn())

    def _load_effects(self) -> None:
        """Create QSoundEffect instances from cached WAV files."""
        for name in SOUND_NAMES:
            path = self._sounds_dir / _file_name(name)
            if not path.exists():
                logger.warning("Sound file missing: %s", path)
                continue
            effect = QSoundEffect(self)
            effect.setSource(QUrl.fromLocalFile(str(path)))
            effect.setVolume(self._volume)
            self._effects[name] = effect
