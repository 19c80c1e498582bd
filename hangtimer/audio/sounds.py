"""Cue synthesis and playback using numpy + QSoundEffect.

Both cues are plain sine beeps with an exponential fade, generated as
WAV files and cached to disk so later launches skip the synthesis.

Sound names
-----------
- ``tick``    short 800 Hz beep (0.1 s): countdown and phase changes
- ``finish``  longer 1000 Hz beep (0.5 s): session complete
"""

from __future__ import annotations

import io
import wave
from pathlib import Path

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

from ..settings import APP_SUPPORT_DIR
from ..timer.engine import Cue


# ── paths ────────────────────────────────────────────────────────────────

SOUNDS_DIR = APP_SUPPORT_DIR / "sounds"

SOUND_NAMES = (
    "tick",
    "finish",
)

SAMPLE_RATE = 44100

# Fade shape only; loudness comes from the volume setting
# (default 30 → the cue peaks at 0.3 gain and fades to 0.01).
START_GAIN = 1.0
END_GAIN = 0.01 / 0.3


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def _sine(freq: float, duration_s: float) -> np.ndarray:
    """Pure sine wave at *freq* Hz for *duration_s* seconds."""
    t = np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)
    return np.sin(2 * np.pi * freq * t)


def _exp_fade(length: int, start: float = START_GAIN, end: float = END_GAIN) -> np.ndarray:
    """Exponential gain ramp from *start* to *end* over *length* samples."""
    if length <= 0:
        return np.zeros(0, dtype=np.float64)
    return start * np.power(end / start, np.linspace(0.0, 1.0, length))


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


def _beep(freq: float, duration_s: float) -> bytes:
    tone = _sine(freq, duration_s)
    return _to_wav_bytes(tone * _exp_fade(len(tone)))


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND GENERATORS
# ═══════════════════════════════════════════════════════════════════════════


def _generate_tick() -> bytes:
    """Countdown / phase change, 800 Hz for 0.1 s."""
    return _beep(800.0, 0.1)


def _generate_finish() -> bytes:
    """Session complete, 1000 Hz for 0.5 s, clearly longer than a tick."""
    return _beep(1000.0, 0.5)


_GENERATORS: dict[str, callable] = {
    "tick": _generate_tick,
    "finish": _generate_finish,
}

# Which sound each engine cue plays
CUE_SOUNDS: dict[Cue, str] = {
    Cue.START: "tick",
    Cue.COUNTDOWN: "tick",
    Cue.PHASE: "tick",
    Cue.FINISH: "finish",
}


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Manages cue synthesis, caching, and playback.

    Usage::

        mgr = SoundManager(parent=self)
        mgr.set_volume(30)
        engine.cue.connect(mgr.play_cue)
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._volume = 0.3  # 0.0–1.0
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
        if effect is not None:
            effect.play()

    def play_tick_cue(self) -> None:
        self.play("tick")

    def play_finish_cue(self) -> None:
        self.play("finish")

    def play_cue(self, cue: Cue) -> None:
        """Slot for ``TimerEngine.cue``."""
        name = CUE_SOUNDS.get(cue)
        if name is not None:
            self.play(name)

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
            path = self._sounds_dir / f"{name}.wav"
            if not path.exists():
                path.write_bytes(gen_fn())

    def _load_effects(self) -> None:
        """Create QSoundEffect instances from cached WAV files."""
        for name in SOUND_NAMES:
            path = self._sounds_dir / f"{name}.wav"
            if path.exists():
                effect = QSoundEffect(self)
                effect.setSource(QUrl.fromLocalFile(str(path)))
                effect.setVolume(self._volume)
                self._effects[name] = effect
