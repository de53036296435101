"""Cue synthesis and playback using numpy + QMediaPlayer.

The default cues are generated programmatically as WAV files using
sine-wave synthesis with ADSR envelopes.  Files are cached to disk so
subsequent app launches are instant.  User-chosen clips (mp3, ogg, …)
play through the same ``QMediaPlayer`` path.

Default cue names
-----------------
- ``work_finish``     : soft bell: work is over, time to rest
- ``rest_finish``     : ascending chime: back to work
- ``workout_complete``: celebratory fanfare after the last round
"""

from __future__ import annotations

import io
import logging
import wave
from pathlib import Path

import numpy as np

from PyQt6.QtCore import QObject, QUrl, pyqtSignal
from PyQt6.QtMultimedia import QAudioOutput, QMediaPlayer

from ..settings import APP_SUPPORT_DIR


logger = logging.getLogger(__name__)


# ── paths ────────────────────────────────────────────────────────────────

SOUNDS_DIR = APP_SUPPORT_DIR / "sounds"

SOUND_NAMES = (
    "work_finish",
    "rest_finish",
    "workout_complete",
)

SUPPORTED_SUFFIXES = frozenset({".wav", ".mp3", ".ogg", ".flac", ".m4a", ".aac"})

SAMPLE_RATE = 44100


class PlaybackError(RuntimeError):
    """An audio clip could not be played.  Never fatal to the timer."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        super().__init__(f"Cannot play {self.path.name}: {reason}")


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
#  CUE GENERATORS
# ═══════════════════════════════════════════════════════════════════════════


def _generate_bell() -> bytes:
    """Work finished: two-strike bell (A5) with a long decay."""
    strike = _sine(880.0, 0.6) * 0.5 + _sine(1760.0, 0.6) * 0.12
    env = _make_envelope(
        len(strike),
        attack=int(SAMPLE_RATE * 0.01),
        decay=int(SAMPLE_RATE * 0.15),
        sustain_level=0.35,
        release=int(SAMPLE_RATE * 0.35),
    )
    strike = strike * env
    gap = np.zeros(int(SAMPLE_RATE * 0.08))
    return _to_wav_bytes(np.concatenate([strike, gap, strike]))


def _generate_chime() -> bytes:
    """Rest finished: 3 ascending notes (C5→E5→G5), punchy."""
    notes = [523.25, 659.25, 783.99]
    parts: list[np.ndarray] = []
    for freq in notes:
        tone = _sine(freq, 0.14) * 0.6
        env = _make_envelope(len(tone), attack=100, decay=200, sustain_level=0.5, release=300)
        parts.append(tone * env)
        parts.append(np.zeros(int(SAMPLE_RATE * 0.03)))
    parts.append(np.zeros(int(SAMPLE_RATE * 0.05)))
    return _to_wav_bytes(np.concatenate(parts))


def _generate_fanfare() -> bytes:
    """Workout complete: G4→B4→D5→G5 with a held final note."""
    notes = [392.00, 493.88, 587.33, 783.99]
    parts: list[np.ndarray] = []
    for i, freq in enumerate(notes):
        if i == len(notes) - 1:
            combined = _sine(freq, 0.6) * 0.55 + _sine(freq * 2, 0.6) * 0.1
            env = _make_envelope(len(combined), attack=100, decay=400, sustain_level=0.5, release=900)
            parts.append(combined * env)
        else:
            tone = _sine(freq, 0.15) * 0.5
            env = _make_envelope(len(tone), attack=80, decay=200, sustain_level=0.4, release=250)
            parts.append(tone * env)
            parts.append(np.zeros(int(SAMPLE_RATE * 0.03)))
    return _to_wav_bytes(np.concatenate(parts))


_GENERATORS = {
    "work_finish": _generate_bell,
    "rest_finish": _generate_chime,
    "workout_complete": _generate_fanfare,
}


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Plays cue clips, fire-and-forget.

    Usage::

        mgr = SoundManager(parent=self)
        mgr.set_volume(70)
        mgr.play(Path("~/gong.mp3").expanduser())
        mgr.play_default("workout_complete")

    ``play`` raises ``PlaybackError`` straight away when the file is
    missing or has an unsupported extension.  Decoder failures surface
    later through ``playback_failed(path, message)``.
    """

    playback_failed = pyqtSignal(str, str)

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
        self._active: list[tuple[QMediaPlayer, QAudioOutput]] = []

        self._ensure_wav_files()

    # ── public API ────────────────────────────────────────────────────

    def set_volume(self, level: int) -> None:
        """Set volume (0-100).  Applies to clips started afterwards too."""
        self._volume = max(0, min(level, 100)) / 100.0
        for _, output in self._active:
            output.setVolume(self._volume)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def default_path(self, name: str) -> Path:
        """Cached WAV for a bundled cue name."""
        if name not in _GENERATORS:
            raise KeyError(name)
        return self._sounds_dir / f"{name}.wav"

    def resolve(self, path: Path | str | None, fallback: str) -> Path:
        """User-chosen *path*, or the bundled *fallback* cue when unset."""
        if path is None or str(path) == "":
            return self.default_path(fallback)
        return Path(path)

    def check(self, path: Path | str) -> Path:
        """Raise ``PlaybackError`` unless *path* is a playable file."""
        path = Path(path)
        if not path.is_file():
            raise PlaybackError(path, "file not found")
        if path.suffix.lower() not in SUPPORTED_SUFFIXES:
            raise PlaybackError(path, f"unsupported format {path.suffix or '(none)'}")
        return path

    def play(self, path: Path | str) -> None:
        """Play *path* once.  No-op when disabled."""
        path = self.check(path)
        if not self._enabled:
            return

        output = QAudioOutput(self)
        output.setVolume(self._volume)
        player = QMediaPlayer(self)
        player.setAudioOutput(output)
        pair = (player, output)
        self._active.append(pair)

        player.errorOccurred.connect(
            lambda _err, msg, p=path, pr=pair: self._on_error(p, msg, pr)
        )
        player.mediaStatusChanged.connect(
            lambda status, pr=pair: self._on_status(status, pr)
        )
        player.playbackStateChanged.connect(
            lambda state, pr=pair: self._on_state(state, pr)
        )
        player.setSource(QUrl.fromLocalFile(str(path.resolve())))
        player.play()
        logger.debug("Playing %s", path)

    def play_default(self, name: str) -> None:
        self.play(self.default_path(name))

    @property
    def volume(self) -> int:
        """Current volume as 0-100 integer."""
        return round(self._volume * 100)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def active_count(self) -> int:
        return len(self._active)

    # ── internal ──────────────────────────────────────────────────────

    def _ensure_wav_files(self) -> None:
        """Generate any missing WAV files to the cache directory."""
        self._sounds_dir.mkdir(parents=True, exist_ok=True)
        for name, gen_fn in _GENERATORS.items():
            path = self._sounds_dir / f"{name}.wav"
            if not path.exists():
                path.write_bytes(gen_fn())

    def _on_error(self, path: Path, message: str, pair) -> None:
        logger.warning("Playback failed for %s: %s", path, message)
        self.playback_failed.emit(str(path), message or "decoder error")
        self._release(pair)

    def _on_status(self, status: QMediaPlayer.MediaStatus, pair) -> None:
        if status in (
            QMediaPlayer.MediaStatus.EndOfMedia,
            QMediaPlayer.MediaStatus.InvalidMedia,
        ):
            self._release(pair)

    def _on_state(self, state: QMediaPlayer.PlaybackState, pair) -> None:
        if state == QMediaPlayer.PlaybackState.StoppedState:
            self._release(pair)

    def _release(self, pair) -> None:
        if pair not in self._active:
            return
        self._active.remove(pair)
        player, output = pair
        player.deleteLater()
        output.deleteLater()
