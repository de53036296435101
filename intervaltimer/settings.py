"""Application settings.

Defaults for the configuration form, the sound manager, and the main
window.  Settings live in memory for the lifetime of the process; the
timer card and the sound dialog edit the same instance.

Usage::

    settings = Settings()
    settings.sound_volume = 50
    config = settings.timer_config()
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .timer.engine import (
    DEFAULT_REST_SECONDS,
    DEFAULT_ROUNDS,
    DEFAULT_WORKOUT_SECONDS,
    TimerConfig,
)


APP_SUPPORT_DIR = Path.home() / ".interval-timer"

# Upper bounds for the spin boxes.  The lower bound is 0 on purpose so a
# zero can reach validation and be reported next to the field.
MAX_WORKOUT_SECONDS = 60 * 60
MAX_REST_SECONDS = 60 * 60
MAX_ROUNDS = 99


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── timer ─────────────────────────────────────────────────────────
    workout_duration: int = DEFAULT_WORKOUT_SECONDS   # seconds
    rest_duration: int = DEFAULT_REST_SECONDS
    rounds: int = DEFAULT_ROUNDS
    work_finish_audio: str = ""            # empty = bundled chime
    rest_finish_audio: str = ""

    # ── audio ─────────────────────────────────────────────────────────
    sound_enabled: bool = True
    sound_volume: int = 70                 # 0-100

    # ── window ────────────────────────────────────────────────────────
    window_width: int = 450
    window_height: int = 640
    always_on_top: bool = False

    def timer_config(self) -> TimerConfig:
        """Snapshot the timer fields as an immutable ``TimerConfig``."""
        return TimerConfig(
            workout_duration=self.workout_duration,
            rest_duration=self.rest_duration,
            rounds=self.rounds,
            work_finish_audio=_as_path(self.work_finish_audio),
            rest_finish_audio=_as_path(self.rest_finish_audio),
        )


def _as_path(value: str) -> Path | None:
    value = value.strip()
    return Path(value).expanduser() if value else None
