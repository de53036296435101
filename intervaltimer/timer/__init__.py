"""Timer package."""

from .engine import (
    Phase,
    Cue,
    Session,
    TimerConfig,
    ConfigurationError,
    DEFAULT_WORKOUT_SECONDS,
    DEFAULT_REST_SECONDS,
    DEFAULT_ROUNDS,
)
from .controller import TimerController, POLL_INTERVAL_MS

__all__ = [
    "Phase",
    "Cue",
    "Session",
    "TimerConfig",
    "ConfigurationError",
    "TimerController",
    "DEFAULT_WORKOUT_SECONDS",
    "DEFAULT_REST_SECONDS",
    "DEFAULT_ROUNDS",
    "POLL_INTERVAL_MS",
]
