"""Interval state machine for the workout timer.

Phases
------
IDLE       Not started: waiting for the user to press Start.
WORKING    Work interval counting down.
RESTING    Rest interval counting down.
FINISHED   Last work interval done.  Terminal until the next Start.

Transitions
-----------
IDLE | FINISHED → WORKING            (start, config validated)
WORKING → RESTING                    (countdown hits 0, rounds left)
WORKING → FINISHED                   (countdown hits 0 on the last round)
RESTING → WORKING                    (countdown hits 0, round += 1)
Any → IDLE                           (stop)

Every operation here is a pure function over an immutable ``Session``.
Nothing in this module touches Qt, the clock, or the audio device: the
caller feeds elapsed time in and acts on the returned ``Cue`` events.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path


# ── enums ─────────────────────────────────────────────────────────────────


class Phase(Enum):
    IDLE = "idle"
    WORKING = "working"
    RESTING = "resting"
    FINISHED = "finished"


class Cue(Enum):
    WORK_FINISHED = "work_finished"
    REST_FINISHED = "rest_finished"
    WORKOUT_COMPLETE = "workout_complete"


# ── constants ─────────────────────────────────────────────────────────────

DEFAULT_WORKOUT_SECONDS = 60
DEFAULT_REST_SECONDS = 45
DEFAULT_ROUNDS = 10

# Absorbs float error so ten 0.1 s polls add up to a whole second.
_CARRY_EPSILON = 1e-6


# ── errors ────────────────────────────────────────────────────────────────


class ConfigurationError(ValueError):
    """A duration or round count is not a positive integer.

    ``field`` names the offending ``TimerConfig`` attribute so the UI can
    flag the matching input.
    """

    def __init__(self, field: str, value: object) -> None:
        self.field = field
        self.value = value
        label = field.replace("_", " ")
        super().__init__(f"{label} must be a positive whole number (got {value!r})")


# ── data ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TimerConfig:
    """What the user asked for.  Frozen once a session starts."""

    workout_duration: int = DEFAULT_WORKOUT_SECONDS
    rest_duration: int = DEFAULT_REST_SECONDS
    rounds: int = DEFAULT_ROUNDS
    work_finish_audio: Path | None = None
    rest_finish_audio: Path | None = None

    def validate(self) -> None:
        """Raise ``ConfigurationError`` for the first bad numeric field."""
        for name in ("workout_duration", "rest_duration", "rounds"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigurationError(name, value)

    def duration_for(self, phase: Phase) -> int:
        if phase == Phase.WORKING:
            return self.workout_duration
        if phase == Phase.RESTING:
            return self.rest_duration
        return 0


@dataclass(frozen=True)
class Session:
    """Snapshot of the countdown.  Replaced, never mutated."""

    config: TimerConfig = field(default_factory=TimerConfig)
    phase: Phase = Phase.IDLE
    remaining_seconds: int = 0
    current_round: int = 0
    paused: bool = False
    carry: float = 0.0

    @property
    def phase_duration(self) -> int:
        return self.config.duration_for(self.phase)

    @property
    def is_active(self) -> bool:
        """True while WORKING or RESTING, paused or not."""
        return self.phase in (Phase.WORKING, Phase.RESTING)

    @property
    def is_running(self) -> bool:
        """True when actively counting down."""
        return self.is_active and not self.paused

    @property
    def percent_complete(self) -> float:
        """0.0 → 1.0 progress through the current phase."""
        if self.phase == Phase.FINISHED:
            return 1.0
        total = self.phase_duration
        if total <= 0:
            return 0.0
        elapsed = total - self.remaining_seconds
        return max(0.0, min(1.0, elapsed / total))


# ── operations ────────────────────────────────────────────────────────────


def idle_session(config: TimerConfig | None = None) -> Session:
    return Session(config=config or TimerConfig())


def start(session: Session, config: TimerConfig | None = None) -> Session:
    """Begin round 1 of a workout.

    Valid from IDLE or FINISHED; a no-op while a workout is underway.
    Raises ``ConfigurationError`` if *config* (or the session's own
    config when omitted) fails validation.
    """
    if session.is_active:
        return session
    config = config or session.config
    config.validate()
    return Session(
        config=config,
        phase=Phase.WORKING,
        remaining_seconds=config.workout_duration,
        current_round=1,
    )


def stop(session: Session) -> Session:
    """Back to IDLE from anywhere, keeping the configuration."""
    return idle_session(session.config)


def pause(session: Session) -> Session:
    if not session.is_running:
        return session
    return replace(session, paused=True)


def resume(session: Session) -> Session:
    if not (session.is_active and session.paused):
        return session
    return replace(session, paused=False)


def advance(session: Session, elapsed: float) -> tuple[Session, list[Cue]]:
    """Apply *elapsed* seconds of wall-clock time to *session*.

    Returns the new session and the cue events produced, in order.  Only
    whole seconds count against the clock; the fraction is carried to
    the next call.  At most one phase transition happens per call and
    any time past the phase boundary is dropped.
    """
    if not session.is_running:
        return session, []

    total = session.carry + max(0.0, elapsed)
    whole = math.floor(total + _CARRY_EPSILON)
    carry = max(0.0, total - whole)
    if whole <= 0:
        return replace(session, carry=carry), []

    remaining = max(0, session.remaining_seconds - whole)
    if remaining > 0:
        return replace(session, remaining_seconds=remaining, carry=carry), []

    config = session.config
    if session.phase == Phase.WORKING:
        if session.current_round >= config.rounds:
            finished = replace(
                session,
                phase=Phase.FINISHED,
                remaining_seconds=0,
                current_round=config.rounds,
                carry=0.0,
            )
            return finished, [Cue.WORK_FINISHED, Cue.WORKOUT_COMPLETE]
        resting = replace(
            session,
            phase=Phase.RESTING,
            remaining_seconds=config.rest_duration,
            carry=carry,
        )
        return resting, [Cue.WORK_FINISHED]

    working = replace(
        session,
        phase=Phase.WORKING,
        remaining_seconds=config.workout_duration,
        current_round=session.current_round + 1,
        carry=carry,
    )
    return working, [Cue.REST_FINISHED]
