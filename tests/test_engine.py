"""Tests for the pure interval state machine.

Covers: configuration validation, start/stop/pause/resume, the tick
contract (countdown, phase transitions, cue events), round accounting,
fractional increments, and the terminal FINISHED phase.
"""

import pytest

from intervaltimer.timer import engine
from intervaltimer.timer.engine import (
    ConfigurationError, Cue, Phase, Session, TimerConfig,
    DEFAULT_WORKOUT_SECONDS, DEFAULT_REST_SECONDS, DEFAULT_ROUNDS,
)

from helpers import tick


def total_ticks(config: TimerConfig) -> int:
    return config.rounds * (config.workout_duration + config.rest_duration) - config.rest_duration


# ═══════════════════════════════════════════════════════════════════════════
#  CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════


class TestConfiguration:

    def test_defaults(self):
        config = TimerConfig()
        assert config.workout_duration == DEFAULT_WORKOUT_SECONDS == 60
        assert config.rest_duration == DEFAULT_REST_SECONDS == 45
        assert config.rounds == DEFAULT_ROUNDS == 10
        assert config.work_finish_audio is None
        assert config.rest_finish_audio is None

    def test_valid_config_passes(self):
        TimerConfig(workout_duration=1, rest_duration=1, rounds=1).validate()

    @pytest.mark.parametrize("field, value", [
        ("workout_duration", 0),
        ("workout_duration", -5),
        ("rest_duration", 0),
        ("rest_duration", -1),
        ("rounds", 0),
        ("rounds", -3),
    ])
    def test_non_positive_rejected(self, field, value):
        config = TimerConfig(**{field: value})
        with pytest.raises(ConfigurationError) as exc_info:
            config.validate()
        assert exc_info.value.field == field
        assert exc_info.value.value == value

    @pytest.mark.parametrize("value", [1.5, "10", True, None])
    def test_non_integer_rejected(self, value):
        with pytest.raises(ConfigurationError):
            TimerConfig(rounds=value).validate()

    def test_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            TimerConfig(workout_duration=0).validate()

    def test_error_message_names_field(self):
        with pytest.raises(ConfigurationError, match="rest duration"):
            TimerConfig(rest_duration=0).validate()

    def test_config_is_frozen(self):
        config = TimerConfig()
        with pytest.raises(AttributeError):
            config.rounds = 3  # type: ignore[misc]


# ═══════════════════════════════════════════════════════════════════════════
#  START / STOP
# ═══════════════════════════════════════════════════════════════════════════


class TestStartStop:

    def test_initial_session_is_idle(self):
        session = engine.idle_session()
        assert session.phase == Phase.IDLE
        assert session.remaining_seconds == 0
        assert session.current_round == 0
        assert session.paused is False

    def test_start_enters_first_work_phase(self, small_config):
        session = engine.start(engine.idle_session(small_config))
        assert session.phase == Phase.WORKING
        assert session.remaining_seconds == 2
        assert session.current_round == 1

    def test_start_with_explicit_config(self, small_config):
        session = engine.start(engine.idle_session(), small_config)
        assert session.config == small_config
        assert session.remaining_seconds == small_config.workout_duration

    @pytest.mark.parametrize("config", [
        TimerConfig(rounds=0),
        TimerConfig(workout_duration=0),
        TimerConfig(rest_duration=0),
    ])
    def test_start_with_invalid_config_raises(self, config):
        idle = engine.idle_session(config)
        with pytest.raises(ConfigurationError):
            engine.start(idle)
        assert idle.phase == Phase.IDLE

    def test_start_is_noop_while_working(self, small_config):
        session = engine.start(engine.idle_session(small_config))
        session, _ = tick(session)
        assert engine.start(session) is session

    def test_start_is_noop_while_resting(self, small_config):
        session = engine.start(engine.idle_session(small_config))
        session, _ = tick(session, 2)
        assert session.phase == Phase.RESTING
        assert engine.start(session, TimerConfig()) is session

    def test_start_after_finished_begins_fresh(self, small_config):
        session = engine.start(engine.idle_session(small_config))
        session, _ = tick(session, total_ticks(small_config))
        assert session.phase == Phase.FINISHED

        restarted = engine.start(session)
        assert restarted.phase == Phase.WORKING
        assert restarted.current_round == 1
        assert restarted.remaining_seconds == small_config.workout_duration

    def test_start_after_finished_with_bad_config_raises(self, small_config):
        session = engine.start(engine.idle_session(small_config))
        session, _ = tick(session, total_ticks(small_config))
        with pytest.raises(ConfigurationError):
            engine.start(session, TimerConfig(rounds=0))

    @pytest.mark.parametrize("ticks", [0, 1, 2, 3, 5])
    def test_stop_returns_to_idle(self, small_config, ticks):
        session = engine.start(engine.idle_session(small_config))
        session, _ = tick(session, ticks)
        stopped = engine.stop(session)
        assert stopped == engine.idle_session(small_config)
        assert stopped.current_round == 0
        assert stopped.remaining_seconds == 0

    def test_stop_from_paused(self, small_config):
        session = engine.pause(engine.start(engine.idle_session(small_config)))
        stopped = engine.stop(session)
        assert stopped.phase == Phase.IDLE
        assert stopped.paused is False

    def test_stop_from_idle_is_idle(self):
        assert engine.stop(engine.idle_session()).phase == Phase.IDLE


# ═══════════════════════════════════════════════════════════════════════════
#  TICK / TRANSITIONS
# ═══════════════════════════════════════════════════════════════════════════


class TestTick:

    def test_walkthrough_two_rounds(self, small_config):
        session = engine.start(engine.idle_session(small_config))
        assert (session.phase, session.current_round, session.remaining_seconds) == (
            Phase.WORKING, 1, 2,
        )

        session, cues = tick(session)
        assert session.remaining_seconds == 1
        assert cues == []

        session, cues = tick(session)
        assert cues == [Cue.WORK_FINISHED]
        assert session.phase == Phase.RESTING
        assert session.remaining_seconds == 1
        assert session.current_round == 1

        session, cues = tick(session)
        assert cues == [Cue.REST_FINISHED]
        assert session.phase == Phase.WORKING
        assert session.current_round == 2
        assert session.remaining_seconds == 2

        session, cues = tick(session, 2)
        assert cues == [Cue.WORK_FINISHED, Cue.WORKOUT_COMPLETE]
        assert session.phase == Phase.FINISHED
        assert session.remaining_seconds == 0
        assert session.current_round == 2

    def test_single_round_has_no_rest(self):
        config = TimerConfig(workout_duration=3, rest_duration=5, rounds=1)
        session = engine.start(engine.idle_session(config))
        session, cues = tick(session, 3)
        assert session.phase == Phase.FINISHED
        assert cues == [Cue.WORK_FINISHED, Cue.WORKOUT_COMPLETE]

    @pytest.mark.parametrize("workout, rest, rounds", [
        (1, 1, 1),
        (2, 1, 2),
        (3, 2, 4),
        (5, 3, 3),
        (1, 7, 5),
        (60, 45, 10),
    ])
    def test_finishes_after_exact_tick_count(self, workout, rest, rounds):
        config = TimerConfig(workout_duration=workout, rest_duration=rest, rounds=rounds)
        session = engine.start(engine.idle_session(config))
        n = total_ticks(config)

        session, _ = tick(session, n - 1)
        assert session.phase != Phase.FINISHED

        session, cues = tick(session)
        assert session.phase == Phase.FINISHED
        assert cues[-1] == Cue.WORKOUT_COMPLETE

    @pytest.mark.parametrize("workout, rest, rounds", [
        (2, 1, 3),
        (4, 2, 2),
        (1, 1, 6),
    ])
    def test_invariants_hold_on_every_tick(self, workout, rest, rounds):
        config = TimerConfig(workout_duration=workout, rest_duration=rest, rounds=rounds)
        session = engine.start(engine.idle_session(config))
        for _ in range(total_ticks(config) + 5):
            session, _ = engine.advance(session, 1.0)
            assert 0 <= session.remaining_seconds <= session.phase_duration
            assert session.current_round <= rounds

    def test_cue_counts_over_whole_workout(self):
        config = TimerConfig(workout_duration=2, rest_duration=2, rounds=4)
        session = engine.start(engine.idle_session(config))
        session, cues = tick(session, total_ticks(config))
        assert cues.count(Cue.WORK_FINISHED) == 4
        assert cues.count(Cue.REST_FINISHED) == 3
        assert cues.count(Cue.WORKOUT_COMPLETE) == 1

    def test_tick_is_noop_while_idle(self, small_config):
        idle = engine.idle_session(small_config)
        session, cues = engine.advance(idle, 1.0)
        assert session == idle
        assert cues == []

    def test_tick_is_noop_when_finished(self, small_config):
        session = engine.start(engine.idle_session(small_config))
        finished, _ = tick(session, total_ticks(small_config))
        after, cues = tick(finished, 10)
        assert after == finished
        assert cues == []

    def test_large_increment_clamps_at_zero(self, small_config):
        session = engine.start(engine.idle_session(small_config))
        session, cues = engine.advance(session, 30.0)
        # one transition only; the overshoot is dropped
        assert cues == [Cue.WORK_FINISHED]
        assert session.phase == Phase.RESTING
        assert session.remaining_seconds == small_config.rest_duration

    def test_negative_increment_counts_as_zero(self, small_config):
        session = engine.start(engine.idle_session(small_config))
        after, cues = engine.advance(session, -3.0)
        assert after.remaining_seconds == session.remaining_seconds
        assert cues == []


# ═══════════════════════════════════════════════════════════════════════════
#  FRACTIONAL INCREMENTS
# ═══════════════════════════════════════════════════════════════════════════


class TestFractionalIncrements:

    def test_ten_tenths_make_a_second(self, small_config):
        session = engine.start(engine.idle_session(small_config))
        session, _ = tick(session, 9, step=0.1)
        assert session.remaining_seconds == 2
        session, _ = tick(session, 1, step=0.1)
        assert session.remaining_seconds == 1

    def test_carry_survives_between_calls(self, small_config):
        session = engine.start(engine.idle_session(small_config))
        session, _ = engine.advance(session, 0.6)
        assert session.remaining_seconds == 2
        assert session.carry == pytest.approx(0.6)
        session, _ = engine.advance(session, 0.6)
        assert session.remaining_seconds == 1
        assert session.carry == pytest.approx(0.2)

    def test_half_second_polls_finish_workout(self, small_config):
        session = engine.start(engine.idle_session(small_config))
        session, cues = tick(session, total_ticks(small_config) * 2, step=0.5)
        assert session.phase == Phase.FINISHED
        assert cues[-1] == Cue.WORKOUT_COMPLETE


# ═══════════════════════════════════════════════════════════════════════════
#  PAUSE / RESUME
# ═══════════════════════════════════════════════════════════════════════════


class TestPauseResume:

    def test_pause_freezes_countdown(self, small_config):
        session = engine.pause(engine.start(engine.idle_session(small_config)))
        assert session.paused is True
        assert session.is_running is False
        after, cues = tick(session, 5)
        assert after == session
        assert cues == []

    def test_resume_continues_from_same_point(self, small_config):
        session = engine.start(engine.idle_session(small_config))
        session, _ = tick(session)
        session = engine.resume(engine.pause(session))
        assert session.paused is False
        assert session.remaining_seconds == 1
        session, cues = tick(session)
        assert cues == [Cue.WORK_FINISHED]

    def test_pause_keeps_phase(self, small_config):
        session = engine.start(engine.idle_session(small_config))
        session, _ = tick(session, 2)
        paused = engine.pause(session)
        assert paused.phase == Phase.RESTING

    def test_pause_is_noop_when_idle(self):
        idle = engine.idle_session()
        assert engine.pause(idle) is idle

    def test_resume_is_noop_when_not_paused(self, small_config):
        session = engine.start(engine.idle_session(small_config))
        assert engine.resume(session) is session


# ═══════════════════════════════════════════════════════════════════════════
#  DERIVED VALUES
# ═══════════════════════════════════════════════════════════════════════════


class TestDerivedValues:

    def test_percent_starts_at_zero(self, small_config):
        session = engine.start(engine.idle_session(small_config))
        assert session.percent_complete == pytest.approx(0.0)

    def test_percent_at_halfway(self):
        config = TimerConfig(workout_duration=10, rest_duration=5, rounds=2)
        session = engine.start(engine.idle_session(config))
        session, _ = tick(session, 5)
        assert session.percent_complete == pytest.approx(0.5)

    def test_percent_idle_and_finished(self, small_config):
        assert engine.idle_session(small_config).percent_complete == 0.0
        session = engine.start(engine.idle_session(small_config))
        session, _ = tick(session, total_ticks(small_config))
        assert session.percent_complete == 1.0

    def test_phase_duration_follows_phase(self, small_config):
        session = engine.start(engine.idle_session(small_config))
        assert session.phase_duration == 2
        session, _ = tick(session, 2)
        assert session.phase_duration == 1
        assert Session(config=small_config).phase_duration == 0

    def test_is_active(self, small_config):
        assert not engine.idle_session(small_config).is_active
        session = engine.start(engine.idle_session(small_config))
        assert session.is_active
        assert engine.pause(session).is_active
