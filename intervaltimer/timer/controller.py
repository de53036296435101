"""Qt driver for the interval state machine.

``TimerController`` is the single owner of the live ``Session``.  A
``QTimer`` polls every ``POLL_INTERVAL_MS``; each poll measures the real
time since the previous one with ``QElapsedTimer`` and hands it to
``engine.advance``.  Whatever changed is re-emitted as Qt signals so the
widgets and the sound manager never touch the session directly.
"""

from __future__ import annotations

import logging

from PyQt6.QtCore import QElapsedTimer, QObject, QTimer, pyqtSignal

from . import engine
from .engine import ConfigurationError, Phase, Session, TimerConfig


logger = logging.getLogger(__name__)

POLL_INTERVAL_MS = 100


class TimerController(QObject):
    """Owns the workout session and drives it from the Qt event loop.

    Signals
    -------
    tick(session: Session)
        Emitted whenever ``remaining_seconds`` changes.
    state_changed(session: Session)
        Emitted on every phase change and on pause/resume.
    cue(cue: Cue)
        Emitted once per cue event, in the order the engine produced them.
    configuration_error(error: ConfigurationError)
        Emitted when Start is refused.  The session stays IDLE.
    """

    tick = pyqtSignal(object)
    state_changed = pyqtSignal(object)
    cue = pyqtSignal(object)
    configuration_error = pyqtSignal(object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        config: TimerConfig | None = None,
    ) -> None:
        super().__init__(parent)
        self._session: Session = engine.idle_session(config)

        self._clock = QElapsedTimer()
        self._poll_timer = QTimer(self)
        self._poll_timer.setInterval(POLL_INTERVAL_MS)
        self._poll_timer.timeout.connect(self._on_poll)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def session(self) -> Session:
        return self._session

    @property
    def phase(self) -> Phase:
        return self._session.phase

    @property
    def is_polling(self) -> bool:
        return self._poll_timer.isActive()

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self, config: TimerConfig | None = None) -> bool:
        """Validate *config* and begin round 1.

        Returns False (and emits ``configuration_error``) when the
        configuration is rejected.
        """
        if self._session.is_active:
            return False
        try:
            started = engine.start(self._session, config)
        except ConfigurationError as exc:
            logger.info("Start refused: %s", exc)
            if self._session.phase == Phase.FINISHED:
                self._replace(engine.stop(self._session))
            self.configuration_error.emit(exc)
            return False

        logger.info(
            "Workout started: %ds work / %ds rest x %d rounds",
            started.config.workout_duration,
            started.config.rest_duration,
            started.config.rounds,
        )
        self._replace(started)
        self._start_polling()
        return True

    def stop(self) -> None:
        """Cancel the workout and return to IDLE."""
        self._poll_timer.stop()
        self._replace(engine.stop(self._session))

    def pause(self) -> None:
        if not self._session.is_running:
            return
        self._poll_timer.stop()
        self._replace(engine.pause(self._session))

    def resume(self) -> None:
        if not (self._session.is_active and self._session.paused):
            return
        self._replace(engine.resume(self._session))
        self._start_polling()

    def toggle_pause(self) -> None:
        if self._session.paused:
            self.resume()
        else:
            self.pause()

    def advance(self, elapsed: float) -> None:
        """Feed *elapsed* seconds to the state machine and emit results."""
        new_session, cues = engine.advance(self._session, elapsed)
        self._replace(new_session)
        for cue in cues:
            logger.debug("Cue: %s", cue.value)
            self.cue.emit(cue)
        if not new_session.is_active:
            self._poll_timer.stop()
            if new_session.phase == Phase.FINISHED:
                logger.info("Workout complete after %d rounds", new_session.current_round)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _start_polling(self) -> None:
        self._clock.start()
        self._poll_timer.start()

    def _on_poll(self) -> None:
        elapsed_ms = self._clock.restart()
        self.advance(elapsed_ms / 1000.0)

    def _replace(self, new_session: Session) -> None:
        old = self._session
        self._session = new_session
        if (old.phase, old.paused) != (new_session.phase, new_session.paused):
            self.state_changed.emit(new_session)
        if old.remaining_seconds != new_session.remaining_seconds:
            self.tick.emit(new_session)
