"""Main timer card.

Layout (top → bottom):
    - Configuration form (workout / rest / rounds + two cue files)
    - Inline configuration error label
    - ProgressRing (large, centred)
    - Control row: Stop + Start/Pause/Resume
"""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QFormLayout,
    QLabel, QPushButton, QLineEdit, QSpinBox, QFrame, QFileDialog,
)

from ..settings import MAX_REST_SECONDS, MAX_ROUNDS, MAX_WORKOUT_SECONDS, Settings
from ..timer.controller import TimerController
from ..timer.engine import ConfigurationError, Phase, Session
from .progress_ring import ProgressRing


PHASE_LABELS: dict[Phase, str] = {
    Phase.IDLE:     "READY",
    Phase.WORKING:  "WORKOUT",
    Phase.RESTING:  "REST",
    Phase.FINISHED: "DONE!",
}

AUDIO_FILTER = "Audio files (*.wav *.mp3 *.ogg *.flac *.m4a *.aac);;All files (*)"


def format_remaining(seconds: int) -> str:
    """``mm:ss`` for the centre of the ring."""
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


def phase_label(session: Session) -> str:
    if session.paused:
        return "PAUSED"
    return PHASE_LABELS[session.phase]


def round_text(session: Session) -> str:
    total = session.config.rounds
    if session.phase == Phase.IDLE:
        return f"{total} rounds"
    return f"Round {session.current_round}/{total}"


class TimerWidget(QWidget):
    """Configuration fields, countdown ring and Start/Stop controls."""

    def __init__(
        self,
        controller: TimerController,
        settings: Settings,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self._settings = settings
        self._build_ui()
        self._populate()
        self._connect_signals()
        self._on_state_changed(controller.session)

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        card = QFrame(self)
        card.setObjectName("card")
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(24, 20, 24, 24)
        layout.setSpacing(10)

        # ── configuration form ───────────────────────────────────────
        form = QFormLayout()
        form.setHorizontalSpacing(16)
        form.setVerticalSpacing(8)

        self._workout_spin = QSpinBox(card)
        self._workout_spin.setRange(0, MAX_WORKOUT_SECONDS)
        self._workout_spin.setSuffix(" s")
        form.addRow("Workout:", self._workout_spin)

        self._rest_spin = QSpinBox(card)
        self._rest_spin.setRange(0, MAX_REST_SECONDS)
        self._rest_spin.setSuffix(" s")
        form.addRow("Rest:", self._rest_spin)

        self._rounds_spin = QSpinBox(card)
        self._rounds_spin.setRange(0, MAX_ROUNDS)
        form.addRow("Rounds:", self._rounds_spin)

        self._work_audio_edit, self._work_audio_row = self._audio_row(card, "Work-finish cue")
        form.addRow("Work cue:", self._work_audio_row)

        self._rest_audio_edit, self._rest_audio_row = self._audio_row(card, "Rest-finish cue")
        form.addRow("Rest cue:", self._rest_audio_row)

        layout.addLayout(form)

        self._field_widgets: dict[str, QSpinBox] = {
            "workout_duration": self._workout_spin,
            "rest_duration": self._rest_spin,
            "rounds": self._rounds_spin,
        }

        self._error_label = QLabel("", card)
        self._error_label.setObjectName("errorLabel")
        self._error_label.setWordWrap(True)
        self._error_label.setVisible(False)
        layout.addWidget(self._error_label)

        # ── ring ─────────────────────────────────────────────────────
        ring_row = QHBoxLayout()
        ring_row.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._ring = ProgressRing(card)
        ring_row.addWidget(self._ring)
        layout.addLayout(ring_row)

        # ── controls ─────────────────────────────────────────────────
        btn_row = QHBoxLayout()
        btn_row.setSpacing(12)
        btn_row.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._stop_btn = QPushButton("Stop", card)
        self._stop_btn.setObjectName("dangerButton")

        self._start_pause_btn = QPushButton("Start", card)
        self._start_pause_btn.setObjectName("primaryButton")

        btn_row.addWidget(self._stop_btn)
        btn_row.addWidget(self._start_pause_btn)
        layout.addLayout(btn_row)

    def _audio_row(self, parent: QWidget, placeholder: str) -> tuple[QLineEdit, QWidget]:
        row = QWidget(parent)
        h = QHBoxLayout(row)
        h.setContentsMargins(0, 0, 0, 0)
        h.setSpacing(6)
        edit = QLineEdit(row)
        edit.setPlaceholderText(f"{placeholder} (built-in)")
        browse = QPushButton("Browse…", row)
        browse.setObjectName("secondaryButton")
        browse.clicked.connect(lambda: self._browse_into(edit))
        h.addWidget(edit)
        h.addWidget(browse)
        return edit, row

    def _populate(self) -> None:
        s = self._settings
        self._workout_spin.setValue(s.workout_duration)
        self._rest_spin.setValue(s.rest_duration)
        self._rounds_spin.setValue(s.rounds)
        self._work_audio_edit.setText(s.work_finish_audio)
        self._rest_audio_edit.setText(s.rest_finish_audio)

    # ── signals ───────────────────────────────────────────────────────────

    def _connect_signals(self) -> None:
        self._start_pause_btn.clicked.connect(self.start_or_toggle)
        self._stop_btn.clicked.connect(self._controller.stop)

        for spin in self._field_widgets.values():
            spin.valueChanged.connect(self._on_form_changed)
        self._work_audio_edit.textChanged.connect(self._on_form_changed)
        self._rest_audio_edit.textChanged.connect(self._on_form_changed)

        self._controller.tick.connect(self._refresh_display)
        self._controller.state_changed.connect(self._on_state_changed)
        self._controller.configuration_error.connect(self._on_configuration_error)

    # ── slots ─────────────────────────────────────────────────────────────

    def start_or_toggle(self) -> None:
        """Start from IDLE/FINISHED, otherwise pause or resume."""
        session = self._controller.session
        if session.is_active:
            self._controller.toggle_pause()
            return
        self._clear_error()
        self._controller.start(self._settings.timer_config())

    def _on_form_changed(self) -> None:
        s = self._settings
        s.workout_duration = self._workout_spin.value()
        s.rest_duration = self._rest_spin.value()
        s.rounds = self._rounds_spin.value()
        s.work_finish_audio = self._work_audio_edit.text().strip()
        s.rest_finish_audio = self._rest_audio_edit.text().strip()
        self._clear_error()
        if self._controller.phase == Phase.IDLE:
            self._refresh_display(self._controller.session)

    def _on_configuration_error(self, error: ConfigurationError) -> None:
        self._error_label.setText(str(error))
        self._error_label.setVisible(True)
        widget = self._field_widgets.get(error.field)
        if widget is not None:
            self._set_invalid(widget, True)
            widget.setFocus()

    def _on_state_changed(self, session: Session) -> None:
        if session.is_running:
            self._start_pause_btn.setText("Pause")
        elif session.paused:
            self._start_pause_btn.setText("Resume")
        elif session.phase == Phase.FINISHED:
            self._start_pause_btn.setText("Again")
        else:
            self._start_pause_btn.setText("Start")

        self._stop_btn.setVisible(session.phase != Phase.IDLE)
        self._set_form_enabled(not session.is_active)
        self._ring.apply_state(session.phase, session.paused)
        self._refresh_display(session)

    def _refresh_display(self, session: Session) -> None:
        if session.phase == Phase.IDLE:
            remaining = self._settings.workout_duration
            preview = Session(config=self._settings.timer_config())
            self._ring.set_round_text(round_text(preview))
        else:
            remaining = session.remaining_seconds
            self._ring.set_round_text(round_text(session))
        self._ring.set_time_text(format_remaining(remaining))
        self._ring.set_state_label(phase_label(session))
        self._ring.set_percent(session.percent_complete)

    # ── helpers ───────────────────────────────────────────────────────────

    def _browse_into(self, edit: QLineEdit) -> None:
        path, _ = QFileDialog.getOpenFileName(
            self, "Choose audio cue", edit.text(), AUDIO_FILTER,
        )
        if path:
            edit.setText(path)

    def _set_form_enabled(self, enabled: bool) -> None:
        for spin in self._field_widgets.values():
            spin.setEnabled(enabled)
        self._work_audio_row.setEnabled(enabled)
        self._rest_audio_row.setEnabled(enabled)

    def _clear_error(self) -> None:
        self._error_label.setVisible(False)
        self._error_label.setText("")
        for spin in self._field_widgets.values():
            self._set_invalid(spin, False)

    @staticmethod
    def _set_invalid(widget: QWidget, invalid: bool) -> None:
        widget.setProperty("invalid", invalid)
        style = widget.style()
        if style is not None:
            style.unpolish(widget)
            style.polish(widget)

    def is_editing_text(self) -> bool:
        """True when a path field has keyboard focus."""
        return self._work_audio_edit.hasFocus() or self._rest_audio_edit.hasFocus()
