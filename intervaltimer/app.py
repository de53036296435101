"""Main application window for the interval timer."""

from __future__ import annotations

import logging
from pathlib import Path

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import QMainWindow, QMessageBox, QVBoxLayout, QWidget

from .audio.sounds import PlaybackError, SoundManager
from .settings import Settings
from .timer.controller import TimerController
from .timer.engine import Cue, Phase, Session, TimerConfig
from .ui.settings_dialog import SettingsDialog
from .ui.styles import build_stylesheet
from .ui.timer_widget import TimerWidget


logger = logging.getLogger(__name__)

STATUS_MESSAGES: dict[Phase, str] = {
    Phase.IDLE:     "Set your intervals and press Start",
    Phase.WORKING:  "Work!",
    Phase.RESTING:  "Rest",
    Phase.FINISHED: "Workout complete!",
}

# Which bundled clip stands in when the user hasn't picked one.
CUE_FALLBACKS: dict[Cue, str] = {
    Cue.WORK_FINISHED: "work_finish",
    Cue.REST_FINISHED: "rest_finish",
    Cue.WORKOUT_COMPLETE: "workout_complete",
}

NOTICE_TIMEOUT_MS = 6000


class IntervalTimerApp(QMainWindow):
    """Main application window."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        sound_manager: SoundManager | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("Workout Timer")

        # ── settings ──────────────────────────────────────────────────
        self._settings: Settings = settings or Settings()
        self.resize(self._settings.window_width, self._settings.window_height)

        # ── controller ────────────────────────────────────────────────
        self._controller = TimerController(
            self, config=self._settings.timer_config(),
        )

        # ── sound manager ─────────────────────────────────────────────
        self._sound_manager = sound_manager or SoundManager(parent=self)
        self._sound_manager.set_volume(self._settings.sound_volume)
        self._sound_manager.set_enabled(self._settings.sound_enabled)
        self._sound_manager.playback_failed.connect(self._on_playback_failed)

        # ── central widget ────────────────────────────────────────────
        self.setStyleSheet(build_stylesheet())
        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(16, 12, 16, 12)

        self._timer_widget = TimerWidget(self._controller, self._settings, central)
        layout.addWidget(self._timer_widget)

        self.statusBar().showMessage(STATUS_MESSAGES[Phase.IDLE])

        self._build_menu_bar()
        self._apply_always_on_top(self._settings.always_on_top)

        # ── signals ───────────────────────────────────────────────────
        self._controller.state_changed.connect(self._on_state_changed)
        self._controller.cue.connect(self._on_cue)

    # ══════════════════════════════════════════════════════════════════
    #  MENU BAR
    # ══════════════════════════════════════════════════════════════════

    def _build_menu_bar(self) -> None:
        menu_bar = self.menuBar()
        app_menu = menu_bar.addMenu("Timer")

        prefs_action = QAction("Sound Settings…", self)
        prefs_action.setMenuRole(QAction.MenuRole.PreferencesRole)
        prefs_action.setShortcut(QKeySequence("Ctrl+,"))
        prefs_action.triggered.connect(self._open_settings)
        app_menu.addAction(prefs_action)

        about_action = QAction("About Workout Timer", self)
        about_action.setMenuRole(QAction.MenuRole.AboutRole)
        about_action.triggered.connect(self._show_about)
        app_menu.addAction(about_action)

        app_menu.addSeparator()

        quit_action = QAction("Quit", self)
        quit_action.setMenuRole(QAction.MenuRole.QuitRole)
        quit_action.setShortcut(QKeySequence("Ctrl+Q"))
        quit_action.triggered.connect(self._quit_with_confirm)
        app_menu.addAction(quit_action)

    def _show_about(self) -> None:
        QMessageBox.about(
            self,
            "About Workout Timer",
            "<h3>Workout Timer</h3>"
            "<p>Work / rest interval timer with audio cues.</p>"
            "<p>Space starts, pauses and resumes. Escape stops.</p>",
        )

    # ══════════════════════════════════════════════════════════════════
    #  SOUND
    # ══════════════════════════════════════════════════════════════════

    def _cue_path(self, cue: Cue, config: TimerConfig | None = None) -> Path:
        config = config or self._controller.session.config
        chosen = {
            Cue.WORK_FINISHED: config.work_finish_audio,
            Cue.REST_FINISHED: config.rest_finish_audio,
        }.get(cue)
        return self._sound_manager.resolve(chosen, CUE_FALLBACKS[cue])

    def _play(self, path: Path) -> None:
        try:
            self._sound_manager.play(path)
        except PlaybackError as exc:
            self._show_notice(str(exc))

    def _on_playback_failed(self, path: str, message: str) -> None:
        self._show_notice(f"Cannot play {Path(path).name}: {message}")

    def _show_notice(self, text: str) -> None:
        logger.warning("%s", text)
        self.statusBar().showMessage(text, NOTICE_TIMEOUT_MS)

    # ══════════════════════════════════════════════════════════════════
    #  TIMER SIGNALS
    # ══════════════════════════════════════════════════════════════════

    def _on_cue(self, cue: Cue) -> None:
        self._play(self._cue_path(cue))

    def _on_state_changed(self, session: Session) -> None:
        if session.paused:
            self.statusBar().showMessage("Paused")
        else:
            self.statusBar().showMessage(STATUS_MESSAGES[session.phase])

    # ══════════════════════════════════════════════════════════════════
    #  SETTINGS
    # ══════════════════════════════════════════════════════════════════

    def _open_settings(self) -> None:
        """Open the sound dialog and apply any changes."""

        def _preview(name: str) -> None:
            self._apply_settings()
            cue = next(c for c, fallback in CUE_FALLBACKS.items() if fallback == name)
            self._play(self._cue_path(cue, self._settings.timer_config()))

        dlg = SettingsDialog(self._settings, parent=self, sound_preview_callback=_preview)
        dlg.exec()
        self._apply_settings()

    def _apply_settings(self) -> None:
        """Push current Settings into the sound manager and window."""
        s = self._settings
        self._sound_manager.set_volume(s.sound_volume)
        self._sound_manager.set_enabled(s.sound_enabled)
        self._apply_always_on_top(s.always_on_top)

    def _apply_always_on_top(self, on_top: bool) -> None:
        if bool(self.windowFlags() & Qt.WindowType.WindowStaysOnTopHint) == on_top:
            return
        was_visible = self.isVisible()
        self.setWindowFlag(Qt.WindowType.WindowStaysOnTopHint, on_top)
        if was_visible:
            self.show()

    # ══════════════════════════════════════════════════════════════════
    #  KEYBOARD
    # ══════════════════════════════════════════════════════════════════

    def _on_space(self) -> None:
        """Start, pause, or resume the timer."""
        if self._timer_widget.is_editing_text():
            return
        self._timer_widget.start_or_toggle()

    def _on_escape(self) -> None:
        """Stop the timer (no-op when idle)."""
        if self._controller.phase != Phase.IDLE:
            self._controller.stop()

    def _quit_with_confirm(self) -> None:
        """Close, but ask first if a workout is underway."""
        if self._controller.session.is_active:
            reply = QMessageBox.question(
                self,
                "Quit Workout Timer?",
                "A workout is still running. Quit anyway?",
                QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
                QMessageBox.StandardButton.No,
            )
            if reply != QMessageBox.StandardButton.Yes:
                return
        self.close()

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        """Handle Space (start/pause) and Escape (stop) globally."""
        key = event.key()
        if key == Qt.Key.Key_Space and not event.modifiers():
            self._on_space()
            event.accept()
            return
        if key == Qt.Key.Key_Escape:
            self._on_escape()
            event.accept()
            return
        super().keyPressEvent(event)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._controller.stop()
        event.accept()
