"""Sound settings dialog.

A modal dialog for cue volume, muting, and a preview button per cue.
Changes are written straight into the shared ``Settings`` instance; the
main window pushes them into the sound manager when the dialog closes.
"""

from __future__ import annotations

from typing import Callable

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QFormLayout,
    QLabel, QSlider, QCheckBox, QPushButton, QWidget,
)

from ..settings import Settings


PREVIEW_CUES: tuple[tuple[str, str], ...] = (
    ("work_finish", "Work"),
    ("rest_finish", "Rest"),
    ("workout_complete", "Done"),
)


class SettingsDialog(QDialog):
    """Modal dialog for sound preferences."""

    def __init__(
        self,
        settings: Settings,
        parent: QWidget | None = None,
        *,
        sound_preview_callback: Callable[[str], None] | None = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Sound Settings")
        self.setMinimumWidth(380)
        self.setModal(True)

        self._settings = settings
        self._sound_preview = sound_preview_callback

        self._build_ui()
        self._populate()

    # ══════════════════════════════════════════════════════════════════
    #  BUILD UI
    # ══════════════════════════════════════════════════════════════════

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(24, 20, 24, 20)
        root.setSpacing(16)

        form = QFormLayout()
        form.setHorizontalSpacing(20)
        form.setVerticalSpacing(10)

        self._sound_cb = QCheckBox("Play cues")
        self._sound_cb.toggled.connect(self._on_toggle_changed)
        form.addRow("", self._sound_cb)

        vol_row = QHBoxLayout()
        vol_row.setSpacing(10)
        self._vol_slider = QSlider(Qt.Orientation.Horizontal)
        self._vol_slider.setRange(0, 100)
        self._vol_slider.setTickInterval(10)
        self._vol_label = QLabel("70%")
        self._vol_label.setMinimumWidth(36)
        self._vol_slider.valueChanged.connect(self._on_volume_changed)
        vol_row.addWidget(self._vol_slider)
        vol_row.addWidget(self._vol_label)

        vol_wrapper = QWidget()
        vol_wrapper.setLayout(vol_row)
        form.addRow("Volume:", vol_wrapper)

        preview_row = QHBoxLayout()
        preview_row.setSpacing(8)
        self._preview_buttons: dict[str, QPushButton] = {}
        for name, label in PREVIEW_CUES:
            btn = QPushButton(label)
            btn.setObjectName("secondaryButton")
            btn.clicked.connect(lambda _checked=False, n=name: self._preview(n))
            self._preview_buttons[name] = btn
            preview_row.addWidget(btn)

        preview_wrapper = QWidget()
        preview_wrapper.setLayout(preview_row)
        form.addRow("Preview:", preview_wrapper)

        self._aot_cb = QCheckBox("Keep window on top")
        self._aot_cb.toggled.connect(self._on_toggle_changed)
        form.addRow("", self._aot_cb)

        root.addLayout(form)

        root.addStretch()
        btn_row = QHBoxLayout()
        btn_row.addStretch()
        close_btn = QPushButton("Close")
        close_btn.setObjectName("secondaryButton")
        close_btn.clicked.connect(self.accept)
        btn_row.addWidget(close_btn)
        root.addLayout(btn_row)

    def _populate(self) -> None:
        s = self._settings
        widgets = (self._sound_cb, self._vol_slider, self._aot_cb)
        for w in widgets:
            w.blockSignals(True)
        self._sound_cb.setChecked(s.sound_enabled)
        self._vol_slider.setValue(s.sound_volume)
        self._vol_label.setText(f"{s.sound_volume}%")
        self._aot_cb.setChecked(s.always_on_top)
        for w in widgets:
            w.blockSignals(False)

    # ══════════════════════════════════════════════════════════════════
    #  CHANGE HANDLERS
    # ══════════════════════════════════════════════════════════════════

    def _on_toggle_changed(self) -> None:
        self._settings.sound_enabled = self._sound_cb.isChecked()
        self._settings.always_on_top = self._aot_cb.isChecked()

    def _on_volume_changed(self, value: int) -> None:
        self._vol_label.setText(f"{value}%")
        self._settings.sound_volume = value

    def _preview(self, name: str) -> None:
        if self._sound_preview:
            self._sound_preview(name)

    @property
    def settings(self) -> Settings:
        return self._settings
