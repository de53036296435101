"""Circular progress ring widget rendered with QPainter.

- Fills clockwise as the current phase progresses.
- Colour-coded by phase (work=green, rest=blue, idle/paused=gray).
- Shows MM:SS at the centre plus a phase label and round counter.
- Colour changes cross-fade over half a second.
"""

from __future__ import annotations

from PyQt6.QtCore import Qt, QRectF, QVariantAnimation, QEasingCurve
from PyQt6.QtGui import QPainter, QPen, QColor, QConicalGradient, QFont
from PyQt6.QtWidgets import QWidget

from ..timer.engine import Phase
from .styles import PALETTE, colors_for


def _lerp_color(c1: QColor, c2: QColor, t: float) -> QColor:
    """Linearly interpolate between two QColors."""
    t = max(0.0, min(1.0, t))
    return QColor(
        int(c1.red()   + (c2.red()   - c1.red())   * t),
        int(c1.green() + (c2.green() - c1.green()) * t),
        int(c1.blue()  + (c2.blue()  - c1.blue())  * t),
        int(c1.alpha() + (c2.alpha() - c1.alpha()) * t),
    )


class ProgressRing(QWidget):
    """Custom-painted circular countdown ring."""

    RING_DIAMETER = 260
    RING_THICKNESS = 14

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setMinimumSize(self.RING_DIAMETER + 40, self.RING_DIAMETER + 40)

        self._percent: float = 0.0
        self._time_text: str = "00:00"
        self._state_label: str = "READY"
        self._round_text: str = ""
        self._phase: Phase = Phase.IDLE
        self._paused: bool = False

        primary, secondary = colors_for(Phase.IDLE)
        self._primary_color = QColor(primary)
        self._secondary_color = QColor(secondary)
        self._old_primary = QColor(primary)
        self._old_secondary = QColor(secondary)
        self._target_primary = QColor(primary)
        self._target_secondary = QColor(secondary)

        self._text_color = QColor(PALETTE["text"])
        self._muted_color = QColor(PALETTE["text_muted"])

        self._color_anim = QVariantAnimation(self)
        self._color_anim.setDuration(500)
        self._color_anim.setStartValue(0.0)
        self._color_anim.setEndValue(1.0)
        self._color_anim.setEasingCurve(QEasingCurve.Type.InOutQuad)
        self._color_anim.valueChanged.connect(self._on_color_anim)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC API
    # ══════════════════════════════════════════════════════════════════

    def set_percent(self, pct: float) -> None:
        self._percent = max(0.0, min(1.0, pct))
        self.update()

    def set_time_text(self, text: str) -> None:
        self._time_text = text
        self.update()

    def set_state_label(self, text: str) -> None:
        self._state_label = text
        self.update()

    def set_round_text(self, text: str) -> None:
        self._round_text = text
        self.update()

    def apply_state(self, phase: Phase, paused: bool = False) -> None:
        """Cross-fade to the colours for *phase*."""
        if (phase, paused) == (self._phase, self._paused):
            return
        self._phase = phase
        self._paused = paused

        primary_hex, secondary_hex = colors_for(phase, paused)
        self._old_primary = QColor(self._primary_color)
        self._old_secondary = QColor(self._secondary_color)
        self._target_primary = QColor(primary_hex)
        self._target_secondary = QColor(secondary_hex)
        self._color_anim.stop()
        self._color_anim.start()

    @property
    def percent(self) -> float:
        return self._percent

    @property
    def time_text(self) -> str:
        return self._time_text

    @property
    def state_label(self) -> str:
        return self._state_label

    @property
    def round_text(self) -> str:
        return self._round_text

    # ── animation slot ────────────────────────────────────────────────

    def _on_color_anim(self, value: object) -> None:
        t = float(value)  # type: ignore[arg-type]
        self._primary_color = _lerp_color(self._old_primary, self._target_primary, t)
        self._secondary_color = _lerp_color(self._old_secondary, self._target_secondary, t)
        self.update()

    # ══════════════════════════════════════════════════════════════════
    #  PAINTING
    # ══════════════════════════════════════════════════════════════════

    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        w = self.width()
        h = self.height()
        cx, cy = w / 2, h / 2
        diameter = max(100, min(w, h) - 40)
        radius = diameter / 2
        thickness = self.RING_THICKNESS

        ring_rect = QRectF(cx - radius, cy - radius, diameter, diameter)

        # ── background track ─────────────────────────────────────────
        track_color = QColor(self._primary_color)
        track_color.setAlpha(45)
        track_pen = QPen(track_color, thickness, Qt.PenStyle.SolidLine)
        track_pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        painter.setPen(track_pen)
        painter.drawEllipse(ring_rect)

        # ── active arc ───────────────────────────────────────────────
        if self._percent > 0.001:
            gradient = QConicalGradient(cx, cy, 90)
            gradient.setColorAt(0.0, self._primary_color)
            gradient.setColorAt(0.5, self._secondary_color)
            gradient.setColorAt(1.0, self._primary_color)

            arc_pen = QPen(gradient, thickness, Qt.PenStyle.SolidLine)
            arc_pen.setCapStyle(Qt.PenCapStyle.RoundCap)
            painter.setPen(arc_pen)

            # Qt arcs: start at 12 o'clock (90*16), go clockwise (negative)
            painter.drawArc(ring_rect, 90 * 16, -int(self._percent * 360 * 16))

        # ── centre text: time ────────────────────────────────────────
        time_font = QFont()
        time_font.setPixelSize(56)
        time_font.setWeight(QFont.Weight.Bold)
        painter.setFont(time_font)
        painter.setPen(self._text_color)
        time_rect = QRectF(ring_rect)
        time_rect.moveTop(time_rect.top() - 16)
        painter.drawText(time_rect, Qt.AlignmentFlag.AlignCenter, self._time_text)

        # ── centre text: phase label ─────────────────────────────────
        label_font = QFont()
        label_font.setPixelSize(14)
        label_font.setWeight(QFont.Weight.DemiBold)
        label_font.setLetterSpacing(QFont.SpacingType.AbsoluteSpacing, 3)
        painter.setFont(label_font)
        label_color = QColor(self._primary_color).lighter(140)
        painter.setPen(label_color)
        label_rect = QRectF(ring_rect)
        label_rect.moveTop(label_rect.top() + 32)
        painter.drawText(label_rect, Qt.AlignmentFlag.AlignCenter, self._state_label)

        # ── centre text: round indicator ─────────────────────────────
        round_font = QFont()
        round_font.setPixelSize(13)
        painter.setFont(round_font)
        painter.setPen(self._muted_color)
        round_rect = QRectF(ring_rect)
        round_rect.moveTop(round_rect.top() + 58)
        painter.drawText(round_rect, Qt.AlignmentFlag.AlignCenter, self._round_text)

        painter.end()
