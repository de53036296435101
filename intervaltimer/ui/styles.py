"""QSS stylesheet and phase colours for the interval timer."""

from __future__ import annotations

from ..timer.engine import Phase

# ── phase colours (ring gradient pairs) ─────────────────────────────────
#    Each phase maps to (primary, secondary) for the conical gradient.

PHASE_COLORS: dict[Phase, tuple[str, str]] = {
    Phase.WORKING:  ("#3BA458", "#5CC97A"),   # green
    Phase.RESTING:  ("#3877A2", "#5A9BC8"),   # blue
    Phase.FINISHED: ("#E5B842", "#F9E2AF"),   # gold
    Phase.IDLE:     ("#3D3D3D", "#4A4A4A"),   # gray
}

PAUSED_COLORS: tuple[str, str] = ("#3D3D3D", "#585B70")

PALETTE: dict[str, str] = {
    "bg":           "#1A1A2E",
    "bg_secondary": "#232340",
    "surface":      "#2A2A4A",
    "accent":       "#3BA458",
    "accent2":      "#5CC97A",
    "text":         "#E2E2F0",
    "text_muted":   "#7A7A9A",
    "danger":       "#F38BA8",
    "border":       "#313154",
}


def colors_for(phase: Phase, paused: bool = False) -> tuple[str, str]:
    if paused:
        return PAUSED_COLORS
    return PHASE_COLORS.get(phase, PHASE_COLORS[Phase.IDLE])


# ── QSS builder ───────────────────────────────────────────────────────


def build_stylesheet(palette: dict[str, str] | None = None) -> str:
    p = palette or PALETTE
    return f"""
    /* ── global ─────────────────────────────────── */
    QWidget {{
        background-color: {p['bg']};
        color: {p['text']};
        font-size: 15px;
    }}

    QMainWindow {{
        background-color: {p['bg']};
    }}

    /* ── buttons ─────────────────────────────────── */
    QPushButton {{
        background-color: {p['bg_secondary']};
        color: {p['text']};
        border: 1px solid {p['border']};
        border-radius: 10px;
        padding: 10px 24px;
        font-weight: 600;
    }}

    QPushButton:hover {{
        background-color: {p['surface']};
        border-color: {p['accent']};
    }}

    QPushButton#primaryButton {{
        background-color: {p['accent']};
        color: {p['bg']};
        border: none;
        font-size: 20px;
        padding: 14px 40px;
        border-radius: 12px;
        font-weight: 700;
    }}

    QPushButton#primaryButton:hover {{
        background-color: {p['accent2']};
    }}

    QPushButton#secondaryButton {{
        background-color: transparent;
        color: {p['text_muted']};
        border: 1px solid {p['border']};
        font-size: 13px;
        padding: 6px 12px;
        border-radius: 8px;
    }}

    QPushButton#dangerButton {{
        background-color: transparent;
        color: {p['danger']};
        border: 1px solid {p['border']};
        font-size: 20px;
        padding: 14px 28px;
        border-radius: 12px;
    }}

    QPushButton#dangerButton:hover {{
        background-color: {p['danger']};
        color: {p['bg']};
        border-color: {p['danger']};
    }}

    /* ── inputs ──────────────────────────────────── */
    QSpinBox, QLineEdit {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 8px;
        padding: 6px 10px;
    }}

    QSpinBox[invalid="true"], QLineEdit[invalid="true"] {{
        border-color: {p['danger']};
    }}

    QLabel#errorLabel {{
        color: {p['danger']};
        font-size: 13px;
    }}

    /* ── frame / card ────────────────────────────── */
    QFrame#card {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 12px;
    }}

    /* ── status bar ──────────────────────────────── */
    QStatusBar {{
        background-color: {p['bg']};
        color: {p['text_muted']};
        font-size: 12px;
        border-top: 1px solid {p['border']};
    }}
    """
