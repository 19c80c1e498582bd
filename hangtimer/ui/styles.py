"""QSS stylesheets and per-phase colours for HangTimer."""

from __future__ import annotations

from ..timer.engine import Phase

# ── phase labels + colours (background, accent) ──────────────────────────

PHASE_LABELS: dict[Phase, str] = {
    Phase.PREPARE:  "GET READY",
    Phase.HANG:     "HANG",
    Phase.REST:     "REST",
    Phase.SET_REST: "SET REST",
    Phase.FINISHED: "COMPLETE!",
}

PHASE_COLORS: dict[Phase, tuple[str, str]] = {
    Phase.PREPARE:  ("#3A3320", "#F9E2AF"),   # amber
    Phase.HANG:     ("#4A1F2A", "#FF6B6B"),   # coral
    Phase.REST:     ("#173A38", "#4ECDC4"),   # teal
    Phase.SET_REST: ("#2B2447", "#A18CD1"),   # purple
    Phase.FINISHED: ("#1E3A24", "#A6E3A1"),   # green
}

# ── default palette ──────────────────────────────────────────────────────

PALETTE: dict[str, str] = {
    "bg":           "#1A1A2E",
    "bg_secondary": "#232340",
    "surface":      "#2A2A4A",
    "accent":       "#CBA6F7",
    "accent2":      "#89B4FA",
    "text":         "#E2E2F0",
    "text_muted":   "#7A7A9A",
    "success":      "#A6E3A1",
    "danger":       "#F38BA8",
    "border":       "#313154",
}


def phase_stylesheet(phase: Phase) -> str:
    """Background + accent for the timer screen in *phase*."""
    bg, accent = PHASE_COLORS[phase]
    return (
        f"QFrame#timerScreen {{ background-color: {bg}; border-radius: 16px; }}"
        f"QLabel#phaseLabel {{ color: {accent}; }}"
        f"QLabel#countdownLabel {{ color: {accent}; }}"
    )


# ── QSS builder ───────────────────────────────────────────────────────


def build_stylesheet(palette: dict[str, str] | None = None) -> str:
    p = palette or PALETTE
    return f"""
    /* ── global ─────────────────────────────────── */
    QWidget {{
        background-color: {p['bg']};
        color: {p['text']};
        font-family: "Helvetica Neue", Arial;
        font-size: 14px;
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
        font-size: 14px;
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
        font-size: 17px;
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
        padding: 8px 16px;
        border-radius: 8px;
    }}

    QPushButton#dangerButton {{
        background-color: transparent;
        color: {p['danger']};
        border: 1px solid {p['border']};
        font-size: 13px;
        padding: 8px 16px;
        border-radius: 8px;
    }}

    QPushButton#dangerButton:hover {{
        background-color: {p['danger']};
        color: {p['bg']};
    }}

    /* ── cards ───────────────────────────────────── */
    QFrame#card {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 12px;
    }}

    QLabel#cardTitle {{
        font-size: 16px;
        font-weight: 700;
        background: transparent;
    }}

    QLabel#cardMeta {{
        font-size: 12px;
        color: {p['text_muted']};
        background: transparent;
    }}

    QLabel#badgeDone {{
        color: {p['success']};
        font-weight: 600;
        background: transparent;
    }}

    QLabel#badgeStopped {{
        color: {p['danger']};
        font-weight: 600;
        background: transparent;
    }}

    /* ── timer screen ────────────────────────────── */
    QLabel#phaseLabel {{
        font-size: 28px;
        font-weight: 800;
        letter-spacing: 2px;
        background: transparent;
    }}

    QLabel#countdownLabel {{
        font-size: 96px;
        font-weight: 700;
        background: transparent;
    }}

    QLabel#progressLabel {{
        font-size: 15px;
        color: {p['text']};
        background: transparent;
    }}

    /* ── tabs ────────────────────────────────────── */
    QTabWidget::pane {{
        border: none;
    }}

    QTabBar::tab {{
        background: transparent;
        color: {p['text_muted']};
        padding: 8px 18px;
        font-weight: 600;
    }}

    QTabBar::tab:selected {{
        color: {p['accent']};
        border-bottom: 2px solid {p['accent']};
    }}

    QSpinBox, QLineEdit {{
        background-color: {p['surface']};
        border: 1px solid {p['border']};
        border-radius: 6px;
        padding: 4px 8px;
    }}
    """
