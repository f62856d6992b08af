"""QSS stylesheet and display colours for MultiTimer."""

from __future__ import annotations

from ..timer.engine import TimerMode, PomodoroPhase

# ── palette ──────────────────────────────────────────────────────────────

PALETTE: dict[str, str] = {
    "bg":           "#1A1A2E",
    "bg_secondary": "#232340",
    "surface":      "#2A2A4A",
    "accent":       "#CBA6F7",
    "accent2":      "#89B4FA",
    "text":         "#E2E2F0",
    "text_muted":   "#7A7A9A",
    "success":      "#A6E3A1",
    "warning":      "#F9E2AF",
    "danger":       "#F38BA8",
    "border":       "#313154",
}

# ── clock-face colours per Pomodoro phase ────────────────────────────────

PHASE_COLORS: dict[PomodoroPhase, str] = {
    PomodoroPhase.FOCUS:       "#FF6B6B",   # warm coral
    PomodoroPhase.SHORT_BREAK: "#4ECDC4",   # cool teal
    PomodoroPhase.LONG_BREAK:  "#A18CD1",   # calm purple
}


def time_color(
    mode: TimerMode,
    phase: PomodoroPhase,
    running: bool,
    palette: dict[str, str] | None = None,
) -> str:
    """Colour of the big time label for the given engine situation."""
    p = palette or PALETTE
    if not running:
        return p["text_muted"]
    if mode == TimerMode.POMODORO:
        return PHASE_COLORS[phase]
    return p["text"]


# ── QSS builder ───────────────────────────────────────────────────────


def build_stylesheet(palette: dict[str, str] | None = None) -> str:
    p = palette or PALETTE
    return f"""
    QWidget {{
        background-color: {p['bg']};
        color: {p['text']};
        font-family: "Inter", "Helvetica Neue", Arial;
        font-size: 14px;
    }}

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

    QPushButton:disabled {{
        color: {p['text_muted']};
        border-color: {p['bg_secondary']};
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

    QSpinBox {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 6px;
        padding: 4px 8px;
    }}

    QTabBar::tab {{
        background-color: transparent;
        color: {p['text_muted']};
        padding: 10px 24px;
        border: none;
        border-bottom: 2px solid transparent;
        font-weight: 600;
    }}

    QTabBar::tab:selected {{
        color: {p['accent']};
        border-bottom: 2px solid {p['accent']};
    }}

    QListWidget {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 8px;
        font-family: "Menlo", "DejaVu Sans Mono", monospace;
    }}

    QFrame#card {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 12px;
    }}

    QLabel#timeLabel {{
        font-family: "Menlo", "DejaVu Sans Mono", monospace;
        font-size: 56px;
        font-weight: 700;
        background: transparent;
    }}

    QLabel#phaseLabel {{
        font-size: 15px;
        font-weight: 700;
        letter-spacing: 1px;
        color: {p['accent']};
        background: transparent;
    }}

    QLabel#sessionLabel {{
        font-size: 12px;
        color: {p['text_muted']};
        background: transparent;
    }}

    QStatusBar {{
        background-color: {p['bg']};
        color: {p['text_muted']};
        font-size: 12px;
        border-top: 1px solid {p['border']};
    }}
    """
