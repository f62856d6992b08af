"""Floating message that fades in and out over its parent.

Usage::

    toast = Toast(parent_widget)
    toast.show_message("Countdown time set!")
"""

from __future__ import annotations

from PyQt6.QtCore import Qt, QTimer, QPropertyAnimation, QEasingCurve
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QLabel, QGraphicsOpacityEffect,
)

from .styles import PALETTE


def _hex_to_rgba(hex_color: str, alpha: int) -> str:
    """Convert '#RRGGBB' + 0-255 alpha to 'rgba(R, G, B, A)'."""
    h = hex_color.lstrip("#")
    r, g, b = int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
    return f"rgba({r}, {g}, {b}, {alpha})"


class Toast(QWidget):
    """A transient notification shown near the top of its parent."""

    DISPLAY_MS = 3000
    FADE_IN_MS = 250
    FADE_OUT_MS = 600

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)
        self.setFixedWidth(340)
        self.hide()

        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 12, 20, 12)
        self._label = QLabel("", self)
        self._label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._label.setWordWrap(True)
        layout.addWidget(self._label)

        self.setStyleSheet(
            "Toast {"
            f"  background-color: {_hex_to_rgba(PALETTE['bg_secondary'], 220)};"
            f"  border: 1px solid {_hex_to_rgba(PALETTE['accent'], 100)};"
            "  border-radius: 12px;"
            "}"
        )
        self._label.setStyleSheet(
            f"font-size: 14px; font-weight: 600; color: {PALETTE['text']};"
            "background: transparent; border: none;"
        )

        self._opacity = QGraphicsOpacityEffect(self)
        self.setGraphicsEffect(self._opacity)
        self._opacity.setOpacity(0.0)

        self._fade_anim = QPropertyAnimation(self._opacity, b"opacity", self)

        self._dismiss_timer = QTimer(self)
        self._dismiss_timer.setSingleShot(True)
        self._dismiss_timer.timeout.connect(self._fade_out)

    # ── public API ───────────────────────────────────────────────────────

    @property
    def text(self) -> str:
        return self._label.text()

    def show_message(self, text: str, duration_ms: int | None = None) -> None:
        """Show *text*; a newer message replaces the one on screen."""
        self._label.setText(text)
        self.adjustSize()
        self.reposition()
        self.show()
        self.raise_()

        self._animate(0.0, 1.0, self.FADE_IN_MS, QEasingCurve.Type.OutCubic)
        self._fade_anim.start()
        self._dismiss_timer.start(duration_ms or self.DISPLAY_MS)

    # ── internal ─────────────────────────────────────────────────────────

    def _animate(
        self, start: float, end: float, ms: int, curve: QEasingCurve.Type,
    ) -> None:
        self._fade_anim.stop()
        try:
            self._fade_anim.finished.disconnect()
        except TypeError:
            pass
        self._fade_anim.setDuration(ms)
        self._fade_anim.setStartValue(start)
        self._fade_anim.setEndValue(end)
        self._fade_anim.setEasingCurve(curve)

    def _fade_out(self) -> None:
        self._animate(1.0, 0.0, self.FADE_OUT_MS, QEasingCurve.Type.InCubic)
        self._fade_anim.finished.connect(self.hide)
        self._fade_anim.start()

    def reposition(self) -> None:
        """Centre horizontally near the top of the parent widget."""
        if self.parent():
            pw = self.parent().width()
            x = (pw - self.width()) // 2
            self.move(x, 40)
