from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QGuiApplication, QPalette
from PySide6.QtWidgets import QApplication

from tasklist.domain.enums import Theme

DARK_COLORS = {
    QPalette.Window: "#0F172A",
    QPalette.WindowText: "#E6EDF3",
    QPalette.Base: "#111827",
    QPalette.AlternateBase: "#1B2230",
    QPalette.Text: "#E6EDF3",
    QPalette.Button: "#202A3B",
    QPalette.ButtonText: "#E6EDF3",
    QPalette.ToolTipBase: "#1B2230",
    QPalette.ToolTipText: "#E6EDF3",
    QPalette.Highlight: "#2563EB",
    QPalette.HighlightedText: "#FFFFFF",
}

LIGHT_COLORS = {
    QPalette.Window: "#F8FAFC",
    QPalette.WindowText: "#0F172A",
    QPalette.Base: "#FFFFFF",
    QPalette.AlternateBase: "#F1F5F9",
    QPalette.Text: "#0F172A",
    QPalette.Button: "#E2E8F0",
    QPalette.ButtonText: "#0F172A",
    QPalette.ToolTipBase: "#FFFFFF",
    QPalette.ToolTipText: "#0F172A",
    QPalette.Highlight: "#2563EB",
    QPalette.HighlightedText: "#FFFFFF",
}


def apply_palette(app: QApplication, theme: Theme) -> None:
    colors = DARK_COLORS if theme == Theme.DARK else LIGHT_COLORS
    palette = QPalette()
    for role, value in colors.items():
        palette.setColor(role, QColor(value))
    app.setPalette(palette)


def system_theme() -> Theme:
    hints = QGuiApplication.styleHints()
    if hints.colorScheme() == Qt.ColorScheme.Dark:
        return Theme.DARK
    return Theme.LIGHT
