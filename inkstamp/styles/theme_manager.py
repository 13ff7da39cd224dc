"""
Theme management and styling for the editor.
"""
from PyQt5.QtWidgets import QWidget

from .models import ThemeColors


class ThemeManager:
    """Holds the editor palettes and turns them into stylesheets."""

    LIGHT_THEME = ThemeColors(
        bg_primary="#ffffff",
        bg_secondary="#f5f6f8",
        bg_tertiary="#e4e7eb",
        text_primary="#1f2933",
        text_muted="#7b8794",
        border="#d2d6dc",
        accent_primary="#2563eb",
        accent_hover="#1d4ed8",
        canvas_bg="#e5e7eb",
        selection_ring="#2563eb",
        handle_fill="#ffffff",
        handle_border="#2563eb",
        element_outline="rgba(37, 99, 235, 80)",
        error="#dc2626",
        success="#16a34a",
    )

    DARK_THEME = ThemeColors(
        bg_primary="#2e2e2e",
        bg_secondary="#3e3e3e",
        bg_tertiary="#4e4e4e",
        text_primary="#f0f0f0",
        text_muted="#8899AA",
        border="#555555",
        accent_primary="#4a9eff",
        accent_hover="#3a8eef",
        canvas_bg="#1e1e1e",
        selection_ring="#4a9eff",
        handle_fill="#2e2e2e",
        handle_border="#4a9eff",
        element_outline="rgba(74, 158, 255, 90)",
        error="#ff6b6b",
        success="#51cf66",
    )

    @classmethod
    def get_theme_colors(cls, dark_mode: bool = False) -> ThemeColors:
        return cls.DARK_THEME if dark_mode else cls.LIGHT_THEME

    @classmethod
    def apply_theme(cls, widget: QWidget, dark_mode: bool = False) -> None:
        """
        Apply a theme to a widget and its children.

        Args:
            widget: Widget to style
            dark_mode: Whether to use the dark palette
        """
        widget.setStyleSheet(cls._generate_stylesheet(cls.get_theme_colors(dark_mode)))

    @classmethod
    def _generate_stylesheet(cls, theme: ThemeColors) -> str:
        return f"""
            QMainWindow, QWidget {{
                background-color: {theme.bg_primary};
                color: {theme.text_primary};
            }}

            QPushButton, QToolButton {{
                background-color: {theme.bg_tertiary};
                color: {theme.text_primary};
                border: none;
                border-radius: 6px;
                padding: 6px 12px;
            }}
            QPushButton:hover, QToolButton:hover {{
                background-color: {theme.bg_secondary};
            }}
            QPushButton:disabled, QToolButton:disabled {{
                color: {theme.text_muted};
            }}
            QToolButton:checked {{
                background-color: {theme.accent_primary};
                color: white;
            }}
            QPushButton#SaveButton {{
                background-color: {theme.accent_primary};
                color: white;
                font-weight: bold;
            }}
            QPushButton#SaveButton:hover {{
                background-color: {theme.accent_hover};
            }}

            QPlainTextEdit, QComboBox, QListWidget {{
                background-color: {theme.bg_secondary};
                border: 1px solid {theme.border};
                border-radius: 6px;
                padding: 4px;
            }}
            QPlainTextEdit:focus, QComboBox:focus {{
                border: 1px solid {theme.accent_primary};
            }}

            QLabel {{
                background-color: transparent;
            }}
            QLabel#SectionLabel {{
                color: {theme.text_muted};
                font-weight: bold;
            }}
            QLabel#ErrorLabel {{
                color: {theme.error};
                font-size: 14px;
            }}

            #TopFrame {{
                border-bottom: 1px solid {theme.border};
            }}
            #ToolPanel {{
                background-color: {theme.bg_secondary};
                border-right: 1px solid {theme.border};
            }}
            QScrollArea {{
                background-color: {theme.canvas_bg};
                border: none;
            }}
        """
