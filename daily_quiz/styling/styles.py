"""Centralized styles for the operator console."""

from .color_palette import ColorPalette, Theme


class Styles:
    """Helper class to generate Qt stylesheets based on the current theme."""

    @staticmethod
    def get_main_window_style(theme: Theme = Theme.LIGHT) -> str:
        return f"""
            QMainWindow, QWidget {{
                background-color: {ColorPalette.BACKGROUND.get(theme)};
                color: {ColorPalette.TEXT.get(theme)};
                font-family: 'Segoe UI', 'Roboto', sans-serif;
                font-size: 14px;
            }}
            QPushButton {{
                background-color: {ColorPalette.BUTTON_BG.get(theme)};
                border: 1px solid {ColorPalette.BORDER.get(theme)};
                border-radius: 4px;
                padding: 6px 12px;
            }}
            QPushButton:hover {{
                background-color: {ColorPalette.BUTTON_HOVER_BG.get(theme)};
            }}
            QLineEdit, QSpinBox {{
                border: 1px solid {ColorPalette.BORDER.get(theme)};
                border-radius: 4px;
                padding: 4px;
            }}
            QListWidget, QGroupBox {{
                border: 1px solid {ColorPalette.BORDER.get(theme)};
                border-radius: 4px;
            }}
        """

    @staticmethod
    def get_large_label_style() -> str:
        return "font-size: 16pt; font-weight: bold;"

    @staticmethod
    def get_status_label_style(theme: Theme = Theme.LIGHT) -> str:
        return f"font-size: 12pt; color: {ColorPalette.ACCENT.get(theme)};"
