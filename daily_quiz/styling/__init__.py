"""Qt stylesheets and colors for the DailyQuiz operator console."""

from .color_palette import ColorPalette, Theme
from .styles import Styles

__all__ = ["ColorPalette", "Styles", "Theme"]
