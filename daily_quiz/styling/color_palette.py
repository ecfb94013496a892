"""Color palette for the operator console, light and dark."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Theme(Enum):
    LIGHT = auto()
    DARK = auto()


@dataclass(frozen=True)
class ThemeColors:
    light: str
    dark: str

    def get(self, theme: Theme) -> str:
        return self.light if theme == Theme.LIGHT else self.dark


class ColorPalette:
    TEXT = ThemeColors(light="#0F172A", dark="#F1F5F9")
    BACKGROUND = ThemeColors(light="#FFFFFF", dark="#1E1E1E")
    BORDER = ThemeColors(light="#CBD5E1", dark="#555555")
    BUTTON_BG = ThemeColors(light="#F1F5F9", dark="#3A3A3A")
    BUTTON_HOVER_BG = ThemeColors(light="#E2E8F0", dark="#505050")
    ACCENT = ThemeColors(light="#2563EB", dark="#60A5FA")
