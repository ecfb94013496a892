"""Qt UI components for the operator console."""

from .dialog_helpers import (
    confirm_replace_active_quiz,
    confirm_replace_bank,
    show_error,
    show_info,
    show_warning,
)
from .operator_main_window import OperatorMainWindow

__all__ = [
    "OperatorMainWindow",
    "confirm_replace_active_quiz",
    "confirm_replace_bank",
    "show_error",
    "show_info",
    "show_warning",
]
