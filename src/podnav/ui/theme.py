"""Theme system for the podnav CLI.

Central colour definitions with dark and light variants.

Usage:
    from podnav.ui import get_theme

    theme = get_theme()
    console.print(theme.success_text("Added to favorites"))
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Literal


class ThemeMode(str, Enum):
    """Available theme modes."""

    LIGHT = "light"
    DARK = "dark"
    AUTO = "auto"


@dataclass(frozen=True)
class Theme:
    """Colour theme for terminal output.

    All colours are rich-compatible colour names.
    """

    mode: str

    # Status colours
    success: str
    error: str
    warning: str
    info: str

    # Semantic colours
    primary: str  # Show and episode titles
    muted: str  # Descriptions, hints

    # Episode table
    episode_number: str
    episode_date: str
    episode_duration: str
    highlight: str  # Row of a located episode
    table_header: str
    table_border: str
    url: str

    def success_text(self, text: str) -> str:
        return f"[{self.success}]✓[/{self.success}] {text}"

    def error_text(self, text: str) -> str:
        return f"[{self.error}]✗[/{self.error}] {text}"

    def warning_text(self, text: str) -> str:
        return f"[{self.warning}]⚠[/{self.warning}] {text}"

    def info_text(self, text: str) -> str:
        return f"[{self.info}]→[/{self.info}] {text}"

    def muted_text(self, text: str) -> str:
        return f"[{self.muted}]{text}[/{self.muted}]"


DARK_THEME = Theme(
    mode="dark",
    success="green",
    error="red",
    warning="yellow",
    info="cyan",
    primary="cyan",
    muted="dim",
    episode_number="bold magenta",
    episode_date="green",
    episode_duration="white",
    highlight="bold black on yellow",
    table_header="bold cyan",
    table_border="dim",
    url="steel_blue1",
)

LIGHT_THEME = Theme(
    mode="light",
    success="green",
    error="red",
    warning="dark_orange",
    info="dark_cyan",
    primary="dark_cyan",
    muted="grey50",
    episode_number="bold dark_magenta",
    episode_date="dark_green",
    episode_duration="black",
    highlight="bold black on light_goldenrod1",
    table_header="bold dark_cyan",
    table_border="grey50",
    url="blue",
)


def detect_terminal_theme() -> Literal["light", "dark"]:
    """Guess the terminal background from COLORFGBG and PODNAV_THEME.

    Defaults to dark.
    """
    if os.environ.get("PODNAV_THEME", "").lower() == "light":
        return "light"

    # Format is "foreground;background"; 7 and up are light backgrounds
    colorfgbg = os.environ.get("COLORFGBG", "")
    parts = colorfgbg.split(";")
    if len(parts) >= 2 and parts[-1].isdigit():
        return "light" if int(parts[-1]) >= 7 else "dark"

    return "dark"


_current_theme: Theme | None = None


def set_theme(mode: ThemeMode | str) -> Theme:
    """Set and cache the current theme.

    Args:
        mode: Theme mode ('light', 'dark', or 'auto')

    Returns:
        The active Theme instance
    """
    global _current_theme

    if isinstance(mode, str):
        mode = ThemeMode(mode.lower())

    if mode == ThemeMode.AUTO:
        mode = ThemeMode(detect_terminal_theme())

    _current_theme = LIGHT_THEME if mode == ThemeMode.LIGHT else DARK_THEME
    return _current_theme


def get_theme() -> Theme:
    """Get the current theme, auto-detecting on first use."""
    if _current_theme is None:
        return set_theme(ThemeMode.AUTO)
    return _current_theme


def reset_theme() -> None:
    """Reset the theme cache, forcing re-detection on next access."""
    global _current_theme
    _current_theme = None
