"""
Theme resolution and colour palette for the panel.
"""

import os
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from .constants import ACCENT_COLORS
from .models import AccentColor, AppSettings, BackgroundStyle, Theme

SYSTEM_THEME_ENV = "EMAIL_ASSISTANT_SYSTEM_THEME"

SystemThemeProvider = Callable[[], Theme]


def detect_system_theme(environ: Optional[Mapping[str, str]] = None) -> Theme:
    """
    Best guess at the platform light/dark preference.

    Order: explicit override in EMAIL_ASSISTANT_SYSTEM_THEME, then the
    COLORFGBG hint set by many terminals ("fg;bg", bg 0-6 or 8 is dark),
    then light.
    """
    env = os.environ if environ is None else environ

    override = env.get(SYSTEM_THEME_ENV, "").strip().lower()
    if override in (Theme.LIGHT.value, Theme.DARK.value):
        return Theme(override)

    colorfgbg = env.get("COLORFGBG", "")
    if colorfgbg:
        bg = colorfgbg.split(";")[-1]
        if bg.isdigit():
            n = int(bg)
            return Theme.DARK if n <= 6 or n == 8 else Theme.LIGHT

    return Theme.LIGHT


def resolve_theme(
    settings: AppSettings,
    system_theme: SystemThemeProvider = detect_system_theme,
) -> Theme:
    """The theme to render with: the platform's when syncing, else the stored one."""
    if settings.sync_with_system:
        return system_theme()
    return settings.theme


def accent_rgb(accent: AccentColor, theme: Theme) -> str:
    """Accent colour as a rich colour string, e.g. 'rgb(59,130,246)'."""
    triplet = ACCENT_COLORS[accent][theme]
    r, g, b = (part.strip() for part in triplet.split(","))
    return f"rgb({r},{g},{b})"


@dataclass(frozen=True)
class Palette:
    theme: Theme
    accent: str
    text: str
    muted: str
    panel_style: str
    error: str = "bold red"

    @property
    def accent_bold(self) -> str:
        return f"bold {self.accent}"


def build_palette(settings: AppSettings, theme: Theme) -> Palette:
    if theme == Theme.DARK:
        text, muted, background = "rgb(226,232,240)", "rgb(148,163,184)", "rgb(15,23,42)"
    else:
        text, muted, background = "rgb(30,41,59)", "rgb(100,116,139)", "rgb(255,255,255)"

    # A gradient cannot be drawn in a terminal; it leaves panels transparent.
    if settings.background_style == BackgroundStyle.SOLID:
        panel_style = f"{text} on {background}"
    else:
        panel_style = text

    return Palette(
        theme=theme,
        accent=accent_rgb(settings.accent_color, theme),
        text=text,
        muted=muted,
        panel_style=panel_style,
    )
