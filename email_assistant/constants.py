"""
Default settings and the accent colour table.
"""

from typing import Dict

from .models import AccentColor, AppSettings, Theme

DEFAULT_SETTINGS = AppSettings()

# "r, g, b" triplets; the dark variant is one step lighter for contrast.
ACCENT_COLORS: Dict[AccentColor, Dict[Theme, str]] = {
    AccentColor.BLUE: {Theme.LIGHT: "59, 130, 246", Theme.DARK: "96, 165, 250"},
    AccentColor.GREEN: {Theme.LIGHT: "34, 197, 94", Theme.DARK: "74, 222, 128"},
    AccentColor.ORANGE: {Theme.LIGHT: "249, 115, 22", Theme.DARK: "251, 146, 60"},
    AccentColor.SLATE: {Theme.LIGHT: "100, 116, 139", Theme.DARK: "148, 163, 184"},
    AccentColor.ROSE: {Theme.LIGHT: "244, 63, 94", Theme.DARK: "251, 113, 133"},
}

INITIAL_LOAD_ERROR = "Failed to load email data and initial analysis."
REGENERATE_ERROR = "Could not generate responses. Please try again."
ANALYSIS_UNAVAILABLE = "Could not perform analysis."
