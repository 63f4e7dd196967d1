"""Configuration management for BalanceBeam.

This module centralizes all configuration values including paths,
storage keys, display defaults and environment variable overrides.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List

# Base project root - assumes this file is in balancebeam/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("BALANCEBEAM_DATA_DIR", _PROJECT_ROOT / "data"))
LOG_DIR = DATA_DIR / "logs"

# Key-value store backing favorites and settings
STORAGE_PATH = Path(
    os.getenv("BALANCEBEAM_STORAGE_PATH", DATA_DIR / "local_storage.json")
).resolve()

LOG_LEVEL = os.getenv("BALANCEBEAM_LOG_LEVEL", "INFO")

# Base URL used when building share links
PUBLIC_URL = os.getenv("BALANCEBEAM_PUBLIC_URL", "http://localhost:8501")

# Storage keys
FAVORITES_KEY = "balancebeam-favorites"
SETTINGS_KEY = "balancebeam-settings"

# Editing defaults
DEFAULT_TITLE = "My Budget"
DEFAULT_SAVINGS_GOAL = 1000.0
DEFAULT_CHART_TYPE = "pie"

COLOR_THEMES: Dict[str, List[str]] = {
    "Default": ["#3B82F6", "#EF4444", "#10B981", "#F59E0B", "#8B5CF6"],
    "Ocean": ["#0EA5E9", "#06B6D4", "#14B8A6", "#10B981", "#84CC16"],
    "Sunset": ["#F97316", "#EF4444", "#EC4899", "#8B5CF6", "#6366F1"],
    "Forest": ["#16A34A", "#15803D", "#166534", "#14532D", "#052E16"],
    "Monochrome": ["#374151", "#6B7280", "#9CA3AF", "#D1D5DB", "#F3F4F6"],
}
DEFAULT_THEME_NAME = "Default"


def default_color_theme() -> List[str]:
    """Return a fresh copy of the default colour theme."""
    return list(COLOR_THEMES[DEFAULT_THEME_NAME])


def theme_name_for(colors: List[str]) -> str | None:
    """Look up the name of a built-in theme, or ``None`` for a custom palette."""
    for name, palette in COLOR_THEMES.items():
        if list(colors) == palette:
            return name
    return None


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [DATA_DIR, LOG_DIR, STORAGE_PATH.parent]:
        directory.mkdir(parents=True, exist_ok=True)
