"""
Theme catalog.

A theme bundles the colors of every map layer, a font descriptor and the
shared line-weight tables. Colors and fonts live in themes/<name>.json; the
size tables are common to all themes.
"""

import copy
import json
import logging
import os
import sys
from typing import Any, Optional

import matplotlib.colors as mcolors

logger = logging.getLogger("cityviews")

if getattr(sys, 'frozen', False):
    BASE_DIR = os.path.dirname(sys.executable)
else:
    BASE_DIR = os.path.dirname(os.path.abspath(__file__))

THEMES_DIR = os.path.join(BASE_DIR, "themes")

COLOR_KEYS = (
    "background",
    "water",
    "landuse",
    "contours",
    "streets",
    "rails",
    "buildings",
    "text",
    "waterlines",
)
OPTIONAL_COLOR_KEYS = ("textshadow",)
FONT_FACES = ("plain", "bold", "italic", "bold.italic")

# Line weights in millimeters
SIZES: dict[str, dict[str, float]] = {
    "borders": {
        "contours": 0.15,
        "water": 0.4,
        "canal": 0.5,
        "river": 0.6,
    },
    "streets": {
        "path": 0.2,
        "residential": 0.3,
        "structure": 0.35,
        "tertiary": 0.4,
        "secondary": 0.5,
        "primary": 0.6,
        "motorway": 0.8,
        "rails": 0.65,
        "runway": 3,
    },
}

# Points per millimeter, so size-table entries match printed line weights
PT_PER_MM = 72.27 / 25.4

# --- Module-level caches ---
_themes_cache: Optional[list[str]] = None
_theme_data_cache: dict[str, dict] = {}


class ThemeError(ValueError):
    """Raised when a theme is unknown or malformed."""


def is_color(value: Any) -> bool:
    """True if matplotlib understands `value` as a color."""
    return isinstance(value, str) and mcolors.is_color_like(value)


def linewidth(size_mm: float) -> float:
    """Convert a size-table entry to a matplotlib linewidth in points."""
    return size_mm * PT_PER_MM


def as_palette(value: Any) -> list[str]:
    """A color entry as a list, whether the theme gives one color or several."""
    if isinstance(value, str):
        return [value]
    return list(value)


def get_available_themes() -> list[str]:
    """
    Scans the themes directory and returns a list of available theme names.
    Results are cached after the first call.
    """
    global _themes_cache
    if _themes_cache is not None:
        return _themes_cache

    logger.debug("Looking for themes in: %s", THEMES_DIR)

    if not os.path.isdir(THEMES_DIR):
        logger.warning("Themes directory not found: %s", THEMES_DIR)
        return []

    themes = sorted(f[:-5] for f in os.listdir(THEMES_DIR) if f.endswith(".json"))
    logger.debug("Total themes found: %d", len(themes))
    _themes_cache = themes
    return themes


def _validate_theme(name: str, data: dict) -> None:
    colors = data.get("colors")
    if not isinstance(colors, dict):
        raise ThemeError(f"Theme '{name}' has no 'colors' mapping")
    for key in COLOR_KEYS:
        if key not in colors:
            raise ThemeError(f"Theme '{name}' is missing the '{key}' color")
    for key, value in colors.items():
        if key not in COLOR_KEYS and key not in OPTIONAL_COLOR_KEYS:
            raise ThemeError(f"Theme '{name}' has unknown color '{key}'")
        palette = as_palette(value)
        if not palette or not all(is_color(c) for c in palette):
            raise ThemeError(f"Theme '{name}' has an invalid '{key}' color: {value!r}")

    font = data.get("font")
    if not isinstance(font, dict) or not font.get("family"):
        raise ThemeError(f"Theme '{name}' has no font family")
    if font.get("face", "plain") not in FONT_FACES:
        raise ThemeError(
            f"Theme '{name}' has unsupported font face '{font.get('face')}'. "
            f"Use one of: {', '.join(FONT_FACES)}"
        )
    scale = font.get("scale", 1)
    if not isinstance(scale, (int, float)) or scale <= 0:
        raise ThemeError(f"Theme '{name}' font scale must be a positive number")


def load_theme(theme_name: str) -> dict[str, Any]:
    """
    Look up a theme by name.

    Returns:
        {"colors": {...}, "font": {"family", "face", "scale"}, "size": {...}}

    Raises:
        ThemeError: If the theme does not exist or its file is malformed
    """
    if theme_name in _theme_data_cache:
        return copy.deepcopy(_theme_data_cache[theme_name])

    available = get_available_themes()
    if theme_name not in available:
        raise ThemeError(
            f"Theme '{theme_name}' not found. "
            f"Available themes: {', '.join(available)}"
        )

    theme_file = os.path.join(THEMES_DIR, f"{theme_name}.json")
    try:
        with open(theme_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ThemeError(f"Theme file '{theme_file}' is not valid JSON: {e}") from e

    _validate_theme(theme_name, data)
    font = data["font"]
    theme = {
        "name": data.get("name", theme_name),
        "description": data.get("description", ""),
        "colors": data["colors"],
        "font": {
            "family": font["family"],
            "face": font.get("face", "plain"),
            "scale": font.get("scale", 1),
        },
        "size": copy.deepcopy(SIZES),
    }
    logger.debug("Loaded theme: %s", theme["name"])
    _theme_data_cache[theme_name] = theme
    return copy.deepcopy(theme)
