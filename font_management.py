"""
Font registration and lookup.

Font files placed in fonts/ are registered with matplotlib's font manager so
themes can name them by family. Families that are not installed fall back to
a generic family.
"""

import logging
import os
import sys
from typing import Optional

import matplotlib.font_manager as fm
from matplotlib.font_manager import FontProperties

logger = logging.getLogger("cityviews")

if getattr(sys, 'frozen', False):
    BASE_DIR = os.path.dirname(sys.executable)
else:
    BASE_DIR = os.path.dirname(os.path.abspath(__file__))

FONTS_DIR = os.path.join(BASE_DIR, "fonts")
FALLBACK_FAMILY = "serif"
FONT_EXTENSIONS = (".ttf", ".otf")

_loaded_dirs: set[str] = set()
_warned_families: set[str] = set()


def load_fonts(fonts_dir: Optional[str] = None) -> list[str]:
    """
    Register every font file in `fonts_dir` (default: fonts/).

    Returns:
        Family names that were registered
    """
    fonts_dir = fonts_dir or FONTS_DIR
    if fonts_dir in _loaded_dirs or not os.path.isdir(fonts_dir):
        return []

    families = []
    for file in sorted(os.listdir(fonts_dir)):
        if not file.lower().endswith(FONT_EXTENSIONS):
            continue
        path = os.path.join(fonts_dir, file)
        try:
            fm.fontManager.addfont(path)
            families.append(FontProperties(fname=path).get_name())
        except (OSError, RuntimeError) as e:
            logger.warning("Could not load font %s: %s", path, e)
    _loaded_dirs.add(fonts_dir)
    logger.debug("Registered %d font(s) from %s", len(families), fonts_dir)
    return families


def is_font_available(family: str) -> bool:
    return any(f.name == family for f in fm.fontManager.ttflist)


def resolve_family(family: str) -> str:
    """The requested family if matplotlib knows it, otherwise the fallback."""
    if is_font_available(family):
        return family
    if family in _warned_families:
        return FALLBACK_FAMILY
    _warned_families.add(family)
    logger.warning(
        "Font '%s' is not installed; using %s. Drop the font file into %s to use it.",
        family, FALLBACK_FAMILY, FONTS_DIR,
    )
    return FALLBACK_FAMILY


def font_properties(font: dict, size: float) -> FontProperties:
    """
    FontProperties for a theme font descriptor.

    Args:
        font: {"family", "face", "scale"} from a theme
        size: Base size in points, multiplied by the font scale
    """
    face = font.get("face", "plain")
    return FontProperties(
        family=resolve_family(font["family"]),
        weight="bold" if face in ("bold", "bold.italic") else "normal",
        style="italic" if face in ("italic", "bold.italic") else "normal",
        size=size * font.get("scale", 1),
    )
