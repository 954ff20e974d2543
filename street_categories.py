"""
Street Category Classification

Maps OSM highway values onto the street classes of the theme size table.
Used by create_city_view.py to group and order the street layers.
"""

from typing import Any

# OSM highway type -> street class
_HIGHWAY_CATEGORIES: dict[str, str] = {
    "motorway": "motorway",
    "motorway_link": "motorway",
    "trunk": "motorway",
    "trunk_link": "motorway",
    "primary": "primary",
    "primary_link": "primary",
    "secondary": "secondary",
    "secondary_link": "secondary",
    "tertiary": "tertiary",
    "tertiary_link": "tertiary",
    "residential": "residential",
    "living_street": "residential",
    "unclassified": "residential",
    "service": "residential",
    "road": "residential",
    "pedestrian": "path",
    "footway": "path",
    "path": "path",
    "cycleway": "path",
    "bridleway": "path",
    "steps": "path",
    "track": "path",
    "corridor": "path",
}

# Thin classes first so major roads are drawn on top
DRAW_ORDER: tuple[str, ...] = (
    "path",
    "residential",
    "structure",
    "tertiary",
    "secondary",
    "primary",
    "motorway",
)


def classify(highway_type: Any, bridge: Any = None) -> str:
    """
    Classify an OSM highway value into a street class.

    Args:
        highway_type: OSM highway tag value (string or list of strings)
        bridge: OSM bridge tag; bridged minor streets count as structures

    Returns:
        One of DRAW_ORDER; unknown values fall back to 'residential'
    """
    if isinstance(highway_type, list):
        highway_type = highway_type[0] if highway_type else "unclassified"
    category = _HIGHWAY_CATEGORIES.get(highway_type, "residential")
    if isinstance(bridge, list):
        bridge = bridge[0] if bridge else None
    # Edge tables carry NaN where the tag is absent
    if isinstance(bridge, str) and bridge != "no" and category in ("path", "residential"):
        return "structure"
    return category


def draw_rank(category: str) -> int:
    """Position of a street class in the drawing order (higher draws later)."""
    return DRAW_ORDER.index(category)
