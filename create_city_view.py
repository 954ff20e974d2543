#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
City View Generator

Renders stylized postcard maps of a city. A city is resolved from the
bundled city table (or given as coordinates, or picked at random), its
OpenStreetMap streets, water, green spaces, buildings and rails are fetched
with OSMnx, drawn in the colors and fonts of a theme and exported as a
square raster image sized for a paper format.
"""

import argparse
import logging
import os
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Optional

import matplotlib

matplotlib.use("Agg")

import matplotlib.colors as mcolors
import matplotlib.patheffects as pe
import matplotlib.pyplot as plt
import numpy as np
import osmnx as ox
from geopandas import GeoDataFrame
from matplotlib.patches import Circle, Rectangle
from networkx import MultiDiGraph
from shapely.geometry import Point
from tqdm import tqdm

import street_categories
import themes
from cities import City, CityError, geocode_city, get_city, new_city
from export_plot import (
    EXPORT_FORMATS,
    MM_PER_INCH,
    ORIENTATIONS,
    PAPER_SIZES_MM,
    check_format,
    check_orientation,
    check_paper_size,
    export_scaled_plot,
    paper_dimensions_mm,
)
from font_management import font_properties, load_fonts

# --- Logging setup ---
logger = logging.getLogger("cityviews")
_handler = logging.StreamHandler()
_handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
logger.addHandler(_handler)
logger.setLevel(logging.INFO)

# Determine the correct base path (works for both script and EXE)
if getattr(sys, 'frozen', False):
    BASE_DIR = os.path.dirname(sys.executable)
else:
    BASE_DIR = os.path.dirname(os.path.abspath(__file__))

OUTPUT_DIR = os.environ.get("CITYVIEWS_OUTPUT_DIR", os.path.join(BASE_DIR, "cityviews"))

DEFAULT_THEME = "vintage"
DEFAULT_DISTANCE = 3000
BORDERS = ("none", "circle", "square")
ATTRIBUTION = "© OpenStreetMap contributors"

# OSM tags per feature layer
FEATURE_TAGS: dict[str, dict] = {
    "water": {"natural": ["water", "bay", "strait"], "waterway": "riverbank"},
    "waterlines": {"waterway": ["river", "canal", "stream"]},
    "coastline": {"natural": "coastline"},
    "landuse": {
        "leisure": ["park", "garden", "nature_reserve"],
        "landuse": ["grass", "forest", "meadow", "cemetery", "recreation_ground"],
        "natural": ["wood", "scrub", "heath"],
    },
    "buildings": {"building": True},
    "rails": {"railway": ["rail", "light_rail", "narrow_gauge"]},
    "runways": {"aeroway": "runway"},
    "structures": {"man_made": ["pier", "breakwater", "groyne"]},
}

POLYGON_TYPES = ("Polygon", "MultiPolygon")
LINE_TYPES = ("LineString", "MultiLineString")

# Drawing order, bottom to top
Z_LANDUSE = 1
Z_WATER = 2
Z_WATERLINES = 2.5
Z_COASTLINE = 2.6
Z_BUILDINGS = 3
Z_STREETS = 4
Z_RAILS = 5
Z_RUNWAYS = 5.5
Z_BORDER = 9
Z_GRADIENT = 10
Z_TEXT = 11


def is_latin_script(text: str) -> bool:
    """
    Check if text is primarily Latin script.
    Used to determine if letter-spacing should be applied to city names.
    """
    if not text:
        return True

    latin_count = 0
    total_alpha = 0

    for char in text:
        if char.isalpha():
            total_alpha += 1
            if ord(char) < 0x250:
                latin_count += 1

    if total_alpha == 0:
        return True

    return (latin_count / total_alpha) > 0.8


def format_coordinates(lat: float, lon: float) -> str:
    """Coordinates with hemisphere letters, as printed under the city name."""
    ns = "N" if lat >= 0 else "S"
    ew = "E" if lon >= 0 else "W"
    return f"{abs(lat):.4f}° {ns} / {abs(lon):.4f}° {ew}"


def generate_output_filename(city: str, theme_name: str) -> str:
    """Output path (without extension) with city, theme and datetime."""
    os.makedirs(OUTPUT_DIR, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    city_slug = city.lower().replace(" ", "_")
    return os.path.join(OUTPUT_DIR, f"{city_slug}_{theme_name}_{timestamp}")


def create_gradient_fade(
    ax: plt.Axes,
    color: str,
    height: float = 0.25,
    zorder: float = Z_GRADIENT,
) -> None:
    """Fades the bottom of the map into `color` so the lettering stays legible."""
    vals = np.linspace(0, 1, 256).reshape(-1, 1)
    gradient = np.hstack((vals, vals))

    rgb = mcolors.to_rgb(color)
    my_colors = np.zeros((256, 4))
    my_colors[:, 0] = rgb[0]
    my_colors[:, 1] = rgb[1]
    my_colors[:, 2] = rgb[2]
    my_colors[:, 3] = np.linspace(1, 0, 256)
    custom_cmap = mcolors.ListedColormap(my_colors)

    xlim = ax.get_xlim()
    ylim = ax.get_ylim()
    y_top = ylim[0] + (ylim[1] - ylim[0]) * height

    ax.imshow(
        gradient,
        extent=[xlim[0], xlim[1], ylim[0], y_top],
        aspect="auto",
        cmap=custom_cmap,
        zorder=zorder,
        origin="lower",
    )


def get_crop_limits(
    g_proj: MultiDiGraph,
    center_lat_lon: tuple[float, float],
    fig: plt.Figure,
    dist: float,
) -> tuple[tuple[float, float], tuple[float, float]]:
    """
    Crop inward to preserve aspect ratio while guaranteeing
    full coverage of the requested radius.
    """
    lat, lon = center_lat_lon

    center = (
        ox.projection.project_geometry(
            Point(lon, lat),
            crs="EPSG:4326",
            to_crs=g_proj.graph["crs"]
        )[0]
    )
    center_x, center_y = center.x, center.y

    fig_width, fig_height = fig.get_size_inches()
    aspect = fig_width / fig_height

    half_x = dist
    half_y = dist

    if aspect > 1:
        half_y = half_x / aspect
    else:
        half_x = half_y * aspect

    return (
        (center_x - half_x, center_x + half_x),
        (center_y - half_y, center_y + half_y),
    )


def fetch_graph(
    point: tuple[float, float],
    dist: float,
    network_type: str = "all",
) -> Optional[MultiDiGraph]:
    """
    Fetch street network graph from OpenStreetMap.

    Args:
        point: (latitude, longitude) tuple for center point
        dist: Distance in meters from center point
        network_type: OSMnx network type ('drive', 'walk', 'bike', or 'all')
    """
    try:
        g = ox.graph_from_point(
            point, dist=dist, dist_type='bbox',
            network_type=network_type, truncate_by_edge=True,
        )
        time.sleep(0.5)
        return g
    except Exception as e:
        logger.error("OSMnx error while fetching graph: %s", e)
        return None


def fetch_features(
    point: tuple[float, float],
    dist: float,
    tags: dict,
    name: str,
) -> Optional[GeoDataFrame]:
    """
    Fetch geographic features (water, buildings, rails, etc.) from OpenStreetMap.
    A layer that cannot be fetched is left out of the map.
    """
    try:
        data = ox.features_from_point(point, tags=tags, dist=dist)
        time.sleep(0.3)
        return data
    except Exception as e:
        logger.error("OSMnx error while fetching %s: %s", name, e)
        return None


def fetch_layers(
    point: tuple[float, float],
    dist: float,
    network_type: str = "all",
) -> tuple[MultiDiGraph, dict[str, Optional[GeoDataFrame]]]:
    """
    Download the street network and every feature layer around a point.

    Raises:
        RuntimeError: If street network data cannot be retrieved
    """
    with tqdm(
        total=1 + len(FEATURE_TAGS),
        desc="Fetching map data",
        unit="step",
        bar_format="{l_bar}{bar}| {n_fmt}/{total_fmt}",
    ) as pbar:
        pbar.set_description("Downloading street network")
        g = fetch_graph(point, dist, network_type=network_type)
        if g is None:
            raise RuntimeError("Failed to retrieve street network data.")
        pbar.update(1)

        features: dict[str, Optional[GeoDataFrame]] = {}
        for name, tags in FEATURE_TAGS.items():
            pbar.set_description(f"Downloading {name}")
            features[name] = fetch_features(point, dist, tags=tags, name=name)
            pbar.update(1)

    logger.info("All data retrieved successfully!")
    return g, features


# --- Rendering sub-functions ---

def _project_features(
    features: Optional[GeoDataFrame],
    crs,
    geom_types: tuple[str, ...],
) -> Optional[GeoDataFrame]:
    """Keep the given geometry types and project them to the graph CRS."""
    if features is None or features.empty:
        return None
    subset = features[features.geometry.type.isin(geom_types)]
    if subset.empty:
        return None
    return subset.to_crs(crs)


def _palette_colors(palette: list[str], n: int, rng: np.random.Generator) -> list[str]:
    """One color per feature, drawn at random from the palette."""
    if len(palette) == 1:
        return palette * n
    return [palette[i] for i in rng.integers(0, len(palette), size=n)]


def _render_polygons(
    ax: plt.Axes,
    polys: Optional[GeoDataFrame],
    color,
    zorder: float,
    rng: np.random.Generator,
) -> None:
    """Fill polygons with a theme color or a random pick from a palette."""
    if polys is None or polys.empty:
        return
    colors = _palette_colors(themes.as_palette(color), len(polys), rng)
    polys.plot(ax=ax, color=colors, edgecolor="none", linewidth=0, zorder=zorder)


def _render_lines(
    ax: plt.Axes,
    lines: Optional[GeoDataFrame],
    color: str,
    width: float,
    zorder: float,
    **kwargs,
) -> None:
    if lines is None or lines.empty:
        return
    lines.plot(ax=ax, color=color, linewidth=width, zorder=zorder, **kwargs)


def _render_waterlines(
    ax: plt.Axes,
    lines: Optional[GeoDataFrame],
    theme: dict,
) -> None:
    """Rivers, canals and streams, weighted by the border size table."""
    if lines is None or lines.empty:
        return
    borders = theme["size"]["borders"]
    if "waterway" in lines.columns:
        size_keys = lines["waterway"].map({"river": "river", "canal": "canal"}).fillna("water")
    else:
        size_keys = ["water"] * len(lines)
    lines = lines.assign(size_key=size_keys)
    for size_key in ("water", "canal", "river"):
        _render_lines(
            ax, lines[lines["size_key"] == size_key], theme["colors"]["waterlines"],
            themes.linewidth(borders[size_key]), Z_WATERLINES,
        )


def _render_streets(
    ax: plt.Axes,
    g_proj: MultiDiGraph,
    theme: dict,
) -> None:
    """Render the street network class by class, thin streets first."""
    edges = ox.graph_to_gdfs(g_proj, nodes=False)
    if edges.empty:
        return
    bridges = edges["bridge"] if "bridge" in edges.columns else [None] * len(edges)
    categories = [
        street_categories.classify(highway, bridge)
        for highway, bridge in zip(edges["highway"], bridges)
    ]
    edges = edges.assign(street_class=categories)
    sizes = theme["size"]["streets"]
    for category in street_categories.DRAW_ORDER:
        subset = edges[edges["street_class"] == category]
        _render_lines(
            ax, subset, theme["colors"]["streets"],
            themes.linewidth(sizes[category]),
            Z_STREETS + street_categories.draw_rank(category) / 10,
            capstyle="round",
        )


def _render_rails(
    ax: plt.Axes,
    rails: Optional[GeoDataFrame],
    theme: dict,
) -> None:
    """Rails as a solid line, with a dashed inner line when the theme has two colors."""
    palette = themes.as_palette(theme["colors"]["rails"])
    width = themes.linewidth(theme["size"]["streets"]["rails"])
    _render_lines(ax, rails, palette[0], width, Z_RAILS)
    if len(palette) > 1:
        _render_lines(
            ax, rails, palette[1], width / 2, Z_RAILS + 0.1,
            linestyle=(0, (3, 3)),
        )


def _render_structures(
    ax: plt.Axes,
    structures: Optional[GeoDataFrame],
    crs,
    theme: dict,
) -> None:
    """Piers and breakwaters, filled or stroked in the street color."""
    color = theme["colors"]["streets"]
    polys = _project_features(structures, crs, POLYGON_TYPES)
    if polys is not None:
        polys.plot(ax=ax, color=color, edgecolor="none", zorder=Z_STREETS)
    lines = _project_features(structures, crs, LINE_TYPES)
    _render_lines(
        ax, lines, color,
        themes.linewidth(theme["size"]["streets"]["structure"]), Z_STREETS,
    )


def _apply_border(
    ax: plt.Axes,
    border: str,
    xlim: tuple[float, float],
    ylim: tuple[float, float],
    theme: dict,
) -> None:
    """Clip the map to a circle or frame it with a square, in the contours color."""
    if border == "none":
        return
    color = theme["colors"]["contours"]
    width = themes.linewidth(theme["size"]["borders"]["contours"]) * 6
    center = ((xlim[0] + xlim[1]) / 2, (ylim[0] + ylim[1]) / 2)
    radius = min(xlim[1] - xlim[0], ylim[1] - ylim[0]) / 2 * 0.92

    if border == "circle":
        clip = Circle(center, radius, transform=ax.transData, facecolor="none")
        for artist in [*ax.collections, *ax.lines, *ax.patches]:
            artist.set_clip_path(clip)
        outline = Circle(
            center, radius, facecolor="none", edgecolor=color,
            linewidth=width, zorder=Z_BORDER,
        )
    else:
        outline = Rectangle(
            (center[0] - radius, center[1] - radius), 2 * radius, 2 * radius,
            facecolor="none", edgecolor=color, linewidth=width, zorder=Z_BORDER,
        )
    ax.add_patch(outline)


def _render_text(
    ax: plt.Axes,
    city: City,
    theme: dict,
    width: float,
    height: float,
) -> None:
    """Render city name, country, divider and coordinates at the bottom of the view."""
    scale_factor = min(width, height) / 12.0
    colors = theme["colors"]
    font = theme["font"]

    base_main = 60 * scale_factor
    base_sub = 26 * scale_factor
    base_coords = 18 * scale_factor

    # Dynamically shrink long city names
    if len(city.name) > 10:
        base_main = max(base_main * 10 / len(city.name), 12 * scale_factor)

    if is_latin_script(city.name):
        display_city = "  ".join(list(city.name.upper()))
    else:
        display_city = city.name

    effects = []
    if colors.get("textshadow"):
        effects = [pe.withStroke(linewidth=4 * scale_factor, foreground=colors["textshadow"])]

    fig_height_pts = height * 72
    coords_y = 0.05
    divider_y = coords_y + (base_coords * 1.4) / fig_height_pts
    country_y = divider_y + (base_sub * 0.8) / fig_height_pts
    city_y = country_y + (base_sub * 1.6) / fig_height_pts

    text_kwargs = dict(
        transform=ax.transAxes, color=colors["text"], ha="center",
        zorder=Z_TEXT, path_effects=effects,
    )
    ax.text(0.5, city_y, display_city,
            fontproperties=font_properties(font, base_main), **text_kwargs)
    ax.text(0.5, country_y, city.country.upper(),
            fontproperties=font_properties(font, base_sub), **text_kwargs)
    ax.text(0.5, coords_y, format_coordinates(city.lat, city.long), alpha=0.8,
            fontproperties=font_properties(font, base_coords), **text_kwargs)
    ax.plot(
        [0.4, 0.6], [divider_y, divider_y],
        transform=ax.transAxes, color=colors["text"],
        linewidth=1 * scale_factor, zorder=Z_TEXT,
    )


def _render_attribution(ax: plt.Axes, theme: dict, scale_factor: float) -> None:
    ax.text(
        0.98, 0.01, ATTRIBUTION,
        transform=ax.transAxes, color=theme["colors"]["text"], alpha=0.6,
        ha="right", va="bottom", fontsize=7 * scale_factor, zorder=Z_TEXT,
    )


def render_city_view(
    city: City,
    theme: dict,
    border: str = "none",
    distance: float = DEFAULT_DISTANCE,
    figsize: tuple[float, float] = (12.0, 12.0),
    seed: Optional[int] = None,
    show_text: bool = True,
    network_type: str = "all",
) -> plt.Figure:
    """
    Draw a square city view.

    Args:
        city: The city to draw, centered on its coordinates
        theme: Theme bundle from themes.load_theme()
        border: 'none', 'circle' or 'square'
        distance: Half the side of the mapped square, in meters
        figsize: Figure (width, height) in inches; text is sized relative
                 to a 12 inch short side
        seed: Seed for the palette assignment of buildings and landuse
        show_text: If False, leave out the lettering
        network_type: OSMnx network type ('drive', 'walk', 'bike', or 'all')

    Returns:
        The rendered figure; export it with export_plot.export_scaled_plot()

    Raises:
        ValueError: If the border is not supported
        RuntimeError: If street network data cannot be retrieved
    """
    if border not in BORDERS:
        raise ValueError(f"Unsupported border '{border}'. Use one of: {', '.join(BORDERS)}")

    logger.info("Generating view of %s, %s...", city.name, city.country)
    g, features = fetch_layers(city.point, distance, network_type=network_type)

    logger.info("Rendering map...")
    colors = theme["colors"]
    rng = np.random.default_rng(seed)

    fig, ax = plt.subplots(figsize=figsize, facecolor=colors["background"])
    ax.set_facecolor(colors["background"])
    ax.set_position((0.0, 0.0, 1.0, 1.0))
    ax.set_axis_off()

    g_proj = ox.project_graph(g)
    crs = g_proj.graph["crs"]

    _render_polygons(
        ax, _project_features(features.get("landuse"), crs, POLYGON_TYPES),
        colors["landuse"], Z_LANDUSE, rng,
    )
    _render_polygons(
        ax, _project_features(features.get("water"), crs, POLYGON_TYPES),
        colors["water"], Z_WATER, rng,
    )
    _render_waterlines(ax, _project_features(features.get("waterlines"), crs, LINE_TYPES), theme)
    _render_lines(
        ax, _project_features(features.get("coastline"), crs, LINE_TYPES),
        colors["contours"], themes.linewidth(theme["size"]["borders"]["contours"]),
        Z_COASTLINE,
    )
    _render_polygons(
        ax, _project_features(features.get("buildings"), crs, POLYGON_TYPES),
        colors["buildings"], Z_BUILDINGS, rng,
    )

    logger.info("Applying street hierarchy...")
    _render_streets(ax, g_proj, theme)
    _render_structures(ax, features.get("structures"), crs, theme)
    _render_rails(ax, _project_features(features.get("rails"), crs, LINE_TYPES), theme)
    _render_lines(
        ax, _project_features(features.get("runways"), crs, LINE_TYPES),
        colors["streets"], themes.linewidth(theme["size"]["streets"]["runway"]),
        Z_RUNWAYS,
    )

    crop_xlim, crop_ylim = get_crop_limits(g_proj, city.point, fig, distance)
    ax.set_aspect("equal", adjustable="box")
    ax.set_xlim(crop_xlim)
    ax.set_ylim(crop_ylim)

    _apply_border(ax, border, crop_xlim, crop_ylim, theme)

    if show_text:
        if border == "none":
            create_gradient_fade(ax, colors["background"])
        _render_text(ax, city, theme, *figsize)
    _render_attribution(ax, theme, min(figsize) / 12.0)

    return fig


def create_city_view(
    city: City,
    theme_name: str = DEFAULT_THEME,
    filename: Optional[str] = None,
    border: str = "none",
    distance: float = DEFAULT_DISTANCE,
    paper_size: str = "Square Postcard",
    orientation: str = "portrait",
    output_format: str = "png",
    dpi: int = 300,
    keep_square: bool = True,
    scale_factor: float = 1,
    seed: Optional[int] = None,
    show_text: bool = True,
    network_type: str = "all",
) -> Path:
    """
    Render a city view and export it for a paper format.

    Export parameters are validated before any data is downloaded.

    Returns:
        Path of the written image
    """
    theme = themes.load_theme(theme_name)
    check_paper_size(paper_size)
    check_orientation(orientation)
    check_format(output_format)

    width_mm, height_mm = paper_dimensions_mm(paper_size, orientation, keep_square)
    figsize = (width_mm / MM_PER_INCH, height_mm / MM_PER_INCH)

    fig = render_city_view(
        city, theme,
        border=border,
        distance=distance,
        figsize=figsize,
        seed=seed,
        show_text=show_text,
        network_type=network_type,
    )
    if filename is None:
        filename = generate_output_filename(city.name, theme_name)
    logger.info("Saving to %s.%s...", filename, output_format)
    try:
        return export_scaled_plot(
            fig, filename,
            paper_size=paper_size,
            orientation=orientation,
            format=output_format,
            dpi=dpi,
            keep_square=keep_square,
            scale_factor=scale_factor,
        )
    finally:
        plt.close(fig)


def print_examples() -> None:
    """Print usage examples."""
    print("""
City View Generator
===================

Usage:
  python create_city_view.py --city <city> [options]

Examples:
  # A named city, in a theme
  python create_city_view.py -c Amsterdam -t vintage
  python create_city_view.py -c Lisbon -t rouge --border circle

  # Shared names: narrow down by country, or pick from the menu
  python create_city_view.py -c Portland -C "United States"
  python create_city_view.py -c London

  # Anywhere else, by coordinates
  python create_city_view.py -c Giethoorn -C Netherlands -lat 52.7386 -long 6.0783

  # A random large city, reproducible with a seed
  python create_city_view.py --random --seed 42 -t bright

  # Print sizes
  python create_city_view.py -c Paris -C France -p A3 -f tiff --dpi 600
  python create_city_view.py -c Kyoto -p A4 --orientation landscape --no-square

  # Listings
  python create_city_view.py --list-themes
  python create_city_view.py --list-paper-sizes

Distance guide:
  1500-2500m   Old town centers (Bruges, Delft)
  3000-5000m   City centers (Amsterdam, Paris)
  8000m+       Whole metros (slow to download)
""")


def list_themes() -> None:
    """List all available themes with descriptions."""
    available_themes = themes.get_available_themes()
    if not available_themes:
        print("No themes found in 'themes/' directory.")
        return

    print("\nAvailable Themes:")
    print("-" * 60)
    for theme_name in available_themes:
        theme_data = themes.load_theme(theme_name)
        print(f"  {theme_name}")
        print(f"    {theme_data['name']} ({theme_data['font']['family']})")
        if theme_data["description"]:
            print(f"    {theme_data['description']}")
        print()


def list_paper_sizes() -> None:
    """List supported paper sizes with their dimensions."""
    print("\nPaper Sizes (portrait, mm):")
    print("-" * 60)
    for name, (width, height) in PAPER_SIZES_MM.items():
        print(f"  {name:<18} {width:>5} x {height:<5}")
    print()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render postcard map views of cities",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python create_city_view.py --city Amsterdam
  python create_city_view.py --city Paris --country France --theme delftware --border circle
  python create_city_view.py --random --seed 7
  python create_city_view.py --list-themes
        """,
    )

    parser.add_argument("--city", "-c", type=str, help="City name")
    parser.add_argument("--country", "-C", type=str, help="Country, to narrow down shared names")
    parser.add_argument(
        "--latitude", "-lat", dest="latitude", type=str,
        help="Latitude of a city that is not in the bundled data",
    )
    parser.add_argument(
        "--longitude", "-long", dest="longitude", type=str,
        help="Longitude of a city that is not in the bundled data",
    )
    parser.add_argument("--random", action="store_true", help="Draw a random large city")
    parser.add_argument("--seed", type=int, help="Seed for the random city and building colors")
    parser.add_argument(
        "--theme", "-t", type=str, default=DEFAULT_THEME,
        help=f"Theme name (default: {DEFAULT_THEME})",
    )
    parser.add_argument(
        "--all-themes", dest="all_themes", action="store_true",
        help="Generate a view in every theme",
    )
    parser.add_argument("--list-themes", action="store_true", help="List all available themes")
    parser.add_argument("--list-paper-sizes", action="store_true", help="List supported paper sizes")
    parser.add_argument(
        "--border", "-b", default="none", choices=BORDERS,
        help="Frame around the map (default: none)",
    )
    parser.add_argument(
        "--distance", "-d", type=int, default=DEFAULT_DISTANCE,
        help=f"Distance from the center to the edge in meters (default: {DEFAULT_DISTANCE})",
    )
    parser.add_argument(
        "--network-type", type=str, default="all",
        choices=["drive", "all", "walk", "bike"],
        help="Type of street network to download (default: all)",
    )
    parser.add_argument(
        "--paper-size", "-p", type=str, default="Square Postcard",
        help="Paper size, see --list-paper-sizes (default: Square Postcard)",
    )
    parser.add_argument(
        "--orientation", default="portrait", choices=ORIENTATIONS,
        help="Paper orientation (default: portrait)",
    )
    parser.add_argument(
        "--format", "-f", default="png", choices=EXPORT_FORMATS,
        help="Output format (default: png)",
    )
    parser.add_argument("--dpi", type=int, default=300, help="Output resolution in DPI (default: 300)")
    parser.add_argument(
        "--no-square", dest="keep_square", action="store_false",
        help="Use the full paper instead of a square of its shorter side",
    )
    parser.add_argument(
        "--scale-factor", type=float, default=1.0,
        help="Multiplier for all text sizes (default: 1)",
    )
    parser.add_argument("--output", "-o", type=str, help="Output path without extension")
    parser.add_argument("--no-text", action="store_true", help="Hide all text labels")
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    return parser


def resolve_city(args: argparse.Namespace) -> Optional[City]:
    """City from the command line: coordinates, random pick or name lookup."""
    if args.latitude or args.longitude:
        if not (args.latitude and args.longitude):
            raise CityError("--latitude and --longitude must be given together")
        return new_city(args.city or "Custom", args.country or "", args.latitude, args.longitude)
    if args.random or not args.city:
        return get_city(None, seed=args.seed)
    try:
        return get_city(args.city, country=args.country)
    except CityError:
        if not args.country:
            raise
        logger.info("%s, %s is not in the bundled data; geocoding it", args.city, args.country)
        return geocode_city(args.city, args.country)


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logger.setLevel(logging.DEBUG)

    # If no arguments provided, show examples
    if not (sys.argv[1:] if argv is None else argv):
        print_examples()
        return 0

    if args.list_themes:
        list_themes()
        return 0

    if args.list_paper_sizes:
        list_paper_sizes()
        return 0

    available_themes = themes.get_available_themes()
    if not available_themes:
        print("No themes found in 'themes/' directory.")
        return 1

    if args.all_themes:
        themes_to_generate = available_themes
    else:
        if args.theme not in available_themes:
            print(f"Error: Theme '{args.theme}' not found.")
            print(f"Available themes: {', '.join(available_themes)}")
            return 1
        themes_to_generate = [args.theme]

    print("=" * 50)
    print("City View Generator")
    print("=" * 50)

    load_fonts()

    try:
        check_paper_size(args.paper_size)

        city = resolve_city(args)
        if city is None:
            print("No city selected.")
            return 0

        for theme_name in themes_to_generate:
            filename = args.output
            if filename and len(themes_to_generate) > 1:
                filename = f"{filename}_{theme_name}"
            create_city_view(
                city,
                theme_name,
                filename=filename,
                border=args.border,
                distance=args.distance,
                paper_size=args.paper_size,
                orientation=args.orientation,
                output_format=args.format,
                dpi=args.dpi,
                keep_square=args.keep_square,
                scale_factor=args.scale_factor,
                seed=args.seed,
                show_text=not args.no_text,
                network_type=args.network_type,
            )

        print("\n" + "=" * 50)
        print("[OK] City view generation complete!")
        print("=" * 50)

    except Exception as e:
        logger.error("Error: %s", e)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
