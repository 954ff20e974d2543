"""Shared fixtures. Everything runs offline on the Agg backend."""

import matplotlib

matplotlib.use("Agg")

import geopandas as gpd
import matplotlib.pyplot as plt
import networkx as nx
import pytest
from shapely.geometry import LineString, Polygon

from cities import City


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


@pytest.fixture
def amsterdam():
    return City(name="Amsterdam", country="Netherlands", lat=52.3676, long=4.9041, population=872680)


@pytest.fixture
def fake_graph():
    """A tiny unprojected street network around central Amsterdam."""
    g = nx.MultiDiGraph(crs="epsg:4326")
    g.add_node(1, x=4.9041, y=52.3676)
    g.add_node(2, x=4.9101, y=52.3696)
    g.add_node(3, x=4.8981, y=52.3656)
    g.add_node(4, x=4.9041, y=52.3736)
    g.add_edge(1, 2, highway="primary")
    g.add_edge(2, 1, highway="primary")
    g.add_edge(1, 3, highway="residential", bridge="yes")
    g.add_edge(1, 4, highway=["footway", "path"])
    return g


def _square(lon, lat, half):
    return Polygon([
        (lon - half, lat - half), (lon + half, lat - half),
        (lon + half, lat + half), (lon - half, lat + half),
    ])


@pytest.fixture
def fake_features():
    """Feature layers as osmnx would return them, in WGS84."""
    water = gpd.GeoDataFrame(
        {"natural": ["water"]},
        geometry=[_square(4.900, 52.366, 0.002)],
        crs="EPSG:4326",
    )
    waterlines = gpd.GeoDataFrame(
        {"waterway": ["river", "canal"]},
        geometry=[
            LineString([(4.895, 52.360), (4.912, 52.375)]),
            LineString([(4.897, 52.370), (4.910, 52.364)]),
        ],
        crs="EPSG:4326",
    )
    buildings = gpd.GeoDataFrame(
        {"building": ["yes", "house", "yes"]},
        geometry=[
            _square(4.906, 52.368, 0.0004),
            _square(4.902, 52.369, 0.0003),
            _square(4.904, 52.366, 0.0005),
        ],
        crs="EPSG:4326",
    )
    rails = gpd.GeoDataFrame(
        {"railway": ["rail"]},
        geometry=[LineString([(4.890, 52.378), (4.915, 52.372)])],
        crs="EPSG:4326",
    )
    return {
        "water": water,
        "waterlines": waterlines,
        "coastline": None,
        "landuse": None,
        "buildings": buildings,
        "rails": rails,
        "runways": None,
        "structures": None,
    }
