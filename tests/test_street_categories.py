"""Tests for street classification."""

import pytest

import themes
from street_categories import DRAW_ORDER, classify, draw_rank


class TestClassify:
    """Tests for classify()."""

    @pytest.mark.parametrize("highway,expected", [
        ("motorway", "motorway"),
        ("trunk_link", "motorway"),
        ("primary", "primary"),
        ("secondary_link", "secondary"),
        ("tertiary", "tertiary"),
        ("living_street", "residential"),
        ("service", "residential"),
        ("footway", "path"),
        ("cycleway", "path"),
        ("steps", "path"),
    ])
    def test_known_values(self, highway, expected):
        assert classify(highway) == expected

    def test_unknown_falls_back_to_residential(self):
        """Unmapped highway values are drawn as residential streets."""
        assert classify("busway") == "residential"

    def test_list_uses_first_value(self):
        """Merged OSM ways carry a list; the first tag decides."""
        assert classify(["primary", "secondary"]) == "primary"
        assert classify([]) == "residential"

    @pytest.mark.parametrize("bridge", ["yes", "viaduct", ["yes", "no"]])
    def test_bridged_minor_streets_are_structures(self, bridge):
        """Paths and residential streets on bridges are structures."""
        assert classify("footway", bridge) == "structure"
        assert classify("residential", bridge) == "structure"

    @pytest.mark.parametrize("bridge", [None, "no", float("nan")])
    def test_no_bridge(self, bridge):
        """Absent or negative bridge tags change nothing."""
        assert classify("footway", bridge) == "path"

    def test_bridged_major_road_keeps_class(self):
        """Major roads keep their weight on bridges."""
        assert classify("motorway", "yes") == "motorway"


class TestDrawOrder:
    """Tests for DRAW_ORDER and draw_rank()."""

    def test_every_class_has_a_width(self):
        """Each drawn class has an entry in the street size table."""
        assert set(DRAW_ORDER) <= set(themes.SIZES["streets"])

    def test_major_roads_draw_last(self):
        """Motorways are drawn over everything else."""
        assert DRAW_ORDER[-1] == "motorway"
        assert draw_rank("path") < draw_rank("residential") < draw_rank("primary") < draw_rank("motorway")
