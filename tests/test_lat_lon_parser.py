"""Tests for coordinate parsing."""

import pytest

from lat_lon_parser import parse


class TestParse:
    """Tests for parse()."""

    @pytest.mark.parametrize("text,expected", [
        ("40.7128", 40.7128),
        ("-74.0060", -74.006),
        ("40.7128N", 40.7128),
        ("74.0060W", -74.006),
        ("S33.8688", -33.8688),
        ("151.2093 E", 151.2093),
        ("52°22'12\"N", 52.37),
        ("4 53 24 E", 4.89),
        ("33°52'S", -33.8667),
    ])
    def test_formats(self, text, expected):
        assert parse(text) == pytest.approx(expected, abs=1e-4)

    def test_numbers_pass_through(self):
        """Numbers are returned as floats."""
        assert parse(12) == 12.0
        assert parse(-3.5) == -3.5

    def test_negative_with_western_suffix_stays_negative(self):
        """A sign and a hemisphere letter do not cancel out."""
        assert parse("-74.006W") == pytest.approx(-74.006)

    @pytest.mark.parametrize("text", [
        None, "", "north", "12NE", "1 2 3 4", "52°75'N", "abc12",
        "1e5", "1E1", "5-2", "52.5.3", "N12E", "1234'",
    ])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse(text)
