"""Tests for city resolution."""

from types import SimpleNamespace

import pandas as pd
import pytest

import cities
from cities import (
    DISAMBIGUATION_TITLE,
    City,
    CityError,
    console_menu,
    find_cities,
    geocode_city,
    get_city,
    new_city,
    random_city,
)


class ChooserSpy:
    """Records what the disambiguation menu was shown and answers with `answer`."""

    def __init__(self, answer):
        self.answer = answer
        self.calls = []

    def __call__(self, title, choices):
        self.calls.append((title, choices))
        return self.answer


def never_called(title, choices):
    raise AssertionError("chooser should not be called")


class TestGetCityByName:
    """Tests for get_city() with a name."""

    def test_unique_name(self):
        """A unique name resolves without asking."""
        city = get_city("Amsterdam", chooser=never_called)
        assert city == City("Amsterdam", "Netherlands", 52.3676, 4.9041, 872680)

    def test_unknown_name_names_the_city(self):
        """Zero matches is an error that mentions the missing city."""
        with pytest.raises(CityError, match="no city called 'Atlantis'"):
            get_city("Atlantis")

    def test_accent_and_case_insensitive_fallback(self):
        """Without an exact match, accents and case are ignored."""
        city = get_city("sao paulo", chooser=never_called)
        assert city.name == "São Paulo"
        assert city.country == "Brazil"

    def test_exact_match_wins_over_fuzzy(self):
        """An exact match does not pull in accent-folded lookalikes."""
        matches = find_cities("Paris")
        assert set(matches["name"]) == {"Paris"}

    def test_country_narrows_shared_names(self):
        """A country filter resolves a shared name without the menu."""
        city = get_city("London", country="canada", chooser=never_called)
        assert city.country == "Canada"
        assert city.lat == pytest.approx(42.9849)

    def test_shared_name_asks_the_chooser(self):
        """Several matches show the disambiguation menu."""
        chooser = ChooserSpy(2)
        city = get_city("Portland", chooser=chooser)

        title, choices = chooser.calls[0]
        assert title == DISAMBIGUATION_TITLE
        assert choices == [
            "Portland, United States | Lat: 45.515 | Long: -122.678",
            "Portland, United States | Lat: 43.659 | Long: -70.257",
        ]
        assert city.lat == pytest.approx(43.6591)

    def test_declined_choice_returns_none(self):
        """Choosing 0 means no city."""
        assert get_city("Hamilton", chooser=ChooserSpy(0)) is None

    def test_out_of_range_choice(self):
        """A choice outside the menu is an error."""
        with pytest.raises(CityError, match="not one of the 3 choices"):
            get_city("Hamilton", chooser=ChooserSpy(7))

    def test_rejects_other_types(self):
        """Only names, records or None are accepted."""
        with pytest.raises(CityError, match="Expected a city name"):
            get_city(42)


class TestGetCityFromRecord:
    """Tests for get_city() with a user-supplied record."""

    @pytest.fixture
    def record(self):
        return {"name": ["Giethoorn"], "country": ["Netherlands"], "lat": [52.7386], "long": [6.0783]}

    def test_data_frame(self, record):
        """The first row of a complete data frame becomes the city."""
        city = get_city(pd.DataFrame(record))
        assert city == City("Giethoorn", "Netherlands", 52.7386, 6.0783)

    def test_mapping(self):
        """A plain mapping works as a single record."""
        city = get_city({"name": "Giethoorn", "country": "Netherlands", "lat": "52.7386N", "long": "6.0783E"})
        assert city.lat == pytest.approx(52.7386)
        assert city.long == pytest.approx(6.0783)

    def test_mapping_of_columns(self, record):
        """A mapping of columns is read like a data frame."""
        city = get_city(record)
        assert city == City("Giethoorn", "Netherlands", 52.7386, 6.0783)

    def test_mapping_of_columns_without_rows(self):
        with pytest.raises(CityError, match="no rows"):
            get_city({"name": [], "country": [], "lat": [], "long": []})

    def test_mapping_of_uneven_columns(self, record):
        record["lat"] = [52.7386, 52.0]
        with pytest.raises(CityError, match="malformed"):
            get_city(record)

    @pytest.mark.parametrize("column", ["name", "country", "lat", "long"])
    def test_missing_column(self, record, column):
        """Each required column is reported by name."""
        del record[column]
        with pytest.raises(CityError, match=f"input data frame is missing '{column}' column"):
            get_city(pd.DataFrame(record))

    def test_first_missing_column_is_reported(self):
        """Columns are checked in name, country, lat, long order."""
        with pytest.raises(CityError, match="missing 'country'"):
            get_city(pd.DataFrame({"name": ["X"], "long": [1.0]}))

    def test_empty_data_frame(self):
        """A frame with the right columns but no rows is rejected."""
        with pytest.raises(CityError, match="no rows"):
            get_city(pd.DataFrame(columns=["name", "country", "lat", "long"]))

    def test_out_of_range_coordinates(self, record):
        """Impossible coordinates are rejected."""
        record["lat"] = [95.0]
        with pytest.raises(CityError, match="Latitude 95.0 out of range"):
            get_city(pd.DataFrame(record))


class TestRandomCity:
    """Tests for random_city() and get_city(None)."""

    def test_seed_is_deterministic(self):
        """The same seed picks the same city every time."""
        assert random_city(seed=42) == random_city(seed=42)

    def test_get_city_without_name_is_random(self):
        """get_city(None) is the seeded random pick."""
        assert get_city(None, seed=7) == random_city(seed=7)

    @pytest.mark.parametrize("seed", range(20))
    def test_only_large_cities(self, seed):
        """Random picks have more than 200000 inhabitants."""
        assert random_city(seed=seed).population > 200000

    def test_threshold_above_everything(self):
        """An impossible threshold is an error, not an empty pick."""
        with pytest.raises(CityError, match="No city has more than"):
            random_city(seed=1, min_population=10**9)


class TestNewCity:
    """Tests for new_city()."""

    def test_string_coordinates(self):
        """Degree/minute/second strings are converted."""
        city = new_city("Giethoorn", "Netherlands", "52°44'19\"N", "6°4'42\"E")
        assert city.lat == pytest.approx(52.7386, abs=1e-3)
        assert city.long == pytest.approx(6.0783, abs=1e-3)
        assert city.population is None

    def test_unparseable_coordinates(self):
        """Garbage coordinates fail with a CityError."""
        with pytest.raises(CityError, match="Invalid coordinates"):
            new_city("Nowhere", "", "north-ish", "5")

    def test_empty_name(self):
        """A city needs a name."""
        with pytest.raises(CityError, match="empty"):
            new_city("  ", "Netherlands", 52, 5)

    def test_point_is_lat_long(self):
        """point is (lat, long) for osmnx."""
        assert new_city("X", "Y", 1.5, 2.5).point == (1.5, 2.5)


class TestConsoleMenu:
    """Tests for the interactive console_menu()."""

    def test_returns_selection(self, monkeypatch, capsys):
        """The typed number is returned after re-asking on bad input."""
        answers = iter(["abc", "9", "2"])
        monkeypatch.setattr("builtins.input", lambda prompt: next(answers))
        assert console_menu("Pick", ["a", "b"]) == 2
        out = capsys.readouterr().out
        assert "1: a" in out
        assert "Enter an item from the menu" in out

    def test_blank_means_declined(self, monkeypatch):
        """An empty answer is 0."""
        monkeypatch.setattr("builtins.input", lambda prompt: "")
        assert console_menu("Pick", ["a"]) == 0


class TestGeocodeCity:
    """Tests for geocode_city() with a fake geocoder."""

    @pytest.fixture
    def geocoder(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CACHE_DIR", str(tmp_path / "cache"))
        monkeypatch.setattr(cities.time, "sleep", lambda s: None)
        calls = []

        class FakeNominatim:
            def __init__(self, **kwargs):
                pass

            def geocode(self, query):
                calls.append(query)
                if query.startswith("Nowhere"):
                    return None
                return SimpleNamespace(latitude=52.7386, longitude=6.0783, address="Giethoorn, NL")

        monkeypatch.setattr(cities, "Nominatim", FakeNominatim)
        return calls

    def test_geocodes_and_caches(self, geocoder):
        """The second lookup is served from the cache."""
        first = geocode_city("Giethoorn", "Netherlands")
        second = geocode_city("Giethoorn", "Netherlands")
        assert first == second == City("Giethoorn", "Netherlands", 52.7386, 6.0783)
        assert geocoder == ["Giethoorn, Netherlands"]

    def test_not_found(self, geocoder):
        """A place the geocoder does not know is a CityError."""
        with pytest.raises(CityError, match="Could not find coordinates for Nowhere"):
            geocode_city("Nowhere", "Land")
