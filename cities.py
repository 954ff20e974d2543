"""
City resolution.

Turns a city name, a user-supplied record or nothing at all into a single
City: exact or accent-insensitive lookup in the bundled data/cities.csv,
interactive disambiguation when a name is shared, a seeded random pick among
large cities, and geocoding for places the table does not know.
"""

from __future__ import annotations

import logging
import os
import sys
import time
import unicodedata
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Callable, Optional

import pandas as pd
from geopy.geocoders import Nominatim

from cache import CacheError, cache_get, cache_set
from lat_lon_parser import parse

logger = logging.getLogger("cityviews")

if getattr(sys, 'frozen', False):
    BASE_DIR = os.path.dirname(sys.executable)
else:
    BASE_DIR = os.path.dirname(os.path.abspath(__file__))

CITIES_FILE = os.path.join(BASE_DIR, "data", "cities.csv")

REQUIRED_COLUMNS = ("name", "country", "lat", "long")
RANDOM_MIN_POPULATION = 200000

DISAMBIGUATION_TITLE = "More than one city matched to this name, which one to pick?"

# Receives a title and the formatted choices, returns a 1-based index or 0.
Chooser = Callable[[str, list[str]], int]

_cities_cache: Optional[pd.DataFrame] = None


class CityError(ValueError):
    """Raised when a city cannot be resolved."""


@dataclass(frozen=True)
class City:
    """A resolved city: display name, country and center point."""

    name: str
    country: str
    lat: float
    long: float
    population: Optional[int] = None

    @property
    def point(self) -> tuple[float, float]:
        """(latitude, longitude) as expected by osmnx."""
        return (self.lat, self.long)

    @classmethod
    def from_row(cls, row: Mapping) -> City:
        population = row.get("population")
        if population is not None and pd.isna(population):
            population = None
        return cls(
            name=str(row["name"]),
            country=str(row["country"]),
            lat=float(row["lat"]),
            long=float(row["long"]),
            population=int(population) if population is not None else None,
        )


def validate_coordinates(lat: float, lon: float) -> None:
    """Validate that coordinates are within valid ranges."""
    if not -90 <= lat <= 90:
        raise ValueError(f"Latitude {lat} out of range. Must be between -90 and 90.")
    if not -180 <= lon <= 180:
        raise ValueError(f"Longitude {lon} out of range. Must be between -180 and 180.")


def load_cities() -> pd.DataFrame:
    """Load the bundled city table. Cached after the first call."""
    global _cities_cache
    if _cities_cache is None:
        logger.debug("Loading cities from %s", CITIES_FILE)
        _cities_cache = pd.read_csv(CITIES_FILE, encoding="utf-8")
    return _cities_cache


def _fold(text: str) -> str:
    """Case- and accent-insensitive form of a name."""
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return " ".join(stripped.casefold().split())


def find_cities(
    name: str,
    dataset: Optional[pd.DataFrame] = None,
    country: Optional[str] = None,
) -> pd.DataFrame:
    """
    Rows of the city table matching a name, optionally within one country.

    Exact matches win; without any, names are compared ignoring case,
    accents and surrounding whitespace. Countries are always compared that way.
    """
    if dataset is None:
        dataset = load_cities()
    if country:
        dataset = dataset[dataset["country"].map(_fold) == _fold(country)]
    matches = dataset[dataset["name"] == name]
    if matches.empty:
        folded = _fold(name)
        matches = dataset[dataset["name"].map(_fold) == folded]
    return matches


def format_choice(row: Mapping) -> str:
    return (
        f"{row['name']}, {row['country']} | "
        f"Lat: {round(float(row['lat']), 3)} | Long: {round(float(row['long']), 3)}"
    )


def console_menu(title: str, choices: list[str]) -> int:
    """
    Numbered console menu. Returns the 1-based choice, or 0 when the user
    enters 0 or nothing.
    """
    print(title)
    print()
    for i, choice in enumerate(choices, start=1):
        print(f"{i}: {choice}")
    print()
    while True:
        answer = input("Selection: ").strip()
        if not answer:
            return 0
        if answer.isdigit() and 0 <= int(answer) <= len(choices):
            return int(answer)
        print("Enter an item from the menu, or 0 to exit")


def resolve_conflicts(
    name: str,
    matches: pd.DataFrame,
    chooser: Optional[Chooser] = None,
) -> Optional[City]:
    """
    Pick one city out of the rows matching `name`.

    Raises:
        CityError: If nothing matched

    Returns:
        The chosen City, or None when the user declined to choose
    """
    if matches.empty:
        raise CityError(
            f"There is no city called '{name}' in the available data.\n"
            "Use 'new_city()' or pass --latitude/--longitude to map it anyway."
        )
    if len(matches) == 1:
        return City.from_row(matches.iloc[0])

    rows = [row for _, row in matches.iterrows()]
    choices = [format_choice(row) for row in rows]
    chooser = chooser or console_menu
    selection = chooser(DISAMBIGUATION_TITLE, choices)
    if not selection:
        logger.info("No city selected")
        return None
    if not 1 <= selection <= len(rows):
        raise CityError(f"Selection {selection} is not one of the {len(rows)} choices")
    return City.from_row(rows[selection - 1])


def random_city(
    seed: Optional[int] = None,
    min_population: int = RANDOM_MIN_POPULATION,
) -> City:
    """
    Pick a random city with more than `min_population` inhabitants.

    The same seed always yields the same city.
    """
    dataset = load_cities()
    candidates = dataset[dataset["population"] > min_population]
    if candidates.empty:
        raise CityError(f"No city has more than {min_population} inhabitants")
    selected = candidates.sample(n=1, random_state=seed).iloc[0]
    city = City.from_row(selected)
    logger.info("Randomly selected %s, %s", city.name, city.country)
    return city


def _city_from_record(record) -> City:
    # Column-form mappings ({"name": ["..."], ...}) are read like a data frame
    if isinstance(record, Mapping) and any(pd.api.types.is_list_like(v) for v in record.values()):
        try:
            record = pd.DataFrame(dict(record))
        except ValueError as e:
            raise CityError(f"input data frame is malformed: {e}") from e

    if isinstance(record, pd.DataFrame):
        columns = list(record.columns)
    else:
        columns = list(record.keys())
    for column in REQUIRED_COLUMNS:
        if column not in columns:
            raise CityError(f"input data frame is missing '{column}' column")

    if isinstance(record, pd.DataFrame):
        if record.empty:
            raise CityError("input data frame has no rows")
        row = record.iloc[0]
    else:
        row = record
    return new_city(row["name"], row["country"], row["lat"], row["long"])


def get_city(
    name=None,
    seed: Optional[int] = None,
    chooser: Optional[Chooser] = None,
    country: Optional[str] = None,
) -> Optional[City]:
    """
    Resolve the city to draw.

    Args:
        name: None for a random city, a city name, or a DataFrame/mapping
              with name, country, lat and long; a mapping holds either
              one value per key or one column of values per key
        seed: Seed for the random pick
        chooser: Disambiguation callback, defaults to a console menu
        country: Only consider cities in this country when matching a name

    Returns:
        The City, or None if the user declined disambiguation
    """
    if name is None:
        return random_city(seed)
    if isinstance(name, (pd.DataFrame, Mapping)):
        return _city_from_record(name)
    if not isinstance(name, str):
        raise CityError(f"Expected a city name or a data frame, got {type(name).__name__}")
    return resolve_conflicts(name, find_cities(name, country=country), chooser)


def new_city(name: str, country: str, lat, long) -> City:
    """
    Build a city from user coordinates.

    Coordinates may be numbers or strings such as "52.37N" or "4°53'E".
    """
    if not str(name).strip():
        raise CityError("City name cannot be empty")
    try:
        lat_value = parse(lat)
        long_value = parse(long)
        validate_coordinates(lat_value, long_value)
    except ValueError as e:
        raise CityError(f"Invalid coordinates for {name}: {e}") from e
    return City(name=str(name), country=str(country), lat=lat_value, long=long_value)


def geocode_city(name: str, country: str) -> City:
    """
    Look up a city that is not in the bundled table through Nominatim.
    Includes rate limiting to be respectful to the geocoding service.
    """
    cache_key = f"coords_{name.lower()}_{country.lower()}"
    try:
        cached = cache_get(cache_key)
    except CacheError as e:
        logger.warning("Could not read coordinate cache: %s", e)
        cached = None
    if cached:
        logger.info("Using cached coordinates for %s, %s", name, country)
        return new_city(name, country, cached[0], cached[1])

    logger.info("Looking up coordinates...")
    geolocator = Nominatim(user_agent="cityviews", timeout=10)

    # Nominatim's usage policy allows one request per second
    time.sleep(1)

    try:
        location = geolocator.geocode(f"{name}, {country}")
    except Exception as e:
        raise CityError(f"Geocoding failed for {name}, {country}: {e}") from e

    if not location:
        raise CityError(f"Could not find coordinates for {name}, {country}")

    logger.info("Found: %s", getattr(location, "address", None) or name)
    logger.info("Coordinates: %s, %s", location.latitude, location.longitude)
    try:
        cache_set(cache_key, [location.latitude, location.longitude])
    except CacheError as e:
        logger.warning("Could not cache coordinates: %s", e)
    return new_city(name, country, location.latitude, location.longitude)
