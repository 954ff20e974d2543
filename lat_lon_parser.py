"""
Latitude/longitude parser

Parses coordinate strings in decimal or degree/minute/second notation to
decimal degrees. Used for user-supplied city records and the CLI overrides.
"""

import re

# Minutes and seconds must be set off by a unit mark or whitespace
_COORDINATE = re.compile(
    r"""
    (?P<sign>[-+])?\s*
    (?P<prefix>[NSEW])?\s*
    (?P<degrees>\d+(?:\.\d+)?)\s*°?
    (?:
        (?<=[°\s])\s*(?P<minutes>\d+(?:\.\d+)?)\s*'?
        (?:
            (?<=['\s])\s*(?P<seconds>\d+(?:\.\d+)?)\s*"?
        )?
    )?
    \s*(?P<suffix>[NSEW])?
    """,
    re.VERBOSE,
)


def parse(coord_str) -> float:
    """
    Parse a coordinate string to decimal degrees.

    Supports formats:
    - Decimal: "40.7128" or "-74.0060"
    - Hemisphere suffix or prefix: "40.7128N", "W74.0060"
    - Degrees/minutes/seconds: "52°22'12\\"N" or "52 22 12 N"

    Numbers (int/float) are returned as float unchanged.

    Raises:
        ValueError: If the value cannot be parsed
    """
    if coord_str is None:
        raise ValueError("Coordinate string cannot be None")
    if isinstance(coord_str, (int, float)) and not isinstance(coord_str, bool):
        return float(coord_str)

    text = str(coord_str).strip().upper()
    if not text:
        raise ValueError("Coordinate string cannot be empty")

    match = _COORDINATE.fullmatch(text)
    if match is None or (match["prefix"] and match["suffix"]):
        raise ValueError(f"Could not parse coordinate: {coord_str}")

    degrees = float(match["degrees"])
    minutes = float(match["minutes"] or 0)
    seconds = float(match["seconds"] or 0)
    if minutes >= 60 or seconds >= 60:
        raise ValueError(f"Minutes and seconds must be below 60: {coord_str}")
    value = degrees + minutes / 60 + seconds / 3600

    hemisphere = match["prefix"] or match["suffix"]
    if match["sign"] == "-" or hemisphere in ("S", "W"):
        value = -value

    return value
