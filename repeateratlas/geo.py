"""Geographic primitives: points, Maidenhead locators and great-circle distance."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

EARTH_RADIUS_KM = 6_371.0

# Each locator pair splits the current cell into this many columns/rows.
_PAIR_SYMBOLS = (
    "ABCDEFGHIJKLMNOPQR",
    "0123456789",
    "abcdefghijklmnopqrstuvwx",
    "0123456789",
    "abcdefghijklmnopqrstuvwx",
)
_VALID_LENGTHS = tuple(2 * (n + 1) for n in range(len(_PAIR_SYMBOLS)))
_LOCATOR_RE = re.compile(
    r"^[A-Ra-r]{2}(?:\d{2}(?:[A-Xa-x]{2}(?:\d{2}(?:[A-Xa-x]{2})?)?)?)?$"
)


class InvalidLocatorError(ValueError):
    """Raised for malformed locators or coordinates that cannot be encoded."""


@dataclass(frozen=True)
class Point:
    """A WGS84 position in decimal degrees."""

    latitude: float
    longitude: float

    def __str__(self) -> str:
        return f"{self.latitude}, {self.longitude}"


def _cells():
    """Yield (symbols, lon_cell, lat_cell) for each successive pair."""
    lon_cell, lat_cell = 360.0, 180.0
    for symbols in _PAIR_SYMBOLS:
        divisions = len(symbols)
        lon_cell /= divisions
        lat_cell /= divisions
        yield symbols, lon_cell, lat_cell


@dataclass(frozen=True)
class MaidenheadLocator:
    """A validated Maidenhead grid locator such as ``JP53ek``."""

    value: str

    def __post_init__(self) -> None:
        raw = self.value.strip() if isinstance(self.value, str) else ""
        if not _LOCATOR_RE.match(raw):
            raise InvalidLocatorError(f"invalid maidenhead locator: {self.value!r}")
        pairs = [raw[i : i + 2] for i in range(0, len(raw), 2)]
        normalized = "".join(
            pair.upper() if _PAIR_SYMBOLS[index].isupper() else pair.lower()
            for index, pair in enumerate(pairs)
        )
        object.__setattr__(self, "value", normalized)

    def __str__(self) -> str:
        return self.value

    def center(self) -> Point:
        """Return the centre of the grid square this locator names."""
        longitude, latitude = -180.0, -90.0
        lon_cell = lat_cell = 0.0
        pairs = [self.value[i : i + 2] for i in range(0, len(self.value), 2)]
        for pair, (symbols, lon_cell, lat_cell) in zip(pairs, _cells()):
            longitude += symbols.index(pair[0]) * lon_cell
            latitude += symbols.index(pair[1]) * lat_cell
        return Point(latitude + lat_cell / 2.0, longitude + lon_cell / 2.0)


def latlon_to_grid(latitude: float, longitude: float, length: int = 6) -> str:
    """Encode a position as a Maidenhead locator of ``length`` characters."""
    if length not in _VALID_LENGTHS:
        raise InvalidLocatorError(f"unsupported locator length: {length}")
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise InvalidLocatorError("coordinates must be finite")
    if not -90.0 <= latitude <= 90.0:
        raise InvalidLocatorError(f"latitude out of range: {latitude}")
    if not -180.0 <= longitude <= 180.0:
        raise InvalidLocatorError(f"longitude out of range: {longitude}")

    lon = longitude + 180.0
    lat = latitude + 90.0
    chars = []
    for _, (symbols, lon_cell, lat_cell) in zip(range(length // 2), _cells()):
        last = len(symbols) - 1
        lon_index = min(int(lon // lon_cell), last)
        lat_index = min(int(lat // lat_cell), last)
        lon -= lon_index * lon_cell
        lat -= lat_index * lat_cell
        chars.append(symbols[lon_index])
        chars.append(symbols[lat_index])
    return "".join(chars)


def distance_km(a: Point, b: Point) -> float:
    """Great-circle distance between two points using the haversine formula."""
    dlat = math.radians(b.latitude - a.latitude)
    dlon = math.radians(b.longitude - a.longitude)
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)

    h = math.sin(dlat / 2.0) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2.0) ** 2
    c = 2.0 * math.atan2(math.sqrt(h), math.sqrt(1.0 - h))
    return EARTH_RADIUS_KM * c