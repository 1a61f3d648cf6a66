"""Request-level helpers: logbook options, call sign search and user locations."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

from .enrich import enrich_location
from .geo import InvalidLocatorError, MaidenheadLocator, latlon_to_grid
from .geocoding import Geocoder, nominatim_geocoder_from_env

SEARCH_LIMIT = 50
DEFAULT_LOG_PAGES = 10
MIN_LOG_PAGES = 1
MAX_LOG_PAGES = 100
LOCATOR_LENGTH = 6


class PageSize(enum.Enum):
    """Paper size of a generated logbook."""

    A4 = "a4"
    A5 = "a5"

    def as_typst(self) -> str:
        """Return the paper name understood by the typesetter."""
        return self.value


@dataclass(frozen=True)
class LogbookLocation:
    """A user location as printed in the logbook; missing parts are empty strings."""

    address: str
    maidenhead: str
    latlon: str

    @classmethod
    def from_parts(
        cls,
        address: Optional[str],
        maidenhead: Optional[str],
        latitude: Optional[float],
        longitude: Optional[float],
    ) -> LogbookLocation:
        if latitude is not None and longitude is not None:
            latlon = f"{latitude:.5f}, {longitude:.5f}"
        else:
            latlon = ""
        return cls(address=address or "", maidenhead=maidenhead or "", latlon=latlon)


def parse_page_size(value: Optional[str]) -> PageSize:
    """``"a5"`` selects A5; anything else falls back to A4."""
    return PageSize.A5 if value == "a5" else PageSize.A4


def clamp_log_pages(value: Optional[int]) -> int:
    """Number of log pages: defaults to 10 and is kept between 1 and 100."""
    pages = DEFAULT_LOG_PAGES if value is None else value
    return min(max(pages, MIN_LOG_PAGES), MAX_LOG_PAGES)


def logbook_filename(call_sign: str, extension: str) -> str:
    """Download file name for a user's logbook."""
    return f"logbook-{call_sign.lower()}.{extension}"


class CallSignKind(enum.Enum):
    """What a registered call sign belongs to."""

    REPEATER = "repeater"
    CONTACT = "contact"


def call_sign_kind_label(kind: CallSignKind) -> str:
    """Label used for a call sign kind in search results."""
    if kind is CallSignKind.REPEATER:
        return "repeater"
    if kind is CallSignKind.CONTACT:
        return "organization"
    raise ValueError(f"unknown call sign kind: {kind!r}")


def normalize_search_prefix(query: Optional[str]) -> Optional[str]:
    """Upper-cased, trimmed search prefix, or ``None`` when there is nothing to search."""
    if query is None:
        return None
    trimmed = query.strip()
    if not trimmed:
        return None
    return trimmed.upper()


def parse_coord(value: Optional[str]) -> Optional[float]:
    """Parse a coordinate form field; blank or malformed input yields ``None``."""
    if value is None:
        return None
    text = value.strip()
    if not text or "_" in text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def resolve_location(
    address: Optional[str],
    maidenhead: Optional[str],
    latitude: Optional[float],
    longitude: Optional[float],
    geocoder: Optional[Geocoder] = None,
) -> tuple[Optional[str], Optional[str], Optional[float], Optional[float]]:
    """Resolve (address, locator, latitude, longitude) for a user location.

    Explicit coordinates win and only gain a locator. Otherwise a given
    locator is used, or the address is geocoded.
    """
    if latitude is not None and longitude is not None:
        try:
            locator: Optional[str] = str(
                MaidenheadLocator(latlon_to_grid(latitude, longitude, LOCATOR_LENGTH))
            )
        except InvalidLocatorError:
            locator = None
        return address, locator, latitude, longitude

    parsed: Optional[MaidenheadLocator] = None
    if maidenhead is not None and maidenhead.strip():
        try:
            parsed = MaidenheadLocator(maidenhead)
        except InvalidLocatorError as error:
            raise InvalidLocatorError(f"invalid maidenhead: {error}") from error

    if geocoder is None:
        geocoder = nominatim_geocoder_from_env()
    enriched = enrich_location(geocoder, "", address, parsed)

    point = enriched.point
    return (
        enriched.address,
        str(enriched.maidenhead) if enriched.maidenhead is not None else None,
        point.latitude if point is not None else None,
        point.longitude if point is not None else None,
    )


@dataclass(frozen=True)
class AuthHeader:
    """Who is viewing a page."""

    logged_in: bool
    call_sign: str

    @classmethod
    def anonymous(cls) -> AuthHeader:
        return cls(logged_in=False, call_sign="")

    @classmethod
    def logged_in_as(cls, call_sign: str) -> AuthHeader:
        return cls(logged_in=True, call_sign=call_sign)