"""Fill in missing location details for a repeater from its address or locator."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .geo import InvalidLocatorError, MaidenheadLocator, Point, latlon_to_grid
from .geocoding import Geocoder, GeocodingError

logger = logging.getLogger(__name__)

DEFAULT_MAIDENHEAD_LEN = 6


@dataclass(frozen=True)
class EnrichedLocation:
    """The address, locator and point resolved for a location."""

    address: str | None = None
    maidenhead: MaidenheadLocator | None = None
    point: Point | None = None


def enrich_location(
    geocoder: Geocoder,
    call_sign: str,
    address: str | None,
    maidenhead: MaidenheadLocator | None,
) -> EnrichedLocation:
    """Resolve a location, preferring a given locator over geocoding the address."""
    if address is not None:
        address = address.strip() or None

    if maidenhead is not None:
        return EnrichedLocation(address=address, maidenhead=maidenhead, point=maidenhead.center())

    if address is None:
        return EnrichedLocation()

    location = geocoder.geocode_one(address)
    if location is None:
        logger.warning("Failed to geocode repeater address call_sign=%s address=%s", call_sign, address)
        return EnrichedLocation()

    try:
        grid = latlon_to_grid(location.latitude, location.longitude, DEFAULT_MAIDENHEAD_LEN)
    except InvalidLocatorError as error:
        raise GeocodingError("failed to compute maidenhead") from error

    try:
        locator: MaidenheadLocator | None = MaidenheadLocator(grid)
    except InvalidLocatorError as error:
        logger.warning(
            "Failed to compute maidenhead location call_sign=%s address=%s: %s",
            call_sign,
            address,
            error,
        )
        locator = None

    logger.info("Resolved %s to %s", address, location)
    return EnrichedLocation(address=address, maidenhead=locator, point=location)