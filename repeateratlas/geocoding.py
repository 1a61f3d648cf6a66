"""Address geocoding backed by a Nominatim service with an on-disk CSV cache."""

from __future__ import annotations

import csv
import functools
import logging
import math
import os
import threading
import time
from abc import ABC, abstractmethod
from pathlib import Path

import requests

from .geo import Point

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_USER_AGENT = "Repeater Atlas"
DEFAULT_CACHE_PATH = Path("data/geocoder.csv")
CACHE_FIELDS = ("query", "latitude", "longitude")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class GeocodingError(Exception):
    """Raised when geocoding fails for reasons other than "no match"."""


class Geocoder(ABC):
    """Resolves a free-text query to a single point."""

    @abstractmethod
    def geocode_one(self, query: str) -> Point | None:
        """Return the best match for ``query`` or ``None`` if nothing matched."""


class NullGeocoder(Geocoder):
    """A geocoder that never finds anything."""

    def geocode_one(self, query: str) -> Point | None:
        return None


def nominatim_enabled_from_env() -> bool:
    """Read ``NOMINATIM_ENABLED``; unset means enabled, unknown values disable."""
    value = os.environ.get("NOMINATIM_ENABLED")
    if value is None:
        return True
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized not in _FALSE_VALUES:
        logger.warning("Invalid NOMINATIM_ENABLED value %r; treating as disabled", value)
    return False


def _load_cache(path: Path) -> dict[str, Point]:
    try:
        with path.open(newline="", encoding="utf-8") as handle:
            reader = csv.DictReader(handle)
            cache: dict[str, Point] = {}
            for row in reader:
                query = (row.get("query") or "").strip()
                if not query:
                    continue
                try:
                    latitude = float(row["latitude"])
                    longitude = float(row["longitude"])
                except (KeyError, TypeError, ValueError) as error:
                    raise GeocodingError(f"invalid geocoder cache row in {path}: {row}") from error
                if not (math.isfinite(latitude) and math.isfinite(longitude)):
                    logger.warning(
                        "Skipping non-finite cached geocode coordinates %s, %s",
                        latitude,
                        longitude,
                    )
                    continue
                cache[query] = Point(latitude, longitude)
            return cache
    except FileNotFoundError:
        return {}
    except (OSError, csv.Error) as error:
        raise GeocodingError(f"failed to read geocoder cache {path}: {error}") from error


class NominatimGeocoder(Geocoder):
    """Geocoder that queries a Nominatim ``/search`` endpoint, rate limited and cached."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        cache_path: str | os.PathLike = DEFAULT_CACHE_PATH,
        session: requests.Session | None = None,
        min_interval: float = 1.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.cache_path = Path(cache_path)
        self._session = session if session is not None else requests.Session()
        self._session.headers["User-Agent"] = user_agent
        self._min_interval = min_interval
        self._next_allowed = time.monotonic()
        self._rate_lock = threading.Lock()
        self._cache = _load_cache(self.cache_path)
        self._cache_lock = threading.Lock()
        self._write_lock = threading.Lock()

    @classmethod
    def from_env(cls) -> NominatimGeocoder:
        """Build a geocoder from ``NOMINATIM_BASE_URL`` and ``NOMINATIM_USER_AGENT``."""
        return cls(
            base_url=os.environ.get("NOMINATIM_BASE_URL", DEFAULT_BASE_URL),
            user_agent=os.environ.get("NOMINATIM_USER_AGENT", DEFAULT_USER_AGENT),
            cache_path=DEFAULT_CACHE_PATH,
        )

    def _wait_turn(self) -> None:
        with self._rate_lock:
            delay = self._next_allowed - time.monotonic()
            if delay > 0:
                time.sleep(delay)
            self._next_allowed = time.monotonic() + self._min_interval

    def _append_cache(self, query: str, location: Point) -> None:
        with self._write_lock:
            try:
                write_header = not self.cache_path.exists() or self.cache_path.stat().st_size == 0
                self.cache_path.parent.mkdir(parents=True, exist_ok=True)
                with self.cache_path.open("a", newline="", encoding="utf-8") as handle:
                    writer = csv.writer(handle)
                    if write_header:
                        writer.writerow(CACHE_FIELDS)
                    writer.writerow((query, repr(location.latitude), repr(location.longitude)))
            except OSError as error:
                raise GeocodingError(f"failed to write geocoder cache: {error}") from error

    def _search(self, query: str) -> list:
        url = f"{self.base_url}/search"
        logger.debug("Nominatim geocode url=%s query=%s", url, query)
        params = [("q", query), ("format", "jsonv2"), ("limit", "1"), ("addressdetails", "0")]
        try:
            response = self._session.get(url, params=params, timeout=30)
            response.raise_for_status()
            rows = response.json()
        except (requests.RequestException, ValueError) as error:
            raise GeocodingError(f"nominatim request failed: {error}") from error
        if not isinstance(rows, list):
            raise GeocodingError("unexpected response from nominatim")
        return rows

    def geocode_one(self, query: str) -> Point | None:
        query = query.strip()
        if not query:
            return None

        with self._cache_lock:
            cached = self._cache.get(query)
        if cached is not None:
            return cached

        self._wait_turn()
        rows = self._search(query)
        if not rows:
            return None

        first = rows[0]
        try:
            latitude = float(first["lat"])
        except (KeyError, TypeError, ValueError) as error:
            raise GeocodingError("invalid lat value from nominatim") from error
        try:
            longitude = float(first["lon"])
        except (KeyError, TypeError, ValueError) as error:
            raise GeocodingError("invalid lon value from nominatim") from error

        if not (math.isfinite(latitude) and math.isfinite(longitude)):
            logger.warning("Nominatim returned non-finite coordinates %s, %s", latitude, longitude)
            return None

        location = Point(latitude, longitude)
        with self._cache_lock:
            is_new = query not in self._cache
            if is_new:
                self._cache[query] = location
        if is_new:
            self._append_cache(query, location)
        return location


_NULL_GEOCODER = NullGeocoder()


@functools.lru_cache(maxsize=None)
def _shared_nominatim() -> tuple[NominatimGeocoder | None, str | None]:
    try:
        return NominatimGeocoder.from_env(), None
    except GeocodingError as error:
        return None, f"failed to init Nominatim client: {error}"


def nominatim_geocoder_from_env() -> Geocoder:
    """Return the process-wide geocoder, or a null one when Nominatim is disabled."""
    if not nominatim_enabled_from_env():
        return _NULL_GEOCODER
    geocoder, error = _shared_nominatim()
    if geocoder is None:
        raise GeocodingError(f"nominatim init error: {error}")
    return geocoder