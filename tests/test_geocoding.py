import time

import pytest
import requests
import responses

from repeateratlas import geocoding
from repeateratlas.geo import Point
from repeateratlas.geocoding import (
    GeocodingError,
    NominatimGeocoder,
    NullGeocoder,
    nominatim_enabled_from_env,
    nominatim_geocoder_from_env,
)

BASE = "http://nominatim.example.com"
SEARCH = f"{BASE}/search"
ROW = {"lat": "63.4305", "lon": "10.3951", "display_name": "Trondheim"}


def make_geocoder(tmp_path, name="cache.csv"):
    return NominatimGeocoder(
        base_url=BASE + "/",
        user_agent="Test Agent",
        cache_path=tmp_path / name,
        session=requests.Session(),
        min_interval=0.0,
    )


def test_null_geocoder_returns_none():
    assert NullGeocoder().geocode_one("Trondheim") is None


def test_enabled_when_unset(monkeypatch):
    monkeypatch.delenv("NOMINATIM_ENABLED", raising=False)
    assert nominatim_enabled_from_env() is True


@pytest.mark.parametrize(
    "value, expected",
    [("1", True), (" YES ", True), ("on", True), ("off", False), ("0", False), ("maybe", False)],
)
def test_enabled_values(monkeypatch, value, expected):
    monkeypatch.setenv("NOMINATIM_ENABLED", value)
    assert nominatim_enabled_from_env() is expected


def test_geocode_fetches_and_caches(tmp_path):
    geocoder = make_geocoder(tmp_path)
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, SEARCH, json=[ROW])
        first = geocoder.geocode_one("  Trondheim ")
        second = geocoder.geocode_one("Trondheim")
        assert len(rsps.calls) == 1
        request = rsps.calls[0].request
        assert "format=jsonv2" in request.url
        assert "q=Trondheim" in request.url
        assert request.headers["User-Agent"] == "Test Agent"
    assert first == Point(63.4305, 10.3951)
    assert second == first
    lines = (tmp_path / "cache.csv").read_text().splitlines()
    assert lines[0] == "query,latitude,longitude"
    assert len(lines) == 2


def test_cache_file_is_reused(tmp_path):
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, SEARCH, json=[ROW])
        make_geocoder(tmp_path).geocode_one("Trondheim")
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        result = make_geocoder(tmp_path).geocode_one("Trondheim")
        assert len(rsps.calls) == 0
    assert result == Point(63.4305, 10.3951)


def test_empty_query_makes_no_request(tmp_path):
    geocoder = make_geocoder(tmp_path)
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        assert geocoder.geocode_one("   ") is None
        assert len(rsps.calls) == 0


def test_no_results_returns_none(tmp_path):
    geocoder = make_geocoder(tmp_path)
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, SEARCH, json=[])
        assert geocoder.geocode_one("Nowhere") is None
    assert not (tmp_path / "cache.csv").exists()


def test_invalid_latitude_raises(tmp_path):
    geocoder = make_geocoder(tmp_path)
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, SEARCH, json=[{"lat": "north", "lon": "10.0"}])
        with pytest.raises(GeocodingError, match="lat"):
            geocoder.geocode_one("Somewhere")


def test_non_finite_result_returns_none(tmp_path):
    geocoder = make_geocoder(tmp_path)
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, SEARCH, json=[{"lat": "nan", "lon": "10.0"}])
        assert geocoder.geocode_one("Somewhere") is None


def test_http_error_raises(tmp_path):
    geocoder = make_geocoder(tmp_path)
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, SEARCH, status=500)
        with pytest.raises(GeocodingError):
            geocoder.geocode_one("Somewhere")


def test_cache_skips_blank_and_non_finite_rows(tmp_path):
    (tmp_path / "cache.csv").write_text(
        "query,latitude,longitude\n ,1.0,2.0\nNowhere,nan,1.0\nOslo,59.9,10.7\n"
    )
    geocoder = make_geocoder(tmp_path)
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, SEARCH, json=[])
        assert geocoder.geocode_one("Oslo") == Point(59.9, 10.7)
        assert geocoder.geocode_one("Nowhere") is None
        assert len(rsps.calls) == 1


def test_malformed_cache_raises(tmp_path):
    (tmp_path / "cache.csv").write_text("query,latitude\nOslo,59.9\n")
    with pytest.raises(GeocodingError):
        make_geocoder(tmp_path)


def test_rate_limit_spaces_requests(tmp_path):
    geocoder = NominatimGeocoder(
        base_url=BASE, cache_path=tmp_path / "c.csv", session=requests.Session(), min_interval=0.2
    )
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, SEARCH, json=[ROW])
        started = time.monotonic()
        first = geocoder.geocode_one("a")
        second = geocoder.geocode_one("b")
        elapsed = time.monotonic() - started
        assert len(rsps.calls) == 2
    assert first == Point(63.4305, 10.3951)
    assert second == Point(63.4305, 10.3951)
    assert elapsed >= 0.2


def test_from_env_strips_trailing_slash(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("NOMINATIM_BASE_URL", "http://geo.example.com/")
    geocoder = NominatimGeocoder.from_env()
    assert geocoder.base_url == "http://geo.example.com"


def test_disabled_env_gives_null_geocoder(monkeypatch):
    monkeypatch.setenv("NOMINATIM_ENABLED", "false")
    geocoder = nominatim_geocoder_from_env()
    assert isinstance(geocoder, NullGeocoder)
    assert geocoder.geocode_one("Trondheim") is None


def test_enabled_env_gives_shared_instance(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("NOMINATIM_ENABLED", "true")
    geocoding._shared_nominatim.cache_clear()
    try:
        first = nominatim_geocoder_from_env()
        second = nominatim_geocoder_from_env()
        assert isinstance(first, NominatimGeocoder)
        assert first is second
    finally:
        geocoding._shared_nominatim.cache_clear()