"""Nominatim geocoder tests"""

import json
import logging
from typing import Any, Optional

import pytest
import requests

from maptoposter.features.geocoding.domain.models import GeocodeQuery, Location
from maptoposter.features.geocoding.providers.nominatim_geocoder import NominatimGeocoder
from maptoposter.shared.exceptions.errors import (
    GeocodingDecodeError,
    GeocodingError,
    GeocodingHTTPStatusError,
    GeocodingTransportError,
    InvalidCoordinateError,
    NoResultsError,
    ValidationError,
)


def make_candidate(**overrides: Any) -> dict[str, Any]:
    """A realistic jsonv2 search result"""
    candidate = {
        "place_id": 298156491,
        "licence": "Data © OpenStreetMap contributors, ODbL 1.0. http://osm.org/copyright",
        "osm_type": "relation",
        "osm_id": 175905,
        "lat": "40.7127281",
        "lon": "-74.0060152",
        "category": "boundary",
        "type": "administrative",
        "place_rank": 16,
        "importance": 0.8175766114518461,
        "addresstype": "city",
        "name": "New York",
        "display_name": "New York, United States",
        "boundingbox": ["40.4765780", "40.9176300", "-74.2588430", "-73.7002330"],
    }
    candidate.update(overrides)
    return candidate


def make_response(body: Any, status_code: int = 200, raw: Optional[bytes] = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.url = "https://nominatim.example/search"
    response._content = raw if raw is not None else json.dumps(body).encode("utf-8")
    return response


class _Recorder:
    """Stand-in for requests.Session.get that records every call"""

    def __init__(self, response: Optional[requests.Response] = None, error: Optional[Exception] = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def __call__(self, session: requests.Session, url: str, **kwargs: Any) -> requests.Response:
        self.calls.append({"url": url, "session_headers": dict(session.headers), **kwargs})
        if self.error is not None:
            raise self.error
        assert self.response is not None
        return self.response


@pytest.fixture
def geocoder() -> NominatimGeocoder:
    return NominatimGeocoder(
        user_agent="maptoposter 0.1.0",
        base_url="https://nominatim.example/",
        timeout=5.0,
    )


def install(monkeypatch: pytest.MonkeyPatch, recorder: _Recorder) -> _Recorder:
    def fake_get(session: requests.Session, url: str, **kwargs: Any) -> requests.Response:
        return recorder(session, url, **kwargs)

    monkeypatch.setattr(requests.Session, "get", fake_get)
    return recorder


def test_resolve_returns_first_candidate(monkeypatch: pytest.MonkeyPatch, geocoder: NominatimGeocoder) -> None:
    """The service's own ranking is kept: index 0 always wins"""
    body = [
        make_candidate(),
        make_candidate(lat="43.0", lon="-75.0", display_name="New York State, United States", importance=0.99),
    ]
    install(monkeypatch, _Recorder(make_response(body)))

    location = geocoder.resolve(GeocodeQuery(city="New York", country="USA"))

    assert location == Location(display_name="New York, United States", lat=40.7127281, lon=-74.0060152)
    assert -90 <= location.lat <= 90
    assert -180 <= location.lon <= 180


def test_resolve_sends_expected_request(monkeypatch: pytest.MonkeyPatch, geocoder: NominatimGeocoder) -> None:
    recorder = install(monkeypatch, _Recorder(make_response([make_candidate()])))

    geocoder.resolve(GeocodeQuery(city="Springfield", country="USA", state="Illinois", postal_code="62701"))

    assert len(recorder.calls) == 1
    call = recorder.calls[0]
    assert call["url"] == "https://nominatim.example/search"
    assert call["params"] == {
        "city": "Springfield",
        "country": "USA",
        "format": "jsonv2",
        "state": "Illinois",
        "postalcode": "62701",
    }
    assert call["headers"] == {"Accept-Language": "en-US,en;q=0.9"}
    assert call["session_headers"]["User-Agent"] == "maptoposter 0.1.0"
    assert call["timeout"] == 5.0


def test_optional_refinements_are_omitted(monkeypatch: pytest.MonkeyPatch, geocoder: NominatimGeocoder) -> None:
    recorder = install(monkeypatch, _Recorder(make_response([make_candidate()])))

    geocoder.resolve(GeocodeQuery(city="Paris", country="France"))

    assert recorder.calls[0]["params"] == {"city": "Paris", "country": "France", "format": "jsonv2"}


def test_empty_candidate_list(monkeypatch: pytest.MonkeyPatch, geocoder: NominatimGeocoder) -> None:
    install(monkeypatch, _Recorder(make_response([])))

    with pytest.raises(NoResultsError):
        geocoder.resolve(GeocodeQuery(city="Atlantis", country="Nowhere"))


@pytest.mark.parametrize(
    "overrides",
    [
        {"lat": "abc"},
        {"lon": "east"},
        {"lat": "91.5"},
        {"lon": "-180.01"},
        {"lat": "nan"},
        {"lat": "4_0.5"},
        {"lon": " 10.75 "},
        {"lat": "1e999"},
        {"lon": ""},
    ],
)
def test_invalid_coordinates(
    monkeypatch: pytest.MonkeyPatch, geocoder: NominatimGeocoder, overrides: dict[str, str]
) -> None:
    install(monkeypatch, _Recorder(make_response([make_candidate(**overrides)])))

    with pytest.raises(InvalidCoordinateError):
        geocoder.resolve(GeocodeQuery(city="Oslo", country="Norway"))


def test_invalid_coordinate_in_later_candidate_is_ignored(
    monkeypatch: pytest.MonkeyPatch, geocoder: NominatimGeocoder
) -> None:
    install(monkeypatch, _Recorder(make_response([make_candidate(), make_candidate(lat="abc")])))

    location = geocoder.resolve(GeocodeQuery(city="New York", country="USA"))

    assert location.lat == pytest.approx(40.7127281)


def test_http_status_error(monkeypatch: pytest.MonkeyPatch, geocoder: NominatimGeocoder) -> None:
    install(monkeypatch, _Recorder(make_response({"error": "busy"}, status_code=503)))

    with pytest.raises(GeocodingHTTPStatusError) as exc_info:
        geocoder.resolve(GeocodeQuery(city="Oslo", country="Norway"))

    assert exc_info.value.status_code == 503


def test_transport_error(monkeypatch: pytest.MonkeyPatch, geocoder: NominatimGeocoder) -> None:
    recorder = install(monkeypatch, _Recorder(error=requests.ConnectionError("connection refused")))

    with pytest.raises(GeocodingTransportError):
        geocoder.resolve(GeocodeQuery(city="Oslo", country="Norway"))

    # No retry
    assert len(recorder.calls) == 1


def test_timeout_is_a_transport_error(monkeypatch: pytest.MonkeyPatch, geocoder: NominatimGeocoder) -> None:
    install(monkeypatch, _Recorder(error=requests.Timeout("read timed out")))

    with pytest.raises(GeocodingTransportError):
        geocoder.resolve(GeocodeQuery(city="Oslo", country="Norway"))


@pytest.mark.parametrize(
    "raw",
    [
        b"<html>not json</html>",
        b"",
        b'{"lat": "1.0"}',
        b'["New York"]',
        json.dumps([{"lat": "1.0", "lon": "2.0"}]).encode("utf-8"),
    ],
)
def test_decode_errors(monkeypatch: pytest.MonkeyPatch, geocoder: NominatimGeocoder, raw: bytes) -> None:
    install(monkeypatch, _Recorder(make_response(None, raw=raw)))

    with pytest.raises(GeocodingDecodeError):
        geocoder.resolve(GeocodeQuery(city="Oslo", country="Norway"))


def test_numeric_lat_does_not_match_schema(monkeypatch: pytest.MonkeyPatch, geocoder: NominatimGeocoder) -> None:
    install(monkeypatch, _Recorder(make_response([make_candidate(lat=40.7)])))

    with pytest.raises(GeocodingDecodeError):
        geocoder.resolve(GeocodeQuery(city="Oslo", country="Norway"))


def test_all_failures_share_a_base_class(monkeypatch: pytest.MonkeyPatch, geocoder: NominatimGeocoder) -> None:
    install(monkeypatch, _Recorder(make_response([])))

    with pytest.raises(GeocodingError):
        geocoder.resolve(GeocodeQuery(city="Oslo", country="Norway"))


@pytest.mark.parametrize(
    "city,country",
    [
        ("", "Norway"),
        ("   ", "Norway"),
        ("Oslo", ""),
    ],
)
def test_query_requires_city_and_country(city: str, country: str) -> None:
    with pytest.raises(ValidationError):
        GeocodeQuery(city=city, country=country)


def test_location_is_immutable() -> None:
    location = Location(display_name="Oslo, Norway", lat=59.91, lon=10.75)

    with pytest.raises(AttributeError):
        location.lat = 0.0  # type: ignore[misc]

    assert location.to_tuple() == (59.91, 10.75)


def test_location_rejects_out_of_range_values() -> None:
    with pytest.raises(ValidationError):
        Location(display_name="Nowhere", lat=120.0, lon=0.0)


@pytest.mark.parametrize(
    "lat,expected",
    [
        ("-33.8688", -33.8688),
        ("+45", 45.0),
        ("5.", 5.0),
        (".5", 0.5),
        ("1.5e1", 15.0),
    ],
)
def test_decimal_coordinate_forms(
    monkeypatch: pytest.MonkeyPatch, geocoder: NominatimGeocoder, lat: str, expected: float
) -> None:
    install(monkeypatch, _Recorder(make_response([make_candidate(lat=lat)])))

    location = geocoder.resolve(GeocodeQuery(city="Oslo", country="Norway"))

    assert location.lat == pytest.approx(expected)


@pytest.mark.parametrize(
    "response",
    [
        make_response({"error": "busy"}, status_code=503),
        make_response([]),
        make_response(None, raw=b"<html>"),
    ],
)
def test_failures_leave_diagnostics_to_the_caller(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
    geocoder: NominatimGeocoder,
    response: requests.Response,
) -> None:
    caplog.set_level(logging.DEBUG)
    install(monkeypatch, _Recorder(response))

    with pytest.raises(GeocodingError):
        geocoder.resolve(GeocodeQuery(city="Oslo", country="Norway"))

    assert [r for r in caplog.records if r.levelno >= logging.WARNING] == []


def test_transport_failure_is_not_logged_as_error(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture, geocoder: NominatimGeocoder
) -> None:
    caplog.set_level(logging.DEBUG)
    install(monkeypatch, _Recorder(error=requests.ConnectionError("connection refused")))

    with pytest.raises(GeocodingTransportError):
        geocoder.resolve(GeocodeQuery(city="Oslo", country="Norway"))

    assert [r for r in caplog.records if r.levelno >= logging.WARNING] == []
