"""Nominatim geocoding implementation"""
import math
import re
from typing import Any, Optional

import pydantic
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from ..domain.models import GeocodeQuery, Location
from ....shared.exceptions.errors import (
    GeocodingDecodeError,
    GeocodingHTTPStatusError,
    GeocodingTransportError,
    HTTPStatusError,
    HTTPTransportError,
    InvalidCoordinateError,
    NoResultsError,
)
from ....shared.http.client import HTTPClient
from ....shared.logging.config import get_logger

logger = get_logger(__name__)

NOMINATIM_URL = "https://nominatim.openstreetmap.org"
DEFAULT_ACCEPT_LANGUAGE = "en-US,en;q=0.9"

# Plain decimal, optional exponent; no whitespace, underscores or non-ASCII digits
DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class NominatimCandidate(BaseModel):
    """One element of a Nominatim ``format=jsonv2`` search response"""

    model_config = ConfigDict(frozen=True, extra="ignore")

    place_id: int = Field(ge=0)
    licence: str
    osm_type: str
    osm_id: int = Field(ge=0)
    lat: str
    lon: str
    category: str
    type: str
    place_rank: int = Field(ge=0)
    importance: float
    address_type: str = Field(alias="addresstype")
    name: str
    display_name: str
    bounding_box: list[str] = Field(alias="boundingbox", min_length=4, max_length=4)


_CANDIDATE_LIST = TypeAdapter(list[NominatimCandidate])


def _parse_coordinate(value: str, label: str, limit: float) -> float:
    if not DECIMAL_PATTERN.fullmatch(value):
        raise InvalidCoordinateError(f"{label} is not a number: {value!r}")

    number = float(value)

    if not math.isfinite(number) or not -limit <= number <= limit:
        raise InvalidCoordinateError(f"{label} out of range: {value!r}")

    return number


class NominatimGeocoder:
    """
    Resolve a place query to one Location through the Nominatim search API

    The service ranks candidates by its own relevance score and the first
    candidate is always taken, with no re-ranking or merging.
    """

    def __init__(
        self,
        user_agent: str,
        base_url: str = NOMINATIM_URL,
        accept_language: str = DEFAULT_ACCEPT_LANGUAGE,
        timeout: float = 10.0,
        http_client: Optional[HTTPClient] = None,
    ) -> None:
        """
        Args:
            user_agent: Tool name and version, required by the Nominatim usage policy
            base_url: Base URL of the Nominatim instance
            accept_language: Preferred language for display names
            timeout: Request timeout (seconds)
            http_client: Client to use instead of building one
        """
        self.search_url = f"{base_url.rstrip('/')}/search"
        self.accept_language = accept_language
        self.http_client = http_client or HTTPClient(timeout=timeout, user_agent=user_agent)

        logger.debug(f"NominatimGeocoder initialized: {self.search_url}")

    @staticmethod
    def build_params(query: GeocodeQuery) -> dict[str, Any]:
        """Build the search query string parameters"""
        params: dict[str, Any] = {
            "city": query.city,
            "country": query.country,
            "format": "jsonv2",
        }
        if query.state is not None:
            params["state"] = query.state
        if query.postal_code is not None:
            params["postalcode"] = query.postal_code
        return params

    def resolve(self, query: GeocodeQuery) -> Location:
        """
        Resolve a query to a single Location

        Args:
            query: Place to look up

        Returns:
            Location: Coordinates and display name of the first candidate

        Raises:
            GeocodingTransportError: The service could not be reached
            GeocodingHTTPStatusError: The service returned a non-success status
            GeocodingDecodeError: The body is not a JSON list of candidates
            NoResultsError: The candidate list is empty
            InvalidCoordinateError: lat/lon of the first candidate is unusable
        """
        logger.debug(f"Geocoding: {query.describe()}")

        try:
            response = self.http_client.get(
                self.search_url,
                params=self.build_params(query),
                headers={"Accept-Language": self.accept_language},
            )
        except HTTPTransportError as e:
            raise GeocodingTransportError(f"Geocoding service unreachable: {e}") from e
        except HTTPStatusError as e:
            raise GeocodingHTTPStatusError(
                f"Geocoding service returned HTTP {e.status_code}",
                status_code=e.status_code,
            ) from e

        try:
            candidates = _CANDIDATE_LIST.validate_json(response.content)
        except pydantic.ValidationError as e:
            logger.debug(f"Unexpected geocoding response for {query.describe()}: {e}")
            raise GeocodingDecodeError(f"Unable to parse geocoding response: {e}") from e

        if not candidates:
            logger.debug(f"No geocoding results for: {query.describe()}")
            raise NoResultsError(f"No matching locations found for {query.describe()}")

        best = candidates[0]
        location = Location(
            display_name=best.display_name,
            lat=_parse_coordinate(best.lat, "latitude", 90.0),
            lon=_parse_coordinate(best.lon, "longitude", 180.0),
        )

        logger.debug(
            f"Geocoded: {query.describe()} -> ({location.lat}, {location.lon}) "
            f"from {len(candidates)} candidate(s)"
        )

        return location

    def close(self) -> None:
        self.http_client.close()

    def __enter__(self) -> "NominatimGeocoder":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
