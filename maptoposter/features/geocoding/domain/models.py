"""Geocoding domain models"""
from dataclasses import dataclass
from typing import Optional

from ....shared.exceptions.errors import ValidationError


@dataclass(frozen=True)
class GeocodeQuery:
    """Structured place query"""

    city: str
    country: str
    state: Optional[str] = None  # extra refinement, forwarded verbatim
    postal_code: Optional[str] = None  # extra refinement, forwarded verbatim

    def __post_init__(self) -> None:
        if not self.city or not self.city.strip():
            raise ValidationError("city must not be empty")
        if not self.country or not self.country.strip():
            raise ValidationError("country must not be empty")

    def describe(self) -> str:
        """Human readable form used in log messages"""
        parts = [self.city]
        if self.state:
            parts.append(self.state)
        if self.postal_code:
            parts.append(self.postal_code)
        parts.append(self.country)
        return ", ".join(parts)


@dataclass(frozen=True)
class Location:
    """Resolved geographic anchor point"""

    display_name: str
    lat: float  # latitude, -90..90
    lon: float  # longitude, -180..180

    def __post_init__(self) -> None:
        if not -90.0 <= self.lat <= 90.0:
            raise ValidationError(f"latitude out of range: {self.lat}")
        if not -180.0 <= self.lon <= 180.0:
            raise ValidationError(f"longitude out of range: {self.lon}")

    def __repr__(self) -> str:
        return f"Location(lat={self.lat}, lon={self.lon})"

    def to_tuple(self) -> tuple[float, float]:
        """Return as a (lat, lon) tuple"""
        return (self.lat, self.lon)
