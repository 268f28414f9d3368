"""Custom exception definitions"""

from typing import Optional


class MapPosterError(Exception):
    """Base exception for the poster generator"""

    pass


class HTTPError(MapPosterError):
    """HTTP related error"""

    pass


class HTTPTransportError(HTTPError):
    """Connection, DNS, TLS or timeout failure before a response arrived"""

    pass


class HTTPStatusError(HTTPError):
    """Server answered with a non-success status code"""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class GeocodingError(MapPosterError):
    """Geocoding error"""

    pass


class GeocodingTransportError(GeocodingError):
    """The geocoding service could not be reached"""

    pass


class GeocodingHTTPStatusError(GeocodingError):
    """The geocoding service returned a non-success status"""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class GeocodingDecodeError(GeocodingError):
    """Response body is not JSON or does not match the candidate schema"""

    pass


class NoResultsError(GeocodingError):
    """The geocoding service returned an empty candidate list"""

    pass


class InvalidCoordinateError(GeocodingError):
    """Candidate latitude/longitude is not a usable number"""

    pass


class ThemeError(MapPosterError):
    """Theme loading error"""

    pass


class ThemeNotFoundError(ThemeError):
    """Theme file is missing or unreadable"""

    pass


class MalformedThemeError(ThemeError):
    """Theme file is not valid JSON"""

    pass


class InvalidThemeSchemaError(ThemeError):
    """Theme JSON is missing a required field or has one of the wrong type"""

    def __init__(self, message: str, field_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.field_name = field_name


class ThemeDirectoryError(ThemeError):
    """Theme directory exists but cannot be scanned"""

    pass


class ConfigurationError(MapPosterError):
    """Configuration error"""

    pass


class ValidationError(MapPosterError):
    """Validation error"""

    pass
