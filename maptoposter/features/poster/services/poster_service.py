"""Poster preparation service"""

from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from ....infrastructure.config.settings import Settings
from ....shared.exceptions.errors import ValidationError
from ....shared.logging.config import get_logger
from ....shared.utils.text import to_slug
from ...geocoding.domain.models import GeocodeQuery
from ...geocoding.providers.nominatim_geocoder import NominatimGeocoder
from ...themes.repositories.theme_catalog import ThemeCatalog
from ..domain.models import PosterJob

logger = get_logger(__name__)


def generate_output_filename(
    city: str,
    theme_id: str,
    output_dir: Union[str, Path],
    now: Optional[datetime] = None,
    output_format: str = "png",
) -> Path:
    """
    Build a unique poster path from the city, theme and current time

    Example: ``posters/new_york_noir_20240105_181502.png``
    """
    timestamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    filename = f"{to_slug(city)}_{theme_id}_{timestamp}.{output_format}"
    return Path(output_dir) / filename


class PosterService:
    """
    Poster service

    Resolves the location and loads the theme for a poster. The two lookups
    are independent; the theme is loaded first and the geocoder is only
    called once it has loaded.
    """

    def __init__(
        self,
        settings: Settings,
        geocoder: Optional[NominatimGeocoder] = None,
        catalog: Optional[ThemeCatalog] = None,
    ) -> None:
        """
        Args:
            settings: Application settings
            geocoder: Geocoder to use instead of building one from settings
            catalog: Theme catalog to use instead of the default one
        """
        self.settings = settings
        self.geocoder = geocoder or NominatimGeocoder(
            user_agent=settings.user_agent,
            base_url=settings.nominatim_base_url,
            accept_language=settings.accept_language,
            timeout=settings.geocoding_timeout,
        )
        self.catalog = catalog or ThemeCatalog()

    def prepare(
        self,
        query: GeocodeQuery,
        theme_id: Optional[str] = None,
        distance: Optional[int] = None,
        theme_dir: Optional[Union[str, Path]] = None,
        output_dir: Optional[Union[str, Path]] = None,
    ) -> PosterJob:
        """
        Gather the inputs for one poster

        Args:
            query: Place to render
            theme_id: Theme identifier (defaults to settings.default_theme)
            distance: Map radius in metres (defaults to settings.default_distance)
            theme_dir: Theme directory (defaults to settings.theme_dir)
            output_dir: Output directory (defaults to settings.output_dir)

        Returns:
            PosterJob: Prepared job

        Raises:
            ThemeError: The theme could not be loaded
            GeocodingError: The location could not be resolved
            ValidationError: distance is not positive
        """
        theme_id = theme_id or self.settings.default_theme
        distance = distance if distance is not None else self.settings.default_distance
        theme_dir = theme_dir if theme_dir is not None else self.settings.theme_dir
        output_dir = output_dir if output_dir is not None else self.settings.output_dir

        if distance <= 0:
            raise ValidationError(f"distance must be positive, got {distance}")

        theme = self.catalog.get(theme_id, theme_dir)
        logger.info(f"Loaded theme: {theme.name}")

        invalid = theme.invalid_colors()
        if invalid:
            logger.warning(
                f"Theme '{theme_id}' has non-hex colours: {', '.join(invalid)}"
            )

        location = self.geocoder.resolve(query)
        logger.info(f"✓ Found: {location.display_name}")
        logger.info(f"✓ Coordinates: {location.lat}, {location.lon}")

        output_path = generate_output_filename(query.city, theme_id, output_dir)

        return PosterJob(
            location=location,
            theme_id=theme_id,
            theme=theme,
            distance=distance,
            output_path=output_path,
        )

    def close(self) -> None:
        self.geocoder.close()
