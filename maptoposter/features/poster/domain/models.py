"""Poster domain models"""
from dataclasses import dataclass
from pathlib import Path

from ...geocoding.domain.models import Location
from ...themes.domain.models import Theme


@dataclass(frozen=True)
class PosterJob:
    """Everything a renderer needs to draw one poster"""

    location: Location
    theme_id: str  # file stem the theme was loaded from
    theme: Theme
    distance: int  # map radius in metres
    output_path: Path
