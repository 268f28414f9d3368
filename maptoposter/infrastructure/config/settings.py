"""Application settings (Pydantic Settings)"""
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ... import __version__


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_prefix="MAPTOPOSTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Directories
    theme_dir: Path = Field(
        default=Path("themes"),
        description="Directory holding the theme .json files",
    )
    output_dir: Path = Field(
        default=Path("posters"),
        description="Directory posters are written to",
    )

    # Poster defaults
    default_theme: str = Field(
        default="feature_based",
        min_length=1,
        description="Theme identifier used when none is given",
    )
    default_distance: int = Field(
        default=29000,
        gt=0,
        le=65535,
        description="Map radius in metres",
    )

    # Geocoding
    nominatim_base_url: str = Field(
        default="https://nominatim.openstreetmap.org",
        min_length=8,
        description="Base URL of the Nominatim instance",
    )
    geocoding_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Geocoding request timeout (seconds)",
    )
    accept_language: str = Field(
        default="en-US,en;q=0.9",
        description="Accept-Language sent to the geocoding service",
    )
    user_agent: str = Field(
        default=f"maptoposter {__version__}",
        min_length=1,
        description="User-Agent identifying this tool (required by the Nominatim usage policy)",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
