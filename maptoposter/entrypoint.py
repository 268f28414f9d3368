"""CLI entry point"""
import argparse
import sys
from typing import Optional

import pydantic

from . import __version__
from .features.geocoding.domain.models import GeocodeQuery
from .features.poster.services.poster_service import PosterService
from .features.themes.domain.models import Theme
from .features.themes.repositories.theme_catalog import ThemeCatalog
from .infrastructure.config.settings import Settings
from .shared.exceptions.errors import ConfigurationError, GeocodingError, ThemeError, ValidationError
from .shared.logging.config import get_logger, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser"""
    parser = argparse.ArgumentParser(
        prog="maptoposter",
        description="Generate beautiful map posters for any city",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--env-file",
        type=str,
        default=".env",
        help="Path of the environment file (default: .env)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list-themes", help="List all available themes")
    list_parser.add_argument(
        "--theme-dir",
        type=str,
        help="The path to the directory with the theme .json files",
    )

    gen_parser = subparsers.add_parser("generate", aliases=["gen"], help="Generate a map poster")
    gen_parser.add_argument("--city", "-c", required=True, help="City name")
    gen_parser.add_argument("--country", "-C", required=True, help="Country name")
    gen_parser.add_argument("--state", "-s", help="Optional state/province name")
    gen_parser.add_argument("--postal-code", "-p", help="Optional postal code")
    gen_parser.add_argument("--theme", "-t", help="Theme name")
    gen_parser.add_argument("--distance", "-d", type=int, help="Map radius in meters")
    gen_parser.add_argument(
        "--theme-dir",
        type=str,
        help="The path to the directory with the theme .json files",
    )
    gen_parser.add_argument(
        "--output-dir",
        "-o",
        type=str,
        help="The path to the directory to output the posters to",
    )

    return parser


def list_themes(settings: Settings, theme_dir: Optional[str] = None) -> int:
    """
    Print every available theme with its description

    Returns:
        int: Exit code (0: themes found, 1: none found)
    """
    directory = theme_dir or settings.theme_dir
    entries = ThemeCatalog().iter_themes(directory)

    if not entries:
        print(f"No themes found in {directory}")
        return 1

    print("Available themes:")
    print("-" * 60)
    for identifier, result in entries:
        if isinstance(result, Theme):
            print(f"  {result.name} ({identifier})")
            print(f"    {result.description}")
        else:
            print(f"  {identifier} ({identifier})")

    return 0


def generate(settings: Settings, args: argparse.Namespace) -> int:
    """
    Prepare a poster for the requested place and theme

    Returns:
        int: Exit code
    """
    query = GeocodeQuery(
        city=args.city,
        country=args.country,
        state=args.state,
        postal_code=args.postal_code,
    )

    service = PosterService(settings)
    try:
        job = service.prepare(
            query,
            theme_id=args.theme,
            distance=args.distance,
            theme_dir=args.theme_dir,
            output_dir=args.output_dir,
        )
    finally:
        service.close()

    logger.info(f"Poster prepared: {job.output_path} (theme={job.theme_id}, distance={job.distance}m)")
    return 0


def load_settings(env_file: Optional[str]) -> Settings:
    """
    Load settings from the environment and an optional .env file

    Raises:
        ConfigurationError: A setting has an invalid value
    """
    try:
        return Settings(_env_file=env_file)
    except pydantic.ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point

    Returns:
        int: Exit code (0: success, 1: failure)
    """
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.env_file)

        if args.log_level:
            settings.log_level = args.log_level

        setup_logging(level=settings.log_level)

        if args.command == "list-themes":
            return list_themes(settings, args.theme_dir)
        return generate(settings, args)

    except ThemeError as e:
        logger.error(f"Theme loading failed: {e}")
        return 1
    except GeocodingError as e:
        logger.error(f"Geocoding failed: {e}")
        return 1
    except ValidationError as e:
        logger.error(f"Invalid input: {e}")
        return 1
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130  # SIGINT
    except Exception as e:
        logger.error(f"Application failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
