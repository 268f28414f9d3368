"""Theme catalog backed by a directory of JSON files"""
import json
import os
from pathlib import Path
from typing import Union

import pydantic

from ..domain.models import Theme
from ....shared.exceptions.errors import (
    InvalidThemeSchemaError,
    MalformedThemeError,
    ThemeDirectoryError,
    ThemeError,
    ThemeNotFoundError,
)
from ....shared.logging.config import get_logger

logger = get_logger(__name__)

THEME_EXTENSION = ".json"


class ThemeCatalog:
    """
    Theme catalog

    Identifiers are file stems: ``themes/noir.json`` is the theme ``noir``.
    Nothing is cached; every lookup rescans or rereads the directory, which
    is fine for one lookup per poster.
    """

    def __init__(self, extension: str = THEME_EXTENSION) -> None:
        self.extension = extension

    def list_identifiers(self, directory: Union[str, Path]) -> set[str]:
        """
        Scan a directory for theme files

        A missing directory is created and reported as empty.

        Args:
            directory: Theme directory

        Returns:
            set[str]: Theme identifiers

        Raises:
            ThemeDirectoryError: The directory cannot be created or scanned
        """
        path = Path(directory)

        if not path.exists():
            try:
                path.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise ThemeDirectoryError(f"Unable to create theme directory {path}: {e}") from e
            logger.info(f"Created theme directory: {path}")
            return set()

        try:
            with os.scandir(path) as it:
                entries = list(it)
        except OSError as e:
            raise ThemeDirectoryError(f"Unable to scan theme directory {path}: {e}") from e

        identifiers: set[str] = set()
        for entry in entries:
            name = entry.name
            try:
                # Undecodable names come back with surrogate escapes
                name.encode("utf-8")
            except UnicodeEncodeError:
                logger.debug(f"Skipping undecodable entry in {path}: {name!r}")
                continue

            if not name.endswith(self.extension):
                continue

            stem = name[: -len(self.extension)]
            if stem:
                identifiers.add(stem)

        logger.debug(f"Found {len(identifiers)} theme(s) in {path}")
        return identifiers

    def path_for(self, identifier: str, directory: Union[str, Path]) -> Path:
        """Path of the file backing an identifier"""
        return Path(directory) / f"{identifier}{self.extension}"

    def get(self, identifier: str, directory: Union[str, Path]) -> Theme:
        """
        Load and validate a theme

        Args:
            identifier: Theme file stem
            directory: Theme directory

        Returns:
            Theme: Parsed theme

        Raises:
            ThemeNotFoundError: The file is missing or unreadable
            MalformedThemeError: The file is not valid JSON
            InvalidThemeSchemaError: A required field is missing or not a string
        """
        path = self.path_for(identifier, directory)

        try:
            raw = path.read_bytes()
        except OSError as e:
            raise ThemeNotFoundError(f"Theme '{identifier}' not found at {path}") from e

        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise MalformedThemeError(f"Theme file {path} is not valid JSON: {e}") from e

        try:
            theme = Theme.model_validate(data)
        except pydantic.ValidationError as e:
            first = e.errors()[0]
            field_name = str(first["loc"][0]) if first["loc"] else None
            if field_name is None:
                message = f"Theme file {path} must contain a JSON object"
            else:
                message = f"Theme file {path} has invalid field '{field_name}': {first['msg']}"
            raise InvalidThemeSchemaError(message, field_name=field_name) from e

        logger.debug(f"Loaded theme '{identifier}' ({theme.name}) from {path}")
        return theme

    def iter_themes(
        self, directory: Union[str, Path]
    ) -> list[tuple[str, Union[Theme, ThemeError]]]:
        """
        Load every theme in a directory

        Themes that fail to load are returned with their error instead of
        aborting the listing.

        Returns:
            list: (identifier, Theme or ThemeError) pairs sorted by identifier
        """
        results: list[tuple[str, Union[Theme, ThemeError]]] = []
        for identifier in sorted(self.list_identifiers(directory)):
            try:
                results.append((identifier, self.get(identifier, directory)))
            except ThemeError as e:
                logger.warning(f"Skipping theme '{identifier}': {e}")
                results.append((identifier, e))
        return results
