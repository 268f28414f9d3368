"""Theme domain models"""
import re

from pydantic import BaseModel, ConfigDict

HEX_COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

# Fields that carry display text rather than a colour
TEXT_FIELDS = ("name", "description")


class Theme(BaseModel):
    """
    Fixed-schema colour set used to render a poster

    Every field is a required string. ``name`` is the display name; the theme
    is addressed by its file stem, which may differ.
    """

    model_config = ConfigDict(frozen=True, strict=True, extra="ignore")

    name: str
    description: str
    bg: str
    text: str
    gradient_color: str
    water: str
    parks: str
    road_motorway: str
    road_primary: str
    road_secondary: str
    road_tertiary: str
    road_residential: str
    road_default: str

    def colors(self) -> dict[str, str]:
        """Colour fields only"""
        return {
            key: value
            for key, value in self.model_dump().items()
            if key not in TEXT_FIELDS
        }

    def invalid_colors(self) -> list[str]:
        """Colour fields whose value is not a #RGB or #RRGGBB hex string"""
        return [
            key
            for key, value in self.colors().items()
            if not HEX_COLOR_PATTERN.match(value)
        ]
