"""Console colors for uamount.

Built-in colors can be overridden per user in
``~/.config/uamount/theme.toml``::

    [colors]
    added = "#00ff00"
    error = "#ff0000"
"""

import logging
import re
import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from rich.theme import Theme

from uamount.core.paths import get_theme_path

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})")


class ThemeColors(BaseModel):
    """Named colors used by the CLI, as #RGB or #RRGGBB hex codes."""

    model_config = ConfigDict(extra="forbid")

    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"

    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"
    prompt: str = "#0e8ac8"

    # Rows of the pending change table
    added: str = "#c1ff62"
    removed: str = "#f53263"

    @field_validator("*", mode="before")
    @classmethod
    def validate_hex_color(cls, v: object, info: ValidationInfo) -> str:
        """Accept only hex color codes."""
        if not isinstance(v, str):
            raise ValueError(f"{info.field_name}: color must be a string")
        color = v.strip()
        if not color.startswith("#"):
            raise ValueError(f"{info.field_name}: color must start with '#'")
        if len(color) not in (4, 7):
            raise ValueError(f"{info.field_name}: color must be #RGB or #RRGGBB format")
        if not _HEX_COLOR.fullmatch(color):
            raise ValueError(f"{info.field_name}: invalid hex color '{color}'")
        return color


def _load_toml_colors(path: Path) -> dict[str, str] | None:
    """Read the ``[colors]`` table of a theme file.

    Returns:
        String-valued colors by name, or None if the file is missing or unreadable.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return None
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return None

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: 'colors' is not a table", path)
        return None
    return {name: value for name, value in colors.items() if isinstance(value, str)}


def load_theme(path: Path | None = None) -> ThemeColors:
    """Load theme colors with user overrides applied.

    Args:
        path: Theme file, defaults to ~/.config/uamount/theme.toml.

    Returns:
        The merged colors; the built-in ones if the overrides are invalid.
    """
    overrides = _load_toml_colors(path or get_theme_path())
    if not overrides:
        return ThemeColors()
    try:
        return ThemeColors(**overrides)
    except ValueError as e:
        logger.warning("Invalid theme colors, using defaults: %s", e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich theme used by the shared consoles."""
    colors = colors or load_theme()
    styles = colors.model_dump()
    styles.update(
        error=f"bold {colors.error}",
        prompt=f"bold {colors.prompt}",
        bold_header=f"bold {colors.header}",
        dim=colors.muted,
    )
    return Theme(styles)


_cached_theme: Theme | None = None


def get_theme() -> Theme:
    """Return the Rich theme, building it on first use."""
    global _cached_theme
    if _cached_theme is None:
        _cached_theme = get_rich_theme()
    return _cached_theme
