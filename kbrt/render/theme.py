"""
Theme Loader — Load style themes from YAML files.

A theme is a static table mapping element tags to inline style strings.
It is loaded once, cached, and handed to the renderer at construction,
so changing the look never touches rendering logic.
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from kbrt.core.errors import ThemeInvalidError, ThemeNotFoundError
from kbrt.core.logging import LogChannel, get_logger

log = get_logger(LogChannel.RENDER)

THEMES_DIR = Path(__file__).parent / "themes"

DEFAULT_THEME = "default"

STYLED_TAGS = frozenset({"h1", "h2", "h3", "p", "ol", "ul", "li"})


class StyleTheme(BaseModel):
    """Style table for one theme."""

    name: str
    version: str = "1.0"
    description: str = ""
    styles: dict[str, str] = Field(default_factory=dict)

    @field_validator("styles")
    @classmethod
    def _known_tags(cls, styles: dict[str, str]) -> dict[str, str]:
        unknown = set(styles) - STYLED_TAGS
        if unknown:
            raise ValueError(f"unknown tags in style table: {sorted(unknown)}")
        return {tag: (style or "").strip() for tag, style in styles.items()}

    def style_for(self, tag: str) -> str:
        """Style string for a tag, empty when the theme leaves it unstyled."""
        return self.styles.get(tag, "")


def load_theme(name: str = DEFAULT_THEME) -> StyleTheme:
    """
    Load a theme by name from the themes directory.

    Raises:
        ThemeNotFoundError: If no such theme file exists
        ThemeInvalidError: If the file is not a valid theme
    """
    return load_theme_from_path(_theme_path(name))


def load_theme_from_path(path: Path) -> StyleTheme:
    """Load a theme from an arbitrary path."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    return parse_theme(data, fallback_name=Path(path).stem)


def parse_theme(data: dict, fallback_name: str = DEFAULT_THEME) -> StyleTheme:
    """Parse a theme from its YAML dictionary."""
    if not isinstance(data, dict):
        raise ThemeInvalidError(f"Theme '{fallback_name}' must be a mapping")

    info = data.get("theme", {}) or {}
    try:
        return StyleTheme(
            name=info.get("name", fallback_name),
            version=str(info.get("version", "1.0")),
            description=info.get("description", ""),
            styles=data.get("styles", {}) or {},
        )
    except ValidationError as e:
        raise ThemeInvalidError(f"Invalid theme '{fallback_name}': {e}") from e


def list_themes() -> list[str]:
    """List available theme names."""
    return sorted(p.stem for p in THEMES_DIR.glob("*.yaml"))


def _theme_path(name: str) -> Path:
    """Path of a bundled theme. Names are looked up, never joined as paths."""
    if name not in list_themes():
        raise ThemeNotFoundError(name, str(THEMES_DIR))
    return THEMES_DIR / f"{name}.yaml"


def resolve_theme_name(name: Optional[str] = None) -> str:
    """
    Pick the theme for a request and check that it exists.

    Falls back to KBRT_THEME, then to the default theme.
    """
    name = name or os.environ.get("KBRT_THEME") or DEFAULT_THEME
    _theme_path(name)
    return name


# Cache for loaded themes
_cache: dict[str, StyleTheme] = {}


def get_theme(name: str = DEFAULT_THEME, use_cache: bool = True) -> StyleTheme:
    """Get a theme, using cache by default."""
    if use_cache and name in _cache:
        return _cache[name]

    theme = load_theme(name)
    log.verbose("theme_loaded", theme=name, styled_tags=len(theme.styles))
    _cache[name] = theme
    return theme


def clear_cache() -> None:
    """Clear the theme cache."""
    _cache.clear()
