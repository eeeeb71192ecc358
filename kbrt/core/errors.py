"""
Errors — Exceptions for caller mistakes.

Malformed input text never raises; it degrades to documented defaults.
These exceptions cover configuration problems only.
"""


class KbrtError(Exception):
    """Base class for KBRT errors."""


class ThemeNotFoundError(KbrtError, FileNotFoundError):
    """Raised when a named style theme does not exist."""

    def __init__(self, name: str, path: str) -> None:
        self.name = name
        self.path = path
        super().__init__(f"Theme not found: {name} ({path})")


class ThemeInvalidError(KbrtError, ValueError):
    """Raised when a theme file cannot be parsed into a style table."""
