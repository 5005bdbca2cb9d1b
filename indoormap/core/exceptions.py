"""Exception hierarchy for indoormap."""

from typing import Dict, Optional


class IndoorMapError(Exception):
    """Base exception for all indoormap errors."""

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class MapReadError(IndoorMapError):
    """Raised when a map source cannot be read or parsed."""
    pass


class MapFileNotFoundError(MapReadError, FileNotFoundError):
    """Raised when a map file does not exist."""
    pass


class MapParseError(MapReadError):
    """Raised when a map document is not well-formed or has no <map> root."""
    pass
