from typing import Optional
from datetime import datetime


class DeckError(Exception):
    """Base exception for all deck-related errors"""

    def __init__(
        self,
        message: str,
        error_type: str = "general",
        source: str = "",
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.source = source
        self.original_error = original_error
        self.timestamp = datetime.now()

    def __str__(self):
        if self.source:
            return f"[{self.source}] {self.error_type}: {self.message}"
        return f"{self.error_type}: {self.message}"


class DeckSourceError(DeckError):
    """Deck source could not be read or decoded"""
    pass


class ConfigError(DeckError):
    """Configuration value failed validation"""
    pass


class FragmentError(DeckError):
    """URL fragment does not encode a slide position"""
    pass


class ExportError(DeckError):
    """Exporting the deck to another format failed"""
    pass
