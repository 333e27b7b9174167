"""Utilities for reading deck sources and JSON deck snapshots."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from .exceptions import DeckSourceError
from .parser import DeckParser, ParserOptions, serialize_deck
from .slide_models import Deck

LOGGER = logging.getLogger(__name__)


class DeckStore:
    """Load decks from markdown sources and persist parsed decks."""

    def __init__(self, path: Path, options: Optional[ParserOptions] = None) -> None:
        self.path = Path(path)
        self.options = options or ParserOptions()

    # ------------------------------------------------------------------
    # I/O helpers
    # ------------------------------------------------------------------
    def load(self) -> Deck:
        """Parse the markdown source, or read a ``.json`` snapshot."""

        if not self.path.exists():
            raise FileNotFoundError(f"Deck source not found at {self.path}")
        try:
            text = self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise DeckSourceError(
                f"Deck source is not UTF-8 text: {exc}",
                error_type="decode",
                source=str(self.path),
                original_error=exc,
            ) from exc

        if self.path.suffix.lower() == ".json":
            return self._from_snapshot(text)

        deck = DeckParser(self.options).parse(text, metadata={"source": str(self.path)})
        LOGGER.info(
            "Loaded %s: %d slides, %d leaves, %d warnings",
            self.path,
            len(deck),
            deck.total_leaves(),
            len(deck.warnings),
        )
        return deck

    def save(self, deck: Deck) -> None:
        """Write ``deck`` as a JSON snapshot or as markdown, by file suffix."""

        self.path.parent.mkdir(parents=True, exist_ok=True)
        if self.path.suffix.lower() == ".json":
            payload = deck.to_dict()
            self.path.write_text(
                json.dumps(payload, ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
        else:
            self.path.write_text(serialize_deck(deck, self.options), encoding="utf-8")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _from_snapshot(self, text: str) -> Deck:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DeckSourceError(
                f"Invalid deck snapshot: {exc}",
                error_type="snapshot",
                source=str(self.path),
                original_error=exc,
            ) from exc
        try:
            return Deck.from_dict(data)
        except (AttributeError, TypeError, ValueError) as exc:
            raise DeckSourceError(
                f"Deck snapshot has an unexpected shape: {exc}",
                error_type="snapshot",
                source=str(self.path),
                original_error=exc,
            ) from exc
