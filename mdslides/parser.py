"""Split a reveal.js-style markdown document into a :class:`Deck`.

The source is one markdown document. A line holding only the horizontal
separator (``---`` by default) starts a new top-level slide, a line holding
only the vertical separator (``--``) starts a new leaf inside the current
slide, and a line starting with ``Note:`` moves the rest of the (sub-)section
into the speaker notes. Separators and note markers inside fenced code blocks
are ordinary content.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Pattern, Tuple

from .slide_models import (
    FENCE_RE,
    Deck,
    LeafSlide,
    ParseWarning,
    Slide,
    SlideGroup,
    closes_fence,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_SEPARATOR = r"^---$"
DEFAULT_VERTICAL_SEPARATOR = r"^--$"
DEFAULT_NOTES_MARKER = r"^ {0,3}notes?:"


@dataclass(slots=True)
class ParserOptions:
    """Delimiter patterns, matched against single lines (trailing blanks removed)."""

    separator: str = DEFAULT_SEPARATOR
    vertical_separator: Optional[str] = DEFAULT_VERTICAL_SEPARATOR
    notes_marker: Optional[str] = DEFAULT_NOTES_MARKER

    # Literal tokens used when writing a deck back to text.
    separator_token: str = "---"
    vertical_separator_token: str = "--"
    notes_token: str = "Note:"

    _compiled: Tuple[Pattern[str], Optional[Pattern[str]], Optional[Pattern[str]]] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        self._compiled = (
            re.compile(self.separator),
            re.compile(self.vertical_separator) if self.vertical_separator else None,
            re.compile(self.notes_marker, re.IGNORECASE) if self.notes_marker else None,
        )

    def is_separator(self, line: str) -> bool:
        return self._compiled[0].search(line.rstrip()) is not None

    def is_vertical_separator(self, line: str) -> bool:
        pattern = self._compiled[1]
        return pattern is not None and pattern.search(line.rstrip()) is not None

    def match_notes(self, line: str) -> Optional[re.Match]:
        pattern = self._compiled[2]
        return pattern.match(line) if pattern is not None else None


@dataclass
class _Section:
    start_line: int
    lines: List[Tuple[int, str]] = field(default_factory=list)


class DeckParser:
    """Convert deck source text into an immutable :class:`Deck`."""

    def __init__(self, options: Optional[ParserOptions] = None) -> None:
        self.options = options or ParserOptions()

    def parse(self, text: str, *, metadata: Optional[dict] = None) -> Deck:
        warnings: List[ParseWarning] = []
        if not text.strip():
            return Deck(metadata=dict(metadata or {}))

        top_sections = self._split(text.splitlines(), warnings)
        slides: List[Slide] = []
        for index, sub_sections in enumerate(top_sections, start=1):
            leaves = []
            empty: List[_Section] = []
            for section in sub_sections:
                leaf = self._build_leaf(section, warnings)
                if leaf is None:
                    empty.append(section)
                else:
                    leaves.append(leaf)
            if not leaves:
                self._warn(
                    warnings,
                    sub_sections[0].start_line,
                    "empty-section",
                    f"section {index} has no content and was skipped",
                )
                continue
            for section in empty:
                self._warn(
                    warnings, section.start_line, "empty-slide", "empty slide skipped"
                )
            if len(leaves) == 1:
                slides.append(leaves[0])
            else:
                slides.append(SlideGroup(leaves=tuple(leaves)))

        return Deck(
            slides=tuple(slides),
            warnings=tuple(warnings),
            metadata=dict(metadata or {}),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _split(
        self, lines: List[str], warnings: List[ParseWarning]
    ) -> List[List[_Section]]:
        options = self.options
        top: List[List[_Section]] = [[_Section(start_line=1)]]
        fence: Optional[str] = None
        fence_line = 0
        seen_content = False

        for number, line in enumerate(lines, start=1):
            if fence is not None:
                top[-1][-1].lines.append((number, line))
                if closes_fence(line, fence):
                    fence = None
                continue

            fence_match = FENCE_RE.match(line)
            if fence_match:
                fence = fence_match.group(1)
                fence_line = number
                seen_content = True
                top[-1][-1].lines.append((number, line))
                continue

            if options.is_separator(line):
                top.append([_Section(start_line=number + 1)])
                continue

            if options.is_vertical_separator(line):
                if not seen_content:
                    self._warn(
                        warnings,
                        number,
                        "orphan-vertical-separator",
                        "vertical separator before any slide content; "
                        "following content joins the first slide",
                    )
                    continue
                top[-1].append(_Section(start_line=number + 1))
                continue

            if line.strip():
                seen_content = True
            top[-1][-1].lines.append((number, line))

        if fence is not None:
            self._warn(
                warnings,
                fence_line,
                "unterminated-fence",
                "code fence is never closed; remaining text kept as code",
            )
        return top

    def _build_leaf(
        self, section: _Section, warnings: List[ParseWarning]
    ) -> Optional[LeafSlide]:
        content_lines: List[str] = []
        notes_lines: Optional[List[str]] = None
        fence: Optional[str] = None

        for _number, line in section.lines:
            if notes_lines is not None:
                notes_lines.append(line)
                continue
            if fence is not None:
                if closes_fence(line, fence):
                    fence = None
            else:
                fence_match = FENCE_RE.match(line)
                if fence_match:
                    fence = fence_match.group(1)
                else:
                    marker = self.options.match_notes(line)
                    if marker is not None:
                        notes_lines = [line[marker.end():]]
                        continue
            content_lines.append(line)

        content = "\n".join(content_lines).strip("\n")
        notes = None
        if notes_lines is not None:
            notes = "\n".join(notes_lines).strip() or None

        if not content.strip():
            if notes:
                self._warn(
                    warnings,
                    section.start_line,
                    "notes-without-content",
                    "slide has speaker notes but no content",
                )
                return LeafSlide(content="", notes=notes)
            return None
        return LeafSlide(content=content, notes=notes)

    @staticmethod
    def _warn(warnings: List[ParseWarning], line: int, code: str, message: str) -> None:
        warning = ParseWarning(line=line, code=code, message=message)
        warnings.append(warning)
        LOGGER.warning("Deck parse warning: %s", warning)


def parse_deck(text: str, options: Optional[ParserOptions] = None) -> Deck:
    """Parse ``text`` with the default (or given) delimiter options."""

    return DeckParser(options).parse(text)


def serialize_deck(deck: Deck, options: Optional[ParserOptions] = None) -> str:
    """Write ``deck`` back to source text using the literal tokens of ``options``."""

    options = options or ParserOptions()

    def _leaf_text(leaf: LeafSlide) -> str:
        if not leaf.notes:
            return leaf.content
        # Marker on its own line so notes opening with a fence stay a fence.
        notes = f"{options.notes_token}\n{leaf.notes}"
        return f"{leaf.content}\n\n{notes}" if leaf.content else notes

    horizontal = f"\n\n{options.separator_token}\n\n"
    vertical = f"\n\n{options.vertical_separator_token}\n\n"
    sections = [
        vertical.join(_leaf_text(leaf) for leaf in slide.leaves)
        for slide in deck.slides
    ]
    return horizontal.join(sections) + ("\n" if sections else "")
