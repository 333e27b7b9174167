"""Data models representing a parsed slide deck and its navigation state."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Tuple, Union

FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})")
_FENCE_CLOSE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})[ \t]*$")
_HEADING_RE = re.compile(r"^ {0,3}#{1,6}(?:\s+(.*?))?(?:\s+#+)?\s*$")


def closes_fence(line: str, fence: str) -> bool:
    """True when ``line`` closes a code block opened by ``fence``.

    A closer uses the same character, is at least as long as the opener and
    carries no info string.
    """

    match = _FENCE_CLOSE_RE.match(line)
    if match is None:
        return False
    closer = match.group(1)
    return closer[0] == fence[0] and len(closer) >= len(fence)


def heading_text(line: str) -> Optional[str]:
    """Text of an ATX heading line, or ``None`` when ``line`` is not one."""

    match = _HEADING_RE.match(line)
    if match is None:
        return None
    return (match.group(1) or "").strip() or None


@dataclass(slots=True, frozen=True)
class ParseWarning:
    """A recoverable problem found while parsing a deck source."""

    line: int
    code: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"line": self.line, "code": self.code, "message": self.message}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParseWarning":
        return cls(
            line=int(data.get("line", 0)),
            code=data.get("code", ""),
            message=data.get("message", ""),
        )

    def __str__(self) -> str:
        return f"line {self.line}: [{self.code}] {self.message}"


@dataclass(slots=True, frozen=True)
class LeafSlide:
    """A single displayable slide: markdown content plus optional notes."""

    content: str
    notes: Optional[str] = None

    @property
    def title(self) -> Optional[str]:
        """Text of the first markdown heading outside code fences, if any."""

        fence: Optional[str] = None
        for line in self.content.splitlines():
            if fence is not None:
                if closes_fence(line, fence):
                    fence = None
                continue
            match = FENCE_RE.match(line)
            if match:
                fence = match.group(1)
                continue
            text = heading_text(line)
            if text:
                return text
        return None

    @property
    def leaves(self) -> Tuple["LeafSlide", ...]:
        return (self,)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "leaf", "content": self.content, "notes": self.notes}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LeafSlide":
        return cls(content=data.get("content", ""), notes=data.get("notes"))


@dataclass(slots=True, frozen=True)
class SlideGroup:
    """A top-level slide made of vertically navigated leaves."""

    leaves: Tuple[LeafSlide, ...]

    def __post_init__(self) -> None:
        if len(self.leaves) < 2:
            raise ValueError("SlideGroup requires at least two leaves; use LeafSlide")

    @property
    def title(self) -> Optional[str]:
        return self.leaves[0].title

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "group", "leaves": [leaf.to_dict() for leaf in self.leaves]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SlideGroup":
        return cls(
            leaves=tuple(LeafSlide.from_dict(item) for item in data.get("leaves", []))
        )


Slide = Union[LeafSlide, SlideGroup]


def slide_from_dict(data: Dict[str, Any]) -> Slide:
    """Build a :data:`Slide` from its ``to_dict`` payload."""

    if data.get("type") == "group":
        leaves = data.get("leaves", [])
        if len(leaves) == 1:
            return LeafSlide.from_dict(leaves[0])
        return SlideGroup.from_dict(data)
    return LeafSlide.from_dict(data)


@dataclass(slots=True, frozen=True)
class NavigationState:
    """The (horizontal, vertical) coordinate of the displayed leaf."""

    h: int = 0
    v: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"h": self.h, "v": self.v}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NavigationState":
        return cls(h=int(data.get("h", 0)), v=int(data.get("v", 0)))


@dataclass(slots=True, frozen=True)
class Deck:
    """Ordered top-level slides of a presentation."""

    slides: Tuple[Slide, ...] = ()
    warnings: Tuple[ParseWarning, ...] = ()
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.slides)

    @property
    def is_empty(self) -> bool:
        return not self.slides

    def leaf_count(self, h: int) -> int:
        """Number of vertical positions in top-level slide ``h``."""

        return len(self.slides[h].leaves)

    def leaf_at(self, state: NavigationState) -> Optional[LeafSlide]:
        """Return the leaf at ``state`` or ``None`` if it does not exist."""

        if not 0 <= state.h < len(self.slides):
            return None
        leaves = self.slides[state.h].leaves
        if not 0 <= state.v < len(leaves):
            return None
        return leaves[state.v]

    def clamp(self, state: NavigationState) -> NavigationState:
        """Nearest valid position to ``state``; ``(0, 0)`` for an empty deck."""

        if not self.slides:
            return NavigationState(0, 0)
        h = min(max(state.h, 0), len(self.slides) - 1)
        v = min(max(state.v, 0), len(self.slides[h].leaves) - 1)
        return NavigationState(h, v)

    def positions(self) -> Iterator[NavigationState]:
        """Yield every valid coordinate in presentation order."""

        for h, slide in enumerate(self.slides):
            for v in range(len(slide.leaves)):
                yield NavigationState(h, v)

    def total_leaves(self) -> int:
        return sum(len(slide.leaves) for slide in self.slides)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slides": [slide.to_dict() for slide in self.slides],
            "warnings": [warning.to_dict() for warning in self.warnings],
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Deck":
        return cls(
            slides=tuple(slide_from_dict(item) for item in data.get("slides", [])),
            warnings=tuple(
                ParseWarning.from_dict(item) for item in data.get("warnings", [])
            ),
            metadata=dict(data.get("metadata", {})),
        )

