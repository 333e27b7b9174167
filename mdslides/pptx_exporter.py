"""Utilities to export :class:`Deck` objects into PPTX handouts."""

from __future__ import annotations

import io
import logging
import re
from typing import List, Optional, Tuple

from pptx import Presentation
from pptx.util import Pt

from .exceptions import ExportError
from .slide_models import FENCE_RE, Deck, LeafSlide, closes_fence, heading_text

LOGGER = logging.getLogger(__name__)

TITLE_AND_CONTENT_LAYOUT = 1
TITLE_ONLY_LAYOUT = 5

_BULLET_RE = re.compile(r"^(\s*)(?:[-*+]|\d+[.)])\s+")
_INLINE_RE = re.compile(r"(\*\*|__|\*|_|`)")


class DeckPptxExporter:
    """Write one PowerPoint slide per leaf, speaker notes in the notes pane."""

    def __init__(self, template_path: Optional[str] = None, *, code_font_size: int = 12) -> None:
        self.template_path = template_path
        self.code_font_size = code_font_size

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def render_deck(self, deck: Deck) -> io.BytesIO:
        """Return a PPTX stream that represents ``deck``."""

        try:
            presentation = Presentation(self.template_path)
        except Exception as exc:
            raise ExportError(
                f"Cannot open PPTX template: {exc}",
                error_type="template",
                source=str(self.template_path or ""),
                original_error=exc,
            ) from exc

        for position, leaf in self._leaves(deck):
            self._add_leaf(presentation, leaf, position)

        buffer = io.BytesIO()
        presentation.save(buffer)
        buffer.seek(0)
        LOGGER.info("Exported %d slides to PPTX", len(presentation.slides))
        return buffer

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _leaves(deck: Deck) -> List[Tuple[str, LeafSlide]]:
        items: List[Tuple[str, LeafSlide]] = []
        for h, slide in enumerate(deck.slides, start=1):
            for v, leaf in enumerate(slide.leaves, start=1):
                position = f"{h}.{v}" if len(slide.leaves) > 1 else str(h)
                items.append((position, leaf))
        return items

    def _add_leaf(self, presentation, leaf: LeafSlide, position: str) -> None:
        title, blocks = split_leaf(leaf.content)
        layout_index = TITLE_AND_CONTENT_LAYOUT if blocks else TITLE_ONLY_LAYOUT
        slide = presentation.slides.add_slide(presentation.slide_layouts[layout_index])

        if slide.shapes.title is not None:
            slide.shapes.title.text_frame.text = title or f"Slide {position}"

        body = next(
            (
                shape
                for shape in slide.placeholders
                if shape.placeholder_format.idx == 1 and shape.has_text_frame
            ),
            None,
        )
        if body is not None and blocks:
            text_frame = body.text_frame
            text_frame.clear()
            first = True
            for kind, text, level in blocks:
                paragraph = text_frame.paragraphs[0] if first else text_frame.add_paragraph()
                first = False
                paragraph.text = text
                paragraph.level = level
                if kind == "code":
                    for run in paragraph.runs:
                        run.font.name = "Courier New"
                        run.font.size = Pt(self.code_font_size)

        if leaf.notes:
            slide.notes_slide.notes_text_frame.text = leaf.notes


# ----------------------------------------------------------------------
# Helper functions
# ----------------------------------------------------------------------

def split_leaf(content: str) -> Tuple[Optional[str], List[Tuple[str, str, int]]]:
    """Split markdown into a title and ``(kind, text, level)`` body blocks."""

    title: Optional[str] = None
    blocks: List[Tuple[str, str, int]] = []
    fence: Optional[str] = None

    for line in content.splitlines():
        if fence is not None:
            if closes_fence(line, fence):
                fence = None
            else:
                blocks.append(("code", line, 1))
            continue
        match = FENCE_RE.match(line)
        if match:
            fence = match.group(1)
            continue

        stripped = line.strip()
        if not stripped:
            continue
        heading = heading_text(line)
        if heading is not None:
            if title is None:
                title = _plain(heading)
            else:
                blocks.append(("text", _plain(heading), 0))
            continue
        bullet = _BULLET_RE.match(line)
        if bullet:
            level = min(len(bullet.group(1)) // 2, 4)
            blocks.append(("bullet", _plain(line[bullet.end():]), level))
        else:
            blocks.append(("text", _plain(stripped), 0))
    return title, blocks


def _plain(text: str) -> str:
    return _INLINE_RE.sub("", text)
