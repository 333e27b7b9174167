"""Render decks and navigation positions to HTML."""

from __future__ import annotations

import html
import json
import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Optional

from markdown_it import MarkdownIt

from .config import DeckConfig
from .deeplink import encode_fragment
from .plugins import HIGHLIGHT, MATH
from .slide_models import Deck, LeafSlide, NavigationState, Slide

LOGGER = logging.getLogger(__name__)

EMPTY_DECK_MESSAGE = "No slides to show."
REVEAL_CDN = "https://cdn.jsdelivr.net/npm/reveal.js@5.1.0"


def _highlight(code: str, lang: str, _attrs) -> str:
    from pygments import highlight
    from pygments.formatters import HtmlFormatter
    from pygments.lexers import get_lexer_by_name
    from pygments.util import ClassNotFound

    if not lang:
        return ""
    try:
        lexer = get_lexer_by_name(lang)
    except ClassNotFound:
        return ""
    return highlight(code, lexer, HtmlFormatter(nowrap=True))


class MarkdownRenderer:
    """markdown-it based renderer whose extras follow the loaded plugins."""

    def __init__(self, capabilities: Iterable[str] = ()) -> None:
        self._cache: Dict[FrozenSet[str], MarkdownIt] = {}
        self.capabilities = frozenset(capabilities)

    def render(self, text: str, capabilities: Optional[Iterable[str]] = None) -> str:
        caps = self.capabilities if capabilities is None else frozenset(capabilities)
        return self._parser(caps).render(text)

    def _parser(self, capabilities: FrozenSet[str]) -> MarkdownIt:
        md = self._cache.get(capabilities)
        if md is None:
            md = self._build(capabilities)
            self._cache[capabilities] = md
        return md

    @staticmethod
    def _build(capabilities: FrozenSet[str]) -> MarkdownIt:
        options = {"html": True}
        if HIGHLIGHT in capabilities:
            options["highlight"] = _highlight
        md = MarkdownIt("commonmark", options).enable(["table", "strikethrough"])
        if MATH in capabilities:
            from mdit_py_plugins.dollarmath import dollarmath_plugin

            md.use(dollarmath_plugin)
        return md


@dataclass(frozen=True)
class SlideView:
    """Everything the main view shows for one position."""

    state: NavigationState
    empty: bool = False
    message: Optional[str] = None
    title: Optional[str] = None
    html: str = ""
    notes: Optional[str] = None
    fragment: str = "#/0"
    slide_number: Optional[str] = None
    progress: Optional[float] = None
    routes: Dict[str, bool] = field(default_factory=dict)
    show_controls: bool = True


def available_routes(deck: Deck, state: NavigationState, loop: bool = False) -> Dict[str, bool]:
    if deck.is_empty:
        return {"left": False, "right": False, "up": False, "down": False}
    last_h = len(deck) - 1
    multiple = len(deck) > 1
    return {
        "left": state.h > 0 or (loop and multiple),
        "right": state.h < last_h or (loop and multiple),
        "up": state.v > 0,
        "down": state.v < deck.leaf_count(state.h) - 1,
    }


def progress_of(deck: Deck, state: NavigationState) -> float:
    """Fraction of the deck already passed, reveal.js style."""

    total = deck.total_leaves()
    if total <= 1:
        return 1.0
    past = sum(len(slide.leaves) for slide in deck.slides[: state.h]) + state.v
    return past / (total - 1)


def format_slide_number(state: NavigationState) -> str:
    """``h.v`` with 1-based numbers; the vertical part only inside groups."""

    if state.v:
        return f"{state.h + 1}.{state.v + 1}"
    return str(state.h + 1)


def render_view(
    deck: Deck,
    state: NavigationState,
    config: Optional[DeckConfig] = None,
    capabilities: Iterable[str] = (),
    *,
    markdown: Optional[MarkdownRenderer] = None,
) -> SlideView:
    """Render the leaf at ``state``; an empty deck yields the "no slides" view.

    Out-of-range coordinates are clamped to the nearest leaf.
    """

    config = config or DeckConfig()
    if deck.is_empty:
        return SlideView(
            state=NavigationState(0, 0),
            empty=True,
            message=EMPTY_DECK_MESSAGE,
            routes=available_routes(deck, state),
            show_controls=False,
        )

    state = deck.clamp(state)
    leaf = deck.leaf_at(state)

    markdown = markdown or MarkdownRenderer()
    return SlideView(
        state=state,
        title=leaf.title,
        html=markdown.render(leaf.content, capabilities),
        notes=leaf.notes,
        fragment=encode_fragment(state),
        slide_number=format_slide_number(state) if config.slide_number else None,
        progress=progress_of(deck, state) if config.progress else None,
        routes=available_routes(deck, state, config.loop),
        show_controls=config.controls,
    )


def render_notes(
    leaf: Optional[LeafSlide],
    capabilities: Iterable[str] = (),
    *,
    markdown: Optional[MarkdownRenderer] = None,
) -> str:
    if leaf is None or not leaf.notes:
        return ""
    return (markdown or MarkdownRenderer()).render(leaf.notes, capabilities)


class DeckHtmlRenderer:
    """Render a whole deck into a standalone reveal.js page."""

    def __init__(
        self,
        config: Optional[DeckConfig] = None,
        capabilities: Iterable[str] = (),
        *,
        reveal_base_url: str = REVEAL_CDN,
    ) -> None:
        self.config = config or DeckConfig()
        self.capabilities = frozenset(capabilities)
        self.reveal_base_url = reveal_base_url.rstrip("/")
        self.markdown = MarkdownRenderer(self.capabilities)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def render_slides(self, deck: Deck) -> str:
        """The ``<div class="slides">`` body for ``deck``."""

        if deck.is_empty:
            return (
                '<div class="slides"><section class="empty-deck">'
                f"<p>{html.escape(EMPTY_DECK_MESSAGE)}</p></section></div>"
            )
        sections = "\n".join(self._render_slide(slide) for slide in deck.slides)
        return f'<div class="slides">\n{sections}\n</div>'

    def render_document(self, deck: Deck) -> str:
        """Return a complete HTML page presenting ``deck``."""

        base = self.reveal_base_url
        options = json.dumps(self.config.to_reveal_options(), indent=2)
        theme = html.escape(self.config.theme, quote=True)
        title = html.escape(self.config.title)
        return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
  <link rel="stylesheet" href="{base}/dist/reveal.css">
  <link rel="stylesheet" href="{base}/dist/theme/{theme}.css">
</head>
<body>
<div class="reveal">
{self.render_slides(deck)}
</div>
<script src="{base}/dist/reveal.js"></script>
<script src="{base}/plugin/notes/notes.js"></script>
<script>
  Reveal.initialize(Object.assign({options}, {{ plugins: [ RevealNotes ] }}));
</script>
</body>
</html>
"""

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _render_slide(self, slide: Slide) -> str:
        if isinstance(slide, LeafSlide):
            return self._render_leaf(slide)
        inner = "\n".join(self._render_leaf(leaf) for leaf in slide.leaves)
        return f"<section>\n{inner}\n</section>"

    def _render_leaf(self, leaf: LeafSlide) -> str:
        body = self.markdown.render(leaf.content)
        notes = ""
        if leaf.notes:
            notes = f'\n<aside class="notes">{self.markdown.render(leaf.notes)}</aside>'
        return f"<section>\n{body}{notes}\n</section>"
