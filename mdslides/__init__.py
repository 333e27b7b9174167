"""High-level interfaces for parsing, navigating and rendering markdown decks."""

from .config import DeckConfig, build_config
from .deck_store import DeckStore
from .deeplink import decode_fragment, encode_fragment
from .exceptions import (
    ConfigError,
    DeckError,
    DeckSourceError,
    ExportError,
    FragmentError,
)
from .navigation import NavigationController
from .parser import DeckParser, ParserOptions, parse_deck, serialize_deck
from .plugins import PluginManager
from .presenter import PresenterView
from .renderer import DeckHtmlRenderer, MarkdownRenderer, SlideView, render_view
from .slide_models import (
    Deck,
    LeafSlide,
    NavigationState,
    ParseWarning,
    SlideGroup,
)

__all__ = [
    "Deck",
    "LeafSlide",
    "SlideGroup",
    "NavigationState",
    "ParseWarning",
    "DeckParser",
    "ParserOptions",
    "parse_deck",
    "serialize_deck",
    "DeckConfig",
    "build_config",
    "DeckStore",
    "NavigationController",
    "encode_fragment",
    "decode_fragment",
    "PluginManager",
    "MarkdownRenderer",
    "DeckHtmlRenderer",
    "SlideView",
    "render_view",
    "PresenterView",
    "DeckError",
    "DeckSourceError",
    "ConfigError",
    "FragmentError",
    "ExportError",
]
