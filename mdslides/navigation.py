"""Navigation commands over a parsed deck."""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from .config import DeckConfig
from .deeplink import decode_fragment, encode_fragment
from .exceptions import FragmentError
from .slide_models import Deck, LeafSlide, NavigationState

LOGGER = logging.getLogger(__name__)

FragmentSink = Callable[[str], None]
Listener = Callable[[NavigationState], None]

KEY_BINDINGS: Dict[str, str] = {
    "ArrowRight": "right",
    "ArrowLeft": "left",
    "ArrowDown": "down",
    "ArrowUp": "up",
    "Space": "next",
    " ": "next",
    "PageDown": "next",
    "PageUp": "previous",
    "n": "next",
    "p": "previous",
    "Home": "first",
    "End": "last",
}


class NavigationController:
    """Owns the :class:`NavigationState` of one deck.

    All position changes go through the command methods. Each command
    returns ``True`` when the position changed; only then are listeners
    notified and the URL fragment written.
    """

    def __init__(
        self,
        deck: Deck,
        config: Optional[DeckConfig] = None,
        *,
        fragment_sink: Optional[FragmentSink] = None,
        initial: Optional[NavigationState] = None,
    ) -> None:
        self.deck = deck
        self.config = config or DeckConfig()
        self.fragment_sink = fragment_sink
        self._listeners: List[Listener] = []
        self._state = self.clamp(initial or NavigationState())

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------
    @property
    def state(self) -> NavigationState:
        return self._state

    @property
    def current_leaf(self) -> Optional[LeafSlide]:
        return self.deck.leaf_at(self._state)

    @property
    def fragment(self) -> str:
        return encode_fragment(self._state)

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    def clamp(self, state: NavigationState) -> NavigationState:
        """Nearest valid position to ``state``."""

        return self.deck.clamp(state)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def next(self) -> bool:
        if self.deck.is_empty:
            return False
        h, v = self._state.h, self._state.v
        if v + 1 < self.deck.leaf_count(h):
            return self._move(NavigationState(h, v + 1))
        if h + 1 < len(self.deck):
            return self._move(NavigationState(h + 1, 0))
        if self.config.loop:
            return self._move(NavigationState(0, 0))
        return False

    def previous(self) -> bool:
        if self.deck.is_empty:
            return False
        h, v = self._state.h, self._state.v
        if v > 0:
            return self._move(NavigationState(h, v - 1))
        if h > 0:
            return self._move(self._last_leaf_of(h - 1))
        if self.config.loop:
            return self._move(self._last_leaf_of(len(self.deck) - 1))
        return False

    def go_to(self, h: int, v: int = 0) -> bool:
        return self._move(self.clamp(NavigationState(h, v)))

    def first(self) -> bool:
        return self.go_to(0, 0)

    def last(self) -> bool:
        if self.deck.is_empty:
            return False
        return self._move(self._last_leaf_of(len(self.deck) - 1))

    def right(self) -> bool:
        """First leaf of the next top-level slide."""

        if self.deck.is_empty:
            return False
        h = self._state.h + 1
        if h >= len(self.deck):
            if not self.config.loop:
                return False
            h = 0
        return self._move(NavigationState(h, 0))

    def left(self) -> bool:
        """First leaf of the previous top-level slide."""

        if self.deck.is_empty:
            return False
        h = self._state.h - 1
        if h < 0:
            if not self.config.loop:
                return False
            h = len(self.deck) - 1
        return self._move(NavigationState(h, 0))

    def down(self) -> bool:
        if self.deck.is_empty:
            return False
        h, v = self._state.h, self._state.v
        if v + 1 >= self.deck.leaf_count(h):
            return False
        return self._move(NavigationState(h, v + 1))

    def up(self) -> bool:
        if self.deck.is_empty or self._state.v == 0:
            return False
        return self._move(NavigationState(self._state.h, self._state.v - 1))

    def handle_key(self, key: str) -> bool:
        """Dispatch a keyboard key name to its command."""

        if not self.config.keyboard:
            return False
        command = KEY_BINDINGS.get(key)
        if command is None:
            return False
        return getattr(self, command)()

    def restore(self, fragment: str) -> bool:
        """Jump to the position encoded in ``fragment`` (clamped)."""

        try:
            target = decode_fragment(fragment)
        except FragmentError as exc:
            LOGGER.warning("Ignoring deep link: %s", exc)
            return False
        return self.go_to(target.h, target.v)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _last_leaf_of(self, h: int) -> NavigationState:
        return NavigationState(h, self.deck.leaf_count(h) - 1)

    def _move(self, target: NavigationState) -> bool:
        if self.deck.is_empty or target == self._state:
            return False
        LOGGER.debug("Navigating %s -> %s", self._state, target)
        self._state = target
        if self.config.hash and self.fragment_sink is not None:
            self.fragment_sink(encode_fragment(target))
        for listener in list(self._listeners):
            listener(target)
        return True
