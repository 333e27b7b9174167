"""Speaker-notes view that follows a :class:`NavigationController`."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .navigation import NavigationController
from .renderer import MarkdownRenderer, format_slide_number, render_notes
from .slide_models import LeafSlide, NavigationState


@dataclass(frozen=True)
class PresenterSnapshot:
    state: NavigationState
    slide_number: str
    notes: Optional[str]
    notes_html: str
    upcoming_title: Optional[str]
    upcoming_state: Optional[NavigationState]


class PresenterView:
    """Shows the notes of the active leaf and what comes next."""

    def __init__(
        self,
        controller: NavigationController,
        capabilities: Iterable[str] = (),
    ) -> None:
        self.controller = controller
        self.capabilities = frozenset(capabilities)
        self.markdown = MarkdownRenderer()
        self.snapshot: Optional[PresenterSnapshot] = None
        controller.subscribe(self._on_navigate)
        self._refresh(controller.state)

    def close(self) -> None:
        self.controller.unsubscribe(self._on_navigate)

    @property
    def notes(self) -> Optional[str]:
        return self.snapshot.notes if self.snapshot else None

    def upcoming(self) -> Optional[NavigationState]:
        """Position the next ``next`` command would reach, without moving."""

        deck = self.controller.deck
        if deck.is_empty:
            return None
        positions = list(deck.positions())
        index = positions.index(self.controller.state)
        if index + 1 < len(positions):
            return positions[index + 1]
        if self.controller.config.loop and len(positions) > 1:
            return positions[0]
        return None

    def _on_navigate(self, state: NavigationState) -> None:
        self._refresh(state)

    def _refresh(self, state: NavigationState) -> None:
        deck = self.controller.deck
        if deck.is_empty:
            self.snapshot = None
            return
        leaf: Optional[LeafSlide] = deck.leaf_at(state)
        upcoming_state = self.upcoming()
        upcoming_leaf = deck.leaf_at(upcoming_state) if upcoming_state else None
        self.snapshot = PresenterSnapshot(
            state=state,
            slide_number=format_slide_number(state),
            notes=leaf.notes if leaf else None,
            notes_html=render_notes(leaf, self.capabilities, markdown=self.markdown),
            upcoming_title=upcoming_leaf.title if upcoming_leaf else None,
            upcoming_state=upcoming_state,
        )
