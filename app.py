"""Streamlit UI for presenting markdown decks with a presenter view."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import streamlit as st

from mdslides.config import DeckConfig, build_config
from mdslides.deck_store import DeckStore
from mdslides.exceptions import ConfigError, DeckError
from mdslides.navigation import NavigationController
from mdslides.plugins import PluginManager
from mdslides.presenter import PresenterView
from mdslides.renderer import MarkdownRenderer, render_view
from mdslides.slide_models import Deck, NavigationState

DEFAULT_DECK_PATH = Path("assets/decks/type_level_recursion.md")
SLIDE_PARAM = "slide"

COMMANDS = ("first", "previous", "up", "down", "next", "last")


def fragment_from_query(params: Mapping[str, Any]) -> str:
    """The ``#/h/v`` fragment carried by the ``slide`` query parameter."""

    value = params.get(SLIDE_PARAM)
    if isinstance(value, list):
        value = value[-1] if value else None
    if not value:
        return ""
    value = str(value).strip()
    if value.startswith("#"):
        return value
    if not value.startswith("/"):
        value = "/" + value
    return "#" + value


def url_overrides(params: Mapping[str, Any]) -> Dict[str, Any]:
    """Every query parameter except the slide position is an option override."""

    overrides: Dict[str, Any] = {}
    for key, value in params.items():
        if key == SLIDE_PARAM:
            continue
        overrides[key] = value[-1] if isinstance(value, list) and value else value
    return overrides


def apply_command(
    deck: Deck,
    config: DeckConfig,
    state: NavigationState,
    command: str,
) -> Tuple[NavigationState, Optional[str]]:
    """Run one navigation command; return the new state and written fragment."""

    written = []
    controller = NavigationController(
        deck, config, fragment_sink=written.append, initial=state
    )
    getattr(controller, command)()
    return controller.state, (written[-1] if written else None)


@st.cache_resource(show_spinner=False)
def load_deck(path: str) -> Deck:
    """Load and parse the deck at ``path``."""

    return DeckStore(Path(path)).load()


@st.cache_resource(show_spinner=False)
def start_plugins() -> PluginManager:
    """Kick off plugin loading in the background; slides render meanwhile."""

    manager = PluginManager()
    threading.Thread(target=manager.load_now, name="mdslides-plugins", daemon=True).start()
    return manager


def _resolve_config(overrides: Mapping[str, Any]) -> DeckConfig:
    try:
        return build_config(overrides, url_overrides=url_overrides(st.query_params.to_dict()))
    except ConfigError as exc:
        st.warning("Invalid presentation options; falling back to defaults.")
        st.text(str(exc))
        return DeckConfig()


def main() -> None:
    st.set_page_config(page_title="mdslides", layout="wide")

    with st.sidebar:
        st.header("Deck")
        deck_path = st.text_input("Deck source", value=str(DEFAULT_DECK_PATH))
        loop = st.checkbox("Loop", value=False)
        slide_number = st.checkbox("Slide number", value=True)

    try:
        deck = load_deck(deck_path)
    except (DeckError, OSError) as exc:
        st.error(f"Deck could not be loaded: {exc}")
        return

    config = _resolve_config({"loop": loop, "slide_number": slide_number})
    plugins = start_plugins()
    capabilities = plugins.capabilities

    if "nav_state" not in st.session_state:
        controller = NavigationController(deck, config)
        fragment = fragment_from_query(st.query_params.to_dict())
        if fragment:
            controller.restore(fragment)
        st.session_state["nav_state"] = controller.state.to_dict()

    state = NavigationController(
        deck, config, initial=NavigationState.from_dict(st.session_state["nav_state"])
    ).state

    if deck.warnings:
        with st.sidebar.expander(f"Parse warnings ({len(deck.warnings)})"):
            for warning in deck.warnings:
                st.caption(str(warning))
    if plugins.pending:
        st.sidebar.caption("Loading rendering plugins…")

    main_tab, presenter_tab = st.tabs(["Slides", "Presenter"])

    with main_tab:
        view = render_view(deck, state, config, capabilities, markdown=MarkdownRenderer())
        if view.empty:
            st.info(view.message)
            return
        st.markdown(view.html, unsafe_allow_html=True)
        if view.progress is not None:
            st.progress(view.progress)
        if view.slide_number:
            st.caption(view.slide_number)

        if view.show_controls:
            enabled = {
                "first": state != NavigationState(0, 0),
                "previous": view.routes["left"] or view.routes["up"],
                "up": view.routes["up"],
                "down": view.routes["down"],
                "next": view.routes["right"] or view.routes["down"],
                "last": True,
            }
            labels = {
                "first": "⏮",
                "previous": "◀",
                "up": "▲",
                "down": "▼",
                "next": "▶",
                "last": "⏭",
            }
            for column, command in zip(st.columns(len(COMMANDS)), COMMANDS):
                with column:
                    if st.button(labels[command], key=f"nav_{command}", disabled=not enabled[command]):
                        new_state, fragment = apply_command(deck, config, state, command)
                        st.session_state["nav_state"] = new_state.to_dict()
                        if fragment:
                            st.query_params[SLIDE_PARAM] = fragment.lstrip("#")
                        st.rerun()

    with presenter_tab:
        controller = NavigationController(deck, config, initial=state)
        presenter = PresenterView(controller, capabilities)
        snapshot = presenter.snapshot
        st.markdown(f"**Slide {snapshot.slide_number}**")
        if snapshot.notes_html:
            st.markdown(snapshot.notes_html, unsafe_allow_html=True)
        else:
            st.caption("No notes for this slide.")
        if snapshot.upcoming_state is not None:
            st.caption(f"Up next: {snapshot.upcoming_title or '(untitled)'}")
        presenter.close()


if __name__ == "__main__":  # pragma: no cover - Streamlit handles execution
    main()
