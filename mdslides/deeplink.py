"""Encode navigation positions as reveal.js style URL fragments (``#/h/v``)."""

from __future__ import annotations

import re

from .exceptions import FragmentError
from .slide_models import NavigationState

_FRAGMENT_RE = re.compile(r"^#?/?(\d+)(?:/(\d+))?/?$")


def encode_fragment(state: NavigationState) -> str:
    """Return ``#/h`` for the first leaf of a slide, ``#/h/v`` otherwise."""

    if state.v:
        return f"#/{state.h}/{state.v}"
    return f"#/{state.h}"


def decode_fragment(fragment: str) -> NavigationState:
    """Parse a fragment produced by :func:`encode_fragment`.

    An empty fragment is the first slide. Anything else that is not
    ``#/h`` or ``#/h/v`` with non-negative integers raises
    :class:`FragmentError`.
    """

    text = (fragment or "").strip()
    if text in ("", "#", "#/"):
        return NavigationState(0, 0)
    match = _FRAGMENT_RE.match(text)
    if match is None:
        raise FragmentError(
            f"Not a slide fragment: {fragment!r}", error_type="malformed_fragment"
        )
    h = int(match.group(1))
    v = int(match.group(2)) if match.group(2) is not None else 0
    return NavigationState(h, v)
