"""Presentation options and their merge order."""

from __future__ import annotations

import logging
import os
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigError

LOGGER = logging.getLogger(__name__)

ENV_PREFIX = "MDSLIDES_"


class Transition(str, Enum):
    NONE = "none"
    FADE = "fade"
    SLIDE = "slide"
    CONVEX = "convex"
    CONCAVE = "concave"
    ZOOM = "zoom"


class TransitionSpeed(str, Enum):
    DEFAULT = "default"
    FAST = "fast"
    SLOW = "slow"


class DeckConfig(BaseModel):
    """Every recognised presentation option with its default."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    controls: bool = Field(default=True, description="Show on-screen navigation arrows.")
    progress: bool = Field(default=True, description="Show the progress bar.")
    slide_number: bool = Field(
        default=False, alias="slideNumber", description="Show the current slide number."
    )
    hash: bool = Field(default=True, description="Write the position to the URL fragment.")
    loop: bool = Field(default=False, description="Wrap past the last/first slide.")
    keyboard: bool = Field(default=True, description="Enable keyboard navigation.")
    center: bool = Field(default=True, description="Vertically center slide content.")
    transition: Transition = Field(default=Transition.SLIDE)
    transition_speed: TransitionSpeed = Field(
        default=TransitionSpeed.DEFAULT, alias="transitionSpeed"
    )
    background_transition: Transition = Field(
        default=Transition.FADE, alias="backgroundTransition"
    )
    theme: str = Field(default="black", description="Theme stylesheet name.")
    title: str = Field(default="Slides", description="Document title.")

    def to_reveal_options(self) -> Dict[str, Any]:
        """Options in the camel-case form reveal.js expects."""

        return self.model_dump(mode="json", by_alias=True, exclude={"theme", "title"})


def _known_keys() -> Dict[str, str]:
    keys: Dict[str, str] = {}
    for name, info in DeckConfig.model_fields.items():
        keys[name] = name
        if info.alias:
            keys[info.alias] = name
    return keys


def _normalise(values: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Map aliases to field names and drop unrecognised options."""

    known = _known_keys()
    result: Dict[str, Any] = {}
    for key, value in (values or {}).items():
        name = known.get(key)
        if name is None:
            LOGGER.debug("Ignoring unknown option %r", key)
            continue
        result[name] = value
    return result


def env_overrides(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Collect ``MDSLIDES_<OPTION>`` values, loading ``.env`` first."""

    if environ is None:
        load_dotenv()
        environ = os.environ
    values = {
        key[len(ENV_PREFIX):].lower(): value
        for key, value in environ.items()
        if key.startswith(ENV_PREFIX)
    }
    return _normalise(values)


def build_config(
    overrides: Optional[Mapping[str, Any]] = None,
    *,
    url_overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
    use_env: bool = True,
) -> DeckConfig:
    """Merge defaults, environment, supplied overrides and URL overrides (last wins)."""

    merged: Dict[str, Any] = {}
    if use_env:
        merged.update(env_overrides(environ))
    merged.update(_normalise(overrides))

    try:
        config = DeckConfig(**merged)
    except ValidationError as exc:
        raise ConfigError(
            f"Invalid presentation options: {exc.errors(include_url=False)}",
            error_type="validation",
            original_error=exc,
        ) from exc

    url_values = _normalise(url_overrides)
    accepted: Dict[str, Any] = {}
    for name, value in url_values.items():
        try:
            DeckConfig(**{name: value})
        except ValidationError:
            LOGGER.warning("Ignoring invalid URL option %s=%r", name, value)
            continue
        accepted[name] = value
    if not accepted:
        return config
    return DeckConfig(**{**config.model_dump(), **accepted})
