"""Deferred loading of optional rendering plugins.

Plugins are loaded by background ``asyncio`` tasks. Each successful load
sets a capability flag; renderers consult the flags and fall back to plain
output for anything not (yet) available.
"""

from __future__ import annotations

import asyncio
import importlib
import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Set

LOGGER = logging.getLogger(__name__)

HIGHLIGHT = "highlight"
MATH = "math"


@dataclass(frozen=True)
class PluginSpec:
    """A named capability and the modules that provide it."""

    name: str
    modules: tuple


DEFAULT_PLUGINS = (
    PluginSpec(HIGHLIGHT, ("pygments", "pygments.lexers", "pygments.formatters")),
    PluginSpec(MATH, ("mdit_py_plugins.dollarmath",)),
)


class PluginManager:
    """Tracks which optional capabilities are ready to use."""

    def __init__(self, plugins: Iterable[PluginSpec] = DEFAULT_PLUGINS) -> None:
        self.plugins: Dict[str, PluginSpec] = {spec.name: spec for spec in plugins}
        self._ready: Set[str] = set()
        self._failed: Dict[str, str] = {}
        self._tasks: List[asyncio.Task] = []

    @property
    def capabilities(self) -> FrozenSet[str]:
        return frozenset(self._ready)

    @property
    def failures(self) -> Dict[str, str]:
        return dict(self._failed)

    def is_ready(self, name: str) -> bool:
        return name in self._ready

    @property
    def pending(self) -> bool:
        return any(not task.done() for task in self._tasks)

    def start(self) -> List[asyncio.Task]:
        """Schedule every plugin load on the running event loop."""

        self._tasks = [
            asyncio.create_task(self._load(spec), name=f"plugin:{spec.name}")
            for spec in self.plugins.values()
        ]
        return list(self._tasks)

    async def wait(self, timeout: Optional[float] = None) -> FrozenSet[str]:
        if self._tasks:
            await asyncio.wait(self._tasks, timeout=timeout)
        return self.capabilities

    async def load_all(self) -> FrozenSet[str]:
        """Start and wait for every plugin load."""

        self.start()
        return await self.wait()

    def load_now(self) -> FrozenSet[str]:
        """Blocking load, for callers without an event loop (CLI, exporters)."""

        return asyncio.run(self.load_all())

    async def _load(self, spec: PluginSpec) -> None:
        try:
            for module in spec.modules:
                await asyncio.to_thread(importlib.import_module, module)
        except ImportError as exc:
            self._failed[spec.name] = str(exc)
            LOGGER.warning("Plugin %s unavailable, rendering without it: %s", spec.name, exc)
            return
        self._ready.add(spec.name)
        LOGGER.info("Plugin %s ready", spec.name)
