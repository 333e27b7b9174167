import asyncio

from mdslides.navigation import NavigationController
from mdslides.plugins import PluginManager, PluginSpec
from mdslides.renderer import render_view
from mdslides.slide_models import NavigationState


def test_missing_plugin_leaves_flag_unset():
    manager = PluginManager(
        [PluginSpec("ok", ("json",)), PluginSpec("missing", ("mdslides_no_such_module",))]
    )

    capabilities = manager.load_now()

    assert capabilities == frozenset({"ok"})
    assert manager.is_ready("ok")
    assert not manager.is_ready("missing")
    assert "missing" in manager.failures


def test_navigation_does_not_wait_for_plugins(abc_deck):
    async def scenario():
        manager = PluginManager([PluginSpec("highlight", ("json",))])
        manager.start()
        before = manager.capabilities
        pending = manager.pending

        controller = NavigationController(abc_deck)
        controller.next()
        view = render_view(abc_deck, controller.state, capabilities=manager.capabilities)

        await manager.wait()
        return before, pending, view, manager.capabilities, manager.pending

    before, pending, view, after, still_pending = asyncio.run(scenario())

    assert before == frozenset()
    assert pending is True
    assert view.state == NavigationState(1, 0)
    assert "<h1>B1</h1>" in view.html
    assert after == frozenset({"highlight"})
    assert still_pending is False
