import pytest

from mdslides.config import DeckConfig
from mdslides.navigation import NavigationController
from mdslides.parser import parse_deck
from mdslides.slide_models import NavigationState


def test_next_visits_every_leaf_then_stops(abc_deck):
    controller = NavigationController(abc_deck)
    visited = [controller.current_leaf.content]
    while controller.next():
        visited.append(controller.current_leaf.content)

    assert visited == ["# A", "# B1", "# B2", "# B3", "# C"]
    assert controller.next() is False
    assert controller.state == NavigationState(2, 0)


def test_previous_enters_group_at_last_leaf(abc_deck):
    controller = NavigationController(abc_deck, initial=NavigationState(2, 0))

    assert controller.previous()
    assert controller.state == NavigationState(1, 2)


def test_previous_at_first_slide_is_idempotent(abc_deck):
    controller = NavigationController(abc_deck)
    for _ in range(3):
        assert controller.previous() is False
        assert controller.state == NavigationState(0, 0)


def test_next_then_previous_round_trip(abc_deck):
    positions = list(abc_deck.positions())
    for position in positions[:-1]:
        controller = NavigationController(abc_deck, initial=position)
        controller.next()
        controller.previous()
        assert controller.state == position


def test_loop_wraps_both_ends(abc_deck):
    controller = NavigationController(
        abc_deck, DeckConfig(loop=True), initial=NavigationState(2, 0)
    )

    assert controller.next()
    assert controller.state == NavigationState(0, 0)
    assert controller.previous()
    assert controller.state == NavigationState(2, 0)


@pytest.mark.parametrize(
    "target, expected",
    [
        ((10, 10), NavigationState(2, 0)),
        ((1, 99), NavigationState(1, 2)),
        ((-3, -1), NavigationState(0, 0)),
        ((0, 5), NavigationState(0, 0)),
    ],
)
def test_go_to_clamps(abc_deck, target, expected):
    controller = NavigationController(abc_deck, initial=NavigationState(1, 1))
    controller.go_to(*target)
    assert controller.state == expected


def test_first_and_last(abc_deck):
    controller = NavigationController(abc_deck, initial=NavigationState(1, 1))

    assert controller.last()
    assert controller.state == NavigationState(2, 0)
    assert controller.first()
    assert controller.state == NavigationState(0, 0)
    assert controller.first() is False


def test_directional_commands(abc_deck):
    controller = NavigationController(abc_deck, initial=NavigationState(1, 0))

    assert controller.up() is False
    assert controller.down()
    assert controller.state == NavigationState(1, 1)
    assert controller.right()
    assert controller.state == NavigationState(2, 0)
    assert controller.right() is False
    assert controller.left()
    assert controller.state == NavigationState(1, 0)
    assert controller.left()
    assert controller.down() is False


def test_fragment_written_only_on_change(abc_deck):
    written = []
    controller = NavigationController(abc_deck, fragment_sink=written.append)

    controller.go_to(1, 1)
    controller.go_to(1, 1)
    controller.last()
    controller.next()

    assert written == ["#/1/1", "#/2"]
    assert controller.fragment == "#/2"


def test_fragment_not_written_when_hash_disabled(abc_deck):
    written = []
    controller = NavigationController(
        abc_deck, DeckConfig(hash=False), fragment_sink=written.append
    )
    controller.next()

    assert controller.state == NavigationState(1, 0)
    assert written == []


def test_listeners_receive_new_state(abc_deck):
    seen = []
    controller = NavigationController(abc_deck)
    controller.subscribe(seen.append)
    controller.next()
    controller.unsubscribe(seen.append)
    controller.next()

    assert seen == [NavigationState(1, 0)]


def test_keyboard_dispatch(abc_deck):
    controller = NavigationController(abc_deck, initial=NavigationState(1, 0))

    assert controller.handle_key("ArrowDown")
    assert controller.state == NavigationState(1, 1)
    assert controller.handle_key("End")
    assert controller.state == NavigationState(2, 0)
    assert controller.handle_key("Escape") is False

    disabled = NavigationController(abc_deck, DeckConfig(keyboard=False))
    assert disabled.handle_key("ArrowRight") is False
    assert disabled.state == NavigationState(0, 0)


def test_restore_from_fragment(abc_deck):
    controller = NavigationController(abc_deck)

    assert controller.restore("#/1/2")
    assert controller.state == NavigationState(1, 2)
    assert controller.restore("#/not-a-slide") is False
    assert controller.state == NavigationState(1, 2)
    controller.restore("#/9")
    assert controller.state == NavigationState(2, 0)


def test_initial_state_is_clamped(abc_deck):
    controller = NavigationController(abc_deck, initial=NavigationState(7, 7))
    assert controller.state == NavigationState(2, 0)


def test_empty_deck_commands_are_noops():
    controller = NavigationController(parse_deck(""))

    assert controller.current_leaf is None
    for command in ("next", "previous", "first", "last", "left", "right", "up", "down"):
        assert getattr(controller, command)() is False
    assert controller.go_to(3, 1) is False
    assert controller.state == NavigationState(0, 0)
