import pytest

from mdslides.deeplink import decode_fragment, encode_fragment
from mdslides.exceptions import FragmentError
from mdslides.slide_models import NavigationState


def test_encode_omits_zero_vertical_index():
    assert encode_fragment(NavigationState(0, 0)) == "#/0"
    assert encode_fragment(NavigationState(3, 0)) == "#/3"
    assert encode_fragment(NavigationState(1, 2)) == "#/1/2"


def test_round_trip_for_every_position(abc_deck):
    for state in abc_deck.positions():
        assert decode_fragment(encode_fragment(state)) == state


@pytest.mark.parametrize(
    "fragment, expected",
    [
        ("", NavigationState(0, 0)),
        ("#", NavigationState(0, 0)),
        ("#/", NavigationState(0, 0)),
        ("#/4/", NavigationState(4, 0)),
        ("/2/1", NavigationState(2, 1)),
        ("5", NavigationState(5, 0)),
    ],
)
def test_decode_accepts_loose_forms(fragment, expected):
    assert decode_fragment(fragment) == expected


@pytest.mark.parametrize("fragment", ["#/a", "#/-1", "#/1/2/3", "#slide-3"])
def test_decode_rejects_malformed(fragment):
    with pytest.raises(FragmentError):
        decode_fragment(fragment)
