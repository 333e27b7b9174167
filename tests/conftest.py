import pytest

from mdslides.parser import parse_deck

ABC_SOURCE = """# A

Note: Open with the goal.

---

# B1

--

# B2

Note: Speaker note text

--

# B3

---

# C
"""


@pytest.fixture
def abc_source() -> str:
    return ABC_SOURCE


@pytest.fixture
def abc_deck():
    deck = parse_deck(ABC_SOURCE)
    assert not deck.warnings
    return deck
