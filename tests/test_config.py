import pytest

from mdslides.config import DeckConfig, Transition, build_config, env_overrides
from mdslides.exceptions import ConfigError


def test_defaults():
    config = DeckConfig()
    assert config.loop is False
    assert config.hash is True
    assert config.controls is True
    assert config.slide_number is False
    assert config.transition is Transition.SLIDE


def test_unknown_options_are_ignored():
    config = build_config({"bogus": 1, "loop": True}, use_env=False)
    assert config.loop is True
    assert not hasattr(config, "bogus")


def test_camel_case_aliases():
    config = build_config(
        {"slideNumber": "true", "transitionSpeed": "fast"}, use_env=False
    )
    assert config.slide_number is True
    assert config.transition_speed.value == "fast"


def test_merge_precedence():
    environ = {"MDSLIDES_LOOP": "true", "MDSLIDES_THEME": "white", "HOME": "/root"}
    config = build_config(
        {"theme": "league"},
        url_overrides={"theme": "sky"},
        environ=environ,
    )
    assert config.loop is True
    assert config.theme == "sky"


def test_env_overrides_only_reads_prefixed_keys():
    assert env_overrides({"MDSLIDES_CONTROLS": "0", "CONTROLS": "1"}) == {"controls": "0"}


def test_invalid_supplied_option_raises():
    with pytest.raises(ConfigError) as excinfo:
        build_config({"transition": "spin"}, use_env=False)
    assert excinfo.value.error_type == "validation"


def test_invalid_url_option_is_dropped():
    config = build_config(
        {"loop": True},
        url_overrides={"loop": "maybe", "controls": "false"},
        use_env=False,
    )
    assert config.loop is True
    assert config.controls is False


def test_reveal_options_use_camel_case():
    options = DeckConfig(slide_number=True).to_reveal_options()
    assert options["slideNumber"] is True
    assert options["transition"] == "slide"
    assert "theme" not in options
