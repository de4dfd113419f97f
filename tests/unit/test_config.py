import pytest
from pydantic import ValidationError

from inlay_sync.config import DispatchConfig, EngineConfig, HintsConfig
from inlay_sync.types import HintCategory


def test_settings_are_parsed_into_hints_config() -> None:
    config = HintsConfig.from_settings(
        {"displayInlayHints": True, "inlayHintsTypes": ["ParameterHint"]}
    )

    assert config.enabled is True
    assert config.categories == frozenset({HintCategory.PARAMETER})
    assert config.shows(HintCategory.PARAMETER)
    assert not config.shows(HintCategory.TYPE)


def test_missing_settings_enable_every_category() -> None:
    config = HintsConfig.from_settings({})

    assert config.enabled is True
    assert config.categories == frozenset(HintCategory)


def test_category_order_does_not_affect_equality() -> None:
    left = HintsConfig.of(True, [HintCategory.TYPE, HintCategory.PARAMETER])
    right = HintsConfig.of(True, ["ParameterHint", "TypeHint"])

    assert left == right
    assert left != HintsConfig.of(False, [HintCategory.TYPE, HintCategory.PARAMETER])


def test_unknown_category_is_rejected() -> None:
    with pytest.raises(ValidationError):
        HintsConfig.from_settings({"inlayHintsTypes": ["ChainingHint"]})


def test_hints_config_is_immutable() -> None:
    config = HintsConfig()
    with pytest.raises(ValidationError):
        config.enabled = True


def test_dispatch_schedule_validation() -> None:
    assert DispatchConfig().max_attempts == 6

    with pytest.raises(ValidationError):
        DispatchConfig(backoff_ms=())
    with pytest.raises(ValidationError):
        DispatchConfig(backoff_ms=(10, 0))


def test_language_filter() -> None:
    assert EngineConfig().accepts_language("python")

    config = EngineConfig(language_ids={"rust"})
    assert config.accepts_language("rust")
    assert not config.accepts_language("python")
