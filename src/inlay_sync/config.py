"""Configuration models for the inlay hint engine."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from inlay_sync.types import HintCategory

DISPLAY_SETTING = "displayInlayHints"
CATEGORIES_SETTING = "inlayHintsTypes"


class HintsConfig(BaseModel):
    """Enabled state and active hint categories."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    categories: frozenset[HintCategory] = Field(default_factory=frozenset)

    @classmethod
    def of(cls, enabled: bool, categories: Iterable[HintCategory | str]) -> "HintsConfig":
        return cls(enabled=enabled, categories=frozenset(categories))

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> "HintsConfig":
        """Build a config from host settings.

        Missing keys fall back to hints enabled with every category shown.
        """

        return cls(
            enabled=settings.get(DISPLAY_SETTING, True),
            categories=frozenset(settings.get(CATEGORIES_SETTING, list(HintCategory))),
        )

    def shows(self, category: HintCategory) -> bool:
        return category in self.categories


class DispatchConfig(BaseModel):
    """Configures the content-modified retry schedule."""

    # 10 * 2**n ms for n = 2, 4, 6, 8, 10; a last attempt follows without delay.
    backoff_ms: tuple[int, ...] = Field(default=(40, 160, 640, 2560, 10240), min_length=1)

    @field_validator("backoff_ms")
    @classmethod
    def _positive_delays(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        if any(delay <= 0 for delay in value):
            raise ValueError("backoff delays must be positive")
        return value

    @property
    def max_attempts(self) -> int:
        return len(self.backoff_ms) + 1


class EngineConfig(BaseModel):
    """Configures document selection, rendering and tracing."""

    language_ids: frozenset[str] = Field(default_factory=frozenset)
    hint_color: str = Field(default="inlayHint", min_length=1)
    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)
    max_trace_records: int = Field(default=1000, ge=1)

    def accepts_language(self, language_id: str) -> bool:
        return not self.language_ids or language_id in self.language_ids
