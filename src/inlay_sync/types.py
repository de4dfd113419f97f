"""Shared domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class HintCategory(str, Enum):
    """Visual category an inlay hint is rendered under."""

    TYPE = "TypeHint"
    PARAMETER = "ParameterHint"


class Placement(str, Enum):
    BEFORE = "before"
    AFTER = "after"


@dataclass(frozen=True, slots=True)
class Position:
    """Zero-based line/character location inside a document."""

    line: int
    character: int


@dataclass(frozen=True, slots=True)
class Range:
    start: Position
    end: Position

    @classmethod
    def at(cls, position: Position) -> "Range":
        return cls(start=position, end=position)


@dataclass(frozen=True, slots=True)
class AnnotationRequest:
    """Request for every inlay hint of one document."""

    document_id: str


@dataclass(frozen=True, slots=True)
class AnnotationItem:
    """A single hint produced by the analysis service."""

    category: HintCategory
    range: Range
    label: str


@dataclass(frozen=True, slots=True)
class DecorationStyle:
    """Host rendering style shared by every decoration of one category."""

    name: str
    placement: Placement
    color: str


@dataclass(frozen=True, slots=True)
class Decoration:
    """A labeled marker handed to the host editor."""

    range: Range
    content_text: str
    placement: Placement


@dataclass(slots=True)
class DocumentChange:
    """Text change notification forwarded by the host."""

    document_id: str
    language_id: str
    content_changes: list[Any] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.content_changes


@dataclass(slots=True)
class AttemptTrace:
    """Trace record for one attempt of a dispatched request."""

    document_id: str
    attempt: int
    error_code: int | None
    latency_ms: float
