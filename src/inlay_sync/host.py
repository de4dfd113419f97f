"""Interfaces consumed from the host editor and the analysis service."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from inlay_sync.types import AnnotationItem, AnnotationRequest, Decoration, DecorationStyle

if TYPE_CHECKING:
    from inlay_sync.dispatch.cancellation import CancellationToken


@runtime_checkable
class Editor(Protocol):
    """A visible text editor showing one document."""

    @property
    def document_id(self) -> str: ...

    @property
    def language_id(self) -> str: ...

    def set_decorations(self, style: DecorationStyle, decorations: list[Decoration]) -> None:
        """Replace every decoration of `style` with `decorations`."""
        ...


@runtime_checkable
class Host(Protocol):
    def visible_editors(self) -> list[Editor]: ...


@runtime_checkable
class AnalysisService(Protocol):
    """Language-server side of the inlay hint request.

    Implementations raise `ServiceError` for typed failures and
    `RequestCancelled` when they observe `token` firing.
    """

    async def inlay_hints(
        self, request: AnnotationRequest, token: CancellationToken
    ) -> list[AnnotationItem]: ...
