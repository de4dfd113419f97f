"""Analysis service adapter for JSON-RPC language clients."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from cattrs import Converter
from lsprotocol import types as lsp
from lsprotocol.converters import get_converter

from inlay_sync.dispatch.cancellation import CancellationToken, until_cancelled
from inlay_sync.errors import INTERNAL_ERROR, RequestCancelled, ServiceError
from inlay_sync.types import AnnotationItem, AnnotationRequest, HintCategory, Position, Range

INLAY_HINTS_METHOD = lsp.TEXT_DOCUMENT_INLAY_HINT

SendRequest = Callable[[str, Any], Awaitable[Any]]

_CATEGORY_BY_KIND = {
    lsp.InlayHintKind.Type: HintCategory.TYPE,
    lsp.InlayHintKind.Parameter: HintCategory.PARAMETER,
}

# Largest LSP uinteger; servers clamp it to the document end.
_MAX_LINE = 2**31 - 1


class LspInlayHintService:
    """Adapts a JSON-RPC `send_request(method, params)` coroutine.

    Works with any language client exposing that call shape, e.g.
    `pygls` clients via `client.protocol.send_request_async`. Transport
    errors are wrapped into `ServiceError` using their JSON-RPC `code`.
    """

    def __init__(self, send_request: SendRequest, *, converter: Converter | None = None) -> None:
        self._send_request = send_request
        self._converter = converter or get_converter()

    def build_params(self, request: AnnotationRequest) -> lsp.InlayHintParams:
        return lsp.InlayHintParams(
            text_document=lsp.TextDocumentIdentifier(uri=request.document_id),
            range=lsp.Range(
                start=lsp.Position(line=0, character=0),
                end=lsp.Position(line=_MAX_LINE, character=0),
            ),
        )

    async def inlay_hints(
        self, request: AnnotationRequest, token: CancellationToken
    ) -> list[AnnotationItem]:
        params = self.build_params(request)
        try:
            raw = await until_cancelled(
                self._send_request(INLAY_HINTS_METHOD, params),
                token,
                document_id=request.document_id,
            )
        except RequestCancelled:
            raise
        except Exception as exc:
            code = getattr(exc, "code", None)
            raise ServiceError(code if isinstance(code, int) else INTERNAL_ERROR, str(exc)) from exc

        return to_annotation_items(self._structure(raw))

    def _structure(self, raw: Any) -> list[lsp.InlayHint]:
        if raw is None:
            return []
        return [
            item if isinstance(item, lsp.InlayHint) else self._converter.structure(item, lsp.InlayHint)
            for item in raw
        ]


def to_annotation_items(hints: Iterable[lsp.InlayHint]) -> list[AnnotationItem]:
    """Convert protocol hints, dropping those without a known kind."""

    items: list[AnnotationItem] = []
    for hint in hints:
        category = _CATEGORY_BY_KIND.get(hint.kind) if hint.kind is not None else None
        if category is None:
            continue
        position = Position(line=hint.position.line, character=hint.position.character)
        items.append(
            AnnotationItem(
                category=category,
                range=Range.at(position),
                label=_clean_label(_label_text(hint.label), category),
            )
        )
    return items


def _label_text(label: str | list[lsp.InlayHintLabelPart]) -> str:
    if isinstance(label, str):
        return label
    return "".join(part.value for part in label)


def _clean_label(label: str, category: HintCategory) -> str:
    # Servers often ship the separator in the label; the renderer adds its own.
    text = label.strip()
    if category is HintCategory.TYPE:
        return text.removeprefix(":").strip()
    return text.removesuffix(":").strip()
