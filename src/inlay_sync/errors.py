"""Error taxonomy for inlay hint requests."""

from __future__ import annotations

from lsprotocol import types as lsp

CONTENT_MODIFIED = int(lsp.LSPErrorCodes.ContentModified)
REQUEST_CANCELLED = int(lsp.LSPErrorCodes.RequestCancelled)
INTERNAL_ERROR = int(lsp.ErrorCodes.InternalError)


class InlaySyncError(Exception):
    """Base class for engine errors."""


class ServiceError(InlaySyncError):
    """Typed failure reported by the analysis service."""

    def __init__(self, code: int, message: str = "") -> None:
        super().__init__(f"[{code}] {message}" if message else f"[{code}]")
        self.code = code
        self.message = message

    @property
    def is_content_modified(self) -> bool:
        return self.code == CONTENT_MODIFIED

    @property
    def is_cancelled(self) -> bool:
        return self.code == REQUEST_CANCELLED


class RequestFailure(InlaySyncError):
    """Final outcome of a dispatched request that produced no result."""

    def __init__(self, document_id: str, message: str) -> None:
        super().__init__(f"{document_id}: {message}")
        self.document_id = document_id


class RequestCancelled(RequestFailure):
    def __init__(self, document_id: str) -> None:
        super().__init__(document_id, "request cancelled")


class TransientExhausted(RequestFailure):
    def __init__(self, document_id: str, attempts: int) -> None:
        super().__init__(document_id, f"content still modified after {attempts} attempts")
        self.attempts = attempts


class FatalRequestError(RequestFailure):
    def __init__(self, document_id: str, code: int, message: str = "") -> None:
        super().__init__(document_id, f"request failed with code {code}: {message}")
        self.code = code
