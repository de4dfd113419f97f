"""Per-document registry of in-flight request tokens."""

from __future__ import annotations

from inlay_sync.dispatch.cancellation import CancellationToken


class RequestRegistry:
    """Keeps at most one live cancellation token per document.

    Superseding is the only way an in-flight request for a document is
    invalidated, so a slow earlier response always observes a cancelled token.
    """

    def __init__(self) -> None:
        self._pending: dict[str, CancellationToken] = {}

    def supersede(self, document_id: str) -> CancellationToken:
        previous = self._pending.pop(document_id, None)
        if previous is not None:
            previous.cancel()
        token = CancellationToken()
        self._pending[document_id] = token
        return token

    def release(self, document_id: str, token: CancellationToken) -> None:
        if self._pending.get(document_id) is token:
            del self._pending[document_id]

    def cancel(self, document_id: str) -> None:
        token = self._pending.pop(document_id, None)
        if token is not None:
            token.cancel()

    def cancel_all(self) -> None:
        pending, self._pending = self._pending, {}
        for token in pending.values():
            token.cancel()

    def pending(self) -> list[str]:
        return list(self._pending)

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._pending

    def __len__(self) -> int:
        return len(self._pending)
