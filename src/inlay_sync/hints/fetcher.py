"""Single-document inlay hint fetch with supersession."""

from __future__ import annotations

import logging

from inlay_sync.dispatch.registry import RequestRegistry
from inlay_sync.dispatch.retry import BackoffRetryDispatcher
from inlay_sync.errors import FatalRequestError, RequestCancelled, TransientExhausted
from inlay_sync.obs.tracing import FetchOutcome, FetchTraceStore, Timer
from inlay_sync.types import AnnotationItem, AnnotationRequest, AttemptTrace

_LOGGER = logging.getLogger(__name__)


class AnnotationFetcher:
    """Issues one hint request per document, superseding any earlier one.

    Every failure class is absorbed here and turned into `None`, so one
    document's pipeline never disturbs another's.
    """

    def __init__(
        self,
        dispatcher: BackoffRetryDispatcher,
        registry: RequestRegistry,
        *,
        trace_store: FetchTraceStore | None = None,
    ) -> None:
        self.dispatcher = dispatcher
        self.registry = registry
        self.trace_store = trace_store

    async def fetch(self, document_id: str) -> list[AnnotationItem] | None:
        token = self.registry.supersede(document_id)
        request = AnnotationRequest(document_id=document_id)
        attempts: list[AttemptTrace] = []
        hints: list[AnnotationItem] | None = None
        error: str | None = None

        try:
            with Timer() as timer:
                try:
                    hints = await self.dispatcher.send(request, token, observer=attempts.append)
                    outcome = FetchOutcome.SUCCEEDED
                except RequestCancelled:
                    _LOGGER.debug("Inlay hint request for %s was superseded", document_id)
                    outcome = FetchOutcome.CANCELLED
                except TransientExhausted as exc:
                    outcome, error = FetchOutcome.TRANSIENT_EXHAUSTED, str(exc)
                except FatalRequestError as exc:
                    outcome, error = FetchOutcome.FATAL, str(exc)
                except Exception as exc:
                    _LOGGER.exception("Unexpected failure fetching inlay hints for %s", document_id)
                    outcome, error = FetchOutcome.ERROR, repr(exc)
        finally:
            self.registry.release(document_id, token)

        if self.trace_store is not None:
            self.trace_store.create_record(
                document_id=document_id,
                outcome=outcome,
                attempts=attempts,
                hint_count=len(hints or []),
                latency_ms=timer.elapsed_ms,
                error=error,
            )
        return hints
