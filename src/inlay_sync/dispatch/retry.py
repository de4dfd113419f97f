"""Request dispatch with bounded content-modified retries."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from time import perf_counter

from inlay_sync.config import DispatchConfig
from inlay_sync.dispatch.cancellation import CancellationToken, until_cancelled
from inlay_sync.errors import (
    REQUEST_CANCELLED,
    FatalRequestError,
    RequestCancelled,
    ServiceError,
    TransientExhausted,
)
from inlay_sync.host import AnalysisService
from inlay_sync.types import AnnotationItem, AnnotationRequest, AttemptTrace

_LOGGER = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]
AttemptObserver = Callable[[AttemptTrace], None]


class BackoffRetryDispatcher:
    """Sends inlay hint requests, retrying while the document is being edited.

    Only the content-modified failure is retried, following the literal
    `DispatchConfig.backoff_ms` schedule plus one final attempt. Cancellation
    ends the loop at once, including in the middle of a backoff wait. Any
    other service error is fatal.
    """

    def __init__(
        self,
        service: AnalysisService,
        *,
        config: DispatchConfig | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self.service = service
        self.config = config or DispatchConfig()
        self._sleep = sleep

    async def send(
        self,
        request: AnnotationRequest,
        token: CancellationToken,
        *,
        observer: AttemptObserver | None = None,
    ) -> list[AnnotationItem]:
        document_id = request.document_id
        schedule: list[int | None] = [*self.config.backoff_ms, None]

        for attempt, delay_ms in enumerate(schedule, start=1):
            if token.is_cancelled:
                raise RequestCancelled(document_id)

            start = perf_counter()
            try:
                result = await self.service.inlay_hints(request, token)
            except RequestCancelled:
                _observe(observer, document_id, attempt, REQUEST_CANCELLED, start)
                raise
            except ServiceError as error:
                _observe(observer, document_id, attempt, error.code, start)
                if token.is_cancelled or error.is_cancelled:
                    raise RequestCancelled(document_id) from error

                if not error.is_content_modified:
                    _LOGGER.error(
                        "Inlay hint request failed: service=%s document=%s code=%s error=%s",
                        type(self.service).__name__,
                        document_id,
                        error.code,
                        error.message,
                    )
                    raise FatalRequestError(document_id, error.code, error.message) from error

                if delay_ms is None:
                    _LOGGER.warning(
                        "Inlay hint request timed out: service=%s document=%s attempts=%d",
                        type(self.service).__name__,
                        document_id,
                        attempt,
                    )
                    raise TransientExhausted(document_id, attempt) from error

                _LOGGER.debug(
                    "Content modified for %s, retrying in %d ms (attempt %d)",
                    document_id,
                    delay_ms,
                    attempt,
                )
                await until_cancelled(
                    self._sleep(delay_ms / 1000.0), token, document_id=document_id
                )
                continue

            _observe(observer, document_id, attempt, None, start)
            # The service may have ignored the token; a superseded result is stale.
            if token.is_cancelled:
                raise RequestCancelled(document_id)
            return result

        raise AssertionError("unreachable")


def _observe(
    observer: AttemptObserver | None,
    document_id: str,
    attempt: int,
    error_code: int | None,
    start: float,
) -> None:
    if observer is None:
        return
    observer(
        AttemptTrace(
            document_id=document_id,
            attempt=attempt,
            error_code=error_code,
            latency_ms=(perf_counter() - start) * 1000.0,
        )
    )
