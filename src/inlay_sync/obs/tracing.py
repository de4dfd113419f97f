"""Fetch tracing and outcome metrics."""

from __future__ import annotations

import time
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from inlay_sync.types import AttemptTrace


class FetchOutcome(str, Enum):
    SUCCEEDED = "succeeded"
    CANCELLED = "cancelled"
    TRANSIENT_EXHAUSTED = "transient_exhausted"
    FATAL = "fatal"
    ERROR = "error"


@dataclass(slots=True)
class FetchRecord:
    trace_id: str
    timestamp_utc: str
    document_id: str
    outcome: FetchOutcome
    attempts: list[AttemptTrace]
    hint_count: int
    latency_ms: float
    error: str | None = None


class FetchTraceStore:
    """In-memory fetch history for diagnostics, oldest records evicted first."""

    def __init__(self, *, max_records: int = 1000) -> None:
        self._records: OrderedDict[str, FetchRecord] = OrderedDict()
        self._max_records = max_records

    def create_record(
        self,
        *,
        document_id: str,
        outcome: FetchOutcome,
        attempts: list[AttemptTrace],
        hint_count: int,
        latency_ms: float,
        error: str | None = None,
    ) -> FetchRecord:
        trace_id = str(uuid.uuid4())
        record = FetchRecord(
            trace_id=trace_id,
            timestamp_utc=datetime.now(timezone.utc).isoformat(),
            document_id=document_id,
            outcome=outcome,
            attempts=attempts,
            hint_count=hint_count,
            latency_ms=latency_ms,
            error=error,
        )
        self._records[trace_id] = record
        while len(self._records) > self._max_records:
            self._records.popitem(last=False)
        return record

    def get(self, trace_id: str) -> FetchRecord:
        record = self._records.get(trace_id)
        if record is None:
            raise KeyError(f"Trace not found: {trace_id}")
        return record

    def list_recent(self, limit: int = 20) -> list[FetchRecord]:
        if limit <= 0:
            return []
        return list(self._records.values())[-limit:]

    def summary(self) -> dict[str, float | int]:
        """Aggregate fetch outcomes and latency for dashboard display."""
        records = list(self._records.values())
        total = len(records)
        counts = {outcome.value: 0 for outcome in FetchOutcome}
        for record in records:
            counts[record.outcome.value] += 1

        if total == 0:
            return {
                "total_fetches": 0,
                **counts,
                "total_attempts": 0,
                "avg_latency_ms": 0.0,
                "p95_latency_ms": 0.0,
            }

        latencies = sorted(record.latency_ms for record in records)
        p95_index = max(0, int((len(latencies) * 0.95) - 1))

        return {
            "total_fetches": total,
            **counts,
            "total_attempts": sum(len(record.attempts) for record in records),
            "avg_latency_ms": sum(latencies) / total,
            "p95_latency_ms": latencies[p95_index],
        }


@dataclass(slots=True)
class Timer:
    """Simple context timer used by the fetcher."""

    _start: float = field(default=0.0, repr=False)
    elapsed_ms: float = 0.0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000.0
