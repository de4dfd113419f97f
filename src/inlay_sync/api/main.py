"""FastAPI diagnostics surface for a running hints engine."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from inlay_sync.hints.updater import HintsUpdater
from inlay_sync.obs.tracing import FetchTraceStore
from inlay_sync.types import HintCategory


class ConfigRequest(BaseModel):
    enabled: bool
    categories: list[HintCategory] = Field(default_factory=list)


def create_app(updater: HintsUpdater, trace_store: FetchTraceStore) -> FastAPI:
    """Expose health, traces and control endpoints for `updater`."""

    app = FastAPI(title="Inlay Hint Sync", version="0.1.0")

    @app.get("/health")
    def health() -> dict[str, Any]:
        return {
            "status": "ok",
            "state": updater.state.value,
            "categories": sorted(category.value for category in updater.hints_config.categories),
            "pending_requests": len(updater.registry),
            "tracked_documents": len(updater.renderer.tracked_documents()),
        }

    @app.get("/traces")
    def traces(limit: int = 20) -> dict[str, Any]:
        records = [asdict(record) for record in trace_store.list_recent(limit=limit)]
        return {"items": records}

    @app.get("/traces/{trace_id}")
    def trace_detail(trace_id: str) -> dict[str, Any]:
        try:
            record = trace_store.get(trace_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return asdict(record)

    @app.get("/metrics")
    def metrics() -> dict[str, Any]:
        return trace_store.summary()

    @app.post("/refresh")
    async def refresh() -> dict[str, Any]:
        await updater.refresh()
        return {"state": updater.state.value}

    @app.post("/config")
    async def configure(request: ConfigRequest) -> dict[str, Any]:
        await updater.set_enabled(request.enabled, request.categories)
        return {"state": updater.state.value}

    @app.post("/clear")
    async def clear() -> dict[str, Any]:
        updater.clear()
        return {"state": updater.state.value}

    return app
