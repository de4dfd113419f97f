"""Coordinator keeping inlay hints in sync with the visible documents."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from inlay_sync.config import EngineConfig, HintsConfig
from inlay_sync.dispatch.registry import RequestRegistry
from inlay_sync.dispatch.retry import BackoffRetryDispatcher, SleepFn
from inlay_sync.hints.fetcher import AnnotationFetcher
from inlay_sync.hints.render import CategoryRenderer
from inlay_sync.host import AnalysisService, Editor, Host
from inlay_sync.obs.tracing import FetchTraceStore
from inlay_sync.types import DocumentChange, HintCategory

_LOGGER = logging.getLogger(__name__)


class UpdaterState(str, Enum):
    DISABLED = "disabled"
    ENABLED = "enabled"


class HintsUpdater:
    """Reconciles edits, visibility and configuration changes with hint fetches.

    Every trigger ends in `refresh()`, which fans out one fetch per visible
    document. Per-document ordering comes from the request registry: a new
    fetch cancels the previous one, so only the latest result is rendered.
    """

    def __init__(
        self,
        host: Host,
        service: AnalysisService,
        *,
        config: EngineConfig | None = None,
        trace_store: FetchTraceStore | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self.host = host
        self.config = config or EngineConfig()
        self.hints_config = HintsConfig()
        self.registry = RequestRegistry()
        self.dispatcher = BackoffRetryDispatcher(service, config=self.config.dispatch, sleep=sleep)
        if trace_store is None:
            trace_store = FetchTraceStore(max_records=self.config.max_trace_records)
        self.trace_store = trace_store
        self.fetcher = AnnotationFetcher(self.dispatcher, self.registry, trace_store=self.trace_store)
        self.renderer = CategoryRenderer(color=self.config.hint_color)

    @property
    def enabled(self) -> bool:
        return self.hints_config.enabled

    @property
    def state(self) -> UpdaterState:
        return UpdaterState.ENABLED if self.enabled else UpdaterState.DISABLED

    async def set_enabled(self, enabled: bool, categories: Iterable[HintCategory | str]) -> None:
        new_config = HintsConfig.of(enabled, categories)
        _LOGGER.debug("set_enabled new=%r prev=%r", new_config, self.hints_config)

        if new_config == self.hints_config:
            return
        self.hints_config = new_config

        if new_config.enabled:
            await self.refresh()
        else:
            self._teardown()

    def clear(self) -> None:
        """Tear down: drop every hint and stop until re-enabled."""
        self.hints_config = HintsConfig(enabled=False, categories=self.hints_config.categories)
        self._teardown()

    async def refresh(self) -> None:
        if not self.enabled:
            return

        by_document: dict[str, list[Editor]] = {}
        for editor in self.visible_editors():
            by_document.setdefault(editor.document_id, []).append(editor)
        self._forget_hidden(by_document)

        document_ids = list(by_document)
        results = await asyncio.gather(
            *(self._refresh_document(doc_id, by_document[doc_id]) for doc_id in document_ids),
            return_exceptions=True,
        )
        for document_id, result in zip(document_ids, results, strict=True):
            if isinstance(result, Exception):
                _LOGGER.error(
                    "Inlay hint refresh failed for %s", document_id, exc_info=result
                )

    def visible_editors(self) -> list[Editor]:
        return [
            editor
            for editor in self.host.visible_editors()
            if self.config.accepts_language(editor.language_id)
        ]

    async def on_visible_editors_changed(self) -> None:
        await self.refresh()

    async def on_document_changed(self, change: DocumentChange) -> None:
        if change.is_empty:
            return
        if not self.config.accepts_language(change.language_id):
            return
        await self.refresh()

    async def on_configuration_changed(self, settings: Mapping[str, Any]) -> None:
        hints_config = HintsConfig.from_settings(settings)
        await self.set_enabled(hints_config.enabled, hints_config.categories)

    async def _refresh_document(self, document_id: str, editors: list[Editor]) -> None:
        hints = await self.fetcher.fetch(document_id)
        # Disabled while the request was in flight: nothing may be drawn.
        if hints is None or not self.enabled:
            return
        for editor in editors:
            self.renderer.apply(editor, hints, self.hints_config)

    def _forget_hidden(self, by_document: Mapping[str, list[Editor]]) -> None:
        stale = set(self.renderer.tracked_documents()) | set(self.registry.pending())
        for document_id in stale - by_document.keys():
            self.registry.cancel(document_id)
            self.renderer.forget(document_id)
        # Editors replaced by the host (moved tab, reopened split) are dropped.
        for document_id, editors in by_document.items():
            self.renderer.retain(document_id, editors)

    def _teardown(self) -> None:
        self.registry.cancel_all()
        self.renderer.clear_all()


async def activate(
    host: Host,
    service: AnalysisService,
    settings: Mapping[str, Any],
    **kwargs: Any,
) -> HintsUpdater:
    """Create an updater and apply the initial host settings."""

    updater = HintsUpdater(host, service, **kwargs)
    await updater.on_configuration_changed(settings)
    return updater
