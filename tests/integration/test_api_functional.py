from fastapi.testclient import TestClient

from inlay_sync.api.main import create_app
from inlay_sync.hints.updater import HintsUpdater
from inlay_sync.obs.tracing import FetchTraceStore
from inlay_sync.types import AnnotationItem, HintCategory, Position, Range


class _Editor:
    def __init__(self, document_id: str) -> None:
        self.document_id = document_id
        self.language_id = "rust"
        self.decorations: dict[str, list] = {}

    def set_decorations(self, style, decorations) -> None:
        self.decorations[style.name] = list(decorations)


class _Host:
    def __init__(self, *editors: _Editor) -> None:
        self.editors = list(editors)

    def visible_editors(self) -> list[_Editor]:
        return list(self.editors)


class _Service:
    async def inlay_hints(self, request, token):
        return [
            AnnotationItem(HintCategory.TYPE, Range.at(Position(1, 7)), "usize"),
            AnnotationItem(HintCategory.PARAMETER, Range.at(Position(2, 12)), "len"),
        ]


def test_api_config_refresh_trace_metrics() -> None:
    trace_store = FetchTraceStore()
    editor = _Editor("file:///src/main.rs")
    updater = HintsUpdater(_Host(editor), _Service(), trace_store=trace_store)
    app = create_app(updater, trace_store)

    with TestClient(app) as client:
        health = client.get("/health")
        assert health.status_code == 200
        assert health.json()["state"] == "disabled"

        config_resp = client.post("/config", json={"enabled": True, "categories": ["TypeHint"]})
        assert config_resp.status_code == 200
        assert config_resp.json()["state"] == "enabled"

        health_payload = client.get("/health").json()
        assert health_payload["categories"] == ["TypeHint"]
        assert health_payload["tracked_documents"] == 1
        assert health_payload["pending_requests"] == 0

        refresh_resp = client.post("/refresh")
        assert refresh_resp.status_code == 200

        traces_resp = client.get("/traces", params={"limit": 5})
        assert traces_resp.status_code == 200
        items = traces_resp.json()["items"]
        assert len(items) == 2
        assert items[0]["outcome"] == "succeeded"
        assert items[0]["hint_count"] == 2

        detail = client.get(f"/traces/{items[0]['trace_id']}")
        assert detail.status_code == 200
        assert detail.json()["document_id"] == "file:///src/main.rs"
        assert client.get("/traces/missing").status_code == 404

        metrics = client.get("/metrics").json()
        assert metrics["total_fetches"] == 2
        assert metrics["succeeded"] == 2

        clear_resp = client.post("/clear")
        assert clear_resp.json()["state"] == "disabled"
        client.post("/refresh")
        assert client.get("/metrics").json()["total_fetches"] == 2

        bad = client.post("/config", json={"enabled": True, "categories": ["ChainingHint"]})
        assert bad.status_code == 422

    rendered = {name: [d.content_text for d in decos] for name, decos in editor.decorations.items()}
    assert all(texts == [] for texts in rendered.values())
