"""요청 로깅 미들웨어 테스트."""

import json

from httpx import AsyncClient

from app.middleware.axiom_logging import AxiomLoggingMiddleware, error_reason, mask_sensitive


class _RecordingClient:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.batches: list[tuple[str, list[dict]]] = []

    def ingest_events(self, dataset: str, events: list[dict]) -> None:
        if self.fail:
            raise ConnectionError("axiom unreachable")
        self.batches.append((dataset, events))


class TestMasking:

    def test_nested_keys_masked(self):
        data = {"title": "Broken light", "auth": {"accessToken": "abc", "apiKey": "k"}, "password": "x"}
        assert mask_sensitive(data) == {
            "title": "Broken light",
            "auth": {"accessToken": "***", "apiKey": "***"},
            "password": "***",
        }

    def test_lists_truncated(self):
        assert len(mask_sensitive(list(range(50)))) == 20

    def test_long_strings_truncated(self):
        assert mask_sensitive("a" * 2500).endswith("...(truncated)")


class TestErrorReason:

    def test_detail(self):
        assert error_reason(json.dumps({"detail": "Issue not found"}).encode()) == "Issue not found"

    def test_validation_message(self):
        body = {"message": "Validation failed", "errors": [{"field": "title", "message": "too short"}]}
        assert error_reason(json.dumps(body).encode()) == "Validation failed"

    def test_non_json(self):
        assert error_reason(b"upstream timeout") == "upstream timeout"


class TestEmit:

    def test_ships_to_axiom_when_configured(self):
        middleware = AxiomLoggingMiddleware(app=None)
        middleware._client = _RecordingClient()
        middleware._dataset = "civic-api"
        event = {"method": "GET", "path": "/api/issues", "status_code": 200}
        middleware._emit(event)
        assert middleware._client.batches == [("civic-api", [event])]

    def test_ingest_failure_does_not_raise(self):
        middleware = AxiomLoggingMiddleware(app=None)
        middleware._client = _RecordingClient(fail=True)
        middleware._emit({"method": "GET", "path": "/api/issues", "status_code": 200})


async def test_health(client: AsyncClient):
    res = await client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


async def test_error_response_body_survives_logging(client: AsyncClient):
    res = await client.get("/api/issues/not-a-uuid")
    assert res.status_code == 400
    assert res.json()["message"] == "Validation failed"
