"""Integration tests for the completion API with mocked provider endpoints."""

import csv

import httpx
import pytest
import respx
from dependency_injector import providers
from fastapi.testclient import TestClient

from completion_dispatch.core.config import Settings
from completion_dispatch.domain.enums import ProviderId, UsageStatus
from completion_dispatch.infrastructure.secrets import DictSecretSource
from completion_dispatch.presentation.app import create_app

GEMINI_URL = "https://gemini.test/v1beta/models/gemini-2.5-flash:generateContent"
OPENROUTER_URL = "https://openrouter.test/api/v1/chat/completions"

pytestmark = pytest.mark.integration


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        ENVIRONMENT="staging",
        PROVIDER_PRIORITY=["gemini", "openrouter"],
        PRIMARY_MODEL="",
        GEMINI_BASE_URL="https://gemini.test/v1beta",
        GEMINI_MODELS=["gemini-2.5-flash"],
        OPENROUTER_BASE_URL="https://openrouter.test/api/v1",
        OPENROUTER_MODELS=["meta-llama/llama-3.3-70b-instruct:free"],
        OPENROUTER_AUTO_MODEL="",
        RETRY_MAX_ATTEMPTS=2,
        RETRY_BASE_DELAY=0.0,
        USAGE_LOG_PATH=str(tmp_path / "ai_usage.csv"),
        LOG_FORMAT="text",
    )


@pytest.fixture
def secrets() -> DictSecretSource:
    return DictSecretSource(
        {
            ProviderId.GEMINI.secret_name: "gemini-test-key",
            ProviderId.OPENROUTER.secret_name: "openrouter-test-key",
        }
    )


@pytest.fixture
def client(settings, secrets):
    app = create_app(settings)
    app.state.container.secret_source.override(providers.Object(secrets))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def provider_mock():
    with respx.mock(assert_all_called=False) as router:
        yield router


def read_usage(settings: Settings) -> list[list[str]]:
    with open(settings.USAGE_LOG_PATH, newline="", encoding="utf-8") as handle:
        return list(csv.reader(handle))


class TestCompletionEndpoint:
    """Test POST /api/v1/completions."""

    def test_gemini_answers(self, client, provider_mock, gemini_success_payload):
        route = provider_mock.post(GEMINI_URL).mock(return_value=httpx.Response(200, json=gemini_success_payload("Paris")))

        response = client.post("/api/v1/completions", json={"prompt": "Capital of France?"})

        assert response.status_code == 200
        body = response.json()
        assert body["text"] == "Paris"
        assert body["success"] is True
        assert body["provider"] == "gemini"
        assert body["model"] == "gemini-2.5-flash-001"
        assert route.calls.last.request.url.params["key"] == "gemini-test-key"
        assert "x-request-id" in response.headers

    def test_fallback_to_openrouter(self, client, provider_mock, provider_error_payload, openrouter_success_payload):
        gemini = provider_mock.post(GEMINI_URL).mock(return_value=httpx.Response(503, json=provider_error_payload("overloaded", 503)))
        openrouter = provider_mock.post(OPENROUTER_URL).mock(
            return_value=httpx.Response(200, json=openrouter_success_payload("Paris, France"))
        )

        response = client.post(
            "/api/v1/completions",
            json={"prompt": "Capital of France?", "show_provenance": True},
        )

        body = response.json()
        assert body["text"].startswith("[meta-llama/llama-3.3-70b-instruct:free | 25 tokens | ")
        assert body["text"].endswith("\nParis, France")
        assert gemini.call_count == 2
        assert openrouter.call_count == 1
        assert openrouter.calls.last.request.headers["authorization"] == "Bearer openrouter-test-key"

    def test_all_candidates_exhausted(self, client, provider_mock, provider_error_payload):
        provider_mock.post(GEMINI_URL).mock(return_value=httpx.Response(500, json=provider_error_payload("internal", 500)))
        provider_mock.post(OPENROUTER_URL).mock(return_value=httpx.Response(401, json=provider_error_payload("No auth", 401)))

        response = client.post("/api/v1/completions", json={"prompt": "Capital of France?"})

        body = response.json()
        assert response.status_code == 200
        assert body["success"] is False
        assert body["error_kind"] == "AllCandidatesExhausted"
        assert body["text"].splitlines() == [
            "[AllCandidatesExhausted]",
            "gemini/gemini-2.5-flash: [ServerFault] internal",
            "openrouter/meta-llama/llama-3.3-70b-instruct:free: [AuthFailure] No auth",
        ]

    def test_missing_key_never_reaches_network(self, settings, provider_mock, openrouter_success_payload):
        app = create_app(settings)
        app.state.container.secret_source.override(
            providers.Object(DictSecretSource({ProviderId.OPENROUTER.secret_name: "openrouter-test-key"}))
        )
        gemini = provider_mock.post(GEMINI_URL).mock(return_value=httpx.Response(200, json={}))
        provider_mock.post(OPENROUTER_URL).mock(return_value=httpx.Response(200, json=openrouter_success_payload("Paris")))

        with TestClient(app) as test_client:
            response = test_client.post("/api/v1/completions", json={"prompt": "Capital?"})

        assert response.json()["text"] == "Paris"
        assert gemini.call_count == 0

    def test_blank_prompt_notice(self, client, provider_mock):
        response = client.post("/api/v1/completions", json={"prompt": "   "})

        assert response.status_code == 200
        assert response.json()["error_kind"] == "Notice"
        assert provider_mock.calls.call_count == 0

    def test_unknown_field_rejected(self, client):
        response = client.post("/api/v1/completions", json={"prompt": "Hi", "model": "x"})

        assert response.status_code == 422

    def test_cached_answer_reused(self, client, provider_mock, gemini_success_payload):
        route = provider_mock.post(GEMINI_URL).mock(return_value=httpx.Response(200, json=gemini_success_payload("Paris")))

        client.post("/api/v1/completions", json={"prompt": "Capital of France?"})
        second = client.post("/api/v1/completions", json={"prompt": "Capital of France?"}).json()

        assert second["cached"] is True
        assert route.call_count == 1

        client.delete("/api/v1/admin/cache")
        client.post("/api/v1/completions", json={"prompt": "Capital of France?"})
        assert route.call_count == 2


class TestAdminEndpoints:
    """Test usage and cache operator endpoints."""

    def test_flush_writes_usage_csv(self, client, settings, provider_mock, gemini_success_payload):
        provider_mock.post(GEMINI_URL).mock(return_value=httpx.Response(200, json=gemini_success_payload("Paris", tokens=42)))
        client.post("/api/v1/completions", json={"prompt": "Capital of France?"})

        response = client.post("/api/v1/admin/usage/flush")

        assert response.json() == {"flushed": 1}
        rows = read_usage(settings)
        assert rows[0][0] == "timestamp"
        assert rows[1][1:4] == ["gemini-2.5-flash-001", "Gemini", "success"]
        assert rows[1][5] == "42"
        assert rows[1][6] == "Capital of France?"

    def test_flush_empty_buffer(self, client):
        assert client.post("/api/v1/admin/usage/flush").json() == {"flushed": 0}

    def test_clear_usage(self, client, settings):
        response = client.delete("/api/v1/admin/usage")

        assert response.json() == {"cleared": "usage"}
        assert read_usage(settings) == [["timestamp", "model", "provider", "status", "elapsed_seconds", "token_count", "prompt"]]

    def test_flush_failure_returns_503(self, tmp_path, settings, secrets):
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not directory")
        broken = settings.model_copy(update={"USAGE_LOG_PATH": str(blocker / "usage.csv")})
        app = create_app(broken)
        app.state.container.usage_recorder().record("m", "Gemini", UsageStatus.SUCCESS)

        with TestClient(app) as test_client:
            response = test_client.post("/api/v1/admin/usage/flush")

        assert response.status_code == 503
        assert len(app.state.container.usage_recorder().pending()) == 1


class TestOperationalEndpoints:
    """Test health and metrics."""

    def test_health_reports_key_presence(self, settings):
        app = create_app(settings)
        app.state.container.secret_source.override(
            providers.Object(DictSecretSource({ProviderId.GEMINI.secret_name: "gemini-test-key"}))
        )

        with TestClient(app) as test_client:
            body = test_client.get("/api/v1/health/").json()

        assert body["status"] == "healthy"
        assert body["providers"]["gemini"] == {"secret": "GEMINI_API_KEY", "configured": True, "in_priority": True}
        assert body["providers"]["openrouter"]["configured"] is False
        assert "gemini-test-key" not in str(body)
        assert body["system"]["metric_prefix"] == "completion_dispatch"
        assert body["system"]["uptime_seconds"] >= 0

    def test_metrics_exposition(self, client, provider_mock, gemini_success_payload):
        provider_mock.post(GEMINI_URL).mock(return_value=httpx.Response(200, json=gemini_success_payload()))
        client.post("/api/v1/completions", json={"prompt": "Capital of France?"})

        response = client.get("/metrics")

        assert response.status_code == 200
        assert 'completion_dispatch_completions_total{status="success"} 1.0' in response.text
        assert "completion_dispatch_provider_attempts_total" in response.text

    def test_root(self, client):
        assert client.get("/").json()["status"] == "online"
