"""Tests for the HTTP trigger and inspection routes."""

from datetime import date, datetime, timezone

import pytest
from fastapi.testclient import TestClient

from nightlife_scraper.api.main import app
from nightlife_scraper.api.routes.cron import get_job_runner, is_authorized
from nightlife_scraper.config.settings import Settings, get_settings
from nightlife_scraper.core.event_model import ExtractedEvent, RunSummary, VenueScrapeOutcome
from nightlife_scraper.core.exceptions import AuthorError

SECRET = "s3cret"


def _settings(**overrides) -> Settings:
    values = {
        "NEXT_PUBLIC_SUPABASE_URL": "https://x.supabase.co",
        "SUPABASE_SERVICE_ROLE_KEY": "key",
        "CRON_SECRET": SECRET,
    }
    values.update(overrides)
    return Settings(**values)


def _summary() -> RunSummary:
    event = ExtractedEvent(title="Circoloco", venue="DC-10", date=date(2026, 6, 29), start_time="16:00")
    return RunSummary(
        started_at=datetime(2026, 6, 1, 6, 0, tzinfo=timezone.utc),
        finished_at=datetime(2026, 6, 1, 6, 2, tzinfo=timezone.utc),
        outcomes=[
            VenueScrapeOutcome(venue="DC-10", events=[event], url="https://dc10.test"),
            VenueScrapeOutcome(venue="Amnesia", error="HTTP 503 from https://amnesia.test"),
        ],
        new_event_count=1,
    )


@pytest.fixture
def client():
    calls: list[int] = []

    async def runner() -> RunSummary:
        calls.append(1)
        return _summary()

    app.dependency_overrides[get_settings] = lambda: _settings()
    app.dependency_overrides[get_job_runner] = lambda: runner
    test_client = TestClient(app)
    test_client.runner_calls = calls
    yield test_client
    app.dependency_overrides.clear()


class TestIsAuthorized:
    """Tests for the bearer check."""

    def test_matching_header(self):
        assert is_authorized(f"Bearer {SECRET}", SECRET)

    def test_wrong_secret(self):
        assert not is_authorized("Bearer nope", SECRET)

    def test_missing_bearer_prefix(self):
        assert not is_authorized(SECRET, SECRET)

    def test_no_secret_configured_rejects_everything(self):
        assert not is_authorized("Bearer ", None)
        assert not is_authorized("Bearer ", "")

    def test_missing_header(self):
        assert not is_authorized(None, SECRET)


class TestCronTrigger:
    """Tests for GET /cron/scrape-events."""

    def test_unauthorized_without_header(self, client):
        response = client.get("/cron/scrape-events")

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}
        assert client.runner_calls == []

    def test_unauthorized_with_wrong_secret(self, client):
        response = client.get("/cron/scrape-events", headers={"Authorization": "Bearer wrong"})

        assert response.status_code == 401
        assert client.runner_calls == []

    def test_unconfigured_secret_rejects(self, client):
        app.dependency_overrides[get_settings] = lambda: _settings(CRON_SECRET=None)

        response = client.get("/cron/scrape-events", headers={"Authorization": "Bearer "})

        assert response.status_code == 401

    def test_returns_run_summary(self, client):
        response = client.get("/cron/scrape-events", headers={"Authorization": f"Bearer {SECRET}"})

        assert response.status_code == 200
        body = response.json()
        assert body["new_event_count"] == 1
        assert body["total_extracted"] == 1
        assert body["failed_venues"] == ["Amnesia"]
        assert body["dry_run"] is False
        assert body["outcomes"][0]["events"][0]["date"] == "2026-06-29"
        assert body["outcomes"][1]["error"] == "HTTP 503 from https://amnesia.test"
        assert client.runner_calls == [1]

    def test_fatal_error_returns_500(self, client):
        async def failing_runner() -> RunSummary:
            raise AuthorError("bot@ibiza-scraper.internal", "permission denied")

        app.dependency_overrides[get_job_runner] = lambda: failing_runner

        response = client.get("/cron/scrape-events", headers={"Authorization": f"Bearer {SECRET}"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to create bot profile: permission denied"}


class TestSourcesRoutes:
    """Tests for the /sources routes."""

    def test_list_sources(self, client):
        response = client.get("/sources")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 7
        assert [s["name"] for s in body["sources"]][:3] == ["Hï Ibiza", "Ushuaïa Ibiza", "Pacha Ibiza"]
        assert all(len(s["urls"]) >= 1 for s in body["sources"])

    def test_get_source_by_slug(self, client):
        response = client.get("/sources/pacha-ibiza")

        assert response.status_code == 200
        assert response.json()["name"] == "Pacha Ibiza"

    def test_unknown_source(self, client):
        response = client.get("/sources/space-ibiza")

        assert response.status_code == 404


class TestHealth:
    """Tests for the health routes."""

    def test_root(self, client):
        assert client.get("/").json()["status"] == "ok"

    def test_health_reports_configuration(self, client):
        app.dependency_overrides[get_settings] = lambda: _settings(GROQ_API_KEY="gsk_test")

        body = client.get("/health").json()

        assert body["venues"] == 7
        assert body["extraction_configured"] is True
        assert body["llm_provider"] == "groq"
        assert body["cron_secret_configured"] is True
        assert body["target_year"] == 2026
        assert body["scheduler"] == "external_cron"
