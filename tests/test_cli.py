"""Tests for the command-line interface."""

import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from nightlife_scraper.cli.main import app
from nightlife_scraper.core.event_model import RunSummary, VenueScrapeOutcome
from nightlife_scraper.core.exceptions import SupabaseError
from nightlife_scraper.core.pipeline import ScrapeStrategy

runner = CliRunner()


@pytest.fixture(autouse=True)
def keep_test_logging():
    """Leave logging as pytest configured it."""
    with patch("nightlife_scraper.cli.main._setup"):
        yield


def _summary(dry_run: bool = False) -> RunSummary:
    return RunSummary(
        started_at=datetime(2026, 6, 1, 6, 0, tzinfo=timezone.utc),
        finished_at=datetime(2026, 6, 1, 6, 1, tzinfo=timezone.utc),
        outcomes=[VenueScrapeOutcome(venue="Amnesia", error="HTTP 503 from https://amnesia.test")],
        dry_run=dry_run,
    )


class TestRunCommand:
    """Tests for `nightlife-scraper run`."""

    def test_dry_run_with_venue_filter(self):
        job = AsyncMock(return_value=_summary(dry_run=True))

        with patch("nightlife_scraper.cli.main.run_scrape_job", job):
            result = runner.invoke(app, ["run", "--dry-run", "--venue", "amnesia", "-s", "paced"])

        assert result.exit_code == 0
        assert "DRY RUN SUMMARY" in result.output
        kwargs = job.await_args.kwargs
        assert [s.name for s in kwargs["sources"]] == ["Amnesia"]
        assert kwargs["dry_run"] is True
        assert kwargs["strategy"] == ScrapeStrategy.PACED

    def test_unknown_venue(self):
        job = AsyncMock()

        with patch("nightlife_scraper.cli.main.run_scrape_job", job):
            result = runner.invoke(app, ["run", "--venue", "Space"])

        assert result.exit_code == 1
        assert "Unknown venue" in result.output
        job.assert_not_awaited()

    def test_json_output(self):
        with patch("nightlife_scraper.cli.main.run_scrape_job", AsyncMock(return_value=_summary())):
            result = runner.invoke(app, ["run", "--json"])

        assert result.exit_code == 0
        body = json.loads(result.output)
        assert body["failed_venues"] == ["Amnesia"]

    def test_fatal_error_exits_nonzero(self):
        job = AsyncMock(side_effect=SupabaseError("connection refused", operation="select", table="events"))

        with patch("nightlife_scraper.cli.main.run_scrape_job", job):
            result = runner.invoke(app, ["run"])

        assert result.exit_code == 1
        assert "connection refused" in result.output


class TestInfoCommands:
    """Tests for `sources` and `version`."""

    def test_sources(self):
        result = runner.invoke(app, ["sources"])

        assert result.exit_code == 0
        assert "pacha-ibiza" in result.output
        assert "7 venues" in result.output

    def test_version(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "1.0.0" in result.output
