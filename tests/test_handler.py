"""Tests for the Lambda entry point."""

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from political_alpha_fetcher import handler
from political_alpha_fetcher.models import ChainResult, GatherTimeoutError, Item, RunResult
from political_alpha_fetcher.signal_fetcher import SignalFetcher

NOW = datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def reset_fetcher():
    handler._fetcher = None
    yield
    handler._fetcher = None


class TestLambdaHandler:
    """Test lambda_handler."""

    def test_returns_items_errors_and_analysis_input(self) -> None:
        fetcher = MagicMock()
        fetcher.fetch.return_value = RunResult(
            items=[
                Item(
                    source="QuiverQuant Congress",
                    text="Congress STOCK Act Filing: BUY $NVDA by Nancy Pelosi",
                    timestamp=NOW,
                    ticker="NVDA",
                    transaction_type="BUY",
                )
            ],
            source_errors=["Twitter @capitol2iq"],
            fetched_at=NOW,
        )

        with patch.object(handler, "_get_fetcher", return_value=fetcher):
            response = handler.lambda_handler({"sources": ["QuiverQuant Congress"]}, None)

        fetcher.fetch.assert_called_once_with(sources=["QuiverQuant Congress"])
        assert response["source_errors"] == ["Twitter @capitol2iq"]
        assert response["items"][0]["ticker"] == "NVDA"
        assert response["analysis_input"] == [
            "[1] (QuiverQuant Congress, 2026-10-19): "
            "Congress STOCK Act Filing: BUY $NVDA by Nancy Pelosi"
        ]

    def test_missing_sources_runs_everything(self) -> None:
        fetcher = MagicMock()
        fetcher.fetch.return_value = RunResult(items=[], source_errors=[], fetched_at=NOW)

        with patch.object(handler, "_get_fetcher", return_value=fetcher):
            response = handler.lambda_handler({}, None)

        fetcher.fetch.assert_called_once_with(sources=None)
        assert response["items"] == []
        assert response["analysis_input"] == []

    def test_single_label_string_selects_exactly_that_source(self) -> None:
        congress = MagicMock()
        congress.run.return_value = ChainResult(
            label="QuiverQuant Congress",
            items=[Item(source="QuiverQuant Congress", text="Congress filing", timestamp=NOW)],
        )
        insiders = MagicMock()
        insiders.run.return_value = ChainResult(
            label="QuiverQuant Insiders",
            items=[Item(source="QuiverQuant Insiders", text="Insider filing", timestamp=NOW)],
        )
        congress.label = "QuiverQuant Congress"
        insiders.label = "QuiverQuant Insiders"
        fetcher = SignalFetcher(chains=[congress, insiders])

        with patch.object(handler, "_get_fetcher", return_value=fetcher):
            exact = handler.lambda_handler({"sources": "QuiverQuant Congress"}, None)
            combined = handler.lambda_handler(
                {"sources": "QuiverQuant Congress,QuiverQuant Insiders"}, None
            )

        assert [i["text"] for i in exact["items"]] == ["Congress filing"]
        assert combined["items"] == []
        insiders.run.assert_not_called()

    def test_run_failure_returns_system_error(self) -> None:
        fetcher = MagicMock()
        fetcher.fetch.side_effect = GatherTimeoutError("Run exceeded 60.0s")

        with patch.object(handler, "_get_fetcher", return_value=fetcher):
            response = handler.lambda_handler({}, None)

        assert response["items"] == []
        assert response["source_errors"] == []
        assert response["errors"][0]["source"] == "system"
        assert response["errors"][0]["error_type"] == "internal_error"
        assert "60.0s" in response["errors"][0]["message"]

    def test_invalid_configuration_returns_system_error(self, monkeypatch) -> None:
        monkeypatch.setenv("RUN_TIMEOUT_SECONDS", "soon")

        response = handler.lambda_handler({}, None)

        assert response["errors"][0]["error_type"] == "internal_error"
        assert "RUN_TIMEOUT_SECONDS" in response["errors"][0]["message"]


class TestGetFetcher:
    """Test fetcher reuse across warm invocations."""

    def test_fetcher_is_created_once(self, monkeypatch) -> None:
        monkeypatch.setenv("TWITTER_HANDLES", "pelositracker")
        monkeypatch.setenv("NEWS_QUERIES", "congress stock trading disclosure")

        first = handler._get_fetcher()
        second = handler._get_fetcher()

        assert first is second
        assert first.labels == [
            "QuiverQuant Congress",
            "QuiverQuant Insiders",
            "Google News: congress stock trading disclosure",
            "Twitter @pelositracker",
        ]
