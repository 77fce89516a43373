"""Tests for the score-and-record service."""

from __future__ import annotations

from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest

from src.core.alerts import AlertManager
from src.core.config import Settings
from src.core.models import AlertType, Listing, ScoreHistory
from src.core.recorder import ScoreRecorder
from src.core.scoring import ScoringEngine


@pytest.fixture
def repo() -> MagicMock:
    repo = MagicMock()
    repo.get_latest_score.return_value = None
    return repo


@pytest.fixture
def recorder(repo: MagicMock, engine: ScoringEngine, settings: Settings) -> ScoreRecorder:
    return ScoreRecorder(repo, engine=engine, settings=settings)


class TestScoreAndRecord:
    """Tests for recording single results."""

    def test_records_listing_with_sku(
        self, recorder: ScoreRecorder, repo: MagicMock, sample_listing: Listing
    ) -> None:
        result = recorder.score_and_record(sample_listing)
        assert result.total_score == 83
        repo.save_score.assert_called_once_with(result)

    def test_skips_listing_without_sku(self, recorder: ScoreRecorder, repo: MagicMock) -> None:
        result = recorder.score_and_record({"title": "Drill bits"})
        assert result.sku == ""
        repo.save_score.assert_not_called()

    def test_storage_failure_still_returns_score(
        self, recorder: ScoreRecorder, repo: MagicMock, sample_listing: Listing
    ) -> None:
        repo.save_score.side_effect = RuntimeError("disk full")
        result = recorder.score_and_record(sample_listing)
        assert result.total_score == 83
        assert recorder.record(result) is False

    def test_alerts_use_previous_score(
        self, repo: MagicMock, engine: ScoringEngine, settings: Settings, sample_listing: Listing
    ) -> None:
        repo.get_latest_score.return_value = ScoreHistory(listing_key="MAK-B65399", total_score=95)
        manager = AlertManager(settings.alerts)
        recorder = ScoreRecorder(repo, engine=engine, alert_manager=manager, settings=settings)

        recorder.score_and_record(sample_listing)
        assert [a.alert_type for a in manager.alerts] == [AlertType.SCORE_DECREASE]
        assert manager.alerts[0].old_value == 95


class TestScoreBatch:
    """Tests for batch scoring."""

    def test_batch(self, recorder: ScoreRecorder, repo: MagicMock, sample_listing: Listing) -> None:
        batch = recorder.score_batch([
            (sample_listing, None),
            ({"title": "Drill bits", "sku": "SKU-2"}, {"salesRank": 500}),
            ({"title": "No SKU"}, None),
        ])
        assert batch.scored == 3
        assert batch.recorded == 2
        assert batch.failed == 0
        assert repo.save_score.call_count == 2

    def test_one_failure_does_not_stop_batch(
        self, repo: MagicMock, settings: Settings, sample_listing: Listing
    ) -> None:
        engine = MagicMock()
        real_calculate = ScoringEngine(settings).calculate

        def calculate(listing, market=None):
            if isinstance(listing, dict) and listing.get("sku") == "BAD":
                raise RuntimeError("bad listing")
            return real_calculate(listing, market)

        engine.calculate.side_effect = calculate
        recorder = ScoreRecorder(repo, engine=engine, settings=settings)

        batch = recorder.score_batch([
            ({"title": "x", "sku": "BAD"}, None),
            (sample_listing, None),
            ({"title": "y"}, None),
        ])
        assert batch.errors == {"BAD": "bad listing"}
        assert batch.scored == 2
        assert batch.recorded == 1


class TestGetTrend:
    def test_trend_from_history(
        self, recorder: ScoreRecorder, repo: MagicMock, settings: Settings
    ) -> None:
        start = datetime.now() - timedelta(days=14)
        repo.get_score_history.return_value = [
            ScoreHistory(listing_key="SKU-1", total_score=s, calculated_at=start + timedelta(days=i))
            for i, s in enumerate([50] * 7 + [70] * 7)
        ]
        trend = recorder.get_trend("SKU-1")
        repo.get_score_history.assert_called_once_with("SKU-1", days=settings.history.default_days)
        assert trend.trend == "improving"
        assert trend.change == 20

    def test_custom_days(self, recorder: ScoreRecorder, repo: MagicMock) -> None:
        repo.get_score_history.return_value = []
        trend = recorder.get_trend("SKU-1", days=7)
        repo.get_score_history.assert_called_once_with("SKU-1", days=7)
        assert trend.trend == "insufficient_data"
