"""Tests for score trend analysis."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from src.core.models import ScoreHistory
from src.core.trends import analyze_score_trend, classify_change


def history(totals: list[float]) -> list[dict]:
    return [
        {"total_score": total, "components": {"seo": total, "compliance": 100}}
        for total in totals
    ]


class TestInsufficientData:
    """Too little history yields no trend."""

    def test_empty(self) -> None:
        trend = analyze_score_trend([])
        assert trend.trend == "insufficient_data"
        assert trend.entries == 0
        assert trend.has_trend is False

    def test_single_entry(self) -> None:
        assert analyze_score_trend(history([70])).trend == "insufficient_data"

    @pytest.mark.parametrize("count", [2, 3, 6])
    def test_windows_never_overlap(self, count: int) -> None:
        trend = analyze_score_trend(history([40] + [80] * (count - 1)))
        assert trend.trend == "insufficient_data"
        assert trend.entries == count

    def test_one_window(self) -> None:
        trend = analyze_score_trend(history([50] * 7))
        assert trend.trend == "insufficient_data"
        assert trend.entries == 7
        assert "recent_avg" not in trend.to_dict()


class TestTrendDirection:
    """Tests for improving, declining and stable classification."""

    def test_improving(self) -> None:
        trend = analyze_score_trend(history([50] * 7 + [60] * 7))
        assert trend.trend == "improving"
        assert trend.change == 10
        assert trend.recent_avg == 60
        assert trend.older_avg == 50
        assert trend.component_trends["seo"].trend == "improving"
        assert trend.component_trends["compliance"].trend == "stable"

    def test_declining(self) -> None:
        trend = analyze_score_trend(history([80] * 7 + [60] * 7))
        assert trend.trend == "declining"
        assert trend.change == -20

    def test_eight_entries_uses_one_older_entry(self) -> None:
        trend = analyze_score_trend(history([40] + [60] * 7))
        assert trend.older_avg == 40
        assert trend.change == 20

    def test_change_at_threshold_counts(self) -> None:
        assert analyze_score_trend(history([50] * 7 + [55] * 7)).trend == "improving"
        assert analyze_score_trend(history([55] * 7 + [50] * 7)).trend == "declining"

    def test_stable_change_rounds_half_up(self) -> None:
        trend = analyze_score_trend(history([50] * 7 + [52.5] * 7))
        assert trend.trend == "stable"
        assert trend.change == 3

    def test_custom_window(self) -> None:
        trend = analyze_score_trend(history([50, 50, 70, 70]), window=2)
        assert trend.trend == "improving"
        assert trend.change == 20

    def test_accepts_score_history(self) -> None:
        start = datetime(2024, 1, 1)
        entries = [
            ScoreHistory(
                listing_key="SKU-1",
                total_score=score,
                components={"seo": score},
                calculated_at=start + timedelta(days=i),
            )
            for i, score in enumerate([50] * 7 + [70] * 7)
        ]
        trend = analyze_score_trend(entries)
        assert trend.trend == "improving"
        assert trend.to_dict()["component_trends"]["seo"] == {"change": 20, "trend": "improving"}


class TestClassifyChange:
    def test_classify(self) -> None:
        assert classify_change(5) == "improving"
        assert classify_change(-5) == "declining"
        assert classify_change(4) == "stable"
        assert classify_change(10, threshold=15) == "stable"
