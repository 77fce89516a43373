"""Tests for score exports."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest
from openpyxl import load_workbook

from src.core.models import Listing, MarketSnapshot, ScoreResult
from src.core.scoring import ScoringEngine
from src.utils.export import SHEET_NAME, Exporter


@pytest.fixture
def results(
    engine: ScoringEngine, sample_listing: Listing, sample_market: MarketSnapshot
) -> list[ScoreResult]:
    return [
        engine.calculate(sample_listing, sample_market),
        engine.calculate(Listing(title="Best drill bits", sku="SKU-2")),
    ]


class TestScoreRows:
    """Tests for flattening results."""

    def test_rows(self, results: list[ScoreResult]) -> None:
        rows = Exporter.score_results_to_dict(results)
        assert len(rows) == 2

        first, second = rows
        assert first["SKU"] == "MAK-B65399"
        assert first["Total Score"] == 93
        assert first["Market Data"] == "Yes"
        assert first["Bullet Count"] == 5
        assert first["Top Recommendation"] == "Verify image quality"

        assert second["Market Data"] == "No"
        assert second["Violations"] == 1
        assert second["Violation Terms"] == "best"
        assert second["Recommendations"] == len(results[1].recommendations)

    def test_empty(self) -> None:
        assert Exporter.score_results_to_dict([]) == []


class TestFileExport:
    """Tests for CSV and Excel output."""

    def test_csv(self, results: list[ScoreResult], tmp_path: Path) -> None:
        path = tmp_path / "scores.csv"
        Exporter.export_to_csv(results, path)

        df = pd.read_csv(path)
        assert list(df["SKU"]) == ["MAK-B65399", "SKU-2"]
        assert df["Total Score"].iloc[0] == 93

    def test_xlsx(self, results: list[ScoreResult], tmp_path: Path) -> None:
        path = tmp_path / "scores.xlsx"
        Exporter.export_to_xlsx(results, path)

        df = pd.read_excel(path, sheet_name=SHEET_NAME)
        assert len(df) == 2
        assert df["Compliance Score"].iloc[0] == 100

        worksheet = load_workbook(path)[SHEET_NAME]
        assert worksheet.column_dimensions["A"].width == len("MAK-B65399") + 2

    def test_nothing_written_for_empty_input(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.csv"
        Exporter.export_to_csv([], path)
        Exporter.export_to_xlsx([], tmp_path / "empty.xlsx")
        assert not path.exists()
        assert not (tmp_path / "empty.xlsx").exists()

    def test_generate_filename(self) -> None:
        name = Exporter.generate_filename("Power Tools", "csv")
        assert name.startswith("listing_scores_power_tools_")
        assert name.endswith(".csv")
        assert Exporter.generate_filename("", "xlsx").startswith("listing_scores_all_")
