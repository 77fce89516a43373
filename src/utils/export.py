"""Export functionality for Listing Quality Scorer."""

from __future__ import annotations

import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Sequence

import pandas as pd
from openpyxl.utils import get_column_letter

from src.core.models import ScoreResult

logger = logging.getLogger(__name__)

SHEET_NAME = "Listing Scores"


class Exporter:
    """Exports score results to various formats."""

    @staticmethod
    def score_results_to_dict(results: Sequence[ScoreResult]) -> list[dict[str, Any]]:
        """Flatten score results to one row per listing."""
        rows = []
        for r in results:
            components = r.components
            top = r.recommendations[0] if r.recommendations else None
            row = {
                "SKU": r.sku,
                "ASIN": r.asin,
                "Total Score": r.total_score,
                "SEO Score": components.seo.score,
                "Content Score": components.content.score,
                "Image Score": components.images.score,
                "Competitive Score": components.competitive.score,
                "Compliance Score": components.compliance.score,
                "Market Data": "Yes" if components.competitive.data_available else "No",
                "Bullet Count": components.content.bullet_count,
                "Violations": components.compliance.violation_count,
                "Violation Terms": ", ".join(v.term for v in components.compliance.violations),
                "Top Recommendation": top.title if top else "",
                "Top Priority": top.priority.value if top else "",
                "Recommendations": len(r.recommendations),
            }
            rows.append(row)

        return rows

    @classmethod
    def export_to_csv(
        cls,
        results: Sequence[ScoreResult],
        file_path: str | Path,
    ) -> None:
        """Export score results to CSV."""
        rows = cls.score_results_to_dict(results)

        if not rows:
            logger.info("No score results to export")
            return

        path = Path(file_path)
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=rows[0].keys())
            writer.writeheader()
            writer.writerows(rows)
        logger.info(f"Exported {len(rows)} score(s) to {path}")

    @classmethod
    def export_to_xlsx(
        cls,
        results: Sequence[ScoreResult],
        file_path: str | Path,
    ) -> None:
        """Export score results to Excel."""
        rows = cls.score_results_to_dict(results)

        if not rows:
            logger.info("No score results to export")
            return

        df = pd.DataFrame(rows)

        path = Path(file_path)
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name=SHEET_NAME)

            # Fit column widths to content, capped at 50
            worksheet = writer.sheets[SHEET_NAME]
            for i, col in enumerate(df.columns, start=1):
                max_length = max(df[col].astype(str).apply(len).max(), len(col))
                worksheet.column_dimensions[get_column_letter(i)].width = min(max_length + 2, 50)
        logger.info(f"Exported {len(rows)} score(s) to {path}")

    @classmethod
    def generate_filename(cls, label: str, extension: str) -> str:
        """Generate a timestamped filename for export."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        slug = "_".join(label.lower().split()) or "all"
        return f"listing_scores_{slug}_{timestamp}.{extension}"
