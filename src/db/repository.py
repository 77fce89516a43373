"""Repository pattern for score history operations."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any

from sqlalchemy import delete, desc, func, select
from sqlalchemy.orm import Session

from src.core.models import ScoreHistory, ScoreResult

from .models import ListingScoreDB
from .session import session_scope

logger = logging.getLogger(__name__)

# Component name -> (score column, violations column)
COMPONENT_COLUMNS: dict[str, tuple[str, str]] = {
    "seo": ("seo_score", "seo_violations_json"),
    "content": ("content_score", "content_violations_json"),
    "images": ("image_score", "image_violations_json"),
    "competitive": ("competitive_score", "competitive_violations_json"),
    "compliance": ("compliance_score", "compliance_violations_json"),
}

# Lower bound of each distribution bucket, best first
DISTRIBUTION_BUCKETS: tuple[tuple[str, int], ...] = (
    ("excellent", 90),
    ("good", 70),
    ("fair", 50),
    ("poor", 0),
)


def bucket_for(score: int) -> str:
    """Distribution bucket a total score falls into."""
    for name, floor in DISTRIBUTION_BUCKETS:
        if score >= floor:
            return name
    return DISTRIBUTION_BUCKETS[-1][0]


class Repository:
    """Data access repository for listing score history."""

    def __init__(self, max_entries_per_listing: int | None = None) -> None:
        """Initialize with the per-listing retention limit (defaults to settings)."""
        if max_entries_per_listing is None:
            from src.core.config import get_settings

            max_entries_per_listing = get_settings().history.max_entries_per_listing
        self.max_entries_per_listing = max_entries_per_listing

    # ==================== Score History ====================

    def save_score(
        self,
        result: ScoreResult,
        listing_key: str | None = None,
        calculated_at: datetime | None = None,
    ) -> ScoreHistory:
        """Record a score result and trim the listing's history to the retention limit."""
        key = listing_key or result.sku
        if not key:
            raise ValueError("A listing key (SKU) is required to record a score")
        calculated_at = calculated_at or datetime.now()

        scores = result.components.scores()
        violations = {
            name: [v.to_dict() for v in items]
            for name, items in result.components.violations().items()
        }
        breakdown = result.components.to_dict()
        recommendations = [r.to_dict() for r in result.recommendations]

        with session_scope() as session:
            db_score = ListingScoreDB(
                listing_key=key,
                asin=result.asin,
                total_score=result.total_score,
                breakdown_json=json.dumps(breakdown),
                recommendations_json=json.dumps(recommendations),
                calculated_at=calculated_at,
            )
            for name, (score_column, violations_column) in COMPONENT_COLUMNS.items():
                setattr(db_score, score_column, scores[name])
                setattr(db_score, violations_column, json.dumps(violations[name]))
            session.add(db_score)
            session.flush()
            score_id = db_score.id

            pruned = self._prune_listing(session, key, self.max_entries_per_listing)
            if pruned:
                logger.debug(f"Pruned {pruned} old score(s) for {key}")

        return ScoreHistory(
            id=score_id,
            listing_key=key,
            asin=result.asin,
            total_score=result.total_score,
            components=scores,
            violations=violations,
            breakdown=breakdown,
            recommendations=recommendations,
            calculated_at=calculated_at,
        )

    def get_score_history(
        self,
        listing_key: str,
        days: int | None = 30,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> list[ScoreHistory]:
        """Get a listing's score history, oldest first.

        ``since`` overrides ``days``; ``days=None`` with no ``since`` returns
        everything retained.
        """
        if since is None and days is not None:
            since = datetime.now() - timedelta(days=days)

        with session_scope() as session:
            query = select(ListingScoreDB).where(ListingScoreDB.listing_key == listing_key)
            if since is not None:
                query = query.where(ListingScoreDB.calculated_at >= since)
            if until is not None:
                query = query.where(ListingScoreDB.calculated_at <= until)
            query = query.order_by(ListingScoreDB.calculated_at, ListingScoreDB.id)
            rows = session.execute(query).scalars().all()
            return [self._db_to_score_history(db) for db in rows]

    def get_latest_score(self, listing_key: str) -> ScoreHistory | None:
        """Get the most recent score for a listing."""
        with session_scope() as session:
            query = (
                select(ListingScoreDB)
                .where(ListingScoreDB.listing_key == listing_key)
                .order_by(desc(ListingScoreDB.calculated_at), desc(ListingScoreDB.id))
                .limit(1)
            )
            db = session.execute(query).scalars().first()
            return self._db_to_score_history(db) if db else None

    def get_all_latest(
        self, min_score: int | None = None, max_score: int | None = None
    ) -> list[ScoreHistory]:
        """Latest score of every listing, optionally filtered by total score."""
        with session_scope() as session:
            latest = self._latest_scores_subquery()
            query = select(ListingScoreDB).join(latest, ListingScoreDB.id == latest.c.id)
            if min_score is not None:
                query = query.where(ListingScoreDB.total_score >= min_score)
            if max_score is not None:
                query = query.where(ListingScoreDB.total_score <= max_score)
            query = query.order_by(ListingScoreDB.listing_key)
            rows = session.execute(query).scalars().all()
            return [self._db_to_score_history(db) for db in rows]

    def prune_old_scores(self, keep: int | None = None) -> int:
        """Keep only the newest ``keep`` scores per listing; returns rows deleted."""
        keep = self.max_entries_per_listing if keep is None else keep
        with session_scope() as session:
            ranked = self._ranked_scores_subquery()
            stale_ids = select(ranked.c.id).where(ranked.c.rn > keep)
            result = session.execute(
                delete(ListingScoreDB)
                .where(ListingScoreDB.id.in_(stale_ids))
                .execution_options(synchronize_session=False)
            )
            deleted = result.rowcount or 0
        if deleted:
            logger.info(f"Pruned {deleted} old score(s), keeping {keep} per listing")
        return deleted

    def _prune_listing(self, session: Session, listing_key: str, keep: int) -> int:
        keep_ids = (
            select(ListingScoreDB.id)
            .where(ListingScoreDB.listing_key == listing_key)
            .order_by(desc(ListingScoreDB.calculated_at), desc(ListingScoreDB.id))
            .limit(keep)
        )
        result = session.execute(
            delete(ListingScoreDB)
            .where(ListingScoreDB.listing_key == listing_key)
            .where(ListingScoreDB.id.not_in(keep_ids))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    @staticmethod
    def _ranked_scores_subquery():
        """Every score row numbered newest-first within its listing."""
        rank = (
            func.row_number()
            .over(
                partition_by=ListingScoreDB.listing_key,
                order_by=(desc(ListingScoreDB.calculated_at), desc(ListingScoreDB.id)),
            )
            .label("rn")
        )
        return select(ListingScoreDB.id, rank).subquery()

    def _latest_scores_subquery(self):
        ranked = self._ranked_scores_subquery()
        return select(ranked.c.id).where(ranked.c.rn == 1).subquery()

    # ==================== Statistics ====================

    def get_statistics(self) -> dict[str, Any]:
        """Aggregate figures over each listing's latest score."""
        with session_scope() as session:
            latest = self._latest_scores_subquery()
            query = select(
                func.count(ListingScoreDB.id).label("total_listings"),
                func.avg(ListingScoreDB.total_score).label("avg_score"),
                func.min(ListingScoreDB.total_score).label("min_score"),
                func.max(ListingScoreDB.total_score).label("max_score"),
                func.avg(ListingScoreDB.seo_score).label("avg_seo"),
                func.avg(ListingScoreDB.content_score).label("avg_content"),
                func.avg(ListingScoreDB.image_score).label("avg_images"),
                func.avg(ListingScoreDB.competitive_score).label("avg_competitive"),
                func.avg(ListingScoreDB.compliance_score).label("avg_compliance"),
            ).join(latest, ListingScoreDB.id == latest.c.id)
            row = session.execute(query).one()

        def average(value: Any) -> float | None:
            if value is None:
                return None
            return float(Decimal(str(value)).quantize(Decimal("0.01")))

        return {
            "total_listings": row.total_listings or 0,
            "avg_score": average(row.avg_score),
            "min_score": row.min_score,
            "max_score": row.max_score,
            "avg_seo": average(row.avg_seo),
            "avg_content": average(row.avg_content),
            "avg_images": average(row.avg_images),
            "avg_competitive": average(row.avg_competitive),
            "avg_compliance": average(row.avg_compliance),
        }

    def get_distribution(self) -> list[dict[str, Any]]:
        """Count of listings per score bucket (latest score only), best bucket first."""
        counts = {name: 0 for name, _ in DISTRIBUTION_BUCKETS}
        with session_scope() as session:
            latest = self._latest_scores_subquery()
            query = select(ListingScoreDB.total_score).join(latest, ListingScoreDB.id == latest.c.id)
            for score in session.execute(query).scalars():
                counts[bucket_for(score)] += 1
        return [{"bucket": name, "count": counts[name]} for name, _ in DISTRIBUTION_BUCKETS]

    def _db_to_score_history(self, db: ListingScoreDB) -> ScoreHistory:
        """Convert DB model to domain model."""
        return ScoreHistory(
            id=db.id,
            listing_key=db.listing_key,
            asin=db.asin,
            total_score=db.total_score,
            components={
                name: getattr(db, score_column)
                for name, (score_column, _) in COMPONENT_COLUMNS.items()
            },
            violations={
                name: json.loads(getattr(db, violations_column) or "[]")
                for name, (_, violations_column) in COMPONENT_COLUMNS.items()
            },
            breakdown=json.loads(db.breakdown_json or "{}"),
            recommendations=json.loads(db.recommendations_json or "[]"),
            calculated_at=db.calculated_at,
        )
