"""Score-and-record service: runs the engine and persists the result."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, Mapping

from .models import Listing, MarketSnapshot, ScoreResult, ScoreTrend
from .scoring import ScoringEngine
from .trends import analyze_score_trend

if TYPE_CHECKING:
    from src.db.repository import Repository

    from .alerts import AlertManager
    from .config import Settings

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Outcome of scoring a batch of listings."""

    results: list[ScoreResult] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)  # SKU (or position) -> error message
    recorded: int = 0

    @property
    def scored(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> int:
        return len(self.errors)


class ScoreRecorder:
    """Scores listings and hands each result to the history recorder.

    Recording is a side effect performed here, never by the engine. A
    persistence failure is logged and the computed score is still returned.
    """

    def __init__(
        self,
        repo: Repository,
        engine: ScoringEngine | None = None,
        alert_manager: AlertManager | None = None,
        settings: Settings | None = None,
    ) -> None:
        if settings is None:
            from .config import get_settings

            settings = get_settings()
        self.settings = settings
        self.repo = repo
        self.engine = engine or ScoringEngine(settings)
        self.alert_manager = alert_manager

    def score_and_record(
        self,
        listing: Listing | Mapping[str, Any],
        market: MarketSnapshot | Mapping[str, Any] | None = None,
    ) -> ScoreResult:
        """Score a listing and record it in history when it has a SKU."""
        result = self.engine.calculate(listing, market)
        self.record(result)
        return result

    def record(self, result: ScoreResult) -> bool:
        """Persist a result and raise any alerts; False if it was not recorded."""
        if not result.sku:
            logger.debug("Listing has no SKU, score not recorded")
            return False

        try:
            previous = self.repo.get_latest_score(result.sku)
            self.repo.save_score(result)
        except Exception:
            logger.exception(f"Failed to record score for {result.sku}")
            return False

        if self.alert_manager is not None:
            self.alert_manager.check_for_alerts(result, previous)

        logger.debug(f"Recorded score {result.total_score} for {result.sku}")
        return True

    def score_batch(
        self,
        items: Iterable[
            tuple[Listing | Mapping[str, Any], MarketSnapshot | Mapping[str, Any] | None]
        ],
    ) -> BatchResult:
        """Score and record each ``(listing, market)`` pair independently."""
        batch = BatchResult()
        for index, (listing, market) in enumerate(items):
            key = _listing_key(listing) or f"#{index}"
            try:
                result = self.engine.calculate(listing, market)
            except Exception as e:
                logger.exception(f"Failed to score {key}")
                batch.errors[key] = str(e)
                continue
            batch.results.append(result)
            if self.record(result):
                batch.recorded += 1

        logger.info(f"Scored {batch.scored} listing(s), recorded {batch.recorded}, {batch.failed} failed")
        return batch

    def get_trend(self, listing_key: str, days: int | None = None) -> ScoreTrend:
        """Trend over a listing's recorded history."""
        history_config = self.settings.history
        history = self.repo.get_score_history(
            listing_key, days=days if days is not None else history_config.default_days
        )
        return analyze_score_trend(
            history,
            window=history_config.trend_window,
            threshold=history_config.trend_threshold,
        )


def _listing_key(listing: Any) -> str:
    if isinstance(listing, Listing):
        return listing.sku
    if isinstance(listing, Mapping):
        sku = listing.get("sku")
        return sku if isinstance(sku, str) else ""
    return ""
