"""Scoring engine for Listing Quality Scorer."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Mapping

from .competitive import score_competitive
from .compliance import score_compliance
from .config import ScoringWeights
from .content import score_content
from .images import score_images
from .models import (
    COMPONENT_NAMES,
    Listing,
    MarketSnapshot,
    Recommendation,
    ScoreComponents,
    ScoreResult,
)
from .seo import score_seo
from .tiers import clamp, round_half_up

if TYPE_CHECKING:
    from .config import Settings

logger = logging.getLogger(__name__)


class ScoringEngine:
    """Calculates listing quality scores.

    Stateless per call: the engine only reads its arguments, the rule tables
    and the weights it was built with, so one instance can be shared freely.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the scoring engine."""
        if settings is None:
            from .config import get_settings

            settings = get_settings()
        self.settings = settings
        self.weights = settings.weights.as_dict()

        if settings.weights != ScoringWeights():
            custom = ", ".join(f"{name}={weight}" for name, weight in self.weights.items())
            logger.warning(f"Using non-default scoring weights: {custom}")

        self.currency = settings.currency_symbol

    @staticmethod
    def coerce_listing(listing: Listing | Mapping[str, Any] | None) -> Listing:
        if isinstance(listing, Listing):
            return listing
        if isinstance(listing, Mapping):
            return Listing.from_dict(listing)
        return Listing()

    @staticmethod
    def coerce_market(market: MarketSnapshot | Mapping[str, Any] | None) -> MarketSnapshot | None:
        if isinstance(market, MarketSnapshot):
            return market
        if isinstance(market, Mapping):
            return MarketSnapshot.from_dict(market)
        return None

    def weighted_total(self, components: ScoreComponents) -> int:
        """Weighted sum of clamped sub-scores, rounded half-up into [0, 100]."""
        total = Decimal("0")
        for name, score in components.scores().items():
            total += self.weights[name] * clamp(score)
        return clamp(round_half_up(total))

    @staticmethod
    def merge_recommendations(components: ScoreComponents) -> list[Recommendation]:
        """All component recommendations, highest impact first.

        Ties keep component order (seo, content, images, competitive,
        compliance) and each component's own emission order.
        """
        merged: list[Recommendation] = []
        for name in COMPONENT_NAMES:
            merged.extend(getattr(components, name).recommendations)
        return sorted(merged, key=lambda r: r.impact, reverse=True)

    def calculate(
        self,
        listing: Listing | Mapping[str, Any] | None,
        market: MarketSnapshot | Mapping[str, Any] | None = None,
    ) -> ScoreResult:
        """Calculate the full quality score for a listing."""
        listing = self.coerce_listing(listing)
        market = self.coerce_market(market)

        components = ScoreComponents(
            seo=score_seo(listing),
            content=score_content(listing),
            images=score_images(listing),
            competitive=score_competitive(listing, market, self.currency),
            compliance=score_compliance(listing),
        )

        return ScoreResult(
            total_score=self.weighted_total(components),
            components=components,
            recommendations=self.merge_recommendations(components),
            sku=listing.sku,
            asin=listing.asin,
        )
