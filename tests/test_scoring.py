"""Tests for scoring engine."""

from __future__ import annotations

import logging
from decimal import Decimal

import pytest
from pydantic import ValidationError

from src.core.config import ScoringWeights, Settings
from src.core.models import Listing, MarketSnapshot
from src.core.scoring import ScoringEngine


class TestTotalScore:
    """Tests for the weighted total."""

    def test_without_market_data(self, engine: ScoringEngine, sample_listing: Listing) -> None:
        result = engine.calculate(sample_listing)

        # 20 + 20 + 7.5 + 10 + 25 = 82.5, rounded half-up
        assert result.total_score == 83
        assert result.components.scores() == {
            "seo": 100,
            "content": 100,
            "images": 50,
            "competitive": 50,
            "compliance": 100,
        }

    def test_with_market_data(
        self, engine: ScoringEngine, sample_listing: Listing, sample_market: MarketSnapshot
    ) -> None:
        result = engine.calculate(sample_listing, sample_market)
        assert result.components.competitive.score == 100
        assert result.total_score == 93

    def test_market_as_mapping(self, engine: ScoringEngine, sample_listing: Listing) -> None:
        market = {
            "buyBoxPrice": 24.99,
            "salesRank": 800,
            "offerCount": 2,
            "rating": 4.6,
            "avgPrice": 24.99,
        }
        assert engine.calculate(sample_listing, market).total_score == 93

    def test_four_bullets(self, engine: ScoringEngine, sample_listing: Listing) -> None:
        sample_listing.bullet_points = sample_listing.bullet_points[:4]
        result = engine.calculate(sample_listing)
        assert result.components.content.score == 95
        assert result.total_score == 82

    def test_empty_listing(self, engine: ScoringEngine) -> None:
        result = engine.calculate(Listing())
        assert result.components.scores() == {
            "seo": 45,
            "content": 23,
            "images": 50,
            "competitive": 50,
            "compliance": 100,
        }
        assert result.total_score == 56

    def test_identifiers_carried_through(self, engine: ScoringEngine, sample_listing: Listing) -> None:
        result = engine.calculate(sample_listing)
        assert result.sku == "MAK-B65399"
        assert result.asin == "B00TEST001"

    def test_scores_in_range(self, engine: ScoringEngine) -> None:
        listings = [
            Listing(),
            Listing(title="AMAZING BEST CURE SALE <b>\U0001F525</b> " * 10),
            Listing(title="x" * 500, bullet_points=["a"] * 20),
        ]
        for listing in listings:
            result = engine.calculate(listing, MarketSnapshot(sales_rank=10**9, rating=1))
            assert 0 <= result.total_score <= 100
            for score in result.components.scores().values():
                assert 0 <= score <= 100


class TestEngineInputs:
    """Tests for input handling."""

    def test_none_listing(self, engine: ScoringEngine) -> None:
        assert engine.calculate(None).total_score == 56

    def test_malformed_fields_degrade(self, engine: ScoringEngine) -> None:
        result = engine.calculate({"title": 42, "bullet_points": "not a list", "price": "abc"})
        assert result.total_score == 56

    @pytest.mark.parametrize(
        "listing, market",
        [
            ({"title": "x", "price": "1e999999999"}, {"buyBoxPrice": "1e-999999999"}),
            ({"title": "x", "price": 10}, {"salesRank": "1e5000"}),
            ({"title": "x", "price": 10}, {"offerCount": "1e5000"}),
            ({"title": "x", "price": "1e-999999999"}, {"priceHistoryAverage": "1e999999999"}),
        ],
    )
    def test_extreme_numbers_score_neutrally(self, engine: ScoringEngine, listing, market) -> None:
        result = engine.calculate(listing, market)
        data = result.to_dict()
        assert 0 <= data["total_score"] <= 100
        assert result.components.competitive.score == 49

    def test_listing_as_mapping(self, engine: ScoringEngine, sample_listing: Listing) -> None:
        data = {
            "title": sample_listing.title,
            "bulletPoints": sample_listing.bullet_points,
            "description": sample_listing.description,
            "price": "24.99",
        }
        assert engine.calculate(data).total_score == engine.calculate(sample_listing).total_score

    def test_deterministic(self, engine: ScoringEngine, sample_listing: Listing) -> None:
        first = engine.calculate(sample_listing)
        second = engine.calculate(sample_listing)
        assert first.to_dict() == second.to_dict()

    def test_bullet_order_invariant(self, engine: ScoringEngine, sample_listing: Listing) -> None:
        forward = engine.calculate(sample_listing)
        sample_listing.bullet_points = list(reversed(sample_listing.bullet_points))
        backward = engine.calculate(sample_listing)
        assert backward.total_score == forward.total_score
        assert backward.components.scores() == forward.components.scores()


class TestRecommendations:
    """Tests for merged recommendations."""

    def test_optimised_listing(self, engine: ScoringEngine, sample_listing: Listing) -> None:
        result = engine.calculate(sample_listing)
        assert [(r.title, r.impact) for r in result.recommendations] == [
            ("Verify image quality", 25),
            ("Sync competitive data", 20),
        ]

    def test_sorted_by_impact_with_stable_ties(self, engine: ScoringEngine) -> None:
        result = engine.calculate(Listing())
        assert [r.title for r in result.recommendations] == [
            "Verify image quality",
            "Title too short",
            "Sync competitive data",
            "Add benefit language",
            "Add compatibility info",
            "Add bullet points",
            "Mention materials",
            "Brand not at title start",
            "Add size/specs to title",
            "Add use case",
            "Add model number to title",
            "Add quantity to title",
        ]
        impacts = [r.impact for r in result.recommendations]
        assert impacts == sorted(impacts, reverse=True)

    def test_all_component_recommendations_included(self, engine: ScoringEngine) -> None:
        result = engine.calculate(Listing(title="cure"))
        count = sum(
            len(getattr(result.components, name).recommendations)
            for name in ("seo", "content", "images", "competitive", "compliance")
        )
        assert len(result.recommendations) == count


class TestWeights:
    """Tests for configurable weights."""

    def test_default_weights_sum_to_one(self, settings: Settings) -> None:
        assert settings.weights.total() == Decimal("1")

    def test_weights_must_sum_to_one(self) -> None:
        with pytest.raises(ValidationError):
            ScoringWeights(seo=Decimal("0.30"))

    def test_custom_weights(self) -> None:
        weights = ScoringWeights(
            seo=Decimal("1"),
            content=Decimal("0"),
            images=Decimal("0"),
            competitive=Decimal("0"),
            compliance=Decimal("0"),
        )
        engine = ScoringEngine(Settings(weights=weights))
        assert engine.calculate(Listing()).total_score == 45

    def test_custom_weights_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        weights = ScoringWeights(seo=Decimal("0.25"), compliance=Decimal("0.20"))
        with caplog.at_level(logging.WARNING, logger="src.core.scoring"):
            ScoringEngine(Settings(weights=weights))
        assert "non-default scoring weights" in caplog.text
        assert "seo=0.25" in caplog.text

    def test_default_weights_not_logged(
        self, settings: Settings, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="src.core.scoring"):
            ScoringEngine(settings)
        assert "non-default scoring weights" not in caplog.text
