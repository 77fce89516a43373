"""Competitive scoring against market data (buy box, BSR, offers, rating, price trend)."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .models import (
    CompetitiveAnalysis,
    CompetitiveScore,
    Listing,
    MarketSnapshot,
    Priority,
    Recommendation,
    RecommendationType,
)
from .tiers import Tier, match_at_least, match_at_most, round_half_up

NEUTRAL_SCORE = 50

# Buy box: price / buy box ratio, budget 30
BUY_BOX_BUDGET = 30
BUY_BOX_NEUTRAL = 15
BUY_BOX_TIERS = (
    Tier(Decimal("1.00"), 30),
    Tier(Decimal("1.05"), 25),
    Tier(
        Decimal("1.10"), 15, Priority.MEDIUM, 10,
        "Price slightly above Buy Box",
        "Your price ({currency}{price:.2f}) is {pct:.1f}% above the Buy Box "
        "({currency}{buy_box:.2f}). Consider adjusting.",
    ),
    Tier(
        Decimal("1.20"), 5, Priority.HIGH, 20,
        "Price above Buy Box",
        "Your price ({currency}{price:.2f}) is {pct:.1f}% above the Buy Box "
        "({currency}{buy_box:.2f}). Unlikely to win Buy Box.",
    ),
    Tier(
        None, 0, Priority.CRITICAL, 30,
        "Price significantly above market",
        "Your price ({currency}{price:.2f}) is {pct:.1f}% above Buy Box "
        "({currency}{buy_box:.2f}). Very unlikely to sell.",
    ),
)

# Best Seller Rank, budget 25 (lower rank is better)
SALES_RANK_BUDGET = 25
SALES_RANK_NEUTRAL = 12
SALES_RANK_TIERS = (
    Tier(Decimal(1000), 25),
    Tier(Decimal(5000), 22),
    Tier(Decimal(20000), 18),
    Tier(
        Decimal(50000), 12, Priority.LOW, 5,
        "Moderate BSR",
        "BSR is {rank:,}. Consider optimizing listing to improve ranking.",
    ),
    Tier(
        Decimal(100000), 8, Priority.MEDIUM, 10,
        "Low BSR ranking",
        "BSR is {rank:,}. Product may have low visibility. Focus on PPC and listing optimization.",
    ),
    Tier(
        None, 3, Priority.HIGH, 15,
        "Very low BSR",
        "BSR is {rank:,}. Consider if this product is worth continuing or needs major changes.",
    ),
)

# Competing offers, budget 20
OFFER_COUNT_BUDGET = 20
OFFER_COUNT_NEUTRAL = 10
OFFER_COUNT_TIERS = (
    Tier(Decimal(2), 20),
    Tier(Decimal(5), 16),
    Tier(
        Decimal(10), 12, Priority.MEDIUM, 8,
        "Competitive listing",
        "{offers} sellers on this listing. Differentiate with better price or Prime badge.",
    ),
    Tier(
        None, 5, Priority.HIGH, 12,
        "Highly competitive listing",
        "{offers} sellers competing. Consider if margins justify the competition.",
    ),
)

# Star rating, budget 15 (higher is better)
RATING_BUDGET = 15
RATING_NEUTRAL = 7
RATING_TIERS = (
    Tier(Decimal("4.5"), 15),
    Tier(Decimal("4.0"), 12),
    Tier(
        Decimal("3.5"), 8, Priority.MEDIUM, 8,
        "Average product rating",
        "Rating is {rating}/5. Work on product quality and customer service to improve.",
    ),
    Tier(
        None, 3, Priority.HIGH, 15,
        "Low product rating",
        "Rating is {rating}/5. Address quality issues or consider discontinuing.",
    ),
)

# Price vs historical average, budget 10
PRICE_TREND_BUDGET = 10
PRICE_TREND_NEUTRAL = 5
PRICE_BAND_LOW = Decimal("0.9")
PRICE_BAND_HIGH = Decimal("1.1")
PRICE_IN_BAND_POINTS = 10
PRICE_BELOW_BAND_POINTS = 7
PRICE_ABOVE_BAND_POINTS = 5

MAX_POINTS = (
    BUY_BOX_BUDGET + SALES_RANK_BUDGET + OFFER_COUNT_BUDGET + RATING_BUDGET + PRICE_TREND_BUDGET
)


@dataclass
class FactorResult:
    """Points earned by one competitive factor, with an optional recommendation."""

    points: int
    recommendation: Recommendation | None = None


def _recommend(tier: Tier, **values: object) -> Recommendation | None:
    if not tier.recommends:
        return None
    return Recommendation(
        type=RecommendationType.COMPETITIVE,
        priority=tier.priority,
        title=tier.title,
        description=tier.message.format(**values),
        impact=tier.impact,
    )


def score_buy_box(price: Decimal, buy_box_price: Decimal | None, currency: str = "£") -> FactorResult:
    """Score the listing price against the current buy box price."""
    if not buy_box_price or buy_box_price <= 0 or price <= 0:
        return FactorResult(BUY_BOX_NEUTRAL)

    ratio = price / buy_box_price
    tier = match_at_most(ratio, BUY_BOX_TIERS)
    return FactorResult(
        tier.points,
        _recommend(
            tier,
            currency=currency,
            price=price,
            buy_box=buy_box_price,
            pct=(ratio - 1) * 100,
        ),
    )


def score_sales_rank(sales_rank: int | None) -> FactorResult:
    if not sales_rank:
        return FactorResult(SALES_RANK_NEUTRAL)
    tier = match_at_most(sales_rank, SALES_RANK_TIERS)
    return FactorResult(tier.points, _recommend(tier, rank=sales_rank))


def score_offer_count(offer_count: int | None) -> FactorResult:
    if not offer_count or offer_count <= 0:
        return FactorResult(OFFER_COUNT_NEUTRAL)
    tier = match_at_most(offer_count, OFFER_COUNT_TIERS)
    return FactorResult(tier.points, _recommend(tier, offers=offer_count))


def score_rating(rating: Decimal | None) -> FactorResult:
    if not rating:
        return FactorResult(RATING_NEUTRAL)
    tier = match_at_least(rating, RATING_TIERS)
    return FactorResult(tier.points, _recommend(tier, rating=rating))


def score_price_trend(price: Decimal, average: Decimal | None) -> FactorResult:
    """Score the listing price against its historical average."""
    if not average or average <= 0 or price <= 0:
        return FactorResult(PRICE_TREND_NEUTRAL)

    ratio = price / average
    if PRICE_BAND_LOW <= ratio <= PRICE_BAND_HIGH:
        return FactorResult(PRICE_IN_BAND_POINTS)
    if ratio < PRICE_BAND_LOW:
        return FactorResult(
            PRICE_BELOW_BAND_POINTS,
            Recommendation(
                type=RecommendationType.COMPETITIVE,
                priority=Priority.LOW,
                title="Price below historical average",
                description=(
                    f"Current price is {(1 - ratio) * 100:.0f}% below average. "
                    "Consider if you can increase."
                ),
                impact=5,
            ),
        )
    return FactorResult(PRICE_ABOVE_BAND_POINTS)


def score_competitive(
    listing: Listing,
    market: MarketSnapshot | None = None,
    currency: str = "£",
) -> CompetitiveScore:
    """Score a listing's competitive position from a market snapshot."""
    if market is None:
        return CompetitiveScore(
            score=NEUTRAL_SCORE,
            data_available=False,
            recommendations=[
                Recommendation(
                    type=RecommendationType.COMPETITIVE,
                    priority=Priority.MEDIUM,
                    title="Sync competitive data",
                    description="Run Keepa sync to get competitive analysis (BSR, pricing, competitors).",
                    impact=20,
                )
            ],
        )

    price = listing.price
    factors = [
        score_buy_box(price, market.buy_box_price, currency),
        score_sales_rank(market.sales_rank),
        score_offer_count(market.offer_count),
        score_rating(market.rating),
        score_price_trend(price, market.price_history_average),
    ]

    total_points = sum(f.points for f in factors)
    recommendations = [f.recommendation for f in factors if f.recommendation is not None]

    return CompetitiveScore(
        score=round_half_up(Decimal(total_points) * 100 / MAX_POINTS),
        data_available=True,
        analysis=CompetitiveAnalysis(
            buy_box_price=market.buy_box_price,
            sales_rank=market.sales_rank,
            offer_count=market.offer_count or 0,
            rating=market.rating,
            review_count=market.review_count,
            current_price=price,
        ),
        recommendations=recommendations,
    )
