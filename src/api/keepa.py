"""Keepa product payload parsing.

Turns an already-fetched Keepa product object into a ``MarketSnapshot``.
Fetching is left to the caller; nothing here touches the network.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Sequence

from src.core.models import MarketSnapshot

logger = logging.getLogger(__name__)

# Keepa stats.current / avg indices
KEEPA_PRICE_NEW = 1
KEEPA_SALES_RANK = 3
KEEPA_COUNT_NEW = 11
KEEPA_RATING = 16
KEEPA_COUNT_REVIEWS = 17
KEEPA_PRICE_BUY_BOX = 18

KEEPA_NO_DATA = -1
KEEPA_CONDITION_NEW = 1


def _stat(values: Sequence[Any] | None, index: int) -> int | None:
    """Value at ``index`` of a Keepa stats array, or None for missing / -1."""
    if not values or len(values) <= index:
        return None
    value = values[index]
    if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value == KEEPA_NO_DATA or value < 0:
        return None
    return int(value)


def _cents_to_price(cents: int | None) -> Decimal | None:
    if not cents:
        return None
    return Decimal(cents) / 100


def count_new_offers(product: dict[str, Any]) -> int | None:
    """Number of new-condition offers in the product's ``offers`` list."""
    offers = product.get("offers")
    if not isinstance(offers, list):
        return None
    return sum(
        1 for o in offers if isinstance(o, dict) and o.get("condition") == KEEPA_CONDITION_NEW
    )


def parse_market_snapshot(product: dict[str, Any]) -> MarketSnapshot:
    """Parse a Keepa product response into a MarketSnapshot."""
    stats = product.get("stats") or {}
    current = stats.get("current") or []
    avg90 = stats.get("avg90") or []

    offer_count = _stat(current, KEEPA_COUNT_NEW)
    if offer_count is None:
        offer_count = count_new_offers(product)

    rating_x10 = _stat(current, KEEPA_RATING)
    rating = Decimal(rating_x10) / 10 if rating_x10 else None

    average_cents = _stat(avg90, KEEPA_PRICE_BUY_BOX) or _stat(avg90, KEEPA_PRICE_NEW)

    snapshot = MarketSnapshot(
        buy_box_price=_cents_to_price(_stat(current, KEEPA_PRICE_BUY_BOX)),
        sales_rank=_stat(current, KEEPA_SALES_RANK),
        offer_count=offer_count,
        rating=rating,
        review_count=_stat(current, KEEPA_COUNT_REVIEWS),
        price_history_average=_cents_to_price(average_cents),
    )
    logger.debug(f"Parsed Keepa product {product.get('asin', '')}: {snapshot}")
    return snapshot
