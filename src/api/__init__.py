"""Market data parsing for Listing Quality Scorer."""

from .keepa import count_new_offers, parse_market_snapshot

__all__ = [
    "parse_market_snapshot",
    "count_new_offers",
]
