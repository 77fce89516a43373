"""Tests for Keepa product parsing."""

from __future__ import annotations

from decimal import Decimal

import pytest

from src.api.keepa import count_new_offers, parse_market_snapshot


def stats_array(**values: int) -> list[int]:
    """A Keepa stats array of -1s with the given indices set."""
    array = [-1] * 19
    for key, value in values.items():
        array[int(key.lstrip("i"))] = value
    return array


@pytest.fixture
def product() -> dict:
    return {
        "asin": "B00TEST001",
        "title": "Makita B-65399 Impact Gold Bit Set",
        "brand": "Makita",
        "stats": {
            "current": stats_array(i1=2599, i3=800, i11=2, i16=46, i17=312, i18=2499),
            "avg90": stats_array(i1=2650, i18=2450),
        },
    }


class TestParseMarketSnapshot:
    """Tests for converting Keepa products to market snapshots."""

    def test_full_product(self, product: dict) -> None:
        snapshot = parse_market_snapshot(product)
        assert snapshot.buy_box_price == Decimal("24.99")
        assert snapshot.sales_rank == 800
        assert snapshot.offer_count == 2
        assert snapshot.rating == Decimal("4.6")
        assert snapshot.review_count == 312
        assert snapshot.price_history_average == Decimal("24.50")

    def test_missing_values_are_none(self) -> None:
        snapshot = parse_market_snapshot({"stats": {"current": stats_array(), "avg90": []}})
        assert snapshot.buy_box_price is None
        assert snapshot.sales_rank is None
        assert snapshot.offer_count is None
        assert snapshot.rating is None
        assert snapshot.price_history_average is None

    def test_no_stats(self) -> None:
        snapshot = parse_market_snapshot({})
        assert snapshot.sales_rank is None

    def test_average_falls_back_to_new_price(self, product: dict) -> None:
        product["stats"]["avg90"] = stats_array(i1=2650)
        assert parse_market_snapshot(product).price_history_average == Decimal("26.50")

    def test_offer_count_from_offers_list(self, product: dict) -> None:
        product["stats"]["current"][11] = -1
        product["offers"] = [{"condition": 1}, {"condition": 1}, {"condition": 3}]
        assert parse_market_snapshot(product).offer_count == 2

    def test_short_stats_array(self) -> None:
        snapshot = parse_market_snapshot({"stats": {"current": [0, 1999, 0, 4200]}})
        assert snapshot.sales_rank == 4200
        assert snapshot.buy_box_price is None


class TestOfferCount:
    def test_count_new_offers_without_list(self) -> None:
        assert count_new_offers({}) is None
        assert count_new_offers({"offers": []}) == 0
