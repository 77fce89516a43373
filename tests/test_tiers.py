"""Tests for threshold tables and rounding helpers."""

from __future__ import annotations

from decimal import Decimal

import pytest

from src.core.models import Priority
from src.core.tiers import Tier, clamp, match_at_least, match_at_most, round_half_up

ASCENDING = (
    Tier(Decimal(10), 3),
    Tier(Decimal(20), 2, Priority.LOW, 5, "Mid", "Value {value}"),
    Tier(None, 1),
)

DESCENDING = (
    Tier(Decimal("4.5"), 15),
    Tier(Decimal("4.0"), 12),
    Tier(None, 3),
)


class TestRoundHalfUp:
    """Tests for half-up rounding."""

    def test_halves_round_up(self) -> None:
        assert round_half_up(Decimal("2.5")) == 3
        assert round_half_up(Decimal("0.5")) == 1
        assert round_half_up(Decimal("82.5")) == 83

    def test_negative_halves_round_away_from_zero(self) -> None:
        assert round_half_up(Decimal("-2.5")) == -3

    def test_float_input(self) -> None:
        assert round_half_up(56.1) == 56
        assert round_half_up(92.5) == 93

    def test_int_input(self) -> None:
        assert round_half_up(7) == 7


class TestClamp:
    def test_clamp(self) -> None:
        assert clamp(150) == 100
        assert clamp(-5) == 0
        assert clamp(42) == 42


class TestTierMatching:
    """Tests for tier table lookups."""

    def test_at_most_boundaries_are_inclusive(self) -> None:
        assert match_at_most(10, ASCENDING).points == 3
        assert match_at_most(11, ASCENDING).points == 2
        assert match_at_most(20, ASCENDING).points == 2
        assert match_at_most(21, ASCENDING).points == 1

    def test_at_least_boundaries_are_inclusive(self) -> None:
        assert match_at_least(Decimal("4.5"), DESCENDING).points == 15
        assert match_at_least(Decimal("4.49"), DESCENDING).points == 12
        assert match_at_least(Decimal("1"), DESCENDING).points == 3

    def test_recommends(self) -> None:
        assert ASCENDING[0].recommends is False
        assert ASCENDING[1].recommends is True

    def test_missing_catch_all(self) -> None:
        with pytest.raises(ValueError):
            match_at_most(100, ASCENDING[:2])
