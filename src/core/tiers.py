"""Ordered threshold tables and rounding helpers shared by the scorers."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from .models import Priority


def round_half_up(value: Decimal | int | float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3)."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def clamp(value: int, low: int = 0, high: int = 100) -> int:
    """Clamp a score into [low, high]."""
    return max(low, min(value, high))


@dataclass(frozen=True)
class Tier:
    """One row of a threshold table.

    ``limit`` of None matches anything and must be the last row. A tier with a
    ``priority`` emits a recommendation built from ``title`` and ``message``;
    ``message`` is a ``str.format`` template filled by the caller.
    """

    limit: Decimal | None
    points: int
    priority: Priority | None = None
    impact: int = 0
    title: str = ""
    message: str = ""

    @property
    def recommends(self) -> bool:
        return self.priority is not None


def match_at_most(value: Decimal | int, tiers: Sequence[Tier]) -> Tier:
    """First tier whose limit is >= value (tables sorted ascending)."""
    for tier in tiers:
        if tier.limit is None or value <= tier.limit:
            return tier
    raise ValueError("Tier table has no catch-all row")


def match_at_least(value: Decimal | int, tiers: Sequence[Tier]) -> Tier:
    """First tier whose limit is <= value (tables sorted descending)."""
    for tier in tiers:
        if tier.limit is None or value >= tier.limit:
            return tier
    raise ValueError("Tier table has no catch-all row")
