"""Score trend analysis over recorded history."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Sequence

from .models import COMPONENT_NAMES, ComponentTrend, ScoreHistory, ScoreTrend
from .tiers import round_half_up

DEFAULT_WINDOW = 7
DEFAULT_THRESHOLD = 5


def _average(values: Sequence[int | float]) -> Decimal:
    return sum((Decimal(str(v)) for v in values), Decimal("0")) / len(values)


def classify_change(change: Decimal, threshold: int = DEFAULT_THRESHOLD) -> str:
    if change >= threshold:
        return "improving"
    if change <= -threshold:
        return "declining"
    return "stable"


def _point(entry: ScoreHistory | Mapping[str, Any]) -> tuple[int, Mapping[str, Any]]:
    if isinstance(entry, ScoreHistory):
        return entry.total_score, entry.components
    return entry.get("total_score", 0) or 0, entry.get("components") or {}


def analyze_score_trend(
    history: Sequence[ScoreHistory | Mapping[str, Any]],
    window: int = DEFAULT_WINDOW,
    threshold: int = DEFAULT_THRESHOLD,
) -> ScoreTrend:
    """Compare the most recent scores against the oldest ones.

    ``history`` is ordered oldest first. The recent window is the last
    ``window`` entries; the older window is the first ``window`` entries that
    are not part of the recent one. Entries may be ``ScoreHistory`` objects or
    trend-point dicts with ``total_score`` and ``components``.
    """
    points = [_point(entry) for entry in history]
    count = len(points)
    if count < 2:
        return ScoreTrend(entries=count)

    recent = points[-window:]
    # The windows never overlap: up to ``window`` entries there is no older window
    older = points[: min(window, count - window)] if count > window else []
    if not older:
        return ScoreTrend(entries=count)

    recent_avg = _average([total for total, _ in recent])
    older_avg = _average([total for total, _ in older])
    change = recent_avg - older_avg

    component_trends: dict[str, ComponentTrend] = {}
    for name in COMPONENT_NAMES:
        recent_component = _average([comps.get(name, 0) or 0 for _, comps in recent])
        older_component = _average([comps.get(name, 0) or 0 for _, comps in older])
        component_change = recent_component - older_component
        component_trends[name] = ComponentTrend(
            change=round_half_up(component_change),
            trend=classify_change(component_change, threshold),
        )

    return ScoreTrend(
        trend=classify_change(change, threshold),
        change=round_half_up(change),
        entries=count,
        recent_avg=round_half_up(recent_avg),
        older_avg=round_half_up(older_avg),
        component_trends=component_trends,
    )
