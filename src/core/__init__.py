"""Core business logic for Listing Quality Scorer."""

from .alerts import AlertManager
from .config import Settings, get_settings
from .models import (
    Alert,
    AlertType,
    Listing,
    MarketSnapshot,
    Priority,
    Recommendation,
    RecommendationType,
    ScoreHistory,
    ScoreResult,
    ScoreTrend,
    Severity,
    Violation,
)
from .recorder import BatchResult, ScoreRecorder
from .scoring import ScoringEngine
from .trends import analyze_score_trend

__all__ = [
    "Settings",
    "get_settings",
    "Alert",
    "AlertType",
    "Listing",
    "MarketSnapshot",
    "Priority",
    "Recommendation",
    "RecommendationType",
    "ScoreHistory",
    "ScoreResult",
    "ScoreTrend",
    "Severity",
    "Violation",
    "ScoringEngine",
    "ScoreRecorder",
    "BatchResult",
    "AlertManager",
    "analyze_score_trend",
]
