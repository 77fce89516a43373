"""Core data models for Listing Quality Scorer."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping


# Largest decimal exponent (either sign) accepted from input
MAX_EXPONENT = 18


def _bounded(value: Decimal) -> Decimal | None:
    if not value.is_finite():
        return None
    if value and abs(value.adjusted()) > MAX_EXPONENT:
        return None
    return value


def to_decimal(value: Any) -> Decimal | None:
    """Coerce a loosely-typed number to Decimal, or None if it is not one.

    Magnitudes beyond 1e18 (or below 1e-18) are treated as not a number.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return _bounded(value)
    if isinstance(value, int):
        return _bounded(Decimal(value))
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return _bounded(Decimal(str(value)))
    if isinstance(value, str):
        try:
            parsed = Decimal(value.strip())
        except InvalidOperation:
            return None
        return _bounded(parsed)
    return None


def to_int(value: Any) -> int | None:
    """Coerce a loosely-typed integer, or None if it is not one."""
    number = to_decimal(value)
    if number is None:
        return None
    return int(number)


def to_text(value: Any) -> str:
    """Text fields degrade to an empty string."""
    return value if isinstance(value, str) else ""


class Severity(str, Enum):
    """Severity of a rule violation."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    WARNING = "warning"


class Priority(str, Enum):
    """Priority of a recommendation."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RecommendationType(str, Enum):
    """Which sub-scorer produced a recommendation."""

    SEO = "seo"
    CONTENT = "content"
    IMAGES = "images"
    COMPETITIVE = "competitive"
    COMPLIANCE = "compliance"


COMPONENT_NAMES = ("seo", "content", "images", "competitive", "compliance")


@dataclass
class Listing:
    """A seller's product listing being evaluated.

    ``sku`` and ``asin`` are carried through scoring but never interpreted.
    Malformed fields are normalised on construction so scorers never see
    anything but text, a list of text and a non-negative Decimal price.
    """

    title: str = ""
    bullet_points: list[str] = field(default_factory=list)
    description: str = ""
    price: Decimal = Decimal("0")
    sku: str = ""
    asin: str = ""

    def __post_init__(self) -> None:
        self.title = to_text(self.title)
        self.description = to_text(self.description)
        self.sku = to_text(self.sku)
        self.asin = to_text(self.asin)
        if isinstance(self.bullet_points, (list, tuple)):
            self.bullet_points = [b for b in self.bullet_points if isinstance(b, str)]
        else:
            self.bullet_points = []
        price = to_decimal(self.price)
        self.price = price if price is not None and price > 0 else Decimal("0")

    @property
    def full_content(self) -> str:
        """Title, bullets and description joined by spaces."""
        return " ".join([self.title, *self.bullet_points, self.description])

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Listing":
        """Build a listing from a JSON-style mapping (camelCase or snake_case)."""
        bullets = data.get("bullet_points", data.get("bulletPoints", data.get("bullets")))
        return cls(
            title=data.get("title", ""),
            bullet_points=bullets if bullets is not None else [],
            description=data.get("description", ""),
            price=data.get("price", Decimal("0")),
            sku=data.get("sku", ""),
            asin=data.get("asin", ""),
        )


@dataclass
class MarketSnapshot:
    """Competitive market data for a listing's ASIN.

    Every field is optional; a missing field scores neutrally.
    """

    buy_box_price: Decimal | None = None
    sales_rank: int | None = None
    offer_count: int | None = None
    rating: Decimal | None = None
    review_count: int | None = None
    price_history_average: Decimal | None = None

    def __post_init__(self) -> None:
        self.buy_box_price = to_decimal(self.buy_box_price)
        self.sales_rank = to_int(self.sales_rank)
        self.offer_count = to_int(self.offer_count)
        self.rating = to_decimal(self.rating)
        self.review_count = to_int(self.review_count)
        self.price_history_average = to_decimal(self.price_history_average)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MarketSnapshot":
        """Build a snapshot from a JSON-style mapping (camelCase or snake_case)."""

        def pick(*keys: str) -> Any:
            for key in keys:
                if data.get(key) is not None:
                    return data[key]
            return None

        return cls(
            buy_box_price=pick("buy_box_price", "buyBoxPrice"),
            sales_rank=pick("sales_rank", "salesRank", "bsr"),
            offer_count=pick("offer_count", "offerCount"),
            rating=pick("rating"),
            review_count=pick("review_count", "reviewCount", "reviews"),
            price_history_average=pick("price_history_average", "priceHistoryAverage", "avgPrice"),
        )


@dataclass
class Violation:
    """A detected rule breach."""

    term: str = ""
    category: str = ""
    severity: Severity = Severity.LOW

    def to_dict(self) -> dict[str, Any]:
        return {"term": self.term, "category": self.category, "severity": self.severity.value}


@dataclass
class Recommendation:
    """An actionable, prioritized remediation suggestion."""

    type: RecommendationType = RecommendationType.SEO
    priority: Priority = Priority.LOW
    title: str = ""
    description: str = ""
    impact: int = 0  # Sort weight only, never scored

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "priority": self.priority.value,
            "title": self.title,
            "description": self.description,
            "impact": self.impact,
        }


@dataclass
class SeoScore:
    """SEO sub-score."""

    score: int = 0
    max_score: int = 100
    recommendations: list[Recommendation] = field(default_factory=list)
    violations: list[Violation] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "max_score": self.max_score,
            "recommendations": [r.to_dict() for r in self.recommendations],
        }


@dataclass
class ContentScore:
    """Content sub-score."""

    score: int = 0
    max_score: int = 100
    bullet_count: int = 0
    recommendations: list[Recommendation] = field(default_factory=list)
    violations: list[Violation] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "max_score": self.max_score,
            "bullet_count": self.bullet_count,
            "recommendations": [r.to_dict() for r in self.recommendations],
        }


@dataclass
class ImageScore:
    """Image sub-score (neutral placeholder)."""

    score: int = 50
    max_score: int = 100
    recommendations: list[Recommendation] = field(default_factory=list)
    violations: list[Violation] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "max_score": self.max_score,
            "recommendations": [r.to_dict() for r in self.recommendations],
        }


@dataclass
class ComplianceScore:
    """Compliance sub-score."""

    score: int = 100
    max_score: int = 100
    violations: list[Violation] = field(default_factory=list)
    recommendations: list[Recommendation] = field(default_factory=list)

    @property
    def violation_count(self) -> int:
        return len(self.violations)

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "max_score": self.max_score,
            "violations": [v.to_dict() for v in self.violations],
            "violation_count": self.violation_count,
            "recommendations": [r.to_dict() for r in self.recommendations],
        }


@dataclass
class CompetitiveAnalysis:
    """Market figures the competitive score was based on."""

    buy_box_price: Decimal | None = None
    sales_rank: int | None = None
    offer_count: int = 0
    rating: Decimal | None = None
    review_count: int | None = None
    current_price: Decimal = Decimal("0")

    def to_dict(self) -> dict[str, Any]:
        return {
            "buy_box_price": float(self.buy_box_price) if self.buy_box_price is not None else None,
            "sales_rank": self.sales_rank,
            "offer_count": self.offer_count,
            "rating": float(self.rating) if self.rating is not None else None,
            "review_count": self.review_count,
            "current_price": float(self.current_price),
        }


@dataclass
class CompetitiveScore:
    """Competitive sub-score."""

    score: int = 50
    max_score: int = 100
    data_available: bool = False
    analysis: CompetitiveAnalysis | None = None
    recommendations: list[Recommendation] = field(default_factory=list)
    violations: list[Violation] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "score": self.score,
            "max_score": self.max_score,
            "data_available": self.data_available,
            "recommendations": [r.to_dict() for r in self.recommendations],
        }
        if self.analysis is not None:
            data["analysis"] = self.analysis.to_dict()
        return data


@dataclass
class ScoreComponents:
    """The five sub-results of a scoring pass."""

    seo: SeoScore = field(default_factory=SeoScore)
    content: ContentScore = field(default_factory=ContentScore)
    images: ImageScore = field(default_factory=ImageScore)
    competitive: CompetitiveScore = field(default_factory=CompetitiveScore)
    compliance: ComplianceScore = field(default_factory=ComplianceScore)

    def scores(self) -> dict[str, int]:
        """Component name -> sub-score."""
        return {name: getattr(self, name).score for name in COMPONENT_NAMES}

    def violations(self) -> dict[str, list[Violation]]:
        """Component name -> violations."""
        return {name: list(getattr(self, name).violations) for name in COMPONENT_NAMES}

    def to_dict(self) -> dict[str, Any]:
        return {name: getattr(self, name).to_dict() for name in COMPONENT_NAMES}


@dataclass
class ScoreResult:
    """Complete quality score for a listing.

    A value object: it carries no timestamp. The history recorder assigns one
    when the result is persisted.
    """

    total_score: int = 0
    components: ScoreComponents = field(default_factory=ScoreComponents)
    recommendations: list[Recommendation] = field(default_factory=list)
    sku: str = ""
    asin: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "sku": self.sku,
            "asin": self.asin,
            "total_score": self.total_score,
            "components": self.components.to_dict(),
            "recommendations": [r.to_dict() for r in self.recommendations],
        }


@dataclass
class ScoreHistory:
    """Historical score record."""

    id: int | None = None
    listing_key: str = ""
    asin: str = ""
    total_score: int = 0
    components: dict[str, int] = field(default_factory=dict)
    violations: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    breakdown: dict[str, Any] = field(default_factory=dict)
    recommendations: list[dict[str, Any]] = field(default_factory=list)
    calculated_at: datetime = field(default_factory=datetime.now)

    @property
    def date(self) -> str:
        """Calendar date of the record (YYYY-MM-DD)."""
        return self.calculated_at.date().isoformat()

    def to_trend_point(self) -> dict[str, Any]:
        """Shape consumed by the trend analyzer and the web API."""
        return {
            "date": self.date,
            "timestamp": self.calculated_at.isoformat(),
            "total_score": self.total_score,
            "components": dict(self.components),
        }


@dataclass
class ComponentTrend:
    """Trend for a single score component."""

    change: int = 0
    trend: str = "stable"


@dataclass
class ScoreTrend:
    """Improvement/decline analysis over a listing's score history."""

    trend: str = "insufficient_data"  # "improving", "declining", "stable"
    change: int = 0
    entries: int = 0
    recent_avg: int | None = None
    older_avg: int | None = None
    component_trends: dict[str, ComponentTrend] = field(default_factory=dict)

    @property
    def has_trend(self) -> bool:
        return self.trend != "insufficient_data"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "trend": self.trend,
            "change": self.change,
            "entries": self.entries,
        }
        if self.has_trend:
            data["recent_avg"] = self.recent_avg
            data["older_avg"] = self.older_avg
            data["component_trends"] = {
                name: {"change": t.change, "trend": t.trend}
                for name, t in self.component_trends.items()
            }
        return data


class AlertType(str, Enum):
    """Types of alerts."""

    LOW_SCORE = "low_score"
    SCORE_INCREASE = "score_increase"
    SCORE_DECREASE = "score_decrease"
    COMPLIANCE_CRITICAL = "compliance_critical"


@dataclass
class Alert:
    """A score alert for a listing."""

    id: int | None = None
    alert_type: AlertType = AlertType.LOW_SCORE
    sku: str = ""
    asin: str = ""
    message: str = ""
    old_value: int | None = None
    new_value: int | None = None
    created_at: datetime = field(default_factory=datetime.now)
    is_read: bool = False
    is_dismissed: bool = False
