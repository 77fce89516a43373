"""SEO scoring: title length, brand placement, identifiers and readability."""

from __future__ import annotations

import re
from collections import Counter
from decimal import Decimal

from .models import Listing, Priority, Recommendation, RecommendationType, SeoScore
from .tiers import round_half_up

MAX_POINTS = 100

BRAND_PATTERN = re.compile(
    r"^(dewalt|makita|bosch|milwaukee|stanley|draper|silverline|bahco|irwin|faithfull)",
    re.IGNORECASE,
)
MODEL_PATTERN = re.compile(r"[A-Z]{2,}[\d-]+|[\d]+[A-Z]+", re.IGNORECASE)
SIZE_PATTERN = re.compile(r"\d+\s*(mm|cm|m|inch|\"|v|volt|w|watt|ah|amp)", re.IGNORECASE)
QUANTITY_PATTERN = re.compile(r"\d+\s*(pcs?|pieces?|pack|set|x\s)", re.IGNORECASE)
UPPERCASE_PATTERN = re.compile(r"[A-Z]")
SEPARATOR_PATTERN = re.compile(r"[-|,]")
BAD_CHAR_PATTERN = re.compile(r"[!@#$%^&*()+=\[\]{}\\;':\"<>?/]")

IDEAL_LENGTH_MIN = 150
IDEAL_LENGTH_MAX = 200
SHORT_LENGTH_MIN = 100

STUFFING_MIN_WORD_LENGTH = 3  # Only words longer than this are counted
STUFFING_MAX_REPEATS = 2
CAPS_RATIO_LIMIT = Decimal("0.5")


def _recommend(priority: Priority, title: str, description: str, impact: int) -> Recommendation:
    return Recommendation(
        type=RecommendationType.SEO,
        priority=priority,
        title=title,
        description=description,
        impact=impact,
    )


def _score_length(title: str, recommendations: list[Recommendation]) -> int:
    length = len(title)
    if IDEAL_LENGTH_MIN <= length <= IDEAL_LENGTH_MAX:
        return 25
    if SHORT_LENGTH_MIN <= length < IDEAL_LENGTH_MIN:
        recommendations.append(
            _recommend(
                Priority.MEDIUM,
                "Title too short",
                f"Title is {length} characters. Optimal is 150-200. "
                "Add more keywords or product details.",
                10,
            )
        )
        return 15
    if length > IDEAL_LENGTH_MAX:
        recommendations.append(
            _recommend(
                Priority.LOW,
                "Title slightly long",
                f"Title is {length} characters. Consider trimming to under 200 for better readability.",
                5,
            )
        )
        return 15
    recommendations.append(
        _recommend(
            Priority.HIGH,
            "Title too short",
            f"Title is only {length} characters. "
            "Add keywords, brand, key features to reach 150+ characters.",
            20,
        )
    )
    return 5


def _score_identifiers(title: str, recommendations: list[Recommendation]) -> int:
    points = 0

    if MODEL_PATTERN.search(title):
        points += 7
    else:
        recommendations.append(
            _recommend(
                Priority.MEDIUM,
                "Add model number to title",
                "Include the product model/part number for better search matching.",
                7,
            )
        )

    if SIZE_PATTERN.search(title):
        points += 7
    else:
        recommendations.append(
            _recommend(
                Priority.HIGH,
                "Add size/specs to title",
                "Include key specifications (voltage, size, wattage) in title.",
                10,
            )
        )

    if QUANTITY_PATTERN.search(title):
        points += 6
    else:
        recommendations.append(
            _recommend(
                Priority.MEDIUM,
                "Add quantity to title",
                'If selling multiple items, add quantity (e.g., "Pack of 10", "3x").',
                5,
            )
        )

    return points


def max_word_repeats(title: str) -> int:
    """Highest occurrence count of any word longer than three characters."""
    counts = Counter(w for w in title.lower().split() if len(w) > STUFFING_MIN_WORD_LENGTH)
    return max(counts.values(), default=0)


def caps_ratio(title: str) -> Decimal:
    """Share of the title's characters that are upper-case ASCII letters."""
    return Decimal(len(UPPERCASE_PATTERN.findall(title))) / max(len(title), 1)


def score_seo(listing: Listing) -> SeoScore:
    """Score a listing title for search optimisation."""
    title = listing.title
    recommendations: list[Recommendation] = []
    earned = 0

    earned += _score_length(title, recommendations)

    if BRAND_PATTERN.search(title):
        earned += 15
    else:
        earned += 5
        recommendations.append(
            _recommend(
                Priority.MEDIUM,
                "Brand not at title start",
                "For DIY/Tools, putting the brand name first helps with search and trust.",
                10,
            )
        )

    earned += _score_identifiers(title, recommendations)

    if max_word_repeats(title) <= STUFFING_MAX_REPEATS:
        earned += 15
    else:
        earned += 5
        recommendations.append(
            _recommend(
                Priority.HIGH,
                "Avoid keyword stuffing",
                "Some words are repeated too many times. This can hurt rankings.",
                15,
            )
        )

    if caps_ratio(title) < CAPS_RATIO_LIMIT:
        earned += 10
    else:
        earned += 3
        recommendations.append(
            _recommend(
                Priority.MEDIUM,
                "Reduce ALL CAPS usage",
                "Too many capital letters reduces readability. Use normal case.",
                7,
            )
        )

    has_bad_chars = BAD_CHAR_PATTERN.search(title) is not None
    if SEPARATOR_PATTERN.search(title) and not has_bad_chars:
        earned += 15
    elif not has_bad_chars:
        earned += 10
    else:
        earned += 5
        recommendations.append(
            _recommend(
                Priority.MEDIUM,
                "Remove special characters",
                "Avoid using special characters like !, @, #, etc. "
                "Use hyphens or commas as separators.",
                8,
            )
        )

    return SeoScore(
        score=round_half_up(Decimal(earned) * 100 / MAX_POINTS),
        recommendations=recommendations,
    )
