"""Content scoring over the title, bullet points and description."""

from __future__ import annotations

import re
from decimal import Decimal

from .models import ContentScore, Listing, Priority, Recommendation, RecommendationType
from .tiers import round_half_up

MAX_POINTS = 100

BENEFIT_PATTERN = re.compile(
    r"professional|heavy.?duty|premium|durable|precision|high.?quality|reliable"
    r"|powerful|efficient|long.?lasting",
    re.IGNORECASE,
)
COMPATIBILITY_PATTERN = re.compile(
    r"compatible|fits|for use with|works with|suitable for", re.IGNORECASE
)
MATERIAL_PATTERN = re.compile(
    r"steel|chrome|carbide|titanium|metal|alloy|plastic|rubber|carbon|stainless"
    r"|vanadium|copper|brass",
    re.IGNORECASE,
)
USE_CASE_PATTERN = re.compile(
    r"drilling|cutting|fastening|measuring|woodwork|metalwork|construction|diy|home"
    r"|garden|workshop|automotive|plumbing|electrical",
    re.IGNORECASE,
)

FULL_BULLETS = 5
SOME_BULLETS = 3


def _recommend(priority: Priority, title: str, description: str, impact: int) -> Recommendation:
    return Recommendation(
        type=RecommendationType.CONTENT,
        priority=priority,
        title=title,
        description=description,
        impact=impact,
    )


def score_content(listing: Listing) -> ContentScore:
    """Score a listing's copy for benefits, compatibility, materials and bullets."""
    title = listing.title
    bullets = listing.bullet_points
    content = listing.full_content
    recommendations: list[Recommendation] = []
    earned = 0

    # Benefit language counts most in the title, partially anywhere else
    if BENEFIT_PATTERN.search(title):
        earned += 25
    elif BENEFIT_PATTERN.search(content):
        earned += 15
    else:
        earned += 5
        recommendations.append(
            _recommend(
                Priority.MEDIUM,
                "Add benefit language",
                'Use words like "Professional", "Heavy Duty", "Precision" to highlight quality.',
                15,
            )
        )

    if COMPATIBILITY_PATTERN.search(content):
        earned += 20
    else:
        earned += 5
        recommendations.append(
            _recommend(
                Priority.HIGH,
                "Add compatibility info",
                "Mention what tools/systems this product is compatible with.",
                15,
            )
        )

    if MATERIAL_PATTERN.search(content):
        earned += 20
    else:
        earned += 5
        recommendations.append(
            _recommend(
                Priority.MEDIUM,
                "Mention materials",
                'Include material information (e.g., "Chrome Vanadium Steel").',
                12,
            )
        )

    if USE_CASE_PATTERN.search(content):
        earned += 20
    else:
        earned += 5
        recommendations.append(
            _recommend(
                Priority.MEDIUM,
                "Add use case",
                'Mention the application (e.g., "For Woodworking", "Ideal for Construction").',
                10,
            )
        )

    bullet_count = len(bullets)
    if bullet_count >= FULL_BULLETS:
        earned += 15
    elif bullet_count >= SOME_BULLETS:
        earned += 10
        recommendations.append(
            _recommend(
                Priority.MEDIUM,
                "Add more bullet points",
                f"Only {bullet_count} bullets. Amazon allows 5 bullets - "
                "use them all for better conversion.",
                8,
            )
        )
    else:
        earned += 3
        recommendations.append(
            _recommend(
                Priority.HIGH,
                "Add bullet points",
                "Missing bullet points. Add 5 benefit-focused bullets to improve conversion.",
                15,
            )
        )

    return ContentScore(
        score=round_half_up(Decimal(earned) * 100 / MAX_POINTS),
        bullet_count=bullet_count,
        recommendations=recommendations,
    )
