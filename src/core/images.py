"""Image scoring.

No image metadata reaches the engine, so the score is a fixed neutral
midpoint that still carries its weight in the total.
"""

from __future__ import annotations

from .models import ImageScore, Listing, Priority, Recommendation, RecommendationType

NEUTRAL_SCORE = 50


def score_images(listing: Listing) -> ImageScore:
    return ImageScore(
        score=NEUTRAL_SCORE,
        recommendations=[
            Recommendation(
                type=RecommendationType.IMAGES,
                priority=Priority.LOW,
                title="Verify image quality",
                description=(
                    "Check that you have 7+ images including lifestyle shots, "
                    "infographics, and size reference."
                ),
                impact=25,
            )
        ],
    )
