"""Tests for SEO scoring."""

from __future__ import annotations

from decimal import Decimal

from src.core.models import Listing, Priority, RecommendationType
from src.core.seo import caps_ratio, max_word_repeats, score_seo


def titles(result) -> list[str]:
    return [r.title for r in result.recommendations]


class TestTitleLength:
    """Tests for the title length factor."""

    def test_optimised_title_scores_100(self, sample_listing: Listing) -> None:
        result = score_seo(sample_listing)
        assert result.score == 100
        assert result.recommendations == []

    def test_empty_title(self) -> None:
        result = score_seo(Listing())
        assert result.score == 45
        rec = result.recommendations[0]
        assert rec.title == "Title too short"
        assert rec.priority == Priority.HIGH
        assert rec.impact == 20
        assert rec.description.startswith("Title is only 0 characters.")

    def test_medium_length_title(self) -> None:
        result = score_seo(Listing(title="x" * 120))
        rec = result.recommendations[0]
        assert rec.title == "Title too short"
        assert rec.priority == Priority.MEDIUM
        assert rec.impact == 10
        assert "Title is 120 characters." in rec.description

    def test_long_title(self) -> None:
        result = score_seo(Listing(title="x" * 201))
        rec = result.recommendations[0]
        assert rec.title == "Title slightly long"
        assert rec.priority == Priority.LOW

    def test_ideal_range_edges(self) -> None:
        for length in (150, 200):
            result = score_seo(Listing(title="x" * length))
            assert "Title too short" not in titles(result)
            assert "Title slightly long" not in titles(result)

    def test_length_counts_characters(self) -> None:
        result = score_seo(Listing(title="é" * 150))
        assert "Title too short" not in titles(result)


class TestTitleSignals:
    """Tests for brand, identifiers and readability factors."""

    def test_brand_not_first(self) -> None:
        result = score_seo(Listing(title="Drill bits by Makita"))
        assert "Brand not at title start" in titles(result)

    def test_brand_first(self) -> None:
        result = score_seo(Listing(title="Bosch drill bits"))
        assert "Brand not at title start" not in titles(result)

    def test_identifiers_found(self) -> None:
        result = score_seo(Listing(title="Drill DCD796 18V 2 Pack"))
        found = titles(result)
        assert "Add model number to title" not in found
        assert "Add size/specs to title" not in found
        assert "Add quantity to title" not in found

    def test_keyword_stuffing(self) -> None:
        result = score_seo(Listing(title="Drill bits drill set DRILL"))
        assert "Avoid keyword stuffing" in titles(result)

    def test_all_caps(self) -> None:
        result = score_seo(Listing(title="DRILL BITS"))
        rec = next(r for r in result.recommendations if r.title == "Reduce ALL CAPS usage")
        assert rec.type == RecommendationType.SEO
        assert rec.impact == 7

    def test_special_characters(self) -> None:
        result = score_seo(Listing(title="Drill Bits!"))
        assert "Remove special characters" in titles(result)

    def test_separators_without_special_characters(self) -> None:
        plain = score_seo(Listing(title="Drill Bits"))
        separated = score_seo(Listing(title="Drill Bits, Steel"))
        assert separated.score - plain.score == 5


class TestHelpers:
    def test_max_word_repeats_ignores_short_words(self) -> None:
        assert max_word_repeats("the the the drill drill Drill set set set") == 3
        assert max_word_repeats("set set set") == 0

    def test_caps_ratio(self) -> None:
        assert caps_ratio("") == 0
        assert caps_ratio("ABcd") == Decimal("0.5")
