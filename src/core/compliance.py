"""Compliance scoring: Amazon title policy checks."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from .models import (
    ComplianceScore,
    Listing,
    Priority,
    Recommendation,
    RecommendationType,
    Severity,
    Violation,
)
from .rules import TITLE_RULES, TermCategory

EMOJI_PATTERN = re.compile(
    "[\U0001F600-\U0001F64F\U0001F300-\U0001F5FF\U0001F680-\U0001F6FF\u2600-\u26FF\u2700-\u27BF]"
)
HTML_TAG_PATTERN = re.compile(r"<[^>]+>")
HTML_ENTITY_PATTERN = re.compile(r"&[a-z]+;", re.IGNORECASE)
PROMO_PATTERN = re.compile(
    r"\bsale\b|\bdiscount\b|\bfree shipping\b|\bbogo\b|\bbuy one get one\b", re.IGNORECASE
)

CAPS_WORD_LIMIT = 3
CAPS_DEDUCTION = 10
EMOJI_DEDUCTION = 15
HTML_DEDUCTION = 20
PROMO_DEDUCTION = 15

# Minor suggestions are only added while the list is shorter than this
MAX_RECOMMENDATIONS_FOR_MINOR = 5
MINOR_TERMS_SHOWN = 3


@dataclass
class TermHit:
    """A rule-table term found in text."""

    violation: Violation
    deduction: int


def scan_terms(text: str, categories: Iterable[TermCategory]) -> list[TermHit]:
    """Find every category term in ``text`` (case-insensitive substring).

    Categories and terms are scanned in table order, so hits come back in
    detection order. A category guard can veto an individual match.
    """
    text_lower = text.lower()
    hits: list[TermHit] = []
    for category in categories:
        for term in category.terms:
            term_lower = term.lower()
            if term_lower not in text_lower:
                continue
            if category.guard is not None and not category.guard(term_lower, text_lower):
                continue
            hits.append(
                TermHit(
                    violation=Violation(
                        term=term,
                        category=category.violation_category,
                        severity=category.severity,
                    ),
                    deduction=category.deduction,
                )
            )
    return hits


def _recommend(priority: Priority, title: str, description: str, impact: int) -> Recommendation:
    return Recommendation(
        type=RecommendationType.COMPLIANCE,
        priority=priority,
        title=title,
        description=description,
        impact=impact,
    )


def _quoted(violations: Iterable[Violation]) -> str:
    return ", ".join(f'"{v.term}"' for v in violations)


def score_compliance(listing: Listing) -> ComplianceScore:
    """Score a listing title against Amazon's restricted-term and style rules."""
    title = listing.title
    violations: list[Violation] = []
    recommendations: list[Recommendation] = []
    deductions = 0

    for hit in scan_terms(title, TITLE_RULES):
        violations.append(hit.violation)
        deductions += hit.deduction

    # Excessive CAPS (Amazon style violation)
    caps_words = [w for w in title.split(" ") if len(w) > 2 and w == w.upper()]
    if len(caps_words) > CAPS_WORD_LIMIT:
        deductions += CAPS_DEDUCTION
        violations.append(
            Violation(f"{len(caps_words)} ALL CAPS words", "formatting", Severity.MEDIUM)
        )
        recommendations.append(
            _recommend(
                Priority.HIGH,
                "Reduce ALL CAPS usage",
                f"Found {len(caps_words)} words in ALL CAPS. Amazon prefers title case. "
                "This can trigger listing suppression.",
                15,
            )
        )

    emojis = EMOJI_PATTERN.findall(title)
    if emojis:
        deductions += EMOJI_DEDUCTION
        violations.append(Violation(f"{len(emojis)} emoji(s)", "formatting", Severity.HIGH))
        recommendations.append(
            _recommend(
                Priority.CRITICAL,
                "Remove emojis from title",
                "Emojis in titles violate Amazon style guidelines and will cause listing suppression.",
                25,
            )
        )

    if HTML_TAG_PATTERN.search(title) or HTML_ENTITY_PATTERN.search(title):
        deductions += HTML_DEDUCTION
        violations.append(Violation("HTML tags or entities", "formatting", Severity.CRITICAL))
        recommendations.append(
            _recommend(
                Priority.CRITICAL,
                "Remove HTML from title",
                "HTML tags and entities are not allowed in Amazon titles.",
                30,
            )
        )

    if PROMO_PATTERN.search(title):
        deductions += PROMO_DEDUCTION
        violations.append(Violation("promotional language", "promotionalContent", Severity.HIGH))
        recommendations.append(
            _recommend(
                Priority.CRITICAL,
                "Remove promotional language",
                "Sales, discounts, and shipping mentions are not allowed in titles.",
                20,
            )
        )

    # One combined entry per severity bucket
    critical = [v for v in violations if v.severity in (Severity.CRITICAL, Severity.HIGH)]
    medium = [v for v in violations if v.severity == Severity.MEDIUM]
    warnings = [v for v in violations if v.severity == Severity.WARNING]

    if critical:
        recommendations.append(
            _recommend(
                Priority.CRITICAL,
                "Critical compliance issues found",
                f"Remove these terms: {_quoted(critical)}. These can cause listing suppression.",
                30,
            )
        )

    if medium:
        recommendations.append(
            _recommend(
                Priority.HIGH,
                "Compliance warnings",
                f"Consider removing: {_quoted(medium)}. These may trigger Amazon reviews.",
                15,
            )
        )

    if warnings and len(recommendations) < MAX_RECOMMENDATIONS_FOR_MINOR:
        recommendations.append(
            _recommend(
                Priority.MEDIUM,
                "Minor compliance suggestions",
                f"Review usage of: {_quoted(warnings[:MINOR_TERMS_SHOWN])}.",
                5,
            )
        )

    return ComplianceScore(
        score=max(0, 100 - deductions),
        violations=violations,
        recommendations=recommendations,
    )
