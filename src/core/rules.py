"""Amazon title rule tables for compliance scoring.

Pure data: categorized term lists with their severity and deduction. The
matching itself lives in ``compliance.scan_terms``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from .models import Severity

# Amazon blocked/restricted words and phrases
BLOCKED_TERMS: dict[str, tuple[str, ...]] = {
    "superlatives": (
        "best", "fastest", "cheapest", "top rated", "#1", "number one", "leading",
        "most popular", "best seller", "best-selling", "award winning", "award-winning",
    ),
    "healthClaims": (
        "cure", "cures", "treat", "treats", "heal", "heals", "prevent", "prevents",
        "diagnosis", "therapeutic", "clinically proven", "fda approved", "medical grade",
        "antibacterial", "antimicrobial", "antiviral", "kills germs", "kills bacteria",
        "disinfect", "sanitize", "sterilize",
    ),
    "guarantees": (
        "guarantee", "guaranteed", "warranty", "lifetime warranty", "money back",
        "risk free", "risk-free", "100% satisfaction", "no questions asked",
    ),
    "environmental": (
        "eco-friendly", "eco friendly", "green", "sustainable", "biodegradable",
        "recyclable", "organic", "natural", "non-toxic", "chemical free", "chemical-free",
    ),
    "pesticides": (
        "kills insects", "insect killer", "pest control", "bug killer", "rodent",
        "kills ants", "kills roaches", "mosquito", "flea", "tick", "pesticide",
    ),
    "safety": (
        "fireproof", "fire proof", "fire-proof", "bulletproof", "bullet proof",
        "explosion proof", "childproof", "child proof", "tamper proof", "waterproof rating",
    ),
    "certifications": (
        "ce certified", "ul listed", "iso certified", "rohs", "fcc certified",
        "tuv certified", "etl listed",
    ),
}

# Words that suggest potential issues
WARNING_TERMS: dict[str, tuple[str, ...]] = {
    "competitorBrands": (
        "dewalt", "makita", "bosch", "milwaukee", "hilti", "festool", "metabo",
        "ryobi", "black & decker", "black and decker", "craftsman", "kobalt",
        "ridgid", "porter cable", "porter-cable", "hitachi", "snap-on", "snap on",
    ),
    "timeframes": (
        "limited time", "sale ends", "offer expires", "today only", "act now",
        "hurry", "last chance", "while supplies last",
    ),
    "exaggeration": (
        "amazing", "incredible", "unbelievable", "revolutionary", "miracle",
        "magic", "secret", "exclusive", "unique", "one of a kind",
    ),
}


@dataclass(frozen=True)
class SeverityRule:
    """Severity level and point deduction for a term category."""

    level: Severity
    deduction: int


BLOCKED_SEVERITY: dict[str, SeverityRule] = {
    "superlatives": SeverityRule(Severity.HIGH, 15),
    "healthClaims": SeverityRule(Severity.CRITICAL, 25),
    "guarantees": SeverityRule(Severity.HIGH, 15),
    "environmental": SeverityRule(Severity.MEDIUM, 10),
    "pesticides": SeverityRule(Severity.CRITICAL, 30),
    "safety": SeverityRule(Severity.HIGH, 15),
    "certifications": SeverityRule(Severity.MEDIUM, 10),
}

DEFAULT_SEVERITY = SeverityRule(Severity.LOW, 5)

WARNING_DEDUCTION = 3
BRAND_WARNING_DEDUCTION = 5

# Phrases showing a brand is named for compatibility, not as the seller's brand
COMPATIBILITY_PHRASES = ("compatible", "fits", "for ")


def get_severity(category: str) -> SeverityRule:
    """Severity for a blocked category (unknown categories are low/5)."""
    return BLOCKED_SEVERITY.get(category, DEFAULT_SEVERITY)


def is_brand_misuse(term: str, title_lower: str) -> bool:
    """Whether a competitor brand in the title counts as a violation.

    The brand leading the title as its own word is the seller's brand, and
    any compatibility phrase makes the mention legitimate. "DeWalt-Style"
    leads with the brand but uses it as a descriptor, so it is flagged.
    """
    if re.match(rf"{re.escape(term)}(?![\w-])", title_lower):
        return False
    return not any(phrase in title_lower for phrase in COMPATIBILITY_PHRASES)


TermGuard = Callable[[str, str], bool]


@dataclass(frozen=True)
class TermCategory:
    """A category of terms scanned for in listing text."""

    name: str
    terms: tuple[str, ...]
    severity: Severity
    deduction: int
    reported_as: str = ""  # Category name recorded on violations, if different
    guard: TermGuard | None = None  # (term, text_lower) -> counts as violation

    @property
    def violation_category(self) -> str:
        return self.reported_as or self.name


def _blocked_categories() -> tuple[TermCategory, ...]:
    categories = []
    for name, terms in BLOCKED_TERMS.items():
        rule = get_severity(name)
        categories.append(TermCategory(name, terms, rule.level, rule.deduction))
    return tuple(categories)


def _warning_categories() -> tuple[TermCategory, ...]:
    categories = []
    for name, terms in WARNING_TERMS.items():
        if name == "competitorBrands":
            categories.append(
                TermCategory(
                    name,
                    terms,
                    Severity.WARNING,
                    BRAND_WARNING_DEDUCTION,
                    reported_as="potentialBrandIssue",
                    guard=is_brand_misuse,
                )
            )
        else:
            categories.append(TermCategory(name, terms, Severity.WARNING, WARNING_DEDUCTION))
    return tuple(categories)


BLOCKED_CATEGORIES = _blocked_categories()
WARNING_CATEGORIES = _warning_categories()

# Scan order: every blocked category, then every warning category
TITLE_RULES: tuple[TermCategory, ...] = BLOCKED_CATEGORIES + WARNING_CATEGORIES
