"""Pytest configuration and fixtures."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest

from src.core.config import Settings
from src.core.models import Listing, MarketSnapshot
from src.core.scoring import ScoringEngine

SAMPLE_TITLE = (
    "Makita B-65399 Professional Impact Gold Screwdriver Bit Set, 25mm Torsion Bits - "
    "30 Pieces, Chrome Vanadium Steel, Magnetic Holder | Workshop and Construction Use"
)

SAMPLE_BULLETS = [
    "Compatible with all standard 1/4 inch hex impact drivers and drill drivers",
    "Impact rated torsion zone absorbs peak torque for longer bit life",
    "Chrome vanadium steel construction with black oxide finish",
    "Includes PH2, PZ2, slotted and Torx bits for everyday fastening",
    "Magnetic bit holder keeps screws in place for one-handed work",
]


@pytest.fixture
def settings() -> Settings:
    """Create default settings for testing."""
    return Settings()


@pytest.fixture
def engine(settings: Settings) -> ScoringEngine:
    return ScoringEngine(settings)


@pytest.fixture
def sample_listing() -> Listing:
    """A well-optimised listing: full SEO, content and compliance marks."""
    return Listing(
        title=SAMPLE_TITLE,
        bullet_points=list(SAMPLE_BULLETS),
        description="A complete screwdriving set for the workshop, van or home.",
        price=Decimal("24.99"),
        sku="MAK-B65399",
        asin="B00TEST001",
    )


@pytest.fixture
def sample_market() -> MarketSnapshot:
    """Market data that earns every competitive point."""
    return MarketSnapshot(
        buy_box_price=Decimal("24.99"),
        sales_rank=800,
        offer_count=2,
        rating=Decimal("4.6"),
        review_count=312,
        price_history_average=Decimal("24.99"),
    )


@pytest.fixture
def temp_db(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point the session layer at a fresh SQLite file with the schema created."""
    import src.db.session as session_module

    db_path = tmp_path / "scores.db"
    session_module.close_database()
    monkeypatch.setattr(session_module, "get_db_path", lambda: db_path)
    session_module.init_database(use_migrations=False)
    yield db_path
    session_module.close_database()
