"""SQLAlchemy database models for Listing Quality Scorer."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class ListingScoreDB(Base):
    """One recorded scoring pass for a listing."""

    __tablename__ = "listing_scores"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    listing_key: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    asin: Mapped[str] = mapped_column(String(20), default="", index=True)

    total_score: Mapped[int] = mapped_column(Integer, default=0)
    seo_score: Mapped[int] = mapped_column(Integer, default=0)
    content_score: Mapped[int] = mapped_column(Integer, default=0)
    image_score: Mapped[int] = mapped_column(Integer, default=0)
    competitive_score: Mapped[int] = mapped_column(Integer, default=0)
    compliance_score: Mapped[int] = mapped_column(Integer, default=0)

    # Per-component violations JSON
    seo_violations_json: Mapped[str] = mapped_column(Text, default="[]")
    content_violations_json: Mapped[str] = mapped_column(Text, default="[]")
    image_violations_json: Mapped[str] = mapped_column(Text, default="[]")
    competitive_violations_json: Mapped[str] = mapped_column(Text, default="[]")
    compliance_violations_json: Mapped[str] = mapped_column(Text, default="[]")

    # Full component breakdown and sorted recommendations JSON
    breakdown_json: Mapped[str] = mapped_column(Text, default="{}")
    recommendations_json: Mapped[str] = mapped_column(Text, default="[]")

    calculated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, index=True)

    __table_args__ = (Index("ix_listing_scores_key_time", "listing_key", "calculated_at"),)
