"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Listing scores table
    op.create_table(
        "listing_scores",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("listing_key", sa.String(100), nullable=False),
        sa.Column("asin", sa.String(20), default=""),
        sa.Column("total_score", sa.Integer(), default=0),
        sa.Column("seo_score", sa.Integer(), default=0),
        sa.Column("content_score", sa.Integer(), default=0),
        sa.Column("image_score", sa.Integer(), default=0),
        sa.Column("competitive_score", sa.Integer(), default=0),
        sa.Column("compliance_score", sa.Integer(), default=0),
        sa.Column("seo_violations_json", sa.Text(), default="[]"),
        sa.Column("content_violations_json", sa.Text(), default="[]"),
        sa.Column("image_violations_json", sa.Text(), default="[]"),
        sa.Column("competitive_violations_json", sa.Text(), default="[]"),
        sa.Column("compliance_violations_json", sa.Text(), default="[]"),
        sa.Column("breakdown_json", sa.Text(), default="{}"),
        sa.Column("recommendations_json", sa.Text(), default="[]"),
        sa.Column("calculated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_listing_scores_listing_key", "listing_scores", ["listing_key"])
    op.create_index("ix_listing_scores_asin", "listing_scores", ["asin"])
    op.create_index("ix_listing_scores_calculated_at", "listing_scores", ["calculated_at"])
    op.create_index(
        "ix_listing_scores_key_time", "listing_scores", ["listing_key", "calculated_at"]
    )


def downgrade() -> None:
    op.drop_index("ix_listing_scores_key_time", table_name="listing_scores")
    op.drop_index("ix_listing_scores_calculated_at", table_name="listing_scores")
    op.drop_index("ix_listing_scores_asin", table_name="listing_scores")
    op.drop_index("ix_listing_scores_listing_key", table_name="listing_scores")
    op.drop_table("listing_scores")
