"""add company research notes

Revision ID: 8c2d4e6f1a3b
Revises: 3f1a9c2e7b10
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "8c2d4e6f1a3b"
down_revision: Union[str, None] = "3f1a9c2e7b10"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SECTIONS = (
    "strategy", "tam", "competition", "value_proposition", "long_term_factors",
    "outlook_3to5y", "business_quality", "tracking_data", "valuation",
    "revenue_downstream", "revenue_product", "revenue_customer", "profit_split",
    "leverage", "peer_comparison", "cost_structure", "equipment", "notes",
)


def upgrade() -> None:
    op.create_table(
        "company_research",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "position_id",
            sa.Integer(),
            sa.ForeignKey("positions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        *[sa.Column(name, sa.Text(), nullable=False, server_default="") for name in SECTIONS],
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_company_research_position_id", "company_research", ["position_id"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_company_research_position_id", table_name="company_research")
    op.drop_table("company_research")
