"""initial portfolio schema

Revision ID: 3f1a9c2e7b10
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "3f1a9c2e7b10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "taxonomies",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("parent_id", sa.Integer(), sa.ForeignKey("taxonomies.id"), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.UniqueConstraint("type", "name", name="uq_taxonomies_type_name"),
    )
    op.create_index("ix_taxonomies_type", "taxonomies", ["type"], unique=False)

    op.create_table(
        "positions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("ticker_bbg", sa.String(length=64), nullable=False),
        sa.Column("name_en", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("name_cn", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("market", sa.String(length=120), nullable=False, server_default=""),
        sa.Column("sector_id", sa.Integer(), sa.ForeignKey("taxonomies.id"), nullable=True),
        sa.Column("theme_id", sa.Integer(), sa.ForeignKey("taxonomies.id"), nullable=True),
        sa.Column("topdown_id", sa.Integer(), sa.ForeignKey("taxonomies.id"), nullable=True),
        sa.Column("priority", sa.String(length=32), nullable=False, server_default=""),
        sa.Column("long_short", sa.String(length=8), nullable=False, server_default="/"),
        sa.Column("market_cap_local", sa.Float(), nullable=False, server_default="0"),
        sa.Column("market_cap_rmb", sa.Float(), nullable=False, server_default="0"),
        sa.Column("profit_2025", sa.Float(), nullable=False, server_default="0"),
        sa.Column("pe_2026", sa.Float(), nullable=False, server_default="0"),
        sa.Column("pe_2027", sa.Float(), nullable=False, server_default="0"),
        sa.Column("price_tag", sa.String(length=64), nullable=False, server_default=""),
        sa.Column("market_cap_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("position_amount", sa.Float(), nullable=False, server_default="0"),
        sa.Column("position_weight", sa.Float(), nullable=False, server_default="0"),
        sa.Column("gic_industry", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("exchange_country", sa.String(length=120), nullable=False, server_default=""),
        sa.Column("pnl", sa.Float(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.CheckConstraint("position_amount >= 0", name="ck_positions_amount_non_negative"),
    )
    op.create_index("ix_positions_ticker_bbg", "positions", ["ticker_bbg"], unique=True)
    op.create_index("ix_positions_long_short", "positions", ["long_short"], unique=False)

    op.create_table(
        "name_mappings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("bbg_name", sa.String(length=255), nullable=False),
        sa.Column("chinese_name", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("position_id", sa.Integer(), sa.ForeignKey("positions.id", ondelete="SET NULL"), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_name_mappings_bbg_name", "name_mappings", ["bbg_name"], unique=True)

    op.create_table(
        "import_history",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("import_type", sa.String(length=32), nullable=False, server_default="positions"),
        sa.Column("file_name", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("record_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("new_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("updated_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "app_settings",
        sa.Column("key", sa.String(length=64), primary_key=True),
        sa.Column("value", sa.Text(), nullable=False),
    )
    op.bulk_insert(
        sa.table("app_settings", sa.column("key", sa.String), sa.column("value", sa.Text)),
        [{"key": "aum", "value": "10000000"}],
    )

    op.create_table(
        "trades",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="pending"),
        sa.Column("note", sa.Text(), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("executed_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "trade_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("trade_id", sa.Integer(), sa.ForeignKey("trades.id", ondelete="CASCADE"), nullable=False),
        sa.Column("ticker_bbg", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("transaction_type", sa.String(length=8), nullable=False),
        sa.Column("gmv_usd_k", sa.Float(), nullable=False, server_default="0"),
        sa.Column("unwind", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("reason", sa.Text(), nullable=False, server_default=""),
        sa.Column("position_id", sa.Integer(), sa.ForeignKey("positions.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_trade_items_trade_id", "trade_items", ["trade_id"], unique=False)

    op.create_table(
        "snapshots",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("trade_id", sa.Integer(), sa.ForeignKey("trades.id", ondelete="CASCADE"), nullable=False),
        sa.Column("positions_json", sa.Text(), nullable=False),
        sa.Column("note", sa.Text(), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_snapshots_trade_id", "snapshots", ["trade_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_snapshots_trade_id", table_name="snapshots")
    op.drop_table("snapshots")
    op.drop_index("ix_trade_items_trade_id", table_name="trade_items")
    op.drop_table("trade_items")
    op.drop_table("trades")
    op.drop_table("app_settings")
    op.drop_table("import_history")
    op.drop_index("ix_name_mappings_bbg_name", table_name="name_mappings")
    op.drop_table("name_mappings")
    op.drop_index("ix_positions_long_short", table_name="positions")
    op.drop_index("ix_positions_ticker_bbg", table_name="positions")
    op.drop_table("positions")
    op.drop_index("ix_taxonomies_type", table_name="taxonomies")
    op.drop_table("taxonomies")
