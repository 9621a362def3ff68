"""create journal tables

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "strategies",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("weekly_loss_limit", sa.Float(), nullable=True),
        sa.Column("monthly_loss_limit", sa.Float(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "symbols",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("symbol", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("symbol", name="uq_symbols_symbol"),
    )

    op.create_table(
        "tags",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(64), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("name", name="uq_tags_name"),
    )

    op.create_table(
        "portfolios",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("balance", sa.Float(), nullable=False, server_default="0"),
        sa.Column("is_testing", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )

    op.create_table(
        "portfolio_transactions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "portfolio_id",
            sa.Integer(),
            sa.ForeignKey("portfolios.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("type", sa.String(8), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("before_open", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("trade_id", sa.Integer(), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index(
        "ix_portfolio_transactions_portfolio_id",
        "portfolio_transactions",
        ["portfolio_id"],
    )

    op.create_table(
        "trades",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("portfolio_id", sa.Integer(), nullable=True),
        sa.Column("strategy_id", sa.Integer(), nullable=False),
        sa.Column("symbol_id", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(8), nullable=False),
        sa.Column("quantity", sa.Float(), nullable=False),
        sa.Column("entry_price", sa.Float(), nullable=False),
        sa.Column("exit_price", sa.Float(), nullable=True),
        sa.Column("stop_loss", sa.Float(), nullable=True),
        sa.Column("take_profit", sa.Float(), nullable=True),
        sa.Column("fees", sa.Float(), nullable=True, server_default="0"),
        sa.Column("pl", sa.Float(), nullable=True),
        sa.Column("planned_rr", sa.Float(), nullable=True),
        sa.Column("actual_rr", sa.Float(), nullable=True),
        sa.Column("returns", sa.Float(), nullable=True),
        sa.Column("trade_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("outcome", sa.String(16), nullable=False),
        sa.Column("status", sa.String(8), nullable=True),
        sa.Column("confidence_level", sa.Integer(), nullable=True),
        sa.Column("entry_reason", sa.Text(), nullable=False),
        sa.Column("exit_reason", sa.Text(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("photo", sa.String(512), nullable=True),
        sa.Column("timeframe_photos", sa.JSON(), nullable=False),
        sa.Column("entry_id", sa.Integer(), nullable=True),
        sa.Column("is_greed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_fomo", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("market_condition", sa.String(16), nullable=True),
        sa.Column("entry_execution", sa.String(16), nullable=True),
        sa.Column("exit_execution", sa.String(16), nullable=True),
        sa.Column("emotional_state", sa.JSON(), nullable=False),
        sa.Column("post_trade_thoughts", sa.Text(), nullable=True),
        sa.Column("rule_violations", sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_trades_portfolio_id", "trades", ["portfolio_id"])
    op.create_index("ix_trades_strategy_id", "trades", ["strategy_id"])
    op.create_index("ix_trades_symbol_id", "trades", ["symbol_id"])
    op.create_index("ix_trades_trade_date", "trades", ["trade_date"])

    op.create_table(
        "trade_tags",
        sa.Column(
            "trade_id",
            sa.Integer(),
            sa.ForeignKey("trades.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "tag_id",
            sa.Integer(),
            sa.ForeignKey("tags.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )

    op.create_table(
        "goals",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("goal_type", sa.String(16), nullable=False),
        sa.Column("target_amount", sa.Float(), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("portfolio_ids", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="ACTIVE"),
        sa.Column("is_status_edited", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("ix_goals_end_date", "goals", ["end_date"])

    op.create_table(
        "system_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("ts", sa.DateTime(timezone=True), nullable=False),
        sa.Column("level", sa.String(16), nullable=False),
        sa.Column("component", sa.String(64), nullable=False),
        sa.Column("message", sa.String(255), nullable=False),
        sa.Column("meta_json", sa.Text(), nullable=True),
    )
    op.create_index("ix_system_logs_ts", "system_logs", ["ts"])
    op.create_index("ix_system_logs_component", "system_logs", ["component"])


def downgrade() -> None:
    op.drop_index("ix_system_logs_component", table_name="system_logs")
    op.drop_index("ix_system_logs_ts", table_name="system_logs")
    op.drop_table("system_logs")
    op.drop_index("ix_goals_end_date", table_name="goals")
    op.drop_table("goals")
    op.drop_table("trade_tags")
    op.drop_index("ix_trades_trade_date", table_name="trades")
    op.drop_index("ix_trades_symbol_id", table_name="trades")
    op.drop_index("ix_trades_strategy_id", table_name="trades")
    op.drop_index("ix_trades_portfolio_id", table_name="trades")
    op.drop_table("trades")
    op.drop_index("ix_portfolio_transactions_portfolio_id", table_name="portfolio_transactions")
    op.drop_table("portfolio_transactions")
    op.drop_table("portfolios")
    op.drop_table("tags")
    op.drop_table("symbols")
