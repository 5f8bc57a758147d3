"""g1_gamification_core

Revision ID: 3c1f8a2d7b40
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "3c1f8a2d7b40"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(128), primary_key=True),
        sa.Column("username", sa.Text(), nullable=True),
        sa.Column("preferred_language", sa.String(8), nullable=False, server_default=sa.text("'en'")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("idx_users_username", "users", ["username"])
    op.create_index("idx_users_created_at", "users", ["created_at"])

    op.create_table(
        "gamification_state",
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("current_streak", sa.Integer(), nullable=False),
        sa.Column("longest_streak", sa.Integer(), nullable=False),
        sa.Column("last_activity_date", sa.Date(), nullable=True),
        sa.Column("gems_balance", sa.Integer(), nullable=False),
        sa.Column("xp_total", sa.Integer(), nullable=False),
        sa.Column("xp_weekly", sa.Integer(), nullable=False),
        sa.Column("streak_freezes", sa.Integer(), nullable=False),
        sa.Column("is_streak_protected", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column(
            "streak_freeze_usage_dates",
            postgresql.ARRAY(sa.Date()),
            nullable=False,
            server_default=sa.text("'{}'::date[]"),
        ),
        sa.Column(
            "streak_repair_dates",
            postgresql.ARRAY(sa.Date()),
            nullable=False,
            server_default=sa.text("'{}'::date[]"),
        ),
        sa.Column(
            "streak_reset_dates",
            postgresql.ARRAY(sa.Date()),
            nullable=False,
            server_default=sa.text("'{}'::date[]"),
        ),
        sa.Column("lost_streak_value", sa.Integer(), nullable=True),
        sa.Column("lost_streak_timestamp", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_reconciled_date", sa.Date(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("current_streak >= 0", name="ck_gamification_state_current_streak_non_negative"),
        sa.CheckConstraint("longest_streak >= 0", name="ck_gamification_state_longest_streak_non_negative"),
        sa.CheckConstraint("gems_balance >= 0", name="ck_gamification_state_gems_non_negative"),
        sa.CheckConstraint("xp_total >= 0", name="ck_gamification_state_xp_total_non_negative"),
        sa.CheckConstraint("xp_weekly >= 0", name="ck_gamification_state_xp_weekly_non_negative"),
        sa.CheckConstraint("streak_freezes >= 0", name="ck_gamification_state_freezes_non_negative"),
        sa.CheckConstraint(
            "lost_streak_value IS NULL OR lost_streak_value >= 0",
            name="ck_gamification_state_lost_streak_non_negative",
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("user_id"),
    )
    op.create_index(
        "idx_gamification_reconcile_due",
        "gamification_state",
        ["last_reconciled_date", "user_id"],
    )
    op.create_index("idx_gamification_last_activity", "gamification_state", ["last_activity_date"])

    op.create_table(
        "shop_items",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("cost_in_gems", sa.Integer(), nullable=False),
        sa.Column("category", sa.String(32), nullable=False),
        sa.Column("item_type", sa.String(32), nullable=False),
        sa.Column("is_disabled", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("image_url", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("cost_in_gems > 0", name="ck_shop_items_cost_positive"),
        sa.CheckConstraint("item_type IN ('consumable','permanent_unlock')", name="ck_shop_items_item_type"),
    )
    op.create_index("idx_shop_items_listing", "shop_items", ["is_disabled", "cost_in_gems"])

    op.create_table(
        "owned_items",
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("shop_item_id", sa.String(64), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("purchased_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.CheckConstraint("quantity >= 0", name="ck_owned_items_quantity_non_negative"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("user_id", "shop_item_id"),
    )

    op.create_table(
        "ledger_entries",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("entry_type", sa.String(32), nullable=False),
        sa.Column("asset", sa.String(32), nullable=False),
        sa.Column("direction", sa.String(8), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("balance_after", sa.Integer(), nullable=True),
        sa.Column("source", sa.String(32), nullable=False),
        sa.Column("item_id", sa.String(64), nullable=True),
        sa.Column(
            "metadata",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("amount > 0", name="ck_ledger_entries_amount_positive"),
        sa.CheckConstraint(
            "asset IN ('GEMS','XP','STREAK_FREEZE','SHOP_ITEM')",
            name="ck_ledger_entries_asset",
        ),
        sa.CheckConstraint("direction IN ('CREDIT','DEBIT')", name="ck_ledger_entries_direction"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
    )
    op.create_index("idx_ledger_user_created", "ledger_entries", ["user_id", "created_at"])
    op.create_index("idx_ledger_type", "ledger_entries", ["entry_type"])

    op.create_table(
        "activity_logs",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("activity_type", sa.String(32), nullable=False),
        sa.Column("activity_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("xp_awarded", sa.Integer(), nullable=False),
        sa.Column("gems_awarded", sa.Integer(), nullable=False),
        sa.Column(
            "details",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "activity_type IN ('gym_workout','custom_activity','daily_checkin','excuse_logged')",
            name="ck_activity_logs_activity_type",
        ),
        sa.CheckConstraint("status IN ('attended','skipped')", name="ck_activity_logs_status"),
        sa.CheckConstraint("xp_awarded >= 0", name="ck_activity_logs_xp_non_negative"),
        sa.CheckConstraint("gems_awarded >= 0", name="ck_activity_logs_gems_non_negative"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
    )
    op.create_index("idx_activity_logs_user_date", "activity_logs", ["user_id", "activity_date"])

    op.create_table(
        "reconciliation_runs",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("run_date", sa.Date(), nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("finished_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("users_examined", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("users_updated", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("users_failed", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.CheckConstraint("status IN ('OK','PARTIAL_FAILURE')", name="ck_reconciliation_runs_status"),
    )
    op.create_index("idx_reconciliation_runs_run_date", "reconciliation_runs", ["run_date"])


def downgrade() -> None:
    op.drop_index("idx_reconciliation_runs_run_date", table_name="reconciliation_runs")
    op.drop_table("reconciliation_runs")
    op.drop_index("idx_activity_logs_user_date", table_name="activity_logs")
    op.drop_table("activity_logs")
    op.drop_index("idx_ledger_type", table_name="ledger_entries")
    op.drop_index("idx_ledger_user_created", table_name="ledger_entries")
    op.drop_table("ledger_entries")
    op.drop_table("owned_items")
    op.drop_index("idx_shop_items_listing", table_name="shop_items")
    op.drop_table("shop_items")
    op.drop_index("idx_gamification_last_activity", table_name="gamification_state")
    op.drop_index("idx_gamification_reconcile_due", table_name="gamification_state")
    op.drop_table("gamification_state")
    op.drop_index("idx_users_created_at", table_name="users")
    op.drop_index("idx_users_username", table_name="users")
    op.drop_table("users")
