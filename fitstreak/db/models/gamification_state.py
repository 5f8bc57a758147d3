from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Boolean, CheckConstraint, Date, DateTime, ForeignKey, Index, Integer, String, text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from fitstreak.db.models.base import Base


class GamificationState(Base):
    __tablename__ = "gamification_state"
    __table_args__ = (
        CheckConstraint("current_streak >= 0", name="ck_gamification_state_current_streak_non_negative"),
        CheckConstraint("longest_streak >= 0", name="ck_gamification_state_longest_streak_non_negative"),
        CheckConstraint("gems_balance >= 0", name="ck_gamification_state_gems_non_negative"),
        CheckConstraint("xp_total >= 0", name="ck_gamification_state_xp_total_non_negative"),
        CheckConstraint("xp_weekly >= 0", name="ck_gamification_state_xp_weekly_non_negative"),
        CheckConstraint("streak_freezes >= 0", name="ck_gamification_state_freezes_non_negative"),
        CheckConstraint(
            "lost_streak_value IS NULL OR lost_streak_value >= 0",
            name="ck_gamification_state_lost_streak_non_negative",
        ),
        Index("idx_gamification_reconcile_due", "last_reconciled_date", "user_id"),
        Index("idx_gamification_last_activity", "last_activity_date"),
    )

    user_id: Mapped[str] = mapped_column(String(128), ForeignKey("users.id"), primary_key=True)
    current_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    longest_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_activity_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    gems_balance: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    xp_total: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    xp_weekly: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    streak_freezes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_streak_protected: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )
    # Date arrays are reassigned as whole lists; ARRAY columns do not track in-place mutation.
    streak_freeze_usage_dates: Mapped[list[date]] = mapped_column(
        ARRAY(Date),
        nullable=False,
        default=list,
        server_default=text("'{}'::date[]"),
    )
    streak_repair_dates: Mapped[list[date]] = mapped_column(
        ARRAY(Date),
        nullable=False,
        default=list,
        server_default=text("'{}'::date[]"),
    )
    streak_reset_dates: Mapped[list[date]] = mapped_column(
        ARRAY(Date),
        nullable=False,
        default=list,
        server_default=text("'{}'::date[]"),
    )
    lost_streak_value: Mapped[int | None] = mapped_column(Integer, nullable=True)
    lost_streak_timestamp: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_reconciled_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __mapper_args__ = {
        "version_id_col": version,
    }
