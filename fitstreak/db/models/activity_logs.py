from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import BigInteger, CheckConstraint, Date, DateTime, ForeignKey, Index, Integer, String, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from fitstreak.db.models.base import Base


class ActivityLog(Base):
    __tablename__ = "activity_logs"
    __table_args__ = (
        CheckConstraint(
            "activity_type IN ('gym_workout','custom_activity','daily_checkin','excuse_logged')",
            name="ck_activity_logs_activity_type",
        ),
        CheckConstraint("status IN ('attended','skipped')", name="ck_activity_logs_status"),
        CheckConstraint("xp_awarded >= 0", name="ck_activity_logs_xp_non_negative"),
        CheckConstraint("gems_awarded >= 0", name="ck_activity_logs_gems_non_negative"),
        Index("idx_activity_logs_user_date", "user_id", "activity_date"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    user_id: Mapped[str] = mapped_column(String(128), ForeignKey("users.id"), nullable=False)
    activity_type: Mapped[str] = mapped_column(String(32), nullable=False)
    activity_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    xp_awarded: Mapped[int] = mapped_column(Integer, nullable=False)
    gems_awarded: Mapped[int] = mapped_column(Integer, nullable=False)
    details: Mapped[dict[str, object]] = mapped_column(
        JSONB,
        nullable=False,
        server_default=text("'{}'::jsonb"),
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
