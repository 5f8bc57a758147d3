from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import BigInteger, CheckConstraint, Date, DateTime, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from fitstreak.db.models.base import Base


class ReconciliationRun(Base):
    __tablename__ = "reconciliation_runs"
    __table_args__ = (
        CheckConstraint(
            "status IN ('OK','PARTIAL_FAILURE')",
            name="ck_reconciliation_runs_status",
        ),
        Index("idx_reconciliation_runs_run_date", "run_date"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    run_date: Mapped[date] = mapped_column(Date, nullable=False)
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    finished_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False)
    users_examined: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    users_updated: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    users_failed: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
