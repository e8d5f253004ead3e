from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Uuid, func, text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class Match(Base):
    __tablename__ = "matches"
    __table_args__ = (
        CheckConstraint("status IN ('pending','done')", name="ck_matches_status"),
        CheckConstraint("score_a >= 0 AND score_b >= 0", name="ck_matches_scores_non_negative"),
        Index("idx_matches_tournament_scheduled_at", "tournament_id", "scheduled_at"),
    )

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    tournament_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("tournaments.id", ondelete="CASCADE"),
        nullable=False,
    )
    competitor_a_id: Mapped[UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)
    competitor_b_id: Mapped[UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)
    scheduled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    score_a: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    score_b: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    status: Mapped[str] = mapped_column(String(16), nullable=False, server_default="pending")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
