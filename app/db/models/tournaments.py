from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import JSON, CheckConstraint, DateTime, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class Tournament(Base):
    __tablename__ = "tournaments"
    __table_args__ = (
        CheckConstraint(
            "status IN ('upcoming','ongoing','completed')",
            name="ck_tournaments_status",
        ),
        CheckConstraint(
            "format IN ('single-elimination','double-elimination','group-stage')",
            name="ck_tournaments_format",
        ),
        CheckConstraint(
            "number_of_players >= 0",
            name="ck_tournaments_number_of_players_non_negative",
        ),
        CheckConstraint(
            "max_players IS NULL OR max_players >= 1",
            name="ck_tournaments_max_players_positive",
        ),
        CheckConstraint(
            "max_players IS NULL OR number_of_players <= max_players",
            name="ck_tournaments_capacity",
        ),
        Index("idx_tournaments_status_start_date", "status", "start_date"),
        Index("idx_tournaments_organizer_id", "organizer_id"),
        Index("idx_tournaments_game_name", "game_name"),
    )

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    game_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    format: Mapped[str] = mapped_column(String(32), nullable=False)
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    organizer_id: Mapped[str] = mapped_column(String(64), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    start_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    number_of_players: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_players: Mapped[int | None] = mapped_column(Integer, nullable=True)
    # Ordered competitor ids (as strings); always the same length as number_of_players.
    competitor_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __mapper_args__ = {"version_id_col": version}
