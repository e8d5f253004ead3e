"""m1_tournament_registry_core

Revision ID: 5c1e7a9d2b40
Revises:
Create Date: 2026-10-19 10:00:00.000000
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "5c1e7a9d2b40"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "tournaments",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("game_name", sa.String(50), nullable=True),
        sa.Column("format", sa.String(32), nullable=False),
        sa.Column("description", sa.String(1000), nullable=True),
        sa.Column("avatar_url", sa.String(512), nullable=True),
        sa.Column("organizer_id", sa.String(64), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("number_of_players", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("max_players", sa.Integer(), nullable=True),
        sa.Column("competitor_ids", sa.JSON(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "status IN ('upcoming','ongoing','completed')",
            name="ck_tournaments_status",
        ),
        sa.CheckConstraint(
            "format IN ('single-elimination','double-elimination','group-stage')",
            name="ck_tournaments_format",
        ),
        sa.CheckConstraint(
            "number_of_players >= 0",
            name="ck_tournaments_number_of_players_non_negative",
        ),
        sa.CheckConstraint(
            "max_players IS NULL OR max_players >= 1",
            name="ck_tournaments_max_players_positive",
        ),
        sa.CheckConstraint(
            "max_players IS NULL OR number_of_players <= max_players",
            name="ck_tournaments_capacity",
        ),
    )
    op.create_index("idx_tournaments_status_start_date", "tournaments", ["status", "start_date"])
    op.create_index("idx_tournaments_organizer_id", "tournaments", ["organizer_id"])
    op.create_index("idx_tournaments_game_name", "tournaments", ["game_name"])

    op.create_table(
        "competitors",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("tournament_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("logo_url", sa.String(512), nullable=True),
        sa.Column("description", sa.String(1000), nullable=True),
        sa.Column("mail", sa.String(254), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["tournament_id"], ["tournaments.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("tournament_id", "user_id", name="uq_competitors_tournament_user"),
    )
    op.create_index("idx_competitors_user_id", "competitors", ["user_id"])

    op.create_table(
        "matches",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("tournament_id", sa.Uuid(), nullable=False),
        sa.Column("competitor_a_id", sa.Uuid(), nullable=True),
        sa.Column("competitor_b_id", sa.Uuid(), nullable=True),
        sa.Column("scheduled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("score_a", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("score_b", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("status", sa.String(16), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("status IN ('pending','done')", name="ck_matches_status"),
        sa.CheckConstraint("score_a >= 0 AND score_b >= 0", name="ck_matches_scores_non_negative"),
        sa.ForeignKeyConstraint(["tournament_id"], ["tournaments.id"], ondelete="CASCADE"),
    )
    op.create_index(
        "idx_matches_tournament_scheduled_at",
        "matches",
        ["tournament_id", "scheduled_at"],
    )


def downgrade() -> None:
    op.drop_index("idx_matches_tournament_scheduled_at", table_name="matches")
    op.drop_table("matches")
    op.drop_index("idx_competitors_user_id", table_name="competitors")
    op.drop_table("competitors")
    op.drop_index("idx_tournaments_game_name", table_name="tournaments")
    op.drop_index("idx_tournaments_organizer_id", table_name="tournaments")
    op.drop_index("idx_tournaments_status_start_date", table_name="tournaments")
    op.drop_table("tournaments")
