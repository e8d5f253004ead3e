from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.principal import Principal
from app.db.models.competitors import Competitor
from app.db.models.tournaments import Tournament
from app.db.repo.competitors_repo import CompetitorsRepo
from app.db.repo.tournaments_repo import TournamentsRepo
from app.tournaments.errors import (
    InvalidIdentifierError,
    TournamentForbiddenError,
    TournamentNotFoundError,
)
from app.tournaments.types import (
    CompetitorSnapshot,
    TournamentFields,
    TournamentSnapshot,
    TournamentView,
)

UTC = timezone.utc


def parse_identifier(raw_value: object, *, message: str | None = None) -> UUID:
    if isinstance(raw_value, UUID):
        return raw_value
    if not isinstance(raw_value, str) or not raw_value.strip():
        raise InvalidIdentifierError(message)
    try:
        return UUID(raw_value.strip())
    except ValueError as exc:
        raise InvalidIdentifierError(message) from exc


def as_utc(value: datetime | None) -> datetime | None:
    # SQLite hands timezone-aware columns back as naive values.
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def build_competitor_snapshot(competitor: Competitor) -> CompetitorSnapshot:
    return CompetitorSnapshot(
        competitor_id=competitor.id,
        tournament_id=competitor.tournament_id,
        user_id=competitor.user_id,
        name=competitor.name,
        logo_url=competitor.logo_url,
        description=competitor.description,
        mail=competitor.mail,
        created_at=as_utc(competitor.created_at),
    )


def build_tournament_snapshot(tournament: Tournament) -> TournamentSnapshot:
    return TournamentSnapshot(
        tournament_id=tournament.id,
        name=tournament.name,
        game_name=tournament.game_name,
        format=tournament.format,
        description=tournament.description,
        avatar_url=tournament.avatar_url,
        organizer_id=tournament.organizer_id,
        status=tournament.status,
        start_date=as_utc(tournament.start_date),
        end_date=as_utc(tournament.end_date),
        number_of_players=int(tournament.number_of_players),
        max_players=tournament.max_players,
        competitor_ids=tuple(UUID(item) for item in tournament.competitor_ids),
        created_at=as_utc(tournament.created_at),
        updated_at=as_utc(tournament.updated_at),
    )


def tournament_fields_of(tournament: Tournament) -> TournamentFields:
    return TournamentFields(
        name=tournament.name,
        game_name=tournament.game_name,
        format=tournament.format,
        description=tournament.description,
        avatar_url=tournament.avatar_url,
        start_date=as_utc(tournament.start_date),
        end_date=as_utc(tournament.end_date),
        status=tournament.status,
        max_players=tournament.max_players,
    )


async def get_tournament_for_update(session: AsyncSession, tournament_id: UUID) -> Tournament:
    tournament = await TournamentsRepo.get_by_id_for_update(session, tournament_id)
    if tournament is None:
        raise TournamentNotFoundError
    return tournament


def ensure_can_manage(tournament: Tournament, *, requester: Principal) -> None:
    if requester.is_admin or tournament.organizer_id == requester.id:
        return
    raise TournamentForbiddenError("You can only manage your own tournaments")


async def build_tournament_view(session: AsyncSession, tournament: Tournament) -> TournamentView:
    member_ids = [UUID(item) for item in tournament.competitor_ids]
    rows = await CompetitorsRepo.list_by_ids(session, member_ids)
    by_id = {row.id: row for row in rows}
    competitors = tuple(
        build_competitor_snapshot(by_id[member_id]) for member_id in member_ids if member_id in by_id
    )
    return TournamentView(snapshot=build_tournament_snapshot(tournament), competitors=competitors)
