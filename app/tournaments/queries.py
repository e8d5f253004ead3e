from __future__ import annotations

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.repo.competitors_repo import CompetitorsRepo
from app.db.repo.tournaments_repo import TournamentsRepo
from app.tournaments.constants import (
    TOURNAMENT_LIST_DEFAULT_LIMIT,
    TOURNAMENT_LIST_MAX_LIMIT,
    TOURNAMENT_STATUSES,
)
from app.tournaments.errors import (
    CompetitorNotFoundError,
    TournamentNotFoundError,
    TournamentValidationError,
)
from app.tournaments.internal import (
    build_competitor_snapshot,
    build_tournament_snapshot,
    build_tournament_view,
    parse_identifier,
)
from app.tournaments.types import CompetitorPage, CompetitorSnapshot, TournamentPage, TournamentView
from app.tournaments.validation import clean_optional


def _resolve_page(page: int, limit: int) -> tuple[int, int]:
    return max(1, int(page)), max(1, min(int(limit), TOURNAMENT_LIST_MAX_LIMIT))


async def get_tournament_view(session: AsyncSession, *, tournament_id: str | UUID) -> TournamentView:
    resolved_tournament_id = parse_identifier(tournament_id)
    tournament = await TournamentsRepo.get_by_id(session, resolved_tournament_id)
    if tournament is None:
        raise TournamentNotFoundError
    return await build_tournament_view(session, tournament)


async def list_participants(session: AsyncSession, *, tournament_id: str | UUID) -> TournamentView:
    return await get_tournament_view(session, tournament_id=tournament_id)


async def list_tournaments(
    session: AsyncSession,
    *,
    status: str | None = None,
    game_name: str | None = None,
    search: str | None = None,
    organizer_id: str | None = None,
    page: int = 1,
    limit: int = TOURNAMENT_LIST_DEFAULT_LIMIT,
) -> TournamentPage:
    """Newest-first page of tournaments.

    ``search`` is a case-insensitive substring match on the name; the other
    filters are exact matches.
    """
    resolved_status = clean_optional(status)
    if resolved_status is not None and resolved_status not in TOURNAMENT_STATUSES:
        raise TournamentValidationError(
            ["Status must be one of: " + ", ".join(sorted(TOURNAMENT_STATUSES))]
        )
    resolved_page, resolved_limit = _resolve_page(page, limit)

    rows, total = await TournamentsRepo.list_filtered(
        session,
        status=resolved_status,
        game_name=clean_optional(game_name),
        search=clean_optional(search),
        organizer_id=clean_optional(organizer_id),
        offset=(resolved_page - 1) * resolved_limit,
        limit=resolved_limit,
    )
    return TournamentPage(
        items=tuple(build_tournament_snapshot(row) for row in rows),
        total=total,
        page=resolved_page,
        limit=resolved_limit,
    )


async def get_competitor(session: AsyncSession, *, competitor_id: str | UUID) -> CompetitorSnapshot:
    resolved_competitor_id = parse_identifier(competitor_id, message="Invalid competitor ID")
    competitor = await CompetitorsRepo.get_by_id(session, resolved_competitor_id)
    if competitor is None:
        raise CompetitorNotFoundError
    return build_competitor_snapshot(competitor)


async def list_competitors(
    session: AsyncSession,
    *,
    game_name: str | None = None,
    page: int = 1,
    limit: int = TOURNAMENT_LIST_DEFAULT_LIMIT,
) -> CompetitorPage:
    resolved_page, resolved_limit = _resolve_page(page, limit)
    rows, total = await CompetitorsRepo.list_filtered(
        session,
        game_name=clean_optional(game_name),
        offset=(resolved_page - 1) * resolved_limit,
        limit=resolved_limit,
    )
    return CompetitorPage(
        items=tuple(build_competitor_snapshot(row) for row in rows),
        total=total,
        page=resolved_page,
        limit=resolved_limit,
    )


async def list_competitor_games(session: AsyncSession) -> list[str]:
    return await CompetitorsRepo.list_game_names(session)
