from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.core.principal import Principal
from app.db.models.tournaments import Tournament
from app.db.repo.competitors_repo import CompetitorsRepo
from app.db.repo.matches_repo import MatchesRepo
from app.db.repo.tournaments_repo import TournamentsRepo
from app.tournaments.constants import TOURNAMENT_CREATOR_ROLES, TOURNAMENT_STATUS_UPCOMING
from app.tournaments.errors import (
    TournamentForbiddenError,
    TournamentValidationError,
    TransactionConflictError,
)
from app.tournaments.internal import (
    build_tournament_snapshot,
    build_tournament_view,
    ensure_can_manage,
    get_tournament_for_update,
    parse_identifier,
    tournament_fields_of,
)
from app.tournaments.types import TournamentDeletionResult, TournamentFields, TournamentView
from app.tournaments.validation import validate_tournament_fields

logger = structlog.get_logger(__name__)

# Membership and number_of_players are owned by registration/withdrawal only.
EDITABLE_TOURNAMENT_FIELDS = frozenset(
    {
        "name",
        "game_name",
        "format",
        "description",
        "avatar_url",
        "start_date",
        "end_date",
        "status",
        "max_players",
    }
)


async def create_tournament(
    session: AsyncSession,
    *,
    organizer: Principal,
    fields: TournamentFields,
    now_utc: datetime,
) -> TournamentView:
    if organizer.role not in TOURNAMENT_CREATOR_ROLES:
        raise TournamentForbiddenError("Only organizers can create tournaments")

    validated = validate_tournament_fields(
        replace(fields, status=TOURNAMENT_STATUS_UPCOMING),
        now_utc=now_utc,
        require_future_start=True,
    )
    tournament = await TournamentsRepo.create(
        session,
        tournament=Tournament(
            id=uuid4(),
            name=validated.name,
            game_name=validated.game_name,
            format=validated.format,
            description=validated.description,
            avatar_url=validated.avatar_url,
            organizer_id=organizer.id,
            status=validated.status,
            start_date=validated.start_date,
            end_date=validated.end_date,
            number_of_players=0,
            max_players=validated.max_players,
            competitor_ids=[],
            created_at=now_utc,
            updated_at=now_utc,
        ),
    )
    logger.info(
        "tournament_created",
        tournament_id=str(tournament.id),
        organizer_id=organizer.id,
        max_players=tournament.max_players,
    )
    return TournamentView(snapshot=build_tournament_snapshot(tournament), competitors=())


async def update_tournament(
    session: AsyncSession,
    *,
    tournament_id: str | UUID,
    requester: Principal,
    changes: Mapping[str, Any],
    now_utc: datetime,
) -> TournamentView:
    resolved_tournament_id = parse_identifier(tournament_id)
    tournament = await get_tournament_for_update(session, resolved_tournament_id)
    ensure_can_manage(tournament, requester=requester)

    applied = {key: value for key, value in changes.items() if key in EDITABLE_TOURNAMENT_FIELDS}
    if not applied:
        return await build_tournament_view(session, tournament)

    validated = validate_tournament_fields(
        replace(tournament_fields_of(tournament), **applied),
        now_utc=now_utc,
        number_of_players=tournament.number_of_players,
        require_future_start=applied.get("start_date") is not None,
    )
    for key in applied:
        setattr(tournament, key, getattr(validated, key))
    tournament.updated_at = now_utc
    try:
        await session.flush()
    except StaleDataError as exc:
        raise TransactionConflictError from exc
    except IntegrityError as exc:
        raise TournamentValidationError(
            ["Maximum players cannot be less than current number of players"]
        ) from exc

    logger.info(
        "tournament_updated",
        tournament_id=str(tournament.id),
        updated_by=requester.id,
        fields=sorted(applied),
    )
    return await build_tournament_view(session, tournament)


async def update_tournament_status(
    session: AsyncSession,
    *,
    tournament_id: str | UUID,
    requester: Principal,
    status: str,
    now_utc: datetime,
) -> TournamentView:
    return await update_tournament(
        session,
        tournament_id=tournament_id,
        requester=requester,
        changes={"status": status},
        now_utc=now_utc,
    )


async def delete_tournament(
    session: AsyncSession,
    *,
    tournament_id: str | UUID,
    requester: Principal,
) -> TournamentDeletionResult:
    """Delete a tournament together with its matches and competitors."""
    resolved_tournament_id = parse_identifier(tournament_id)
    tournament = await get_tournament_for_update(session, resolved_tournament_id)
    ensure_can_manage(tournament, requester=requester)

    matches_deleted = await MatchesRepo.delete_for_tournament(
        session,
        tournament_id=tournament.id,
    )
    competitors_deleted = await CompetitorsRepo.delete_for_tournament(
        session,
        tournament_id=tournament.id,
        competitor_ids=[UUID(item) for item in tournament.competitor_ids],
    )
    try:
        await TournamentsRepo.delete(session, tournament=tournament)
    except StaleDataError as exc:
        raise TransactionConflictError from exc

    logger.info(
        "tournament_deleted",
        tournament_id=str(resolved_tournament_id),
        deleted_by=requester.id,
        competitors_deleted=competitors_deleted,
        matches_deleted=matches_deleted,
    )
    return TournamentDeletionResult(
        tournament_id=resolved_tournament_id,
        competitors_deleted=competitors_deleted,
        matches_deleted=matches_deleted,
    )
