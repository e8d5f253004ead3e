from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.core.principal import Principal
from app.db.models.competitors import Competitor
from app.db.repo.competitors_repo import CompetitorsRepo
from app.tournaments.constants import TOURNAMENT_STATUS_UPCOMING
from app.tournaments.errors import (
    AlreadyRegisteredError,
    RegistrationClosedError,
    TournamentFullError,
    TransactionConflictError,
)
from app.tournaments.internal import (
    build_competitor_snapshot,
    build_tournament_view,
    get_tournament_for_update,
    parse_identifier,
)
from app.tournaments.types import CompetitorProfile, RegistrationResult
from app.tournaments.validation import resolve_competitor_fields

logger = structlog.get_logger(__name__)


async def register_competitor(
    session: AsyncSession,
    *,
    tournament_id: str | UUID,
    requester: Principal,
    profile: CompetitorProfile,
    now_utc: datetime,
) -> RegistrationResult:
    """Create a competitor for ``requester`` and link it to the tournament.

    Must run inside a single transaction. The tournament row is locked for the
    duration and its write is version-checked, so a concurrent registration
    against the same tournament either waits for this one or fails with
    ``TransactionConflictError`` instead of overshooting ``max_players``.
    """
    resolved_tournament_id = parse_identifier(tournament_id)
    tournament = await get_tournament_for_update(session, resolved_tournament_id)
    if tournament.status != TOURNAMENT_STATUS_UPCOMING:
        raise RegistrationClosedError
    if tournament.max_players is not None and tournament.number_of_players >= tournament.max_players:
        raise TournamentFullError

    existing = await CompetitorsRepo.get_for_tournament_user(
        session,
        tournament_id=tournament.id,
        user_id=requester.id,
    )
    if existing is not None:
        raise AlreadyRegisteredError

    fields = resolve_competitor_fields(profile, requester=requester)
    try:
        competitor = await CompetitorsRepo.create(
            session,
            competitor=Competitor(
                id=uuid4(),
                tournament_id=tournament.id,
                user_id=requester.id,
                name=fields.name,
                logo_url=fields.logo_url,
                description=fields.description,
                mail=fields.mail,
                created_at=now_utc,
            ),
        )
    except IntegrityError as exc:
        raise AlreadyRegisteredError from exc

    tournament.competitor_ids = [*tournament.competitor_ids, str(competitor.id)]
    tournament.number_of_players = tournament.number_of_players + 1
    tournament.updated_at = now_utc
    try:
        await session.flush()
    except StaleDataError as exc:
        raise TransactionConflictError from exc
    except IntegrityError as exc:
        # Capacity check constraint: another writer filled the last slot.
        raise TournamentFullError from exc

    logger.info(
        "tournament_registration_applied",
        tournament_id=str(tournament.id),
        competitor_id=str(competitor.id),
        user_id=requester.id,
        number_of_players=tournament.number_of_players,
    )
    return RegistrationResult(
        competitor=build_competitor_snapshot(competitor),
        tournament=await build_tournament_view(session, tournament),
    )
