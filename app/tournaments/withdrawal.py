from __future__ import annotations

from datetime import datetime
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.core.principal import Principal
from app.db.repo.competitors_repo import CompetitorsRepo
from app.tournaments.errors import (
    CompetitorNotFoundError,
    MismatchedOwnershipError,
    TournamentForbiddenError,
    TransactionConflictError,
)
from app.tournaments.internal import get_tournament_for_update, parse_identifier
from app.tournaments.types import WithdrawalResult

logger = structlog.get_logger(__name__)


async def withdraw_competitor(
    session: AsyncSession,
    *,
    tournament_id: str | UUID,
    competitor_id: object,
    requester: Principal,
    now_utc: datetime,
) -> WithdrawalResult:
    resolved_tournament_id = parse_identifier(tournament_id)
    resolved_competitor_id = parse_identifier(
        competitor_id,
        message="Valid competitorId is required to withdraw",
    )

    tournament = await get_tournament_for_update(session, resolved_tournament_id)
    competitor = await CompetitorsRepo.get_by_id_for_update(session, resolved_competitor_id)
    if competitor is None:
        raise CompetitorNotFoundError
    if competitor.tournament_id != tournament.id:
        raise MismatchedOwnershipError
    if competitor.user_id != requester.id and not requester.is_admin:
        raise TournamentForbiddenError("You can only withdraw your own registration")

    member_id = str(competitor.id)
    tournament.competitor_ids = [item for item in tournament.competitor_ids if item != member_id]
    tournament.number_of_players = max(0, tournament.number_of_players - 1)
    tournament.updated_at = now_utc
    await CompetitorsRepo.delete(session, competitor=competitor)
    try:
        await session.flush()
    except StaleDataError as exc:
        raise TransactionConflictError from exc

    logger.info(
        "tournament_withdrawal_applied",
        tournament_id=str(tournament.id),
        competitor_id=member_id,
        requested_by=requester.id,
        number_of_players=tournament.number_of_players,
    )
    return WithdrawalResult(
        tournament_id=tournament.id,
        competitor_id=resolved_competitor_id,
        number_of_players=tournament.number_of_players,
    )
