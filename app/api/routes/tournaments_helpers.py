from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status

from app.tournaments.constants import TOURNAMENT_STATUS_UPCOMING
from app.tournaments.errors import (
    AlreadyRegisteredError,
    CompetitorNotFoundError,
    InvalidIdentifierError,
    MismatchedOwnershipError,
    MissingTeamNameError,
    RegistrationClosedError,
    StoreUnavailableError,
    TournamentError,
    TournamentForbiddenError,
    TournamentFullError,
    TournamentNotFoundError,
    TournamentValidationError,
    TransactionConflictError,
)
from app.tournaments.types import CompetitorSnapshot, TournamentSnapshot, TournamentView

from .tournaments_models import CompetitorResponse, TournamentResponse, TournamentSummary

ERROR_STATUS_CODES: dict[type[TournamentError], int] = {
    InvalidIdentifierError: status.HTTP_400_BAD_REQUEST,
    RegistrationClosedError: status.HTTP_400_BAD_REQUEST,
    TournamentFullError: status.HTTP_400_BAD_REQUEST,
    AlreadyRegisteredError: status.HTTP_400_BAD_REQUEST,
    MissingTeamNameError: status.HTTP_400_BAD_REQUEST,
    TournamentValidationError: status.HTTP_400_BAD_REQUEST,
    MismatchedOwnershipError: status.HTTP_400_BAD_REQUEST,
    TournamentNotFoundError: status.HTTP_404_NOT_FOUND,
    CompetitorNotFoundError: status.HTTP_404_NOT_FOUND,
    TournamentForbiddenError: status.HTTP_403_FORBIDDEN,
    TransactionConflictError: status.HTTP_409_CONFLICT,
    StoreUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def _as_http_error(exc: TournamentError) -> HTTPException:
    detail: dict[str, Any] = {"success": False, "code": exc.code, "message": exc.message}
    if isinstance(exc, TournamentValidationError):
        detail["errors"] = exc.errors
    return HTTPException(
        status_code=ERROR_STATUS_CODES.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR),
        detail=detail,
    )


def _competitor_response(snapshot: CompetitorSnapshot) -> CompetitorResponse:
    return CompetitorResponse(
        id=snapshot.competitor_id,
        tournament_id=snapshot.tournament_id,
        user_id=snapshot.user_id,
        name=snapshot.name,
        logo_url=snapshot.logo_url,
        description=snapshot.description,
        mail=snapshot.mail,
        created_at=snapshot.created_at,
    )


def _tournament_response(
    snapshot: TournamentSnapshot,
    *,
    competitors: tuple[CompetitorSnapshot, ...] | None = None,
) -> TournamentResponse:
    return TournamentResponse(
        id=snapshot.tournament_id,
        name=snapshot.name,
        game_name=snapshot.game_name,
        format=snapshot.format,
        description=snapshot.description,
        avatar_url=snapshot.avatar_url,
        organizer_id=snapshot.organizer_id,
        status=snapshot.status,
        start_date=snapshot.start_date,
        end_date=snapshot.end_date,
        number_of_players=snapshot.number_of_players,
        max_players=snapshot.max_players,
        is_full=snapshot.is_full,
        is_open_for_registration=(
            snapshot.status == TOURNAMENT_STATUS_UPCOMING and not snapshot.is_full
        ),
        competitor_ids=list(snapshot.competitor_ids),
        competitors=(
            None if competitors is None else [_competitor_response(item) for item in competitors]
        ),
        created_at=snapshot.created_at,
        updated_at=snapshot.updated_at,
    )


def _view_response(view: TournamentView) -> TournamentResponse:
    return _tournament_response(view.snapshot, competitors=view.competitors)


def _summary_response(snapshot: TournamentSnapshot) -> TournamentSummary:
    return TournamentSummary(
        id=snapshot.tournament_id,
        name=snapshot.name,
        status=snapshot.status,
        number_of_players=snapshot.number_of_players,
        max_players=snapshot.max_players,
    )
