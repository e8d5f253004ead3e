from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.principal import Principal
from app.db.session import get_session_factory
from app.services.gateway_auth import require_principal
from app.tournaments.constants import (
    TOURNAMENT_FORMAT_SINGLE_ELIMINATION,
    TOURNAMENT_LIST_DEFAULT_LIMIT,
    TOURNAMENT_LIST_MAX_LIMIT,
)
from app.tournaments.errors import TournamentError
from app.tournaments.service import (
    create_tournament,
    delete_tournament,
    get_tournament_view,
    list_participants,
    list_tournaments,
    register_competitor,
    run_in_transaction,
    update_tournament,
    update_tournament_status,
    withdraw_competitor,
)
from app.tournaments.types import CompetitorProfile, TournamentFields

from .tournaments_helpers import (
    _as_http_error,
    _competitor_response,
    _summary_response,
    _tournament_response,
    _view_response,
)
from .tournaments_models import (
    MessageResponse,
    ParticipantsData,
    ParticipantsEnvelope,
    RegisterRequest,
    RegistrationData,
    RegistrationEnvelope,
    TournamentCreateRequest,
    TournamentData,
    TournamentEnvelope,
    TournamentListData,
    TournamentListEnvelope,
    TournamentStatusRequest,
    TournamentUpdateRequest,
    WithdrawRequest,
)

router = APIRouter(prefix="/tournaments", tags=["tournaments"])

SessionFactory = async_sessionmaker[AsyncSession]


@router.get("", response_model=TournamentListEnvelope)
async def list_tournaments_route(
    status_filter: str | None = Query(default=None, alias="status"),
    game_name: str | None = Query(default=None, alias="gameName"),
    q: str | None = Query(default=None),
    organizer_id: str | None = Query(default=None, alias="organizerId"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=TOURNAMENT_LIST_DEFAULT_LIMIT, ge=1, le=TOURNAMENT_LIST_MAX_LIMIT),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> TournamentListEnvelope:
    try:
        result = await run_in_transaction(
            session_factory,
            lambda session: list_tournaments(
                session,
                status=status_filter,
                game_name=game_name,
                search=q,
                organizer_id=organizer_id,
                page=page,
                limit=limit,
            ),
            operation="list_tournaments",
        )
    except TournamentError as exc:
        raise _as_http_error(exc) from exc

    return TournamentListEnvelope(
        data=TournamentListData(
            tournaments=[_tournament_response(item) for item in result.items],
            total=result.total,
            page=result.page,
            limit=result.limit,
        )
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=TournamentEnvelope,
)
async def create_tournament_route(
    payload: TournamentCreateRequest,
    principal: Principal = Depends(require_principal),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> TournamentEnvelope:
    now_utc = datetime.now(timezone.utc)
    fields = TournamentFields(
        name=payload.name or "",
        game_name=payload.game_name,
        format=payload.format or TOURNAMENT_FORMAT_SINGLE_ELIMINATION,
        description=payload.description,
        avatar_url=payload.avatar_url,
        start_date=payload.start_date,
        end_date=payload.end_date,
        max_players=payload.max_players,
    )
    try:
        view = await run_in_transaction(
            session_factory,
            lambda session: create_tournament(
                session,
                organizer=principal,
                fields=fields,
                now_utc=now_utc,
            ),
            operation="create_tournament",
        )
    except TournamentError as exc:
        raise _as_http_error(exc) from exc

    return TournamentEnvelope(
        message="Tournament created successfully",
        data=TournamentData(tournament=_view_response(view)),
    )


@router.get("/{tournament_id}", response_model=TournamentEnvelope)
async def get_tournament_route(
    tournament_id: str,
    session_factory: SessionFactory = Depends(get_session_factory),
) -> TournamentEnvelope:
    try:
        view = await run_in_transaction(
            session_factory,
            lambda session: get_tournament_view(session, tournament_id=tournament_id),
            operation="get_tournament",
        )
    except TournamentError as exc:
        raise _as_http_error(exc) from exc

    return TournamentEnvelope(
        message="Tournament retrieved successfully",
        data=TournamentData(tournament=_view_response(view)),
    )


@router.get(
    "/{tournament_id}/participants",
    response_model=ParticipantsEnvelope,
)
async def list_participants_route(
    tournament_id: str,
    session_factory: SessionFactory = Depends(get_session_factory),
) -> ParticipantsEnvelope:
    try:
        view = await run_in_transaction(
            session_factory,
            lambda session: list_participants(session, tournament_id=tournament_id),
            operation="list_participants",
        )
    except TournamentError as exc:
        raise _as_http_error(exc) from exc

    return ParticipantsEnvelope(
        data=ParticipantsData(
            competitors=[_competitor_response(item) for item in view.competitors],
            total=len(view.competitors),
            tournament=_summary_response(view.snapshot),
        )
    )


@router.put("/{tournament_id}", response_model=TournamentEnvelope)
async def update_tournament_route(
    tournament_id: str,
    payload: TournamentUpdateRequest,
    principal: Principal = Depends(require_principal),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> TournamentEnvelope:
    now_utc = datetime.now(timezone.utc)
    changes = payload.model_dump(exclude_unset=True)
    try:
        view = await run_in_transaction(
            session_factory,
            lambda session: update_tournament(
                session,
                tournament_id=tournament_id,
                requester=principal,
                changes=changes,
                now_utc=now_utc,
            ),
            operation="update_tournament",
        )
    except TournamentError as exc:
        raise _as_http_error(exc) from exc

    return TournamentEnvelope(
        message="Tournament updated successfully",
        data=TournamentData(tournament=_view_response(view)),
    )


@router.put(
    "/{tournament_id}/status",
    response_model=TournamentEnvelope,
)
async def update_tournament_status_route(
    tournament_id: str,
    payload: TournamentStatusRequest,
    principal: Principal = Depends(require_principal),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> TournamentEnvelope:
    now_utc = datetime.now(timezone.utc)
    try:
        view = await run_in_transaction(
            session_factory,
            lambda session: update_tournament_status(
                session,
                tournament_id=tournament_id,
                requester=principal,
                status=payload.status,
                now_utc=now_utc,
            ),
            operation="update_tournament_status",
        )
    except TournamentError as exc:
        raise _as_http_error(exc) from exc

    return TournamentEnvelope(
        message=f"Tournament status updated to {view.snapshot.status}",
        data=TournamentData(tournament=_view_response(view)),
    )


@router.delete("/{tournament_id}", response_model=MessageResponse)
async def delete_tournament_route(
    tournament_id: str,
    principal: Principal = Depends(require_principal),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> MessageResponse:
    try:
        await run_in_transaction(
            session_factory,
            lambda session: delete_tournament(
                session,
                tournament_id=tournament_id,
                requester=principal,
            ),
            operation="delete_tournament",
        )
    except TournamentError as exc:
        raise _as_http_error(exc) from exc

    return MessageResponse(message="Tournament deleted successfully")


@router.post(
    "/{tournament_id}/register",
    status_code=status.HTTP_201_CREATED,
    response_model=RegistrationEnvelope,
)
async def register_route(
    tournament_id: str,
    payload: RegisterRequest | None = None,
    principal: Principal = Depends(require_principal),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> RegistrationEnvelope:
    now_utc = datetime.now(timezone.utc)
    request_body = payload or RegisterRequest()
    profile = CompetitorProfile(
        name=request_body.name,
        logo_url=request_body.logo_url,
        description=request_body.description,
        mail=request_body.mail,
    )
    try:
        result = await run_in_transaction(
            session_factory,
            lambda session: register_competitor(
                session,
                tournament_id=tournament_id,
                requester=principal,
                profile=profile,
                now_utc=now_utc,
            ),
            operation="register_competitor",
        )
    except TournamentError as exc:
        raise _as_http_error(exc) from exc

    return RegistrationEnvelope(
        message="Successfully registered for tournament",
        data=RegistrationData(
            competitor=_competitor_response(result.competitor),
            tournament=_view_response(result.tournament),
        ),
    )


@router.delete("/{tournament_id}/withdraw", response_model=MessageResponse)
async def withdraw_route(
    tournament_id: str,
    payload: WithdrawRequest | None = None,
    principal: Principal = Depends(require_principal),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> MessageResponse:
    now_utc = datetime.now(timezone.utc)
    competitor_id = payload.competitor_id if payload is not None else None
    try:
        await run_in_transaction(
            session_factory,
            lambda session: withdraw_competitor(
                session,
                tournament_id=tournament_id,
                competitor_id=competitor_id,
                requester=principal,
                now_utc=now_utc,
            ),
            operation="withdraw_competitor",
        )
    except TournamentError as exc:
        raise _as_http_error(exc) from exc

    return MessageResponse(message="Successfully withdrew from tournament")
