from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db.session import get_session_factory
from app.tournaments.constants import TOURNAMENT_LIST_DEFAULT_LIMIT, TOURNAMENT_LIST_MAX_LIMIT
from app.tournaments.errors import TournamentError
from app.tournaments.service import (
    get_competitor,
    list_competitor_games,
    list_competitors,
    run_in_transaction,
)

from .tournaments_helpers import _as_http_error, _competitor_response
from .tournaments_models import (
    CompetitorData,
    CompetitorEnvelope,
    CompetitorListData,
    CompetitorListEnvelope,
    GamesData,
    GamesEnvelope,
)

router = APIRouter(prefix="/competitors", tags=["competitors"])

SessionFactory = async_sessionmaker[AsyncSession]


@router.get("", response_model=CompetitorListEnvelope)
async def list_competitors_route(
    game_name: str | None = Query(default=None, alias="gameName"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=TOURNAMENT_LIST_DEFAULT_LIMIT, ge=1, le=TOURNAMENT_LIST_MAX_LIMIT),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> CompetitorListEnvelope:
    try:
        result = await run_in_transaction(
            session_factory,
            lambda session: list_competitors(
                session,
                game_name=game_name,
                page=page,
                limit=limit,
            ),
            operation="list_competitors",
        )
    except TournamentError as exc:
        raise _as_http_error(exc) from exc

    return CompetitorListEnvelope(
        data=CompetitorListData(
            competitors=[_competitor_response(item) for item in result.items],
            total=result.total,
            page=result.page,
            limit=result.limit,
        )
    )


# Declared before /{competitor_id} so "games" is not read as an id.
@router.get("/games", response_model=GamesEnvelope)
async def list_competitor_games_route(
    session_factory: SessionFactory = Depends(get_session_factory),
) -> GamesEnvelope:
    try:
        games = await run_in_transaction(
            session_factory,
            list_competitor_games,
            operation="list_competitor_games",
        )
    except TournamentError as exc:
        raise _as_http_error(exc) from exc
    return GamesEnvelope(data=GamesData(games=games))


@router.get("/{competitor_id}", response_model=CompetitorEnvelope)
async def get_competitor_route(
    competitor_id: str,
    session_factory: SessionFactory = Depends(get_session_factory),
) -> CompetitorEnvelope:
    try:
        snapshot = await run_in_transaction(
            session_factory,
            lambda session: get_competitor(session, competitor_id=competitor_id),
            operation="get_competitor",
        )
    except TournamentError as exc:
        raise _as_http_error(exc) from exc
    return CompetitorEnvelope(data=CompetitorData(competitor=_competitor_response(snapshot)))
