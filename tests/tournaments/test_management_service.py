from __future__ import annotations

from datetime import datetime, timedelta
from uuid import uuid4

import pytest
from sqlalchemy import func, select

from app.core.principal import Principal
from app.db.models.competitors import Competitor
from app.db.models.matches import Match
from app.db.models.tournaments import Tournament
from app.db.repo.matches_repo import MatchesRepo
from app.tournaments.errors import (
    TournamentForbiddenError,
    TournamentNotFoundError,
    TournamentValidationError,
)
from app.tournaments.service import (
    create_tournament,
    delete_tournament,
    list_tournaments,
    run_in_transaction,
    update_tournament,
)
from app.tournaments.types import TournamentFields
from tests.tournaments.tournament_fixtures import (
    ADMIN,
    ORGANIZER,
    UTC,
    USER_A,
    USER_B,
    USER_C,
    _create_tournament,
    _load_state,
    _register,
)


async def _update(session_factory, tournament_id, requester: Principal, **changes):
    return await run_in_transaction(
        session_factory,
        lambda session: update_tournament(
            session,
            tournament_id=tournament_id,
            requester=requester,
            changes=changes,
            now_utc=datetime.now(UTC),
        ),
        operation="update_tournament",
    )


@pytest.mark.asyncio
async def test_create_tournament_starts_empty(session_factory) -> None:
    tournament_id = await _create_tournament(session_factory, max_players=8)

    tournament, competitors_total = await _load_state(session_factory, tournament_id)
    assert tournament.status == "upcoming"
    assert tournament.format == "single-elimination"
    assert tournament.organizer_id == ORGANIZER.id
    assert tournament.number_of_players == 0
    assert tournament.competitor_ids == []
    assert tournament.version == 1
    assert competitors_total == 0


@pytest.mark.asyncio
async def test_plain_user_cannot_create_tournament(session_factory) -> None:
    now_utc = datetime.now(UTC)

    with pytest.raises(TournamentForbiddenError):
        await run_in_transaction(
            session_factory,
            lambda session: create_tournament(
                session,
                organizer=USER_A,
                fields=TournamentFields(name="Cup"),
                now_utc=now_utc,
            ),
            operation="create_tournament",
        )


@pytest.mark.asyncio
async def test_create_tournament_collects_validation_errors(session_factory) -> None:
    now_utc = datetime.now(UTC)

    with pytest.raises(TournamentValidationError) as exc_info:
        await run_in_transaction(
            session_factory,
            lambda session: create_tournament(
                session,
                organizer=ADMIN,
                fields=TournamentFields(
                    name="  ",
                    format="swiss",
                    start_date=now_utc - timedelta(days=1),
                    end_date=now_utc - timedelta(days=2),
                    max_players=0,
                ),
                now_utc=now_utc,
            ),
            operation="create_tournament",
        )

    assert exc_info.value.errors == [
        "Tournament name is required",
        "Format must be one of: double-elimination, group-stage, single-elimination",
        "Start date must be in the future",
        "End date must be after start date",
        "Maximum players must be at least 1",
    ]


@pytest.mark.asyncio
async def test_max_players_cannot_drop_below_registered_count(session_factory) -> None:
    tournament_id = await _create_tournament(session_factory, max_players=4)
    await _register(session_factory, tournament_id, USER_A)
    await _register(session_factory, tournament_id, USER_B)

    with pytest.raises(TournamentValidationError) as exc_info:
        await _update(session_factory, tournament_id, ORGANIZER, max_players=1)
    assert exc_info.value.errors == ["Maximum players cannot be less than current number of players"]

    view = await _update(session_factory, tournament_id, ORGANIZER, max_players=2, name="Final Cup")
    assert view.snapshot.max_players == 2
    assert view.snapshot.name == "Final Cup"
    assert view.snapshot.is_full is True
    assert len(view.competitors) == 2


@pytest.mark.asyncio
async def test_update_ignores_membership_fields(session_factory) -> None:
    tournament_id = await _create_tournament(session_factory, max_players=4)
    await _register(session_factory, tournament_id, USER_A)

    view = await _update(
        session_factory,
        tournament_id,
        ORGANIZER,
        number_of_players=0,
        competitor_ids=[],
        description="Bring your own board",
    )

    assert view.snapshot.number_of_players == 1
    assert len(view.snapshot.competitor_ids) == 1
    assert view.snapshot.description == "Bring your own board"


@pytest.mark.asyncio
async def test_only_owner_or_admin_can_update(session_factory) -> None:
    tournament_id = await _create_tournament(session_factory)
    other_organizer = Principal(id="organizer-2", role="organizer")

    with pytest.raises(TournamentForbiddenError):
        await _update(session_factory, tournament_id, other_organizer, name="Hijacked")

    view = await _update(session_factory, tournament_id, ADMIN, status="completed")
    assert view.snapshot.status == "completed"


@pytest.mark.asyncio
async def test_update_rejects_unknown_status(session_factory) -> None:
    tournament_id = await _create_tournament(session_factory)

    with pytest.raises(TournamentValidationError):
        await _update(session_factory, tournament_id, ORGANIZER, status="paused")


@pytest.mark.asyncio
async def test_delete_cascades_to_competitors_and_matches(session_factory) -> None:
    tournament_id = await _create_tournament(session_factory, max_players=4)
    kept_tournament_id = await _create_tournament(session_factory, name="Other Cup")
    first = await _register(session_factory, tournament_id, USER_A)
    second = await _register(session_factory, tournament_id, USER_B)
    await _register(session_factory, kept_tournament_id, USER_C)

    async with session_factory.begin() as session:
        await MatchesRepo.create(
            session,
            match=Match(
                id=uuid4(),
                tournament_id=tournament_id,
                competitor_a_id=first.competitor.competitor_id,
                competitor_b_id=second.competitor.competitor_id,
            ),
        )

    result = await run_in_transaction(
        session_factory,
        lambda session: delete_tournament(session, tournament_id=tournament_id, requester=ORGANIZER),
        operation="delete_tournament",
    )

    assert result.competitors_deleted == 2
    assert result.matches_deleted == 1
    async with session_factory() as session:
        assert await session.get(Tournament, tournament_id) is None
        remaining_competitors = await session.scalar(
            select(func.count(Competitor.id)).where(Competitor.tournament_id == tournament_id)
        )
        remaining_matches = await session.scalar(
            select(func.count(Match.id)).where(Match.tournament_id == tournament_id)
        )
    assert remaining_competitors == 0
    assert remaining_matches == 0

    kept, kept_competitors = await _load_state(session_factory, kept_tournament_id)
    assert kept.number_of_players == 1
    assert kept_competitors == 1


@pytest.mark.asyncio
async def test_delete_requires_owner_and_existing_tournament(session_factory) -> None:
    tournament_id = await _create_tournament(session_factory)

    with pytest.raises(TournamentForbiddenError):
        await run_in_transaction(
            session_factory,
            lambda session: delete_tournament(session, tournament_id=tournament_id, requester=USER_A),
            operation="delete_tournament",
        )

    with pytest.raises(TournamentNotFoundError):
        await run_in_transaction(
            session_factory,
            lambda session: delete_tournament(session, tournament_id=uuid4(), requester=ADMIN),
            operation="delete_tournament",
        )


@pytest.mark.asyncio
async def test_list_tournaments_filters_and_paginates(session_factory) -> None:
    for index in range(3):
        await _create_tournament(session_factory, name=f"Upcoming {index}")
    await _create_tournament(session_factory, name="Running", status="ongoing")

    page = await run_in_transaction(
        session_factory,
        lambda session: list_tournaments(session, status="upcoming", page=2, limit=2),
        operation="list_tournaments",
    )
    assert page.total == 3
    assert page.page == 2
    assert page.limit == 2
    assert len(page.items) == 1

    everything = await run_in_transaction(
        session_factory,
        lambda session: list_tournaments(session, game_name="chess", limit=500),
        operation="list_tournaments",
    )
    assert everything.total == 4
    assert everything.limit == 100

    with pytest.raises(TournamentValidationError):
        await run_in_transaction(
            session_factory,
            lambda session: list_tournaments(session, status="archived"),
            operation="list_tournaments",
        )


@pytest.mark.asyncio
async def test_list_tournaments_searches_name_and_filters_organizer(session_factory) -> None:
    await _create_tournament(session_factory, name="Spring Cup")
    await _create_tournament(session_factory, name="Autumn CUP")
    await _create_tournament(session_factory, name="Winter 100%_Open", organizer=ADMIN)

    cups = await run_in_transaction(
        session_factory,
        lambda session: list_tournaments(session, search="  cup "),
        operation="list_tournaments",
    )
    assert cups.total == 2
    assert {item.name for item in cups.items} == {"Spring Cup", "Autumn CUP"}

    literal = await run_in_transaction(
        session_factory,
        lambda session: list_tournaments(session, search="100%_"),
        operation="list_tournaments",
    )
    assert [item.name for item in literal.items] == ["Winter 100%_Open"]

    wildcard_only = await run_in_transaction(
        session_factory,
        lambda session: list_tournaments(session, search="%"),
        operation="list_tournaments",
    )
    assert wildcard_only.total == 1

    by_admin = await run_in_transaction(
        session_factory,
        lambda session: list_tournaments(session, organizer_id=ADMIN.id),
        operation="list_tournaments",
    )
    assert [item.organizer_id for item in by_admin.items] == [ADMIN.id]

    combined = await run_in_transaction(
        session_factory,
        lambda session: list_tournaments(session, search="cup", organizer_id=ADMIN.id),
        operation="list_tournaments",
    )
    assert combined.total == 0
    assert combined.items == ()
