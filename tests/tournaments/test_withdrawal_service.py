from __future__ import annotations

from datetime import datetime
from uuid import uuid4

import pytest

from app.core.principal import Principal
from app.db.models.competitors import Competitor
from app.tournaments import withdrawal as withdrawal_module
from app.tournaments.errors import (
    CompetitorNotFoundError,
    InvalidIdentifierError,
    MismatchedOwnershipError,
    TournamentForbiddenError,
    TournamentNotFoundError,
)
from app.tournaments.service import run_in_transaction, withdraw_competitor
from app.tournaments.types import WithdrawalResult
from tests.tournaments.tournament_fixtures import (
    ADMIN,
    UTC,
    USER_A,
    USER_B,
    _create_tournament,
    _load_state,
    _register,
)


async def _withdraw(session_factory, tournament_id, competitor_id, requester: Principal) -> WithdrawalResult:
    return await run_in_transaction(
        session_factory,
        lambda session: withdraw_competitor(
            session,
            tournament_id=tournament_id,
            competitor_id=competitor_id,
            requester=requester,
            now_utc=datetime.now(UTC),
        ),
        operation="withdraw_competitor",
    )


@pytest.mark.asyncio
async def test_only_owner_can_withdraw_registration(session_factory) -> None:
    tournament_id = await _create_tournament(session_factory, max_players=4)
    registered = await _register(session_factory, tournament_id, USER_A)
    competitor_id = registered.competitor.competitor_id

    with pytest.raises(TournamentForbiddenError):
        await _withdraw(session_factory, tournament_id, competitor_id, USER_B)

    tournament, competitors_total = await _load_state(session_factory, tournament_id)
    assert tournament.number_of_players == 1
    assert competitors_total == 1

    result = await _withdraw(session_factory, tournament_id, str(competitor_id), USER_A)

    assert result.number_of_players == 0
    assert result.competitor_id == competitor_id
    tournament, competitors_total = await _load_state(session_factory, tournament_id)
    assert tournament.number_of_players == 0
    assert tournament.competitor_ids == []
    assert competitors_total == 0
    async with session_factory() as session:
        assert await session.get(Competitor, competitor_id) is None


@pytest.mark.asyncio
async def test_admin_can_withdraw_any_registration(session_factory) -> None:
    tournament_id = await _create_tournament(session_factory, max_players=4)
    first = await _register(session_factory, tournament_id, USER_A)
    second = await _register(session_factory, tournament_id, USER_B)

    result = await _withdraw(session_factory, tournament_id, first.competitor.competitor_id, ADMIN)

    assert result.number_of_players == 1
    tournament, competitors_total = await _load_state(session_factory, tournament_id)
    assert tournament.competitor_ids == [str(second.competitor.competitor_id)]
    assert competitors_total == 1


@pytest.mark.asyncio
async def test_withdrawal_rejects_competitor_from_other_tournament(session_factory) -> None:
    first_tournament_id = await _create_tournament(session_factory, name="Cup A")
    second_tournament_id = await _create_tournament(session_factory, name="Cup B")
    registered = await _register(session_factory, first_tournament_id, USER_A)

    with pytest.raises(MismatchedOwnershipError):
        await _withdraw(
            session_factory,
            second_tournament_id,
            registered.competitor.competitor_id,
            USER_A,
        )

    tournament, competitors_total = await _load_state(session_factory, first_tournament_id)
    assert tournament.number_of_players == 1
    assert competitors_total == 1


@pytest.mark.asyncio
async def test_withdrawal_validates_identifiers(session_factory) -> None:
    tournament_id = await _create_tournament(session_factory)

    with pytest.raises(InvalidIdentifierError) as exc_info:
        await _withdraw(session_factory, tournament_id, None, USER_A)
    assert exc_info.value.message == "Valid competitorId is required to withdraw"

    with pytest.raises(InvalidIdentifierError):
        await _withdraw(session_factory, "bad-id", uuid4(), USER_A)

    with pytest.raises(TournamentNotFoundError):
        await _withdraw(session_factory, uuid4(), uuid4(), USER_A)

    with pytest.raises(CompetitorNotFoundError):
        await _withdraw(session_factory, tournament_id, uuid4(), USER_A)


@pytest.mark.asyncio
async def test_withdrawal_failure_after_write_restores_previous_state(
    session_factory,
    monkeypatch,
) -> None:
    tournament_id = await _create_tournament(session_factory, max_players=4)
    registered = await _register(session_factory, tournament_id, USER_A)

    def _broken_result(**kwargs):
        raise RuntimeError("injected failure after flush")

    monkeypatch.setattr(withdrawal_module, "WithdrawalResult", _broken_result)

    with pytest.raises(RuntimeError, match="injected failure"):
        await _withdraw(session_factory, tournament_id, registered.competitor.competitor_id, USER_A)

    tournament, competitors_total = await _load_state(session_factory, tournament_id)
    assert tournament.number_of_players == 1
    assert tournament.competitor_ids == [str(registered.competitor.competitor_id)]
    assert competitors_total == 1


@pytest.mark.asyncio
async def test_registration_can_be_repeated_after_withdrawal(session_factory) -> None:
    tournament_id = await _create_tournament(session_factory, max_players=1)
    registered = await _register(session_factory, tournament_id, USER_A)
    await _withdraw(session_factory, tournament_id, registered.competitor.competitor_id, USER_A)

    again = await _register(session_factory, tournament_id, USER_A)

    assert again.tournament.snapshot.number_of_players == 1
    assert again.competitor.competitor_id != registered.competitor.competitor_id
