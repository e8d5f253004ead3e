from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from app.tournaments.constants import TOURNAMENT_FORMAT_SINGLE_ELIMINATION, TOURNAMENT_STATUS_UPCOMING


@dataclass(frozen=True, slots=True)
class CompetitorProfile:
    """Team profile supplied by the registering principal; every field is optional."""

    name: str | None = None
    logo_url: str | None = None
    description: str | None = None
    mail: str | None = None


@dataclass(frozen=True, slots=True)
class ResolvedCompetitorFields:
    name: str
    logo_url: str | None
    description: str | None
    mail: str | None


@dataclass(frozen=True, slots=True)
class TournamentFields:
    name: str
    game_name: str | None = None
    format: str = TOURNAMENT_FORMAT_SINGLE_ELIMINATION
    description: str | None = None
    avatar_url: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    status: str = TOURNAMENT_STATUS_UPCOMING
    max_players: int | None = None


@dataclass(slots=True)
class CompetitorSnapshot:
    competitor_id: UUID
    tournament_id: UUID
    user_id: str
    name: str
    logo_url: str | None
    description: str | None
    mail: str | None
    created_at: datetime


@dataclass(slots=True)
class TournamentSnapshot:
    tournament_id: UUID
    name: str
    game_name: str | None
    format: str
    description: str | None
    avatar_url: str | None
    organizer_id: str
    status: str
    start_date: datetime | None
    end_date: datetime | None
    number_of_players: int
    max_players: int | None
    competitor_ids: tuple[UUID, ...]
    created_at: datetime
    updated_at: datetime

    @property
    def is_full(self) -> bool:
        return self.max_players is not None and self.number_of_players >= self.max_players


@dataclass(slots=True)
class TournamentView:
    snapshot: TournamentSnapshot
    competitors: tuple[CompetitorSnapshot, ...]


@dataclass(slots=True)
class RegistrationResult:
    competitor: CompetitorSnapshot
    tournament: TournamentView


@dataclass(slots=True)
class WithdrawalResult:
    tournament_id: UUID
    competitor_id: UUID
    number_of_players: int


@dataclass(slots=True)
class TournamentDeletionResult:
    tournament_id: UUID
    competitors_deleted: int
    matches_deleted: int


@dataclass(slots=True)
class TournamentPage:
    items: tuple[TournamentSnapshot, ...]
    total: int
    page: int
    limit: int


@dataclass(slots=True)
class CompetitorPage:
    items: tuple[CompetitorSnapshot, ...]
    total: int
    page: int
    limit: int
