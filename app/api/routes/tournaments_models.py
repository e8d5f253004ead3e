from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(CamelModel):
    name: str | None = None
    logo_url: str | None = None
    description: str | None = None
    mail: str | None = None


class WithdrawRequest(CamelModel):
    # Any JSON value; parse_identifier decides validity.
    competitor_id: Any = None


class TournamentCreateRequest(CamelModel):
    name: str | None = None
    game_name: str | None = None
    format: str | None = None
    description: str | None = None
    avatar_url: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    max_players: int | None = None


class TournamentUpdateRequest(TournamentCreateRequest):
    status: str | None = None


class TournamentStatusRequest(CamelModel):
    status: str


class CompetitorResponse(CamelModel):
    id: UUID
    tournament_id: UUID
    user_id: str
    name: str
    logo_url: str | None = None
    description: str | None = None
    mail: str | None = None
    created_at: datetime


class TournamentResponse(CamelModel):
    id: UUID
    name: str
    game_name: str | None = None
    format: str
    description: str | None = None
    avatar_url: str | None = None
    organizer_id: str
    status: str
    start_date: datetime | None = None
    end_date: datetime | None = None
    number_of_players: int
    max_players: int | None = None
    is_full: bool
    is_open_for_registration: bool
    competitor_ids: list[UUID]
    competitors: list[CompetitorResponse] | None = None
    created_at: datetime
    updated_at: datetime


class TournamentSummary(CamelModel):
    id: UUID
    name: str
    status: str
    number_of_players: int
    max_players: int | None = None


class TournamentData(CamelModel):
    tournament: TournamentResponse


class TournamentEnvelope(CamelModel):
    success: bool = True
    message: str
    data: TournamentData


class TournamentListData(CamelModel):
    tournaments: list[TournamentResponse]
    total: int
    page: int
    limit: int


class TournamentListEnvelope(CamelModel):
    success: bool = True
    data: TournamentListData


class ParticipantsData(CamelModel):
    competitors: list[CompetitorResponse]
    total: int
    tournament: TournamentSummary


class ParticipantsEnvelope(CamelModel):
    success: bool = True
    data: ParticipantsData


class RegistrationData(CamelModel):
    competitor: CompetitorResponse
    tournament: TournamentResponse


class RegistrationEnvelope(CamelModel):
    success: bool = True
    message: str
    data: RegistrationData


class CompetitorData(CamelModel):
    competitor: CompetitorResponse


class CompetitorEnvelope(CamelModel):
    success: bool = True
    data: CompetitorData


class CompetitorListData(CamelModel):
    competitors: list[CompetitorResponse]
    total: int
    page: int
    limit: int


class CompetitorListEnvelope(CamelModel):
    success: bool = True
    data: CompetitorListData


class GamesData(CamelModel):
    games: list[str]


class GamesEnvelope(CamelModel):
    success: bool = True
    data: GamesData


class MessageResponse(CamelModel):
    success: bool = True
    message: str
