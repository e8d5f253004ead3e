from __future__ import annotations

import re
from dataclasses import replace
from datetime import datetime

from app.core.principal import Principal
from app.tournaments.constants import (
    COMPETITOR_DESCRIPTION_MAX_LENGTH,
    COMPETITOR_MAIL_MAX_LENGTH,
    COMPETITOR_NAME_MAX_LENGTH,
    COMPETITOR_PLACEHOLDER_NAME,
    TOURNAMENT_DESCRIPTION_MAX_LENGTH,
    TOURNAMENT_FORMAT_SINGLE_ELIMINATION,
    TOURNAMENT_FORMATS,
    TOURNAMENT_GAME_NAME_MAX_LENGTH,
    TOURNAMENT_MIN_MAX_PLAYERS,
    TOURNAMENT_NAME_MAX_LENGTH,
    TOURNAMENT_STATUSES,
    URL_MAX_LENGTH,
)
from app.tournaments.errors import MissingTeamNameError, TournamentValidationError
from app.tournaments.internal import as_utc
from app.tournaments.types import CompetitorProfile, ResolvedCompetitorFields, TournamentFields

HTTP_URL_RE = re.compile(r"^https?://\S+$", re.IGNORECASE)
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def clean_optional(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def is_http_url(value: str) -> bool:
    return len(value) <= URL_MAX_LENGTH and HTTP_URL_RE.match(value) is not None


def is_email(value: str) -> bool:
    return len(value) <= COMPETITOR_MAIL_MAX_LENGTH and EMAIL_RE.match(value) is not None


def resolve_competitor_fields(
    profile: CompetitorProfile,
    *,
    requester: Principal,
) -> ResolvedCompetitorFields:
    raw_name = profile.name or requester.full_name
    if not raw_name:
        raise MissingTeamNameError
    name = raw_name.strip() or COMPETITOR_PLACEHOLDER_NAME

    logo_url = clean_optional(profile.logo_url)
    description = clean_optional(profile.description)
    mail = clean_optional(profile.mail) or clean_optional(requester.email)
    if mail is not None:
        mail = mail.lower()

    errors: list[str] = []
    if len(name) > COMPETITOR_NAME_MAX_LENGTH:
        errors.append(f"Competitor name cannot exceed {COMPETITOR_NAME_MAX_LENGTH} characters")
    if logo_url is not None and not is_http_url(logo_url):
        errors.append("Logo URL must be a valid HTTP/HTTPS URL")
    if description is not None and len(description) > COMPETITOR_DESCRIPTION_MAX_LENGTH:
        errors.append(
            f"Description cannot exceed {COMPETITOR_DESCRIPTION_MAX_LENGTH} characters"
        )
    if mail is not None and not is_email(mail):
        errors.append("Mail must be a valid email address")
    if errors:
        raise TournamentValidationError(errors)

    return ResolvedCompetitorFields(
        name=name,
        logo_url=logo_url,
        description=description,
        mail=mail,
    )


def normalize_tournament_fields(fields: TournamentFields) -> TournamentFields:
    return replace(
        fields,
        name=(fields.name or "").strip(),
        game_name=clean_optional(fields.game_name),
        format=clean_optional(fields.format) or TOURNAMENT_FORMAT_SINGLE_ELIMINATION,
        description=clean_optional(fields.description),
        avatar_url=clean_optional(fields.avatar_url),
        start_date=as_utc(fields.start_date),
        end_date=as_utc(fields.end_date),
    )


def collect_tournament_errors(
    fields: TournamentFields,
    *,
    now_utc: datetime,
    number_of_players: int,
    require_future_start: bool,
) -> list[str]:
    errors: list[str] = []
    if not fields.name:
        errors.append("Tournament name is required")
    elif len(fields.name) > TOURNAMENT_NAME_MAX_LENGTH:
        errors.append(f"Tournament name cannot exceed {TOURNAMENT_NAME_MAX_LENGTH} characters")
    if fields.game_name is not None and len(fields.game_name) > TOURNAMENT_GAME_NAME_MAX_LENGTH:
        errors.append(f"Game name cannot exceed {TOURNAMENT_GAME_NAME_MAX_LENGTH} characters")
    if fields.format not in TOURNAMENT_FORMATS:
        errors.append("Format must be one of: " + ", ".join(sorted(TOURNAMENT_FORMATS)))
    if (
        fields.description is not None
        and len(fields.description) > TOURNAMENT_DESCRIPTION_MAX_LENGTH
    ):
        errors.append(
            f"Description cannot exceed {TOURNAMENT_DESCRIPTION_MAX_LENGTH} characters"
        )
    if fields.avatar_url is not None and not is_http_url(fields.avatar_url):
        errors.append("Avatar URL must be a valid HTTP/HTTPS URL")
    if fields.status not in TOURNAMENT_STATUSES:
        errors.append("Status must be one of: " + ", ".join(sorted(TOURNAMENT_STATUSES)))
    if require_future_start and fields.start_date is not None and fields.start_date <= now_utc:
        errors.append("Start date must be in the future")
    if (
        fields.start_date is not None
        and fields.end_date is not None
        and fields.end_date <= fields.start_date
    ):
        errors.append("End date must be after start date")
    if fields.max_players is not None:
        if fields.max_players < TOURNAMENT_MIN_MAX_PLAYERS:
            errors.append(f"Maximum players must be at least {TOURNAMENT_MIN_MAX_PLAYERS}")
        elif fields.max_players < number_of_players:
            errors.append("Maximum players cannot be less than current number of players")
    return errors


def validate_tournament_fields(
    fields: TournamentFields,
    *,
    now_utc: datetime,
    number_of_players: int = 0,
    require_future_start: bool = False,
) -> TournamentFields:
    normalized = normalize_tournament_fields(fields)
    errors = collect_tournament_errors(
        normalized,
        now_utc=now_utc,
        number_of_players=number_of_players,
        require_future_start=require_future_start,
    )
    if errors:
        raise TournamentValidationError(errors)
    return normalized
