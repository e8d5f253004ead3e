from __future__ import annotations

from dataclasses import dataclass

ROLE_USER = "user"
ROLE_ORGANIZER = "organizer"
ROLE_ADMIN = "admin"
PRINCIPAL_ROLES = frozenset({ROLE_USER, ROLE_ORGANIZER, ROLE_ADMIN})


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated caller as supplied by the access gateway."""

    id: str
    role: str = ROLE_USER
    email: str | None = None
    full_name: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
