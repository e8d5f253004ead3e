from __future__ import annotations

import secrets

from fastapi import HTTPException, Request, status

from app.core.config import get_settings
from app.core.principal import PRINCIPAL_ROLES, ROLE_USER, Principal

GATEWAY_TOKEN_HEADER = "X-Gateway-Token"
PRINCIPAL_ID_HEADER = "X-Principal-Id"
PRINCIPAL_ROLE_HEADER = "X-Principal-Role"
PRINCIPAL_EMAIL_HEADER = "X-Principal-Email"
PRINCIPAL_NAME_HEADER = "X-Principal-Name"
PRINCIPAL_ID_MAX_LENGTH = 64


def is_valid_gateway_token(*, expected_token: str, received_token: str | None) -> bool:
    if not expected_token or not received_token:
        return False
    return secrets.compare_digest(expected_token, received_token)


def _header(request: Request, name: str) -> str | None:
    value = request.headers.get(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def principal_from_headers(request: Request) -> Principal | None:
    principal_id = _header(request, PRINCIPAL_ID_HEADER)
    if principal_id is None or len(principal_id) > PRINCIPAL_ID_MAX_LENGTH:
        return None

    role = (_header(request, PRINCIPAL_ROLE_HEADER) or ROLE_USER).lower()
    if role not in PRINCIPAL_ROLES:
        return None

    return Principal(
        id=principal_id,
        role=role,
        email=_header(request, PRINCIPAL_EMAIL_HEADER),
        full_name=_header(request, PRINCIPAL_NAME_HEADER),
    )


def _unauthenticated(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"success": False, "code": "UNAUTHENTICATED", "message": message},
    )


async def require_principal(request: Request) -> Principal:
    """Resolve the caller forwarded by the access gateway.

    Token validation happens upstream; this service only trusts principal
    headers that arrive together with the shared gateway token.
    """
    settings = get_settings()
    if not is_valid_gateway_token(
        expected_token=settings.gateway_token,
        received_token=request.headers.get(GATEWAY_TOKEN_HEADER),
    ):
        raise _unauthenticated("Access denied. No valid gateway token provided.")

    principal = principal_from_headers(request)
    if principal is None:
        raise _unauthenticated("Access denied. Invalid principal.")
    return principal
