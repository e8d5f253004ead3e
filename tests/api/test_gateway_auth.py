from __future__ import annotations

from types import SimpleNamespace

import pytest
from fastapi import HTTPException
from starlette.requests import Request

from app.core.principal import ROLE_ADMIN, ROLE_USER
from app.services import gateway_auth


def _request(headers: dict[str, str]) -> Request:
    return Request(
        {
            "type": "http",
            "method": "POST",
            "path": "/tournaments",
            "headers": [(key.lower().encode(), value.encode()) for key, value in headers.items()],
        }
    )


@pytest.fixture(autouse=True)
def _gateway_settings(monkeypatch) -> None:
    monkeypatch.setattr(
        gateway_auth,
        "get_settings",
        lambda: SimpleNamespace(gateway_token="gateway-secret"),
    )


def test_token_comparison() -> None:
    assert gateway_auth.is_valid_gateway_token(expected_token="a", received_token="a") is True
    assert gateway_auth.is_valid_gateway_token(expected_token="a", received_token="b") is False
    assert gateway_auth.is_valid_gateway_token(expected_token="a", received_token=None) is False
    assert gateway_auth.is_valid_gateway_token(expected_token="", received_token="") is False


@pytest.mark.asyncio
async def test_principal_resolved_from_headers() -> None:
    principal = await gateway_auth.require_principal(
        _request(
            {
                "X-Gateway-Token": "gateway-secret",
                "X-Principal-Id": " user-42 ",
                "X-Principal-Role": "ADMIN",
                "X-Principal-Email": "root@example.com",
                "X-Principal-Name": "Root",
            }
        )
    )

    assert principal.id == "user-42"
    assert principal.role == ROLE_ADMIN
    assert principal.is_admin is True
    assert principal.email == "root@example.com"
    assert principal.full_name == "Root"


@pytest.mark.asyncio
async def test_role_defaults_to_user() -> None:
    principal = await gateway_auth.require_principal(
        _request({"X-Gateway-Token": "gateway-secret", "X-Principal-Id": "user-1"})
    )

    assert principal.role == ROLE_USER
    assert principal.email is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("headers", "message"),
    [
        ({"X-Principal-Id": "user-1"}, "Access denied. No valid gateway token provided."),
        (
            {"X-Gateway-Token": "wrong", "X-Principal-Id": "user-1"},
            "Access denied. No valid gateway token provided.",
        ),
        ({"X-Gateway-Token": "gateway-secret"}, "Access denied. Invalid principal."),
        (
            {"X-Gateway-Token": "gateway-secret", "X-Principal-Id": "user-1", "X-Principal-Role": "root"},
            "Access denied. Invalid principal.",
        ),
        (
            {"X-Gateway-Token": "gateway-secret", "X-Principal-Id": "x" * 65},
            "Access denied. Invalid principal.",
        ),
    ],
)
async def test_invalid_credentials_are_rejected(headers: dict[str, str], message: str) -> None:
    with pytest.raises(HTTPException) as exc_info:
        await gateway_auth.require_principal(_request(headers))

    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == {
        "success": False,
        "code": "UNAUTHENTICATED",
        "message": message,
    }
