from __future__ import annotations

from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.tournaments.errors import TournamentValidationError

REQUEST_LOCATIONS = frozenset({"body", "query", "path", "header", "cookie"})


def _describe_error(error: dict[str, Any]) -> str:
    location = list(error.get("loc", ()))
    if location and location[0] in REQUEST_LOCATIONS:
        location = location[1:]
    field = ".".join(str(part) for part in location)
    message = str(error.get("msg", "Invalid value"))
    return f"{field}: {message}" if field else message


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": {
                "success": False,
                "code": TournamentValidationError.code,
                "message": TournamentValidationError.message,
                "errors": [_describe_error(error) for error in exc.errors()],
            }
        },
    )
