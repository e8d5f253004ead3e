from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from app.tournaments.errors import (
    PersistenceError,
    StoreUnavailableError,
    TournamentError,
    TransactionConflictError,
)

T = TypeVar("T")

logger = structlog.get_logger(__name__)

# serialization_failure, deadlock_detected
CONFLICT_SQLSTATES = frozenset({"40001", "40P01"})
# lock_not_available (lock_timeout), query_canceled (statement_timeout), cannot_connect_now
UNAVAILABLE_SQLSTATES = frozenset({"55P03", "57014", "57P03"})
SQLITE_CONFLICT_MARKERS = ("database is locked", "database table is locked")


def _sqlstate(exc: DBAPIError) -> str | None:
    orig = exc.orig
    for attr in ("sqlstate", "pgcode"):
        value = getattr(orig, attr, None)
        if isinstance(value, str) and value:
            return value
    return None


def classify_store_error(exc: BaseException) -> TournamentError:
    """Map a persistence failure to the retryable/non-retryable domain error."""
    if isinstance(exc, StaleDataError):
        return TransactionConflictError()
    if isinstance(exc, (PoolTimeoutError, TimeoutError, ConnectionError)):
        return StoreUnavailableError()
    if isinstance(exc, DBAPIError):
        sqlstate = _sqlstate(exc)
        if sqlstate in CONFLICT_SQLSTATES:
            return TransactionConflictError()
        if sqlstate in UNAVAILABLE_SQLSTATES or (sqlstate or "").startswith("08"):
            return StoreUnavailableError()
        if exc.connection_invalidated:
            return StoreUnavailableError()
        message = str(exc.orig).lower()
        if any(marker in message for marker in SQLITE_CONFLICT_MARKERS):
            return TransactionConflictError()
    return PersistenceError()


async def run_in_transaction(
    session_factory: async_sessionmaker[AsyncSession],
    step: Callable[[AsyncSession], Awaitable[T]],
    *,
    operation: str,
) -> T:
    """Run ``step`` in exactly one transaction: commit on success, roll back otherwise.

    No retry happens here; conflicts and outages surface as retryable errors
    for the caller to act on.
    """
    try:
        async with session_factory.begin() as session:
            return await step(session)
    except TournamentError:
        raise
    except (SQLAlchemyError, TimeoutError, ConnectionError) as exc:
        error = classify_store_error(exc)
        if isinstance(error, PersistenceError):
            logger.exception(
                "tournament_transaction_failed",
                operation=operation,
                error_type=type(exc).__name__,
            )
        else:
            logger.warning(
                "tournament_transaction_aborted",
                operation=operation,
                error_code=error.code,
                error_type=type(exc).__name__,
            )
        raise error from exc
