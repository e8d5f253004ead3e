from __future__ import annotations

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import get_settings

SUPPORTED_BACKENDS = frozenset({"postgresql", "sqlite"})


def build_engine(
    database_url: str,
    *,
    echo: bool = False,
    lock_timeout_seconds: float = 5.0,
) -> AsyncEngine:
    """Create the async engine for the configured backend.

    The backend is chosen from the URL once at startup. PostgreSQL gets a
    server-side ``lock_timeout`` so row-lock waits are bounded; SQLite gets
    the equivalent busy timeout on its file lock.
    """
    url = make_url(database_url)
    backend = url.get_backend_name()
    if backend not in SUPPORTED_BACKENDS:
        raise ValueError(f"unsupported database backend: {backend}")

    if backend == "sqlite":
        return create_async_engine(
            url,
            echo=echo,
            connect_args={"timeout": lock_timeout_seconds},
        )

    lock_timeout_ms = max(1, int(lock_timeout_seconds * 1000))
    return create_async_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        connect_args={"server_settings": {"lock_timeout": str(lock_timeout_ms)}},
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=bind, class_=AsyncSession, expire_on_commit=False)


_settings = get_settings()
engine = build_engine(
    _settings.database_url,
    echo=_settings.db_echo,
    lock_timeout_seconds=_settings.db_lock_timeout_seconds,
)
SessionLocal = build_session_factory(engine)


async def dispose_engine() -> None:
    await engine.dispose()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return SessionLocal
