from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./.pytest-tournaments.db")
os.environ.setdefault("GATEWAY_TOKEN", "test-gateway-token")

import pytest  # noqa: E402

from app.db.models.base import Base  # noqa: E402
from app.db.session import build_engine, build_session_factory  # noqa: E402


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'tournaments.db'}"


@pytest.fixture
async def session_factory(database_url: str):
    engine = build_engine(database_url, lock_timeout_seconds=5.0)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield build_session_factory(engine)

    await engine.dispose()
