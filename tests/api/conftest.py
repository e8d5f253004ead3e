from __future__ import annotations

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from app.db.models.base import Base
from app.db.session import build_engine, build_session_factory, get_session_factory
from app.main import app
from app.services import gateway_auth
from tests.api.api_fixtures import GATEWAY_TOKEN


@pytest.fixture
def api_client(tmp_path, monkeypatch):
    database_path = tmp_path / "api.db"
    schema_engine = create_engine(f"sqlite:///{database_path}")
    Base.metadata.create_all(schema_engine)
    schema_engine.dispose()

    monkeypatch.setattr(
        gateway_auth,
        "get_settings",
        lambda: SimpleNamespace(gateway_token=GATEWAY_TOKEN),
    )
    engine = build_engine(f"sqlite+aiosqlite:///{database_path}")
    session_factory = build_session_factory(engine)
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    with TestClient(app) as client:
        yield client
        client.portal.call(engine.dispose)

    app.dependency_overrides.clear()

