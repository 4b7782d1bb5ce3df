"""
Pytest fixtures for Checkin Rewards tests. Uses a temporary SQLite DB per test.
"""

from __future__ import annotations

import pytest


@pytest.fixture
def rewards_db(tmp_path, monkeypatch):
    """
    Point the database at a temporary SQLite file and create tables.
    Resets the engine cache so each test gets a fresh DB. Unset DATABASE_URL so we use SQLite.
    """
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("CHECKIN_DB_URL", raising=False)
    monkeypatch.setenv("CHECKIN_DB_PATH", str(tmp_path / "checkin_rewards.db"))

    from checkin_rewards.database import session

    session.reset_engine_for_test()
    session.init_db()
    yield session
    session.reset_engine_for_test()


@pytest.fixture
def app(rewards_db):
    """Fresh FastAPI app (own event cache and transfer guard) bound to the temp DB."""
    from checkin_rewards.api_server.server import create_app

    return create_app()


@pytest.fixture
def client(app):
    """FastAPI TestClient. Depends on rewards_db so the temp DB is set before the app runs."""
    from fastapi.testclient import TestClient

    with TestClient(app) as c:
        yield c
