"""Shared fixtures: an app on a throwaway SQLite file, and a bare store session."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from chaos_manager.core.config import Settings
from chaos_manager.db.session import Database
from chaos_manager.main import create_app


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'api.db'}",
        FRONTEND_BUILD_DIR=str(tmp_path / "frontend-build"),
        SECRET_KEY="test-secret-key-with-at-least-32-bytes",
    )


@pytest.fixture
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    # Entering the context runs the lifespan, which initializes the database
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def database(tmp_path: Path):
    db = Database(f"sqlite:///{tmp_path / 'store.db'}")
    db.initialize()
    yield db
    db.dispose()


@pytest.fixture
def session(database: Database):
    with Session(database.engine) as session:
        yield session
