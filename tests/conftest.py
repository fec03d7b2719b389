"""Shared fixtures: a throwaway SQLite file per test and API clients bound to it."""

import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Must be set before daybook is imported: settings are read once.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from daybook import app
from daybook.db.session import Base, get_db

# Ensure models are registered so metadata tables are created
from daybook.models import category as category_model  # noqa: F401
from daybook.models import entry as entry_model  # noqa: F401
from daybook.models import reflection as reflection_model  # noqa: F401
from daybook.models import session as session_model  # noqa: F401
from daybook.models import user as user_model  # noqa: F401


@pytest.fixture()
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client_factory(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    clients: list[TestClient] = []

    def make(**kwargs) -> TestClient:
        test_client = TestClient(app, **kwargs)
        clients.append(test_client)
        return test_client

    try:
        yield make
    finally:
        for test_client in clients:
            test_client.close()
        app.dependency_overrides.clear()


@pytest.fixture()
def client(client_factory):
    return client_factory()
