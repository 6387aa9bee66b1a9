import os

# Configuration is read at import time, so it has to be in place before the app is imported.
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["CORS_ORIGINS"] = "http://localhost:3000"
os.environ["S3_BUCKET"] = "popup-test-bucket"
os.environ["S3_REGION"] = "us-east-1"
os.environ.pop("S3_PUBLIC_BASE_URL", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from popup_pos.core.database import Base, get_db
import popup_pos.models  # noqa: F401


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory, monkeypatch):
    from popup_pos import main

    monkeypatch.setattr(main, "_startup_tasks", lambda: None)

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    main.app.dependency_overrides[get_db] = override_get_db
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()
