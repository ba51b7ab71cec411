import os

# must be set before app.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("APP_ENV", "test")

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.auth.codes import VerificationCodeStore, get_code_store
from app.db import get_db
from app.main import create_app
from app.models.base import Base
from app.models.user import User
from app.models.workspace import Workspace

from helpers import make_user, make_workspace

@pytest.fixture()
def db_session() -> Session:
    # fresh in-memory database per test; StaticPool shares it with the app's threads
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session: Session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()

@pytest.fixture()
def fake_redis() -> MagicMock:
    return MagicMock()

@pytest.fixture()
def client(db_session: Session, fake_redis: MagicMock) -> TestClient:
    app = create_app()

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_code_store] = lambda: VerificationCodeStore(fake_redis, ttl_seconds=300)
    return TestClient(app)

@pytest.fixture()
def owner(db_session: Session) -> User:
    return make_user(db_session, "owner@example.com")

@pytest.fixture()
def workspace(db_session: Session, owner: User) -> Workspace:
    return make_workspace(db_session, "acme", owner=owner)
