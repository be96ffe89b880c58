"""
Shared pytest fixtures: an in-memory database, a fake search index and a
TestClient wired to both.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from marketplace import models  # noqa: F401  registers every table on Base
from marketplace.core.config import get_settings
from marketplace.core.db import Base, get_db
from marketplace.main import app
from marketplace.models.user import User
from marketplace.services import security
from marketplace.services.search_index import get_search_index

from tests.fixtures.marketplace_fixtures import ADMIN_SECRET, FakeSearchIndex


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def search_index():
    return FakeSearchIndex()


@pytest.fixture()
def settings(monkeypatch):
    settings = get_settings()
    monkeypatch.setattr(settings, "ADMIN_SECRET", ADMIN_SECRET)
    return settings


@pytest.fixture()
def client(session_factory, search_index, settings):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_search_index] = lambda: search_index
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _make_user(db, email: str, name: str) -> User:
    user = User(email=email, name=name, password_hash=security.hash_password("correct-horse"))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _auth_headers(user: User) -> dict:
    token = security.build_access_token(user_id=user.id, email=user.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def user(db):
    return _make_user(db, "owner@example.com", "Owner")


@pytest.fixture()
def other_user(db):
    return _make_user(db, "someone@example.com", "Someone Else")


@pytest.fixture()
def auth_headers(user):
    return _auth_headers(user)


@pytest.fixture()
def other_auth_headers(other_user):
    return _auth_headers(other_user)


@pytest.fixture()
def admin_headers():
    return {"X-Admin-Secret": ADMIN_SECRET}
