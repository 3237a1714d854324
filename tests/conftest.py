# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-seed-mission")

from seed_mission.api.v1 import dependencies
from seed_mission.db.session import Base
from seed_mission.db.session import get_db as app_get_session
from seed_mission.main import app as fastapi_app
from seed_mission.models import Community, Member, Proof
from seed_mission.services.storage import LocalObjectStorage
from seed_mission.services.token_store import RefreshTokenStore
from tests.factories import (
    FakeRedis,
    auth_headers_for,
    make_community,
    make_member,
    make_proof,
)

TEST_DB_URL = "sqlite://"


def enable_sqlite_savepoints(engine: Engine) -> None:
    """Let SQLAlchemy, not pysqlite, emit BEGIN so SAVEPOINTs nest correctly."""

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, _record) -> None:  # pragma: no cover
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn) -> None:  # pragma: no cover
        conn.exec_driver_sql("BEGIN")


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_savepoints(engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    """A session whose commits only release savepoints inside one outer transaction."""
    connection = engine.connect()
    transaction = connection.begin()
    session = Session(
        bind=connection,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    try:
        yield session
    finally:
        session.close()
        if transaction.is_active:
            transaction.rollback()
        connection.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def storage(tmp_path: Path) -> LocalObjectStorage:
    return LocalObjectStorage(tmp_path / "uploads", "/uploads")


@pytest.fixture()
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture()
def token_store(fake_redis: FakeRedis) -> RefreshTokenStore:
    return RefreshTokenStore(fake_redis)


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    storage: LocalObjectStorage,
    token_store: RefreshTokenStore,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[dependencies.get_storage] = lambda: storage
    app.dependency_overrides[dependencies.get_token_store] = lambda: token_store
    try:
        yield
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def member(db_session: Session) -> Member:
    """Create the primary test member."""
    return make_member(db_session, nickname="tester")


@pytest.fixture()
def other_member(db_session: Session) -> Member:
    """Create a second member who does not own the primary fixtures."""
    return make_member(db_session, nickname="other")


@pytest.fixture()
def auth_headers(member: Member) -> dict[str, str]:
    """Return authorization headers for the primary member."""
    return auth_headers_for(member)


@pytest.fixture()
def other_auth_headers(other_member: Member) -> dict[str, str]:
    """Return authorization headers for the second member."""
    return auth_headers_for(other_member)


@pytest.fixture()
def community(db_session: Session, member: Member) -> Community:
    """An in-progress community created by the primary member."""
    return make_community(db_session, member)


@pytest.fixture()
def proof(db_session: Session, community: Community, member: Member) -> Proof:
    """A proof written by the primary member."""
    return make_proof(db_session, community, member)
