# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import datetime, timedelta
from typing import Any

import pytest

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from huddle.api.v1.dependencies import get_geocoder, get_notification_dispatcher
from huddle.db.session import Base
from huddle.db.session import get_db as app_get_session
from huddle.db.time import utcnow
from huddle.main import app as fastapi_app
from huddle.models import Post
from huddle.services.geocoding import GeocodingClient, GeocodingConfig
from huddle.services.notifications import BroadcastJob

TEST_DB_URL = "sqlite://"

LOS_ANGELES = (34.0522, -118.2437)
NEAR_LOS_ANGELES = (34.05, -118.25)
LONDON = (51.5, -0.09)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session(engine: Engine, session_factory: sessionmaker[Session]) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()
        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


class RecordingDispatcher:
    """Stands in for the background dispatcher and keeps queued jobs."""

    def __init__(self) -> None:
        self.jobs: list[BroadcastJob] = []

    def enqueue(self, job: BroadcastJob) -> bool:
        self.jobs.append(job)
        return True


@pytest.fixture()
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI, db_session: Session, dispatcher: RecordingDispatcher
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    disabled_geocoder = GeocodingClient(
        GeocodingConfig(api_key=None, base_url="http://geocoder.test", timeout_seconds=1.0)
    )

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_notification_dispatcher] = lambda: dispatcher
    app.dependency_overrides[get_geocoder] = lambda: disabled_geocoder
    try:
        yield
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def other_client(app: FastAPI) -> Iterator[TestClient]:
    """A second browser with its own cookie jar."""
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def post_body(**overrides: Any) -> dict[str, Any]:
    body: dict[str, Any] = {
        "name": "Sam",
        "activity": "Pickup basketball",
        "location": "Pan Pacific Park",
        "latitude": NEAR_LOS_ANGELES[0],
        "longitude": NEAR_LOS_ANGELES[1],
        "hours": 2,
    }
    body.update(overrides)
    return body


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    """Insert a post directly, with control over its timestamps."""

    def _make_post(
        *,
        latitude: float = NEAR_LOS_ANGELES[0],
        longitude: float = NEAR_LOS_ANGELES[1],
        hours: int = 2,
        age: timedelta = timedelta(0),
        session_id: str = "owner-session",
        now: datetime | None = None,
        name: str = "Sam",
    ) -> Post:
        created = (now or utcnow()) - age
        post = Post(
            name=name,
            activity="Coffee",
            location="Somewhere",
            latitude=latitude,
            longitude=longitude,
            hours=hours,
            created_at=created,
            start_time=created,
            session_id=session_id,
        )
        db_session.add(post)
        db_session.commit()
        db_session.refresh(post)
        return post

    return _make_post
