"""API test fixtures: isolated database and a pinned scorer behind the app."""

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.dependencies as deps
from app.config import Settings
from app.database import Base, get_db
from app.dependencies import get_container
from app.engines.confidence_scorer import ConfidenceScorer
from app.main import app


class MutableBase:
    """Base score source the test can change between requests."""

    def __init__(self, value: float):
        self.value = value

    def __call__(self) -> float:
        return self.value


@pytest.fixture(scope="function")
def base_score():
    return MutableBase(70.0)


@pytest.fixture(scope="function")
def test_db(base_score):
    """Fresh in-memory database and container for each test.

    1. Creates an in-memory SQLite database shared across threads
    2. Overrides FastAPI's get_db dependency
    3. Resets the DI container and pins its scorer
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    TestingSessionLocal = sessionmaker(bind=engine, expire_on_commit=False)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    deps._container = None
    container = get_container()
    settings = Settings(database_url="sqlite:///:memory:")
    container.settings.override(providers.Object(settings))
    container.confidence_scorer.override(
        providers.Object(ConfidenceScorer(settings, base_score=base_score))
    )

    db_session = TestingSessionLocal()
    yield db_session
    db_session.close()

    app.dependency_overrides.clear()
    Base.metadata.drop_all(engine)
    engine.dispose()
    deps._container = None


@pytest.fixture
def client(test_db):
    return TestClient(app)
