"""Pytest configuration and fixtures."""
import os

# Settings are read at import time, so the environment must be ready first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["APP_ENV"] = "test"
os.environ["LOG_FILE"] = ""

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.database import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.services.product_repository import ProductRepository  # noqa: E402


@pytest.fixture
def test_db():
    """Create a test database for testing."""
    # Use in-memory SQLite shared across connections
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    yield TestingSessionLocal

    Base.metadata.drop_all(bind=engine)
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture
def client(test_db):
    """Test client wired to the in-memory database."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_session(test_db):
    db = test_db()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def repository(db_session):
    return ProductRepository(db_session)


@pytest.fixture
def make_product(repository):
    """Factory creating products directly through the repository."""

    def _make(**overrides):
        data = {
            "name": "Widget",
            "description": "A widget",
            "price": 9.99,
            "category": "tools",
        }
        data.update(overrides)
        return repository.create(data)

    return _make
