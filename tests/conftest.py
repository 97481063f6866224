# tests/conftest.py

"""
Shared fixtures for the catalog test suite.
The suite runs against a throwaway SQLite file selected through DATABASE_URL,
which must be set before the application modules are imported.
"""

import logging
import os
import tempfile
from pathlib import Path

import pytest

_DB_PATH = Path(tempfile.gettempdir()) / "product_catalog_test.db"
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_DB_PATH}")
ADMIN_TOKEN = os.environ.setdefault("ADMIN_API_TOKEN", "test-admin-token")

from decimal import Decimal  # noqa: E402

from fastapi.testclient import TestClient  # noqa: E402

from product_catalog.db import Base, SessionLocal, engine  # noqa: E402
from product_catalog.main import app  # noqa: E402
from product_catalog.repository import ProductRepository  # noqa: E402
from product_catalog.schemas import ProductIn  # noqa: E402

# Suppress noisy logs from SQLAlchemy/FastAPI during tests for cleaner output
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("uvicorn.error").setLevel(logging.WARNING)
logging.getLogger("fastapi").setLevel(logging.WARNING)


@pytest.fixture(scope="session", autouse=True)
def remove_database_file():
    yield
    engine.dispose()
    if _DB_PATH.exists():
        _DB_PATH.unlink()


@pytest.fixture(autouse=True)
def reset_database():
    """Give every test an empty products table."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def repository(db_session):
    return ProductRepository(db_session)


@pytest.fixture(scope="module")
def client():
    """
    Provides a TestClient for making HTTP requests to the FastAPI application.
    The TestClient runs the app's startup events.
    """
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def make_product():
    """Build a ProductIn with sensible defaults; keyword arguments override them."""

    def _make(**overrides):
        values = {
            "name": "Shirt",
            "price": Decimal("19.99"),
            "category_id": 2,
            "description": "Cotton shirt",
            "color": "blue",
            "stock": 10,
            "featured": False,
            "image_url": None,
        }
        values.update(overrides)
        return ProductIn(**values)

    return _make
