"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides test database, client and supplier data fixtures.

==============================================================================
"""

import copy
import json
import os

# Point the application at an in-memory store before anything reads settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("APP_ENV", "development")

import pytest
from pathlib import Path
from typing import Any, Callable, Dict, Generator, List
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db import models  # noqa: F401  (registers tables on Base)
from app.db.database import Base, get_db


# ============================================================================
# DATABASE FIXTURES
# ============================================================================

# In-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


def _override_get_db(db: Session):
    def override_get_db():
        try:
            yield db
        finally:
            pass
    return override_get_db


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create test client with database override."""
    app.dependency_overrides[get_db] = _override_get_db(db)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def lenient_client(db: Session) -> Generator[TestClient, None, None]:
    """Test client that returns 500 responses instead of re-raising."""
    app.dependency_overrides[get_db] = _override_get_db(db)

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ============================================================================
# SUPPLIER DATA FIXTURES
# ============================================================================

PIZZA_RAW: Dict[str, Any] = {
    "id": 1,
    "name": "Pizza",
    "unitPrice": 10,
    "unit": "ea",
    "enabled": "1",
    "structure": [
        {
            "variable": {
                "id": 5,
                "name": "Size",
                "requerid": "1",
                "quantity": 1,
                "maximum": "0",
                "quantitymaximum": 1,
                "components": [
                    {
                        "component": {
                            "id": 9,
                            "name": "Cheese",
                            "unitPrice": 2,
                            "unit": "kg",
                            "enabled": "1",
                        }
                    }
                ],
            }
        }
    ],
}


@pytest.fixture
def pizza_raw() -> Dict[str, Any]:
    """Fresh copy of the Pizza supplier record."""
    return copy.deepcopy(PIZZA_RAW)


def _make_raw_product(product_id: int, name: str, **extra: Any) -> Dict[str, Any]:
    raw = {
        "id": product_id,
        "name": name,
        "unitPrice": 5.5,
        "unit": "ea",
        "enabled": "1",
    }
    raw.update(extra)
    return raw


@pytest.fixture
def write_export(tmp_path: Path) -> Callable[[Any], Path]:
    """Write a supplier export to a temporary file and return its path."""
    def _write(content: Any, name: str = "products.json") -> Path:
        path = tmp_path / name
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_text(json.dumps(content), encoding="utf-8")
        return path
    return _write


def _product_payload(product_id: int = 1, name: str = "Pizza", **extra: Any) -> Dict[str, Any]:
    payload = {
        "id": product_id,
        "name": name,
        "unitPrice": 10,
        "unit": "ea",
        "enabled": "1",
    }
    payload.update(extra)
    return payload


@pytest.fixture
def create_products(client: TestClient) -> Callable[[List[Dict[str, Any]]], None]:
    """Create products through the API."""
    def _create(payloads: List[Dict[str, Any]]) -> None:
        for payload in payloads:
            response = client.post("/api/products", json=payload)
            assert response.status_code == 201, response.text
    return _create


@pytest.fixture
def make_raw_product() -> Callable[..., Dict[str, Any]]:
    """Factory for minimal valid supplier products."""
    return _make_raw_product


@pytest.fixture
def product_payload() -> Callable[..., Dict[str, Any]]:
    """Factory for minimal valid create payloads (camelCase, as sent by clients)."""
    return _product_payload
