"""Shared fixtures: in-memory database and API helpers."""

from collections.abc import Callable
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from roombill.core.database import Base, get_db
from roombill.main import app


@pytest.fixture
def test_db():
    """Create an in-memory test database."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def client(test_db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def create_floor(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Factory creating a floor through the API."""

    def _create(name: str = "Floor 1", sort_order: int = 0) -> dict[str, Any]:
        response = client.post("/api/floors/", json={"name": name, "sort_order": sort_order})
        assert response.status_code == 201
        return response.json()

    return _create


@pytest.fixture
def create_room(client: TestClient, create_floor) -> Callable[..., dict[str, Any]]:
    """Factory creating a room (and a floor when none is given)."""

    def _create(room_number: str = "101", floor_id: int | None = None, **pricing) -> dict[str, Any]:
        if floor_id is None:
            floor_id = create_floor(name=f"Floor of {room_number}")["id"]
        payload = {"floor_id": floor_id, "room_number": room_number, "room_price": "3000"}
        payload.update(pricing)
        response = client.post("/api/rooms/", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def create_tenant(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Factory creating a tenant through the API."""

    def _create(room_id: int | None, name: str = "Somchai", **fields) -> dict[str, Any]:
        payload = {"room_id": room_id, "name": name, "phone": "0812345678"}
        payload.update(fields)
        response = client.post("/api/tenants/", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def record_reading(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Factory recording a room's readings for a period."""

    def _record(room_id: int, month: int, year: int, **values) -> dict[str, Any]:
        payload = {"room_id": room_id, "reading_month": month, "reading_year": year}
        payload.update(values)
        response = client.post("/api/meters/", json=payload)
        assert response.status_code in (200, 201), response.text
        return response.json()

    return _record
