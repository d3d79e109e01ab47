import os
import tempfile
from pathlib import Path

_DB_DIR = Path(tempfile.mkdtemp(prefix="cashdesk-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR / 'test.db'}"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["PUBLIC_CASHIER_LISTING"] = "false"
os.environ["ADMIN_ID"] = "admin"
os.environ["ADMIN_PASSWORD"] = "admin123"

import pytest
from fastapi.testclient import TestClient

import main
from cashdesk.db.base import Base
from cashdesk.db.get_db import SessionLocal, engine


@pytest.fixture()
def client():
    Base.metadata.drop_all(bind=engine)
    # Entering the client runs the lifespan, which creates the schema and seeds the admin
    with TestClient(main.app) as client:
        yield client
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session(client):
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def cashier_payload(**overrides) -> dict:
    payload = {
        "cashierId": "CASH100",
        "name": "Ada Lovelace",
        "mobile": "+1 (555) 010-2030",
        "address": "12 Analytical St",
        "email": "ada@example.com",
        "password": "secret1",
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def admin_headers(client):
    response = client.post("/api/auth/admin/login", json={"adminId": "admin", "password": "admin123"})
    assert response.status_code == 200
    return auth_headers(response.json()["data"]["token"])


@pytest.fixture()
def create_cashier(client, admin_headers):
    def _create(**overrides):
        response = client.post("/api/cashiers", json=cashier_payload(**overrides), headers=admin_headers)
        assert response.status_code == 201, response.json()
        return response.json()["data"]

    return _create


@pytest.fixture()
def cashier_headers(client, create_cashier):
    cashier = create_cashier()
    response = client.post(
        "/api/auth/cashier/login",
        json={"cashierId": cashier["cashierId"], "password": "secret1"},
    )
    assert response.status_code == 200
    return auth_headers(response.json()["data"]["token"])
