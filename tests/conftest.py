"""Test fixtures for PlannerOS API tests."""

from __future__ import annotations

import os
import time
import uuid
from datetime import timedelta

# Settings are read at import time, so these must be set before planneros loads
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTH_JWT_SECRET"] = "test-secret"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from jose import jwt  # noqa: E402

from planneros.database import Base, engine  # noqa: E402
from planneros.main import app  # noqa: E402
from planneros.shared.validators import today  # noqa: E402

TEST_SECRET = "test-secret"


def make_token(
    sub: str | None = None,
    role: str = "planner",
    email: str | None = None,
    expires_in: int = 3600,
    secret: str = TEST_SECRET,
    audience: str = "authenticated",
) -> str:
    """Mint a session token the way the auth provider does."""
    now = int(time.time())
    claims = {
        "sub": sub or str(uuid.uuid4()),
        "aud": audience,
        "iat": now,
        "exp": now + expires_in,
        "email": email,
        "app_metadata": {"role": role},
        "user_metadata": {"full_name": f"Test {role.title()}"},
    }
    return jwt.encode(claims, secret, algorithm="HS256")


def auth_headers(role: str = "planner", sub: str | None = None) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(sub=sub, role=role)}"}


def future_date(days: int = 90) -> str:
    return (today() + timedelta(days=days)).isoformat()


@pytest.fixture(autouse=True)
def _fresh_database():
    """Every test starts from empty tables."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def planner() -> dict[str, str]:
    return auth_headers("planner")


@pytest.fixture
def other_planner() -> dict[str, str]:
    return auth_headers("planner")


@pytest.fixture
def vendor_user() -> dict[str, str]:
    return auth_headers("vendor")


@pytest.fixture
def client_user() -> dict[str, str]:
    return auth_headers("client")


def create_event(client: TestClient, headers: dict, **overrides) -> dict:
    payload = {
        "name": "Sharma Wedding",
        "type": "wedding",
        "date": future_date(),
        "guestCount": 300,
        "budgetMin": 1_500_000,
        "budgetMax": 2_500_000,
        "city": "Jaipur",
    }
    payload.update(overrides)
    response = client.post("/api/v1/events", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def create_vendor(client: TestClient, headers: dict, **overrides) -> dict:
    payload = {
        "companyName": "Royal Caterers",
        "category": "catering",
        "location": "Jaipur",
        "priceMin": 800,
        "priceMax": 1500,
    }
    payload.update(overrides)
    response = client.post("/api/v1/vendors", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def event(client, planner) -> dict:
    return create_event(client, planner)


@pytest.fixture
def crm_vendor(client, planner) -> dict:
    return create_vendor(client, planner)


def create_function(client: TestClient, headers: dict, event_id: str, **overrides) -> dict:
    payload = {"eventId": event_id, "name": "Sangeet Night", "type": "sangeet"}
    payload.update(overrides)
    response = client.post("/api/v1/functions", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()
