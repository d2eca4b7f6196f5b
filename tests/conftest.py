# tests/conftest.py
import os
import tempfile
from dataclasses import dataclass

# must be set before helpdesk is imported: settings are cached at import time
_tmpdir = tempfile.mkdtemp(prefix="helpdesk-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmpdir, 'test.db')}"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["RESEND_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient

from helpdesk.auth import services as auth_service
from helpdesk.auth.models import UserRole
from helpdesk.core.database import Base, SessionLocal, engine
from helpdesk.main import app

PASSWORD = "secret123"


@dataclass
class Account:
    profile: dict
    token: str

    @property
    def id(self) -> int:
        return self.profile["id"]

    @property
    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"}


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def staff_code(db):
    def _issue(role: str, company_id: int | None = None) -> str:
        return auth_service.issue_verification_code(db, UserRole(role), company_id).code

    return _issue


@pytest.fixture
def make_account(client):
    def _make(email: str, role: str = "customer", full_name: str = "Test User", **extra) -> Account:
        r = client.post(
            "/auth/signup",
            json={"email": email, "password": PASSWORD, "full_name": full_name, "role": role, **extra},
        )
        assert r.status_code == 201, r.text
        r2 = client.post("/auth/login", json={"email": email, "password": PASSWORD})
        assert r2.status_code == 200, r2.text
        return Account(profile=r.json(), token=r2.json()["access_token"])

    return _make


@pytest.fixture
def admin(make_account, staff_code):
    return make_account(
        "admin@acme.com",
        role="admin",
        full_name="Ada Admin",
        verification_code=staff_code("admin"),
        company_name="Acme",
    )


@pytest.fixture
def agent(make_account, staff_code, admin):
    return make_account(
        "agent@acme.com",
        role="agent",
        full_name="Alan Agent",
        verification_code=staff_code("agent", admin.profile["company_id"]),
    )


@pytest.fixture
def customer(make_account, admin):
    return make_account("carol@example.com", full_name="Carol Customer", company_id=admin.profile["company_id"])


@pytest.fixture
def ticket(client, customer):
    r = client.post(
        "/tickets/",
        json={"title": "Printer on fire", "description": "Smoke everywhere"},
        headers=customer.headers,
    )
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def assigned_ticket(client, admin, agent, ticket):
    r = client.put(f"/tickets/{ticket['id']}/assignment", json={"agent_id": agent.id}, headers=admin.headers)
    assert r.status_code == 200, r.text
    return r.json()
