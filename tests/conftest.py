"""
Shared fixtures.

The environment is pointed at a throwaway SQLite file before any project
module is imported, so settings.py and the engine pick it up.
"""

import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="billing-tests-")
os.environ["DATA_DIR"] = _TMP_DIR
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"  # bcrypt minimum; keeps the suite fast

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from database.db_session import Base, SessionLocal, engine, init_db  # noqa: E402
from services.credentials import CredentialStore  # noqa: E402
from services.tokens import TokenService  # noqa: E402

TEST_SECRET = "test-secret"


@pytest.fixture
def db():
    init_db()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def credentials(db):
    return CredentialStore(db)


@pytest.fixture
def tokens():
    return TokenService(TEST_SECRET)


@pytest.fixture
def alice(credentials):
    return credentials.register("Alice", "alice@example.com", "wonderland")


@pytest.fixture
def bob(credentials):
    return credentials.register("Bob", "bob@example.com", "builder1")


@pytest.fixture
def client(db):
    from api.gateway import app

    with TestClient(app) as c:
        yield c


def register_user(client, name="Alice", email="alice@example.com", password="wonderland"):
    resp = client.post("/auth/register", json={"name": name, "email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["token"]


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


SAMPLE_BILL = {
    "customerName": "Jane Customer",
    "customerPhone": "+1-555-0100",
    "customerEmail": "jane@example.com",
    "items": [
        {"name": "Widget", "quantity": 3, "price": 2.5},
        {"name": "Gadget", "quantity": 1, "price": 5},
    ],
}
