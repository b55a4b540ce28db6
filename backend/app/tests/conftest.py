"""
Pytest fixtures shared across all test modules.
Uses an in-memory SQLite database with StaticPool so all connections
share a single in-memory DB — no real Postgres required for tests.
"""

import os

# Set env vars BEFORE any app module is imported
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-min-32-chars-long!!"
os.environ["ALGORITHM"] = "HS256"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Import app modules AFTER env vars are set
from app.database import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.channel import CHANNEL_PUBLIC, Channel  # noqa: E402
from app.models.message import Message  # noqa: E402
from app.models.user import User  # noqa: E402
from app.models.user_relation import UserRelation  # noqa: E402

# Single shared in-memory SQLite engine — StaticPool ensures all
# connections share the same DB instance.
engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def setup_db():
    """Create tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def register_user(client: TestClient, username="testuser", email=None, password="Password1!"):
    email = email or f"{username}@example.com"
    return client.post("/api/auth/register", json={"username": username, "email": email, "password": password})


def auth_headers(client: TestClient, username="testuser", email=None, password="Password1!"):
    resp = register_user(client, username=username, email=email, password=password)
    assert resp.status_code == 200, f"Registration failed: {resp.json()}"
    token = resp.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


def user_id_for(client: TestClient, headers) -> int:
    return client.get("/api/auth/me", headers=headers).json()["id"]


def get_user(db, user_id: int) -> User:
    return db.query(User).filter(User.id == user_id).one()


def set_restricted(db, user_id: int, restricted: bool = True) -> None:
    get_user(db, user_id).is_restricted = restricted
    db.commit()


def make_admin(db, user_id: int) -> None:
    get_user(db, user_id).is_site_admin = True
    db.commit()


def add_relation(db, user_id: int, zebra_id: int, kind: str) -> UserRelation:
    relation = UserRelation(user_id=user_id, zebra_id=zebra_id, kind=kind)
    db.add(relation)
    db.commit()
    return relation


def make_public_channel(db, name="#lobby", description="General chat") -> Channel:
    channel = Channel(name=name, description=description, type=CHANNEL_PUBLIC)
    db.add(channel)
    db.commit()
    db.refresh(channel)
    return channel


def make_message(db, channel_id: int, user_id: int, content="hello there") -> Message:
    """Insert a message directly, bypassing membership checks."""
    message = Message(channel_id=channel_id, user_id=user_id, content=content)
    db.add(message)
    db.commit()
    db.refresh(message)
    return message


@pytest.fixture()
def alice_headers(client):
    return auth_headers(client, username="alice")


@pytest.fixture()
def bob_headers(client):
    return auth_headers(client, username="bob", password="BobPass1!")


@pytest.fixture()
def alice_id(client, alice_headers):
    return user_id_for(client, alice_headers)


@pytest.fixture()
def bob_id(client, bob_headers):
    return user_id_for(client, bob_headers)
