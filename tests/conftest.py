import os
import sys
from unittest.mock import MagicMock

import mongomock
import pytest

CURRENT_DIR = os.path.dirname(__file__)
SERVICE_ROOT = os.path.dirname(CURRENT_DIR)
if SERVICE_ROOT not in sys.path:
    sys.path.insert(0, SERVICE_ROOT)

from fastapi.testclient import TestClient
from lingooo.infrastructure.db import get_db
from lingooo.infrastructure.payments import get_payment_gateway
from lingooo.infrastructure.security import create_access_token
from lingooo.interfaces.http.limits import limiter
from lingooo.main import app


class FakeGateway:
    """Records requested prices instead of calling the payment provider."""

    def __init__(self):
        self.prices = []
        self.error = None

    def create_intent(self, price):
        if self.error is not None:
            raise self.error
        self.prices.append(price)
        return f"pi_test_secret_{len(self.prices)}"


@pytest.fixture
def db():
    """In-memory document store"""
    return mongomock.MongoClient()["lingooo"]


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch):
    """Redis client that always misses"""
    client = MagicMock()
    client.get.return_value = None
    monkeypatch.setattr("lingooo.infrastructure.cache.get_redis", lambda: client)
    return client


@pytest.fixture
def client(db, gateway):
    # TestClient without a context manager skips the lifespan (no real MongoDB)
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    limiter.enabled = False
    yield TestClient(app)
    app.dependency_overrides.clear()
    limiter.enabled = True


def make_user(db, uid, role="student", **extra):
    doc = {
        "uid": uid,
        "displayName": extra.pop("displayName", uid.title()),
        "photoURL": extra.pop("photoURL", f"https://img.example.com/{uid}.png"),
        "email": extra.pop("email", f"{uid}@example.com"),
        "role": role,
        "selectedClasses": [],
        "enrolledClasses": [],
        "reviews": [],
    }
    doc.update(extra)
    db.users.insert_one(doc)
    return doc


def make_class(db, title="Spanish 101", price=10, instructor="instructor1", **extra):
    doc = {
        "title": title,
        "price": price,
        "language": extra.pop("language", "Spanish"),
        "enrolled": extra.pop("enrolled", 0),
        "availableSeats": extra.pop("availableSeats", 10),
        "instructor": {"uid": instructor, "name": instructor.title(), "email": f"{instructor}@example.com"},
    }
    doc.update(extra)
    return str(db.classes.insert_one(doc).inserted_id)


def auth_header(uid):
    return {"Authorization": f"Bearer {create_access_token(uid)}"}


