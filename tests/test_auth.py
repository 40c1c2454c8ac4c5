from datetime import datetime, timedelta, timezone

from jose import jwt

from conftest import auth_header, make_user
from lingooo.config import settings
from lingooo.interfaces.http.limits import limiter


def test_request_access_token(client):
    """Issued token carries the identifier as subject and an expiry"""
    response = client.post("/auth/request_access_token", json={"identifier": "abc123"})
    assert response.status_code == 200
    token = response.json()["token"]
    payload = jwt.decode(token, settings.ACCESS_TOKEN_SECRET, algorithms=[settings.JWT_ALGORITHM])
    assert payload["sub"] == "abc123"
    assert "exp" in payload
    assert "role" not in payload


def test_request_access_token_accepts_uid_field(client):
    response = client.post("/auth/request_access_token", json={"uid": "abc123"})
    assert response.status_code == 200


def test_request_access_token_requires_identifier(client):
    response = client.post("/auth/request_access_token", json={})
    assert response.status_code == 422


def test_add_user_success(client, db):
    response = client.post("/auth/add_user", json={
        "identifier": "u1",
        "displayName": "Ana",
        "photoURL": "https://img.example.com/ana.png",
        "email": "ana@example.com",
    })
    assert response.status_code == 201
    data = response.json()
    assert data["uid"] == "u1"
    assert data["role"] == "student"
    stored = db.users.find_one({"uid": "u1"})
    assert stored["selectedClasses"] == []
    assert stored["enrolledClasses"] == []


def test_add_user_twice_conflicts(client, db):
    """Second registration of the same identifier is rejected and nothing is inserted"""
    body = {"identifier": "u1", "displayName": "Ana", "photoURL": None, "email": "ana@example.com"}
    assert client.post("/auth/add_user", json=body).status_code == 201

    response = client.post("/auth/add_user", json=body)
    assert response.status_code == 409
    assert response.json() == {"error": True, "message": "User already exists"}
    assert db.users.count_documents({"uid": "u1"}) == 1


def test_add_user_invalid_email(client):
    response = client.post("/auth/add_user", json={
        "identifier": "u1", "displayName": "Ana", "email": "not-an-email",
    })
    assert response.status_code == 422


def test_verify_user_role(client, db):
    make_user(db, "instructor1", role="instructor")
    response = client.get("/auth/verify_user_role/instructor1", headers=auth_header("someone"))
    assert response.status_code == 200
    assert response.json() == {"role": "instructor"}


def test_verify_user_role_unknown_user(client):
    response = client.get("/auth/verify_user_role/ghost", headers=auth_header("someone"))
    assert response.status_code == 404


def test_verify_user_role_without_token(client):
    response = client.get("/auth/verify_user_role/instructor1")
    assert response.status_code == 401
    assert response.json()["error"] is True


def test_verify_user_role_token_from_other_secret(client):
    token = jwt.encode({"sub": "u1"}, "some-other-secret", algorithm="HS256")
    response = client.get("/auth/verify_user_role/u1", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 403
    assert response.json() == {"error": True, "message": "Forbidden"}


def test_verify_user_role_expired_token(client, db):
    make_user(db, "u1")
    exp = datetime.now(timezone.utc) - timedelta(minutes=1)
    token = jwt.encode({"sub": "u1", "exp": exp}, settings.ACCESS_TOKEN_SECRET, algorithm=settings.JWT_ALGORITHM)
    response = client.get("/auth/verify_user_role/u1", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 403


def test_verify_user_role_wrong_scheme(client):
    response = client.get("/auth/verify_user_role/u1", headers={"Authorization": "Basic dXNlcjpwYXNz"})
    assert response.status_code == 401


def test_root_and_health(client):
    assert client.get("/").text == "Hello from Lingooo's server"
    assert client.get("/health").json() == {"status": "ok"}


def test_metrics_endpoint(client):
    client.get("/health")
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "text/plain" in response.headers["content-type"]
    assert "http_requests_total" in response.text


def test_metrics_label_by_route_template(client, db):
    db.flags.insert_one({"name": "Italian", "image": "it.png"})
    client.get("/flags/single/Italian")
    metrics = client.get("/metrics").text
    assert 'endpoint="/flags/single/{name}"' in metrics
    assert 'endpoint="/flags/single/Italian"' not in metrics


def test_rate_limit_uses_error_body(client, monkeypatch):
    monkeypatch.setattr(settings, "RATE_LIMIT_PER_MINUTE", 2)
    limiter.reset()
    limiter.enabled = True
    try:
        responses = [
            client.post("/auth/request_access_token", json={"identifier": "u1"})
            for _ in range(3)
        ]
    finally:
        limiter.reset()

    assert [r.status_code for r in responses] == [200, 200, 429]
    body = responses[-1].json()
    assert body["error"] is True
    assert body["message"].startswith("Rate limit exceeded")
