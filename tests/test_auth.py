import jwt
import pytest
from fastapi.testclient import TestClient

from quotedesk.app.core.security import create_access_token, decode_access_token, get_password_hash, verify_password
from quotedesk.app.core.settings import get_settings
from quotedesk.app.db.base import Base
from quotedesk.app.db.session import engine
from quotedesk.app.main import app


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def test_password_hashing_round_trip():
    hashed = get_password_hash("secret")
    assert hashed != "secret"
    assert verify_password("secret", hashed)
    assert not verify_password("wrong", hashed)


def test_token_carries_subject():
    token = create_access_token(user_id=42)
    payload = decode_access_token(token)
    assert payload["sub"] == "42"
    assert "exp" in payload


def test_expired_and_tampered_tokens_rejected():
    with pytest.raises(ValueError):
        decode_access_token(create_access_token(user_id=1, expires_minutes=-1))
    forged = jwt.encode({"sub": "1"}, "not-the-key", algorithm="HS256")
    with pytest.raises(ValueError):
        decode_access_token(forged)
    assert get_settings().SECRET_KEY


def test_register_login_me():
    client = TestClient(app)
    resp = client.post("/auth/register", json={"email": "owner@example.com", "password": "secret", "full_name": "Owner"})
    assert resp.status_code == 200
    assert resp.json()["email"] == "owner@example.com"

    dup = client.post("/auth/register", json={"email": "owner@example.com", "password": "secret"})
    assert dup.status_code == 400

    bad = client.post("/auth/login", json={"email": "owner@example.com", "password": "nope"})
    assert bad.status_code == 400

    token = client.post("/auth/login", json={"email": "owner@example.com", "password": "secret"}).json()["access_token"]
    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["full_name"] == "Owner"


def test_invalid_token_rejected():
    client = TestClient(app)
    resp = client.get("/auth/me", headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 401
