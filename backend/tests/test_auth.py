from datetime import datetime, timedelta, timezone

import jwt
from fastapi.testclient import TestClient

from formcraft.core.config import settings
from formcraft.models.user import User
from formcraft.services.auth import create_access_token, hash_password, verify_password

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

REGISTER_URL = "/api/v1/auth/register"
LOGIN_URL = "/api/v1/auth/login"
ME_URL = "/api/v1/auth/me"


def _register_payload(**overrides):
    base = {
        "email": "Test@Example.com",
        "password": "strongpassword123",
        "name": "Test User",
    }
    base.update(overrides)
    return base


def _auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


# ===========================================================================
# Password hashing
# ===========================================================================


def test_hash_and_verify_password():
    hashed = hash_password("s3cret-pass")
    assert hashed != "s3cret-pass"
    assert verify_password("s3cret-pass", hashed)
    assert not verify_password("wrong-pass", hashed)


# ===========================================================================
# Registration tests
# ===========================================================================


class TestRegister:
    def test_register_success(self, client: TestClient, db):
        resp = client.post(REGISTER_URL, json=_register_payload())
        assert resp.status_code == 201
        data = resp.json()
        assert data["token_type"] == "bearer"
        assert data["access_token"]

        user = db.query(User).one()
        assert user.email == "test@example.com"
        assert user.password_hash != "strongpassword123"

    def test_register_duplicate_email(self, client: TestClient):
        client.post(REGISTER_URL, json=_register_payload())
        resp = client.post(REGISTER_URL, json=_register_payload(email="test@example.com"))
        assert resp.status_code == 409
        assert resp.json()["detail"] == "Email already registered"

    def test_register_short_password_rejected(self, client: TestClient):
        resp = client.post(REGISTER_URL, json=_register_payload(password="short"))
        assert resp.status_code == 422


# ===========================================================================
# Login tests
# ===========================================================================


class TestLogin:
    def test_login_success(self, client: TestClient):
        client.post(REGISTER_URL, json=_register_payload())
        resp = client.post(LOGIN_URL, json={"email": "test@example.com", "password": "strongpassword123"})
        assert resp.status_code == 200
        token = resp.json()["access_token"]
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        assert payload["type"] == "access"
        assert payload["email"] == "test@example.com"

    def test_login_wrong_password(self, client: TestClient):
        client.post(REGISTER_URL, json=_register_payload())
        resp = client.post(LOGIN_URL, json={"email": "test@example.com", "password": "nope-nope-nope"})
        assert resp.status_code == 401

    def test_login_unknown_user(self, client: TestClient):
        resp = client.post(LOGIN_URL, json={"email": "ghost@example.com", "password": "whatever123"})
        assert resp.status_code == 401


# ===========================================================================
# Current user
# ===========================================================================


class TestMe:
    def test_me_returns_profile(self, client: TestClient, user, auth_headers):
        resp = client.get(ME_URL, headers=auth_headers)
        assert resp.status_code == 200
        data = resp.json()
        assert data["id"] == str(user.id)
        assert data["email"] == user.email

    def test_me_rejects_garbage_token(self, client: TestClient):
        resp = client.get(ME_URL, headers=_auth_header("not-a-jwt"))
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid token"

    def test_me_rejects_expired_token(self, client: TestClient, user):
        payload = {
            "sub": str(user.id),
            "exp": datetime.now(timezone.utc) - timedelta(minutes=1),
            "type": "access",
        }
        token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
        resp = client.get(ME_URL, headers=_auth_header(token))
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Token has expired"

    def test_me_rejects_inactive_user(self, client: TestClient, db, user):
        token = create_access_token(user)
        user.is_active = False
        db.commit()
        resp = client.get(ME_URL, headers=_auth_header(token))
        assert resp.status_code == 403
