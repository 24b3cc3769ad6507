# =============================================================================
# tests/test_auth.py - Session Token Verification Tests
# =============================================================================
# Tokens are signed with a symmetric JWK so no RSA key pair is needed; the
# verification path (kid lookup, decode, claim checks) is the same.
# =============================================================================

import base64
import time

import pytest
from jose import jwt

from app.auth import dependencies as auth
from app.exceptions import UnauthorizedError

SECRET = "test-signing-secret-with-enough-bytes"
KID = "ins_test"


@pytest.fixture(autouse=True)
def jwks(monkeypatch):
    key = {
        "kty": "oct",
        "kid": KID,
        "alg": "HS256",
        "k": base64.urlsafe_b64encode(SECRET.encode()).rstrip(b"=").decode(),
    }
    monkeypatch.setattr(auth, "_fetch_jwks", lambda: {"keys": [key]})


def make_token(claims: dict, kid: str = KID) -> str:
    return jwt.encode(claims, SECRET, algorithm="HS256", headers={"kid": kid})


class TestVerifyToken:

    def test_valid_token(self):
        token = make_token({"sub": "user_2abc", "email": "ana@example.com", "exp": int(time.time()) + 60})

        user = auth.verify_token(token)

        assert user.id == "user_2abc"
        assert user.email == "ana@example.com"

    def test_expired(self):
        token = make_token({"sub": "user_2abc", "exp": int(time.time()) - 60})
        with pytest.raises(UnauthorizedError, match="expired"):
            auth.verify_token(token)

    def test_unknown_kid(self):
        token = make_token({"sub": "user_2abc"}, kid="other")
        with pytest.raises(UnauthorizedError, match="unknown signing key"):
            auth.verify_token(token)

    def test_missing_subject(self):
        token = make_token({"email": "ana@example.com"})
        with pytest.raises(UnauthorizedError, match="missing user ID"):
            auth.verify_token(token)

    def test_garbage(self):
        with pytest.raises(UnauthorizedError):
            auth.verify_token("not-a-jwt")


class TestBearerDependency:

    def test_bearer_token_reaches_favorites(self, client, db):
        db.queue("users", [])
        token = make_token({"sub": "user_2abc", "exp": int(time.time()) + 60})

        response = client.get("/api/user/favorites", headers={"Authorization": f"Bearer {token}"})

        # Authenticated, but the user has not been synced yet
        assert response.status_code == 404
        assert response.json()["code"] == "USER_NOT_FOUND"

    def test_invalid_token_on_toggle_is_anonymous(self, client):
        response = client.post(
            "/api/user/favorites/toggle",
            json={"indicator_type": "emae"},
            headers={"Authorization": "Bearer broken"},
        )
        assert response.json()["authenticated"] is False
