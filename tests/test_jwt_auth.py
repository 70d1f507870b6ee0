"""Tests for JWT authentication.

Tests the JWT verification module and the request context dependency.
"""
import os
import time
import pytest
import jwt as pyjwt
from fastapi.testclient import TestClient


def generate_test_jwt(
    user_id: str = "auth0|test-user-123",
    timezone: str = None,
    issuer: str = None,
    audience: str = None,
    exp_offset: int = 300,
    secret: str = None,
    include_user: bool = True,
) -> str:
    """Generate a test JWT with configurable claims."""
    now = int(time.time())
    payload = {
        "iss": issuer or "task-extractor-frontend",
        "aud": audience or "task-extractor-api",
        "iat": now,
        "exp": now + exp_offset,
    }
    if include_user:
        payload["user_id"] = user_id
    if timezone is not None:
        payload["timezone"] = timezone
    secret = secret or os.environ["INTERNAL_JWT_SECRET"]
    return pyjwt.encode(payload, secret, algorithm="HS256")


class TestJWTVerification:
    """Tests for the JWT verification module."""

    def test_valid_jwt_extracts_claims(self):
        """Valid JWT should extract user_id and timezone."""
        from middleware.jwt_auth import verify_session_jwt

        token = generate_test_jwt(user_id="auth0|user-xyz", timezone="Europe/Berlin")

        claims = verify_session_jwt(token)

        assert claims.user_id == "auth0|user-xyz"
        assert claims.timezone == "Europe/Berlin"

    def test_timezone_defaults_to_utc(self):
        """JWT without a timezone claim should default to UTC."""
        from middleware.jwt_auth import verify_session_jwt

        claims = verify_session_jwt(generate_test_jwt())

        assert claims.timezone == "UTC"

    def test_expired_jwt_raises_error(self):
        """Expired JWT should raise JWTVerificationError."""
        from middleware.jwt_auth import verify_session_jwt, JWTVerificationError

        token = generate_test_jwt(exp_offset=-60)  # Expired 60 seconds ago

        with pytest.raises(JWTVerificationError) as exc_info:
            verify_session_jwt(token)

        assert exc_info.value.code == "JWT_EXPIRED"

    def test_wrong_issuer_raises_error(self):
        from middleware.jwt_auth import verify_session_jwt, JWTVerificationError

        token = generate_test_jwt(issuer="wrong-issuer")

        with pytest.raises(JWTVerificationError) as exc_info:
            verify_session_jwt(token)

        assert exc_info.value.code == "JWT_INVALID_ISSUER"

    def test_wrong_audience_raises_error(self):
        from middleware.jwt_auth import verify_session_jwt, JWTVerificationError

        token = generate_test_jwt(audience="wrong-audience")

        with pytest.raises(JWTVerificationError) as exc_info:
            verify_session_jwt(token)

        assert exc_info.value.code == "JWT_INVALID_AUDIENCE"

    def test_wrong_secret_raises_error(self):
        """JWT signed with wrong secret should raise JWTVerificationError."""
        from middleware.jwt_auth import verify_session_jwt, JWTVerificationError

        token = generate_test_jwt(secret="completely-different-secret-that-is-long-enough")

        with pytest.raises(JWTVerificationError) as exc_info:
            verify_session_jwt(token)

        assert exc_info.value.code == "JWT_INVALID"

    def test_missing_user_id_raises_error(self):
        """JWT without user_id should raise JWTVerificationError."""
        from middleware.jwt_auth import verify_session_jwt, JWTVerificationError

        token = generate_test_jwt(include_user=False)

        with pytest.raises(JWTVerificationError) as exc_info:
            verify_session_jwt(token)

        assert exc_info.value.code == "JWT_MISSING_USER"

    def test_short_secret_is_misconfiguration(self, monkeypatch):
        from middleware.jwt_auth import verify_session_jwt, JWTVerificationError

        monkeypatch.setenv("INTERNAL_JWT_SECRET", "too-short")

        with pytest.raises(JWTVerificationError) as exc_info:
            verify_session_jwt("anything")

        assert exc_info.value.code == "JWT_MISCONFIGURED"


class TestRequestContextDependency:
    """Tests for authentication at the HTTP boundary."""

    @pytest.fixture
    def client(self):
        from main import app
        return TestClient(app)

    @pytest.mark.parametrize("method,path", [
        ("post", "/api/extract-tasks"),
        ("get", "/api/tasks"),
        ("post", "/api/tasks"),
        ("put", "/api/tasks/6f1c2a4e-0000-4000-8000-000000000001"),
        ("delete", "/api/tasks/6f1c2a4e-0000-4000-8000-000000000001"),
    ])
    def test_no_auth_returns_401(self, client, method, path):
        kwargs = {"json": {}} if method in ("post", "put") else {}
        response = getattr(client, method)(path, **kwargs)

        assert response.status_code == 401
        assert response.json()["detail"] == "Authentication required"

    def test_invalid_jwt_returns_401(self, client):
        response = client.get(
            "/api/tasks",
            headers={"Authorization": "Bearer not-a-valid-token"}
        )

        assert response.status_code == 401

    def test_expired_jwt_returns_401(self, client):
        token = generate_test_jwt(exp_offset=-120)

        response = client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    def test_health_does_not_require_auth(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestBearerTokenExtraction:
    """Tests for extracting bearer tokens from headers."""

    def test_extracts_token_from_valid_header(self):
        from middleware.jwt_auth import extract_bearer_token

        assert extract_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"

    def test_returns_none_for_missing_header(self):
        from middleware.jwt_auth import extract_bearer_token

        assert extract_bearer_token(None) is None
        assert extract_bearer_token("") is None

    def test_returns_none_for_non_bearer(self):
        from middleware.jwt_auth import extract_bearer_token

        assert extract_bearer_token("Basic dXNlcjpwYXNz") is None

    def test_returns_none_for_empty_token(self):
        from middleware.jwt_auth import extract_bearer_token

        assert extract_bearer_token("Bearer ") is None
        assert extract_bearer_token("Bearer    ") is None
