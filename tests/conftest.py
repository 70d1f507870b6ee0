"""Shared test configuration.

Environment variables are set before any test module imports main, since
main validates them at import time.
"""
import os
import time

import jwt as pyjwt
import pytest

TEST_JWT_SECRET = "test-secret-that-is-at-least-32-characters-long"

os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["INTERNAL_JWT_SECRET"] = TEST_JWT_SECRET
os.environ["INTERNAL_JWT_ISSUER"] = "task-extractor-frontend"
os.environ["INTERNAL_JWT_AUDIENCE"] = "task-extractor-api"


@pytest.fixture
def auth_headers():
    """Factory for Authorization headers carrying a valid session JWT."""
    def _make(user_id: str = "user-a", timezone: str = None) -> dict:
        now = int(time.time())
        payload = {
            "user_id": user_id,
            "iss": "task-extractor-frontend",
            "aud": "task-extractor-api",
            "iat": now,
            "exp": now + 300,
        }
        if timezone is not None:
            payload["timezone"] = timezone
        token = pyjwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")
        return {"Authorization": f"Bearer {token}"}
    return _make
