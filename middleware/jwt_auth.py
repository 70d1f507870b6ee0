"""
Session JWT Authentication Module

This module verifies the session JWTs issued by the login flow of the web
frontend. Login, registration and password handling live in the frontend;
this service only checks the token and reads the caller's identity from it.

JWT Claims Contract:
- user_id: string (required) - Owner identifier every task is scoped to
- timezone: string (optional) - IANA timezone name, default "UTC"
- iss: string (required) - Issuer, must match INTERNAL_JWT_ISSUER
- aud: string (required) - Audience, must match INTERNAL_JWT_AUDIENCE
- iat: number (required) - Issued-at timestamp
- exp: number (required) - Expiration timestamp

Security:
- Uses HMAC-SHA256 (HS256) symmetric signing
- Never logs full JWT tokens
"""

import os
import logging
from typing import Optional
from dataclasses import dataclass

import jwt
from jwt.exceptions import (
    InvalidTokenError,
    ExpiredSignatureError,
    InvalidIssuerError,
    InvalidAudienceError,
)

logger = logging.getLogger(__name__)

# Clock skew tolerance in seconds (for exp validation)
CLOCK_SKEW_LEEWAY = 30
MIN_SECRET_LENGTH = 32


@dataclass
class JWTClaims:
    """
    Validated claims extracted from a session JWT.

    Attributes:
        user_id: Identifier of the authenticated user
        timezone: IANA timezone name of the user
        issued_at: Unix timestamp when the token was issued
        expires_at: Unix timestamp when the token expires
    """
    user_id: str
    issued_at: int
    expires_at: int
    timezone: str = "UTC"


class JWTVerificationError(Exception):
    """
    Raised when JWT verification fails.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code for logging
    """
    def __init__(self, message: str, code: str = "JWT_INVALID"):
        self.message = message
        self.code = code
        super().__init__(message)


def get_jwt_config() -> tuple[str, str, str]:
    """
    Get JWT configuration from environment variables.

    Returns:
        Tuple of (secret, issuer, audience)

    Raises:
        JWTVerificationError: If required env vars are missing
    """
    secret = os.getenv("INTERNAL_JWT_SECRET")
    issuer = os.getenv("INTERNAL_JWT_ISSUER", "task-extractor-frontend")
    audience = os.getenv("INTERNAL_JWT_AUDIENCE", "task-extractor-api")

    if not secret:
        logger.error("INTERNAL_JWT_SECRET not configured")
        raise JWTVerificationError(
            "JWT verification not configured",
            code="JWT_NOT_CONFIGURED"
        )

    if len(secret) < MIN_SECRET_LENGTH:
        logger.error("INTERNAL_JWT_SECRET is too short (min 32 chars)")
        raise JWTVerificationError(
            "JWT verification misconfigured",
            code="JWT_MISCONFIGURED"
        )

    return secret, issuer, audience


def verify_session_jwt(token: str) -> JWTClaims:
    """
    Verify a session JWT and extract claims.

    Checks the signature, issuer, audience and expiry (with clock skew
    tolerance) and requires a non-empty user_id claim.

    Args:
        token: The JWT string (without 'Bearer ' prefix)

    Returns:
        JWTClaims with validated user_id

    Raises:
        JWTVerificationError: On any validation failure
    """
    secret, issuer, audience = get_jwt_config()

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=["HS256"],
            issuer=issuer,
            audience=audience,
            leeway=CLOCK_SKEW_LEEWAY,
            options={
                "require": ["exp", "iat", "iss", "aud"],
            }
        )
    except ExpiredSignatureError:
        logger.warning("JWT has expired")
        raise JWTVerificationError("Token has expired", code="JWT_EXPIRED")

    except InvalidIssuerError:
        logger.warning(f"JWT has invalid issuer (expected: {issuer})")
        raise JWTVerificationError("Invalid token issuer", code="JWT_INVALID_ISSUER")

    except InvalidAudienceError:
        logger.warning(f"JWT has invalid audience (expected: {audience})")
        raise JWTVerificationError("Invalid token audience", code="JWT_INVALID_AUDIENCE")

    except InvalidTokenError as e:
        logger.warning(f"JWT verification failed: {type(e).__name__}")
        raise JWTVerificationError("Invalid token", code="JWT_INVALID")

    user_id = payload.get("user_id")
    if not user_id or not isinstance(user_id, str):
        logger.warning("JWT missing user_id claim")
        raise JWTVerificationError(
            "Missing required claim: user_id",
            code="JWT_MISSING_USER"
        )

    timezone = payload.get("timezone") or "UTC"

    logger.debug(f"JWT verified for user={user_id[:8]}...")

    return JWTClaims(
        user_id=user_id,
        timezone=timezone,
        issued_at=payload.get("iat", 0),
        expires_at=payload.get("exp", 0),
    )


def extract_bearer_token(authorization_header: Optional[str]) -> Optional[str]:
    """
    Extract the token from an Authorization header.

    Args:
        authorization_header: The full Authorization header value

    Returns:
        The token string, or None if header is missing/malformed
    """
    if not authorization_header:
        return None

    if not authorization_header.startswith("Bearer "):
        return None

    token = authorization_header[7:]  # Remove "Bearer " prefix

    if not token or not token.strip():
        return None

    return token.strip()


def is_jwt_auth_configured() -> bool:
    """
    Check if JWT authentication is properly configured.

    Returns:
        True if INTERNAL_JWT_SECRET is set and valid
    """
    secret = os.getenv("INTERNAL_JWT_SECRET")
    return secret is not None and len(secret) >= MIN_SECRET_LENGTH
