"""
Context Extraction Utilities

This module provides the FastAPI dependency that authenticates a request and
builds its RequestContext. Requests without a valid bearer token are rejected
with 401 before any route logic runs.
"""

import uuid
import logging
from fastapi import HTTPException, Request
from models.request_context import RequestContext
from middleware.jwt_auth import (
    JWTVerificationError,
    extract_bearer_token,
    verify_session_jwt,
)

logger = logging.getLogger(__name__)


def get_request_context(request: Request) -> RequestContext:
    """
    Authenticate the request and return the caller's context.

    Args:
        request: FastAPI Request object containing headers

    Returns:
        RequestContext with user_id, timezone and trace_id

    Raises:
        HTTPException: 401 if the bearer token is missing or invalid
    """
    trace_id = _extract_trace_id(request)

    token = extract_bearer_token(request.headers.get("Authorization"))
    if token is None:
        logger.warning(f"Missing bearer token: trace_id={trace_id}, path={request.url.path}")
        raise HTTPException(status_code=401, detail="Authentication required")

    try:
        claims = verify_session_jwt(token)
    except JWTVerificationError as e:
        logger.warning(f"Authentication failed: trace_id={trace_id}, code={e.code}")
        raise HTTPException(status_code=401, detail="Authentication required")

    logger.debug(f"Context extracted: trace_id={trace_id}, user_id={claims.user_id}")

    return RequestContext(
        user_id=claims.user_id,
        timezone=claims.timezone,
        trace_id=trace_id
    )


def _extract_trace_id(request: Request) -> str:
    """
    Use the X-Trace-Id header when it is a valid UUID, otherwise generate one.

    Args:
        request: FastAPI Request object

    Returns:
        UUID string for log correlation
    """
    trace_id = request.headers.get("X-Trace-Id")

    if trace_id and _is_valid_uuid(trace_id):
        return trace_id

    if trace_id:
        logger.debug(f"Invalid X-Trace-Id header ignored: {trace_id[:36]}")

    return str(uuid.uuid4())


def _is_valid_uuid(value: str) -> bool:
    """
    Validate that a string is a valid UUID.

    Args:
        value: String to validate

    Returns:
        True if valid UUID, False otherwise
    """
    try:
        uuid.UUID(value)
        return True
    except (ValueError, AttributeError):
        return False
