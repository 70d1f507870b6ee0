"""
Request Context Data Model

This module defines the RequestContext dataclass holding the authenticated
caller's identity for the duration of one request.
"""

from dataclasses import dataclass


@dataclass
class RequestContext:
    """
    Context information extracted from a verified JWT and request headers.

    Attributes:
        user_id: Owner identifier every task read and write is scoped to
        timezone: IANA timezone name used for local date rendering
        trace_id: ID for log correlation (from X-Trace-Id header or generated)
    """
    user_id: str
    trace_id: str
    timezone: str = "UTC"
