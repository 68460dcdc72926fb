"""
Normalized provider failure kinds (taxonomy).

Defines the `ErrorKind` enumeration every adapter classifies failures into.
Values are lowercase snake_case and are a stable public contract for logging
and for the caller's retry/fatal decision.
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure categories produced by the classifier."""

    NETWORK = "network"
    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    INVALID_REQUEST = "invalid_request"
    SERVER = "server"
    MALFORMED_RESPONSE = "malformed_response"
    UNKNOWN = "unknown"


__all__ = ["ErrorKind"]
