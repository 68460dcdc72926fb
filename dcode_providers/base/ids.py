"""Identifier generation for synthesized tool calls and responses.

Generated tool-call ids are ``call_`` followed by 24 random hex characters.
They are unique across a whole session (not merely within one response), so
callers may use them as correlation keys between a tool_use and its
tool_result even when the vendor supplied no id.
"""
from __future__ import annotations

import secrets

TOOL_CALL_ID_PREFIX = "call_"


def new_tool_call_id() -> str:
    """Return a fresh, session-unique tool-call id."""
    return TOOL_CALL_ID_PREFIX + secrets.token_hex(12)


__all__ = ["new_tool_call_id", "TOOL_CALL_ID_PREFIX"]
