"""Centralized timeout configuration for provider HTTP traffic.

Key Components
--------------
TimeoutConfig
    Frozen dataclass capturing the timeout phases of one HTTP exchange. The
    ``read`` value bounds the gap between two received chunks, so on a stream
    it acts as an idle timeout rather than a wall-clock cap.

get_timeout_config()
    Returns a process-cached configuration, parsing environment overrides on
    first use and whenever they change. Supported variables (all optional,
    seconds, must be positive):
        DCODE_TIMEOUT_CONNECT_SECONDS
        DCODE_TIMEOUT_READ_SECONDS
        DCODE_TIMEOUT_WRITE_SECONDS
        DCODE_TIMEOUT_POOL_SECONDS

Design Constraints
------------------
1. No ad-hoc numeric timeouts outside this module.
2. Shared HTTP clients read this once at creation and never change it per call.
"""
from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Optional, Tuple

import httpx

_ENV_NAMES = (
    "DCODE_TIMEOUT_CONNECT_SECONDS",
    "DCODE_TIMEOUT_READ_SECONDS",
    "DCODE_TIMEOUT_WRITE_SECONDS",
    "DCODE_TIMEOUT_POOL_SECONDS",
)


@dataclass(frozen=True)
class TimeoutConfig:
    """Normalized timeout values in seconds.

    Attributes:
        connect_seconds: Establishing the TCP/TLS connection.
        read_seconds: Waiting for the next bytes of a response (idle timeout
            while streaming). Long by default because reasoning models can
            think for a while before the first token.
        write_seconds: Sending the request body.
        pool_seconds: Waiting for a free connection in the client pool.
    """

    connect_seconds: float = 10.0
    read_seconds: float = 120.0
    write_seconds: float = 30.0
    pool_seconds: float = 10.0

    def to_httpx(self) -> httpx.Timeout:
        """Return the equivalent ``httpx.Timeout``."""
        return httpx.Timeout(
            connect=self.connect_seconds,
            read=self.read_seconds,
            write=self.write_seconds,
            pool=self.pool_seconds,
        )


_CACHED: Optional[TimeoutConfig] = None
_ENV_GUARD: Optional[Tuple[str, ...]] = None


def _parse_env_float(name: str, default: float) -> float:
    """Read a positive float from ``name``; return ``default`` when unset or invalid."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = tuple(os.getenv(n, "") for n in _ENV_NAMES)
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        connect_seconds=_parse_env_float(_ENV_NAMES[0], defaults.connect_seconds),
        read_seconds=_parse_env_float(_ENV_NAMES[1], defaults.read_seconds),
        write_seconds=_parse_env_float(_ENV_NAMES[2], defaults.write_seconds),
        pool_seconds=_parse_env_float(_ENV_NAMES[3], defaults.pool_seconds),
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = ["TimeoutConfig", "get_timeout_config"]
