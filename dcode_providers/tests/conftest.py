"""Pytest configuration for the dcode_providers test suite.

Every test runs with provider credentials and the external config file
removed from the environment, the config cache cleared, and the shared HTTP
client pool closed afterwards. HTTP traffic is faked with ``respx``.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, Iterator, List, Tuple

import pytest

from dcode_providers.base.http import close_all_clients
from dcode_providers.base.logging import get_logger
from dcode_providers.base.models import Message, MessageRequest, Tool
from dcode_providers.config import reset_config_cache
from dcode_providers.config.defaults import CONFIG_FILE_ENV
from dcode_providers.config.env import (
    ACCESS_TOKEN_ENV_VARS,
    ENV_ALIASES,
    PROJECT_ENV_VARS,
    REGION_ENV_VARS,
)


@pytest.fixture(autouse=True)
def isolated_provider_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Strip credentials/config env vars and reset shared caches."""
    names = {n for aliases in ENV_ALIASES.values() for n in aliases}
    names.update(PROJECT_ENV_VARS + REGION_ENV_VARS + ACCESS_TOKEN_ENV_VARS)
    names.add(CONFIG_FILE_ENV)
    for name in names:
        monkeypatch.delenv(name, raising=False)
    reset_config_cache()
    close_all_clients()
    yield
    reset_config_cache()
    close_all_clients()


def sse_body(events: Iterable[Any], *, done: bool = True) -> bytes:
    """Encode ``events`` as an SSE body; dicts are JSON-encoded."""
    lines: List[str] = []
    for event in events:
        data = event if isinstance(event, str) else json.dumps(event)
        lines.append(f"data: {data}\n\n")
    if done:
        lines.append("data: [DONE]\n\n")
    return "".join(lines).encode("utf-8")


@pytest.fixture()
def make_sse():
    return sse_body


@pytest.fixture()
def collected() -> List[Any]:
    """List that doubles as a stream callback via ``collected.append``."""
    return []


@pytest.fixture()
def ls_request() -> MessageRequest:
    """The "list files" conversation with a single ``ls`` tool."""
    return MessageRequest(
        model="test-model",
        system="You are helpful",
        messages=[Message(role="user", content="list files")],
        tools=[
            Tool(
                name="ls",
                description="List a directory",
                input_schema={"type": "object", "properties": {"path": {"type": "string"}}},
            )
        ],
    )


class _PayloadHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.payloads: List[Dict[str, Any]] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.payloads.append(json.loads(record.getMessage()))


@pytest.fixture()
def event_log() -> Iterator[Tuple[logging.Logger, List[Dict[str, Any]]]]:
    """A structured logger plus the list of JSON payloads it has emitted."""
    logger = get_logger("tests.events")
    handler = _PayloadHandler()
    logger.addHandler(handler)
    yield logger, handler.payloads
    logger.removeHandler(handler)
