"""Unit tests for the shared httpx client pool and timeout configuration.

Covers:
- Same key (base_url, purpose) returns the same instance.
- Different purpose or base_url yields different instances.
- Closed clients are replaced.
- Pooled clients carry the configured timeouts.
"""
from __future__ import annotations

from dcode_providers.base.http import close_all_clients, get_httpx_client
from dcode_providers.base.timeouts import TimeoutConfig, get_timeout_config


def setup_function(_):
    close_all_clients()


def teardown_function(_):
    close_all_clients()


def test_same_key_returns_same_instance():
    c1 = get_httpx_client("https://api.example.com", purpose="chat")
    c2 = get_httpx_client("https://api.example.com", purpose="chat")
    assert c1 is c2, "Expected pooled client instances to be identical for same key"  # nosec B101


def test_different_purpose_returns_different_instances():
    c1 = get_httpx_client("https://api.example.com", purpose="chat")
    c2 = get_httpx_client("https://api.example.com", purpose="models")
    assert c1 is not c2  # nosec B101


def test_different_base_url_returns_different_instances():
    c1 = get_httpx_client("https://api.example.com", purpose="chat")
    c2 = get_httpx_client("https://api.other.com", purpose="chat")
    assert c1 is not c2  # nosec B101


def test_closed_client_is_recreated():
    c1 = get_httpx_client(None, purpose="chat")
    close_all_clients()
    assert c1.is_closed  # nosec B101
    c2 = get_httpx_client(None, purpose="chat")
    assert c2 is not c1 and not c2.is_closed  # nosec B101


def test_timeout_env_overrides(monkeypatch):
    monkeypatch.setenv("DCODE_TIMEOUT_READ_SECONDS", "300")
    monkeypatch.setenv("DCODE_TIMEOUT_CONNECT_SECONDS", "-1")
    cfg = get_timeout_config()
    assert cfg.read_seconds == 300.0  # nosec B101
    assert cfg.connect_seconds == TimeoutConfig().connect_seconds  # nosec B101

    client = get_httpx_client("https://api.example.com", purpose="timeouts")
    assert client.timeout.read == 300.0  # nosec B101


def test_timeout_config_to_httpx_defaults():
    timeout = TimeoutConfig().to_httpx()
    assert (timeout.connect, timeout.read, timeout.write, timeout.pool) == (10.0, 120.0, 30.0, 10.0)  # nosec B101
