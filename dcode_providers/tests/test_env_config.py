"""Configuration merge order and environment variable mapping."""
from __future__ import annotations

import json

import pytest

from dcode_providers.config import DEFAULTS, get_model, get_provider_config, reset_config_cache
from dcode_providers.config.defaults import CONFIG_FILE_ENV, GROQ_DEFAULT_BASE_URL
from dcode_providers.config.env import (
    ENV_ALIASES,
    env_prefix,
    get_env_var_name,
    resolve_provider_key,
)


def test_env_aliases_cover_every_default_provider():
    for provider in DEFAULTS:
        assert provider in ENV_ALIASES  # nosec B101


def test_get_env_var_name_and_prefix():
    assert get_env_var_name("openai") == "OPENAI_API_KEY"  # nosec B101
    assert get_env_var_name("google") == "GOOGLE_API_KEY"  # nosec B101
    assert get_env_var_name("nope") is None  # nosec B101
    assert env_prefix("google-vertex") == "GOOGLE_VERTEX"  # nosec B101


def test_resolve_provider_key_alias_order(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "alias")
    assert resolve_provider_key("google") == "alias"  # nosec B101
    monkeypatch.setenv("GOOGLE_API_KEY", "canon")
    assert resolve_provider_key("google") == "canon"  # nosec B101


def test_resolve_provider_key_unknown_provider_uses_prefix(monkeypatch):
    monkeypatch.setenv("MY_GATEWAY_API_KEY", "gw")
    assert resolve_provider_key("my-gateway") == "gw"  # nosec B101


def test_defaults_only():
    cfg = get_provider_config("groq")
    assert cfg["base_url"] == GROQ_DEFAULT_BASE_URL  # nosec B101
    assert "api_key" not in cfg  # nosec B101


def test_merge_order_file_then_env_then_overrides(tmp_path, monkeypatch):
    path = tmp_path / "providers.yaml"
    path.write_text("groq:\n  model: from-file\n  base_url: https://file.example/v1\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))
    reset_config_cache()

    assert get_model("groq") == "from-file"  # nosec B101

    monkeypatch.setenv("GROQ_MODEL", "from-env")
    monkeypatch.setenv("GROQ_API_KEY", "k")
    cfg = get_provider_config("groq")
    assert cfg["model"] == "from-env" and cfg["api_key"] == "k"  # nosec B101
    assert cfg["base_url"] == "https://file.example/v1"  # nosec B101

    cfg = get_provider_config("groq", {"model": "explicit", "base_url": None})
    assert cfg["model"] == "explicit"  # nosec B101
    assert cfg["base_url"] == "https://file.example/v1"  # nosec B101


def test_json_config_file(tmp_path, monkeypatch):
    path = tmp_path / "providers.json"
    path.write_text(json.dumps({"local": {"base_url": "http://localhost:11434/v1"}}), encoding="utf-8")
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))
    assert get_provider_config("local")["base_url"] == "http://localhost:11434/v1"  # nosec B101


def test_missing_config_file_is_ignored(tmp_path, monkeypatch):
    monkeypatch.setenv(CONFIG_FILE_ENV, str(tmp_path / "absent.yaml"))
    assert get_provider_config("openai")["model"] == DEFAULTS["openai"]["model"]  # nosec B101


def test_non_mapping_config_file_is_rejected(tmp_path, monkeypatch):
    path = tmp_path / "bad.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))
    with pytest.raises(ValueError):
        get_provider_config("openai")


def test_vertex_env_settings(monkeypatch):
    monkeypatch.setenv("GCLOUD_PROJECT", "proj")
    monkeypatch.setenv("GOOGLE_CLOUD_REGION", "europe-west4")
    monkeypatch.setenv("GOOGLE_ACCESS_TOKEN", "tok")
    cfg = get_provider_config("google-vertex")
    assert (cfg["project_id"], cfg["region"], cfg["access_token"]) == ("proj", "europe-west4", "tok")  # nosec B101
