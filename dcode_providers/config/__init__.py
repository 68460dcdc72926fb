"""Unified configuration layer for providers.

Goals
-----
* Centralize defaults (models, base URLs, regions).
* Merge sources in a predictable order (later wins):
    1. Built-in defaults
    2. Optional external config file (JSON or YAML) named by
       ``DCODE_PROVIDERS_CONFIG_FILE``
    3. Environment variables
    4. In-code overrides passed to the helper
* Provide a single call site: ``get_provider_config(provider)``.

Environment Variable Conventions
--------------------------------
``<PREFIX>_MODEL``, ``<PREFIX>_BASE_URL`` and the credential aliases from
:mod:`dcode_providers.config.env` (``GROQ_API_KEY``, ``GOOGLE_API_KEY`` ...).
The prefix is the provider id upper-cased with ``-`` replaced by ``_``.
``google-vertex`` additionally reads ``GOOGLE_CLOUD_PROJECT`` /
``GCLOUD_PROJECT``, ``GOOGLE_CLOUD_REGION`` and ``GOOGLE_ACCESS_TOKEN``.

External Config File
--------------------
JSON is tried first, then YAML (via PyYAML). Structure example::

    groq:
      model: llama-3.1-8b-instant
    google-vertex:
      project_id: my-project
      region: europe-west4
    my-gateway:
      base_url: https://llm.internal.example/v1

Public API
----------
* get_provider_config(provider: str, overrides: dict | None = None) -> dict
* get_model(provider: str) -> str | None
* reset_config_cache() -> None
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from ..base.logging import get_logger, log_event
from .defaults import (
    CEREBRAS_DEFAULT_BASE_URL,
    CEREBRAS_DEFAULT_MODEL,
    CONFIG_FILE_ENV,
    DEEPINFRA_DEFAULT_BASE_URL,
    DEEPINFRA_DEFAULT_MODEL,
    DEEPSEEK_DEFAULT_BASE_URL,
    DEEPSEEK_DEFAULT_MODEL,
    GEMINI_DEFAULT_MODEL,
    GROQ_DEFAULT_BASE_URL,
    GROQ_DEFAULT_MODEL,
    MISTRAL_DEFAULT_BASE_URL,
    MISTRAL_DEFAULT_MODEL,
    OPENAI_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_MODEL,
    OPENROUTER_DEFAULT_BASE_URL,
    OPENROUTER_DEFAULT_MODEL,
    PERPLEXITY_DEFAULT_BASE_URL,
    PERPLEXITY_DEFAULT_MODEL,
    TOGETHER_DEFAULT_BASE_URL,
    TOGETHER_DEFAULT_MODEL,
    VERTEX_DEFAULT_REGION,
    XAI_DEFAULT_BASE_URL,
    XAI_DEFAULT_MODEL,
)
from .env import (
    ACCESS_TOKEN_ENV_VARS,
    PROJECT_ENV_VARS,
    REGION_ENV_VARS,
    env_prefix,
    first_env,
    resolve_provider_key,
)


# -------------------- Defaults --------------------

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "openai": {"model": OPENAI_DEFAULT_MODEL, "base_url": OPENAI_DEFAULT_BASE_URL},
    "groq": {"model": GROQ_DEFAULT_MODEL, "base_url": GROQ_DEFAULT_BASE_URL},
    "openrouter": {"model": OPENROUTER_DEFAULT_MODEL, "base_url": OPENROUTER_DEFAULT_BASE_URL},
    "deepseek": {"model": DEEPSEEK_DEFAULT_MODEL, "base_url": DEEPSEEK_DEFAULT_BASE_URL},
    "xai": {"model": XAI_DEFAULT_MODEL, "base_url": XAI_DEFAULT_BASE_URL},
    "together": {"model": TOGETHER_DEFAULT_MODEL, "base_url": TOGETHER_DEFAULT_BASE_URL},
    "mistral": {"model": MISTRAL_DEFAULT_MODEL, "base_url": MISTRAL_DEFAULT_BASE_URL},
    "cerebras": {"model": CEREBRAS_DEFAULT_MODEL, "base_url": CEREBRAS_DEFAULT_BASE_URL},
    "deepinfra": {"model": DEEPINFRA_DEFAULT_MODEL, "base_url": DEEPINFRA_DEFAULT_BASE_URL},
    "perplexity": {"model": PERPLEXITY_DEFAULT_MODEL, "base_url": PERPLEXITY_DEFAULT_BASE_URL},
    "google": {"model": GEMINI_DEFAULT_MODEL},
    "google-vertex": {"model": GEMINI_DEFAULT_MODEL, "region": VERTEX_DEFAULT_REGION},
}

_FILE_CACHE: Dict[Tuple[str, float], Dict[str, Any]] = {}
_logger = get_logger("dcode_providers.config")


def reset_config_cache() -> None:
    """Forget any parsed external config file (tests, hot reload)."""
    _FILE_CACHE.clear()


def _parse_config_text(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError:
        return yaml.safe_load(text)


def _load_external_config() -> Dict[str, Any]:
    """Return the parsed external config file, or ``{}`` when none is set."""
    path = os.getenv(CONFIG_FILE_ENV)
    if not path:
        return {}
    p = Path(path).expanduser()
    if not p.is_file():
        log_event(_logger, "config.file_missing", path=str(p))
        return {}
    key = (str(p), p.stat().st_mtime)
    cached = _FILE_CACHE.get(key)
    if cached is not None:
        return cached
    try:
        data = _parse_config_text(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"invalid provider config file {p}: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"provider config file {p} must contain a mapping at top level")
    _FILE_CACHE.clear()
    _FILE_CACHE[key] = data
    return data


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = env_prefix(provider)
    for field in ("model", "base_url"):
        val = os.getenv(f"{prefix}_{field.upper()}")
        if val:
            out[field] = val
    key = resolve_provider_key(provider)
    if key:
        out["api_key"] = key
    if provider == "google-vertex":
        project = first_env(PROJECT_ENV_VARS)
        region = first_env(REGION_ENV_VARS)
        token = first_env(ACCESS_TOKEN_ENV_VARS)
        if project:
            out["project_id"] = project
        if region:
            out["region"] = region
        if token:
            out["access_token"] = token
    return out


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a provider.

    Merge order (later wins): defaults -> external config -> env vars -> overrides.
    ``None`` values in ``overrides`` are ignored so callers can pass optional
    arguments straight through.
    """
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = {}
    cfg |= DEFAULTS.get(name, {})

    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg

    cfg |= _env_overrides(name)

    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}
    return cfg


def get_model(provider: str) -> Optional[str]:
    return get_provider_config(provider).get("model")


__all__ = [
    "get_provider_config",
    "get_model",
    "reset_config_cache",
    "DEFAULTS",
]
