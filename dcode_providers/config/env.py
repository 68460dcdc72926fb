"""dcode_providers.config.env
==========================

Centralized environment variable mapping for provider credentials and
cloud settings.

Purpose
-------
- Single source of truth mapping provider ids to their credential env vars
  (canonical name first, then accepted aliases).
- Small helpers to look values up consistently across the package.

Design Notes
------------
- Provider ids may contain ``-`` (``google-vertex``); env prefixes replace it
  with ``_`` and upper-case the rest (``GOOGLE_VERTEX_API_KEY``).
- Helpers never raise on unknown providers or unset variables; they return
  ``None`` and callers decide how to proceed.
"""

from __future__ import annotations

import os
from typing import Dict, Optional, Tuple

# Provider -> ordered env var names for the API credential (canonical first)
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "openai": ("OPENAI_API_KEY",),
    "groq": ("GROQ_API_KEY",),
    "openrouter": ("OPENROUTER_API_KEY",),
    "deepseek": ("DEEPSEEK_API_KEY",),
    "xai": ("XAI_API_KEY",),
    "together": ("TOGETHER_API_KEY",),
    "mistral": ("MISTRAL_API_KEY",),
    "cerebras": ("CEREBRAS_API_KEY",),
    "deepinfra": ("DEEPINFRA_API_KEY",),
    "perplexity": ("PERPLEXITY_API_KEY",),
    "google": ("GOOGLE_API_KEY", "GEMINI_API_KEY"),
    "google-vertex": ("GOOGLE_VERTEX_API_KEY", "GOOGLE_API_KEY", "GEMINI_API_KEY"),
}

# Google Cloud settings used by the Vertex endpoint
PROJECT_ENV_VARS: Tuple[str, ...] = ("GOOGLE_CLOUD_PROJECT", "GCLOUD_PROJECT")
REGION_ENV_VARS: Tuple[str, ...] = ("GOOGLE_CLOUD_REGION", "GOOGLE_CLOUD_LOCATION")
ACCESS_TOKEN_ENV_VARS: Tuple[str, ...] = ("GOOGLE_ACCESS_TOKEN",)


def env_prefix(provider: str) -> str:
    """Return the env var prefix for ``provider`` (``google-vertex`` -> ``GOOGLE_VERTEX``)."""
    return (provider or "").strip().upper().replace("-", "_")


def first_env(names: Tuple[str, ...]) -> Optional[str]:
    """Return the first non-empty value among ``names``."""
    for name in names:
        val = os.getenv(name)
        if val:
            return val
    return None


def get_env_var_name(provider: str) -> Optional[str]:
    """Return the canonical credential env var name for ``provider``."""
    names = ENV_ALIASES.get((provider or "").strip().lower())
    return names[0] if names else None


def resolve_provider_key(provider: str) -> Optional[str]:
    """Return the credential for ``provider`` from the environment.

    Known providers consult their alias list in order; unknown providers fall
    back to ``<PREFIX>_API_KEY``.
    """
    name = (provider or "").strip().lower()
    names = ENV_ALIASES.get(name) or (f"{env_prefix(name)}_API_KEY",)
    return first_env(names)


__all__ = [
    "ENV_ALIASES",
    "PROJECT_ENV_VARS",
    "REGION_ENV_VARS",
    "ACCESS_TOKEN_ENV_VARS",
    "env_prefix",
    "first_env",
    "get_env_var_name",
    "resolve_provider_key",
]
