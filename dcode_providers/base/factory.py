"""Provider Factory utilities.

Purpose
-------
Centralize creation of adapter instances implementing the ``Provider``
protocol from a provider id (``"groq"``, ``"google-vertex"`` ...). Adapter
modules are imported lazily with ``importlib`` so importing the factory stays
cheap.

Resolution
----------
1. Configuration is merged by :func:`dcode_providers.config.get_provider_config`
   (defaults, config file, environment, then explicit arguments).
2. The id selects an adapter implementation. All OpenAI-compatible backends
   share one implementation parameterized by a ``BackendProfile``.
3. An id that is not registered but has a ``base_url`` configured is treated
   as a generic OpenAI-compatible backend (local servers, gateways).

The factory performs no I/O and no retries; it either returns an instance or
raises :class:`UnknownProviderError`.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, List, Optional

import httpx

from ..config import get_provider_config

_OPENAI_COMPATIBLE = "openai_compatible"
_GEMINI = "gemini"


class UnknownProviderError(Exception):
    """Raised when a provider id cannot be resolved to an adapter.

    Failure modes include:
    - The id is not registered and no ``base_url`` is configured for it.
    - The adapter module cannot be imported or the adapter class is missing.
    """


def create_provider(provider: str, **kwargs: Any) -> Any:
    """Compatibility helper that delegates to :meth:`ProviderFactory.create`."""
    return ProviderFactory.create(provider, **kwargs)


class ProviderFactory:
    """Create provider adapters based on a provider id."""

    # Adapter implementations by key
    _ADAPTERS: Dict[str, Dict[str, str]] = {
        _OPENAI_COMPATIBLE: {
            "module": "dcode_providers.openai_compatible.client",
            "class": "OpenAICompatibleProvider",
        },
        _GEMINI: {"module": "dcode_providers.gemini.client", "class": "GeminiProvider"},
    }

    # Provider id -> adapter key
    _PROVIDERS: Dict[str, str] = {
        "openai": _OPENAI_COMPATIBLE,
        "groq": _OPENAI_COMPATIBLE,
        "openrouter": _OPENAI_COMPATIBLE,
        "deepseek": _OPENAI_COMPATIBLE,
        "xai": _OPENAI_COMPATIBLE,
        "together": _OPENAI_COMPATIBLE,
        "mistral": _OPENAI_COMPATIBLE,
        "cerebras": _OPENAI_COMPATIBLE,
        "deepinfra": _OPENAI_COMPATIBLE,
        "perplexity": _OPENAI_COMPATIBLE,
        "google": _GEMINI,
        "google-vertex": _GEMINI,
    }

    @classmethod
    def supported(cls) -> List[str]:
        """Return the registered provider ids, sorted."""
        return sorted(cls._PROVIDERS)

    @classmethod
    def create(
        cls,
        provider: str,
        *,
        api_key: Optional[str] = None,
        client: Optional[httpx.Client] = None,
        **kwargs: Any,
    ) -> Any:
        """Create a provider adapter instance.

        Parameters
        ----------
        provider:
            Provider id (case-insensitive).
        api_key:
            Explicit credential; wins over configuration and environment.
        client:
            Optional ``httpx.Client`` used instead of the shared pool.
        **kwargs:
            Configuration overrides such as ``model``, ``base_url``,
            ``headers``, ``project_id``, ``region`` or ``access_token``.

        Raises
        ------
        UnknownProviderError
            If the id is unknown and no ``base_url`` is configured for it, or
            the adapter cannot be loaded.
        """
        name = (provider or "").lower().strip()
        cfg = get_provider_config(name, {"api_key": api_key, **kwargs})

        adapter = cls._PROVIDERS.get(name)
        if adapter is None:
            if not name or not cfg.get("base_url"):
                raise UnknownProviderError(
                    f"Unknown provider '{provider}'; supported: {', '.join(cls.supported())} "
                    "(or configure a base_url for an OpenAI-compatible endpoint)"
                )
            adapter = _OPENAI_COMPATIBLE

        klass = cls._load(adapter, provider)
        if adapter == _GEMINI:
            return klass(
                name=name,
                api_key=cfg.get("api_key"),
                project_id=cfg.get("project_id"),
                region=cfg.get("region"),
                access_token=cfg.get("access_token"),
                base_url=cfg.get("base_url"),
                default_model=cfg.get("model"),
                client=client,
            )

        from ..openai_compatible.profiles import generic_profile, get_profile

        profile = get_profile(name) or generic_profile(name, cfg["base_url"])
        profile = profile.with_overrides(
            base_url=cfg.get("base_url"),
            default_model=cfg.get("model"),
            headers=cfg.get("headers"),
        )
        return klass(profile, cfg.get("api_key"), client=client)

    @classmethod
    def _load(cls, adapter: str, provider: str) -> Any:
        spec = cls._ADAPTERS[adapter]
        module_path, class_name = spec["module"], spec["class"]
        try:
            mod = import_module(module_path)
        except ImportError as exc:  # pragma: no cover - packaging failure path
            raise UnknownProviderError(
                f"Failed to import module '{module_path}' for provider '{provider}': {exc}"
            ) from exc
        try:
            return getattr(mod, class_name)
        except AttributeError as exc:
            raise UnknownProviderError(
                f"Adapter class '{class_name}' not found in '{module_path}' for provider '{provider}'"
            ) from exc


__all__ = ["ProviderFactory", "UnknownProviderError", "create_provider"]
