"""dcode_providers.config.defaults
===============================

Central place for small, stable default values used across the package:
backend base URLs and default model ids. These can be overridden via
environment variables or an external config file (see
:mod:`dcode_providers.config`), but provide sensible fallbacks.

This module intentionally imports nothing from the rest of the package to
prevent circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

# ---- OpenAI-compatible backends ----
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"
OPENAI_DEFAULT_MODEL = "gpt-4.1"

GROQ_DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"
GROQ_DEFAULT_MODEL = "llama-3.3-70b-versatile"

OPENROUTER_DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
OPENROUTER_DEFAULT_MODEL = "anthropic/claude-sonnet-4"

DEEPSEEK_DEFAULT_BASE_URL = "https://api.deepseek.com/v1"
DEEPSEEK_DEFAULT_MODEL = "deepseek-chat"

XAI_DEFAULT_BASE_URL = "https://api.x.ai/v1"
XAI_DEFAULT_MODEL = "grok-3"

TOGETHER_DEFAULT_BASE_URL = "https://api.together.xyz/v1"
TOGETHER_DEFAULT_MODEL = "meta-llama/Llama-3.3-70B-Instruct-Turbo"

MISTRAL_DEFAULT_BASE_URL = "https://api.mistral.ai/v1"
MISTRAL_DEFAULT_MODEL = "mistral-large-latest"

CEREBRAS_DEFAULT_BASE_URL = "https://api.cerebras.ai/v1"
CEREBRAS_DEFAULT_MODEL = "gpt-oss-120b"

DEEPINFRA_DEFAULT_BASE_URL = "https://api.deepinfra.com/v1/openai"
DEEPINFRA_DEFAULT_MODEL = "Qwen/Qwen3-Coder-480B-A35B-Instruct-Turbo"

PERPLEXITY_DEFAULT_BASE_URL = "https://api.perplexity.ai"
PERPLEXITY_DEFAULT_MODEL = "sonar-pro"

# ---- Gemini / Vertex ----
GEMINI_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
GEMINI_DEFAULT_MODEL = "gemini-2.5-flash"
VERTEX_DEFAULT_REGION = "us-central1"

# ---- External config file ----
# Environment variable naming a JSON or YAML file with per-provider sections.
CONFIG_FILE_ENV = "DCODE_PROVIDERS_CONFIG_FILE"
