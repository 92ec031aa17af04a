# src/geminirag/config/__init__.py
"""
Configuration package for geminirag.

Resolves Gemini session settings from explicit values, the environment and
an optional TOML file, and exposes the static model registry.
"""

from .gemini import (
    API_KEY_ENV_VARS,
    CONFIG_FILE_ENV_VAR,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
    DEFAULT_TOP_P,
    GEMINI_MODELS,
    GeminiConfig,
    GeminiModelInfo,
    load_config_file,
    normalize_model_name,
    resolve_gemini_config,
)

__all__ = [
    "API_KEY_ENV_VARS",
    "CONFIG_FILE_ENV_VAR",
    "DEFAULT_MODEL",
    "DEFAULT_TEMPERATURE",
    "DEFAULT_TOP_P",
    "GEMINI_MODELS",
    "GeminiConfig",
    "GeminiModelInfo",
    "load_config_file",
    "normalize_model_name",
    "resolve_gemini_config",
]
