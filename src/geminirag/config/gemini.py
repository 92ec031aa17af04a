# src/geminirag/config/gemini.py
"""
Gemini session configuration.

Holds the static model registry and the immutable `GeminiConfig` model, and
resolves a partial configuration against explicit values, the process
environment, an optional TOML config file and built-in defaults (in that
order of precedence).
"""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..exceptions import ConfigError

logger = logging.getLogger(__name__)


class GeminiModelInfo(BaseModel):
    """Registry entry for a Gemini model."""
    model_config = ConfigDict(frozen=True)

    context_window: int


# Context windows in tokens. Used for metadata reporting only.
GEMINI_MODELS: Dict[str, GeminiModelInfo] = {
    "gemini-pro": GeminiModelInfo(context_window=30720),
    "gemini-pro-vision": GeminiModelInfo(context_window=12288),
    "embedding-001": GeminiModelInfo(context_window=2048),
    "aqa": GeminiModelInfo(context_window=7168),
    "gemini-1.0-pro": GeminiModelInfo(context_window=30720),
    "gemini-1.5-flash": GeminiModelInfo(context_window=1048576),
    "gemini-1.5-flash-8b": GeminiModelInfo(context_window=1048576),
    "gemini-1.5-pro": GeminiModelInfo(context_window=2097152),
    "gemini-2.0-flash": GeminiModelInfo(context_window=1048576),
    "gemini-2.0-flash-lite": GeminiModelInfo(context_window=1048576),
    "gemini-2.5-flash": GeminiModelInfo(context_window=1048576),
    "gemini-2.5-pro": GeminiModelInfo(context_window=1048576),
}

DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_TEMPERATURE = 0.9
DEFAULT_TOP_P = 1.0

API_KEY_ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY")
CONFIG_FILE_ENV_VAR = "GEMINIRAG_CONFIG"
MISSING_API_KEY_MESSAGE = "Set Gemini API key in GEMINI_API_KEY env variable"


def normalize_model_name(model: str) -> str:
    """Strip the `models/` resource prefix the Gemini API uses in some listings."""
    return model.replace("models/", "", 1) if model.startswith("models/") else model


class GeminiConfig(BaseModel):
    """
    Immutable configuration for a Gemini session.

    Instances are frozen and hashable, so two configs compare (and hash)
    equal exactly when every field is equal. `SessionCache` relies on this.

    Attributes:
        api_key: Gemini API key. Never shown in repr.
        model: Model identifier; must be a key of `GEMINI_MODELS`.
        temperature: Sampling temperature.
        top_p: Nucleus sampling probability mass.
        max_tokens: Optional cap on generated tokens.
    """
    model_config = ConfigDict(frozen=True)

    api_key: str = Field(min_length=1, repr=False)
    model: str = DEFAULT_MODEL
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    top_p: float = Field(default=DEFAULT_TOP_P, ge=0.0, le=1.0)
    max_tokens: Optional[int] = Field(default=None, gt=0)

    @field_validator("model", mode="before")
    @classmethod
    def validate_model(cls, v: Any) -> str:
        """Normalize the model id and ensure it is registered."""
        if not isinstance(v, str):
            raise ValueError(f"Model identifier must be a string, got {type(v).__name__}.")
        name = normalize_model_name(v.strip())
        if name not in GEMINI_MODELS:
            raise ValueError(
                f"Unknown Gemini model '{name}'. Known models: {sorted(GEMINI_MODELS)}"
            )
        return name

    @property
    def context_window(self) -> int:
        """Registered context window of the configured model."""
        return GEMINI_MODELS[self.model].context_window


def load_config_file(path: Union[str, Path], section: str = "gemini") -> Dict[str, Any]:
    """
    Read one table from a TOML config file.

    Args:
        path: Path to the TOML file. `~` is expanded.
        section: Name of the table to return.

    Returns:
        The table as a dictionary, or an empty dict if the table is absent.

    Raises:
        ConfigError: If the file does not exist or is not valid TOML.
    """
    file_path = Path(os.path.expanduser(str(path)))
    try:
        with file_path.open("rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {file_path}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in config file {file_path}: {e}") from e

    table = data.get(section, {})
    if not isinstance(table, dict):
        raise ConfigError(f"Section [{section}] in {file_path} must be a table.")
    return table


def _env_float(name: str) -> Optional[float]:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(f"Environment variable {name} must be a number, got '{raw}'.") from e


def _env_int(name: str) -> Optional[int]:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"Environment variable {name} must be an integer, got '{raw}'.") from e


def _env_api_key() -> Optional[str]:
    for name in API_KEY_ENV_VARS:
        value = os.environ.get(name)
        if value:
            return value
    return None


def resolve_gemini_config(
    init: Union[GeminiConfig, Mapping[str, Any], None] = None,
    config_file: Union[str, Path, None] = None,
    **overrides: Any,
) -> GeminiConfig:
    """
    Build a complete `GeminiConfig` from a partial one.

    Each field is taken from the first source that provides it: keyword
    overrides, `init`, the environment (`GEMINI_API_KEY` / `GOOGLE_API_KEY`,
    `GEMINI_MODEL`, `GEMINI_TEMPERATURE`, `GEMINI_TOP_P`, `GEMINI_MAX_TOKENS`),
    the `[gemini]` table of the config file, then the defaults.

    Args:
        init: A partial configuration mapping, or a ready `GeminiConfig`
              (returned as-is unless overrides are given).
        config_file: Optional TOML file. Defaults to `$GEMINIRAG_CONFIG` when set.
        **overrides: Field values that take precedence over everything else.

    Returns:
        The resolved, validated configuration.

    Raises:
        ConfigError: If no API key can be resolved, or any value is invalid.
    """
    if isinstance(init, GeminiConfig):
        if not overrides:
            return init
        init = init.model_dump()

    explicit: Dict[str, Any] = {k: v for k, v in dict(init or {}).items() if v is not None}
    explicit.update({k: v for k, v in overrides.items() if v is not None})

    unknown = set(explicit) - set(GeminiConfig.model_fields)
    if unknown:
        raise ConfigError(f"Unknown Gemini configuration field(s): {sorted(unknown)}")

    file_path = config_file or os.environ.get(CONFIG_FILE_ENV_VAR)
    file_values = load_config_file(file_path) if file_path else {}

    env_values: Dict[str, Any] = {
        "api_key": _env_api_key(),
        "model": os.environ.get("GEMINI_MODEL") or None,
        "temperature": _env_float("GEMINI_TEMPERATURE"),
        "top_p": _env_float("GEMINI_TOP_P"),
        "max_tokens": _env_int("GEMINI_MAX_TOKENS"),
    }

    resolved: Dict[str, Any] = {}
    for field_name in GeminiConfig.model_fields:
        for source in (explicit, env_values, file_values):
            value = source.get(field_name)
            if value is not None:
                resolved[field_name] = value
                break

    if not resolved.get("api_key"):
        raise ConfigError(MISSING_API_KEY_MESSAGE)

    try:
        config = GeminiConfig(**resolved)
    except ValidationError as e:
        raise ConfigError(f"Invalid Gemini configuration: {e}") from e

    logger.debug(
        f"Resolved Gemini config: model={config.model}, temperature={config.temperature}, "
        f"top_p={config.top_p}, max_tokens={config.max_tokens}"
    )
    return config
