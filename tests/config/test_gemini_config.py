# tests/config/test_gemini_config.py
"""
Tests for Gemini configuration resolution.

Covers precedence (explicit > environment > config file > defaults), API
key handling, validation and the model registry.
"""

import pytest

from geminirag.config import (
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
    DEFAULT_TOP_P,
    GeminiConfig,
    load_config_file,
    normalize_model_name,
    resolve_gemini_config,
)
from geminirag.exceptions import ConfigError


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "geminirag.toml"
    path.write_text(
        '[gemini]\nmodel = "gemini-1.5-pro"\ntemperature = 0.2\napi_key = "file-key"\n'
        '\n[logging]\nconsole_enabled = true\n'
    )
    return path


class TestApiKey:

    def test_missing_key_raises(self):
        with pytest.raises(ConfigError, match="Set Gemini API key in GEMINI_API_KEY env variable"):
            resolve_gemini_config()

    @pytest.mark.parametrize("init", [{}, {"model": "gemini-pro"}, {"temperature": 0.1, "top_p": 0.5}])
    def test_missing_key_raises_for_any_fields(self, init):
        with pytest.raises(ConfigError):
            resolve_gemini_config(init)

    def test_explicit_key(self):
        assert resolve_gemini_config({"api_key": "k"}).api_key == "k"

    def test_key_from_gemini_env(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")
        assert resolve_gemini_config().api_key == "env-key"

    def test_key_from_google_env(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "google-key")
        assert resolve_gemini_config().api_key == "google-key"

    def test_gemini_env_wins_over_google_env(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "gemini-key")
        monkeypatch.setenv("GOOGLE_API_KEY", "google-key")
        assert resolve_gemini_config().api_key == "gemini-key"

    def test_explicit_key_wins_over_env(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")
        assert resolve_gemini_config(api_key="explicit").api_key == "explicit"

    def test_key_not_in_repr(self):
        assert "secret" not in repr(resolve_gemini_config(api_key="secret"))


class TestDefaultsAndPrecedence:

    def test_defaults(self):
        config = resolve_gemini_config(api_key="k")
        assert config.model == DEFAULT_MODEL
        assert config.temperature == DEFAULT_TEMPERATURE
        assert config.top_p == DEFAULT_TOP_P
        assert config.max_tokens is None

    def test_env_values(self, monkeypatch):
        monkeypatch.setenv("GEMINI_MODEL", "gemini-pro")
        monkeypatch.setenv("GEMINI_TEMPERATURE", "0.3")
        monkeypatch.setenv("GEMINI_TOP_P", "0.8")
        monkeypatch.setenv("GEMINI_MAX_TOKENS", "256")
        config = resolve_gemini_config(api_key="k")
        assert (config.model, config.temperature, config.top_p, config.max_tokens) == ("gemini-pro", 0.3, 0.8, 256)

    def test_explicit_wins_over_env(self, monkeypatch):
        monkeypatch.setenv("GEMINI_TEMPERATURE", "0.3")
        assert resolve_gemini_config({"api_key": "k", "temperature": 1.5}).temperature == 1.5

    def test_overrides_win_over_init(self):
        config = resolve_gemini_config({"api_key": "k", "model": "gemini-pro"}, model="gemini-1.5-flash")
        assert config.model == "gemini-1.5-flash"

    def test_none_values_fall_through(self):
        assert resolve_gemini_config({"api_key": "k", "model": None}).model == DEFAULT_MODEL

    def test_file_values(self, config_file):
        config = resolve_gemini_config(config_file=config_file)
        assert config.model == "gemini-1.5-pro"
        assert config.temperature == 0.2
        assert config.api_key == "file-key"

    def test_file_from_env_var(self, monkeypatch, config_file):
        monkeypatch.setenv("GEMINIRAG_CONFIG", str(config_file))
        assert resolve_gemini_config().model == "gemini-1.5-pro"

    def test_env_wins_over_file(self, monkeypatch, config_file):
        monkeypatch.setenv("GEMINI_MODEL", "gemini-pro")
        assert resolve_gemini_config(config_file=config_file).model == "gemini-pro"

    def test_ready_config_returned_as_is(self):
        config = GeminiConfig(api_key="k")
        assert resolve_gemini_config(config) is config

    def test_ready_config_with_overrides(self):
        config = GeminiConfig(api_key="k")
        assert resolve_gemini_config(config, temperature=0.1).temperature == 0.1


class TestValidation:

    def test_unknown_model(self):
        with pytest.raises(ConfigError, match="Unknown Gemini model"):
            resolve_gemini_config(api_key="k", model="gpt-4")

    def test_models_prefix_is_stripped(self):
        assert resolve_gemini_config(api_key="k", model="models/gemini-pro").model == "gemini-pro"

    @pytest.mark.parametrize("field,value", [("temperature", 3.0), ("top_p", 1.5), ("max_tokens", 0)])
    def test_out_of_range_values(self, field, value):
        with pytest.raises(ConfigError):
            resolve_gemini_config(api_key="k", **{field: value})

    def test_unknown_field(self):
        with pytest.raises(ConfigError, match="Unknown Gemini configuration field"):
            resolve_gemini_config(api_key="k", stream=True)

    def test_bad_env_number(self, monkeypatch):
        monkeypatch.setenv("GEMINI_TEMPERATURE", "warm")
        with pytest.raises(ConfigError, match="GEMINI_TEMPERATURE"):
            resolve_gemini_config(api_key="k")

    def test_context_window_from_registry(self):
        assert GeminiConfig(api_key="k", model="gemini-pro").context_window == 30720
        assert GeminiConfig(api_key="k", model="gemini-1.5-pro").context_window == 2097152


class TestConfigEquality:

    def test_equal_configs_hash_equal(self):
        a = GeminiConfig(api_key="k", model="gemini-pro")
        b = GeminiConfig(api_key="k", model="gemini-pro")
        assert a == b and hash(a) == hash(b)

    def test_differing_field_not_equal(self):
        assert GeminiConfig(api_key="k") != GeminiConfig(api_key="k", temperature=0.5)


class TestLoadConfigFile:

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config_file(tmp_path / "absent.toml")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("[gemini\nmodel = ")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config_file(path)

    def test_absent_section_is_empty(self, config_file):
        assert load_config_file(config_file, section="other") == {}

    def test_non_table_section(self, tmp_path):
        path = tmp_path / "flat.toml"
        path.write_text('gemini = "oops"\n')
        with pytest.raises(ConfigError, match="must be a table"):
            load_config_file(path)


def test_normalize_model_name():
    assert normalize_model_name("models/gemini-pro") == "gemini-pro"
    assert normalize_model_name("gemini-pro") == "gemini-pro"
