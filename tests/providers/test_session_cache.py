# tests/providers/test_session_cache.py
"""Tests for SessionCache and get_gemini_session."""

import pytest

from geminirag.config import GeminiConfig
from geminirag.exceptions import ConfigError
from geminirag.providers import GeminiSession, SessionCache, get_default_session_cache, get_gemini_session


@pytest.fixture
def cache():
    return SessionCache()


class TestSessionCache:

    def test_equal_configs_share_session(self, cache):
        first = cache.get_or_create({"api_key": "k", "model": "gemini-pro"})
        second = cache.get_or_create({"api_key": "k", "model": "gemini-pro"})
        assert first is second
        assert len(cache) == 1

    def test_defaults_resolve_to_same_entry(self, cache, monkeypatch):
        """A partial config and its fully spelled-out equivalent share a session."""
        monkeypatch.setenv("GEMINI_API_KEY", "k")
        assert cache.get_or_create() is cache.get_or_create({"api_key": "k", "model": "gemini-2.0-flash", "temperature": 0.9})

    @pytest.mark.parametrize(
        "other",
        [
            {"api_key": "other"},
            {"model": "gemini-1.5-flash"},
            {"temperature": 0.1},
            {"top_p": 0.5},
            {"max_tokens": 10},
        ],
    )
    def test_any_differing_field_gives_distinct_session(self, cache, other):
        base = {"api_key": "k", "model": "gemini-pro"}
        assert cache.get_or_create(base) is not cache.get_or_create({**base, **other})
        assert len(cache) == 2

    def test_config_key_and_membership(self, cache):
        session = cache.get_or_create(api_key="k")
        assert isinstance(session, GeminiSession)
        assert GeminiConfig(api_key="k") in cache

    def test_missing_key_raises_and_caches_nothing(self, cache):
        with pytest.raises(ConfigError):
            cache.get_or_create()
        assert len(cache) == 0

    def test_clear(self, cache):
        first = cache.get_or_create(api_key="k")
        cache.clear()
        assert len(cache) == 0
        assert cache.get_or_create(api_key="k") is not first


class TestGetGeminiSession:

    def test_uses_given_cache(self, cache):
        session = get_gemini_session({"api_key": "k"}, cache=cache)
        assert session is cache.get_or_create({"api_key": "k"})

    def test_empty_given_cache_is_not_replaced_by_default(self, cache):
        """An empty cache is falsy through __len__ but must still be used."""
        default_cache = get_default_session_cache()
        default_cache.clear()
        try:
            assert len(cache) == 0
            get_gemini_session({"api_key": "own"}, cache=cache)
            assert len(cache) == 1
            assert len(default_cache) == 0
        finally:
            default_cache.clear()

    def test_default_cache_is_shared(self):
        default_cache = get_default_session_cache()
        try:
            assert get_gemini_session(api_key="shared") is get_gemini_session({"api_key": "shared"})
            assert GeminiConfig(api_key="shared") in default_cache
        finally:
            default_cache.clear()
