# src/geminirag/providers/session_cache.py
"""
Memoization of Gemini sessions by configuration.

A `SessionCache` maps a resolved `GeminiConfig` to the `GeminiSession` built
from it, so that callers asking for an identical configuration share one
session. Sessions hold no state besides their configuration and a lazily
created client, so a duplicate construction under a race is harmless: the
first stored session wins and the other is discarded.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Union

from ..config import GeminiConfig, resolve_gemini_config
from .gemini_provider import GeminiSession

logger = logging.getLogger(__name__)


class SessionCache:
    """
    Holds previously constructed sessions keyed by configuration equality.

    `GeminiConfig` is frozen, so its hash and equality are structural:
    two configs share a cache entry exactly when every field matches.
    """

    def __init__(self) -> None:
        self._sessions: Dict[GeminiConfig, GeminiSession] = {}

    def get_or_create(
        self,
        init: Union[GeminiConfig, Mapping[str, Any], None] = None,
        **overrides: Any,
    ) -> GeminiSession:
        """
        Return the cached session for this configuration, creating it if needed.

        Args:
            init: Partial configuration mapping or a resolved `GeminiConfig`.
            **overrides: Individual configuration fields.

        Returns:
            The shared `GeminiSession` for the resolved configuration.

        Raises:
            ConfigError: If the configuration cannot be resolved.
        """
        config = resolve_gemini_config(init, **overrides)
        session = self._sessions.get(config)
        if session is not None:
            logger.debug(f"Reusing cached Gemini session for model '{config.model}'.")
            return session

        session = GeminiSession(config)
        stored = self._sessions.setdefault(config, session)
        if stored is session:
            logger.debug(f"Cached new Gemini session for model '{config.model}' ({len(self._sessions)} cached).")
        return stored

    def clear(self) -> None:
        """Forget all cached sessions."""
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, config: object) -> bool:
        return config in self._sessions


_default_cache = SessionCache()


def get_default_session_cache() -> SessionCache:
    """The process-wide cache used by `get_gemini_session`."""
    return _default_cache


def get_gemini_session(
    init: Union[GeminiConfig, Mapping[str, Any], None] = None,
    cache: Optional[SessionCache] = None,
    **overrides: Any,
) -> GeminiSession:
    """
    Get a shared `GeminiSession` for a configuration.

    Args:
        init: Partial configuration mapping or a resolved `GeminiConfig`.
        cache: Cache to use. Defaults to the process-wide cache.
        **overrides: Individual configuration fields.
    """
    target = cache if cache is not None else _default_cache
    return target.get_or_create(init, **overrides)
