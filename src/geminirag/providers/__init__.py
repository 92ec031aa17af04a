# src/geminirag/providers/__init__.py
"""
LLM session backends for geminirag.
"""

from .base import BaseLLM
from .gemini_provider import GeminiSession, parse_gemini_response, to_gemini_contents
from .session_cache import SessionCache, get_default_session_cache, get_gemini_session

__all__ = [
    "BaseLLM",
    "GeminiSession",
    "SessionCache",
    "get_default_session_cache",
    "get_gemini_session",
    "parse_gemini_response",
    "to_gemini_contents",
]
