# tests/conftest.py
"""
Shared fixtures for the geminirag test suite.

No test touches the network: vendor clients are injected as mocks and the
tiktoken encoding is replaced by a whitespace tokenizer.
"""

from types import SimpleNamespace
from typing import List

import pytest

from geminirag.utils import tokens

ENV_VARS = (
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "GEMINI_MODEL",
    "GEMINI_TEMPERATURE",
    "GEMINI_TOP_P",
    "GEMINI_MAX_TOKENS",
    "MISTRAL_API_KEY",
    "GEMINIRAG_CONFIG",
)


class WhitespaceTokenizer:
    """Stand-in for a tiktoken encoding: one token per whitespace-separated word."""

    def encode(self, text: str) -> List[str]:
        return text.split()


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove every environment variable the library reads."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def fake_tokenizer(monkeypatch):
    """Avoid downloading tiktoken encodings."""
    monkeypatch.setattr(tokens, "get_tokenizer", lambda encoding_name=tokens.DEFAULT_ENCODING: WhitespaceTokenizer())


def make_part(text, thought=False):
    return SimpleNamespace(text=text, thought=thought)


def make_response(*texts, role="model", finish_reason="STOP"):
    """Build an object shaped like a google-genai GenerateContentResponse."""
    content = SimpleNamespace(role=role, parts=[make_part(t) for t in texts])
    candidate = SimpleNamespace(content=content, finish_reason=finish_reason)
    return SimpleNamespace(candidates=[candidate], prompt_feedback=None)


@pytest.fixture
def gemini_response_factory():
    return make_response
