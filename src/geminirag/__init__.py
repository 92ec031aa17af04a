# src/geminirag/__init__.py
"""
geminirag - A Gemini LLM session adapter for retrieval augmented generation.

Provides Gemini chat, completion and streaming sessions behind a common LLM
contract, a session cache keyed by configuration, Gemini and Mistral
embedding clients, and a small ChromaDB-backed index and query engine.
"""

from importlib.metadata import PackageNotFoundError, version

from .config import GeminiConfig, resolve_gemini_config
from .embedding import EmbeddingManager, GeminiEmbedding, MistralAIEmbedding
from .exceptions import (
    ConfigError,
    EmbeddingError,
    GeminiRAGError,
    MalformedResponseError,
    ProviderError,
    UnsupportedOperationError,
    VectorStorageError,
)
from .index import QueryEngine, VectorStoreIndex
from .models import (
    ChatMessage,
    ChatResponse,
    ContextDocument,
    Document,
    LLMMetadata,
    RAGResponse,
    Role,
)
from .providers import BaseLLM, GeminiSession, SessionCache, get_gemini_session
from .storage import ChromaVectorStorage

try:
    __version__ = version("geminirag")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "BaseLLM",
    "ChatMessage",
    "ChatResponse",
    "ChromaVectorStorage",
    "ConfigError",
    "ContextDocument",
    "Document",
    "EmbeddingError",
    "EmbeddingManager",
    "GeminiConfig",
    "GeminiEmbedding",
    "GeminiRAGError",
    "GeminiSession",
    "LLMMetadata",
    "MalformedResponseError",
    "MistralAIEmbedding",
    "ProviderError",
    "QueryEngine",
    "RAGResponse",
    "Role",
    "SessionCache",
    "UnsupportedOperationError",
    "VectorStorageError",
    "VectorStoreIndex",
    "get_gemini_session",
    "resolve_gemini_config",
    "__version__",
]
