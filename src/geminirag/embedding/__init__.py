# src/geminirag/embedding/__init__.py
"""
Embedding clients for geminirag.

Used by the example script directly and by the index to embed passages
and queries.
"""

from .base import BaseEmbeddingModel
from .google import GeminiEmbedding
from .manager import EmbeddingManager
from .mistral import MistralAIEmbedding

__all__ = [
    "BaseEmbeddingModel",
    "EmbeddingManager",
    "GeminiEmbedding",
    "MistralAIEmbedding",
]
