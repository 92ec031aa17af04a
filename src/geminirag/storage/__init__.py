# src/geminirag/storage/__init__.py
"""Vector storage backends for the geminirag index."""

from .chromadb_vector import DEFAULT_COLLECTION_NAME, ChromaVectorStorage

__all__ = ["ChromaVectorStorage", "DEFAULT_COLLECTION_NAME"]
