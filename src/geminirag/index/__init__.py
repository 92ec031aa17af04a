# src/geminirag/index/__init__.py
"""Vector store index and query engine."""

from .rag_utils import (DEFAULT_PASSAGE_SIZE, DEFAULT_QA_TEMPLATE,
                        format_rag_docs_for_context, render_prompt_template,
                        split_into_passages)
from .vector_index import DEFAULT_SIMILARITY_TOP_K, QueryEngine, VectorStoreIndex

__all__ = [
    "DEFAULT_PASSAGE_SIZE",
    "DEFAULT_QA_TEMPLATE",
    "DEFAULT_SIMILARITY_TOP_K",
    "QueryEngine",
    "VectorStoreIndex",
    "format_rag_docs_for_context",
    "render_prompt_template",
    "split_into_passages",
]
