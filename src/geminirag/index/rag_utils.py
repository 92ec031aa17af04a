# src/geminirag/index/rag_utils.py
"""
Utility functions for Retrieval Augmented Generation (RAG) in the query engine.

Splits documents into passages, formats retrieved passages and renders the
final prompt sent to the LLM.
"""

import logging
from typing import Dict, List, Optional

from ..models import ContextDocument

logger = logging.getLogger(__name__)

DEFAULT_PASSAGE_SIZE = 1024

DEFAULT_QA_TEMPLATE = (
    "Context information is below.\n"
    "---------------------\n"
    "{context}\n"
    "---------------------\n"
    "Given the context information and not prior knowledge, answer the query.\n"
    "Query: {question}\n"
    "Answer: "
)


def split_into_passages(text: str, passage_size: int = DEFAULT_PASSAGE_SIZE) -> List[str]:
    """
    Splits text on blank lines and packs paragraphs into passages.

    Paragraphs are joined with a blank line until adding the next one would
    exceed `passage_size` characters. A single paragraph longer than
    `passage_size` is cut into `passage_size` slices.

    Args:
        text: The document text.
        passage_size: Maximum passage length in characters.

    Returns:
        Non-empty passages in document order.
    """
    if passage_size <= 0:
        raise ValueError("passage_size must be positive.")

    paragraphs = [" ".join(block.split()) for block in text.split("\n\n")]
    passages: List[str] = []
    current = ""
    for paragraph in paragraphs:
        if not paragraph:
            continue
        while len(paragraph) > passage_size:
            if current:
                passages.append(current)
                current = ""
            passages.append(paragraph[:passage_size])
            paragraph = paragraph[passage_size:]
        if current and len(current) + 2 + len(paragraph) > passage_size:
            passages.append(current)
            current = paragraph
        else:
            current = f"{current}\n\n{paragraph}" if current else paragraph
    if current:
        passages.append(current)
    return passages


def render_prompt_template(
    template_content: str,
    rag_context_str: str,
    question_str: str,
    custom_template_values: Optional[Dict[str, str]] = None,
) -> str:
    """
    Renders the prompt template with the provided context and question.

    Placeholders are `{context}`, `{question}` and any key of
    `custom_template_values`; plain replacement is used so other braces in
    the template are left alone.
    """
    rendered_prompt = template_content.replace("{context}", rag_context_str)
    rendered_prompt = rendered_prompt.replace("{question}", question_str)
    if custom_template_values:
        for key, value in custom_template_values.items():
            rendered_prompt = rendered_prompt.replace(f"{{{key}}}", str(value))
    return rendered_prompt


def format_rag_docs_for_context(documents: List[ContextDocument]) -> str:
    """
    Formats retrieved passages into a single context string, closest first.
    """
    if not documents:
        return ""

    sorted_documents = sorted(
        documents, key=lambda d: d.score if d.score is not None else float("inf")
    )

    context_parts = []
    for i, doc in enumerate(sorted_documents):
        source = doc.metadata.get("source") or doc.metadata.get("document_id") or doc.id[:12]
        score_info = f" (Score: {doc.score:.4f})" if doc.score is not None else ""
        header = f"Context Document {i + 1}: [Source: {source}]{score_info}"
        content_snippet = " ".join(doc.content.splitlines()).strip()
        context_parts.append(f"{header}\n{content_snippet}")

    return "\n\n".join(context_parts)
