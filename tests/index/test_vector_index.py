# tests/index/test_vector_index.py
"""
Tests for passage splitting, prompt rendering and the query engine.

The index runs against an in-memory chromadb client with a keyword-based
embedding model and a mocked LLM.
"""

from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from geminirag.embedding import BaseEmbeddingModel
from geminirag.index import (VectorStoreIndex, format_rag_docs_for_context,
                             render_prompt_template, split_into_passages)
from geminirag.models import ChatMessage, ChatResponse, ContextDocument, Document, Role
from geminirag.providers import BaseLLM

KEYWORDS = ("college", "radio", "company")


class KeywordEmbedding(BaseEmbeddingModel):
    """Embeds text as keyword counts so nearest neighbours are predictable."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.model_name = "keyword"
        self.calls: List[List[str]] = []

    async def initialize(self) -> None:
        pass

    async def get_text_embedding(self, text: str) -> List[float]:
        self.calls.append([text])
        lowered = text.lower()
        return [float(lowered.count(word)) + 0.01 for word in KEYWORDS]


@pytest.fixture
def llm():
    mock_llm = MagicMock(spec=BaseLLM)
    mock_llm.chat = AsyncMock(
        return_value=ChatResponse(message=ChatMessage(role=Role.ASSISTANT, content="They studied mathematics."))
    )
    return mock_llm


ESSAY = (
    "As a child I took apart every radio I could find.\n\n"
    "In college I studied mathematics and spent nights in the college computer lab.\n\n"
    "After that I joined a small company that built accounting software."
)


class TestSplitIntoPassages:

    def test_packs_paragraphs(self):
        assert split_into_passages("one\n\ntwo\n\nthree", passage_size=100) == ["one\n\ntwo\n\nthree"]

    def test_splits_when_full(self):
        assert split_into_passages("aaaa\n\nbbbb\n\ncccc", passage_size=10) == ["aaaa\n\nbbbb", "cccc"]

    def test_long_paragraph_is_cut(self):
        assert split_into_passages("abcdefghij", passage_size=4) == ["abcd", "efgh", "ij"]

    def test_whitespace_collapsed_and_blank_blocks_dropped(self):
        assert split_into_passages("  a\n b \n\n\n\n  ", passage_size=50) == ["a b"]

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            split_into_passages("text", passage_size=0)


class TestPromptHelpers:

    def test_render_prompt_template(self):
        rendered = render_prompt_template("{context} | {question} | {lang}", "ctx", "q?", {"lang": "fr"})
        assert rendered == "ctx | q? | fr"

    def test_format_sorts_by_score(self):
        docs = [
            ContextDocument(id="far", content="Far", score=0.9, metadata={"source": "b.txt"}),
            ContextDocument(id="near", content="Near\nline", score=0.1, metadata={"source": "a.txt"}),
        ]
        formatted = format_rag_docs_for_context(docs)
        assert formatted.index("Near line") < formatted.index("Far")
        assert "[Source: a.txt]" in formatted

    def test_format_empty(self):
        assert format_rag_docs_for_context([]) == ""


class TestVectorStoreIndex:

    @pytest.mark.asyncio
    async def test_query_returns_answer_and_sources(self, llm):
        embed_model = KeywordEmbedding()
        index = await VectorStoreIndex.from_documents(
            [Document(id="essay", text=ESSAY, metadata={"source": "essay.txt"})],
            llm=llm,
            embed_model=embed_model,
            passage_size=90,
        )
        try:
            response = await index.as_query_engine(similarity_top_k=1).query("What did the author do in college?")
        finally:
            await index.storage.close()

        assert response.response == "They studied mathematics."
        assert len(response.source_documents) == 1
        assert "college" in response.source_documents[0].content
        assert response.source_documents[0].metadata["document_id"] == "essay"

        prompt = llm.chat.call_args.args[0][0]
        assert prompt.role is Role.USER
        assert "computer lab" in prompt.content
        assert "What did the author do in college?" in prompt.content

    @pytest.mark.asyncio
    async def test_default_top_k_is_two(self, llm):
        index = await VectorStoreIndex.from_documents(
            [Document(text=ESSAY)], llm=llm, embed_model=KeywordEmbedding(), passage_size=90
        )
        try:
            engine = index.as_query_engine()
            response = await engine.query("radio")
        finally:
            await index.storage.close()
        assert engine.similarity_top_k == 2
        assert len(response.source_documents) == 2

    @pytest.mark.asyncio
    async def test_empty_documents_index_nothing(self, llm):
        embed_model = KeywordEmbedding()
        index = await VectorStoreIndex.from_documents([Document(text="\n\n")], llm=llm, embed_model=embed_model)
        try:
            response = await index.as_query_engine().query("anything")
        finally:
            await index.storage.close()
        assert response.source_documents == []
        assert response.response == "They studied mathematics."

    def test_invalid_top_k(self, llm):
        index = VectorStoreIndex(llm=llm, embed_model=KeywordEmbedding(), storage=MagicMock())
        with pytest.raises(ValueError):
            index.as_query_engine(similarity_top_k=0)
