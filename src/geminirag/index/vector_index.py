# src/geminirag/index/vector_index.py
"""
Minimal vector store index and query engine.

`VectorStoreIndex.from_documents` splits documents into passages, embeds
them and stores them in ChromaDB. `QueryEngine.query` retrieves the closest
passages for a question and asks the LLM to answer from them.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional, Sequence

from ..embedding.base import BaseEmbeddingModel
from ..models import ChatMessage, ContextDocument, Document, RAGResponse, Role
from ..providers.base import BaseLLM
from ..storage.chromadb_vector import ChromaVectorStorage
from ..tracing import add_span_attributes, create_span, get_tracer
from .rag_utils import (DEFAULT_PASSAGE_SIZE, DEFAULT_QA_TEMPLATE,
                        format_rag_docs_for_context, render_prompt_template,
                        split_into_passages)

logger = logging.getLogger(__name__)

DEFAULT_SIMILARITY_TOP_K = 2


class QueryEngine:
    """Answers questions over a `VectorStoreIndex`."""

    def __init__(
        self,
        index: "VectorStoreIndex",
        similarity_top_k: int = DEFAULT_SIMILARITY_TOP_K,
        qa_template: str = DEFAULT_QA_TEMPLATE,
    ):
        if similarity_top_k <= 0:
            raise ValueError("similarity_top_k must be positive.")
        self._index = index
        self.similarity_top_k = similarity_top_k
        self.qa_template = qa_template
        self._tracer = get_tracer(__name__)

    async def retrieve(self, question: str) -> List[ContextDocument]:
        """Returns the passages closest to `question`."""
        query_embedding = await self._index.embed_model.get_query_embedding(question)
        return await self._index.storage.similarity_search(
            query_embedding, k=self.similarity_top_k, collection_name=self._index.collection_name
        )

    async def query(self, question: str, parent_event: Optional[Any] = None) -> RAGResponse:
        """
        Retrieves context for `question` and asks the LLM to answer it.

        Returns:
            A `RAGResponse` holding the answer text and the passages used.
        """
        with create_span(self._tracer, "rag.query", parent=parent_event, top_k=self.similarity_top_k) as span:
            source_documents = await self.retrieve(question)
            add_span_attributes(span, {"rag.retrieved_count": len(source_documents)})
            logger.debug(f"Retrieved {len(source_documents)} passage(s) for query: '{question[:80]}'")

            prompt = render_prompt_template(
                self.qa_template, format_rag_docs_for_context(source_documents), question
            )
            response = await self._index.llm.chat(
                [ChatMessage(role=Role.USER, content=prompt)], parent_event=parent_event
            )
        return RAGResponse(response=response.message.content, source_documents=source_documents)


class VectorStoreIndex:
    """
    Passages of a document set, embedded and stored in a ChromaDB collection.
    """

    def __init__(
        self,
        llm: BaseLLM,
        embed_model: BaseEmbeddingModel,
        storage: ChromaVectorStorage,
        collection_name: Optional[str] = None,
    ):
        self.llm = llm
        self.embed_model = embed_model
        self.storage = storage
        self.collection_name = collection_name

    @classmethod
    async def from_documents(
        cls,
        documents: Sequence[Document],
        llm: BaseLLM,
        embed_model: BaseEmbeddingModel,
        passage_size: int = DEFAULT_PASSAGE_SIZE,
        storage: Optional[ChromaVectorStorage] = None,
        storage_config: Optional[Dict[str, Any]] = None,
        collection_name: Optional[str] = None,
    ) -> "VectorStoreIndex":
        """
        Builds an index over `documents`.

        Args:
            documents: Source documents.
            llm: LLM used to answer queries.
            embed_model: Embedding client for passages and queries.
            passage_size: Maximum passage length in characters.
            storage: An initialized storage; a new in-memory one is created
                     from `storage_config` when omitted.
            storage_config: Configuration for a newly created storage.
            collection_name: Target collection; defaults to the storage's default.
        """
        if storage is None:
            storage = ChromaVectorStorage()
            await storage.initialize(storage_config)
        if collection_name is None:
            # A fresh collection per index keeps separate indexes on one client apart
            collection_name = f"geminirag_{uuid.uuid4().hex[:12]}"

        index = cls(llm=llm, embed_model=embed_model, storage=storage, collection_name=collection_name)
        await index.insert(documents, passage_size=passage_size)
        return index

    async def insert(self, documents: Sequence[Document], passage_size: int = DEFAULT_PASSAGE_SIZE) -> List[str]:
        """Splits, embeds and stores `documents`; returns the stored passage ids."""
        passages: List[ContextDocument] = []
        for document in documents:
            for position, text in enumerate(split_into_passages(document.text, passage_size)):
                metadata = {key: value for key, value in document.metadata.items() if value is not None}
                metadata.update({"document_id": document.id, "position": position})
                passages.append(
                    ContextDocument(id=f"{document.id}:{position}", content=text, metadata=metadata)
                )
        if not passages:
            logger.warning("No passages produced from the provided documents; nothing was indexed.")
            return []

        embeddings = await self.embed_model.get_text_embeddings([p.content for p in passages])
        for passage, embedding in zip(passages, embeddings):
            passage.embedding = embedding

        stored_ids = await self.storage.add_documents(passages, collection_name=self.collection_name)
        logger.info(f"Indexed {len(stored_ids)} passage(s) from {len(documents)} document(s).")
        return stored_ids

    def as_query_engine(self, similarity_top_k: int = DEFAULT_SIMILARITY_TOP_K, **kwargs: Any) -> QueryEngine:
        return QueryEngine(self, similarity_top_k=similarity_top_k, **kwargs)
