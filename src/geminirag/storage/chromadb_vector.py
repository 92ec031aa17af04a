# src/geminirag/storage/chromadb_vector.py
"""
ChromaDB vector storage for the geminirag index.

Uses the chromadb library with either a persistent or an in-memory client.
Embeddings are computed by geminirag's embedding clients and handed to
chromadb directly, so collections are created without an embedding function.
"""

import asyncio
import logging
import os
import pathlib
from typing import Any, Dict, List, Optional

import chromadb

from ..exceptions import ConfigError, VectorStorageError
from ..models import ContextDocument

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION_NAME = "geminirag_default"


class ChromaVectorStorage:
    """
    Manages storage and retrieval of passage embeddings using ChromaDB.

    The chromadb client is synchronous, so every operation runs in a worker
    thread through `asyncio.to_thread`.
    """

    def __init__(self) -> None:
        self._client: Optional[Any] = None
        self._storage_path: Optional[str] = None
        self._default_collection_name: str = DEFAULT_COLLECTION_NAME
        self._collection_cache: Dict[str, Any] = {}

    def _sync_initialize(self, config: Dict[str, Any]) -> None:
        self._storage_path = config.get("path")
        self._default_collection_name = config.get("default_collection", self._default_collection_name)

        try:
            if self._storage_path:
                expanded_path = os.path.expanduser(self._storage_path)
                pathlib.Path(expanded_path).mkdir(parents=True, exist_ok=True)
                self._client = chromadb.PersistentClient(path=expanded_path)
                logger.info(f"ChromaDB persistent client initialized at: {expanded_path}")
            else:
                self._client = chromadb.EphemeralClient()
                logger.info("ChromaDB in-memory client initialized.")
            self._client.list_collections()
        except Exception as e:
            logger.error(f"Failed to initialize ChromaDB client (path: {self._storage_path}): {e}", exc_info=True)
            self._client = None
            raise VectorStorageError(f"Could not initialize ChromaDB client: {e}") from e

    def _sync_get_collection(self, collection_name: Optional[str]) -> Any:
        """
        Gets or creates a collection, caching the collection object.

        Raises:
            VectorStorageError: If the client is not initialized or access fails.
            ConfigError: If no collection name is available.
        """
        if not self._client:
            raise VectorStorageError("ChromaDB client is not initialized.")

        target_collection_name = collection_name or self._default_collection_name
        if not target_collection_name:
            raise ConfigError("Vector storage collection name is not specified or configured.")

        if target_collection_name in self._collection_cache:
            return self._collection_cache[target_collection_name]

        try:
            collection = self._client.get_or_create_collection(
                name=target_collection_name,
                embedding_function=None,
                metadata={"hnsw:space": "cosine"},
            )
        except Exception as e:
            logger.error(f"Failed to get or create ChromaDB collection '{target_collection_name}': {e}", exc_info=True)
            raise VectorStorageError(f"Could not access ChromaDB collection '{target_collection_name}': {e}") from e
        logger.debug(f"Accessed ChromaDB collection: '{target_collection_name}'")
        self._collection_cache[target_collection_name] = collection
        return collection

    @staticmethod
    def _flatten_metadata(doc: ContextDocument) -> Dict[str, Any]:
        # chromadb only stores str, int, float and bool values
        flat: Dict[str, Any] = {}
        for key, value in doc.metadata.items():
            if value is None:
                continue
            if isinstance(value, (str, int, float, bool)):
                flat[key] = value
            else:
                flat[key] = str(value)
                logger.debug(f"Metadata value for key '{key}' in doc '{doc.id}' was converted to string.")
        return flat

    def _sync_add_documents(self, documents: List[ContextDocument], collection_name: Optional[str]) -> List[str]:
        if not documents:
            return []
        collection = self._sync_get_collection(collection_name)

        doc_ids: List[str] = []
        embeddings: List[List[float]] = []
        metadatas: List[Dict[str, Any]] = []
        contents: List[str] = []
        for doc in documents:
            if not doc.embedding:
                raise VectorStorageError(f"Document '{doc.id}' must have an embedding.")
            doc_ids.append(doc.id)
            embeddings.append(doc.embedding)
            metadatas.append(self._flatten_metadata(doc))
            contents.append(doc.content)

        if not all(metadatas):
            # chromadb rejects empty metadata dicts
            if any(metadatas):
                logger.warning(f"Some documents have no metadata; metadata is dropped for this batch of {len(doc_ids)}.")
            metadatas = None

        try:
            collection.upsert(ids=doc_ids, embeddings=embeddings, metadatas=metadatas, documents=contents)
        except Exception as e:
            logger.error(f"Failed to add documents to ChromaDB collection '{collection.name}': {e}", exc_info=True)
            raise VectorStorageError(f"ChromaDB add_documents failed: {e}") from e
        logger.info(f"Upserted {len(doc_ids)} documents into ChromaDB collection '{collection.name}'.")
        return doc_ids

    def _sync_similarity_search(
        self,
        query_embedding: List[float],
        k: int,
        collection_name: Optional[str],
        filter_metadata: Optional[Dict[str, Any]],
    ) -> List[ContextDocument]:
        collection = self._sync_get_collection(collection_name)
        try:
            results = collection.query(
                query_embeddings=[query_embedding],
                n_results=k,
                where=filter_metadata or None,
                include=["metadatas", "documents", "distances"],
            )
        except Exception as e:
            logger.error(f"Failed similarity search in ChromaDB collection '{collection.name}': {e}", exc_info=True)
            raise VectorStorageError(f"ChromaDB similarity_search failed: {e}") from e

        ids_list = results.get("ids")
        if not ids_list or not ids_list[0]:
            return []

        # Results hold one list per query embedding
        ids = ids_list[0]
        distances = (results.get("distances") or [None])[0] or [None] * len(ids)
        metadatas = (results.get("metadatas") or [None])[0] or [None] * len(ids)
        contents = (results.get("documents") or [None])[0] or [None] * len(ids)

        context_docs: List[ContextDocument] = []
        for doc_id, content, metadata, distance in zip(ids, contents, metadatas, distances):
            context_docs.append(
                ContextDocument(
                    id=str(doc_id),
                    content=content or "",
                    metadata=dict(metadata or {}),
                    score=float(distance) if distance is not None else None,
                )
            )
        logger.debug(f"ChromaDB query returned {len(context_docs)} results from collection '{collection.name}'.")
        return context_docs

    def _sync_delete_collection(self, collection_name: Optional[str]) -> None:
        if not self._client:
            raise VectorStorageError("ChromaDB client is not initialized.")
        target_collection_name = collection_name or self._default_collection_name
        try:
            self._client.delete_collection(name=target_collection_name)
        except Exception as e:
            logger.error(f"Failed to delete ChromaDB collection '{target_collection_name}': {e}", exc_info=True)
            raise VectorStorageError(f"ChromaDB delete_collection failed: {e}") from e
        finally:
            self._collection_cache.pop(target_collection_name, None)
        logger.info(f"Deleted ChromaDB collection '{target_collection_name}'.")

    def _sync_close(self) -> None:
        self._client = None
        self._collection_cache.clear()
        logger.info("ChromaDB vector storage resources cleared/dereferenced.")

    async def initialize(self, config: Optional[Dict[str, Any]] = None) -> None:
        """
        Creates the chromadb client.

        Args:
            config: Recognized keys are 'path' (persistent storage directory;
                    in-memory when absent) and 'default_collection'.
        """
        await asyncio.to_thread(self._sync_initialize, dict(config or {}))

    async def add_documents(
        self,
        documents: List[ContextDocument],
        collection_name: Optional[str] = None,
    ) -> List[str]:
        """Upserts embedded passages and returns their ids."""
        return await asyncio.to_thread(self._sync_add_documents, documents, collection_name)

    async def similarity_search(
        self,
        query_embedding: List[float],
        k: int,
        collection_name: Optional[str] = None,
        filter_metadata: Optional[Dict[str, Any]] = None,
    ) -> List[ContextDocument]:
        """Returns up to `k` passages ordered from closest to farthest."""
        return await asyncio.to_thread(
            self._sync_similarity_search, query_embedding, k, collection_name, filter_metadata
        )

    async def delete_collection(self, collection_name: Optional[str] = None) -> None:
        await asyncio.to_thread(self._sync_delete_collection, collection_name)

    async def close(self) -> None:
        await asyncio.to_thread(self._sync_close)
