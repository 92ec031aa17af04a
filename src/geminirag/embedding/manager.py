# src/geminirag/embedding/manager.py
"""
Embedding Model Manager for geminirag.

Resolves `"provider:model"` identifiers (e.g. "google:text-embedding-004",
"mistral:mistral-embed") to initialized embedding clients and caches them.
"""

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional, Type

from ..exceptions import ConfigError, EmbeddingError
from .base import BaseEmbeddingModel
from .google import GeminiEmbedding
from .mistral import MistralAIEmbedding

logger = logging.getLogger(__name__)

EMBEDDING_PROVIDER_CLASS_MAP: Dict[str, Type[BaseEmbeddingModel]] = {
    "google": GeminiEmbedding,
    "gemini": GeminiEmbedding,
    "mistral": MistralAIEmbedding,
}


class EmbeddingManager:
    """
    Creates, initializes and caches embedding clients by identifier.

    Initialization of a given identifier is serialized with an
    `asyncio.Lock`, so concurrent first requests share one client.
    """

    def __init__(self, provider_configs: Optional[Mapping[str, Dict[str, Any]]] = None):
        """
        Args:
            provider_configs: Per-provider base configuration, keyed by
                              provider type (e.g. {"mistral": {"api_key": ...}}).
        """
        self._provider_configs = dict(provider_configs or {})
        self._initialized_models: Dict[str, BaseEmbeddingModel] = {}
        self._model_init_locks: Dict[str, asyncio.Lock] = {}

    @staticmethod
    def parse_identifier(model_identifier: str) -> tuple[str, Optional[str]]:
        """Split "provider:model" into its parts; a bare provider uses its default model."""
        provider_type, _, model_name = model_identifier.partition(":")
        provider_type = provider_type.strip().lower()
        if provider_type not in EMBEDDING_PROVIDER_CLASS_MAP:
            raise ConfigError(
                f"Unknown embedding provider type '{provider_type}' in identifier '{model_identifier}'. "
                f"Known types: {list(EMBEDDING_PROVIDER_CLASS_MAP.keys())}"
            )
        return provider_type, (model_name.strip() or None)

    async def get_model(self, model_identifier: str) -> BaseEmbeddingModel:
        """
        Retrieves or creates, initializes, and caches an embedding client.

        Raises:
            ConfigError: If the identifier or configuration is invalid.
            EmbeddingError: If the client fails to initialize.
        """
        if not model_identifier:
            raise ConfigError("Embedding model identifier cannot be empty.")

        lock = self._model_init_locks.setdefault(model_identifier, asyncio.Lock())
        async with lock:
            if model_identifier in self._initialized_models:
                logger.debug(f"Returning cached embedding model for identifier: '{model_identifier}'")
                return self._initialized_models[model_identifier]

            provider_type, model_name = self.parse_identifier(model_identifier)
            embedding_cls = EMBEDDING_PROVIDER_CLASS_MAP[provider_type]
            instance_config = dict(self._provider_configs.get(provider_type, {}))
            if model_name:
                instance_config["default_model"] = model_name

            model_instance = embedding_cls(instance_config)
            try:
                await model_instance.initialize()
            except ConfigError:
                raise
            except Exception as e:
                logger.error(f"Failed to initialize embedding model '{model_identifier}': {e}", exc_info=True)
                raise EmbeddingError(model_name=model_identifier, message=f"Initialization failed: {e}") from e

            self._initialized_models[model_identifier] = model_instance
            logger.info(f"Initialized embedding model '{model_identifier}' ({embedding_cls.__name__}).")
            return model_instance

    async def get_text_embedding(self, text: str, model_identifier: str) -> List[float]:
        model_instance = await self.get_model(model_identifier)
        return await model_instance.get_text_embedding(text)

    async def get_text_embeddings(self, texts: List[str], model_identifier: str) -> List[List[float]]:
        model_instance = await self.get_model(model_identifier)
        return await model_instance.get_text_embeddings(texts)

    async def close(self) -> None:
        """Closes all cached embedding clients and clears the cache."""
        logger.info(f"Closing EmbeddingManager and {len(self._initialized_models)} cached embedding model(s)...")
        model_ids = list(self._initialized_models)
        results = await asyncio.gather(
            *(self._initialized_models[model_id].close() for model_id in model_ids),
            return_exceptions=True,
        )
        for model_id, result in zip(model_ids, results):
            if isinstance(result, Exception):
                logger.error(f"Error closing embedding model '{model_id}': {result}", exc_info=result)
        self._initialized_models.clear()
        self._model_init_locks.clear()
