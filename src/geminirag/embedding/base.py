# src/geminirag/embedding/base.py
"""
Abstract Base Class for Text Embedding Models.

This module defines the common interface that the embedding clients in
geminirag implement. The index uses it to embed passages and queries.
"""

import abc
from typing import Any, Dict, List


class BaseEmbeddingModel(abc.ABC):
    """
    Abstract Base Class for text embedding model integrations.

    Ensures all embedding models provide a consistent way to generate
    vector representations (embeddings) for text strings.
    """
    model_name: str

    @abc.abstractmethod
    def __init__(self, config: Dict[str, Any]):
        """
        Initialize the embedding model with its specific configuration.

        Args:
            config: A dictionary containing model-specific settings
                    (e.g., default_model, api_key).
        """
        pass

    @abc.abstractmethod
    async def initialize(self) -> None:
        """
        Perform any necessary asynchronous initialization, such as creating
        the vendor client. Should be called after the instance is created;
        the embedding methods call it on demand as well.
        """
        pass

    @abc.abstractmethod
    async def get_text_embedding(self, text: str) -> List[float]:
        """
        Generate a vector embedding for a single text string.

        Args:
            text: The input text string to embed.

        Returns:
            A list of floats representing the vector embedding.

        Raises:
            EmbeddingError: If the embedding generation fails.
        """
        pass

    async def get_text_embeddings(self, texts: List[str]) -> List[List[float]]:
        """
        Generate vector embeddings for a batch of text strings.

        The default implementation embeds one text at a time; clients with
        a batch endpoint override it.

        Raises:
            EmbeddingError: If the batch embedding generation fails.
        """
        embeddings = []
        for text in texts:
            embeddings.append(await self.get_text_embedding(text))
        return embeddings

    async def get_query_embedding(self, query: str) -> List[float]:
        """
        Embed a retrieval query. Defaults to `get_text_embedding`; clients
        whose API distinguishes query and document embeddings override it.
        """
        return await self.get_text_embedding(query)

    async def close(self) -> None:
        """Release client resources. No-op by default."""
        pass
