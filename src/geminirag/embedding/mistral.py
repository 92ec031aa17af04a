# src/geminirag/embedding/mistral.py
"""
Mistral AI Embedding model implementation for geminirag.

Mistral exposes an OpenAI-compatible embeddings endpoint, so this client
uses the OpenAI Python SDK pointed at the Mistral base URL.
"""

import logging
import os
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI, OpenAIError

from ..exceptions import ConfigError, EmbeddingError
from .base import BaseEmbeddingModel

logger = logging.getLogger(__name__)

DEFAULT_MISTRAL_EMBEDDING_MODEL = "mistral-embed"
DEFAULT_MISTRAL_BASE_URL = "https://api.mistral.ai/v1"
MISTRAL_API_KEY_ENV_VAR = "MISTRAL_API_KEY"


class MistralAIEmbedding(BaseEmbeddingModel):
    """
    Generates text embeddings using the Mistral AI API.
    """
    _client: Optional[AsyncOpenAI] = None

    def __init__(self, config: Optional[Dict[str, Any]] = None, client: Optional[AsyncOpenAI] = None):
        """
        Initializes the MistralAIEmbedding model.

        Args:
            config: Configuration dictionary. Recognized keys:
                    'api_key' (optional): Defaults to env var MISTRAL_API_KEY.
                    'default_model' (optional): Embedding model name.
                    'base_url' (optional): API endpoint URL.
                    'timeout' (optional): Request timeout in seconds.
            client: Optional pre-built `AsyncOpenAI` client.

        Raises:
            ConfigError: If no API key is available.
        """
        config = config or {}
        self._api_key = config.get("api_key") or os.environ.get(MISTRAL_API_KEY_ENV_VAR)
        if not self._api_key:
            raise ConfigError(f"Set Mistral API key in {MISTRAL_API_KEY_ENV_VAR} env variable.")

        self.model_name = config.get("default_model", DEFAULT_MISTRAL_EMBEDDING_MODEL)
        self._base_url = config.get("base_url", DEFAULT_MISTRAL_BASE_URL)
        self._timeout = float(config.get("timeout", 60.0))
        self._client = client

        logger.info(f"MistralAIEmbedding configured with model '{self.model_name}' (base URL: {self._base_url}).")

    async def initialize(self) -> None:
        """Creates the AsyncOpenAI client if one was not injected."""
        if self._client:
            return
        try:
            self._client = AsyncOpenAI(api_key=self._api_key, base_url=self._base_url, timeout=self._timeout)
            logger.info("AsyncOpenAI client for Mistral embeddings initialized.")
        except Exception as e:
            logger.error(f"Failed to initialize AsyncOpenAI client for Mistral embeddings: {e}", exc_info=True)
            self._client = None
            raise ConfigError(f"Mistral client initialization for embeddings failed: {e}") from e

    async def get_text_embedding(self, text: str) -> List[float]:
        if not text:
            raise EmbeddingError(model_name=self.model_name, message="Input text cannot be empty.")
        return (await self.get_text_embeddings([text]))[0]

    async def get_text_embeddings(self, texts: List[str]) -> List[List[float]]:
        """Embeds a batch in one request; results follow the input order."""
        if not texts:
            return []
        if any(not text for text in texts):
            raise EmbeddingError(model_name=self.model_name, message="Batch contains empty text.")

        await self.initialize()
        logger.debug(f"Generating Mistral embeddings for {len(texts)} text(s) (model: {self.model_name}).")
        try:
            response = await self._client.embeddings.create(
                model=self.model_name, input=list(texts), encoding_format="float"
            )
        except OpenAIError as e:
            logger.error(f"Mistral API error during embedding generation (model: {self.model_name}): {e}", exc_info=True)
            raise EmbeddingError(model_name=self.model_name, message=f"Mistral API error: {e}") from e

        if not response.data or len(response.data) != len(texts):
            raise EmbeddingError(
                model_name=self.model_name,
                message=f"API returned {len(response.data or [])} embedding(s) for {len(texts)} input(s).",
            )
        ordered = sorted(response.data, key=lambda item: item.index)
        return [list(item.embedding) for item in ordered]

    async def close(self) -> None:
        """Closes the underlying HTTP client."""
        if self._client:
            try:
                await self._client.close()
                logger.debug("MistralAIEmbedding client closed.")
            finally:
                self._client = None
