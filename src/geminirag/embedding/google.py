# src/geminirag/embedding/google.py
"""
Google AI (Gemini) Embedding model implementation for geminirag.

Uses the google-genai Python SDK to generate embeddings via the Gemini API.
"""

import logging
import os
from typing import Any, Dict, List, Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from ..config import API_KEY_ENV_VARS
from ..exceptions import ConfigError, EmbeddingError
from .base import BaseEmbeddingModel

logger = logging.getLogger(__name__)

DEFAULT_GOOGLE_EMBEDDING_MODEL = "text-embedding-004"
QUERY_TASK_TYPE = "RETRIEVAL_QUERY"
VALID_TASK_TYPES = [
    "RETRIEVAL_QUERY", "RETRIEVAL_DOCUMENT", "SEMANTIC_SIMILARITY",
    "CLASSIFICATION", "CLUSTERING", "QUESTION_ANSWERING", "FACT_VERIFICATION",
]


class GeminiEmbedding(BaseEmbeddingModel):
    """
    Generates text embeddings using the Gemini API via google-genai.

    Passages are embedded with the configured task type (RETRIEVAL_DOCUMENT
    by default) and queries with RETRIEVAL_QUERY.
    """
    _client: Optional[Any] = None

    def __init__(self, config: Optional[Dict[str, Any]] = None, client: Optional[Any] = None):
        """
        Initializes the GeminiEmbedding model.

        Args:
            config: Configuration dictionary. Recognized keys:
                    'api_key' (optional): Defaults to GEMINI_API_KEY, then GOOGLE_API_KEY.
                    'default_model' (optional): Embedding model name
                                                (e.g., "text-embedding-004").
                    'task_type' (optional): Task type for document embeddings.
            client: Optional pre-built `google.genai.Client`.

        Raises:
            ConfigError: If no API key is available.
        """
        config = config or {}
        self._api_key = config.get("api_key") or next(
            (os.environ[name] for name in API_KEY_ENV_VARS if os.environ.get(name)), None
        )
        if not self._api_key:
            raise ConfigError("Set Gemini API key in GEMINI_API_KEY env variable to use Gemini embeddings.")

        raw_model_name = config.get("default_model", DEFAULT_GOOGLE_EMBEDDING_MODEL)
        self.model_name = raw_model_name.replace("models/", "")

        task_type = str(config.get("task_type", "RETRIEVAL_DOCUMENT")).upper()
        if task_type not in VALID_TASK_TYPES:
            logger.warning(f"Provided task_type '{task_type}' is not in the known valid list {VALID_TASK_TYPES}. "
                           f"Using it anyway, but it might cause API errors if invalid.")
        self._task_type = task_type
        self._client = client

        logger.info(f"GeminiEmbedding configured with model '{self.model_name}' and task_type '{self._task_type}'.")

    async def initialize(self) -> None:
        """Creates the google-genai client if one was not injected."""
        if self._client:
            return
        try:
            self._client = genai.Client(api_key=self._api_key)
            logger.info(f"GeminiEmbedding client initialized for model '{self.model_name}'.")
        except Exception as e:
            logger.error(f"Failed to initialize Google Gen AI client for embeddings: {e}", exc_info=True)
            self._client = None
            raise ConfigError(f"Google Gen AI client initialization for embeddings failed: {e}") from e

    async def _embed(self, texts: List[str], task_type: str) -> List[List[float]]:
        await self.initialize()
        logger.debug(f"Embedding {len(texts)} text(s) with Gemini model '{self.model_name}' (task: {task_type}).")
        try:
            result = await self._client.aio.models.embed_content(
                model=self.model_name,
                contents=texts,
                config=genai_types.EmbedContentConfig(task_type=task_type),
            )
        except genai_errors.APIError as e:
            logger.error(f"Gemini API error during embedding (model: {self.model_name}): {e}", exc_info=True)
            raise EmbeddingError(model_name=self.model_name, message=f"Gemini API error: {e}") from e

        embeddings = [list(embedding.values or []) for embedding in (result.embeddings or [])]
        if len(embeddings) != len(texts) or not all(embeddings):
            raise EmbeddingError(
                model_name=self.model_name,
                message=f"API returned {len(embeddings)} embedding(s) for {len(texts)} input(s).",
            )
        return embeddings

    async def get_text_embedding(self, text: str) -> List[float]:
        if not text:
            raise EmbeddingError(model_name=self.model_name, message="Input text cannot be empty.")
        return (await self._embed([text], self._task_type))[0]

    async def get_text_embeddings(self, texts: List[str]) -> List[List[float]]:
        """Embeds a batch in one request. Empty strings are rejected."""
        if not texts:
            return []
        if any(not text for text in texts):
            raise EmbeddingError(model_name=self.model_name, message="Batch contains empty text.")
        return await self._embed(list(texts), self._task_type)

    async def get_query_embedding(self, query: str) -> List[float]:
        if not query:
            raise EmbeddingError(model_name=self.model_name, message="Query text cannot be empty.")
        return (await self._embed([query], QUERY_TASK_TYPE))[0]

    async def close(self) -> None:
        """The google-genai client does not require explicit closing."""
        logger.debug(f"GeminiEmbedding for model '{self.model_name}' closed.")
        self._client = None
