# src/geminirag/providers/base.py
"""
Abstract Base Class for LLM sessions.

This module defines the capability contract every LLM backend in geminirag
implements: non-streaming chat and completion, streaming chat and
completion, metadata reporting and approximate token accounting. The index
and query engine depend only on this contract.
"""

import abc
from typing import Any, AsyncIterator, List, Optional, Sequence

from ..models import ChatMessage, ChatResponse, LLMMetadata, Role
from ..utils.tokens import estimate_message_tokens


class BaseLLM(abc.ABC):
    """
    Abstract Base Class for LLM integrations.

    `complete` and `stream_complete` have default implementations that wrap
    the prompt as a single user message and forward to `chat` and
    `stream_chat` respectively.
    """
    has_streaming: bool = False

    @property
    @abc.abstractmethod
    def metadata(self) -> LLMMetadata:
        """
        Return metadata describing the configured model.

        Returns:
            An `LLMMetadata` with model id, sampling parameters and the
            registered context window.
        """
        pass

    @abc.abstractmethod
    async def chat(
        self,
        messages: Sequence[ChatMessage],
        parent_event: Optional[Any] = None,
    ) -> ChatResponse:
        """
        Send a conversation to the model and return its reply.

        Args:
            messages: Ordered conversation history.
            parent_event: Optional tracing handle, passed through for
                          instrumentation only.

        Returns:
            The model's reply wrapped in a `ChatResponse`.
        """
        pass

    @abc.abstractmethod
    async def stream_chat(
        self,
        messages: Sequence[ChatMessage],
        parent_event: Optional[Any] = None,
    ) -> AsyncIterator[str]:
        """
        Send a conversation to the model and stream its reply.

        Args:
            messages: Ordered conversation history.
            parent_event: Optional tracing handle, passed through for
                          instrumentation only.

        Returns:
            A forward-only async iterator of text fragments in arrival order.

        Raises:
            UnsupportedOperationError: If the backend cannot stream.
        """
        pass

    async def complete(self, prompt: str, parent_event: Optional[Any] = None) -> ChatResponse:
        """Send a single user prompt; equivalent to `chat([user: prompt])`."""
        return await self.chat([ChatMessage(role=Role.USER, content=prompt)], parent_event)

    async def stream_complete(
        self,
        prompt: str,
        parent_event: Optional[Any] = None,
    ) -> AsyncIterator[str]:
        """Stream the reply to a single user prompt."""
        return await self.stream_chat([ChatMessage(role=Role.USER, content=prompt)], parent_event)

    def tokens(self, messages: List[ChatMessage]) -> int:
        """
        Approximate the token count of a conversation.

        Informational only; requests are never rejected based on it.
        """
        return estimate_message_tokens(messages)
