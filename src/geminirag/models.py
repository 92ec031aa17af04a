# src/geminirag/models.py
"""
Core data models for the geminirag library.

This module defines the Pydantic models used to represent chat messages,
chat responses, LLM metadata and the documents handled by the index.
"""

import uuid
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """
    Enumeration of possible roles in a conversation.
    """
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"

    @classmethod
    def _missing_(cls, value: object): # type: ignore[misc] # Pydantic uses this signature
        """
        Handles case-insensitive matching and the vendor alias "model".
        Gemini reports its own turns as "model", which maps to Role.ASSISTANT.
        """
        if isinstance(value, str):
            lower_value = value.lower()
            if lower_value in ("model", "agent"):
                return cls.ASSISTANT
            for member in cls:
                if member.value == lower_value:
                    return member
        return None


class ChatMessage(BaseModel):
    """
    A single role-tagged message in a conversation.

    Attributes:
        role: The role of the entity that produced the message.
        content: The textual content of the message.
    """
    model_config = ConfigDict(frozen=True)

    role: Role = Field(description="The role of the message sender (system, user, or assistant).")
    content: str = Field(description="The textual content of the message.")


class ChatResponse(BaseModel):
    """
    Result of a non-streaming chat call.

    Attributes:
        message: The message returned by the model.
        raw: The untouched vendor response, kept for callers that need
             provider-specific fields. Excluded from serialization.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    message: ChatMessage
    raw: Optional[Any] = Field(default=None, exclude=True, repr=False)

    def __str__(self) -> str:
        return self.message.content


class LLMMetadata(BaseModel):
    """Descriptive metadata about a configured LLM session."""
    model: str
    temperature: float
    top_p: float
    max_tokens: Optional[int] = None
    context_window: int


class Document(BaseModel):
    """A source document handed to the index."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique identifier for the document.")
    text: str = Field(description="The full text of the document.")
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ContextDocument(BaseModel):
    """
    A passage stored in or retrieved from the vector store.
    """
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique identifier for the passage.")
    content: str = Field(description="The textual content of the passage.")
    embedding: Optional[List[float]] = Field(default=None, description="Vector embedding of the content.")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Passage metadata (e.g., source document id).")
    score: Optional[float] = Field(default=None, description="Distance from the query; lower is closer.")
    model_config = ConfigDict(validate_assignment=True)


class RAGResponse(BaseModel):
    """Answer produced by a query engine together with the passages it used."""
    response: str
    source_documents: List[ContextDocument] = Field(default_factory=list)

    def __str__(self) -> str:
        return self.response
