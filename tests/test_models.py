# tests/test_models.py
"""Tests for the Pydantic data models."""

import pytest
from pydantic import ValidationError

from geminirag.models import ChatMessage, ChatResponse, ContextDocument, Document, RAGResponse, Role


class TestRole:

    @pytest.mark.parametrize("value", ["model", "MODEL", "agent", "assistant", "Assistant"])
    def test_assistant_aliases(self, value):
        """Gemini's "model" role and case variants map to the assistant role."""
        assert Role(value) is Role.ASSISTANT

    def test_unknown_role_raises(self):
        with pytest.raises(ValueError):
            Role("narrator")


class TestChatMessage:

    def test_role_coerced_from_string(self):
        message = ChatMessage(role="user", content="hi")
        assert message.role is Role.USER

    def test_is_frozen(self):
        message = ChatMessage(role=Role.USER, content="hi")
        with pytest.raises(ValidationError):
            message.content = "changed"

    def test_equality_is_structural(self):
        assert ChatMessage(role=Role.USER, content="a") == ChatMessage(role=Role.USER, content="a")


class TestChatResponse:

    def test_str_returns_content(self):
        response = ChatResponse(message=ChatMessage(role=Role.ASSISTANT, content="Camembert"))
        assert str(response) == "Camembert"

    def test_raw_is_excluded_from_dump(self):
        response = ChatResponse(message=ChatMessage(role=Role.ASSISTANT, content="x"), raw=object())
        assert "raw" not in response.model_dump()


class TestDocuments:

    def test_document_gets_generated_id(self):
        assert Document(text="a").id != Document(text="a").id

    def test_context_document_validates_assignment(self):
        doc = ContextDocument(content="a")
        doc.embedding = [0.1, 0.2]
        assert doc.embedding == [0.1, 0.2]
        with pytest.raises(ValidationError):
            doc.score = "not a number"

    def test_rag_response_str(self):
        assert str(RAGResponse(response="answer")) == "answer"
