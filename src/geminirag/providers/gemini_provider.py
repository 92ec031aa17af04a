# src/geminirag/providers/gemini_provider.py
"""
Google Gemini session for the geminirag library.

`GeminiSession` translates role-tagged chat messages into a google-genai
`generate_content` request, invokes the SDK and translates the response (or
the chunk stream) back into the uniform `ChatResponse` / text-fragment shape.
"""

import logging
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from google import genai
from google.genai import types

from ..config import GeminiConfig, resolve_gemini_config
from ..exceptions import ConfigError, MalformedResponseError, ProviderError, UnsupportedOperationError
from ..models import ChatMessage, ChatResponse, LLMMetadata, Role
from ..tracing import (add_span_attributes, create_span, end_span, get_tracer,
                       record_span_exception, start_span)
from .base import BaseLLM

logger = logging.getLogger(__name__)

PROVIDER_NAME = "gemini"

ROLE_TO_GEMINI_ROLE = {
    Role.USER: "user",
    Role.ASSISTANT: "model",
}


def to_gemini_contents(messages: Sequence[ChatMessage]) -> Tuple[List[types.Content], Optional[str]]:
    """
    Convert chat messages to Gemini `contents` plus a system instruction.

    System messages are pulled out and joined into the system instruction.
    Consecutive messages with the same vendor role are merged, since the
    API expects user and model turns to alternate.
    """
    contents: List[types.Content] = []
    system_parts: List[str] = []
    last_role: Optional[str] = None

    for message in messages:
        if message.role == Role.SYSTEM:
            system_parts.append(message.content)
            continue

        gemini_role = ROLE_TO_GEMINI_ROLE[message.role]
        if gemini_role == last_role and contents:
            previous = contents[-1].parts[-1]
            previous.text = f"{previous.text}\n{message.content}"
            continue

        contents.append(types.Content(role=gemini_role, parts=[types.Part(text=message.content)]))
        last_role = gemini_role

    system_instruction = "\n".join(system_parts) if system_parts else None
    return contents, system_instruction


def _candidate_text(candidate: Any) -> Optional[str]:
    """Join the text parts of a candidate, skipping thought parts. None if there are none."""
    content = getattr(candidate, "content", None)
    parts = getattr(content, "parts", None) or []
    texts = [
        part.text for part in parts
        if getattr(part, "text", None) and not getattr(part, "thought", False)
    ]
    return "".join(texts) if texts else None


def parse_gemini_response(response: Any) -> ChatResponse:
    """
    Translate a `GenerateContentResponse` into a `ChatResponse`.

    Raises:
        MalformedResponseError: If the response carries no candidates.
    """
    candidates = getattr(response, "candidates", None)
    if not candidates:
        feedback = getattr(response, "prompt_feedback", None)
        raise MalformedResponseError(
            PROVIDER_NAME, f"Response contained no candidates (prompt_feedback: {feedback})."
        )

    candidate = candidates[0]
    text = _candidate_text(candidate)
    if text is None:
        logger.warning(
            f"Gemini candidate carried no text (finish_reason: {getattr(candidate, 'finish_reason', None)}). "
            "Returning empty content."
        )
        text = ""

    raw_role = getattr(getattr(candidate, "content", None), "role", None) or "model"
    try:
        role = Role(raw_role)
    except ValueError:
        logger.debug(f"Unexpected Gemini role '{raw_role}', treating as assistant.")
        role = Role.ASSISTANT

    return ChatResponse(message=ChatMessage(role=role, content=text), raw=response)


def chunk_text(chunk: Any) -> str:
    """Text delta carried by a streaming chunk, or "" when it has none."""
    candidates = getattr(chunk, "candidates", None)
    if not candidates:
        return ""
    return _candidate_text(candidates[0]) or ""


class GeminiSession(BaseLLM):
    """
    A configured handle bound to one Gemini API key and model.

    The google-genai client is created on first use. A pre-built client can
    be injected with `client=` (useful for sharing one client or for tests).

    Example:
        session = GeminiSession({"model": "gemini-2.0-flash"})
        reply = await session.complete("What is the best French cheese?")
        async for fragment in await session.stream_complete("Who painted Olympia?"):
            print(fragment, end="")
    """
    has_streaming: bool = True

    def __init__(
        self,
        init: Union[GeminiConfig, Mapping[str, Any], None] = None,
        *,
        client: Optional[Any] = None,
        has_streaming: Optional[bool] = None,
        **overrides: Any,
    ):
        """
        Initializes the session.

        Args:
            init: Partial configuration mapping or a resolved `GeminiConfig`.
                  Missing fields are filled from the environment and defaults.
            client: Optional pre-built `google.genai.Client`.
            has_streaming: Override the streaming capability flag.
            **overrides: Individual configuration fields (api_key, model,
                         temperature, top_p, max_tokens).

        Raises:
            ConfigError: If no API key can be resolved or a value is invalid.
        """
        self.config = resolve_gemini_config(init, **overrides)
        self._client = client
        if has_streaming is not None:
            self.has_streaming = has_streaming
        self._tracer = get_tracer(__name__)
        logger.debug(f"GeminiSession configured for model '{self.config.model}'.")

    @property
    def model(self) -> str:
        return self.config.model

    @property
    def client(self) -> Any:
        """The google-genai client, created lazily."""
        if self._client is None:
            try:
                self._client = genai.Client(api_key=self.config.api_key)
                logger.info("Google Gen AI client initialized.")
            except Exception as e:
                logger.error(f"Failed to initialize Google Gen AI client: {e}", exc_info=True)
                raise ConfigError(f"Google Gen AI client initialization failed: {e}") from e
        return self._client

    @property
    def metadata(self) -> LLMMetadata:
        return LLMMetadata(
            model=self.config.model,
            temperature=self.config.temperature,
            top_p=self.config.top_p,
            max_tokens=self.config.max_tokens,
            context_window=self.config.context_window,
        )

    def _build_request(self, messages: Sequence[ChatMessage]) -> Dict[str, Any]:
        contents, system_instruction = to_gemini_contents(messages)
        if not contents:
            raise ProviderError(PROVIDER_NAME, "No user or assistant messages to send.")

        generation_config = types.GenerateContentConfig(
            temperature=self.config.temperature,
            top_p=self.config.top_p,
            max_output_tokens=self.config.max_tokens,
            system_instruction=system_instruction,
        )
        return {"model": self.config.model, "contents": contents, "config": generation_config}

    def _span_attributes(self, messages: Sequence[ChatMessage], stream: bool) -> Dict[str, Any]:
        return {
            "llm.provider": PROVIDER_NAME,
            "llm.model": self.config.model,
            "llm.stream": stream,
            "llm.context_messages": len(messages),
        }

    async def chat(
        self,
        messages: Sequence[ChatMessage],
        parent_event: Optional[Any] = None,
    ) -> ChatResponse:
        """
        Sends the conversation to Gemini and returns the first candidate.

        Vendor and network errors are logged and propagated unchanged; the
        `llm.chat` span records them on exit.

        Raises:
            ProviderError: If there is nothing to send.
            MalformedResponseError: If the response has no candidates.
        """
        request = self._build_request(messages)
        with create_span(
            self._tracer, "llm.chat", parent=parent_event, **self._span_attributes(messages, False)
        ) as span:
            try:
                response = await self.client.aio.models.generate_content(**request)
            except Exception as e:
                logger.error(f"Gemini chat request failed (model: {self.config.model}): {e}", exc_info=True)
                raise
            chat_response = parse_gemini_response(response)
            add_span_attributes(span, {"llm.response_chars": len(chat_response.message.content)})
        return chat_response

    async def stream_chat(
        self,
        messages: Sequence[ChatMessage],
        parent_event: Optional[Any] = None,
    ) -> AsyncIterator[str]:
        """
        Starts a streaming request and returns an async iterator of text deltas.

        The capability check happens before any request is built or sent.
        The returned iterator is forward-only; iterating it a second time
        yields nothing, so call `stream_chat` again for a fresh stream.
        The `llm.stream_chat` span stays open until the iterator finishes
        or is closed.

        Raises:
            UnsupportedOperationError: If this session has streaming disabled.
            ProviderError: If there is nothing to send.
        """
        if not self.has_streaming:
            raise UnsupportedOperationError("stream_chat", "Streaming is not supported by this session.")

        request = self._build_request(messages)
        span = start_span(
            self._tracer, "llm.stream_chat", parent=parent_event, **self._span_attributes(messages, True)
        )
        try:
            stream = await self.client.aio.models.generate_content_stream(**request)
        except Exception as e:
            logger.error(f"Gemini stream request failed (model: {self.config.model}): {e}", exc_info=True)
            record_span_exception(span, e)
            end_span(span)
            raise
        return self._iterate_stream(stream, span)

    async def _iterate_stream(self, stream: AsyncIterator[Any], span: Any = None) -> AsyncIterator[str]:
        emitted = 0
        try:
            async for chunk in stream:
                emitted += 1
                yield chunk_text(chunk)
        except Exception as e:
            logger.error(f"Gemini stream failed after {emitted} chunk(s) (model: {self.config.model}): {e}", exc_info=True)
            record_span_exception(span, e)
            raise
        finally:
            try:
                aclose = getattr(stream, "aclose", None)
                if aclose is not None:
                    await aclose()
            finally:
                add_span_attributes(span, {"llm.stream_chunks": emitted})
                end_span(span)
            logger.debug(f"Gemini stream for model '{self.config.model}' ended after {emitted} chunk(s).")
