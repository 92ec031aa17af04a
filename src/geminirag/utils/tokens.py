# src/geminirag/utils/tokens.py
"""
Approximate token accounting for chat messages.

Gemini does not ship a local tokenizer, so counts are estimated with a
generic tiktoken encoding plus fixed per-message and per-reply overheads.
The numbers are informational and never used to gate a request.
"""

import functools
import logging
from typing import Any, Iterable

import tiktoken

from ..models import ChatMessage

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "cl100k_base"
TOKENS_PER_MESSAGE = 3
# Every reply is primed with <|start|>assistant<|message|>
TOKENS_PER_REPLY = 3


@functools.lru_cache(maxsize=None)
def get_tokenizer(encoding_name: str = DEFAULT_ENCODING) -> Any:
    """Load and cache a tiktoken encoding by name."""
    logger.debug(f"Loading tiktoken encoding '{encoding_name}'")
    return tiktoken.get_encoding(encoding_name)


def count_text_tokens(text: str, encoding_name: str = DEFAULT_ENCODING) -> int:
    """Count tokens in a single string."""
    if not text:
        return 0
    return len(get_tokenizer(encoding_name).encode(text))


def estimate_message_tokens(
    messages: Iterable[ChatMessage],
    encoding_name: str = DEFAULT_ENCODING,
) -> int:
    """
    Estimate the prompt size of a conversation.

    Each message costs `TOKENS_PER_MESSAGE` plus the tokens of its role and
    content; the total is topped up with `TOKENS_PER_REPLY`.

    Args:
        messages: The conversation to measure.
        encoding_name: tiktoken encoding used for the estimate.

    Returns:
        The estimated token count.
    """
    total = 0
    for message in messages:
        total += TOKENS_PER_MESSAGE
        total += count_text_tokens(str(message.role.value), encoding_name)
        total += count_text_tokens(message.content, encoding_name)
    return total + TOKENS_PER_REPLY
