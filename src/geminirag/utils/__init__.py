"""Utility helpers for geminirag."""

from .tokens import count_text_tokens, estimate_message_tokens, get_tokenizer

__all__ = ["count_text_tokens", "estimate_message_tokens", "get_tokenizer"]
