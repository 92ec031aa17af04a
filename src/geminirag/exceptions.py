# src/geminirag/exceptions.py
"""
Custom exceptions for the geminirag library.

This module defines a small hierarchy of exception classes so that callers
can tell configuration mistakes apart from unsupported operations, vendor
response problems and embedding or vector storage failures.
"""

class GeminiRAGError(Exception):
    """Base class for all geminirag specific errors."""
    def __init__(self, message: str = "An unspecified error occurred in geminirag."):
        super().__init__(message)

class ConfigError(GeminiRAGError):
    """Raised for errors related to configuration resolution or validation."""
    def __init__(self, message: str = "Configuration error."):
        super().__init__(message)

class UnsupportedOperationError(GeminiRAGError):
    """Raised when an operation is requested that the session does not support."""
    def __init__(self, operation: str = "unknown", message: str = "Operation not supported."):
        self.operation = operation
        super().__init__(f"{message} Operation: '{operation}'")

class ProviderError(GeminiRAGError):
    """Raised for errors originating from an LLM provider request or response."""
    def __init__(self, provider_name: str = "Unknown", message: str = "Provider error."):
        self.provider_name = provider_name
        super().__init__(f"Error with provider '{provider_name}': {message}")

class MalformedResponseError(ProviderError):
    """Raised when a vendor response lacks the structure needed to build a chat response."""
    def __init__(self, provider_name: str = "Unknown", message: str = "Malformed response."):
        super().__init__(provider_name, message)

class EmbeddingError(GeminiRAGError):
    """Raised for errors related to embedding generation."""
    def __init__(self, model_name: str = "Unknown", message: str = "Embedding generation error."):
        self.model_name = model_name
        super().__init__(f"Error with embedding model '{model_name}': {message}")

class VectorStorageError(GeminiRAGError):
    """Raised for errors specific to vector storage operations."""
    def __init__(self, message: str = "Vector storage error."):
        super().__init__(message)
