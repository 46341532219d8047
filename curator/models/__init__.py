"""
LLM abstraction layer for the Curator query router.
"""

from .llm_manager import (
    LLMManager,
    LLMProvider,
    EmbeddingError,
    EmbeddingDimensionError,
    ProviderUnavailableError,
)
from .providers import OpenAIProvider, GeminiProvider, ProviderName

__all__ = [
    "LLMManager",
    "LLMProvider",
    "OpenAIProvider",
    "GeminiProvider",
    "ProviderName",
    "EmbeddingError",
    "EmbeddingDimensionError",
    "ProviderUnavailableError",
]
