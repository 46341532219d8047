"""
LLM Provider implementations for the Curator query router.
"""

from .llm_manager import OpenAIProvider, GeminiProvider, ProviderName

__all__ = ["OpenAIProvider", "GeminiProvider", "ProviderName"]
