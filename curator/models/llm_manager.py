"""
LLM Manager for the text-completion and embedding providers.
"""

import logging
import os
import re
from typing import Dict, Any, List, Optional
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

import numpy as np
import google.generativeai as genai
from openai import AsyncOpenAI

logger = logging.getLogger(__name__)


class ProviderName(Enum):
    """Model providers that can back completion and embedding calls."""
    GEMINI = "gemini"
    OPENAI = "openai"


class ProviderUnavailableError(ValueError):
    """Raised when the requested provider was not initialized."""


class EmbeddingError(ValueError):
    """Raised when a provider returns an unusable embedding."""


class EmbeddingDimensionError(EmbeddingError):
    """Raised when an embedding does not match the provider's dimensionality."""


def resolve_env_vars(value: str) -> str:
    """Resolve environment variables in string values like ${VAR_NAME}."""
    if isinstance(value, str) and "${" in value:
        def replace_env_var(match):
            var_name = match.group(1)
            return os.getenv(var_name, match.group(0))

        return re.sub(r'\$\{([^}]+)\}', replace_env_var, value)
    return value


@dataclass
class LLMConfig:
    """Configuration for LLM providers."""
    provider: str
    model: str
    embedding_model: str
    embedding_dimensions: Optional[int] = None
    temperature: float = 0.0
    max_tokens: int = 500
    api_key: Optional[str] = None

    def __post_init__(self):
        """Resolve environment variables after initialization."""
        if self.api_key:
            self.api_key = resolve_env_vars(self.api_key)
            # Unresolved placeholders count as missing
            if self.api_key.startswith("${"):
                self.api_key = None


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    Every provider offers the same two capabilities: text completion from a
    system instruction plus a user message, and text embedding.
    """

    config: LLMConfig

    @abstractmethod
    async def complete(self, system_prompt: str, user_message: str, temperature: Optional[float] = None) -> str:
        """Complete a system instruction and user message into text.

        ``temperature`` defaults to the configured provider temperature.
        """
        pass

    @abstractmethod
    async def embed(self, text: str) -> List[float]:
        """Generate an embedding vector for text."""
        pass

    @property
    def dimensions(self) -> Optional[int]:
        return self.config.embedding_dimensions

    def _temperature(self, temperature: Optional[float]) -> float:
        return self.config.temperature if temperature is None else temperature


class OpenAIProvider(LLMProvider):
    """OpenAI provider implementation."""

    def __init__(self, config: LLMConfig):
        self.config = config
        self.api_key = config.api_key or os.getenv("OPENAI_API_KEY")
        if not self.api_key:
            raise ValueError("OpenAI API key not found")

        self.client = AsyncOpenAI(api_key=self.api_key)

    async def complete(self, system_prompt: str, user_message: str, temperature: Optional[float] = None) -> str:
        """Complete using OpenAI chat completions."""
        try:
            response = await self.client.chat.completions.create(
                model=self.config.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_message}
                ],
                max_tokens=self.config.max_tokens,
                temperature=self._temperature(temperature)
            )
            return response.choices[0].message.content or ""
        except Exception as e:
            logger.error(f"OpenAI completion error: {e}")
            raise

    async def embed(self, text: str) -> List[float]:
        """Generate embeddings using OpenAI."""
        try:
            response = await self.client.embeddings.create(
                model=self.config.embedding_model,
                input=text
            )
            return response.data[0].embedding
        except Exception as e:
            logger.error(f"OpenAI embedding error: {e}")
            raise


class GeminiProvider(LLMProvider):
    """Google Gemini provider implementation."""

    def __init__(self, config: LLMConfig):
        self.config = config
        self.api_key = config.api_key or os.getenv("GOOGLE_API_KEY")
        if not self.api_key:
            raise ValueError("Google API key not found")

        genai.configure(api_key=self.api_key)

    async def complete(self, system_prompt: str, user_message: str, temperature: Optional[float] = None) -> str:
        """Complete using Gemini.

        Gemini receives the instruction and the query as a single prompt.
        """
        prompt = f"{system_prompt}\n\nQuery: {user_message}"

        try:
            model = genai.GenerativeModel(
                self.config.model,
                generation_config=genai.GenerationConfig(
                    temperature=self._temperature(temperature),
                    max_output_tokens=self.config.max_tokens
                )
            )
            response = await model.generate_content_async(prompt)
            return response.text or ""
        except Exception as e:
            logger.error(f"Gemini completion error: {e}")
            raise

    async def embed(self, text: str) -> List[float]:
        """Generate embeddings using Gemini."""
        try:
            result = await genai.embed_content_async(
                model=self.config.embedding_model,
                content=text
            )
            return result["embedding"]
        except Exception as e:
            logger.error(f"Gemini embedding error: {e}")
            raise


PROVIDER_DEFAULTS: Dict[ProviderName, Dict[str, Any]] = {
    ProviderName.OPENAI: {
        "model": "gpt-4o-mini",
        "embedding_model": "text-embedding-3-small",
        "embedding_dimensions": 1536,
    },
    ProviderName.GEMINI: {
        "model": "gemini-1.5-flash",
        "embedding_model": "models/text-embedding-004",
        "embedding_dimensions": 768,
    },
}

PROVIDER_CLASSES = {
    ProviderName.OPENAI: OpenAIProvider,
    ProviderName.GEMINI: GeminiProvider,
}


class LLMManager:
    """Manager for handling the configured LLM providers.

    ``get_provider`` is the only place where a provider name is turned into
    an implementation; callers pass the provider snapshot they resolved.
    """

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.providers: Dict[ProviderName, LLMProvider] = {}
        self._initialize_providers()

    def _initialize_providers(self):
        """Initialize available LLM providers."""
        llm_config = self.config.get("llm", {})

        for name, provider_class in PROVIDER_CLASSES.items():
            if name.value not in llm_config:
                continue

            section = llm_config[name.value] or {}
            defaults = PROVIDER_DEFAULTS[name]
            provider_config = LLMConfig(
                provider=name.value,
                model=section.get("model", defaults["model"]),
                embedding_model=section.get("embedding_model", defaults["embedding_model"]),
                embedding_dimensions=section.get("embedding_dimensions", defaults["embedding_dimensions"]),
                temperature=section.get("temperature", 0.0),
                max_tokens=section.get("max_tokens", 500),
                api_key=section.get("api_key")
            )
            try:
                self.providers[name] = provider_class(provider_config)
                logger.info(f"{name.value} provider initialized")
            except Exception as e:
                logger.warning(f"Failed to initialize {name.value} provider: {e}")

        if not self.providers:
            raise ValueError("No LLM providers could be initialized")

    def get_provider(self, provider: ProviderName) -> LLMProvider:
        """Return the provider implementation for a provider name."""
        if provider not in self.providers:
            raise ProviderUnavailableError(f"Provider {provider.value} not available")

        return self.providers[provider]

    async def complete(
        self,
        system_prompt: str,
        user_message: str,
        provider: ProviderName,
        temperature: Optional[float] = None
    ) -> str:
        """Complete text using the given provider."""
        return await self.get_provider(provider).complete(
            system_prompt, user_message, temperature=temperature
        )

    async def embed(self, text: str, provider: ProviderName) -> List[float]:
        """Generate a validated embedding using the given provider."""
        llm_provider = self.get_provider(provider)
        embedding = await llm_provider.embed(text)
        return self._validate_embedding(embedding, llm_provider.dimensions, provider)

    @staticmethod
    def _validate_embedding(
        embedding: List[float],
        expected_dimensions: Optional[int],
        provider: ProviderName
    ) -> List[float]:
        """Reject embeddings that would silently corrupt similarity ranking."""
        vector = np.asarray(embedding if embedding is not None else [], dtype=float)

        if vector.ndim != 1 or vector.size == 0:
            raise EmbeddingError(f"{provider.value} returned an empty embedding")
        if not np.all(np.isfinite(vector)):
            raise EmbeddingError(f"{provider.value} returned a non-finite embedding")
        if np.linalg.norm(vector) == 0:
            raise EmbeddingError(f"{provider.value} returned a zero embedding")
        if expected_dimensions and vector.size != expected_dimensions:
            raise EmbeddingDimensionError(
                f"{provider.value} embedding has {vector.size} dimensions, "
                f"expected {expected_dimensions}"
            )

        return vector.tolist()

    def get_available_providers(self) -> List[str]:
        """Get list of available providers."""
        return [name.value for name in self.providers]
