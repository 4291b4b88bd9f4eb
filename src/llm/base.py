"""Unified LLM interface for provider switching."""

import logging
from typing import Optional, Protocol

from src.core.config import settings

logger = logging.getLogger(__name__)


class LLMClient(Protocol):
    """Protocol for LLM clients."""

    model: str
    fast_model: str

    async def generate_content(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        temperature: float = 0.8,
        max_output_tokens: int = 2000,
        fast: bool = False,
        json_output: bool = False,
    ) -> str:
        """Generate text content from the LLM."""
        ...

    async def describe_image(
        self,
        image_bytes: bytes,
        prompt: str,
        mime_type: str = "image/jpeg",
        max_output_tokens: int = 500,
    ) -> str:
        """Generate text content from an image and an instruction."""
        ...

    async def check_health(self) -> bool:
        """Return True if the provider answers a minimal request."""
        ...


def get_llm_client() -> LLMClient:
    """
    Get the configured LLM client based on LLM_PROVIDER setting.

    Returns:
        LLMClient instance (either OpenAI or Gemini)

    Raises:
        ValueError: If provider is not supported or not configured
    """
    provider = settings.llm_provider.lower()

    if provider == "openai":
        from src.llm.openai import openai_client

        if not settings.openai_api_key:
            raise ValueError("OPENAI_API_KEY is required when LLM_PROVIDER=openai")
        logger.info(f"Using OpenAI LLM provider (model: {settings.openai_model})")
        return openai_client

    elif provider == "gemini":
        from src.llm.gemini import gemini_client

        if not settings.gemini_api_key:
            raise ValueError("GEMINI_API_KEY is required when LLM_PROVIDER=gemini")
        logger.info(f"Using Gemini LLM provider (model: {settings.gemini_model})")
        return gemini_client

    else:
        raise ValueError(
            f"Unsupported LLM_PROVIDER: {provider}. Supported: openai, gemini"
        )


# Lazy-loaded singleton
_llm_client: Optional[LLMClient] = None


def get_configured_llm() -> LLMClient:
    """Get the singleton LLM client instance."""
    global _llm_client
    if _llm_client is None:
        _llm_client = get_llm_client()
    return _llm_client


def configured_model_name() -> str:
    """Name of the vision model for the configured provider, without connecting."""
    if settings.llm_provider.lower() == "gemini":
        return settings.gemini_model
    return settings.openai_model
