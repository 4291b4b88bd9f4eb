"""LLM integrations for CamGPT services."""

from src.llm.base import (
    configured_model_name,
    get_configured_llm,
    get_llm_client,
    LLMClient,
)
from src.llm.errors import UpstreamErrorKind, UpstreamModelError
from src.llm.gemini import GeminiClient, gemini_client
from src.llm.openai import OpenAIClient, openai_client

__all__ = [
    "configured_model_name",
    "get_configured_llm",
    "get_llm_client",
    "LLMClient",
    "UpstreamErrorKind",
    "UpstreamModelError",
    "GeminiClient",
    "gemini_client",
    "OpenAIClient",
    "openai_client",
]
