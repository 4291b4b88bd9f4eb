"""Google Gemini LLM client."""

import logging
from typing import Any, Optional

import httpx
from google import genai
from google.genai import errors, types

from src.core.config import settings
from src.llm.errors import UpstreamErrorKind, UpstreamModelError

logger = logging.getLogger(__name__)


def to_upstream_error(error: Exception) -> UpstreamModelError:
    """Translate a google-genai or transport exception into an UpstreamModelError."""
    message = str(error)
    lowered = message.lower()

    if isinstance(error, errors.ClientError):
        if error.code == 429 or "resource_exhausted" in lowered or "quota" in lowered:
            kind = UpstreamErrorKind.QUOTA_EXCEEDED
        elif error.code in (401, 403) or "api_key_invalid" in lowered:
            kind = UpstreamErrorKind.INVALID_CREDENTIALS
        else:
            kind = UpstreamErrorKind.OTHER
    elif isinstance(error, (errors.ServerError, httpx.TimeoutException, httpx.TransportError)):
        kind = UpstreamErrorKind.TRANSIENT
    else:
        kind = UpstreamErrorKind.OTHER
    return UpstreamModelError(message, kind=kind, provider="gemini")


class GeminiClient:
    """Client for Google Gemini (text and vision)."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        fast_model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key or settings.gemini_api_key
        self.model = model or settings.gemini_model
        self.fast_model = fast_model or settings.gemini_fast_model
        self.timeout = timeout or settings.llm_timeout_seconds
        self._client: Optional[genai.Client] = None

    @property
    def client(self) -> genai.Client:
        """Lazy initialization of Gemini client."""
        if self._client is None:
            if not self.api_key:
                raise ValueError("GEMINI_API_KEY is not configured")
            self._client = genai.Client(
                api_key=self.api_key,
                # HttpOptions.timeout is in milliseconds
                http_options=types.HttpOptions(timeout=int(self.timeout * 1000)),
            )
        return self._client

    async def _generate(
        self, model: str, contents: Any, config: types.GenerateContentConfig
    ) -> str:
        try:
            response = await self.client.aio.models.generate_content(
                model=model,
                contents=contents,
                config=config,
            )
        except (errors.APIError, httpx.HTTPError) as e:
            raise to_upstream_error(e) from e

        return response.text or ""

    async def generate_content(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        temperature: float = 0.8,
        max_output_tokens: int = 2000,
        fast: bool = False,
        json_output: bool = False,
    ) -> str:
        """
        Generate content using Gemini.

        Args:
            prompt: User prompt
            system_instruction: Optional system instruction
            temperature: Creativity level (0.0-1.0)
            max_output_tokens: Maximum tokens in response
            fast: Use the smaller, cheaper model
            json_output: Request an application/json response

        Returns:
            Generated text content

        Raises:
            UpstreamModelError: If the API call fails
        """
        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=temperature,
            max_output_tokens=max_output_tokens,
            response_mime_type="application/json" if json_output else None,
        )

        text = await self._generate(
            self.fast_model if fast else self.model, prompt, config
        )
        logger.debug(f"Generated content with {len(text)} characters")
        return text

    async def describe_image(
        self,
        image_bytes: bytes,
        prompt: str,
        mime_type: str = "image/jpeg",
        max_output_tokens: int = 500,
    ) -> str:
        """Analyze an image with the vision model using an inline bytes part."""
        contents = [
            types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
            prompt,
        ]
        config = types.GenerateContentConfig(max_output_tokens=max_output_tokens)

        text = await self._generate(self.model, contents, config)
        logger.debug(f"Vision model returned {len(text)} characters")
        return text

    async def check_health(self) -> bool:
        try:
            await self.generate_content("Hello", max_output_tokens=5, fast=True)
            return True
        except (UpstreamModelError, ValueError) as e:
            logger.warning(f"Gemini health check failed: {e}")
            return False


# Singleton instance for dependency injection
gemini_client = GeminiClient()
