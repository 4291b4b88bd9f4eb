"""OpenAI LLM client."""

import base64
import logging
from typing import Any, Optional

import openai
from openai import AsyncOpenAI

from src.core.config import settings
from src.llm.errors import UpstreamErrorKind, UpstreamModelError

logger = logging.getLogger(__name__)


def to_upstream_error(error: openai.OpenAIError) -> UpstreamModelError:
    """Translate an OpenAI SDK exception into an UpstreamModelError."""
    if isinstance(error, openai.AuthenticationError):
        kind = UpstreamErrorKind.INVALID_CREDENTIALS
    elif isinstance(error, openai.RateLimitError):
        if getattr(error, "code", None) == "insufficient_quota":
            kind = UpstreamErrorKind.QUOTA_EXCEEDED
        else:
            kind = UpstreamErrorKind.TRANSIENT
    elif isinstance(error, (openai.APIConnectionError, openai.InternalServerError)):
        # APITimeoutError is a subclass of APIConnectionError
        kind = UpstreamErrorKind.TRANSIENT
    else:
        kind = UpstreamErrorKind.OTHER
    return UpstreamModelError(str(error), kind=kind, provider="openai")


class OpenAIClient:
    """Client for OpenAI chat completions (text and vision)."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        fast_model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key or settings.openai_api_key
        self.model = model or settings.openai_model
        self.fast_model = fast_model or settings.openai_fast_model
        self.timeout = timeout or settings.llm_timeout_seconds
        self._client: Optional[AsyncOpenAI] = None

    @property
    def client(self) -> AsyncOpenAI:
        """Lazy initialization of OpenAI client."""
        if self._client is None:
            if not self.api_key:
                raise ValueError("OPENAI_API_KEY is not configured")
            # No SDK retries: every pipeline step is a single attempt
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    async def _complete(self, **kwargs: Any) -> str:
        try:
            response = await self.client.chat.completions.create(**kwargs)
        except openai.OpenAIError as e:
            raise to_upstream_error(e) from e

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

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
        Generate content using OpenAI.

        Args:
            prompt: User prompt
            system_instruction: Optional system instruction
            temperature: Creativity level (0.0-2.0)
            max_output_tokens: Maximum tokens in response
            fast: Use the smaller, cheaper model
            json_output: Request a JSON object response

        Returns:
            Generated text content

        Raises:
            UpstreamModelError: If the API call fails
        """
        messages = []

        if system_instruction:
            messages.append({"role": "system", "content": system_instruction})

        messages.append({"role": "user", "content": prompt})

        kwargs: dict[str, Any] = {
            "model": self.fast_model if fast else self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_output_tokens,
        }
        if json_output:
            kwargs["response_format"] = {"type": "json_object"}

        content = await self._complete(**kwargs)
        logger.debug(f"Generated content with {len(content)} characters")
        return content

    async def describe_image(
        self,
        image_bytes: bytes,
        prompt: str,
        mime_type: str = "image/jpeg",
        max_output_tokens: int = 500,
    ) -> str:
        """
        Analyze an image with the vision model.

        The image is sent inline as a base64 data URI.
        """
        encoded = base64.b64encode(image_bytes).decode("ascii")
        messages = [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt},
                    {
                        "type": "image_url",
                        "image_url": {"url": f"data:{mime_type};base64,{encoded}"},
                    },
                ],
            }
        ]

        content = await self._complete(
            model=self.model,
            messages=messages,
            max_tokens=max_output_tokens,
        )
        logger.debug(f"Vision model returned {len(content)} characters")
        return content

    async def check_health(self) -> bool:
        try:
            await self.generate_content("Hello", max_output_tokens=5, fast=True)
            return True
        except (UpstreamModelError, ValueError) as e:
            logger.warning(f"OpenAI health check failed: {e}")
            return False


# Singleton instance for dependency injection
openai_client = OpenAIClient()
