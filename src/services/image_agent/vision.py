"""Initial image analysis with a multimodal model."""

import logging
from typing import Optional

from src.llm import LLMClient, get_configured_llm

logger = logging.getLogger(__name__)

NO_ANALYSIS = "No analysis received"


class VisionAnalyzer:
    """Runs the first-pass vision model analysis of an image."""

    MAX_OUTPUT_TOKENS = 500

    def __init__(self, llm: Optional[LLMClient] = None):
        self._llm = llm

    @property
    def llm(self) -> LLMClient:
        return self._llm or get_configured_llm()

    async def analyze(
        self,
        image_bytes: bytes,
        instruction_text: str,
        mime_type: str = "image/jpeg",
    ) -> str:
        """
        Analyze an image according to the user's instruction.

        Upstream errors (UpstreamModelError) are not caught here; a failed
        vision call aborts the request.

        Returns:
            The model's analysis, or NO_ANALYSIS if it returned nothing
        """
        instruction_text = instruction_text.strip()
        if not instruction_text:
            raise ValueError("Instruction text must not be empty")

        analysis = await self.llm.describe_image(
            image_bytes=image_bytes,
            prompt=instruction_text,
            mime_type=mime_type,
            max_output_tokens=self.MAX_OUTPUT_TOKENS,
        )
        analysis = analysis.strip()

        if not analysis:
            logger.warning("Vision model returned no content")
            return NO_ANALYSIS

        logger.info(f"Initial analysis complete: {len(analysis)} characters")
        return analysis


# Singleton instance
vision_analyzer = VisionAnalyzer()
