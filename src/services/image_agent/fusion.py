"""Fusion step: merge the image analysis with web search results."""

import logging
from typing import Optional

from src.llm import LLMClient, get_configured_llm
from src.services.image_agent.models import SearchResult

logger = logging.getLogger(__name__)

FUSION_PROMPT = """You are an expert analyst. Combine the initial image analysis with current web search results to provide a comprehensive answer.

Initial Analysis: "{initial_analysis}"

Web Search Results:
{web_search_summary}

User's Original Request: "{user_instruction}"

Instructions:
1. Use the web search results to enhance, verify, or update the initial analysis
2. Answer to the point, be precise and concise
3. Prefer official and authoritative sources for the information"""


def format_search_results(results: list[SearchResult]) -> str:
    return "\n\n".join(
        f"Source: {result.title}\nURL: {result.url}\nContent: {result.content}"
        for result in results
    )


class AnswerFusion:
    """Combines the initial analysis and web search snippets into one answer."""

    TEMPERATURE = 0.3
    MAX_OUTPUT_TOKENS = 600

    def __init__(self, llm: Optional[LLMClient] = None):
        self._llm = llm

    @property
    def llm(self) -> LLMClient:
        return self._llm or get_configured_llm()

    def build_prompt(
        self,
        initial_analysis: str,
        search_results: list[SearchResult],
        user_instruction: str,
    ) -> str:
        return FUSION_PROMPT.format(
            initial_analysis=initial_analysis,
            web_search_summary=format_search_results(search_results),
            user_instruction=user_instruction,
        )

    async def fuse(
        self,
        initial_analysis: str,
        search_results: list[SearchResult],
        user_instruction: str,
    ) -> str:
        """
        Produce an enhanced answer from the analysis and search results.

        Falls back to the initial analysis on any failure or empty output.
        """
        prompt = self.build_prompt(initial_analysis, search_results, user_instruction)

        try:
            enhanced = await self.llm.generate_content(
                prompt=prompt,
                temperature=self.TEMPERATURE,
                max_output_tokens=self.MAX_OUTPUT_TOKENS,
            )
        except Exception as e:
            logger.error(f"Error in combining analysis: {e}")
            return initial_analysis

        enhanced = enhanced.strip()
        if not enhanced:
            logger.warning("Fusion returned no content, keeping initial analysis")
            return initial_analysis

        logger.info(
            f"Fused analysis with {len(search_results)} search results: "
            f"{len(enhanced)} characters"
        )
        return enhanced


# Singleton instance
answer_fusion = AnswerFusion()
