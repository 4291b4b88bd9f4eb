"""Image Agent service: vision analysis with optional web search enrichment."""

import logging
from typing import Optional

from src.services.image_agent.decider import SearchDecider, search_decider
from src.services.image_agent.fusion import AnswerFusion, answer_fusion
from src.services.image_agent.models import (
    MAX_ITERATIONS,
    MAX_SURFACED_RESULTS,
    AgentOutcome,
    AnalysisRequest,
)
from src.services.image_agent.tools import WebSearchClient, web_search_client
from src.services.image_agent.vision import VisionAnalyzer, vision_analyzer

logger = logging.getLogger(__name__)


class ImageAgentService:
    """
    Two-phase agent: analyze the image, then optionally search and fuse.

    The flow has no loop, so at most MAX_ITERATIONS rounds ever run:
    1. vision analysis (fatal on failure)
    2. search decision (never fails; degrades to no search)
    3. web search + fusion, only when the decision asks for it
    """

    def __init__(
        self,
        vision: Optional[VisionAnalyzer] = None,
        decider: Optional[SearchDecider] = None,
        searcher: Optional[WebSearchClient] = None,
        fusion: Optional[AnswerFusion] = None,
    ):
        self.vision = vision or vision_analyzer
        self.decider = decider or search_decider
        self.searcher = searcher or web_search_client
        self.fusion = fusion or answer_fusion

    async def analyze(self, request: AnalysisRequest) -> AgentOutcome:
        """
        Run the agentic flow for one image.

        Raises:
            UpstreamModelError: If the initial vision analysis fails
        """
        logger.info("Starting agentic analysis...")

        initial_analysis = await self.vision.analyze(
            request.image_bytes,
            request.instruction_text,
            mime_type=request.mime_type,
        )

        decision = await self.decider.decide(initial_analysis, request.instruction_text)

        if not decision.should_search:
            logger.info("No web search needed, returning initial analysis")
            return AgentOutcome(
                final_answer=initial_analysis,
                web_search_used=False,
                iterations_used=1,
            )

        logger.info(f"Web search needed: {decision.search_query}")
        results = await self.searcher.search(decision.search_query)

        if results:
            final_answer = await self.fusion.fuse(
                initial_analysis, results, request.instruction_text
            )
        else:
            # Nothing to fuse; skip the extra model call
            logger.info("Web search returned no results, keeping initial analysis")
            final_answer = initial_analysis

        return AgentOutcome(
            final_answer=final_answer,
            web_search_used=True,
            search_query=decision.search_query,
            web_results=results[:MAX_SURFACED_RESULTS],
            iterations_used=MAX_ITERATIONS,
        )


# Singleton instance
image_agent = ImageAgentService()
