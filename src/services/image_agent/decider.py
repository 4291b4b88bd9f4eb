"""Decision step: should the analysis be enriched with a web search?"""

import json
import logging
import re
from typing import Optional

from src.core.config import settings
from src.llm import LLMClient, get_configured_llm
from src.services.image_agent.models import SearchDecision

logger = logging.getLogger(__name__)

DECISION_ERROR_REASONING = "error"

DECISION_PROMPT = """You are an intelligent agent that decides whether web search is needed to better answer a user's request about an image.

Initial image analysis: "{initial_analysis}"
User's prompt: "{user_instruction}"

Determine if web search would significantly improve the answer. Web search is useful for:
- Getting current information (prices, ratings, reviews, news)
- Finding specific details about movies, products, places, people
- Getting real-time data (stock prices, weather, opening hours, events)
- Fact-checking or getting additional context

Respond with JSON only, using exactly these fields:
{{
  "shouldSearch": true/false,
  "searchQuery": "specific search query if needed, otherwise null",
  "reasoning": "brief explanation"
}}

Examples of when to search:
- Movie poster -> search for "movie name IMDB rating reviews"
- Product -> search for "product name price reviews where to buy"
- Restaurant -> search for "restaurant name location hours reviews"
- Person -> search for "person name current news"
- Place -> search for "place name current information visiting hours"

Examples of when NOT to search:
- Simple object description
- General scene description
- Abstract art analysis
- Color/composition analysis"""

# Matches ```json ... ``` fences some models wrap around JSON output
CODE_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


def parse_decision(raw: str, max_query_chars: int) -> SearchDecision:
    """
    Parse and validate a model's JSON verdict.

    Raises:
        ValueError: If the text is not JSON or does not match the decision schema
    """
    text = raw.strip()
    fenced = CODE_FENCE_PATTERN.match(text)
    if fenced:
        text = fenced.group(1)

    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

    decision = SearchDecision.model_validate(data)
    if decision.search_query and len(decision.search_query) > max_query_chars:
        decision.search_query = decision.search_query[:max_query_chars].rstrip()
    return decision


class SearchDecider:
    """Asks a small text model whether web search is warranted."""

    TEMPERATURE = 0.1
    MAX_OUTPUT_TOKENS = 200

    def __init__(
        self,
        llm: Optional[LLMClient] = None,
        max_query_chars: Optional[int] = None,
    ):
        self._llm = llm
        self.max_query_chars = max_query_chars or settings.search_query_max_chars

    @property
    def llm(self) -> LLMClient:
        return self._llm or get_configured_llm()

    def build_prompt(self, initial_analysis: str, user_instruction: str) -> str:
        return DECISION_PROMPT.format(
            initial_analysis=initial_analysis,
            user_instruction=user_instruction,
        )

    async def decide(self, initial_analysis: str, user_instruction: str) -> SearchDecision:
        """
        Decide whether to search the web, and for what.

        Never raises: call failures and malformed verdicts are logged and
        turned into a no-search decision.
        """
        prompt = self.build_prompt(initial_analysis, user_instruction)

        try:
            raw = await self.llm.generate_content(
                prompt=prompt,
                temperature=self.TEMPERATURE,
                max_output_tokens=self.MAX_OUTPUT_TOKENS,
                fast=True,
                json_output=True,
            )
        except Exception as e:
            logger.error(f"Error in search decision: {e}")
            return SearchDecision(should_search=False, reasoning=DECISION_ERROR_REASONING)

        try:
            decision = parse_decision(raw, self.max_query_chars)
        except Exception as e:
            # Deeply nested JSON raises RecursionError, not ValueError
            logger.error(f"Invalid search decision from model: {e}")
            return SearchDecision(should_search=False, reasoning=DECISION_ERROR_REASONING)

        logger.info(
            f"Search decision: should_search={decision.should_search}, "
            f"query={decision.search_query!r}, reasoning={decision.reasoning!r}"
        )
        return decision


# Singleton instance
search_decider = SearchDecider()
