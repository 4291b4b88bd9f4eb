"""Tests for Image Agent data models and their invariants."""

import pytest
from pydantic import ValidationError

from src.services.image_agent.models import (
    AgentMetadata,
    AgentOutcome,
    AnalysisRequest,
    SearchDecision,
)
from tests.conftest import make_results


class TestAnalysisRequest:
    def test_instruction_is_trimmed(self):
        request = AnalysisRequest(image_bytes=b"img", instruction_text="  Describe  ")
        assert request.instruction_text == "Describe"
        assert request.mime_type == "image/jpeg"

    @pytest.mark.parametrize("instruction", ["", "   ", "\n\t"])
    def test_blank_instruction_rejected(self, instruction):
        with pytest.raises(ValidationError):
            AnalysisRequest(image_bytes=b"img", instruction_text=instruction)


class TestSearchDecision:
    def test_parses_wire_field_names(self):
        decision = SearchDecision.model_validate(
            {"shouldSearch": True, "searchQuery": "Inception IMDB rating", "reasoning": "movie"}
        )
        assert decision.should_search is True
        assert decision.search_query == "Inception IMDB rating"
        assert decision.reasoning == "movie"

    def test_no_search_drops_query(self):
        decision = SearchDecision.model_validate(
            {"shouldSearch": False, "searchQuery": "ignored", "reasoning": "descriptive"}
        )
        assert decision.search_query is None

    @pytest.mark.parametrize("query", [None, "", "   "])
    def test_search_without_query_is_invalid(self, query):
        with pytest.raises(ValidationError):
            SearchDecision.model_validate({"shouldSearch": True, "searchQuery": query})

    @pytest.mark.parametrize("value", ["true", 1, "yes"])
    def test_should_search_must_be_a_real_bool(self, value):
        with pytest.raises(ValidationError):
            SearchDecision.model_validate({"shouldSearch": value, "searchQuery": "q"})

    def test_missing_should_search_is_invalid(self):
        with pytest.raises(ValidationError):
            SearchDecision.model_validate({"searchQuery": "q", "reasoning": "r"})


class TestAgentOutcome:
    def test_single_iteration_outcome(self):
        outcome = AgentOutcome(
            final_answer="A red logo.", web_search_used=False, iterations_used=1
        )
        assert outcome.search_query is None
        assert outcome.web_results is None

    def test_outcome_is_immutable(self):
        outcome = AgentOutcome(
            final_answer="A red logo.", web_search_used=False, iterations_used=1
        )
        with pytest.raises(ValidationError):
            outcome.final_answer = "changed"

    def test_search_flag_must_match_iterations(self):
        with pytest.raises(ValidationError):
            AgentOutcome(final_answer="x", web_search_used=True, iterations_used=1)
        with pytest.raises(ValidationError):
            AgentOutcome(
                final_answer="x", web_search_used=False, search_query="q", iterations_used=1
            )
        with pytest.raises(ValidationError):
            AgentOutcome(final_answer="x", web_search_used=True, iterations_used=2)

    def test_iteration_ceiling(self):
        with pytest.raises(ValidationError):
            AgentOutcome(
                final_answer="x", web_search_used=True, search_query="q", iterations_used=3
            )

    def test_web_results_capped_at_three(self):
        with pytest.raises(ValidationError):
            AgentOutcome(
                final_answer="x",
                web_search_used=True,
                search_query="q",
                web_results=make_results(4),
                iterations_used=2,
            )

    def test_web_results_require_search(self):
        with pytest.raises(ValidationError):
            AgentOutcome(
                final_answer="x",
                web_search_used=False,
                web_results=[],
                iterations_used=1,
            )

    def test_empty_answer_rejected(self):
        with pytest.raises(ValidationError):
            AgentOutcome(final_answer="", web_search_used=False, iterations_used=1)


def test_agent_metadata_serializes_camel_case():
    outcome = AgentOutcome(
        final_answer="Rated 8.8",
        web_search_used=True,
        search_query="Inception IMDB rating",
        web_results=make_results(2),
        iterations_used=2,
    )

    payload = AgentMetadata.from_outcome(outcome).model_dump(by_alias=True)

    assert payload["webSearchUsed"] is True
    assert payload["searchQuery"] == "Inception IMDB rating"
    assert payload["iterations"] == 2
    assert [r["url"] for r in payload["webResults"]] == [
        "https://example.com/1",
        "https://example.com/2",
    ]
