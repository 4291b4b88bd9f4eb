"""Pydantic models for the Image Agent service."""

from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    field_validator,
    model_validator,
)

MAX_ITERATIONS = 2
MAX_SURFACED_RESULTS = 3


class AnalysisRequest(BaseModel):
    """An image plus the instruction to analyze it with."""

    image_bytes: bytes
    instruction_text: str
    mime_type: str = "image/jpeg"

    @field_validator("instruction_text")
    @classmethod
    def instruction_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("instruction_text must not be empty")
        return value


class SearchDecision(BaseModel):
    """Verdict on whether a web search would improve the answer."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    should_search: StrictBool = Field(alias="shouldSearch")
    search_query: Optional[str] = Field(default=None, alias="searchQuery")
    reasoning: str = ""

    @model_validator(mode="after")
    def query_required_when_searching(self) -> "SearchDecision":
        if self.search_query is not None:
            self.search_query = self.search_query.strip() or None
        if self.should_search and not self.search_query:
            raise ValueError("searchQuery is required when shouldSearch is true")
        if not self.should_search:
            self.search_query = None
        return self


class SearchResult(BaseModel):
    """Individual search result from the web search tool."""

    model_config = ConfigDict(extra="ignore")

    title: str = ""
    url: str = ""
    content: str = ""


class AgentOutcome(BaseModel):
    """Final, immutable result of one agent run."""

    model_config = ConfigDict(frozen=True)

    final_answer: str
    web_search_used: bool
    search_query: Optional[str] = None
    web_results: Optional[list[SearchResult]] = None
    iterations_used: int

    @model_validator(mode="after")
    def check_consistency(self) -> "AgentOutcome":
        if not self.final_answer:
            raise ValueError("final_answer must not be empty")
        if self.iterations_used not in (1, MAX_ITERATIONS):
            raise ValueError(f"iterations_used must be 1 or {MAX_ITERATIONS}")
        searched = self.iterations_used == MAX_ITERATIONS
        if self.web_search_used != searched or (self.search_query is not None) != searched:
            raise ValueError(
                "web_search_used, search_query and iterations_used disagree"
            )
        if self.web_results is not None:
            if not self.web_search_used:
                raise ValueError("web_results requires web_search_used")
            if len(self.web_results) > MAX_SURFACED_RESULTS:
                raise ValueError(
                    f"at most {MAX_SURFACED_RESULTS} web results may be surfaced"
                )
        return self


# HTTP payloads


class AgentMetadata(BaseModel):
    """Provenance metadata returned alongside the analysis."""

    model_config = ConfigDict(populate_by_name=True)

    web_search_used: bool = Field(alias="webSearchUsed")
    search_query: Optional[str] = Field(default=None, alias="searchQuery")
    iterations: int
    web_results: Optional[list[SearchResult]] = Field(default=None, alias="webResults")

    @classmethod
    def from_outcome(cls, outcome: AgentOutcome) -> "AgentMetadata":
        return cls(
            web_search_used=outcome.web_search_used,
            search_query=outcome.search_query,
            iterations=outcome.iterations_used,
            web_results=outcome.web_results,
        )


class AnalyzeImageResponse(BaseModel):
    """Response model for image analysis."""

    analysis: str
    status: str = "success"
    model: str
    agent: AgentMetadata


class AgentProbeRequest(BaseModel):
    """Request model for running the agent against the built-in test image."""

    prompt: Optional[str] = None


class AgentProbeResponse(AnalyzeImageResponse):
    """Response model for the test-agent endpoint."""

    test: bool = True


class ErrorResponse(BaseModel):
    """Error payload returned by every endpoint."""

    error: str
    status: str = "error"
