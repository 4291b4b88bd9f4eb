"""Shared fixtures for CamGPT tests."""

from typing import Any, Optional
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from src.services.image_agent.models import SearchResult
from src.services.image_agent.tools import WebSearchClient


def make_llm(
    describe: Any = "A photo of something.",
    generate: Any = "",
    model: str = "test-vision",
) -> MagicMock:
    """
    Build a fake LLMClient.

    describe/generate may be a return value, an exception, or a list used as
    side_effect.
    """
    llm = MagicMock()
    llm.model = model
    llm.fast_model = "test-fast"
    llm.describe_image = AsyncMock()
    llm.generate_content = AsyncMock()
    llm.check_health = AsyncMock(return_value=True)

    for mock, value in ((llm.describe_image, describe), (llm.generate_content, generate)):
        if isinstance(value, (BaseException, list)):
            mock.side_effect = value
        else:
            mock.return_value = value
    return llm


def make_results(count: int) -> list[SearchResult]:
    return [
        SearchResult(
            title=f"Result {i}",
            url=f"https://example.com/{i}",
            content=f"Snippet {i}",
        )
        for i in range(1, count + 1)
    ]


def make_search_client(
    handler, api_key: Optional[str] = "tvly-test"
) -> WebSearchClient:
    """WebSearchClient whose HTTP traffic goes to an httpx.MockTransport handler."""
    return WebSearchClient(
        api_key=api_key,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


@pytest.fixture
def tmp_upload_dir(tmp_path, monkeypatch: pytest.MonkeyPatch):
    """Point UPLOAD_DIR at a per-test temp directory."""
    from src.core.config import settings

    upload_dir = tmp_path / "uploads"
    monkeypatch.setattr(settings, "upload_dir", str(upload_dir))
    return upload_dir
