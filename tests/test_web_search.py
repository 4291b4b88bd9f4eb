"""Tests for the Tavily web search client."""

import json

import httpx
import pytest

from tests.conftest import make_search_client


def tavily_response(count: int) -> dict:
    return {
        "answer": "Inception is rated 8.8 on IMDb.",
        "results": [
            {
                "title": f"Result {i}",
                "url": f"https://example.com/{i}",
                "content": f"Snippet {i}",
                "score": 1.0 - i / 10,
            }
            for i in range(1, count + 1)
        ],
    }


@pytest.mark.asyncio
async def test_unconfigured_search_returns_empty_without_request():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=tavily_response(5))

    client = make_search_client(handler, api_key="")

    assert await client.search("Inception IMDB rating") == []
    assert calls == []


@pytest.mark.asyncio
async def test_search_sends_advanced_query():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=tavily_response(5))

    client = make_search_client(handler)
    await client.search("Inception IMDB rating")

    body = seen["body"]
    assert seen["url"] == "https://api.tavily.com/search"
    assert body["api_key"] == "tvly-test"
    assert body["query"] == "Inception IMDB rating"
    assert body["search_depth"] == "advanced"
    assert body["include_answer"] is True
    assert body["include_domains"] == []
    assert body["exclude_domains"] == []
    assert body["max_results"] == 5


@pytest.mark.asyncio
async def test_search_keeps_provider_order():
    client = make_search_client(lambda request: httpx.Response(200, json=tavily_response(3)))

    results = await client.search("query")

    assert [r.title for r in results] == ["Result 1", "Result 2", "Result 3"]
    assert results[0].url == "https://example.com/1"
    assert results[0].content == "Snippet 1"


@pytest.mark.asyncio
async def test_search_caps_result_count():
    client = make_search_client(lambda request: httpx.Response(200, json=tavily_response(8)))

    results = await client.search("query")

    assert len(results) == 5


@pytest.mark.asyncio
async def test_missing_fields_become_empty_strings():
    payload = {"results": [{"title": None, "url": "https://example.com"}, "junk"]}
    client = make_search_client(lambda request: httpx.Response(200, json=payload))

    results = await client.search("query")

    assert len(results) == 1
    assert results[0].title == ""
    assert results[0].content == ""


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [400, 401, 429, 500, 503])
async def test_http_error_returns_empty(status_code):
    client = make_search_client(
        lambda request: httpx.Response(status_code, json={"detail": "nope"})
    )

    assert await client.search("query") == []


@pytest.mark.asyncio
async def test_timeout_returns_empty():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = make_search_client(handler)

    assert await client.search("query") == []


@pytest.mark.asyncio
async def test_transport_error_returns_empty():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = make_search_client(handler)

    assert await client.search("query") == []


@pytest.mark.asyncio
async def test_invalid_json_returns_empty():
    client = make_search_client(lambda request: httpx.Response(200, text="<html>"))

    assert await client.search("query") == []


class TestHealthCheck:
    @pytest.mark.asyncio
    async def test_not_configured(self):
        client = make_search_client(lambda request: httpx.Response(200), api_key="")
        assert await client.check_health() == "not_configured"

    @pytest.mark.asyncio
    async def test_connected(self):
        client = make_search_client(lambda request: httpx.Response(200, json=tavily_response(1)))
        assert await client.check_health() == "connected"

    @pytest.mark.asyncio
    async def test_error(self):
        client = make_search_client(lambda request: httpx.Response(401, json={}))
        assert await client.check_health() == "error"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        [],
        "just a string",
        {"results": [{"title": 123, "url": "https://example.com", "content": "x"}]},
        {"results": {"title": "not a list"}},
    ],
)
async def test_unexpected_body_shape_returns_empty(payload):
    client = make_search_client(lambda request: httpx.Response(200, json=payload))

    assert await client.search("query") == []
