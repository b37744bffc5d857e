"""
Tests for the Contentful Delivery API client.

Requests never leave the process: every client is built on httpx.MockTransport.
"""

from __future__ import annotations

import httpx
import pytest

from contentful_search.infrastructure.contentful import SpaceClient, SpaceClientFactory
from contentful_search.shared.exceptions import (
    APIError,
    NetworkError,
    ParseError,
    RateLimitError,
    ServiceUnavailableError,
)

from conftest import make_content_type, make_record


def _transport(handler, seen: list[httpx.Request] | None = None) -> httpx.MockTransport:
    def wrapped(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return handler(request)

    return httpx.MockTransport(wrapped)


def _ok(items):
    return lambda request: httpx.Response(200, json={"items": items, "total": len(items)})


# ============================================================
# Requests
# ============================================================


class TestListEntries:
    @pytest.mark.asyncio
    async def test_latest_request(self, space_b):
        seen: list[httpx.Request] = []
        record = make_record("e1", "2024-01-15T10:00:00Z", title="Hello")
        async with SpaceClient(space_b, transport=_transport(_ok([record]), seen)) as client:
            items = await client.list_entries(limit=10, content_type="blogPost")

        assert items == [record]
        request = seen[0]
        assert request.method == "GET"
        assert request.url.host == "cdn.contentful.com"
        assert request.url.path == "/spaces/space-b/environments/staging/entries"
        assert request.url.params["limit"] == "10"
        assert request.url.params["order"] == "-sys.updatedAt"
        assert request.url.params["content_type"] == "blogPost"
        assert "query" not in request.url.params
        assert request.headers["Authorization"] == "Bearer token-b"

    @pytest.mark.asyncio
    async def test_search_request(self, space_a):
        seen: list[httpx.Request] = []
        async with SpaceClient(space_a, transport=_transport(_ok([]), seen)) as client:
            await client.list_entries(query="pricing page", limit=100)

        params = seen[0].url.params
        assert params["query"] == "pricing page"
        assert params["limit"] == "100"
        assert "content_type" not in params

    @pytest.mark.asyncio
    async def test_custom_api_host(self, space_a):
        seen: list[httpx.Request] = []
        client = SpaceClient(space_a, api_host="preview.contentful.com", transport=_transport(_ok([]), seen))
        try:
            await client.list_entries()
        finally:
            await client.close()
        assert seen[0].url.host == "preview.contentful.com"
        assert seen[0].url.path == "/spaces/space-a/environments/master/entries"

    @pytest.mark.asyncio
    async def test_missing_items(self, space_a):
        transport = _transport(lambda request: httpx.Response(200, json={"total": 0}))
        async with SpaceClient(space_a, transport=transport) as client:
            assert await client.list_entries() == []


class TestListContentTypes:
    @pytest.mark.asyncio
    async def test_request(self, space_a):
        seen: list[httpx.Request] = []
        items = [make_content_type("blogPost", "Blog Post")]
        async with SpaceClient(space_a, transport=_transport(_ok(items), seen)) as client:
            assert await client.list_content_types() == items
        assert seen[0].url.path == "/spaces/space-a/environments/master/content_types"


# ============================================================
# Error mapping
# ============================================================


class TestErrorMapping:
    @pytest.mark.asyncio
    async def test_rate_limited(self, space_a):
        transport = _transport(
            lambda request: httpx.Response(429, headers={"X-Contentful-RateLimit-Reset": "2"}, json={})
        )
        async with SpaceClient(space_a, transport=transport) as client:
            with pytest.raises(RateLimitError) as exc_info:
                await client.list_entries()
        assert exc_info.value.context.retry_after == 2.0
        assert exc_info.value.context.space_name == "Marketing"

    @pytest.mark.asyncio
    async def test_retry_after_header_preferred(self, space_a):
        transport = _transport(
            lambda request: httpx.Response(
                429, headers={"Retry-After": "7", "X-Contentful-RateLimit-Reset": "2"}, json={}
            )
        )
        async with SpaceClient(space_a, transport=transport) as client:
            with pytest.raises(RateLimitError) as exc_info:
                await client.list_entries()
        assert exc_info.value.context.retry_after == 7.0

    @pytest.mark.asyncio
    async def test_server_error(self, space_a):
        transport = _transport(lambda request: httpx.Response(503, text="unavailable"))
        async with SpaceClient(space_a, transport=transport) as client:
            with pytest.raises(ServiceUnavailableError) as exc_info:
                await client.list_content_types()
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_client_error_uses_body_message(self, space_a):
        transport = _transport(
            lambda request: httpx.Response(404, json={"message": "The resource could not be found."})
        )
        async with SpaceClient(space_a, transport=transport) as client:
            with pytest.raises(APIError) as exc_info:
                await client.list_entries()
        error = exc_info.value
        assert type(error) is APIError
        assert error.status_code == 404
        assert "The resource could not be found." in str(error)

    @pytest.mark.asyncio
    async def test_unauthorized(self, space_a):
        transport = _transport(lambda request: httpx.Response(401, text="nope"))
        async with SpaceClient(space_a, transport=transport) as client:
            with pytest.raises(APIError, match="401"):
                await client.list_entries()

    @pytest.mark.asyncio
    async def test_transport_failure(self, space_a):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with SpaceClient(space_a, transport=_transport(handler)) as client:
            with pytest.raises(NetworkError) as exc_info:
                await client.list_entries()
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_body_not_json(self, space_a):
        transport = _transport(lambda request: httpx.Response(200, text="<html>"))
        async with SpaceClient(space_a, transport=transport) as client:
            with pytest.raises(ParseError):
                await client.list_entries()

    @pytest.mark.asyncio
    async def test_body_not_object(self, space_a):
        transport = _transport(lambda request: httpx.Response(200, json=[1, 2]))
        async with SpaceClient(space_a, transport=transport) as client:
            with pytest.raises(ParseError, match="JSON object"):
                await client.list_entries()


# ============================================================
# Factory
# ============================================================


class TestSpaceClientFactory:
    def test_create_performs_no_io(self, space_a):
        def handler(request):
            raise AssertionError("no request expected")

        client = SpaceClientFactory(transport=_transport(handler)).create(space_a)
        assert client.space is space_a

    @pytest.mark.asyncio
    async def test_bind_keeps_order_and_duplicates(self, space_a, space_b):
        factory = SpaceClientFactory(transport=_transport(_ok([])))
        bound = factory.bind([space_b, space_a, space_b])
        try:
            assert [space for space, _ in bound] == [space_b, space_a, space_b]
            assert bound[0][1] is not bound[2][1]
            assert all(client.space is space for space, client in bound)
        finally:
            for _, client in bound:
                await client.close()

    def test_bind_empty(self):
        assert SpaceClientFactory().bind([]) == []
