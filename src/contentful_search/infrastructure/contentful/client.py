"""
Contentful Delivery API Client - one read-only handle per configured space.

API Documentation: https://www.contentful.com/developers/docs/references/content-delivery-api/

Endpoints used:
- GET /spaces/{space}/environments/{env}/entries
- GET /spaces/{space}/environments/{env}/content_types

Error mapping (no retry, the next user action is the retry):
- 429            -> RateLimitError (Retry-After kept in the context)
- 5xx            -> ServiceUnavailableError
- other non-2xx  -> APIError
- transport fail -> NetworkError
- bad JSON body  -> ParseError

Usage:
    factory = SpaceClientFactory()
    for space, client in factory.bind(spaces):
        async with client:
            items = await client.list_entries(limit=10)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx
from typing_extensions import Self

from contentful_search.domain.entities import SpaceDescriptor
from contentful_search.shared.exceptions import (
    APIError,
    ErrorContext,
    NetworkError,
    ParseError,
    RateLimitError,
    ServiceUnavailableError,
)

logger = logging.getLogger(__name__)

DEFAULT_API_HOST = "cdn.contentful.com"

# Newest first
ORDER_BY_UPDATED_DESC = "-sys.updatedAt"


class SpaceClient:
    """
    Delivery API client bound to a single space and environment.

    Construction performs no I/O; connectivity is only exercised on the first
    call. Each instance owns its own ``httpx.AsyncClient``.
    """

    _service_name: str = "Contentful"

    def __init__(
        self,
        space: SpaceDescriptor,
        *,
        api_host: str = DEFAULT_API_HOST,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize space client.

        Args:
            space: Space the client reads from
            api_host: Delivery API host (Preview API host works as well)
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self._space = space
        self._base_url = (
            f"https://{api_host}/spaces/{space.space_id}/environments/{space.environment}"
        )
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout,
            headers={
                "Authorization": f"Bearer {space.access_token}",
                "Accept": "application/json",
            },
            limits=httpx.Limits(
                max_connections=10,
                max_keepalive_connections=5,
                keepalive_expiry=30.0,
            ),
            transport=transport,
        )

    @property
    def space(self) -> SpaceDescriptor:
        return self._space

    async def list_entries(
        self,
        *,
        query: str | None = None,
        content_type: str | None = None,
        limit: int = 100,
        order: str = ORDER_BY_UPDATED_DESC,
    ) -> list[dict[str, Any]]:
        """
        List entries of the space.

        Args:
            query: Full-text query across all text fields
            content_type: Restrict to one content type id
            limit: Page size (no further pages are fetched)
            order: Delivery API order expression

        Returns:
            Raw entry records, in API order
        """
        params: dict[str, Any] = {"limit": limit, "order": order}
        if query:
            params["query"] = query
        if content_type:
            params["content_type"] = content_type

        data = await self._make_request("/entries", params=params, operation="list_entries")
        return list(data.get("items", []))

    async def list_content_types(self) -> list[dict[str, Any]]:
        """List every content type defined in the space."""
        data = await self._make_request("/content_types", operation="list_content_types")
        return list(data.get("items", []))

    async def _make_request(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        operation: str,
    ) -> dict[str, Any]:
        """
        Issue one GET request and decode its JSON body.

        Raises:
            APIError (or subclass) for non-2xx answers and transport failures
            ParseError when the body is not a JSON object
        """
        context = ErrorContext(
            operation=operation,
            space_name=self._space.name,
            space_id=self._space.space_id,
        )
        logger.debug(f"{self._service_name} {operation} on space {self._space.name} params={params}")

        try:
            response = await self._client.get(path, params=params)
        except httpx.RequestError as e:
            raise NetworkError(
                f"{self._service_name} request failed for space {self._space.name}: {e}",
                context=context,
            ) from e

        self._raise_for_status(response, context)

        try:
            data = response.json()
        except ValueError as e:
            raise ParseError(str(e), source=self._service_name, context=context) from e

        if not isinstance(data, dict):
            raise ParseError("expected a JSON object", source=self._service_name, context=context)
        return data

    def _raise_for_status(self, response: httpx.Response, context: ErrorContext) -> None:
        status = response.status_code
        if status < 400:
            return

        message = self._error_message(response)
        if status == 429:
            raise RateLimitError(
                f"{self._service_name}: rate limit exceeded for space {self._space.name}",
                retry_after=self._get_retry_after(response),
                context=context,
            )
        if status >= 500:
            raise ServiceUnavailableError(message, status_code=status, service=self._service_name, context=context)
        raise APIError(
            f"{self._service_name} HTTP error {status}: {message}",
            status_code=status,
            context=context,
        )

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Contentful error bodies carry a human readable ``message``."""
        try:
            body = response.json()
        except ValueError:
            return response.reason_phrase or "unknown error"
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return response.reason_phrase or "unknown error"

    @staticmethod
    def _get_retry_after(response: httpx.Response) -> float | None:
        """Extract Retry-After (or Contentful's X-Contentful-RateLimit-Reset) in seconds."""
        for header in ("Retry-After", "X-Contentful-RateLimit-Reset"):
            value = response.headers.get(header)
            if value is None:
                continue
            try:
                return float(value)
            except ValueError:
                continue
        return None

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()


class SpaceClientFactory:
    """
    Binds space descriptors to live client handles.

    No deduplication: two identical descriptors get two independent clients
    and generate duplicate traffic.
    """

    def __init__(
        self,
        api_host: str = DEFAULT_API_HOST,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_host = api_host
        self._timeout = timeout
        self._transport = transport

    def create(self, space: SpaceDescriptor) -> SpaceClient:
        return SpaceClient(
            space,
            api_host=self._api_host,
            timeout=self._timeout,
            transport=self._transport,
        )

    def bind(self, spaces: Sequence[SpaceDescriptor]) -> list[tuple[SpaceDescriptor, SpaceClient]]:
        """Create one client per descriptor, in input order."""
        return [(space, self.create(space)) for space in spaces]
