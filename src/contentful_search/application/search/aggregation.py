"""
AggregationService - Multi-Space Fan-Out / Fan-In

Runs one call per space concurrently, waits for *all* of them to settle,
then merges the results deterministically:

    spaces[0]  spaces[1]  spaces[2]      ← one client each, concurrent
        │          │          │
        └──── gather_settled ─┘          ← join-all, never fail-fast
                   │
        SpaceOperationResult[]           ← input order, error or items
                   │
        normalize → merge → sort         ← updated_at desc, stable

Failure isolation:
    A failing space contributes nothing and is logged. The aggregate call
    still succeeds. For entry operations the per-space results (errors
    included) are kept on ``last_results``; content type failures are only
    logged.

Example:
    >>> service = AggregationService(SpaceClientFactory())
    >>> entries = await service.fetch_latest(spaces, limit=10)
    >>> hits = await service.search(spaces, "pricing page")
    >>> types = await service.list_content_types(spaces)
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from contextlib import AsyncExitStack
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from contentful_search.application.search.normalizer import EntryNormalizer
from contentful_search.domain.entities import (
    ContentTypeDescriptor,
    NormalizedEntry,
    SpaceDescriptor,
    SpaceOperationResult,
)
from contentful_search.shared.async_utils import gather_settled
from contentful_search.shared.exceptions import SpaceOperationError

if TYPE_CHECKING:
    from contentful_search.infrastructure.contentful import SpaceClient, SpaceClientFactory

logger = logging.getLogger(__name__)

# Filter value meaning "no content type filter"
ALL_CONTENT_TYPES = "all"

# Queries shorter than this (after trimming) never reach the network
MIN_QUERY_LENGTH = 2

DEFAULT_LATEST_LIMIT = 10
SEARCH_PAGE_SIZE = 100

ORDER_BY_UPDATED_DESC = "-sys.updatedAt"

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)

SpaceCall = Callable[["SpaceClient"], Awaitable[list[dict[str, Any]]]]


def _timestamp_key(entry: NormalizedEntry) -> datetime:
    """Sort key for ``updated_at``; unparseable timestamps sort last."""
    try:
        parsed = datetime.fromisoformat(entry.updated_at)
    except ValueError:
        return _OLDEST
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def sort_by_updated_desc(entries: Sequence[NormalizedEntry]) -> list[NormalizedEntry]:
    """Newest first. Stable: equal timestamps keep their concatenation order."""
    return sorted(entries, key=_timestamp_key, reverse=True)


def resolve_content_type_filter(content_type_filter: str | None) -> str | None:
    if not content_type_filter or content_type_filter == ALL_CONTENT_TYPES:
        return None
    return content_type_filter


class AggregationService:
    """
    Fan-out/fan-in across spaces for latest entries, search and content types.

    The service holds no per-query state besides ``last_results``; every call
    binds fresh clients through the factory and closes them when done.
    """

    def __init__(
        self,
        client_factory: SpaceClientFactory,
        normalizer: EntryNormalizer | None = None,
        *,
        search_limit: int = SEARCH_PAGE_SIZE,
    ) -> None:
        self._client_factory = client_factory
        self._normalizer = normalizer or EntryNormalizer()
        self._search_limit = search_limit
        self.last_results: list[SpaceOperationResult] = []

    # =========================================================================
    # Public operations
    # =========================================================================

    async def fetch_latest(
        self,
        spaces: Sequence[SpaceDescriptor],
        limit: int = DEFAULT_LATEST_LIMIT,
        content_type_filter: str | None = None,
    ) -> list[NormalizedEntry]:
        """
        Fetch the most recently updated entries of every space.

        Args:
            spaces: Spaces to query
            limit: Page size per space
            content_type_filter: Content type id, or "all"/None for no filter

        Returns:
            Merged entries, newest first
        """
        content_type = resolve_content_type_filter(content_type_filter)

        async def call(client: SpaceClient) -> list[dict[str, Any]]:
            return await client.list_entries(
                limit=limit,
                content_type=content_type,
                order=ORDER_BY_UPDATED_DESC,
            )

        results = await self._fan_out(spaces, "fetch_latest", call)
        self.last_results = results
        return self._merge_entries(results)

    async def search(
        self,
        spaces: Sequence[SpaceDescriptor],
        query_text: str,
    ) -> list[NormalizedEntry]:
        """
        Full-text search across every space.

        Queries shorter than MIN_QUERY_LENGTH characters after trimming
        return [] without any network call.
        """
        query = (query_text or "").strip()
        if len(query) < MIN_QUERY_LENGTH:
            return []

        async def call(client: SpaceClient) -> list[dict[str, Any]]:
            return await client.list_entries(
                query=query,
                limit=self._search_limit,
                order=ORDER_BY_UPDATED_DESC,
            )

        results = await self._fan_out(spaces, "search", call)
        self.last_results = results
        return self._merge_entries(results)

    async def list_content_types(
        self,
        spaces: Sequence[SpaceDescriptor],
    ) -> list[ContentTypeDescriptor]:
        """
        Fetch the content types of every space, deduplicated by id.

        Dedup walks the spaces in input order, so the first configured space
        that defines an id owns it, whichever response arrived first.
        """

        async def call(client: SpaceClient) -> list[dict[str, Any]]:
            return await client.list_content_types()

        results = await self._fan_out(spaces, "list_content_types", call)

        unique: dict[str, ContentTypeDescriptor] = {}
        for result in results:
            if not result.ok:
                continue
            for item in result.items:
                content_type = self._to_content_type(item, result.source_space)
                if content_type.id not in unique:
                    unique[content_type.id] = content_type
        return list(unique.values())

    # =========================================================================
    # Internals
    # =========================================================================

    async def _fan_out(
        self,
        spaces: Sequence[SpaceDescriptor],
        operation: str,
        call: SpaceCall,
    ) -> list[SpaceOperationResult]:
        """Run ``call`` once per space, concurrently; results in input order."""
        bound = self._client_factory.bind(spaces)

        async with AsyncExitStack() as stack:
            for _, client in bound:
                stack.push_async_callback(client.close)
            outcomes = await gather_settled(*(call(client) for _, client in bound))

        results: list[SpaceOperationResult] = []
        for (space, _), outcome in zip(bound, outcomes, strict=True):
            if outcome.ok:
                results.append(SpaceOperationResult(source_space=space, items=tuple(outcome.value or ())))
                continue

            error = SpaceOperationError(operation, space.name, space.space_id, outcome.error)
            logger.warning(str(error))
            results.append(SpaceOperationResult(source_space=space, error=error))

        succeeded = sum(1 for r in results if r.ok)
        logger.debug(f"{operation}: {succeeded}/{len(results)} spaces succeeded")
        return results

    def _merge_entries(self, results: Sequence[SpaceOperationResult]) -> list[NormalizedEntry]:
        merged: list[NormalizedEntry] = []
        for result in results:
            if not result.ok:
                continue
            merged.extend(self._normalizer.normalize_many(result.items, result.source_space))
        return sort_by_updated_desc(merged)

    @staticmethod
    def _to_content_type(item: dict[str, Any], space: SpaceDescriptor) -> ContentTypeDescriptor:
        sys = item.get("sys") or {}
        content_type_id = str(sys.get("id", ""))
        return ContentTypeDescriptor(
            id=content_type_id,
            name=str(item.get("name") or content_type_id),
            space_id=space.space_id,
            space_name=space.name,
        )
