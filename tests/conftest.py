"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

import asyncio
import json
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from contentful_search.domain.entities import SpaceDescriptor

# ============================================================
# Time helpers
# ============================================================

NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def iso(dt: datetime) -> str:
    return dt.strftime("%Y-%m-%dT%H:%M:%S.000Z")


def hours_ago(hours: float) -> str:
    return iso(NOW - timedelta(hours=hours))


# ============================================================
# Raw Delivery API payloads
# ============================================================


def make_record(
    entry_id: str,
    updated_at: str,
    content_type: str | None = "blogPost",
    **fields: Any,
) -> dict[str, Any]:
    """Build a raw entry record as the Delivery API returns it."""
    sys: dict[str, Any] = {"id": entry_id, "type": "Entry", "updatedAt": updated_at}
    if content_type is not None:
        sys["contentType"] = {"sys": {"type": "Link", "linkType": "ContentType", "id": content_type}}
    return {"sys": sys, "fields": fields}


def make_content_type(content_type_id: str, name: str) -> dict[str, Any]:
    return {"sys": {"id": content_type_id, "type": "ContentType"}, "name": name, "fields": []}


# ============================================================
# Fake clients
# ============================================================


class FakeSpaceClient:
    """Stands in for SpaceClient: canned items or a canned exception."""

    def __init__(
        self,
        space: SpaceDescriptor,
        entries: list[dict[str, Any]] | None = None,
        content_types: list[dict[str, Any]] | None = None,
        entries_error: Exception | None = None,
        content_types_error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.space = space
        self.entries = entries or []
        self.content_types = content_types or []
        self.entries_error = entries_error
        self.content_types_error = content_types_error
        self.delay = delay
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.closed = False

    async def list_entries(self, **kwargs: Any) -> list[dict[str, Any]]:
        self.calls.append(("list_entries", kwargs))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.entries_error is not None:
            raise self.entries_error
        return list(self.entries)

    async def list_content_types(self) -> list[dict[str, Any]]:
        self.calls.append(("list_content_types", {}))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.content_types_error is not None:
            raise self.content_types_error
        return list(self.content_types)

    async def close(self) -> None:
        self.closed = True


class FakeClientFactory:
    """Binds spaces to FakeSpaceClient, configured per space id."""

    def __init__(self, behaviours: dict[str, dict[str, Any]] | None = None) -> None:
        self.behaviours = behaviours or {}
        self.clients: list[FakeSpaceClient] = []

    def bind(self, spaces):
        bound = []
        for space in spaces:
            client = FakeSpaceClient(space, **self.behaviours.get(space.space_id, {}))
            self.clients.append(client)
            bound.append((space, client))
        return bound


# ============================================================
# Fixtures
# ============================================================


@pytest.fixture
def space_a() -> SpaceDescriptor:
    return SpaceDescriptor(name="Marketing", space_id="space-a", access_token="token-a")


@pytest.fixture
def space_b() -> SpaceDescriptor:
    return SpaceDescriptor(name="Docs", space_id="space-b", access_token="token-b", environment="staging")


@pytest.fixture
def spaces(space_a, space_b) -> list[SpaceDescriptor]:
    return [space_a, space_b]


@pytest.fixture
def spaces_json() -> str:
    return json.dumps(
        [
            {"name": "Marketing", "spaceId": "space-a", "accessToken": "token-a"},
            {"name": "Docs", "spaceId": "space-b", "accessToken": "token-b", "environment": "staging"},
        ]
    )
