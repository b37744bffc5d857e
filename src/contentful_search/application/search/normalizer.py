"""
EntryNormalizer - raw Delivery API records to NormalizedEntry.

Derives, for every record:
- title: first usable candidate field, else the entry id
- content type: ``sys.contentType.sys.id``, else "Unknown"
- url: web app link for the entry
- color key: stable color name for the content type

Everything here is pure: same record and space in, same entry out.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from contentful_search.domain.entities import NormalizedEntry, SpaceDescriptor

# Priority order, not alphabetical: "title" beats "name" when both are set.
TITLE_FIELD_CANDIDATES = (
    "title",
    "name",
    "internalName",
    "displayName",
    "label",
    "heading",
)

UNKNOWN_CONTENT_TYPE = "Unknown"

DEFAULT_WEB_APP_HOST = "contentful.com"

CONTENT_TYPE_COLORS = (
    "blue",
    "green",
    "orange",
    "purple",
    "red",
    "yellow",
    "magenta",
)

# 2**53 - 1 bounds the running hash
_MAX_SAFE_INTEGER = 2**53 - 1


def extract_entry_title(fields: Mapping[str, Any], entry_id: str) -> str:
    """
    Extract a display title from entry fields.

    Tries TITLE_FIELD_CANDIDATES in order and returns the first value that is
    a string with non-whitespace content. Falls back to the entry id.
    """
    for field_name in TITLE_FIELD_CANDIDATES:
        value = fields.get(field_name)
        if isinstance(value, str) and value.strip():
            return value
    return entry_id


def extract_content_type_id(sys: Mapping[str, Any]) -> str:
    content_type = sys.get("contentType")
    if isinstance(content_type, Mapping):
        link = content_type.get("sys")
        if isinstance(link, Mapping) and link.get("id"):
            return str(link["id"])
    return UNKNOWN_CONTENT_TYPE


def build_web_app_url(
    space_id: str,
    environment: str,
    entry_id: str,
    host: str = DEFAULT_WEB_APP_HOST,
) -> str:
    """Build the web app URL for an entry. Ids are URL-safe, nothing is escaped."""
    return f"https://app.{host}/spaces/{space_id}/environments/{environment}/entries/{entry_id}"


def _simple_hash(text: str) -> int:
    value = 0
    for char in text:
        value = value * 32 - value + ord(char)
        value %= _MAX_SAFE_INTEGER
    return abs(value)


def content_type_color(content_type_id: str) -> str:
    """Deterministically map a content type id to one of CONTENT_TYPE_COLORS."""
    return CONTENT_TYPE_COLORS[_simple_hash(content_type_id) % len(CONTENT_TYPE_COLORS)]


class EntryNormalizer:
    """
    Maps a raw record and its owning space to a NormalizedEntry.

    Example:
        >>> normalizer = EntryNormalizer()
        >>> entry = normalizer.normalize(
        ...     {"sys": {"id": "e1", "updatedAt": "2024-01-15T10:00:00Z"}, "fields": {}},
        ...     SpaceDescriptor(name="Blog", space_id="abc", access_token="t"),
        ... )
        >>> entry.title, entry.content_type
        ('e1', 'Unknown')
    """

    def __init__(self, web_app_host: str = DEFAULT_WEB_APP_HOST) -> None:
        self._web_app_host = web_app_host

    def normalize(self, record: Mapping[str, Any], space: SpaceDescriptor) -> NormalizedEntry:
        sys = record.get("sys") or {}
        fields = record.get("fields") or {}
        entry_id = str(sys.get("id", ""))
        content_type = extract_content_type_id(sys)

        return NormalizedEntry(
            id=entry_id,
            title=extract_entry_title(fields, entry_id),
            content_type=content_type,
            content_type_id=content_type,
            space_name=space.name,
            space_id=space.space_id,
            environment=space.environment,
            updated_at=str(sys.get("updatedAt", "")),
            url=build_web_app_url(space.space_id, space.environment, entry_id, self._web_app_host),
            raw_payload=dict(record),
        )

    def normalize_many(
        self,
        records: Sequence[Mapping[str, Any]],
        space: SpaceDescriptor,
    ) -> list[NormalizedEntry]:
        return [self.normalize(record, space) for record in records]
