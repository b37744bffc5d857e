"""
Display helpers for entries and content types.

Pure string formatting used by the terminal views; nothing here talks to the
network or to the orchestrator.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from contentful_search.domain.entities import ContentTypeDescriptor, NormalizedEntry

_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")


def format_content_type(content_type_id: str) -> str:
    """
    Content type id to display name.

    >>> format_content_type("blogPost")
    'Blog Post'
    >>> format_content_type("landing_page-v2")
    'Landing Page V2'
    """
    with_spaces = _CAMEL_BOUNDARY.sub(r"\1 \2", content_type_id).replace("_", " ").replace("-", " ")
    return " ".join(word[:1].upper() + word[1:].lower() for word in with_spaces.split(" "))


def format_subtitle(space_name: str, content_type: str) -> str:
    return f"{space_name} · {format_content_type(content_type)}"


def format_date(iso_date: str) -> str:
    """'2024-01-15T10:00:00Z' -> 'Jan 15, 2024'."""
    try:
        parsed = datetime.fromisoformat(iso_date)
    except ValueError:
        return iso_date
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit if count == 1 else unit + 's'} ago"


def format_relative_time(iso_date: str, now: datetime | None = None) -> str:
    """
    Relative time for an ISO-8601 timestamp.

    Under a minute -> "Just now"; then minutes, hours, days up to 30 days;
    older dates fall back to ``format_date``.
    """
    try:
        parsed = datetime.fromisoformat(iso_date)
    except ValueError:
        return iso_date
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    now = now or datetime.now(timezone.utc)
    diff_seconds = (now - parsed).total_seconds()
    minutes = int(diff_seconds // 60)
    hours = int(diff_seconds // 3600)
    days = int(diff_seconds // 86400)

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return _plural(minutes, "minute")
    if hours < 24:
        return _plural(hours, "hour")
    if days < 30:
        return _plural(days, "day")
    return format_date(iso_date)


def group_content_types_by_space(
    content_types: Sequence[ContentTypeDescriptor],
) -> dict[str, list[ContentTypeDescriptor]]:
    """Group content types by space name, keeping first-seen order."""
    groups: dict[str, list[ContentTypeDescriptor]] = {}
    for content_type in content_types:
        groups.setdefault(content_type.space_name, []).append(content_type)
    return groups


@dataclass(frozen=True)
class EntryAction:
    """One action offered for an entry: open a URL or copy a value."""

    title: str
    kind: str  # "open" | "copy"
    value: str
    shortcut: str | None = None


def entry_actions(entry: NormalizedEntry) -> list[EntryAction]:
    return [
        EntryAction("Open in Contentful", "open", entry.url, "cmd+o"),
        EntryAction("Copy Entry ID", "copy", entry.id, "cmd+c"),
        EntryAction("Copy Entry URL", "copy", entry.url, "cmd+shift+c"),
        EntryAction("Copy Space ID", "copy", entry.space_id, "cmd+shift+s"),
        EntryAction("Copy Content Type", "copy", entry.content_type_id, "cmd+shift+t"),
    ]
