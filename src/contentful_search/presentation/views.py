"""
Terminal views over the orchestrator's QueryView.

Chooses between the empty states and the entry list the same way for every
surface:

1. Configuration error  -> blocking "Configuration Error" panel
2. Empty query, nothing -> "No Entries Found"
3. Query ≥2, nothing    -> "No Results"
4. Otherwise            -> one row per entry
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from contentful_search.application.search import (
    ALL_CONTENT_TYPES,
    MIN_QUERY_LENGTH,
    QueryView,
    content_type_color,
)
from contentful_search.domain.entities import ContentTypeDescriptor, NormalizedEntry

from .formatting import (
    entry_actions,
    format_content_type,
    format_relative_time,
    format_subtitle,
    group_content_types_by_space,
)


def render_entry_row(index: int, entry: NormalizedEntry, now: datetime | None = None) -> str:
    return (
        f"{index:>3}. {entry.title}  [{format_content_type(entry.content_type)}|"
        f"{content_type_color(entry.content_type_id)}]  "
        f"{format_subtitle(entry.space_name, entry.content_type)} · "
        f"{format_relative_time(entry.updated_at, now)}\n"
        f"     {entry.url}"
    )


def render_entries(entries: Sequence[NormalizedEntry], now: datetime | None = None) -> str:
    return "\n".join(render_entry_row(i, entry, now) for i, entry in enumerate(entries, start=1))


def render_entry_detail(entry: NormalizedEntry) -> str:
    lines = [
        f"## {entry.title}",
        f"- Space: {entry.space_name} ({entry.space_id}, {entry.environment})",
        f"- Content type: {format_content_type(entry.content_type)} ({entry.content_type_id})",
        f"- Updated: {entry.updated_at}",
        "",
        "Actions:",
    ]
    for action in entry_actions(entry):
        shortcut = f" [{action.shortcut}]" if action.shortcut else ""
        lines.append(f"- {action.title}{shortcut}: {action.value}")
    return "\n".join(lines)


def render_content_types(content_types: Sequence[ContentTypeDescriptor], selected: str = ALL_CONTENT_TYPES) -> str:
    marker = "*" if selected == ALL_CONTENT_TYPES else " "
    lines = [f"{marker} all  (All Content Types)"]
    for space_name, types in group_content_types_by_space(content_types).items():
        lines.append(f"## {space_name}")
        for content_type in types:
            marker = "*" if content_type.id == selected else " "
            lines.append(f"{marker} {content_type.id}  ({content_type.name})")
    return "\n".join(lines)


def render_view(view: QueryView, now: datetime | None = None) -> str:
    """Render the whole view model as text."""
    if view.is_config_error:
        return f"Configuration Error\n{view.error}"

    query_length = len(view.query.strip())
    if not view.is_loading and not view.entries:
        if query_length == 0:
            return "No Entries Found\nNo entries found in configured spaces"
        if query_length >= MIN_QUERY_LENGTH:
            return f'No Results\nNo results found for "{view.query}"'

    parts: list[str] = []
    if view.is_loading:
        parts.append("Loading...")
    if view.error is not None:
        parts.append(f"Error: {view.error}")
    if view.entries:
        parts.append(render_entries(view.entries, now))
    return "\n".join(parts)
