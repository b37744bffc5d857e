"""
Space Entities - Multi-Space Content Domain Model

Key Entities:
    - SpaceDescriptor: One configured space (tenant) and its credentials
    - NormalizedEntry: One content entry in the common display model
    - SpaceOperationResult: What a single space contributed to a batch call
    - ContentTypeDescriptor: One content type, attributed to its first space

Architecture:
    All entities are frozen dataclasses. A NormalizedEntry is rebuilt on every
    fetch and never mutated in place. Its global identity is the pair
    (space_id, id); the same entry id may legitimately exist in two spaces.

Example:
    >>> space = SpaceDescriptor(name="Blog", space_id="abc123", access_token="secret")
    >>> space.environment
    'master'
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

DEFAULT_ENVIRONMENT = "master"


@dataclass(frozen=True)
class SpaceDescriptor:
    """
    A configured space.

    Attributes:
        name: Display label (not unique across spaces)
        space_id: Tenant identity
        access_token: Delivery API token. Excluded from repr so it never
            reaches a log line.
        environment: Environment alias, "master" unless configured
    """

    name: str
    space_id: str
    access_token: str = field(repr=False)
    environment: str = DEFAULT_ENVIRONMENT


@dataclass(frozen=True)
class NormalizedEntry:
    """
    A content entry in the display model.

    Attributes:
        id: Entry id inside its space
        title: Resolved display title (falls back to the id)
        content_type: Content type label ("Unknown" when absent)
        content_type_id: Content type id used for filtering
        space_name: Owning space label
        space_id: Owning space id
        environment: Owning environment
        updated_at: ISO-8601 timestamp of the last update
        url: Web app URL, directly openable and copyable
        raw_payload: The record exactly as the API returned it
    """

    id: str
    title: str
    content_type: str
    content_type_id: str
    space_name: str
    space_id: str
    environment: str
    updated_at: str
    url: str
    raw_payload: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def key(self) -> str:
        """Stable list key, unique across spaces."""
        return f"{self.space_id}-{self.id}"


@dataclass(frozen=True)
class SpaceOperationResult:
    """
    Outcome of one per-space call inside an aggregate operation.

    When ``error`` is set the space contributes nothing downstream; the
    aggregate call itself still succeeds.
    """

    source_space: SpaceDescriptor
    items: tuple[dict[str, Any], ...] = ()
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class ContentTypeDescriptor:
    """Content type metadata for filtering and display."""

    id: str
    name: str
    space_id: str
    space_name: str
