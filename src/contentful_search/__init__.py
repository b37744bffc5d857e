"""
Contentful Search - search and browse entries across several Contentful spaces.

Usage:
    from contentful_search import AggregationService, SpaceClientFactory, parse_space_configs

    spaces = parse_space_configs(os.environ["CONTENTFUL_SPACES"])
    service = AggregationService(SpaceClientFactory())

    entries = await service.search(spaces, "pricing")
    for entry in entries:
        print(f"{entry.space_name}: {entry.title} {entry.url}")

Features:
    - Concurrent per-space calls; one failing space never fails the batch
    - Results merged and sorted newest first
    - Content types deduplicated across spaces
    - Debounced query orchestration with a content type filter
"""

from .application.config import parse_space_configs
from .application.search import (
    AggregationService,
    EntryNormalizer,
    QueryOrchestrator,
    QueryView,
)
from .domain.entities import (
    ContentTypeDescriptor,
    NormalizedEntry,
    SpaceDescriptor,
    SpaceOperationResult,
)
from .infrastructure.contentful import SpaceClient, SpaceClientFactory

__version__ = "0.1.0"

__all__ = [
    # High-level API
    "parse_space_configs",
    "AggregationService",
    "EntryNormalizer",
    "QueryOrchestrator",
    "QueryView",
    # Entities
    "SpaceDescriptor",
    "NormalizedEntry",
    "SpaceOperationResult",
    "ContentTypeDescriptor",
    # Delivery API
    "SpaceClient",
    "SpaceClientFactory",
]
