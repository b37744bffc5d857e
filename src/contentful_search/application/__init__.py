"""
Application Layer - Use Cases and Orchestration

Contains:
- config: Spaces configuration source and validation
- search: Normalization, aggregation, query orchestration
"""

from .config import load_spaces_config, parse_space_configs
from .search import (
    AggregationService,
    EntryNormalizer,
    QueryOrchestrator,
    QueryView,
)

__all__ = [
    "load_spaces_config",
    "parse_space_configs",
    "AggregationService",
    "EntryNormalizer",
    "QueryOrchestrator",
    "QueryView",
]
