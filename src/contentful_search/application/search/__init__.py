"""
Multi-Space Search

Key Components:
- EntryNormalizer: Maps raw records to NormalizedEntry
- AggregationService: Parallel per-space calls, merged and sorted
- QueryOrchestrator: Debounced query state machine

Architecture:
    keystrokes / filter
        │
        ▼
    ┌────────────────────┐
    │ QueryOrchestrator  │  ← debounce, state, local filter
    └─────────┬──────────┘
              │
              ▼
    ┌────────────────────┐
    │ AggregationService │  ← fan-out, settle-all, merge-sort
    └─────────┬──────────┘
              │
    ┌─────────┴─────────┐
    ▼         ▼         ▼
  space A   space B   space C  ← concurrent Delivery API calls
"""

from __future__ import annotations

from .aggregation import (
    ALL_CONTENT_TYPES,
    MIN_QUERY_LENGTH,
    AggregationService,
    sort_by_updated_desc,
)
from .normalizer import (
    TITLE_FIELD_CANDIDATES,
    EntryNormalizer,
    build_web_app_url,
    content_type_color,
    extract_entry_title,
)
from .orchestrator import (
    Phase,
    QueryOrchestrator,
    QueryState,
    QueryView,
    filter_entries,
)

__all__ = [
    # Aggregation
    "ALL_CONTENT_TYPES",
    "MIN_QUERY_LENGTH",
    "AggregationService",
    "sort_by_updated_desc",
    # Normalization
    "TITLE_FIELD_CANDIDATES",
    "EntryNormalizer",
    "build_web_app_url",
    "content_type_color",
    "extract_entry_title",
    # Orchestration
    "Phase",
    "QueryOrchestrator",
    "QueryState",
    "QueryView",
    "filter_entries",
]
