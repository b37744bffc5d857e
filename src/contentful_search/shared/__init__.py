"""
Shared module for Contentful Search.

Provides:
- Unified exception hierarchy
- Async utilities for settle-all fan-out
"""

from .exceptions import (
    # Base
    ContentSearchError,
    ErrorContext,
    ErrorSeverity,
    ErrorCategory,
    # API errors
    APIError,
    RateLimitError,
    NetworkError,
    ServiceUnavailableError,
    # Data errors
    DataError,
    ParseError,
    # Configuration errors
    ConfigurationError,
    EmptyConfigError,
    MalformedConfigError,
    InvalidSpaceEntryError,
    # Per-space / aggregate errors
    SpaceOperationError,
    AggregationError,
    FetchError,
    SearchError,
)

from .async_utils import (
    Settled,
    gather_settled,
)

__all__ = [
    # Exceptions
    "ContentSearchError",
    "ErrorContext",
    "ErrorSeverity",
    "ErrorCategory",
    "APIError",
    "RateLimitError",
    "NetworkError",
    "ServiceUnavailableError",
    "DataError",
    "ParseError",
    "ConfigurationError",
    "EmptyConfigError",
    "MalformedConfigError",
    "InvalidSpaceEntryError",
    "SpaceOperationError",
    "AggregationError",
    "FetchError",
    "SearchError",
    # Async utilities
    "Settled",
    "gather_settled",
]
