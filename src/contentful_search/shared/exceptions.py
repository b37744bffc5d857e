"""
Unified Exception Hierarchy for Contentful Search.

Exception Hierarchy:
    ContentSearchError (base)
    ├── APIError
    │   ├── RateLimitError
    │   ├── NetworkError
    │   └── ServiceUnavailableError
    ├── DataError
    │   └── ParseError
    ├── ConfigurationError
    │   ├── EmptyConfigError
    │   ├── MalformedConfigError
    │   └── InvalidSpaceEntryError
    ├── SpaceOperationError
    └── AggregationError
        ├── FetchError
        └── SearchError

Propagation policy:
    ConfigurationError is fatal for a session. Everything else is recoverable:
    a SpaceOperationError degrades one space to zero results, and an
    AggregationError clears the current results but leaves the query usable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    WARNING = auto()      # Recoverable, can continue
    ERROR = auto()        # Failed, next user action may succeed
    CRITICAL = auto()     # Cannot continue


class ErrorCategory(Enum):
    """Categories for error classification."""
    API = "api"
    DATA = "data"
    CONFIGURATION = "config"
    NETWORK = "network"
    AGGREGATION = "aggregation"


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """
    Rich context for error messages.

    Never put access tokens in here: the context ends up in logs and in
    ``to_dict()`` output.
    """
    operation: str | None = None
    space_name: str | None = None
    space_id: str | None = None
    input_value: Any = None
    suggestion: str | None = None
    retry_after: float | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class ContentSearchError(Exception):
    """
    Base exception for all Contentful Search errors.

    Provides:
    - Structured error context
    - Severity classification
    - Serializable form for the presentation layer
    """

    __slots__ = ('context', 'severity', 'category')

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        category: ErrorCategory = ErrorCategory.API,
    ) -> None:
        super().__init__(message)
        self.context = context or ErrorContext()
        self.severity = severity
        self.category = category

    @property
    def is_fatal(self) -> bool:
        return self.severity is ErrorSeverity.CRITICAL

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "error": str(self),
            "category": self.category.value,
            "severity": self.severity.name.lower(),
        }
        if self.context.operation:
            result["operation"] = self.context.operation
        if self.context.space_name:
            result["space"] = self.context.space_name
        if self.context.suggestion:
            result["suggestion"] = self.context.suggestion
        if self.context.retry_after:
            result["retry_after_seconds"] = self.context.retry_after
        return result


# =============================================================================
# API Errors
# =============================================================================

class APIError(ContentSearchError):
    """Base class for errors returned by the remote content API."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.ERROR,
            category=ErrorCategory.API,
        )
        self.status_code = status_code


class RateLimitError(APIError):
    """Raised when the API answers 429. Not retried automatically."""

    def __init__(
        self,
        message: str = "API rate limit exceeded",
        *,
        retry_after: float | None = None,
        context: ErrorContext | None = None,
    ) -> None:
        ctx = context or ErrorContext()
        ctx = ErrorContext(
            operation=ctx.operation,
            space_name=ctx.space_name,
            space_id=ctx.space_id,
            input_value=ctx.input_value,
            suggestion=ctx.suggestion or "Wait a moment before typing the next query",
            retry_after=retry_after,
            metadata=ctx.metadata,
        )
        super().__init__(message, status_code=429, context=ctx)


class NetworkError(APIError):
    """Raised for network connectivity issues."""

    def __init__(
        self,
        message: str = "Network connection failed",
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(message, context=context)
        self.category = ErrorCategory.NETWORK


class ServiceUnavailableError(APIError):
    """Raised when the content API answers with a 5xx status."""

    def __init__(
        self,
        message: str = "Service temporarily unavailable",
        *,
        status_code: int | None = None,
        service: str = "Contentful",
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(f"{service}: {message}", status_code=status_code, context=context)


# =============================================================================
# Data Errors
# =============================================================================

class DataError(ContentSearchError):
    """Base class for data-related errors."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.ERROR,
            category=ErrorCategory.DATA,
        )


class ParseError(DataError):
    """Raised when a response body cannot be decoded."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        context: ErrorContext | None = None,
    ) -> None:
        full_msg = f"Parse error: {message}"
        if source:
            full_msg = f"Parse error ({source}): {message}"
        super().__init__(full_msg, context=context)


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(ContentSearchError):
    """Raised for configuration-related errors. Fatal for the session."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.CONFIGURATION,
        )


class EmptyConfigError(ConfigurationError):
    """Raised when the spaces configuration is blank or an empty array."""

    def __init__(
        self,
        message: str = "Spaces configuration is empty. Please configure at least one space.",
        *,
        context: ErrorContext | None = None,
    ) -> None:
        ctx = context or ErrorContext(
            operation="parse_config",
            suggestion='Set CONTENTFUL_SPACES to a JSON array, e.g. '
                       '[{"name": "Blog", "spaceId": "abc123", "accessToken": "..."}]',
        )
        super().__init__(message, context=ctx)


class MalformedConfigError(ConfigurationError):
    """Raised when the spaces configuration is not a JSON array."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(message, context=context or ErrorContext(operation="parse_config"))


class InvalidSpaceEntryError(ConfigurationError):
    """Raised when one element of the spaces array is unusable."""

    def __init__(
        self,
        index: int,
        field_name: str | None = None,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        if field_name is None:
            msg = f"Space configuration at index {index} is not an object."
        else:
            msg = f"Space configuration at index {index} is missing required field: {field_name}"
        ctx = context or ErrorContext(
            operation="parse_config",
            input_value=index,
            metadata={"field": field_name},
        )
        super().__init__(msg, context=ctx)
        self.index = index
        self.field_name = field_name


# =============================================================================
# Per-space and aggregate errors
# =============================================================================

class SpaceOperationError(ContentSearchError):
    """One space's call failed. Isolated: it never fails the whole batch."""

    def __init__(
        self,
        operation: str,
        space_name: str,
        space_id: str,
        cause: BaseException,
    ) -> None:
        super().__init__(
            f"{operation} failed for space {space_name}: {cause}",
            context=ErrorContext(
                operation=operation,
                space_name=space_name,
                space_id=space_id,
            ),
            severity=ErrorSeverity.WARNING,
            category=ErrorCategory.API,
        )
        self.cause = cause


class AggregationError(ContentSearchError):
    """An aggregate operation itself failed (not a single space)."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.ERROR,
            category=ErrorCategory.AGGREGATION,
        )


class FetchError(AggregationError):
    """Fetching the latest entries failed as a whole."""

    def __init__(self, message: str = "Failed to fetch latest entries", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class SearchError(AggregationError):
    """A search across spaces failed as a whole."""

    def __init__(self, message: str = "Search failed", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
