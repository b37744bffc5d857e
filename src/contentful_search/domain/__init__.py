"""
Domain Layer - Core Business Logic

Contains:
- entities: Spaces, normalized entries, content types
"""

from .entities import (
    ContentTypeDescriptor,
    NormalizedEntry,
    SpaceDescriptor,
    SpaceOperationResult,
)

__all__ = [
    "SpaceDescriptor",
    "NormalizedEntry",
    "SpaceOperationResult",
    "ContentTypeDescriptor",
]
