"""
Domain Entities

Core business objects for multi-space content search.
"""

from __future__ import annotations

from .space import (
    DEFAULT_ENVIRONMENT,
    ContentTypeDescriptor,
    NormalizedEntry,
    SpaceDescriptor,
    SpaceOperationResult,
)

__all__ = [
    "DEFAULT_ENVIRONMENT",
    "SpaceDescriptor",
    "NormalizedEntry",
    "SpaceOperationResult",
    "ContentTypeDescriptor",
]
