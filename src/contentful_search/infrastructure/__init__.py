"""
Infrastructure Layer - External Systems Integration

Contains:
- contentful: Delivery API client, one handle per space
"""

from .contentful import SpaceClient, SpaceClientFactory

__all__ = [
    "SpaceClient",
    "SpaceClientFactory",
]
