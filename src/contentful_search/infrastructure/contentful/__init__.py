"""
Contentful Delivery API client.
"""

from .client import (
    DEFAULT_API_HOST,
    ORDER_BY_UPDATED_DESC,
    SpaceClient,
    SpaceClientFactory,
)

__all__ = [
    "DEFAULT_API_HOST",
    "ORDER_BY_UPDATED_DESC",
    "SpaceClient",
    "SpaceClientFactory",
]
