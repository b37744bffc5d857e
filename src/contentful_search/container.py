"""
Application DI Container (dependency-injector).

Centralizes service creation and lifecycle management.

Usage::

    from contentful_search.application.config import load_settings
    from contentful_search.container import ApplicationContainer

    container = ApplicationContainer()
    container.config.from_dict(load_settings())

    service = container.aggregation_service()
    orchestrator = container.orchestrator(on_change=print_view)

    # In tests, override any provider:
    container.client_factory.override(providers.Object(fake_factory))
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from dependency_injector import containers, providers

logger = logging.getLogger(__name__)


def _create_client_factory(api_host: str | None, timeout: float | None) -> object:
    """Lazy factory for SpaceClientFactory (avoids top-level httpx import)."""
    from contentful_search.infrastructure.contentful import DEFAULT_API_HOST, SpaceClientFactory

    return SpaceClientFactory(api_host=api_host or DEFAULT_API_HOST, timeout=timeout or 30.0)


def _create_normalizer(web_app_host: str | None) -> object:
    """Lazy factory for EntryNormalizer."""
    from contentful_search.application.search.normalizer import DEFAULT_WEB_APP_HOST, EntryNormalizer

    return EntryNormalizer(web_app_host=web_app_host or DEFAULT_WEB_APP_HOST)


def _create_aggregation_service(client_factory: object, normalizer: object) -> object:
    """Lazy factory for AggregationService."""
    from contentful_search.application.search.aggregation import AggregationService

    return AggregationService(client_factory, normalizer)  # type: ignore[arg-type]


def _create_orchestrator(
    service: object,
    debounce_ms: float | None,
    latest_limit: int | None,
    on_change: Callable[..., None] | None = None,
) -> object:
    """Factory for QueryOrchestrator; a new one per session."""
    from contentful_search.application.config import load_spaces_config
    from contentful_search.application.search.orchestrator import (
        DEFAULT_DEBOUNCE_MS,
        DEFAULT_LATEST_LIMIT,
        QueryOrchestrator,
    )

    return QueryOrchestrator(
        service,  # type: ignore[arg-type]
        load_spaces_config,
        debounce_ms=debounce_ms if debounce_ms is not None else DEFAULT_DEBOUNCE_MS,
        latest_limit=latest_limit or DEFAULT_LATEST_LIMIT,
        on_change=on_change,
    )


class ApplicationContainer(containers.DeclarativeContainer):
    """Central DI container for Contentful Search.

    Manages creation and lifecycle of all core services:
    - ``client_factory``: binds spaces to Delivery API clients
    - ``normalizer``: raw record to NormalizedEntry mapping
    - ``aggregation_service``: multi-space fan-out/fan-in
    - ``orchestrator``: debounced query state machine (new per call)
    """

    config = providers.Configuration()

    client_factory = providers.Singleton(
        _create_client_factory,
        api_host=config.api_host,
        timeout=config.timeout,
    )

    normalizer = providers.Singleton(
        _create_normalizer,
        web_app_host=config.web_app_host,
    )

    aggregation_service = providers.Singleton(
        _create_aggregation_service,
        client_factory=client_factory,
        normalizer=normalizer,
    )

    orchestrator = providers.Factory(
        _create_orchestrator,
        service=aggregation_service,
        debounce_ms=config.debounce_ms,
        latest_limit=config.latest_limit,
    )


__all__ = ["ApplicationContainer"]
