"""
QueryOrchestrator - debounced query state machine.

Reconciles keystrokes, a debounce timer, the "latest" feed, the "search"
feed and a content type filter into one view model.

States:
    INITIALIZING ──mount ok──▶ READY (latest ⇄ search results)
         │
         └──config error──▶ ERROR (terminal, every event is ignored)

Query rules (trimmed length of the query text):
    0   → no debounce, re-fetch latest with the current filter (server side)
    1   → nothing is fetched, the last resolved entries stay on screen
    ≥2  → loading raised, debounce timer re-armed; search when it fires

Filter rules:
    empty query     → re-fetch latest with the filter (server side)
    non-empty query → filter the held search results locally

Known limitation:
    Debouncing bounds the number of *scheduled* searches, not the number in
    flight. A slow search started before a newer one can still resolve last
    and overwrite newer results. In-flight requests are never cancelled.

All methods must be called from the event loop thread.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from contentful_search.application.config import load_spaces_config, parse_space_configs
from contentful_search.application.search.aggregation import (
    ALL_CONTENT_TYPES,
    DEFAULT_LATEST_LIMIT,
    MIN_QUERY_LENGTH,
)
from contentful_search.shared.exceptions import ConfigurationError, FetchError, SearchError

if TYPE_CHECKING:
    from contentful_search.application.search.aggregation import AggregationService
    from contentful_search.domain.entities import (
        ContentTypeDescriptor,
        NormalizedEntry,
        SpaceDescriptor,
    )

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 300


class Phase(Enum):
    INITIALIZING = "initializing"
    READY = "ready"
    ERROR = "error"


@dataclass
class QueryState:
    """Mutable state, owned and mutated by QueryOrchestrator only."""

    raw_query_text: str = ""
    active_content_type_filter: str = ALL_CONTENT_TYPES
    entries: list[NormalizedEntry] = field(default_factory=list)
    is_loading: bool = True
    is_loading_content_types: bool = True
    last_error: Exception | None = None
    pending_debounce_handle: asyncio.TimerHandle | None = None
    space_configs: list[SpaceDescriptor] | None = None
    content_types: list[ContentTypeDescriptor] = field(default_factory=list)
    phase: Phase = Phase.INITIALIZING


@dataclass(frozen=True)
class QueryView:
    """Observable surface handed to the presentation layer."""

    entries: tuple[NormalizedEntry, ...]
    is_loading: bool
    error: Exception | None
    content_types: tuple[ContentTypeDescriptor, ...]
    is_loading_content_types: bool
    space_configs: tuple[SpaceDescriptor, ...] | None
    query: str
    content_type_filter: str

    @property
    def is_config_error(self) -> bool:
        return self.error is not None and self.space_configs is None


def filter_entries(
    entries: Sequence[NormalizedEntry],
    query: str,
    content_type_filter: str,
) -> list[NormalizedEntry]:
    """
    Client-side content type filter.

    With an empty query the entries came from the latest feed, which was
    already filtered by the API, so they pass through untouched.
    """
    if not query.strip() or content_type_filter == ALL_CONTENT_TYPES:
        return list(entries)
    return [entry for entry in entries if entry.content_type_id == content_type_filter]


class QueryOrchestrator:
    """
    Stateful controller between user input and the AggregationService.

    Example:
        orchestrator = QueryOrchestrator(service, on_change=render)
        await orchestrator.mount()
        orchestrator.on_query_change("pri")
        orchestrator.on_query_change("pricing")   # re-arms the timer
        await orchestrator.settle()               # one search for "pricing"
        orchestrator.close()
    """

    def __init__(
        self,
        service: AggregationService,
        config_source: Callable[[], str] = load_spaces_config,
        *,
        parser: Callable[[str], list[SpaceDescriptor]] = parse_space_configs,
        debounce_ms: float = DEFAULT_DEBOUNCE_MS,
        latest_limit: int = DEFAULT_LATEST_LIMIT,
        on_change: Callable[[QueryView], None] | None = None,
    ) -> None:
        self._service = service
        self._config_source = config_source
        self._parser = parser
        self._debounce_seconds = debounce_ms / 1000.0
        self._latest_limit = latest_limit
        self._on_change = on_change
        self._state = QueryState()
        self._tasks: set[asyncio.Task[None]] = set()
        self._mounted = False
        self._closed = False

    # =========================================================================
    # Observable surface
    # =========================================================================

    @property
    def state(self) -> QueryState:
        return self._state

    @property
    def view(self) -> QueryView:
        state = self._state
        return QueryView(
            entries=tuple(
                filter_entries(state.entries, state.raw_query_text, state.active_content_type_filter)
            ),
            is_loading=state.is_loading,
            error=state.last_error,
            content_types=tuple(state.content_types),
            is_loading_content_types=state.is_loading_content_types,
            space_configs=tuple(state.space_configs) if state.space_configs is not None else None,
            query=state.raw_query_text,
            content_type_filter=state.active_content_type_filter,
        )

    @property
    def is_closed(self) -> bool:
        return self._closed

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def mount(self) -> None:
        """
        Parse the configuration once, then load latest entries and content
        types concurrently. Each load updates its own part of the state as
        soon as it resolves.
        """
        if self._mounted:
            return
        self._mounted = True
        state = self._state

        try:
            configs = self._parser(self._config_source())
        except ConfigurationError as e:
            logger.error(f"Spaces configuration rejected: {e}")
            state.phase = Phase.ERROR
            state.last_error = e
            state.is_loading = False
            state.is_loading_content_types = False
            self._notify()
            return

        logger.info(f"Loaded {len(configs)} space(s): {', '.join(c.name for c in configs)}")
        state.space_configs = configs
        state.phase = Phase.READY
        state.is_loading = True
        state.is_loading_content_types = True
        self._notify()

        await asyncio.gather(
            self._spawn(self._run_latest(configs, None)),
            self._spawn(self._run_content_types(configs)),
        )

    def close(self) -> None:
        """
        Unmount: cancel the pending debounce timer. Requests already in flight
        keep running, but their results are dropped.
        """
        self._closed = True
        self._cancel_debounce()

    async def settle(self) -> None:
        """Wait until no debounce timer is pending and nothing is in flight."""
        loop = asyncio.get_running_loop()
        while True:
            handle = self._state.pending_debounce_handle
            if handle is not None:
                await asyncio.sleep(max(0.0, handle.when() - loop.time()))
                continue
            if self._tasks:
                await asyncio.wait(set(self._tasks))
                continue
            return

    # =========================================================================
    # Input events
    # =========================================================================

    def on_query_change(self, text: str) -> None:
        self._state.raw_query_text = text
        self._reconcile()

    def on_filter_change(self, content_type_id: str | None) -> None:
        state = self._state
        state.active_content_type_filter = content_type_id or ALL_CONTENT_TYPES
        if state.raw_query_text.strip():
            # Search results are filtered locally, see ``view``
            self._notify()
            return
        self._reconcile()

    # =========================================================================
    # Internals
    # =========================================================================

    def _reconcile(self) -> None:
        state = self._state
        if self._closed or state.phase is not Phase.READY or state.space_configs is None:
            return

        had_pending_search = self._cancel_debounce()
        query = state.raw_query_text.strip()

        if not query:
            state.is_loading = True
            state.last_error = None
            self._notify()
            self._spawn(self._run_latest(state.space_configs, state.active_content_type_filter))
            return

        if len(query) < MIN_QUERY_LENGTH:
            # Stale results stay visible; only drop the spinner of a search
            # that will now never start.
            if had_pending_search:
                state.is_loading = False
                self._notify()
            return

        state.is_loading = True
        state.last_error = None
        loop = asyncio.get_running_loop()
        state.pending_debounce_handle = loop.call_later(
            self._debounce_seconds,
            self._fire_search,
            state.raw_query_text,
        )
        self._notify()

    def _cancel_debounce(self) -> bool:
        handle = self._state.pending_debounce_handle
        if handle is None:
            return False
        handle.cancel()
        self._state.pending_debounce_handle = None
        return True

    def _fire_search(self, query: str) -> None:
        self._state.pending_debounce_handle = None
        if self._closed or self._state.space_configs is None:
            return
        logger.debug(f"Debounce elapsed, searching for {query!r}")
        self._spawn(self._run_search(self._state.space_configs, query))

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task[None]:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run_latest(
        self,
        configs: list[SpaceDescriptor],
        content_type_filter: str | None,
    ) -> None:
        try:
            entries = await self._service.fetch_latest(configs, self._latest_limit, content_type_filter)
        except Exception as e:
            if self._closed:
                return
            logger.exception("Failed to fetch latest entries")
            self._fail(FetchError(f"Failed to fetch latest entries: {e}"), e)
            return

        if self._closed:
            return
        self._state.entries = entries
        self._state.is_loading = False
        self._notify()

    async def _run_search(self, configs: list[SpaceDescriptor], query: str) -> None:
        try:
            entries = await self._service.search(configs, query)
        except Exception as e:
            if self._closed:
                return
            logger.exception(f"Search failed for {query!r}")
            self._fail(SearchError(f"Search failed: {e}"), e)
            return

        if self._closed:
            return
        self._state.entries = entries
        self._state.is_loading = False
        self._notify()

    async def _run_content_types(self, configs: list[SpaceDescriptor]) -> None:
        try:
            content_types = await self._service.list_content_types(configs)
        except Exception as e:
            if self._closed:
                return
            logger.exception("Failed to fetch content types")
            error = FetchError(f"Failed to fetch content types: {e}")
            error.__cause__ = e
            self._state.last_error = error
            self._state.content_types = []
            self._state.is_loading_content_types = False
            self._notify()
            return

        if self._closed:
            return
        self._state.content_types = content_types
        self._state.is_loading_content_types = False
        self._notify()

    def _fail(self, error: Exception, cause: Exception) -> None:
        """Aggregate-level failure: clear results, surface the error, stay usable."""
        error.__cause__ = cause
        self._state.last_error = error
        self._state.entries = []
        self._state.is_loading = False
        self._notify()

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.view)
