"""
Async Utilities for fan-out/fan-in over independent API calls.

Python 3.12+ features used:
- asyncio.TaskGroup for structured concurrency (3.11+)
- Type parameter syntax for generic functions

Provides:
- Settle-all parallel execution (never fail-fast)
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Settled(Generic[T]):
    """Outcome of one task: exactly one of ``value`` / ``error`` is meaningful."""
    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


# =============================================================================
# Parallel Execution with TaskGroup (Python 3.11+)
# =============================================================================

async def gather_settled(*coros: Awaitable[T]) -> list[Settled[T]]:
    """
    Execute coroutines concurrently and wait for every one of them to settle.

    Each coroutine is wrapped so that its exception is captured instead of
    cancelling its siblings. The returned list is in *input* order, whatever
    the completion order was.

    Example:
        outcomes = await gather_settled(
            client_a.list_entries(limit=10),
            client_b.list_entries(limit=10),
        )
        for outcome in outcomes:
            if not outcome.ok:
                logger.warning(f"call failed: {outcome.error}")
    """
    outcomes: list[Settled[T]] = [Settled() for _ in coros]

    async def safe_run(coro: Awaitable[T], index: int) -> None:
        try:
            outcomes[index] = Settled(value=await coro)
        except Exception as e:
            outcomes[index] = Settled(error=e)

    async with asyncio.TaskGroup() as tg:
        for i, coro in enumerate(coros):
            tg.create_task(safe_run(coro, i))

    return outcomes
