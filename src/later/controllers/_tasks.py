"""Tracked asyncio task scheduling for fire-and-forget coroutines."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def schedule(
    coro: Coroutine[Any, Any, T], registry: set[asyncio.Task[Any]]
) -> asyncio.Task[T]:
    """Schedule ``coro`` on the running loop, keeping a reference in ``registry``.

    The task removes itself from ``registry`` when done; unhandled exceptions
    are logged instead of being lost with the task.
    """
    task: asyncio.Task[T] = asyncio.get_running_loop().create_task(coro)
    registry.add(task)
    task.add_done_callback(registry.discard)
    task.add_done_callback(_log_exception)
    return task


def _log_exception(task: asyncio.Task[Any]) -> None:
    """Log any exception from a scheduled task."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Unhandled exception in scheduled task", exc_info=exc)
