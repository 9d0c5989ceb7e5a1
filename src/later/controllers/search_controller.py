"""Debounced search controller exposing a single observable search state."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, TypeAlias

from result import Ok

from later.controllers._tasks import schedule
from later.errors import AppError, log_error

if TYPE_CHECKING:
    from later.models.search import SearchQuery, SearchResult
    from later.services.protocols import SearchServiceProtocol

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.3

StateListener: TypeAlias = Callable[["SearchState"], None]


class SearchStatus(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class SearchState:
    """Snapshot of the controller: latest results, error or loading."""

    status: SearchStatus = SearchStatus.IDLE
    results: tuple[SearchResult, ...] = ()
    error: AppError | None = None
    query: SearchQuery | None = None

    @property
    def is_loading(self) -> bool:
        return self.status is SearchStatus.LOADING

    @property
    def has_error(self) -> bool:
        return self.error is not None


class SearchController:
    """Coordinates bursty input with the search service.

    Each ``search()`` call enters LOADING right away and (re)starts the
    debounce timer; only the query pending when the timer fires reaches the
    service. Responses are applied only if no newer ``search()`` or
    ``clear()`` happened since dispatch and the controller is not disposed.
    """

    def __init__(
        self,
        service: SearchServiceProtocol,
        debounce: float = DEFAULT_DEBOUNCE_SECONDS,
    ) -> None:
        self._service = service
        self._debounce = debounce
        self._state = SearchState()
        self._listeners: list[StateListener] = []
        self._timer: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task[Any]] = set()
        self._generation = 0
        self._active = True

    @property
    def state(self) -> SearchState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def has_pending_search(self) -> bool:
        return self._timer is not None

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register ``listener`` for state changes; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def search(self, query: SearchQuery) -> None:
        """Schedule ``query``, replacing any query still waiting on the debounce timer."""
        if not self._active:
            return
        self._cancel_timer()
        self._generation += 1
        generation = self._generation
        self._set_state(SearchState(status=SearchStatus.LOADING, query=query))
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._debounce, self._dispatch, query, generation)

    def clear(self) -> None:
        """Drop pending and in-flight searches and return to IDLE."""
        if not self._active:
            return
        self._cancel_timer()
        self._generation += 1
        self._set_state(SearchState())

    def dispose(self) -> None:
        """Tear down: cancel the timer and ignore any response still in flight."""
        if not self._active:
            return
        self._active = False
        self._cancel_timer()
        self._listeners.clear()

    async def wait_until_settled(self) -> None:
        """Wait for the debounce timer and any dispatched searches to finish."""
        loop = asyncio.get_running_loop()
        while self._timer is not None or self._tasks:
            if self._tasks:
                await asyncio.gather(*self._tasks, return_exceptions=True)
            elif self._timer is not None:
                await asyncio.sleep(max(0.0, self._timer.when() - loop.time()))
                await asyncio.sleep(0)

    def _dispatch(self, query: SearchQuery, generation: int) -> None:
        self._timer = None
        if not self._active or generation != self._generation:
            return
        schedule(self._run(query, generation), self._tasks)

    async def _run(self, query: SearchQuery, generation: int) -> None:
        try:
            result = await self._service.search(query)
        except Exception as exc:
            error = AppError.unknown(exc, "SearchController.search")
        else:
            if isinstance(result, Ok):
                self._apply(
                    generation,
                    SearchState(
                        status=SearchStatus.READY, results=tuple(result.ok_value), query=query
                    ),
                )
                return
            err = result.err_value
            error = err if isinstance(err, AppError) else AppError.unknown(err, "search")

        log_error(error, context="SearchController.search")
        self._apply(generation, SearchState(status=SearchStatus.FAILED, error=error, query=query))

    def _apply(self, generation: int, state: SearchState) -> None:
        if not self._active:
            logger.debug("Dropping search response after dispose")
            return
        if generation != self._generation:
            logger.debug("Dropping stale search response (generation %d)", generation)
            return
        self._set_state(state)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _set_state(self, state: SearchState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Search state listener failed")
