"""Generic load-more / refresh / reset controller over a limit-offset endpoint."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from calorie_tracker.client.errors import error_message
from calorie_tracker.client.state import StateController

logger = logging.getLogger(__name__)

T = TypeVar("T")

FetchPage = Callable[[int, int], Awaitable[list[T]]]
ErrorCallback = Callable[[Exception], None]


@dataclass(frozen=True)
class PageState(Generic[T]):
    """Accumulated items plus request flags."""

    items: tuple[T, ...] = field(default_factory=tuple)
    loading: bool = False
    error: str | None = None
    has_more: bool = True
    offset: int = 0


class PaginatedController(StateController[PageState[T]]):
    """Accumulates pages returned by ``fetch(limit, offset)``.

    The offset advances by the number of items actually returned, and a
    page shorter than ``limit`` marks the end of the list.
    """

    def __init__(
        self,
        fetch: FetchPage[T],
        limit: int,
        on_error: ErrorCallback | None = None,
    ) -> None:
        super().__init__(PageState())
        self.fetch = fetch
        self.limit = limit
        self.on_error = on_error

    @property
    def items(self) -> list[T]:
        return list(self.state.items)

    @property
    def loading(self) -> bool:
        return self.state.loading

    @property
    def error(self) -> str | None:
        return self.state.error

    @property
    def has_more(self) -> bool:
        return self.state.has_more

    @property
    def offset(self) -> int:
        return self.state.offset

    async def load_more(self) -> None:
        """Append the next page; no-op while loading or after the last page."""
        if self.state.loading or not self.state.has_more:
            return
        generation = self._current_generation()
        self._commit(loading=True, error=None)
        try:
            page = await self.fetch(self.limit, self.state.offset)
        except Exception as exc:
            self._fail(generation, exc)
            return
        if not self._is_current(generation):
            return
        self._commit(
            items=self.state.items + tuple(page),
            offset=self.state.offset + len(page),
            has_more=len(page) >= self.limit,
            loading=False,
        )

    async def refresh(self) -> None:
        """Replace all items with the first page."""
        generation = self._next_generation()
        self._commit(loading=True, error=None, offset=0, has_more=True)
        try:
            page = await self.fetch(self.limit, 0)
        except Exception as exc:
            self._fail(generation, exc)
            return
        if not self._is_current(generation):
            return
        self._commit(
            items=tuple(page),
            offset=len(page),
            has_more=len(page) >= self.limit,
            loading=False,
        )

    def reset(self) -> None:
        """Return to the initial state without a request."""
        self._next_generation()
        self._commit(items=(), loading=False, error=None, has_more=True, offset=0)

    def _fail(self, generation: int, exc: Exception) -> None:
        if not self._is_current(generation):
            logger.info("Dropping stale page error: %s", exc)
            return
        logger.warning("Page fetch failed: %s", exc)
        self._commit(error=error_message(exc), loading=False)
        if self.on_error is not None:
            self.on_error(exc)
