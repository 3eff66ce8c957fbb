"""Base class for view controllers holding immutable state snapshots."""

import logging
from collections.abc import Callable
from dataclasses import replace
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

S = TypeVar("S")

Listener = Callable[[Any], None]


class StateController(Generic[S]):
    """Owns a frozen state dataclass and replaces it on every change.

    Each operation that supersedes earlier requests starts a new generation;
    responses carrying an older generation are dropped instead of committed.
    """

    def __init__(self, initial_state: S) -> None:
        self._state = initial_state
        self._generation = 0
        self._closed = False
        self._listeners: list[Listener] = []

    @property
    def state(self) -> S:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback invoked with each new state; return an unsubscriber."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        """Detach from the view; in-flight responses are discarded."""
        self._closed = True
        self._generation += 1
        self._listeners.clear()

    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    def _current_generation(self) -> int:
        return self._generation

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    def _commit(self, **changes: Any) -> None:
        if self._closed:
            return
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            listener(self._state)
