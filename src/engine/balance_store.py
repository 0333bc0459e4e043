"""Shared balance cache with change notification."""

from __future__ import annotations

from typing import Callable

from engine.events import ListenerRegistry, Unsubscribe

BalanceHandler = Callable[[str | None], None]


class SharedBalanceStore:
    """Holds the session's formatted balance and notifies observers on every write.

    Last write wins; there is no versioning.
    """

    def __init__(self, initial: str | None = None) -> None:
        self._balance = initial
        self._listeners: ListenerRegistry[BalanceHandler] = ListenerRegistry()

    def set(self, value: str | None) -> None:
        self._balance = value
        for handler in self._listeners.snapshot():
            handler(value)

    def get(self) -> str | None:
        return self._balance

    def subscribe(self, handler: BalanceHandler) -> Unsubscribe:
        return self._listeners.add(handler)
