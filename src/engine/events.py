"""Listener registry and the manual-refresh notification bus."""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

HandlerT = TypeVar("HandlerT", bound=Callable[..., object])

Unsubscribe = Callable[[], bool]
RefreshHandler = Callable[[], None]


class ListenerRegistry(Generic[HandlerT]):
    """
    Ordered, duplicate-free set of handlers.

    ``snapshot()`` is taken at the start of each notification, so handlers
    added or removed while a notification runs only affect later ones.
    """

    def __init__(self) -> None:
        # dict keeps insertion order and set-like membership
        self._handlers: dict[HandlerT, None] = {}

    def add(self, handler: HandlerT) -> Unsubscribe:
        self._handlers.setdefault(handler, None)

        def unsubscribe() -> bool:
            return self._handlers.pop(handler, _MISSING) is not _MISSING

        return unsubscribe

    def snapshot(self) -> list[HandlerT]:
        return list(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, handler: object) -> bool:
        return handler in self._handlers


_MISSING = object()


class RefreshBus:
    """Payload-free fan-out signal used to request an immediate refresh.

    Publishing with no subscribers does nothing; events are not queued.
    """

    def __init__(self) -> None:
        self._listeners: ListenerRegistry[RefreshHandler] = ListenerRegistry()

    def subscribe(self, handler: RefreshHandler) -> Unsubscribe:
        return self._listeners.add(handler)

    def publish(self) -> None:
        for handler in self._listeners.snapshot():
            handler()

    @property
    def subscriber_count(self) -> int:
        return len(self._listeners)
