"""Bridge engine events back into the node's current callbacks."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any

from overlaysync.contracts.engine import EventBus, ListenerHandle

_LOG = logging.getLogger(__name__)

CallbackResolver = Callable[[str], Callable[..., Any] | None]


class EventBinder(ABC):
    @abstractmethod
    def add(self, target: Any, event_name: str, handler: Callable[..., None]) -> ListenerHandle: ...  # pragma: no cover

    @abstractmethod
    def remove(self, handle: ListenerHandle) -> None: ...  # pragma: no cover


class BusBinder(EventBinder):
    """Binds through the engine-level ``event`` registry."""

    def __init__(self, bus: EventBus) -> None:
        self._bus = bus

    def add(self, target: Any, event_name: str, handler: Callable[..., None]) -> ListenerHandle:
        return self._bus.add_listener(target, event_name, handler)

    def remove(self, handle: ListenerHandle) -> None:
        self._bus.remove_listener(handle)


class EmitterBinder(EventBinder):
    """Binds through the host object's own ``on``/``off`` methods."""

    def add(self, target: Any, event_name: str, handler: Callable[..., None]) -> ListenerHandle:
        target.on(event_name, handler)
        return (target, event_name, handler)

    def remove(self, handle: ListenerHandle) -> None:
        target, event_name, handler = handle
        target.off(event_name, handler)


def _trampoline(callback_field: str, host: Any, resolve: CallbackResolver) -> Callable[..., None]:
    def handler(*args: Any) -> None:
        # Read the callback at fire time so config updates apply without rebinding.
        callback = resolve(callback_field)
        if callable(callback):
            callback(host, *args)

    return handler


class EventBridge:
    """Registers one trampoline per supported event and removes them again."""

    def __init__(self, binder: EventBinder) -> None:
        self._binder = binder

    def bind(self, host: Any, events: Mapping[str, str], resolve: CallbackResolver) -> list[ListenerHandle]:
        """Bind every ``callback_field -> event_name`` pair in *events* on *host*."""
        handles: list[ListenerHandle] = []
        for callback_field, event_name in events.items():
            handles.append(self._binder.add(host, event_name, _trampoline(callback_field, host, resolve)))
        _LOG.debug("Bound %d listeners on %r", len(handles), host)
        return handles

    def unbind(self, handles: list[ListenerHandle]) -> None:
        """Remove exactly *handles*, emptying the list so a second call is a no-op."""
        count = len(handles)
        while handles:
            self._binder.remove(handles.pop())
        if count:
            _LOG.debug("Removed %d listeners", count)
