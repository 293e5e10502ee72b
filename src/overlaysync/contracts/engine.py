"""Interface of the external map engine as seen by the runtime.

The engine itself (geometry, tiles, projection) is not part of this package.
These protocols only pin down the surface the runtime calls into, so that any
engine binding (a webview bridge, a headless renderer, the recording engine)
can be plugged in.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

ListenerHandle = Any
"""Opaque token returned by an event binding."""


class EventBus(Protocol):
    """Engine-level event registry (``engine.event``)."""

    def add_listener(self, target: Any, event_name: str, handler: Callable[..., None]) -> ListenerHandle: ...

    def remove_listener(self, handle: ListenerHandle) -> None: ...


class Emitter(Protocol):
    """Host objects that carry their own ``on``/``off`` registry."""

    def on(self, event_name: str, handler: Callable[..., None]) -> None: ...

    def off(self, event_name: str, handler: Callable[..., None]) -> None: ...


class Engine(Protocol):
    """Namespace installed by the engine resource."""

    event: EventBus
    Pixel: Callable[..., Any]
    Size: Callable[..., Any]
    LngLat: Callable[..., Any]
    Bounds: Callable[..., Any]
    Icon: Callable[..., Any]
    Map: Callable[..., Any]
    Marker: Callable[..., Any]
    InfoWindow: Callable[..., Any]
    Polygon: Callable[..., Any]
    Polyline: Callable[..., Any]
    Circle: Callable[..., Any]
    BezierCurve: Callable[..., Any]
    MassMarks: Callable[..., Any]
    TileLayerTraffic: Callable[..., Any]


class UiExtension(Protocol):
    """Namespace installed by the UI extension resource."""

    def init(self) -> None: ...

    async def load_module(self, name: str) -> Any: ...


class VisualExtension(Protocol):
    """Namespace installed by the data-visualization extension resource."""

    Container: Callable[..., Any]
    VisualLayer: Callable[..., Any]


@dataclass
class EngineHost:
    """Where loaded resources install their namespaces.

    Plays the part a browser's global scope plays for script resources: a
    loader fetches a resource and installs ``engine``, ``ui`` or ``visual``.
    """

    engine: Engine | None = None
    ui: UiExtension | None = None
    visual: VisualExtension | None = None
