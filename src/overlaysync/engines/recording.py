"""In-memory recording engine.

Implements the engine surface the runtime calls into without rendering
anything. Every constructor, setter and lifecycle call is appended to one
deterministic call log, which makes it suitable for dry runs and for
asserting exactly which engine calls a config change produced.
"""

from __future__ import annotations

import asyncio
import itertools
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar

from overlaysync.contracts.exceptions import UnsupportedFieldError


@dataclass(frozen=True)
class RecordedCall:
    """Deterministic engine call log entry."""

    sequence: int
    target: str
    name: str
    args: tuple[Any, ...] = ()


@dataclass(frozen=True)
class Pixel:
    x: float = 0
    y: float = 0


@dataclass(frozen=True)
class Size:
    width: float = 0
    height: float = 0


@dataclass(frozen=True)
class LngLat:
    lng: float
    lat: float


@dataclass(frozen=True)
class Bounds:
    south_west: LngLat
    north_east: LngLat


class Icon:
    def __init__(self, options: Mapping[str, Any]) -> None:
        self.options = dict(options)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Icon) and other.options == self.options

    def __repr__(self) -> str:
        return f"Icon({self.options!r})"


@dataclass(frozen=True)
class Listener:
    target: Any
    event_name: str
    handler: Callable[..., None]


class CallLog:
    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._calls: list[RecordedCall] = []
        self._ids: dict[str, itertools.count] = {}

    @property
    def calls(self) -> tuple[RecordedCall, ...]:
        return tuple(self._calls)

    def next_id(self, kind: str) -> str:
        counter = self._ids.setdefault(kind, itertools.count(1))
        return f"{kind}-{next(counter)}"

    def record(self, target: str, name: str, *args: Any) -> None:
        self._calls.append(RecordedCall(sequence=next(self._counter), target=target, name=name, args=args))

    def for_target(self, target: str) -> list[RecordedCall]:
        return [call for call in self._calls if call.target == target]

    def names(self, target: str | None = None) -> list[str]:
        return [call.name for call in self._calls if target is None or call.target == target]

    def clear(self) -> None:
        self._calls.clear()


class RecordingEventBus:
    """Engine-level listener registry (``engine.event``)."""

    def __init__(self, log: CallLog) -> None:
        self._log = log
        self._listeners: list[Listener] = []

    def add_listener(self, target: Any, event_name: str, handler: Callable[..., None]) -> Listener:
        listener = Listener(target=target, event_name=event_name, handler=handler)
        self._listeners.append(listener)
        self._log.record(getattr(target, "id", "?"), "add_listener", event_name)
        return listener

    def remove_listener(self, handle: Listener) -> None:
        self._listeners.remove(handle)
        self._log.record(getattr(handle.target, "id", "?"), "remove_listener", handle.event_name)

    def trigger(self, target: Any, event_name: str, *args: Any) -> None:
        for listener in list(self._listeners):
            if listener.target is target and listener.event_name == event_name:
                listener.handler(*args)

    def listener_count(self, target: Any = None) -> int:
        return sum(1 for listener in self._listeners if target is None or listener.target is target)


class RecordingObject:
    """Engine object that records calls and rejects setters it does not know.

    ``set_*`` methods listed in ``setters`` are recorded and stored on
    ``options``; calling any other ``set_*`` name raises
    :class:`UnsupportedFieldError`.
    """

    kind: ClassVar[str] = "object"
    setters: ClassVar[frozenset[str]] = frozenset()

    def __init__(self, log: CallLog, options: Mapping[str, Any] | None = None, *args: Any) -> None:
        self._log = log
        self.id = log.next_id(self.kind)
        self.options: dict[str, Any] = dict(options or {})
        self.map: Any = None
        self.visible = True
        self.destroyed = False
        log.record(self.id, "create", *args, options)

    def _record(self, name: str, *args: Any) -> None:
        self._log.record(self.id, name, *args)

    def __getattr__(self, name: str) -> Any:
        if not name.startswith("set_"):
            raise AttributeError(name)
        field_name = name.removeprefix("set_")
        supported = field_name in type(self).setters

        def setter(value: Any) -> None:
            if not supported:
                raise UnsupportedFieldError(f"{self.kind} does not support {name}", field=field_name)
            self.options[field_name] = value
            self._record(name, value)

        return setter

    def set_map(self, map: Any) -> None:
        self.map = map
        self._record("set_map", getattr(map, "id", None))

    def show(self) -> None:
        self.visible = True
        self._record("show")

    def hide(self) -> None:
        self.visible = False
        self._record("hide")

    def destroy(self) -> None:
        self.destroyed = True
        self._record("destroy")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id}>"


class EmitterObject(RecordingObject):
    """Engine object with an instance ``on``/``off`` listener registry."""

    def __init__(self, log: CallLog, options: Mapping[str, Any] | None = None, *args: Any) -> None:
        super().__init__(log, options, *args)
        self.handlers: dict[str, list[Callable[..., None]]] = {}

    def on(self, event_name: str, handler: Callable[..., None]) -> None:
        self.handlers.setdefault(event_name, []).append(handler)
        self._record("on", event_name)

    def off(self, event_name: str, handler: Callable[..., None]) -> None:
        self.handlers.get(event_name, []).remove(handler)
        self._record("off", event_name)

    def emit(self, event_name: str, *args: Any) -> None:
        for handler in list(self.handlers.get(event_name, [])):
            handler(*args)

    def listener_count(self) -> int:
        return sum(len(handlers) for handlers in self.handlers.values())


class RecordingMap(RecordingObject):
    kind = "map"
    setters = frozenset(
        {
            "bounds",
            "center",
            "city",
            "default_cursor",
            "default_layer",
            "features",
            "zoom",
            "lang",
            "label_z_index",
            "map_style",
            "pitch",
            "rotation",
            "status",
        }
    )

    def __init__(self, log: CallLog, render_target: Any, options: Mapping[str, Any] | None = None) -> None:
        self.render_target = render_target
        super().__init__(log, options, render_target)


class RecordingMarker(RecordingObject):
    kind = "marker"
    setters = frozenset(
        {
            "anchor",
            "offset",
            "animation",
            "clickable",
            "position",
            "angle",
            "label",
            "z_index",
            "icon",
            "draggable",
            "cursor",
            "content",
            "title",
            "shadow",
            "shape",
            "ext_data",
        }
    )


class RecordingInfoWindow(RecordingObject):
    kind = "info_window"
    setters = frozenset({"content", "position", "anchor", "size"})

    def __init__(self, log: CallLog, options: Mapping[str, Any] | None = None) -> None:
        super().__init__(log, options)
        self.visible = False

    def open(self, map: Any, position: Any = None) -> None:
        self.visible = True
        self._record("open", getattr(map, "id", None), position)

    def close(self) -> None:
        self.visible = False
        self._record("close")


class RecordingShape(RecordingObject):
    setters = frozenset({"options"})

    def set_options(self, options: Mapping[str, Any]) -> None:
        self.options.update(options)
        self._record("set_options", options)


class RecordingPolygon(RecordingShape):
    kind = "polygon"


class RecordingPolyline(RecordingShape):
    kind = "polyline"


class RecordingBezierCurve(RecordingShape):
    kind = "bezier_curve"


class RecordingCircle(RecordingShape):
    kind = "circle"


class RecordingMassMarks(RecordingObject):
    kind = "mass_marks"
    setters = frozenset({"style", "data"})

    def __init__(self, log: CallLog, data: Any, options: Mapping[str, Any] | None = None) -> None:
        self.data = data
        super().__init__(log, options, data)


class RecordingTileLayerTraffic(RecordingObject):
    kind = "tile_layer_traffic"
    setters = frozenset({"opacity", "z_index"})


class RecordingEngine:
    """Engine namespace (what the engine resource would install)."""

    Pixel = Pixel
    Size = Size
    LngLat = LngLat
    Bounds = Bounds
    Icon = Icon

    def __init__(self, log: CallLog | None = None) -> None:
        self.log = log or CallLog()
        self.event = RecordingEventBus(self.log)

    def Map(self, render_target: Any, options: Mapping[str, Any] | None = None) -> RecordingMap:  # noqa: N802
        return RecordingMap(self.log, render_target, options)

    def Marker(self, options: Mapping[str, Any]) -> RecordingMarker:  # noqa: N802
        return RecordingMarker(self.log, options)

    def InfoWindow(self, options: Mapping[str, Any]) -> RecordingInfoWindow:  # noqa: N802
        return RecordingInfoWindow(self.log, options)

    def Polygon(self, options: Mapping[str, Any]) -> RecordingPolygon:  # noqa: N802
        return RecordingPolygon(self.log, options)

    def Polyline(self, options: Mapping[str, Any]) -> RecordingPolyline:  # noqa: N802
        return RecordingPolyline(self.log, options)

    def BezierCurve(self, options: Mapping[str, Any]) -> RecordingBezierCurve:  # noqa: N802
        return RecordingBezierCurve(self.log, options)

    def Circle(self, options: Mapping[str, Any]) -> RecordingCircle:  # noqa: N802
        return RecordingCircle(self.log, options)

    def MassMarks(self, data: Any, options: Mapping[str, Any]) -> RecordingMassMarks:  # noqa: N802
        return RecordingMassMarks(self.log, data, options)

    def TileLayerTraffic(self, options: Mapping[str, Any]) -> RecordingTileLayerTraffic:  # noqa: N802
        return RecordingTileLayerTraffic(self.log, options)


class RecordingPathNavigator(EmitterObject):
    kind = "path_navigator"
    setters = frozenset({"speed"})

    def __init__(self, log: CallLog, path_index: int, options: Mapping[str, Any] | None = None) -> None:
        self.path_index = path_index
        super().__init__(log, options, path_index)

    def set_range(self, start: Any, end: Any) -> None:
        self.options["range"] = (start, end)
        self._record("set_range", start, end)


class RecordingPathSimplifier(EmitterObject):
    kind = "path_simplifier"
    setters = frozenset({"z_index_of_path"})

    def __init__(self, log: CallLog, options: Mapping[str, Any] | None = None) -> None:
        super().__init__(log, options)
        self.data = self.options.get("data")

    def set_data(self, data: Any = None) -> None:
        self.data = data
        self._record("set_data", data)

    def create_path_navigator(self, path_index: int, options: Mapping[str, Any]) -> RecordingPathNavigator:
        navigator = RecordingPathNavigator(self._log, path_index, options)
        self._record("create_path_navigator", path_index)
        return navigator

    def render_later(self) -> None:
        self._record("render_later")


class PathSimplifierModule:
    """UI module constructing path simplifiers (``misc/PathSimplifier``)."""

    def __init__(self, log: CallLog) -> None:
        self._log = log

    def __call__(self, options: Mapping[str, Any]) -> RecordingPathSimplifier:
        return RecordingPathSimplifier(self._log, options)

    def get_image_content(
        self, image: str, on_load: Callable[[], None], on_error: Callable[[], None]
    ) -> dict[str, str]:
        """Canvas content for an image URL; *on_load* fires once it is available."""
        self._log.record("module", "get_image_content", image)
        on_load()
        return {"image": image}


class RecordingUiExtension:
    """UI extension namespace.

    When *gate* is given, :meth:`load_module` waits on it, which lets callers
    hold a provider in its loading state.
    """

    def __init__(self, log: CallLog, *, gate: asyncio.Event | None = None) -> None:
        self._log = log
        self.gate = gate
        self.initialized = False
        self.modules: dict[str, Any] = {"misc/PathSimplifier": PathSimplifierModule(log)}

    def init(self) -> None:
        self.initialized = True
        self._log.record("ui", "init")

    async def load_module(self, name: str) -> Any:
        self._log.record("ui", "load_module", name)
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        try:
            return self.modules[name]
        except KeyError:
            raise LookupError(f"Unknown UI module: {name}") from None


class RecordingContainer(RecordingObject):
    kind = "visual_container"

    def __init__(self, log: CallLog, map: Any) -> None:
        super().__init__(log, None, getattr(map, "id", None))
        self.map = map


class RecordingVisualLayer(RecordingObject):
    kind = "visual_layer"

    def __init__(self, log: CallLog, options: Mapping[str, Any] | None = None) -> None:
        super().__init__(log, options)
        self.data: Any = None
        self.data_set_options: Any = None
        self.visual_options: Any = None

    def set_data(self, data: Any, data_set_options: Any = None) -> None:
        self.data = data
        self.data_set_options = data_set_options
        self._record("set_data", data, data_set_options)

    def set_options(self, options: Any) -> None:
        self.visual_options = options
        self._record("set_options", options)

    def render(self) -> None:
        self._record("render")


class RecordingVisualExtension:
    def __init__(self, log: CallLog) -> None:
        self._log = log

    def Container(self, map: Any) -> RecordingContainer:  # noqa: N802
        return RecordingContainer(self._log, map)

    def VisualLayer(self, options: Mapping[str, Any]) -> RecordingVisualLayer:  # noqa: N802
        return RecordingVisualLayer(self._log, options)


@dataclass
class RecordingSuite:
    """The three namespaces a full bootstrap installs, sharing one call log."""

    log: CallLog = field(default_factory=CallLog)
    ui_gate: asyncio.Event | None = None

    def engine(self) -> RecordingEngine:
        return RecordingEngine(self.log)

    def ui(self) -> RecordingUiExtension:
        return RecordingUiExtension(self.log, gate=self.ui_gate)

    def visual(self) -> RecordingVisualExtension:
        return RecordingVisualExtension(self.log)


def setter_names(calls: Iterable[RecordedCall]) -> list[str]:
    return [call.name for call in calls if call.name.startswith("set_")]
