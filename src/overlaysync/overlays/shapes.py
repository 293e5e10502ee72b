"""Vector shapes updated through a single ``set_options`` call."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from overlaysync.contracts.overlay import CallbackDeclaration
from overlaysync.normalize.coerce import to_lnglat
from overlaysync.overlays.base import BaseOverlayAdapter

if TYPE_CHECKING:
    from overlaysync.runtime.scope import ScopeHandle

_SHAPE_EVENTS = (
    "on_click",
    "on_dbl_click",
    "on_right_click",
    "on_hide",
    "on_show",
    "on_mouse_down",
    "on_mouse_up",
    "on_mouse_over",
    "on_mouse_out",
    "on_change",
    "on_touch_start",
    "on_touch_move",
    "on_touch_end",
)

SHAPE_CALLBACKS = CallbackDeclaration(version=1, fields=_SHAPE_EVENTS)
BEZIER_CURVE_CALLBACKS = CallbackDeclaration(
    version=1,
    fields=tuple(name for name in _SHAPE_EVENTS if name != "on_touch_move"),
)


class ShapeAdapter(BaseOverlayAdapter):
    """Any change to a reactive field re-sends every option in one call."""

    deep_copy_fields = frozenset({"path"})
    master_setter = "set_options"
    engine_class: str

    def create(self, scope: ScopeHandle, options: Mapping[str, Any], *, container: Any = None) -> Any:
        return getattr(scope.engine, self.engine_class)(dict(options))


class PolygonAdapter(ShapeAdapter):
    name = "Polygon"
    callbacks = SHAPE_CALLBACKS
    engine_class = "Polygon"


class PolylineAdapter(ShapeAdapter):
    name = "Polyline"
    callbacks = SHAPE_CALLBACKS
    engine_class = "Polyline"


class BezierCurveAdapter(ShapeAdapter):
    name = "BezierCurve"
    callbacks = BEZIER_CURVE_CALLBACKS
    engine_class = "BezierCurve"


class CircleAdapter(ShapeAdapter):
    name = "Circle"
    callbacks = SHAPE_CALLBACKS
    engine_class = "Circle"
    deep_copy_fields = frozenset({"center"})
    coercers = {"center": to_lnglat}
