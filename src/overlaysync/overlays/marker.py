"""Marker adapter."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from overlaysync.contracts.overlay import CallbackDeclaration
from overlaysync.normalize.coerce import to_icon, to_label, to_lnglat, to_pixel
from overlaysync.overlays.base import BaseOverlayAdapter

if TYPE_CHECKING:
    from overlaysync.runtime.scope import ScopeHandle

MARKER_CALLBACKS = CallbackDeclaration(
    version=1,
    fields=(
        "on_click",
        "on_dbl_click",
        "on_right_click",
        "on_mouse_move",
        "on_mouse_over",
        "on_mouse_out",
        "on_mouse_down",
        "on_mouse_up",
        "on_drag_start",
        "on_dragging",
        "on_drag_end",
        "on_moving",
        "on_move_end",
        "on_move_along",
        "on_touch_start",
        "on_touch_move",
        "on_touch_end",
    ),
)

DEFAULT_MARKER_OFFSET = (-10, -34)


def _marker_offset(engine: Any, value: Any) -> Any:
    return to_pixel(engine, value, DEFAULT_MARKER_OFFSET)


class MarkerAdapter(BaseOverlayAdapter):
    """Point marker.

    ``icon`` and ``label`` accept option mappings; an explicit ``None``
    clears them on the engine side.
    """

    name = "Marker"
    callbacks = MARKER_CALLBACKS
    deep_copy_fields = frozenset({"position"})
    defaults: Mapping[str, Any] = {"visible": True, "offset": None}
    coercers = {
        "position": to_lnglat,
        "offset": _marker_offset,
        "icon": to_icon,
        "label": to_label,
    }
    setters = {
        "anchor": "set_anchor",
        "offset": "set_offset",
        "animation": "set_animation",
        "clickable": "set_clickable",
        "position": "set_position",
        "angle": "set_angle",
        "label": "set_label",
        "z_index": "set_z_index",
        "icon": "set_icon",
        "draggable": "set_draggable",
        "cursor": "set_cursor",
        "content": "set_content",
        "title": "set_title",
        "shadow": "set_shadow",
        "shape": "set_shape",
        "ext_data": "set_ext_data",
    }

    def create(self, scope: ScopeHandle, options: Mapping[str, Any], *, container: Any = None) -> Any:
        return scope.engine.Marker(dict(options))
