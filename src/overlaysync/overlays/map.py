"""Root map adapter."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from overlaysync.contracts.overlay import CallbackDeclaration, OptionsSnapshot
from overlaysync.normalize.coerce import to_bounds
from overlaysync.overlays.base import BaseOverlayAdapter

if TYPE_CHECKING:
    from overlaysync.runtime.scope import ScopeHandle

MAP_CALLBACKS = CallbackDeclaration(
    version=1,
    fields=(
        "on_complete",
        "on_click",
        "on_dbl_click",
        "on_map_move",
        "on_hotspot_click",
        "on_hotspot_over",
        "on_hotspot_out",
        "on_move_start",
        "on_move_end",
        "on_zoom_change",
        "on_zoom_start",
        "on_zoom_end",
        "on_mouse_move",
        "on_mouse_wheel",
        "on_mouse_over",
        "on_mouse_out",
        "on_mouse_up",
        "on_mouse_down",
        "on_right_click",
        "on_drag_start",
        "on_dragging",
        "on_drag_end",
        "on_resize",
        "on_touch_start",
        "on_touch_move",
        "on_touch_end",
    ),
    lifecycle=(),
)


class MapAdapter(BaseOverlayAdapter):
    """The map itself; ``container`` is the render target.

    ``layers`` is only honoured at construction. Every other reactive field
    has a dedicated setter.
    """

    name = "Map"
    callbacks = MAP_CALLBACKS
    defaults: Mapping[str, Any] = {}
    coercers = {"bounds": to_bounds}
    setters = {
        "bounds": "set_bounds",
        "center": "set_center",
        "city": "set_city",
        "default_cursor": "set_default_cursor",
        "default_layer": "set_default_layer",
        "features": "set_features",
        "zoom": "set_zoom",
        "lang": "set_lang",
        "label_z_index": "set_label_z_index",
        "map_style": "set_map_style",
        "pitch": "set_pitch",
        "rotation": "set_rotation",
        "status": "set_status",
    }

    def create(self, scope: ScopeHandle, options: Mapping[str, Any], *, container: Any = None) -> Any:
        return scope.engine.Map(container, dict(options))

    def attach(self, host: Any, *, scope: ScopeHandle) -> None:
        pass

    def apply_initial_visibility(self, host: Any, snapshot: OptionsSnapshot, *, scope: ScopeHandle) -> None:
        pass

    def teardown(self, host: Any, *, scope: ScopeHandle) -> None:
        host.destroy()
