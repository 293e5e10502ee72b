"""Data-visualization layer adapter (visual extension)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from overlaysync.contracts.overlay import CallbackDeclaration, OptionsSnapshot
from overlaysync.normalize.diff import field_changed
from overlaysync.overlays.base import BaseOverlayAdapter

if TYPE_CHECKING:
    from overlaysync.runtime.scope import ScopeHandle

VISUAL_LAYER_CALLBACKS = CallbackDeclaration(version=1, fields=())


class VisualLayerAdapter(BaseOverlayAdapter):
    """Layer of the visual extension, drawn into a container wrapping the map.

    ``layer_options`` only apply at construction. ``data`` with
    ``data_set_options`` and ``visual_options`` are re-sent when they change
    by value, followed by a single ``render()``.
    """

    name = "VisualLayer"
    callbacks = VISUAL_LAYER_CALLBACKS
    deep_copy_fields = frozenset({"data", "data_set_options", "visual_options"})
    defaults: Mapping[str, Any] = {}

    def create(self, scope: ScopeHandle, options: Mapping[str, Any], *, container: Any = None) -> Any:
        visual_container = scope.visual.Container(scope.map)
        layer = scope.visual.VisualLayer({"container": visual_container, **(options.get("layer_options") or {})})
        layer.set_data(options.get("data"), options.get("data_set_options"))
        layer.set_options(options.get("visual_options"))
        layer.render()
        return layer

    def attach(self, host: Any, *, scope: ScopeHandle) -> None:
        pass

    def update(self, host: Any, previous: OptionsSnapshot, current: OptionsSnapshot, *, scope: ScopeHandle) -> None:
        rendered = False
        if field_changed(previous, current, "data") or field_changed(previous, current, "data_set_options"):
            host.set_data(current.coerced.get("data"), current.coerced.get("data_set_options"))
            rendered = True
        if field_changed(previous, current, "visual_options"):
            host.set_options(current.coerced.get("visual_options"))
            rendered = True
        if rendered:
            host.render()

    def teardown(self, host: Any, *, scope: ScopeHandle) -> None:
        host.destroy()
