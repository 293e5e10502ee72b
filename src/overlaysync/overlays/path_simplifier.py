"""Path simplifier adapter, driven by :class:`~overlaysync.runtime.provider.ProviderNode`."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from overlaysync.contracts.overlay import CallbackDeclaration, ModuleOverlayAdapter, camel_event_name
from overlaysync.overlays.base import BaseOverlayAdapter

if TYPE_CHECKING:
    from overlaysync.runtime.scope import ScopeHandle

PATH_SIMPLIFIER_CALLBACKS = CallbackDeclaration(
    version=1,
    fields=(
        "on_path_click",
        "on_path_mouseover",
        "on_path_mouseout",
        "on_point_click",
        "on_point_mouseover",
        "on_point_mouseout",
    ),
    naming=camel_event_name,
)


class PathSimplifierAdapter(BaseOverlayAdapter, ModuleOverlayAdapter):
    """Only ``z_index`` and visibility patch in place; a new ``data`` rebuilds."""

    name = "PathSimplifier"
    module_name = "misc/PathSimplifier"
    callbacks = PATH_SIMPLIFIER_CALLBACKS
    deep_copy_fields = frozenset({"data"})
    event_style = "emitter"
    setters = {"z_index": "set_z_index_of_path"}

    def create(self, scope: ScopeHandle, options: Mapping[str, Any], *, container: Any = None) -> Any:
        return container({**options, "map": scope.map})

    def attach(self, host: Any, *, scope: ScopeHandle) -> None:
        pass

    def teardown(self, host: Any, *, scope: ScopeHandle) -> None:
        host.set_data(None)
