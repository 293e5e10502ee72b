"""Real-time traffic tile layer adapter."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from overlaysync.contracts.overlay import CallbackDeclaration
from overlaysync.overlays.base import BaseOverlayAdapter

if TYPE_CHECKING:
    from overlaysync.runtime.scope import ScopeHandle

TRAFFIC_CALLBACKS = CallbackDeclaration(version=1, fields=("on_complete",), lifecycle=())


class TileLayerTrafficAdapter(BaseOverlayAdapter):
    name = "TileLayerTraffic"
    callbacks = TRAFFIC_CALLBACKS
    setters = {"opacity": "set_opacity", "z_index": "set_z_index"}

    def create(self, scope: ScopeHandle, options: Mapping[str, Any], *, container: Any = None) -> Any:
        return scope.engine.TileLayerTraffic(dict(options))
