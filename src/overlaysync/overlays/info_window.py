"""Info window adapter."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from overlaysync.contracts.overlay import CallbackDeclaration, OptionsSnapshot
from overlaysync.normalize.coerce import to_lnglat, to_pixel, to_size
from overlaysync.overlays.base import BaseOverlayAdapter

if TYPE_CHECKING:
    from overlaysync.runtime.scope import ScopeHandle

INFO_WINDOW_CALLBACKS = CallbackDeclaration(version=1, fields=("on_change", "on_open", "on_close"))


def _info_window_offset(engine: Any, value: Any) -> Any:
    return to_pixel(engine, value, (0, 0))


class InfoWindowAdapter(BaseOverlayAdapter):
    """Info window; shown with ``open(map, position)`` and hidden with ``close()``."""

    name = "InfoWindow"
    callbacks = INFO_WINDOW_CALLBACKS
    deep_copy_fields = frozenset({"position"})
    defaults: Mapping[str, Any] = {"visible": True, "offset": None}
    coercers = {
        "offset": _info_window_offset,
        "size": to_size,
        "position": to_lnglat,
    }
    setters = {
        "content": "set_content",
        "position": "set_position",
        "anchor": "set_anchor",
        "size": "set_size",
    }

    def create(self, scope: ScopeHandle, options: Mapping[str, Any], *, container: Any = None) -> Any:
        return scope.engine.InfoWindow(dict(options))

    def apply_initial_visibility(self, host: Any, snapshot: OptionsSnapshot, *, scope: ScopeHandle) -> None:
        if snapshot.raw.get("visible") is True:
            self.show(host, snapshot, scope=scope)

    def show(self, host: Any, snapshot: OptionsSnapshot, *, scope: ScopeHandle) -> None:
        host.open(scope.map, snapshot.coerced.get("position"))

    def hide(self, host: Any, *, scope: ScopeHandle) -> None:
        host.close()
