"""Mass point layer adapter."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from overlaysync.contracts.overlay import CallbackDeclaration
from overlaysync.normalize.coerce import to_mass_style
from overlaysync.overlays.base import BaseOverlayAdapter

if TYPE_CHECKING:
    from overlaysync.runtime.scope import ScopeHandle

MASS_MARKS_CALLBACKS = CallbackDeclaration(
    version=1,
    fields=(
        "on_complete",
        "on_click",
        "on_dbl_click",
        "on_mouse_over",
        "on_mouse_out",
        "on_mouse_up",
        "on_mouse_down",
        "on_touch_start",
        "on_touch_end",
    ),
    lifecycle=(),
)


class MassMarksAdapter(BaseOverlayAdapter):
    """Mass points; the engine itself fires ``complete`` once the layer is drawn."""

    name = "MassMarks"
    callbacks = MASS_MARKS_CALLBACKS
    deep_copy_fields = frozenset({"data", "style"})
    coercers = {"style": to_mass_style}
    setters = {"style": "set_style", "data": "set_data"}

    def create(self, scope: ScopeHandle, options: Mapping[str, Any], *, container: Any = None) -> Any:
        data = options.get("data")
        rest = {name: value for name, value in options.items() if name != "data"}
        return scope.engine.MassMarks(data, rest)
