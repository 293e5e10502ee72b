"""Path navigator adapter, a child of a path simplifier."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from overlaysync.contracts.exceptions import ConfigError, ResourceLoadFailure
from overlaysync.contracts.overlay import CallbackDeclaration, OptionsSnapshot
from overlaysync.normalize.diff import apply_setters, field_changed
from overlaysync.overlays.base import BaseOverlayAdapter

if TYPE_CHECKING:
    from overlaysync.runtime.provider import ProviderContext
    from overlaysync.runtime.scope import ScopeHandle

PATH_NAVIGATOR_CALLBACKS = CallbackDeclaration(
    version=1,
    fields=("on_start", "on_pause", "on_move", "on_stop"),
)

DEFAULT_CONTENT = "defaultPathNavigator"
BUILTIN_CONTENTS = frozenset({DEFAULT_CONTENT, "circle", "none"})


def navigator_style(style: Mapping[str, Any] | None, context: ProviderContext) -> dict[str, Any]:
    """Resolve ``content``: built-in names pass through, other strings are image URLs."""
    if style is None:
        return {"content": DEFAULT_CONTENT}
    content = style.get("content")
    if isinstance(content, str) and content not in BUILTIN_CONTENTS:

        def image_failed() -> None:
            raise ResourceLoadFailure("The image could not be loaded.", url=content)

        content = context.module.get_image_content(content, context.host.render_later, image_failed)
    return {**style, "content": content or DEFAULT_CONTENT}


class PathNavigatorAdapter(BaseOverlayAdapter):
    """Navigator along one path of the parent simplifier (``path_index``).

    Reactive fields: ``speed`` and ``range`` (a ``(start, end)`` pair).
    """

    name = "PathNavigator"
    callbacks = PATH_NAVIGATOR_CALLBACKS
    container_name = "PathSimplifier"
    event_style = "emitter"
    defaults: Mapping[str, Any] = {}
    setters = {"speed": "set_speed"}

    def create(self, scope: ScopeHandle, options: Mapping[str, Any], *, container: Any = None) -> Any:
        if options.get("path_index") is None:
            raise ConfigError(f"{self.name} requires a path_index into its {self.container_name} data")
        navigator_options = {name: value for name, value in options.items() if name != "path_index"}
        navigator_options["path_navigator_style"] = navigator_style(options.get("path_navigator_style"), container)
        return container.host.create_path_navigator(options["path_index"], navigator_options)

    def attach(self, host: Any, *, scope: ScopeHandle) -> None:
        pass

    def update(self, host: Any, previous: OptionsSnapshot, current: OptionsSnapshot, *, scope: ScopeHandle) -> None:
        apply_setters(host, previous, current, self.setters)
        if field_changed(previous, current, "range"):
            start, end = current.coerced["range"]
            host.set_range(start, end)

    def teardown(self, host: Any, *, scope: ScopeHandle) -> None:
        host.destroy()
