"""Shared adapter behaviour: split, coerce, value-gated update, show/hide."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar

from overlaysync.contracts.overlay import OptionsSnapshot, OverlayAdapter, OverlayConfig
from overlaysync.normalize.coerce import Coercer, coerce_fields
from overlaysync.normalize.diff import VISIBLE, apply_master_setter, apply_setters, visibility_transition
from overlaysync.normalize.split import split_config

if TYPE_CHECKING:
    from overlaysync.runtime.scope import ScopeHandle


class BaseOverlayAdapter(OverlayAdapter):
    """Default adapter for engine overlays attached with ``set_map``.

    Subclasses declare ``coercers`` and either ``setters`` (field -> method,
    one call per changed field) or ``master_setter`` (one call carrying every
    option when anything changed), and implement :meth:`create`.
    """

    defaults: ClassVar[Mapping[str, Any]] = {VISIBLE: True}
    coercers: ClassVar[Mapping[str, Coercer]] = {}
    setters: ClassVar[Mapping[str, str]] = {}
    master_setter: ClassVar[str | None] = None

    def parse_config(self, config: Mapping[str, Any]) -> OverlayConfig:
        return split_config(config, self.callbacks, self.defaults)

    def coerce(self, engine: Any, options: Mapping[str, Any]) -> dict[str, Any]:
        return coerce_fields(engine, options, self.coercers)

    def create(self, scope: ScopeHandle, options: Mapping[str, Any], *, container: Any = None) -> Any:
        raise NotImplementedError  # pragma: no cover

    def construct(self, scope: ScopeHandle, snapshot: OptionsSnapshot, *, container: Any = None) -> Any:
        host = self.create(scope, snapshot.coerced, container=container)
        self.attach(host, scope=scope)
        self.apply_initial_visibility(host, snapshot, scope=scope)
        return host

    def attach(self, host: Any, *, scope: ScopeHandle) -> None:
        host.set_map(scope.map)

    def apply_initial_visibility(self, host: Any, snapshot: OptionsSnapshot, *, scope: ScopeHandle) -> None:
        if snapshot.raw.get(VISIBLE) is False:
            self.hide(host, scope=scope)

    def update(self, host: Any, previous: OptionsSnapshot, current: OptionsSnapshot, *, scope: ScopeHandle) -> None:
        transition = visibility_transition(previous, current)
        if transition is True:
            self.show(host, current, scope=scope)
        elif transition is False:
            self.hide(host, scope=scope)

        if self.master_setter is not None:
            apply_master_setter(host, previous, current, self.master_setter)
        else:
            apply_setters(host, previous, current, self.setters)

    def teardown(self, host: Any, *, scope: ScopeHandle) -> None:
        host.set_map(None)

    def show(self, host: Any, snapshot: OptionsSnapshot, *, scope: ScopeHandle) -> None:
        host.show()

    def hide(self, host: Any, *, scope: ScopeHandle) -> None:
        host.hide()
