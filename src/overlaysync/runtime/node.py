"""Generic overlay driver: one engine host kept in sync with one config."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from overlaysync.contracts.exceptions import MissingScopeError, OverlaySyncError
from overlaysync.contracts.overlay import OptionsSnapshot, OverlayAdapter, OverlayConfig
from overlaysync.normalize.clone import clone_fields
from overlaysync.runtime.events import BusBinder, EmitterBinder, EventBinder, EventBridge

if TYPE_CHECKING:
    from overlaysync.runtime.scope import ScopeHandle

_LOG = logging.getLogger(__name__)


def make_snapshot(adapter: OverlayAdapter, engine: Any, parsed: OverlayConfig) -> OptionsSnapshot:
    """Coerce *parsed* render options and deep-copy the adapter's whitelisted fields."""
    raw = dict(parsed.render_options)
    coerced = clone_fields(adapter.coerce(engine, raw), adapter.deep_copy_fields)
    return OptionsSnapshot(raw=raw, coerced=coerced)


def binder_for(adapter: OverlayAdapter, engine: Any) -> EventBinder:
    if adapter.event_style == "emitter":
        return EmitterBinder()
    return BusBinder(engine.event)


class OverlayNode:
    """Mounts an adapter's host on construction and keeps it in sync.

    The constructor raises :class:`MissingScopeError` before any engine call
    when *scope* is ``None`` or when the adapter requires a container that was
    not supplied.
    """

    def __init__(
        self,
        adapter: OverlayAdapter,
        scope: ScopeHandle | None,
        config: Mapping[str, Any],
        *,
        container: Any = None,
    ) -> None:
        if scope is None:
            raise MissingScopeError(adapter.name)
        if adapter.container_name is not None and container is None:
            raise MissingScopeError(adapter.name, parent_name=adapter.container_name)

        self._adapter = adapter
        self._scope = scope
        self._container = container

        parsed = adapter.parse_config(config)
        self._callbacks: Mapping[str, Callable[..., Any]] = parsed.event_callbacks
        self._snapshot = make_snapshot(adapter, scope.engine, parsed)
        self.host: Any = adapter.construct(scope, self._snapshot, container=container)

        self._bridge = EventBridge(binder_for(adapter, scope.engine))
        self._handles = self._bridge.bind(self.host, adapter.callbacks.event_names(), self._resolve)
        self._mounted = True
        scope.attach(self)
        _LOG.debug("Mounted %s", adapter.name)

        if "on_complete" in adapter.callbacks.lifecycle:
            on_complete = self._callbacks.get("on_complete")
            if callable(on_complete):
                extra = () if container is None else (getattr(container, "host", container),)
                on_complete(scope.map, self.host, *extra)

    @property
    def adapter(self) -> OverlayAdapter:
        return self._adapter

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def snapshot(self) -> OptionsSnapshot:
        return self._snapshot

    @property
    def listener_count(self) -> int:
        return len(self._handles)

    def _resolve(self, callback_field: str) -> Callable[..., Any] | None:
        return self._callbacks.get(callback_field)

    def update(self, config: Mapping[str, Any]) -> None:
        """Apply *config*, issuing only the engine calls needed for changed fields."""
        if not self._mounted:
            raise OverlaySyncError(f"{self._adapter.name} has been unmounted")
        parsed = self._adapter.parse_config(config)
        current = make_snapshot(self._adapter, self._scope.engine, parsed)
        self._adapter.update(self.host, self._snapshot, current, scope=self._scope)
        self._snapshot = current
        self._callbacks = parsed.event_callbacks

    def unmount(self) -> None:
        """Remove every listener, then tear the host down. Safe to call twice."""
        if not self._mounted:
            return
        self._mounted = False
        self._bridge.unbind(self._handles)
        self._adapter.teardown(self.host, scope=self._scope)
        self.host = None
        self._scope.detach(self)
        _LOG.debug("Unmounted %s", self._adapter.name)
