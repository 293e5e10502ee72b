"""Two-phase provider: an overlay whose host lives in a lazily loaded UI module.

Dependent children (path navigators) are built against the provider's
current host. When the dataset changes by value the provider tears the host
and every child down, yields for one loop cycle, and only then rebuilds, so
no child ever observes a host built from the previous dataset.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from overlaysync.contracts.exceptions import MissingScopeError, OverlaySyncError
from overlaysync.contracts.overlay import ModuleOverlayAdapter, OptionsSnapshot, OverlayAdapter
from overlaysync.normalize.diff import field_changed
from overlaysync.runtime.events import EventBridge
from overlaysync.runtime.node import OverlayNode, binder_for, make_snapshot

if TYPE_CHECKING:
    from overlaysync.runtime.scope import ScopeHandle

_LOG = logging.getLogger(__name__)

StateListener = Callable[["ProviderState"], None]


class ProviderState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    TEARING_DOWN = "tearing_down"
    UNMOUNTED = "unmounted"


@dataclass(frozen=True)
class ProviderContext:
    """Published to children: the provider host and what built it."""

    host: Any
    module: Any
    map: Any
    generation: int


class ProviderNode:
    def __init__(self, adapter: ModuleOverlayAdapter, scope: ScopeHandle | None, config: Mapping[str, Any]) -> None:
        if scope is None:
            raise MissingScopeError(adapter.name)
        self._adapter = adapter
        self._scope = scope
        self._config: Mapping[str, Any] = dict(config)
        self._state = ProviderState.LOADING
        self._subscribers: list[StateListener] = []
        self._child_specs: list[tuple[OverlayAdapter, Mapping[str, Any]]] = []
        self._child_nodes: list[OverlayNode] = []
        self._module: Any = None
        self._snapshot: OptionsSnapshot | None = None
        self._callbacks: Mapping[str, Callable[..., Any]] = {}
        self._bridge = EventBridge(binder_for(adapter, scope.engine))
        self._handles: list[Any] = []
        self._generation = 0
        self._mount_started = False
        self._build_failed = False
        self.host: Any = None
        self.context: ProviderContext | None = None
        scope.attach(self)

    @property
    def state(self) -> ProviderState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def children(self) -> tuple[OverlayNode, ...]:
        return tuple(self._child_nodes)

    @property
    def listener_count(self) -> int:
        return len(self._handles)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call *listener* with every state change; returns an unsubscribe function."""
        self._subscribers.append(listener)

        def unsubscribe() -> None:
            if listener in self._subscribers:
                self._subscribers.remove(listener)

        return unsubscribe

    def _enter(self, state: ProviderState) -> None:
        _LOG.debug("%s %s -> %s", self._adapter.name, self._state.value, state.value)
        self._state = state
        for listener in list(self._subscribers):
            listener(state)

    def add_child(self, adapter: OverlayAdapter, config: Mapping[str, Any]) -> int:
        """Declare a dependent child; it is built whenever the host is (re)built.

        Returns the child's slot for :meth:`update_child`.
        """
        self._child_specs.append((adapter, dict(config)))
        slot = len(self._child_specs) - 1
        if self._state is ProviderState.READY and self.context is not None:
            self._child_nodes.append(self._build_child(adapter, self._child_specs[slot][1]))
        return slot

    def update_child(self, slot: int, config: Mapping[str, Any]) -> None:
        adapter, _ = self._child_specs[slot]
        self._child_specs[slot] = (adapter, dict(config))
        if self._state is ProviderState.READY and slot < len(self._child_nodes):
            self._child_nodes[slot].update(config)

    async def mount(self) -> ProviderContext | None:
        """Load the module, then build the host and children.

        Returns ``None`` when the node was unmounted while the module loaded.
        If building fails, the partial host is torn down and the next
        :meth:`update` retries the build.
        """
        if self._mount_started or self._state is not ProviderState.LOADING:
            raise OverlaySyncError(f"{self._adapter.name} can only be mounted once")
        self._mount_started = True
        module_name = self._adapter.module_name
        module = await self._scope.ui.load_module(module_name)
        if self._state is ProviderState.UNMOUNTED:
            _LOG.debug("%s unmounted while loading %s", self._adapter.name, module_name)
            return None
        self._module = module
        self._build_or_reset()
        self._enter(ProviderState.READY)
        return self.context

    async def update(self, config: Mapping[str, Any]) -> None:
        """Patch in place, or rebuild everything when a rebuild field changed by value."""
        if self._state is ProviderState.UNMOUNTED:
            raise OverlaySyncError(f"{self._adapter.name} has been unmounted")
        self._config = dict(config)
        if self._build_failed:
            await self._rebuild()
            return
        if self._state is not ProviderState.READY or self._snapshot is None:
            # Built from the newest config once loading or the rebuild finishes.
            return

        parsed = self._adapter.parse_config(self._config)
        current = make_snapshot(self._adapter, self._scope.engine, parsed)
        if any(field_changed(self._snapshot, current, name) for name in self._adapter.rebuild_fields):
            await self._rebuild()
            return

        self._adapter.update(self.host, self._snapshot, current, scope=self._scope)
        self._snapshot = current
        self._callbacks = parsed.event_callbacks
        self._enter(ProviderState.READY)

    async def _rebuild(self) -> None:
        self._enter(ProviderState.TEARING_DOWN)
        self._destroy()
        await asyncio.sleep(0)
        if self._state is ProviderState.UNMOUNTED:
            return
        self._generation += 1
        self._build_or_reset()
        self._enter(ProviderState.READY)

    def _resolve(self, callback_field: str) -> Callable[..., Any] | None:
        return self._callbacks.get(callback_field)

    def _build_or_reset(self) -> None:
        try:
            self._build()
        except BaseException:
            _LOG.debug("%s build failed; tearing down the partial host", self._adapter.name)
            self._destroy()
            self._build_failed = True
            raise
        self._build_failed = False

    def _build(self) -> None:
        parsed = self._adapter.parse_config(self._config)
        self._callbacks = parsed.event_callbacks
        self._snapshot = make_snapshot(self._adapter, self._scope.engine, parsed)
        self.host = self._adapter.construct(self._scope, self._snapshot, container=self._module)
        self._handles = self._bridge.bind(self.host, self._adapter.callbacks.event_names(), self._resolve)

        on_complete = self._callbacks.get("on_complete")
        if "on_complete" in self._adapter.callbacks.lifecycle and callable(on_complete):
            on_complete(self._scope.map, self.host)

        self.context = ProviderContext(
            host=self.host,
            module=self._module,
            map=self._scope.map,
            generation=self._generation,
        )
        for adapter, config in self._child_specs:
            self._child_nodes.append(self._build_child(adapter, config))

    def _build_child(self, adapter: OverlayAdapter, config: Mapping[str, Any]) -> OverlayNode:
        return OverlayNode(adapter, self._scope, config, container=self.context)

    def _destroy(self) -> None:
        for child in reversed(self._child_nodes):
            child.unmount()
        self._child_nodes = []
        self._bridge.unbind(self._handles)
        if self.host is not None:
            self._adapter.teardown(self.host, scope=self._scope)
        self.host = None
        self.context = None
        self._snapshot = None

    def unmount(self) -> None:
        """Children first, then listeners, then the host's dataset. Safe while loading."""
        if self._state is ProviderState.UNMOUNTED:
            return
        self._destroy()
        self._enter(ProviderState.UNMOUNTED)
        self._scope.detach(self)
