"""Root map scope: bootstrap, map construction and ordered teardown."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import TracebackType
from typing import Any, Protocol

from overlaysync.contracts.config import ScopeConfig
from overlaysync.contracts.exceptions import OverlaySyncError
from overlaysync.contracts.overlay import OptionsSnapshot, OverlayAdapter
from overlaysync.contracts.progress import BootstrapProgress, NullBootstrapProgress
from overlaysync.loaders.base import ResourceLoader
from overlaysync.overlays.map import MapAdapter
from overlaysync.runtime.bootstrap import BootstrapState, ResourceBootstrap, ResourceLoadState
from overlaysync.runtime.events import BusBinder, EventBridge
from overlaysync.runtime.node import OverlayNode, make_snapshot

_LOG = logging.getLogger(__name__)


class Unmountable(Protocol):
    def unmount(self) -> None: ...


class ScopeHandle:
    """What nodes mounted under a ready map need: the map and the namespaces.

    Also tracks the nodes attached to the scope so the scope can unmount them
    before it destroys the map.
    """

    def __init__(self, engine: Any, *, ui: Any = None, visual: Any = None, map: Any = None) -> None:
        self._engine = engine
        self._ui = ui
        self._visual = visual
        self._map = map
        self._nodes: list[Unmountable] = []

    @property
    def engine(self) -> Any:
        return self._engine

    @property
    def ui(self) -> Any:
        return self._ui

    @property
    def visual(self) -> Any:
        return self._visual

    @property
    def map(self) -> Any:
        return self._map

    @property
    def nodes(self) -> tuple[Unmountable, ...]:
        return tuple(self._nodes)

    def bind_map(self, map_object: Any) -> None:
        self._map = map_object

    def attach(self, node: Unmountable) -> None:
        self._nodes.append(node)

    def detach(self, node: Unmountable) -> None:
        if node in self._nodes:
            self._nodes.remove(node)

    def unmount_nodes(self) -> None:
        """Unmount attached nodes, most recently attached first."""
        for node in reversed(self._nodes[:]):
            node.unmount()
        self._nodes.clear()


class MapScope:
    """Root of a configuration tree.

    ``mount()`` loads the engine (once per process, see
    :class:`ResourceLoadState`) and the extensions, constructs the map and
    publishes a :class:`ScopeHandle`. Config updates arriving before the scope
    is ready are buffered; the newest one is used at construction.
    """

    def __init__(
        self,
        config: ScopeConfig,
        render_target: Any,
        options: Mapping[str, Any] | None = None,
        *,
        loader: ResourceLoader,
        load_state: ResourceLoadState | None = None,
        progress: BootstrapProgress | None = None,
    ) -> None:
        self._config = config
        self._render_target = render_target
        self._options: Mapping[str, Any] = dict(options or {})
        self._bootstrap = ResourceBootstrap(loader, load_state)
        self._progress = progress or NullBootstrapProgress()
        self._adapter = MapAdapter()
        self._state = BootstrapState.UNINITIALIZED
        self._handle: ScopeHandle | None = None
        self._snapshot: OptionsSnapshot | None = None
        self._listeners: list[Any] = []
        self._bridge: EventBridge | None = None
        self._callbacks: Mapping[str, Any] = {}
        self._unmounted = False

    @property
    def state(self) -> BootstrapState:
        return self._state

    @property
    def handle(self) -> ScopeHandle | None:
        """``None`` until the scope is ready."""
        return self._handle

    @property
    def map(self) -> Any:
        return None if self._handle is None else self._handle.map

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def _enter(self, state: BootstrapState) -> None:
        _LOG.debug("Scope %s -> %s", self._state.value, state.value)
        self._state = state

    async def mount(self) -> ScopeHandle | None:
        """Run the bootstrap and construct the map.

        Returns ``None`` if the scope was unmounted while loading.
        """
        if self._state is not BootstrapState.UNINITIALIZED or self._unmounted:
            raise OverlaySyncError("MapScope can only be mounted once")

        self._enter(BootstrapState.LOADING_ENGINE)
        await self._run_phase("engine", self._bootstrap.request_engine(self._config))
        if self._unmounted:
            _LOG.debug("Scope unmounted while loading the engine; extensions not loaded")
            self._enter(BootstrapState.UNINITIALIZED)
            return None

        self._enter(BootstrapState.LOADING_EXTENSIONS)
        self._progress.phase_start("extensions", total=2)
        await self._run_phase("extensions", self._bootstrap.load_extensions(self._config, self._progress), start=False)

        if self._unmounted:
            _LOG.debug("Scope unmounted while loading; map not constructed")
            self._enter(BootstrapState.UNINITIALIZED)
            return None

        self._progress.phase_start("map")
        host = self._bootstrap.host
        handle = ScopeHandle(host.engine, ui=host.ui, visual=host.visual)
        parsed = self._adapter.parse_config(self._options)
        self._callbacks = parsed.event_callbacks
        self._snapshot = make_snapshot(self._adapter, handle.engine, parsed)
        map_object = self._adapter.construct(handle, self._snapshot, container=self._render_target)
        handle.bind_map(map_object)

        self._bridge = EventBridge(BusBinder(handle.engine.event))
        self._listeners = self._bridge.bind(map_object, self._adapter.callbacks.event_names(), self._resolve)
        self._handle = handle
        self._enter(BootstrapState.READY)
        self._progress.phase_done("map")
        return handle

    async def _run_phase(self, phase: str, work: Any, *, start: bool = True) -> None:
        if start:
            self._progress.phase_start(phase)
        try:
            await work
        except BaseException as exc:
            self._progress.phase_error(phase, exc)
            raise
        self._progress.phase_done(phase)

    def _resolve(self, callback_field: str) -> Any:
        return self._callbacks.get(callback_field)

    def update(self, options: Mapping[str, Any]) -> None:
        """Replace the map config; applied immediately once ready, buffered before."""
        self._options = dict(options)
        if self._handle is None or self._snapshot is None:
            return
        parsed = self._adapter.parse_config(self._options)
        current = make_snapshot(self._adapter, self._handle.engine, parsed)
        self._adapter.update(self._handle.map, self._snapshot, current, scope=self._handle)
        self._snapshot = current
        self._callbacks = parsed.event_callbacks

    def mount_overlay(self, adapter: OverlayAdapter, config: Mapping[str, Any]) -> OverlayNode:
        """Mount *adapter* under this scope; raises ``MissingScopeError`` before READY."""
        return OverlayNode(adapter, self._handle, config)

    def unmount(self) -> None:
        """Unmount children, remove map listeners, destroy the map. Safe before READY."""
        self._unmounted = True
        handle = self._handle
        if handle is None:
            return
        handle.unmount_nodes()
        if self._bridge is not None:
            self._bridge.unbind(self._listeners)
        self._adapter.teardown(handle.map, scope=handle)
        self._handle = None
        self._snapshot = None
        self._enter(BootstrapState.UNINITIALIZED)

    async def __aenter__(self) -> ScopeHandle:
        handle = await self.mount()
        assert handle is not None
        return handle

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.unmount()
