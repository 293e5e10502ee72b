"""Resource bootstrap: load the engine once, then the extensions.

The engine resource is shared by every root scope in the process. The guard
is the in-flight load task kept on :class:`ResourceLoadState`: the first
requester installs it before its first suspension point, and any scope
requesting the engine while it is pending awaits that same task.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import ClassVar

from overlaysync.contracts.config import ScopeConfig
from overlaysync.contracts.engine import Engine, EngineHost
from overlaysync.contracts.exceptions import ResourceLoadFailure
from overlaysync.contracts.progress import BootstrapProgress, NullBootstrapProgress
from overlaysync.loaders.base import ResourceLoader
from overlaysync.loaders.urls import engine_url, ui_url, visual_url

_LOG = logging.getLogger(__name__)


class BootstrapState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING_ENGINE = "loading_engine"
    LOADING_EXTENSIONS = "loading_extensions"
    READY = "ready"


class ResourceLoadState:
    """Process-wide engine load status, injectable for isolation."""

    _shared: ClassVar[ResourceLoadState | None] = None

    def __init__(self, host: EngineHost | None = None) -> None:
        self.host = host or EngineHost()
        self.engine_ready = False
        self.pending_load: asyncio.Task[None] | None = None

    @classmethod
    def shared(cls) -> ResourceLoadState:
        if cls._shared is None:
            cls._shared = cls()
        return cls._shared

    def reset(self) -> None:
        """Forget the loaded engine. An in-flight load is left to finish unobserved."""
        self.host = EngineHost()
        self.engine_ready = False
        self.pending_load = None


class ResourceBootstrap:
    def __init__(self, loader: ResourceLoader, state: ResourceLoadState | None = None) -> None:
        self._loader = loader
        self._state = state or ResourceLoadState.shared()

    @property
    def state(self) -> ResourceLoadState:
        return self._state

    @property
    def host(self) -> EngineHost:
        return self._state.host

    async def request_engine(self, config: ScopeConfig) -> Engine:
        """Return the loaded engine, starting or joining the single shared load."""
        state = self._state
        if state.engine_ready and state.host.engine is not None:
            return state.host.engine

        if state.pending_load is None:
            task = asyncio.ensure_future(self._load_engine(config, state))
            task.add_done_callback(self._forget_failed_load)
            state.pending_load = task
        else:
            _LOG.debug("Joining pending engine load")

        pending = state.pending_load
        try:
            await asyncio.wait_for(asyncio.shield(pending), timeout=config.load_timeout)
        except TimeoutError as exc:
            raise ResourceLoadFailure(
                f"Timed out after {config.load_timeout}s waiting for the engine resource",
                url=engine_url(config),
            ) from exc
        engine = state.host.engine
        assert engine is not None
        return engine

    async def load_extensions(self, config: ScopeConfig, progress: BootstrapProgress | None = None) -> None:
        """Load the UI and visual extensions concurrently; the engine must be ready."""
        if not self._state.engine_ready:
            await self.request_engine(config)
        progress = progress or NullBootstrapProgress()
        try:
            async with asyncio.TaskGroup() as group:
                group.create_task(self._load_ui(config, progress))
                group.create_task(self._load_resource(visual_url(config), config, progress))
        except* ResourceLoadFailure as failures:
            raise failures.exceptions[0] from None

    async def _load_engine(self, config: ScopeConfig, state: ResourceLoadState) -> None:
        url = engine_url(config)
        _LOG.debug("Loading engine resource %s", url)
        await self._fetch(url, state.host)
        if state.host.engine is None:
            raise ResourceLoadFailure(f"Engine resource did not install an engine: {url}", url=url)
        state.engine_ready = True
        state.pending_load = None
        _LOG.debug("Engine ready")

    def _forget_failed_load(self, task: asyncio.Task[None]) -> None:
        if task.cancelled() or task.exception() is not None:
            if self._state.pending_load is task:
                self._state.pending_load = None

    async def _load_ui(self, config: ScopeConfig, progress: BootstrapProgress) -> None:
        await self._load_resource(ui_url(config), config, progress)
        ui = self._state.host.ui
        if ui is None:
            raise ResourceLoadFailure("UI extension resource did not install a namespace", url=ui_url(config))
        ui.init()

    async def _load_resource(self, url: str, config: ScopeConfig, progress: BootstrapProgress) -> None:
        try:
            async with asyncio.timeout(config.load_timeout):
                await self._fetch(url, self._state.host)
        except TimeoutError as exc:
            raise ResourceLoadFailure(f"Timed out after {config.load_timeout}s loading {url}", url=url) from exc
        progress.item_done("extensions")

    async def _fetch(self, url: str, host: EngineHost) -> None:
        try:
            await self._loader.load(url, host)
        except ResourceLoadFailure:
            raise
        except Exception as exc:
            raise ResourceLoadFailure(f"Failed to load resource {url}: {exc}", url=url) from exc
