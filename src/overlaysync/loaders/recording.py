"""Loader that installs the recording engine instead of fetching anything."""

from __future__ import annotations

import asyncio
import logging
from collections import Counter

import httpx

from overlaysync.contracts.engine import EngineHost
from overlaysync.engines.recording import RecordingSuite
from overlaysync.loaders.base import ResourceLoader

_LOG = logging.getLogger(__name__)


def resource_kind(url: str) -> str:
    """Classify a locator as ``engine``, ``ui`` or ``visual`` by its path."""
    path = httpx.URL(url).path
    if path.startswith("/ui/"):
        return "ui"
    if path.startswith("/loca"):
        return "visual"
    if path.startswith("/maps"):
        return "engine"
    raise ValueError(f"Unrecognised resource locator: {url}")


class RecordingResourceLoader(ResourceLoader):
    """Installs the recording namespaces and keeps a log of requested URLs.

    *gate* holds every load until it is set. Kinds listed in *failing* raise
    :class:`ConnectionError` instead of installing.
    """

    def __init__(
        self,
        suite: RecordingSuite | None = None,
        *,
        gate: asyncio.Event | None = None,
        failing: frozenset[str] = frozenset(),
    ) -> None:
        self.suite = suite or RecordingSuite()
        self.gate = gate
        self.failing = failing
        self.urls: list[str] = []
        self.counts: Counter[str] = Counter()

    async def load(self, url: str, host: EngineHost) -> None:
        kind = resource_kind(url)
        self.urls.append(url)
        self.counts[kind] += 1
        _LOG.debug("Recording load of %s (%s)", url, kind)
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        if kind in self.failing:
            raise ConnectionError(f"Simulated failure loading {url}")

        if kind == "engine":
            host.engine = self.suite.engine()
        elif kind == "ui":
            host.ui = self.suite.ui()
        else:
            host.visual = self.suite.visual()
