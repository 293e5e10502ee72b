"""Fetch resources over HTTP and hand the payload to an installer."""

from __future__ import annotations

import logging
from collections.abc import Callable
from types import TracebackType

import httpx

from overlaysync.contracts.engine import EngineHost
from overlaysync.loaders.base import ResourceLoader
from overlaysync.loaders.transport import RetryingTransport

_LOG = logging.getLogger(__name__)

Installer = Callable[[str, bytes, EngineHost], None]
"""Turns a fetched payload into a namespace on the host (``engine``, ``ui`` or ``visual``)."""


class HttpResourceLoader(ResourceLoader):
    """Resource loader backed by an httpx ``AsyncClient``.

    The client runs over :class:`RetryingTransport`; non-success responses
    left after retries raise :class:`httpx.HTTPStatusError`.
    """

    def __init__(
        self,
        installer: Installer,
        *,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        max_retries: int = 3,
        timeout: float = 30.0,
    ) -> None:
        self._installer = installer
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            transport=RetryingTransport(transport=transport, max_retries=max_retries),
            timeout=timeout,
            follow_redirects=True,
        )

    async def load(self, url: str, host: EngineHost) -> None:
        _LOG.debug("Fetching %s", url)
        response = await self._client.get(url)
        response.raise_for_status()
        self._installer(url, response.content, host)
        _LOG.debug("Installed %s (%d bytes)", url, len(response.content))

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpResourceLoader:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
