from __future__ import annotations

import httpx
import pytest

from overlaysync.contracts.config import ScopeConfig
from overlaysync.contracts.engine import EngineHost
from overlaysync.contracts.exceptions import ResourceLoadFailure
from overlaysync.engines.recording import RecordingEngine, RecordingSuite
from overlaysync.loaders.http import HttpResourceLoader
from overlaysync.loaders.recording import resource_kind
from overlaysync.loaders.transport import RetryingTransport
from overlaysync.loaders.urls import engine_url
from overlaysync.runtime.bootstrap import BootstrapState, ResourceLoadState
from overlaysync.runtime.scope import MapScope
from tests.fakes.scope import FakeRenderTarget


class SuiteInstaller:
    """Installs recording namespaces for whatever payload was fetched."""

    def __init__(self) -> None:
        self.suite = RecordingSuite()
        self.payloads: list[tuple[str, bytes]] = []

    def __call__(self, url: str, payload: bytes, host: EngineHost) -> None:
        self.payloads.append((url, payload))
        kind = resource_kind(url)
        if kind == "engine":
            host.engine = self.suite.engine()
        elif kind == "ui":
            host.ui = self.suite.ui()
        else:
            host.visual = self.suite.visual()


def serve(status: int = 200) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, content=f"// {request.url.path}".encode())

    return httpx.MockTransport(handler)


@pytest.mark.asyncio
async def test_fetched_payload_is_handed_to_the_installer(scope_config: ScopeConfig) -> None:
    installer = SuiteInstaller()
    host = EngineHost()

    async with HttpResourceLoader(installer, transport=serve()) as loader:
        await loader.load(engine_url(scope_config), host)

    assert installer.payloads == [(engine_url(scope_config), b"// /maps")]
    assert isinstance(host.engine, RecordingEngine)


@pytest.mark.asyncio
async def test_error_status_raises_http_status_error(scope_config: ScopeConfig) -> None:
    installer = SuiteInstaller()

    async with HttpResourceLoader(installer, transport=serve(404), max_retries=0) as loader:
        with pytest.raises(httpx.HTTPStatusError):
            await loader.load(engine_url(scope_config), EngineHost())

    assert installer.payloads == []


@pytest.mark.asyncio
async def test_loader_over_a_retrying_client_recovers_from_a_transient_failure(scope_config: ScopeConfig) -> None:
    attempts: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(str(request.url))
        return httpx.Response(503 if len(attempts) == 1 else 200, content=b"engine")

    client = httpx.AsyncClient(transport=RetryingTransport(transport=httpx.MockTransport(handler), backoff_base=0.0))
    installer = SuiteInstaller()
    loader = HttpResourceLoader(installer, client=client)

    await loader.load(engine_url(scope_config), EngineHost())
    await loader.aclose()

    assert len(attempts) == 2
    assert installer.payloads == [(engine_url(scope_config), b"engine")]
    assert not client.is_closed
    await client.aclose()


@pytest.mark.asyncio
async def test_scope_mounts_over_http(scope_config: ScopeConfig, load_state: ResourceLoadState) -> None:
    installer = SuiteInstaller()

    async with HttpResourceLoader(installer, transport=serve()) as loader:
        scope = MapScope(scope_config, FakeRenderTarget(), {"zoom": 4}, loader=loader, load_state=load_state)
        handle = await scope.mount()

    assert handle is not None
    assert scope.state is BootstrapState.READY
    assert [resource_kind(url) for url, _ in installer.payloads][0] == "engine"
    assert sorted(resource_kind(url) for url, _ in installer.payloads) == ["engine", "ui", "visual"]


@pytest.mark.asyncio
async def test_http_failure_surfaces_as_resource_load_failure(
    scope_config: ScopeConfig, load_state: ResourceLoadState
) -> None:
    async with HttpResourceLoader(SuiteInstaller(), transport=serve(403), max_retries=0) as loader:
        scope = MapScope(scope_config, FakeRenderTarget(), loader=loader, load_state=load_state)
        with pytest.raises(ResourceLoadFailure) as excinfo:
            await scope.mount()

    assert excinfo.value.url == engine_url(scope_config)
    assert isinstance(excinfo.value.__cause__, httpx.HTTPStatusError)
    assert load_state.pending_load is None
