"""Resource locator templates."""

from __future__ import annotations

from overlaysync.contracts.config import ScopeConfig


def engine_url(config: ScopeConfig) -> str:
    return (
        f"{config.protocol}://{config.resource_host}/maps"
        f"?v={config.engine_version}&key={config.credential_key}"
    )


def ui_url(config: ScopeConfig) -> str:
    return f"{config.protocol}://{config.resource_host}/ui/{config.ui_version}/main-async.js"


def visual_url(config: ScopeConfig) -> str:
    return (
        f"{config.protocol}://{config.resource_host}/loca"
        f"?key={config.credential_key}&v={config.extension_version}"
    )
