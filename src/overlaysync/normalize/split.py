"""Split a declarative node config into render options and event callbacks."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from overlaysync.contracts.overlay import CallbackDeclaration, OverlayConfig


def split_config(
    config: Mapping[str, Any],
    declaration: CallbackDeclaration,
    defaults: Mapping[str, Any] | None = None,
) -> OverlayConfig:
    """Partition *config* by the declared callback field names.

    Pure: the input mapping is not modified and the same input always yields
    the same split. Keys missing from *config* are filled from *defaults*; an
    explicit ``None`` is kept as-is.
    """
    callback_fields = declaration.all_fields
    render_options: dict[str, Any] = dict(defaults or {})
    event_callbacks: dict[str, Any] = {}

    for key, value in config.items():
        if key in callback_fields:
            event_callbacks[key] = value
        else:
            render_options[key] = value

    return OverlayConfig(
        render_options=MappingProxyType(render_options),
        event_callbacks=MappingProxyType(event_callbacks),
    )
