"""Runtime: bootstrap, scope, overlay drivers and the event bridge."""

from overlaysync.runtime.bootstrap import BootstrapState, ResourceBootstrap, ResourceLoadState
from overlaysync.runtime.events import BusBinder, EmitterBinder, EventBinder, EventBridge
from overlaysync.runtime.node import OverlayNode
from overlaysync.runtime.provider import ProviderContext, ProviderNode, ProviderState
from overlaysync.runtime.scope import MapScope, ScopeHandle

__all__ = [
    "BootstrapState",
    "BusBinder",
    "EmitterBinder",
    "EventBinder",
    "EventBridge",
    "MapScope",
    "OverlayNode",
    "ProviderContext",
    "ProviderNode",
    "ProviderState",
    "ResourceBootstrap",
    "ResourceLoadState",
    "ScopeHandle",
]
