"""Public API surface for overlaysync."""

__version__ = "0.4.0"

from overlaysync.config import load_config
from overlaysync.contracts.config import ScopeConfig
from overlaysync.contracts.engine import EngineHost
from overlaysync.contracts.exceptions import (
    ConfigError,
    MissingScopeError,
    OverlaySyncError,
    ResourceLoadFailure,
    UnknownOverlayError,
    UnsupportedFieldError,
)
from overlaysync.contracts.overlay import CallbackDeclaration, ModuleOverlayAdapter, OverlayAdapter, OverlayConfig
from overlaysync.contracts.progress import BootstrapProgress, NullBootstrapProgress
from overlaysync.engines.recording import RecordingEngine, RecordingSuite
from overlaysync.loaders import HttpResourceLoader, RecordingResourceLoader, ResourceLoader
from overlaysync.overlays import create_adapter, register
from overlaysync.runtime import (
    BootstrapState,
    MapScope,
    OverlayNode,
    ProviderContext,
    ProviderNode,
    ProviderState,
    ResourceLoadState,
    ScopeHandle,
)

__all__ = [
    "BootstrapProgress",
    "BootstrapState",
    "CallbackDeclaration",
    "ConfigError",
    "EngineHost",
    "HttpResourceLoader",
    "MapScope",
    "MissingScopeError",
    "ModuleOverlayAdapter",
    "NullBootstrapProgress",
    "OverlayAdapter",
    "OverlayConfig",
    "OverlayNode",
    "OverlaySyncError",
    "ProviderContext",
    "ProviderNode",
    "ProviderState",
    "RecordingEngine",
    "RecordingResourceLoader",
    "RecordingSuite",
    "ResourceLoadFailure",
    "ResourceLoadState",
    "ResourceLoader",
    "ScopeConfig",
    "ScopeHandle",
    "UnknownOverlayError",
    "UnsupportedFieldError",
    "__version__",
    "create_adapter",
    "load_config",
    "register",
]
