"""Public contracts for overlaysync."""

from overlaysync.contracts.config import ScopeConfig
from overlaysync.contracts.engine import (
    Emitter,
    Engine,
    EngineHost,
    EventBus,
    ListenerHandle,
    UiExtension,
    VisualExtension,
)
from overlaysync.contracts.exceptions import (
    ConfigError,
    MissingScopeError,
    OverlaySyncError,
    ResourceLoadFailure,
    UnknownOverlayError,
    UnsupportedFieldError,
)
from overlaysync.contracts.overlay import (
    CallbackDeclaration,
    ModuleOverlayAdapter,
    OptionsSnapshot,
    OverlayAdapter,
    OverlayConfig,
    camel_event_name,
    lower_event_name,
)
from overlaysync.contracts.progress import BootstrapProgress, NullBootstrapProgress

__all__ = [
    "BootstrapProgress",
    "CallbackDeclaration",
    "ConfigError",
    "Emitter",
    "Engine",
    "EngineHost",
    "EventBus",
    "ListenerHandle",
    "MissingScopeError",
    "ModuleOverlayAdapter",
    "NullBootstrapProgress",
    "OptionsSnapshot",
    "OverlayAdapter",
    "OverlayConfig",
    "OverlaySyncError",
    "ResourceLoadFailure",
    "ScopeConfig",
    "UiExtension",
    "UnknownOverlayError",
    "UnsupportedFieldError",
    "VisualExtension",
    "camel_event_name",
    "lower_event_name",
]
