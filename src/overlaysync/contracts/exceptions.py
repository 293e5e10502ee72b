"""Exception hierarchy for overlaysync."""

from __future__ import annotations


class OverlaySyncError(Exception):
    """Base exception for all overlaysync errors."""


class ConfigError(OverlaySyncError):
    """Configuration loading or validation failure."""


class MissingScopeError(OverlaySyncError):
    """A node was constructed without a ready ancestor scope or container."""

    def __init__(self, node_name: str, *, parent_name: str = "MapScope") -> None:
        super().__init__(
            f"{node_name} cannot be used as a standalone. {node_name} must be mounted under a ready {parent_name}."
        )
        self.node_name = node_name
        self.parent_name = parent_name


class UnsupportedFieldError(OverlaySyncError):
    """The engine rejected a setter call.

    The runtime never raises or catches this itself; engines raise it and it
    propagates to the caller unmodified.
    """

    def __init__(self, message: str, *, field: str) -> None:
        super().__init__(message)
        self.field = field


class ResourceLoadFailure(OverlaySyncError):
    """An engine or extension resource failed to load or timed out."""

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class UnknownOverlayError(OverlaySyncError, ValueError):
    """No overlay adapter is registered under the requested name."""
