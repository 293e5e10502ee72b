"""Resource loaders and locator templates."""

from overlaysync.loaders.base import ResourceLoader
from overlaysync.loaders.http import HttpResourceLoader, Installer
from overlaysync.loaders.recording import RecordingResourceLoader, resource_kind
from overlaysync.loaders.transport import RetryingTransport
from overlaysync.loaders.urls import engine_url, ui_url, visual_url

__all__ = [
    "HttpResourceLoader",
    "Installer",
    "RecordingResourceLoader",
    "ResourceLoader",
    "RetryingTransport",
    "engine_url",
    "resource_kind",
    "ui_url",
    "visual_url",
]
