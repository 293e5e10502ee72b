"""Shared test fixtures for overlaysync tests."""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path

import pytest

from overlaysync.contracts.config import ScopeConfig
from overlaysync.engines.recording import RecordingSuite
from overlaysync.loaders.recording import RecordingResourceLoader
from overlaysync.runtime.bootstrap import ResourceLoadState


@pytest.fixture(autouse=True)
def _reset_shared_load_state() -> Iterator[None]:
    ResourceLoadState.shared().reset()
    yield
    ResourceLoadState.shared().reset()


@pytest.fixture
def scope_config() -> ScopeConfig:
    """A minimal valid ScopeConfig."""
    return ScopeConfig(credential_key="test-key")


@pytest.fixture
def load_state() -> ResourceLoadState:
    """An isolated engine load state."""
    return ResourceLoadState()


@pytest.fixture
def suite() -> RecordingSuite:
    return RecordingSuite()


@pytest.fixture
def recording_loader(suite: RecordingSuite) -> RecordingResourceLoader:
    return RecordingResourceLoader(suite)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Write a scope config JSON file and return its path."""
    path = tmp_path / "overlaysync.json"
    path.write_text(
        json.dumps({"credential_key": "abc123", "engine_version": "1.4.15", "protocol": "http"}),
        encoding="utf-8",
    )
    return path
