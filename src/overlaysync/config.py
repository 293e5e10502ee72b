"""Scope configuration loading."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from overlaysync.contracts.config import ScopeConfig
from overlaysync.contracts.exceptions import ConfigError


def load_config(path: str | Path) -> ScopeConfig:
    """Read a JSON document into a :class:`ScopeConfig`.

    Raises:
        ConfigError: The file cannot be read, is not JSON, or fails validation.
    """
    config_path = Path(path).expanduser().resolve()

    try:
        raw_payload: Any = json.loads(config_path.read_text(encoding="utf-8"))
        return ScopeConfig.model_validate(raw_payload)
    except OSError as exc:
        raise ConfigError(f"failed reading config file: {config_path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON in config file: {config_path}") from exc
    except ValidationError as exc:
        raise ConfigError(f"invalid config: {exc}") from exc
