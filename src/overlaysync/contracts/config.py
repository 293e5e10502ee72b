"""Configuration contracts."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class ScopeConfig(BaseModel):
    """Everything a root scope needs to locate and load the engine resources."""

    credential_key: str
    engine_version: str = "1.4.15"
    ui_version: str = "1.0"
    extension_version: str = "1.3.2"
    protocol: Literal["http", "https"] = "https"
    resource_host: str = "webapi.amap.com"
    load_timeout: float | None = Field(default=None, gt=0)

    model_config = {"frozen": True}

    @field_validator("credential_key")
    @classmethod
    def validate_credential_key(cls, value: str) -> str:
        key = value.strip()
        if not key:
            raise ValueError("credential_key must be non-empty")
        return key
