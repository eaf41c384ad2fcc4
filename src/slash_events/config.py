"""Settings for the slash-events extension."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Mapping

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigurationError

ENV_PREFIX = "SLASH_EVENTS_"


class ExtensionSettings(BaseModel):
    """Tunable behaviour of the event commands."""

    listener_id_length: int = Field(
        default=11,
        ge=6,
        le=32,
        description="Number of base36 characters in generated listener ids",
    )
    stringify_arguments: bool = Field(
        default=False,
        description="If True projected event arguments are bound as text instead of raw values.",
    )
    catalog_path: Path | None = Field(
        default=None,
        description="Optional YAML file overriding the built-in event catalog",
    )

    @field_validator("catalog_path")
    @classmethod
    def validate_catalog_path(cls, value: Path | None) -> Path | None:
        if value is not None and not value.is_file():
            raise ValueError(f"Event catalog file not found: {value}")
        return value


def _env_overrides(env: Mapping[str, str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for name in ExtensionSettings.model_fields:
        key = f"{ENV_PREFIX}{name.upper()}"
        if key in env and env[key] != "":
            overrides[name] = env[key]
    return overrides


def load_settings(
    path: Path | None = None, env: Mapping[str, str] | None = None
) -> ExtensionSettings:
    """Build settings from an optional YAML file plus ``SLASH_EVENTS_*`` variables."""

    raw: Dict[str, Any] = {}
    if path is not None:
        import yaml

        if not path.exists():
            raise ConfigurationError(f"Settings file not found: {path}")
        with path.open("r", encoding="utf-8") as handle:
            try:
                data = yaml.safe_load(handle) or {}
            except yaml.YAMLError as exc:
                raise ConfigurationError(f"Invalid YAML in settings file {path}") from exc
        if not isinstance(data, Mapping):
            raise ConfigurationError("Settings file must contain a mapping")
        raw.update(data)

    raw.update(_env_overrides(os.environ if env is None else env))

    try:
        return ExtensionSettings.model_validate(raw)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid extension settings: {exc}") from exc


__all__ = ["ENV_PREFIX", "ExtensionSettings", "load_settings"]
