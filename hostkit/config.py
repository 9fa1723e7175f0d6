"""Configuration management for the extension base library."""

from __future__ import annotations

import json
import os
from copy import deepcopy
from pathlib import Path
from typing import Any

import tomllib
from pydantic import BaseModel, ConfigDict, Field

from .exceptions import ConfigError, wrap_exception
from .logger import DEFAULT_FORMAT

ENV_PREFIX = "EXTBASE__"

DAY_IN_SECONDS = 24 * 60 * 60


class NoticeConfig(BaseModel):
    """Admin notice behaviour."""

    model_config = ConfigDict(extra="allow")

    dedup_ttl_seconds: int = Field(default=DAY_IN_SECONDS, ge=1)


class AdminConfig(BaseModel):
    """Admin screen integration settings."""

    model_config = ConfigDict(extra="allow")

    capability: str = "manage_options"
    base_url: str = "http://localhost"
    stylesheet: str = "css/activation-message.css"
    documentation_title: str = "Documentation"


class MailConfig(BaseModel):
    """Outbound mail settings."""

    model_config = ConfigDict(extra="allow")

    content_type: str = "text/html"


class StorageConfig(BaseModel):
    """File locations for the file-backed option store and cache."""

    model_config = ConfigDict(extra="allow")

    options_path: str = ".extbase/options.json"
    cache_dir: str = ".extbase/cache"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(extra="allow")

    level: str = "INFO"
    format: str = DEFAULT_FORMAT
    json_format: bool = False


class ExtensionSettings(BaseModel):
    """Top-level settings model."""

    model_config = ConfigDict(extra="allow")

    notices: NoticeConfig = Field(default_factory=NoticeConfig)
    admin: AdminConfig = Field(default_factory=AdminConfig)
    mail: MailConfig = Field(default_factory=MailConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigManager:
    """Load and validate settings from TOML files."""

    def __init__(self, defaults: ExtensionSettings | None = None) -> None:
        self._defaults = defaults or ExtensionSettings()

    @property
    def defaults(self) -> ExtensionSettings:
        """Return default settings."""
        return self._defaults

    def load(self, path: str | Path) -> ExtensionSettings:
        """Load TOML file and merge with defaults before validation.

        Raises:
            ConfigError: If the file cannot be read or is not valid TOML.
        """
        config_path = Path(path)
        try:
            with config_path.open("rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise wrap_exception(
                exc,
                ConfigError,
                f"Cannot read configuration file {config_path}",
                context={"path": str(config_path)},
            ) from exc

        return self.from_dict(data)

    def from_dict(self, data: dict[str, Any]) -> ExtensionSettings:
        """Validate settings from dict, merged onto defaults and env vars.

        Raises:
            pydantic.ValidationError: If a value violates the schema.
        """
        merged = _deep_merge(self._defaults.model_dump(mode="python"), data)
        return ExtensionSettings.model_validate(_apply_env_overrides(merged))


def load_settings(path: str | Path | None = None) -> ExtensionSettings:
    """Return settings from ``path``, or the defaults plus env overrides."""
    manager = ConfigManager()
    if path is None:
        return manager.from_dict({})
    return manager.load(path)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = deepcopy(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply env overrides using EXTBASE__SECTION__KEY style keys."""
    overridden = deepcopy(config)

    for key, raw_value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue

        keys = [part.lower() for part in key[len(ENV_PREFIX) :].split("__") if part]
        if not keys:
            continue

        _set_nested(overridden, keys, _parse_env_value(raw_value))

    return overridden


def _set_nested(root: dict[str, Any], keys: list[str], value: Any) -> None:
    current: dict[str, Any] = root
    for key in keys[:-1]:
        child = current.get(key)
        if not isinstance(child, dict):
            child = {}
            current[key] = child
        current = child
    current[keys[-1]] = value


def _parse_env_value(raw: str) -> Any:
    lowered = raw.strip().lower()
    if lowered in {"true", "false"}:
        return lowered == "true"

    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


__all__ = [
    "AdminConfig",
    "ConfigManager",
    "DAY_IN_SECONDS",
    "ExtensionSettings",
    "LoggingConfig",
    "MailConfig",
    "NoticeConfig",
    "StorageConfig",
    "load_settings",
]
