"""
govkit -- Configuration System

All configuration is Pydantic-validated and loaded from:
1. default.yaml (defaults)
2. Environment variables (overrides)

Every tunable parameter of a DAO instance lives here.
"""

from __future__ import annotations

import enum
import logging
import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ─── Sub-configs ──────────────────────────────────────────────────


class DuplicateResourcePolicy(enum.StrEnum):
    """What happens when a resource is registered for an already-bound kind."""

    REPLACE = "replace"
    REJECT = "reject"


class DAOConfig(BaseModel):
    name: str = "dao"
    description: str = ""
    duplicate_resource_policy: DuplicateResourcePolicy = DuplicateResourcePolicy.REPLACE
    # When False, the core never calls its event sink
    emit_events: bool = True

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("DAO name must not be blank")
        return value

    @field_validator("duplicate_resource_policy", mode="before")
    @classmethod
    def _policy_lowercase(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: Literal["console", "json"] = "console"

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.strip().upper()
        if value not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level {value!r}")
        return value


# ─── Root Configuration ──────────────────────────────────────────

_ENV_PREFIX = "GOVKIT_"
_ENV_NESTED_DELIMITER = "__"


class GovkitConfig(BaseSettings):
    """
    Root configuration. Loads from YAML, overridable by env vars.
    """

    model_config = SettingsConfigDict(
        env_prefix=_ENV_PREFIX,
        env_nested_delimiter=_ENV_NESTED_DELIMITER,
        extra="ignore",
    )

    dao: DAOConfig = Field(default_factory=DAOConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _env_overrides() -> dict[str, Any]:
    """
    Nest every GOVKIT_SECTION__FIELD env var into {"section": {"field": value}}
    so it can be merged over values read from YAML.
    """
    raw: dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(_ENV_PREFIX) or _ENV_NESTED_DELIMITER not in key:
            continue
        *sections, leaf = key[len(_ENV_PREFIX):].lower().split(_ENV_NESTED_DELIMITER)
        node = raw
        for section in sections:
            child = node.setdefault(section, {})
            if not isinstance(child, dict):
                break
            node = child
        else:
            node[leaf] = value
    return raw


def load_config(config_path: str | Path | None = None) -> GovkitConfig:
    """
    Load configuration from YAML file, then apply environment variable overrides.
    """
    raw: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                raw = yaml.safe_load(f) or {}

    # Init kwargs beat env in pydantic-settings, so env is merged in explicitly
    raw = _deep_merge(raw, _env_overrides())

    return GovkitConfig(**raw)
