"""Configuration models and loading for llmgate."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CONFIG_FILE = "llmgate.yaml"

# Environment variable -> (section, field).
ENV_BINDINGS: dict[str, tuple[str, str]] = {
    "OPEN_AI_KEY": ("provider", "api_key"),
    "OPEN_MODEL_PREF": ("provider", "chat_model"),
    "LLMGATE_LOG_LEVEL": ("logging", "level"),
}


class ProviderConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    vendor: Literal["openai", "local-hash"] = "openai"
    api_key: str = Field(default="", repr=False)
    chat_model: str | None = None
    embedding_model: str = "text-embedding-ada-002"
    embedding_chunk_limit: int = Field(default=1000, gt=0)
    embedding_workers: int | None = Field(default=None, gt=0)
    base_url: str = "https://api.openai.com/v1"
    timeout_seconds: float = Field(default=120.0, gt=0)


class LoggingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: str = "INFO"


class GateConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    data = yaml.safe_load(path.read_text())
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for env_name, (section, key) in ENV_BINDINGS.items():
        value = environ.get(env_name)
        if value:
            overrides.setdefault(section, {})[key] = value
    return overrides


def load_effective_config(
    config_path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
    runtime_override: dict[str, Any] | None = None,
) -> GateConfig:
    """Load config with precedence runtime > environment > YAML file > defaults."""
    path = Path(config_path) if config_path is not None else Path(DEFAULT_CONFIG_FILE)
    env = os.environ if environ is None else environ

    merged: dict[str, Any] = {}
    file_config = _load_yaml(path)
    if file_config:
        merged = _deep_merge(merged, file_config)
    env_config = _env_overrides(env)
    if env_config:
        merged = _deep_merge(merged, env_config)
    if runtime_override:
        merged = _deep_merge(merged, runtime_override)

    return GateConfig.model_validate(merged)
