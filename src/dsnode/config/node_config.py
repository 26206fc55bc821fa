"""Node config models and loading helpers."""

from __future__ import annotations

import json
from enum import StrEnum
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError


class LogLevel(StrEnum):
    """Supported logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class LoggingSettings(BaseModel):
    """Logging configuration; output always goes to stderr."""

    model_config = ConfigDict(extra="forbid")

    level: LogLevel = LogLevel.INFO
    rich_tracebacks: bool = True


class NodeConfig(BaseModel):
    """Root node configuration model."""

    model_config = ConfigDict(extra="forbid")

    behavior: str = "echo"
    logging: LoggingSettings = LoggingSettings()


class NodeConfigError(RuntimeError):
    """Raised when node config cannot be decoded or validated."""


def _decode_config_payload(path: Path) -> dict[str, object]:
    """Decode node config payload from JSON or YAML.

    Args:
        path: Config file path.

    Returns:
        Parsed mapping payload.

    Raises:
        NodeConfigError: If decode fails or payload is not an object.
    """
    raw = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise NodeConfigError(f"Invalid node config JSON: {exc}") from exc
    else:
        try:
            payload = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise NodeConfigError(f"Invalid node config YAML: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise NodeConfigError("Invalid node config payload: root must be an object")
    return payload


def load_node_config(path: Path | None) -> NodeConfig:
    """Load node config from disk, defaulting when missing.

    Args:
        path: Config file path, or None for defaults.

    Returns:
        Parsed config payload, or defaults when file does not exist.

    Raises:
        NodeConfigError: If payload decode or validation fails.
    """
    if path is None or not path.exists():
        return NodeConfig()
    payload = _decode_config_payload(path)
    try:
        return NodeConfig.model_validate(payload)
    except ValidationError as exc:
        raise NodeConfigError(f"Invalid node config payload: {exc}") from exc
