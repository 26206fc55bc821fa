"""Node configuration loading."""

from dsnode.config.node_config import (
    LoggingSettings,
    LogLevel,
    NodeConfig,
    NodeConfigError,
    load_node_config,
)

__all__ = [
    "LogLevel",
    "LoggingSettings",
    "NodeConfig",
    "NodeConfigError",
    "load_node_config",
]
