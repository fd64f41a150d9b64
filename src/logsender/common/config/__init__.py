"""Configuration module - environment and YAML based settings."""

from logsender.common.config.settings import (
    Config,
    Environment,
    LogLevel,
    StoreLogType,
    TransportType,
    get_config,
    reset_config,
)
from logsender.common.config.properties import (
    LogSenderProperties,
    load_properties,
)

__all__ = [
    "Config",
    "Environment",
    "LogLevel",
    "StoreLogType",
    "TransportType",
    "get_config",
    "reset_config",
    "LogSenderProperties",
    "load_properties",
]
