"""Common utilities - logging, config, exceptions."""

from logsender.common.logging import get_logger, configure_logging
from logsender.common.config import Config, get_config, reset_config
from logsender.common.exceptions import (
    LogSenderException,
    ConfigurationError,
    PermanentError,
    MalformedEventError,
    NoResourcesError,
    BatchValidationError,
    InvalidCivicNumberError,
    TemporaryError,
    StoreLogExecutionError,
    StoreLogTransportError,
    TransportError,
)

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    # Config
    "Config",
    "get_config",
    "reset_config",
    # Exceptions
    "LogSenderException",
    "ConfigurationError",
    "PermanentError",
    "MalformedEventError",
    "NoResourcesError",
    "BatchValidationError",
    "InvalidCivicNumberError",
    "TemporaryError",
    "StoreLogExecutionError",
    "StoreLogTransportError",
    "TransportError",
]
