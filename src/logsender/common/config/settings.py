"""Configuration management - Centralized configuration for LogSender.

Provides environment-aware configuration with sensible defaults.
All configuration is loaded from environment variables with fallbacks,
or from a YAML properties file via Config.from_yaml().
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from logsender.common.config.properties import load_properties
from logsender.common.constants import AggregationConstants, StoreLogConstants
from logsender.common.exceptions import ConfigurationError


class Environment(str, Enum):
    """Application environment."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class TransportType(str, Enum):
    """Message queue backends."""
    MEMORY = "memory"
    SQS = "sqs"


class StoreLogType(str, Enum):
    """StoreLog service backends."""
    STUB = "stub"
    HTTP = "http"


def _optional_env(name: str) -> Optional[str]:
    value = os.getenv(name)
    return value if value else None


def _numeric_env(name: str, default: Union[int, float], cast=int) -> Union[int, float]:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return cast(value)
    except ValueError as e:
        raise ConfigurationError(
            f"{name} must be a number, got {value!r}",
            details={name: value},
        ) from e


@dataclass
class Config:
    """Central configuration object for LogSender.

    All settings can be overridden via environment variables prefixed with LOGSENDER_.

    Example:
        LOGSENDER_BULK_SIZE=10
        LOGSENDER_BULK_TIMEOUT_MS=60000
        LOGSENDER_TRANSPORT_TYPE=sqs
    """

    # Core settings
    environment: Environment = field(
        default_factory=lambda: Environment(
            os.getenv("LOGSENDER_ENVIRONMENT", "development")
        )
    )
    log_level: LogLevel = field(
        default_factory=lambda: LogLevel(os.getenv("LOGSENDER_LOG_LEVEL", "INFO"))
    )

    # Aggregation
    bulk_size: int = field(
        default_factory=lambda: _numeric_env(
            "LOGSENDER_BULK_SIZE", AggregationConstants.DEFAULT_BULK_SIZE
        )
    )
    bulk_timeout_ms: int = field(
        default_factory=lambda: _numeric_env(
            "LOGSENDER_BULK_TIMEOUT_MS", AggregationConstants.DEFAULT_BULK_TIMEOUT_MS
        )
    )

    # Queues
    transport_type: TransportType = field(
        default_factory=lambda: TransportType(
            os.getenv("LOGSENDER_TRANSPORT_TYPE", "memory")
        )
    )
    receive_log_message_queue: str = field(
        default_factory=lambda: os.getenv(
            "LOGSENDER_RECEIVE_LOG_MESSAGE_QUEUE", "logsender-receive"
        )
    )
    aggregated_log_message_queue: str = field(
        default_factory=lambda: os.getenv(
            "LOGSENDER_AGGREGATED_LOG_MESSAGE_QUEUE", "logsender-aggregated"
        )
    )
    aggregated_log_message_dlq: str = field(
        default_factory=lambda: os.getenv(
            "LOGSENDER_AGGREGATED_LOG_MESSAGE_DLQ", "logsender-aggregated-dlq"
        )
    )

    # AWS settings (for SQS)
    aws_region: str = field(
        default_factory=lambda: os.getenv("AWS_REGION", "us-east-1")
    )
    aws_profile: Optional[str] = field(
        default_factory=lambda: _optional_env("AWS_PROFILE")
    )

    # StoreLog service
    store_log_type: StoreLogType = field(
        default_factory=lambda: StoreLogType(
            os.getenv("LOGSENDER_STORE_LOG_TYPE", "stub")
        )
    )
    store_log_logical_address: str = field(
        default_factory=lambda: os.getenv(
            "LOGSENDER_STORE_LOG_LOGICAL_ADDRESS",
            StoreLogConstants.DEFAULT_LOGICAL_ADDRESS,
        )
    )
    store_log_endpoint_url: Optional[str] = field(
        default_factory=lambda: _optional_env("LOGSENDER_STORE_LOG_ENDPOINT_URL")
    )
    store_log_timeout_seconds: float = field(
        default_factory=lambda: _numeric_env(
            "LOGSENDER_STORE_LOG_TIMEOUT_SECONDS",
            StoreLogConstants.DEFAULT_TIMEOUT_SECONDS,
            cast=float,
        )
    )
    store_log_cert_file: Optional[str] = field(
        default_factory=lambda: _optional_env("LOGSENDER_STORE_LOG_CERT_FILE")
    )
    store_log_key_file: Optional[str] = field(
        default_factory=lambda: _optional_env("LOGSENDER_STORE_LOG_KEY_FILE")
    )
    store_log_ca_bundle: Optional[str] = field(
        default_factory=lambda: _optional_env("LOGSENDER_STORE_LOG_CA_BUNDLE")
    )

    def __post_init__(self):
        """Validate configuration after initialization."""
        try:
            self.environment = Environment(self.environment)
            self.log_level = LogLevel(self.log_level)
            self.transport_type = TransportType(self.transport_type)
            self.store_log_type = StoreLogType(self.store_log_type)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        if self.bulk_size < AggregationConstants.MIN_BULK_SIZE:
            raise ConfigurationError(
                f"bulk_size must be >= {AggregationConstants.MIN_BULK_SIZE}",
                details={"bulk_size": self.bulk_size},
            )

        if self.bulk_timeout_ms < AggregationConstants.MIN_BULK_TIMEOUT_MS:
            raise ConfigurationError(
                f"bulk_timeout_ms must be >= {AggregationConstants.MIN_BULK_TIMEOUT_MS}",
                details={"bulk_timeout_ms": self.bulk_timeout_ms},
            )

        for name in (
            "receive_log_message_queue",
            "aggregated_log_message_queue",
            "aggregated_log_message_dlq",
            "store_log_logical_address",
        ):
            if not getattr(self, name).strip():
                raise ConfigurationError(f"{name} must not be blank")

        if self.store_log_key_file and not self.store_log_cert_file:
            raise ConfigurationError(
                "LOGSENDER_STORE_LOG_KEY_FILE requires LOGSENDER_STORE_LOG_CERT_FILE",
                details={"store_log_key_file": self.store_log_key_file},
            )

        if self.store_log_type == StoreLogType.HTTP and not self.store_log_endpoint_url:
            raise ConfigurationError(
                "LOGSENDER_STORE_LOG_ENDPOINT_URL must be set when using the http StoreLog service"
            )

    @property
    def bulk_timeout_seconds(self) -> float:
        """Aggregation timeout in seconds."""
        return self.bulk_timeout_ms / 1000.0

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "Config":
        """Build a Config from a YAML properties file.

        Values in the file take precedence over environment variables.
        """
        properties = load_properties(path)
        return cls(**properties.to_config_kwargs())


# Singleton instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance.

    Returns:
        Config: The global configuration singleton.
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Reset the global configuration (for testing)."""
    global _config
    _config = None
