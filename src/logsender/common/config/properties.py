"""YAML properties file for LogSender.

The file mirrors the deployment layout of the service:

    aggregation:
      bulk_size: 10
      bulk_timeout: 60000        # milliseconds
    queue:
      transport_type: sqs
      receive_log_message_endpoint: logsender-receive
      receive_aggregated_log_message_endpoint: logsender-aggregated
      receive_aggregated_log_message_dlq: logsender-aggregated-dlq
    store_log:
      type: http
      logical_address: SE165565594230-1000
      endpoint_url: https://storelog.example.org/storelog
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from logsender.common.constants import AggregationConstants
from logsender.common.exceptions import ConfigurationError


def _not_blank(value: Optional[str]) -> Optional[str]:
    if value is not None and not value.strip():
        raise ValueError("must not be blank")
    return value


class AggregationProperties(BaseModel):
    bulk_size: int = Field(ge=AggregationConstants.MIN_BULK_SIZE)
    bulk_timeout: int = Field(
        ge=AggregationConstants.MIN_BULK_TIMEOUT_MS,
        description="Aggregation timeout in milliseconds",
    )


class QueueProperties(BaseModel):
    transport_type: Optional[str] = None
    receive_log_message_endpoint: str
    receive_aggregated_log_message_endpoint: str
    receive_aggregated_log_message_dlq: str

    @field_validator(
        "receive_log_message_endpoint",
        "receive_aggregated_log_message_endpoint",
        "receive_aggregated_log_message_dlq",
    )
    @classmethod
    def check_not_blank(cls, value: str) -> str:
        return _not_blank(value)


class StoreLogProperties(BaseModel):
    type: Optional[str] = None
    logical_address: str
    endpoint_url: Optional[str] = None
    timeout_seconds: Optional[float] = Field(default=None, gt=0)
    cert_file: Optional[str] = None
    key_file: Optional[str] = None
    ca_bundle: Optional[str] = None

    @field_validator("logical_address", "endpoint_url")
    @classmethod
    def check_not_blank(cls, value: Optional[str]) -> Optional[str]:
        return _not_blank(value)


class AwsProperties(BaseModel):
    region: Optional[str] = None
    profile: Optional[str] = None


class LogSenderProperties(BaseModel):
    """Validated contents of a LogSender properties file."""

    aggregation: AggregationProperties
    queue: QueueProperties
    store_log: StoreLogProperties
    aws: AwsProperties = Field(default_factory=AwsProperties)

    def to_config_kwargs(self) -> Dict[str, Any]:
        """Map properties onto Config constructor arguments.

        Unset optional values are left out so Config falls back to the environment.
        """
        kwargs: Dict[str, Any] = {
            "bulk_size": self.aggregation.bulk_size,
            "bulk_timeout_ms": self.aggregation.bulk_timeout,
            "receive_log_message_queue": self.queue.receive_log_message_endpoint,
            "aggregated_log_message_queue": self.queue.receive_aggregated_log_message_endpoint,
            "aggregated_log_message_dlq": self.queue.receive_aggregated_log_message_dlq,
            "store_log_logical_address": self.store_log.logical_address,
        }
        optional = {
            "transport_type": self.queue.transport_type,
            "store_log_type": self.store_log.type,
            "store_log_endpoint_url": self.store_log.endpoint_url,
            "store_log_timeout_seconds": self.store_log.timeout_seconds,
            "store_log_cert_file": self.store_log.cert_file,
            "store_log_key_file": self.store_log.key_file,
            "store_log_ca_bundle": self.store_log.ca_bundle,
            "aws_region": self.aws.region,
            "aws_profile": self.aws.profile,
        }
        kwargs.update({k: v for k, v in optional.items() if v is not None})
        return kwargs


def load_properties(path: Union[str, Path]) -> LogSenderProperties:
    """Load and validate a properties file.

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Properties file not found: {path}")

    with open(path, "r") as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Could not parse properties file {path}: {e}") from e

    try:
        return LogSenderProperties.model_validate(raw_config or {})
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid properties file {path}",
            details={"errors": e.errors(include_url=False)},
        ) from e
