"""StoreLog service configuration and initialization."""

import logging
from typing import Optional

from logsender.common.config import Config, StoreLogType, get_config
from logsender.storelog.client import HttpStoreLogService, LogSenderClient, StoreLogService
from logsender.storelog.stub import StoreLogStub

logger = logging.getLogger(__name__)


def create_store_log_service(config: Optional[Config] = None) -> StoreLogService:
    """Factory method to create the StoreLog service.

    Args:
        config: Configuration to use (default: global config)

    Returns:
        Configured StoreLogService instance
    """
    config = config or get_config()

    if config.store_log_type == StoreLogType.HTTP:
        return HttpStoreLogService(
            endpoint_url=config.store_log_endpoint_url,
            timeout=config.store_log_timeout_seconds,
            cert_file=config.store_log_cert_file,
            key_file=config.store_log_key_file,
            ca_bundle=config.store_log_ca_bundle,
        )

    logger.warning("Using in-memory StoreLog stub, log records will not leave this process")
    return StoreLogStub()


def create_log_sender_client(
    config: Optional[Config] = None,
    service: Optional[StoreLogService] = None,
) -> LogSenderClient:
    """Factory method to create a client bound to the configured logical address."""
    config = config or get_config()
    return LogSenderClient(
        service=service or create_store_log_service(config),
        logical_address=config.store_log_logical_address,
    )
