"""StoreLog clients - delivery of converted log records downstream."""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

import httpx
from pydantic import ValidationError

from logsender.common.constants import StoreLogConstants
from logsender.common.exceptions import (
    ConfigurationError,
    StoreLogExecutionError,
    StoreLogTransportError,
)
from logsender.storelog.schemas import LogRecord, ResultCode, StoreLogResult

logger = logging.getLogger(__name__)


class StoreLogService(ABC):
    """Abstract StoreLog capability.

    Implementations return a StoreLogResult for every call the service
    answered, and raise StoreLogTransportError when it could not be reached.
    """

    @abstractmethod
    def store_log(self, logical_address: str, records: List[LogRecord]) -> StoreLogResult:
        """Store a list of log records.

        Args:
            logical_address: Routing address of the service provider
            records: Converted log records, never empty

        Returns:
            The service result

        Raises:
            StoreLogTransportError: If the service could not be reached
        """
        pass


class HttpStoreLogService(StoreLogService):
    """JSON over HTTP StoreLog service."""

    def __init__(
        self,
        endpoint_url: str,
        timeout: float = StoreLogConstants.DEFAULT_TIMEOUT_SECONDS,
        cert_file: Optional[str] = None,
        key_file: Optional[str] = None,
        ca_bundle: Optional[str] = None,
        client: Optional[httpx.Client] = None,
    ):
        """Initialize the HTTP service.

        Args:
            endpoint_url: StoreLog endpoint
            timeout: Request timeout in seconds
            cert_file: Client certificate (PEM) for mutual TLS
            key_file: Private key for cert_file, if not bundled with it
            ca_bundle: CA bundle used to verify the server
            client: Preconfigured httpx client, mainly for tests
        """
        if key_file and not cert_file:
            raise ConfigurationError("A StoreLog key file requires a certificate file")

        self.endpoint_url = endpoint_url
        self.timeout = timeout

        if client is not None:
            self._client = client
        else:
            cert = (cert_file, key_file) if cert_file and key_file else cert_file
            self._client = httpx.Client(
                timeout=httpx.Timeout(timeout),
                cert=cert,
                verify=ca_bundle if ca_bundle else True,
            )

        logger.info(f"Initialized HttpStoreLogService: endpoint={self.endpoint_url}")

    def store_log(self, logical_address: str, records: List[LogRecord]) -> StoreLogResult:
        body = {
            "logicalAddress": logical_address,
            "log": [record.to_wire() for record in records],
        }
        try:
            response = self._client.post(self.endpoint_url, json=body)
        except httpx.HTTPError as e:
            raise StoreLogTransportError(f"StoreLog request failed: {e}") from e

        if response.status_code >= 500:
            raise StoreLogTransportError(
                f"StoreLog returned HTTP {response.status_code}"
            )

        try:
            payload = response.json()
            return StoreLogResult.model_validate(payload["result"])
        except (ValueError, KeyError, TypeError, ValidationError) as e:
            raise StoreLogTransportError(
                f"StoreLog returned an unreadable response (HTTP {response.status_code}): {e}"
            ) from e

    def close(self) -> None:
        self._client.close()


class LogSenderClient:
    """Sends converted log records to the configured StoreLog service."""

    def __init__(self, service: StoreLogService, logical_address: str):
        self.service = service
        self.logical_address = logical_address

    def send_log_messages(self, records: List[LogRecord]) -> StoreLogResult:
        """Send a batch of records in a single call.

        Returns:
            The service result. An empty batch yields an INFO result without calling the service.

        Raises:
            StoreLogExecutionError: If the service could not be reached
        """
        if not records:
            return StoreLogResult(
                result_code=ResultCode.INFO,
                result_text="No log entries supplied, not invoking storeLog",
            )

        try:
            result = self.service.store_log(self.logical_address, records)
        except StoreLogTransportError as e:
            raise StoreLogExecutionError(str(e)) from e

        if result.result_code == ResultCode.OK and logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"Successfully sent {len(records)} log entries for ids: "
                f"{', '.join(record.log_id for record in records)}"
            )
        return result
