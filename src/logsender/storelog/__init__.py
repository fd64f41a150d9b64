"""StoreLog module - conversion and delivery to the downstream audit store.

Components:
- LogRecordConverter: LogEvent -> LogRecord wire format
- StoreLogService: Abstract downstream capability
- HttpStoreLogService: JSON over HTTP implementation (httpx)
- StoreLogStub: In-memory implementation with fault injection
- LogSenderClient: Binds a service to the configured logical address
"""

from logsender.storelog.schemas import LogRecord, ResultCode, StoreLogResult
from logsender.storelog.converter import LogRecordConverter
from logsender.storelog.client import (
    HttpStoreLogService,
    LogSenderClient,
    StoreLogService,
)
from logsender.storelog.stub import ErrorState, InMemoryLogStore, StoreLogStub, StubState
from logsender.storelog.config import create_log_sender_client, create_store_log_service

__all__ = [
    "LogRecord",
    "ResultCode",
    "StoreLogResult",
    "LogRecordConverter",
    "HttpStoreLogService",
    "LogSenderClient",
    "StoreLogService",
    "ErrorState",
    "InMemoryLogStore",
    "StoreLogStub",
    "StubState",
    "create_log_sender_client",
    "create_store_log_service",
]
