"""In-memory StoreLog service with fault injection.

Used for local runs and tests in place of the real service. StubState
toggles the failure modes the pipeline has to handle:
- inactive: calls raise StoreLogTransportError (service unreachable)
- fake_error: calls return ERROR
- error_state: calls return ERROR or VALIDATION_ERROR
- latency_ms: calls sleep before answering
"""

import logging
import threading
import time
from enum import Enum
from typing import List, Optional

from logsender.common.constants import StoreLogConstants
from logsender.common.exceptions import StoreLogTransportError
from logsender.storelog.client import StoreLogService
from logsender.storelog.schemas import LogRecord, ResultCode, StoreLogResult

logger = logging.getLogger(__name__)


class ErrorState(str, Enum):
    NONE = "NONE"
    ERROR = "ERROR"
    VALIDATION = "VALIDATION"


class StubState:
    """Mutable fault-injection switches shared with the stub."""

    def __init__(self):
        self._lock = threading.Lock()
        self.active = True
        self.fake_error = False
        self.error_state = ErrorState.NONE
        self.latency_ms = 0
        self._batch_count = 0

    def increment_batch_count(self) -> None:
        with self._lock:
            self._batch_count += 1

    def reset_batch_count(self) -> None:
        with self._lock:
            self._batch_count = 0

    @property
    def batch_count(self) -> int:
        with self._lock:
            return self._batch_count

    def reset(self) -> None:
        """Back to a healthy, empty state."""
        self.active = True
        self.fake_error = False
        self.error_state = ErrorState.NONE
        self.latency_ms = 0
        self.reset_batch_count()


class InMemoryLogStore:
    """Thread-safe list of stored log records."""

    def __init__(self):
        self._lock = threading.Lock()
        self._records: List[LogRecord] = []

    def add(self, record: LogRecord) -> None:
        with self._lock:
            self._records.append(record)

    def get_all(self) -> List[LogRecord]:
        with self._lock:
            return list(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class StoreLogStub(StoreLogService):
    """StoreLog service that keeps records in memory."""

    def __init__(self, store: Optional[InMemoryLogStore] = None, state: Optional[StubState] = None):
        self.store = store if store is not None else InMemoryLogStore()
        self.state = state if state is not None else StubState()

    def store_log(self, logical_address: str, records: List[LogRecord]) -> StoreLogResult:
        logger.info(f"StoreLog stub called with {len(records)} log entries")

        if self.state.latency_ms > 0:
            time.sleep(self.state.latency_ms / 1000.0)

        if not self.state.active:
            raise StoreLogTransportError("Stub is faking unaccessible StoreLog service")

        if self.state.fake_error:
            return StoreLogResult(result_code=ResultCode.ERROR, result_text="Stub is faking errors.")

        if self.state.error_state != ErrorState.NONE:
            code = (
                ResultCode.VALIDATION_ERROR
                if self.state.error_state == ErrorState.VALIDATION
                else ResultCode.ERROR
            )
            return StoreLogResult(
                result_code=code,
                result_text=f"Stub is triggering error: {self.state.error_state.value}",
            )

        if any(record.system.system_id == StoreLogConstants.INVALID_SYSTEM_ID for record in records):
            logger.info('StoreLog stub called with artificial "invalid" log entries')
            return StoreLogResult(
                result_code=ResultCode.VALIDATION_ERROR,
                result_text="Invalid log ID",
            )

        self.state.increment_batch_count()
        for record in records:
            self.store.add(record)
            logger.debug(f"Stored log item with id: {record.log_id}")

        logger.info(f"Successfully stored {len(records)} log entries")
        return StoreLogResult.ok()
