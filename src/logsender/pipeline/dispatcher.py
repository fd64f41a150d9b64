"""Batch Dispatcher - sends one batch downstream and classifies the result."""

import logging
from typing import List, Optional

from logsender.common.exceptions import BatchValidationError, StoreLogExecutionError
from logsender.common.logging import correlation_scope
from logsender.pipeline.codec import decode_events
from logsender.pipeline.outcome import Outcome
from logsender.storelog.client import LogSenderClient
from logsender.storelog.converter import LogRecordConverter
from logsender.storelog.schemas import LogRecord, ResultCode

logger = logging.getLogger(__name__)


class BatchDispatcher:
    """Decodes, converts and delivers a batch payload in a single downstream call.

    Result interpretation:
    - transport failure, unknown result code -> UNAVAILABLE (retry)
    - OK, INFO -> ACCEPTED
    - ERROR, VALIDATION_ERROR, unparsable batch, invalid patient id -> REJECTED
    """

    def __init__(self, client: LogSenderClient, converter: Optional[LogRecordConverter] = None):
        self.client = client
        self.converter = converter or LogRecordConverter()

    def dispatch(self, batch_payload: str) -> Outcome:
        """Dispatch one encoded batch payload.

        Never retries and never raises for the failures listed above.
        """
        with correlation_scope():
            try:
                records = self._convert(batch_payload)
            except BatchValidationError as e:
                logger.error(f"Unparsable log message batch, moving batch to DLQ: {e.message}")
                return Outcome.rejected(f"Unparsable log message batch: {e.message}")

            if not records:
                return Outcome.accepted(note="Batch contained no log events, nothing sent")

            try:
                result = self.client.send_log_messages(records)
            except StoreLogExecutionError as e:
                logger.warning(f"Call to send log message batch caused an error. Will retry: {e.message}")
                return Outcome.unavailable(e.message)

            code = result.result_code
            text = result.result_text or ""

            if code == ResultCode.OK:
                logger.info(f"StoreLog accepted batch of {len(records)} log events")
                return Outcome.accepted()

            if code in (ResultCode.ERROR, ResultCode.VALIDATION_ERROR):
                logger.error(
                    f"StoreLog rejected log message batch with {code.value}, batch will be "
                    f"moved to DLQ. Result text: '{text}'"
                )
                return Outcome.rejected(
                    f"StoreLog rejected log message batch with error: {text}"
                )

            if code == ResultCode.INFO:
                logger.warning(
                    f"Warning of type INFO occurred when sending log message batch: '{text}'. "
                    f"Will not requeue."
                )
                return Outcome.accepted(note=text)

            logger.warning(f"Unknown StoreLog result code {code!r}, batch will be retried")
            return Outcome.unavailable(f"Unknown result code {code}: {text}")

    def _convert(self, batch_payload: str) -> List[LogRecord]:
        events = decode_events(batch_payload)
        return [self.converter.convert(event) for event in events]
