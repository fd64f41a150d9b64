"""Failure Router - applies a dispatch outcome to the consumed batch message."""

import logging

from logsender.common.exceptions import LogSenderException
from logsender.pipeline.outcome import Outcome, OutcomeStatus
from logsender.transport.base import MessageQueue, QueueMessage

logger = logging.getLogger(__name__)


class FailureRouter:
    """Acknowledges, dead-letters or releases batch messages.

    ACCEPTED    -> acknowledge
    REJECTED    -> send the payload verbatim to the dead-letter queue, acknowledge
    UNAVAILABLE -> release for redelivery
    """

    def __init__(self, queue: MessageQueue, dead_letter_queue: MessageQueue):
        self.queue = queue
        self.dead_letter_queue = dead_letter_queue

        self._routed = {status: 0 for status in OutcomeStatus}
        self._dropped = 0

    def route(self, message: QueueMessage, outcome: Outcome) -> None:
        self._routed[outcome.status] += 1

        if outcome.status == OutcomeStatus.ACCEPTED:
            if outcome.note:
                logger.debug(f"Batch {message.message_id} accepted: {outcome.note}")
            self.queue.acknowledge(message)
            return

        if outcome.status == OutcomeStatus.REJECTED:
            self._dead_letter(message, outcome.reason)
            return

        if message.redelivered:
            logger.warning(
                f"Batch {message.message_id} still unavailable on delivery "
                f"{message.delivery_count}, releasing for redelivery: {outcome.reason}"
            )
        else:
            logger.error(
                f"Batch {message.message_id} could not be delivered, "
                f"releasing for redelivery: {outcome.reason}"
            )
        self.queue.release(message)

    def route_exception(self, message: QueueMessage, error: Exception) -> None:
        """Handle an unexpected processing failure as permanent.

        The message is acknowledged and therefore dropped.
        """
        self._dropped += 1
        logger.error(
            f"Unexpected error processing batch {message.message_id}, "
            f"dropping it as a permanent failure: {error}",
            exc_info=not isinstance(error, LogSenderException),
        )
        self.queue.acknowledge(message)

    def _dead_letter(self, message: QueueMessage, reason: str) -> None:
        try:
            self.dead_letter_queue.send(message.body)
        except Exception as e:
            logger.error(
                f"Could not move batch {message.message_id} to {self.dead_letter_queue.name}, "
                f"releasing for redelivery: {e}"
            )
            self.queue.release(message)
            return

        logger.error(
            f"Moved batch {message.message_id} to {self.dead_letter_queue.name}: {reason}"
        )
        self.queue.acknowledge(message)

    def get_stats(self) -> dict:
        """Get router statistics."""
        return {
            "accepted": self._routed[OutcomeStatus.ACCEPTED],
            "rejected": self._routed[OutcomeStatus.REJECTED],
            "unavailable": self._routed[OutcomeStatus.UNAVAILABLE],
            "dropped": self._dropped,
        }
