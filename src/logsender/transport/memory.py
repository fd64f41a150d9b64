"""In-memory message queue with broker-style redelivery."""

import heapq
import logging
import threading
import time
from collections import deque
from dataclasses import dataclass
from itertools import count
from typing import Deque, Dict, List, Optional, Tuple
from uuid import uuid4

from logsender.common.constants import TransportConstants
from logsender.transport.base import MessageQueue, QueueMessage

logger = logging.getLogger(__name__)


@dataclass
class _Envelope:
    message_id: str
    body: str
    delivery_count: int = 0


class InMemoryMessageQueue(MessageQueue):
    """Thread-safe in-process queue.

    Released messages are redelivered after an exponentially growing delay.
    A message released after max_redeliveries redeliveries is moved to the
    dead-letter queue if one is configured, otherwise discarded.
    """

    def __init__(
        self,
        name: str,
        max_redeliveries: int = TransportConstants.MAX_REDELIVERIES,
        redelivery_delay: float = TransportConstants.REDELIVERY_DELAY_SECONDS,
        backoff_multiplier: float = TransportConstants.BACKOFF_MULTIPLIER,
        max_redelivery_delay: float = TransportConstants.MAX_REDELIVERY_DELAY_SECONDS,
        dead_letter_queue: Optional[MessageQueue] = None,
    ):
        self.name = name
        self.max_redeliveries = max_redeliveries
        self.redelivery_delay = redelivery_delay
        self.backoff_multiplier = backoff_multiplier
        self.max_redelivery_delay = max_redelivery_delay
        self.dead_letter_queue = dead_letter_queue

        self._condition = threading.Condition()
        self._ready: Deque[_Envelope] = deque()
        self._delayed: List[Tuple[float, int, _Envelope]] = []
        self._in_flight: Dict[str, _Envelope] = {}
        self._sequence = count()

    def send(self, body: str) -> str:
        envelope = _Envelope(message_id=str(uuid4()), body=body)
        with self._condition:
            self._ready.append(envelope)
            self._condition.notify()
        return envelope.message_id

    def receive(self, max_messages: int = 1, wait_seconds: float = 0.0) -> List[QueueMessage]:
        deadline = time.monotonic() + wait_seconds
        with self._condition:
            while True:
                self._promote_due()
                if self._ready:
                    break
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return []
                if self._delayed:
                    remaining = min(remaining, max(self._delayed[0][0] - time.monotonic(), 0.0))
                self._condition.wait(timeout=remaining)

            messages = []
            while self._ready and len(messages) < max_messages:
                envelope = self._ready.popleft()
                envelope.delivery_count += 1
                self._in_flight[envelope.message_id] = envelope
                messages.append(QueueMessage(
                    body=envelope.body,
                    message_id=envelope.message_id,
                    receipt=envelope.message_id,
                    delivery_count=envelope.delivery_count,
                ))
            return messages

    def acknowledge(self, message: QueueMessage) -> None:
        with self._condition:
            self._in_flight.pop(message.message_id, None)

    def release(self, message: QueueMessage) -> None:
        with self._condition:
            envelope = self._in_flight.pop(message.message_id, None)
            if envelope is None:
                return

            if envelope.delivery_count > self.max_redeliveries:
                exhausted = envelope
            else:
                exhausted = None
                due = time.monotonic() + self.redelivery_delay_for(envelope.delivery_count)
                heapq.heappush(self._delayed, (due, next(self._sequence), envelope))
                self._condition.notify()

        if exhausted is not None:
            self._exhaust(exhausted)

    def redelivery_delay_for(self, delivery_count: int) -> float:
        """Seconds to hold back a message released after its delivery_count-th delivery."""
        return min(
            self.redelivery_delay * self.backoff_multiplier ** (delivery_count - 1),
            self.max_redelivery_delay,
        )

    def _exhaust(self, envelope: _Envelope) -> None:
        if self.dead_letter_queue is not None:
            logger.error(
                f"Message {envelope.message_id} on {self.name} exhausted "
                f"{self.max_redeliveries} redeliveries, moving to {self.dead_letter_queue.name}"
            )
            self.dead_letter_queue.send(envelope.body)
        else:
            logger.error(
                f"Message {envelope.message_id} on {self.name} exhausted "
                f"{self.max_redeliveries} redeliveries and was discarded"
            )

    def _promote_due(self) -> None:
        now = time.monotonic()
        while self._delayed and self._delayed[0][0] <= now:
            _, _, envelope = heapq.heappop(self._delayed)
            self._ready.append(envelope)

    def bodies(self) -> List[str]:
        """Bodies waiting for delivery, including scheduled redeliveries."""
        with self._condition:
            return [e.body for e in self._ready] + [e.body for _, _, e in sorted(self._delayed)]

    @property
    def size(self) -> int:
        """Messages waiting for delivery, including scheduled redeliveries."""
        with self._condition:
            return len(self._ready) + len(self._delayed)

    @property
    def in_flight_count(self) -> int:
        with self._condition:
            return len(self._in_flight)
