"""Message queue abstraction.

Consumers receive messages, process them, and then either acknowledge them
(consumed, never seen again) or release them back to the queue, which
redelivers them later according to its redelivery policy. A message neither
acknowledged nor released is redelivered by queues that support visibility
timeouts.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class QueueMessage:
    """A message received from a queue."""
    body: str
    message_id: str
    receipt: Optional[Any] = None
    delivery_count: int = 1
    attributes: Dict[str, Any] = field(default_factory=dict)

    @property
    def redelivered(self) -> bool:
        """True if this message has been delivered before."""
        return self.delivery_count > 1


class MessageQueue(ABC):
    """Abstract base class for message queues."""

    name: str

    @abstractmethod
    def send(self, body: str) -> str:
        """Send a message.

        Returns:
            The message id

        Raises:
            TransportError: If the message could not be sent
        """
        pass

    @abstractmethod
    def receive(self, max_messages: int = 1, wait_seconds: float = 0.0) -> List[QueueMessage]:
        """Receive up to max_messages, waiting at most wait_seconds for the first one."""
        pass

    @abstractmethod
    def acknowledge(self, message: QueueMessage) -> None:
        """Mark a message as consumed."""
        pass

    @abstractmethod
    def release(self, message: QueueMessage) -> None:
        """Hand a message back for redelivery."""
        pass
