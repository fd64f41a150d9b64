"""Message queue configuration and initialization."""

import logging
from dataclasses import dataclass
from typing import Optional

from logsender.common.config import Config, TransportType, get_config
from logsender.transport.base import MessageQueue
from logsender.transport.memory import InMemoryMessageQueue
from logsender.transport.sqs import SqsMessageQueue

logger = logging.getLogger(__name__)


@dataclass
class QueueSet:
    """The three destinations the pipeline is wired to."""
    receive: MessageQueue
    aggregated: MessageQueue
    dead_letter: MessageQueue


def create_message_queue(
    name: str,
    config: Optional[Config] = None,
    dead_letter_queue: Optional[MessageQueue] = None,
) -> MessageQueue:
    """Factory method to create a single message queue.

    Args:
        name: Queue name
        config: Configuration to use (default: global config)
        dead_letter_queue: Destination for in-memory messages exhausting their
            redeliveries. SQS queues rely on their redrive policy instead.
    """
    config = config or get_config()

    if config.transport_type == TransportType.SQS:
        return SqsMessageQueue(
            name=name,
            region=config.aws_region,
            aws_profile=config.aws_profile,
        )

    return InMemoryMessageQueue(name=name, dead_letter_queue=dead_letter_queue)


def create_queues(config: Optional[Config] = None) -> QueueSet:
    """Create the inbound, aggregated and dead-letter queues."""
    config = config or get_config()

    if config.transport_type == TransportType.MEMORY:
        logger.warning("Using in-memory queues, messages do not survive a restart")

    dead_letter = create_message_queue(config.aggregated_log_message_dlq, config)
    return QueueSet(
        receive=create_message_queue(config.receive_log_message_queue, config),
        aggregated=create_message_queue(
            config.aggregated_log_message_queue, config, dead_letter_queue=dead_letter
        ),
        dead_letter=dead_letter,
    )
