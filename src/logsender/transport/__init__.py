"""Transport module - message queues connecting the pipeline stages.

Components:
- MessageQueue: Abstract queue with acknowledge/release semantics
- InMemoryMessageQueue: In-process queue with redelivery backoff
- SqsMessageQueue: Amazon SQS implementation (boto3)
"""

from logsender.transport.base import MessageQueue, QueueMessage
from logsender.transport.memory import InMemoryMessageQueue
from logsender.transport.sqs import SqsMessageQueue
from logsender.transport.config import QueueSet, create_message_queue, create_queues

__all__ = [
    "MessageQueue",
    "QueueMessage",
    "InMemoryMessageQueue",
    "SqsMessageQueue",
    "QueueSet",
    "create_message_queue",
    "create_queues",
]
