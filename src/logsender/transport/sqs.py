"""SQS-backed message queue."""

import logging
from typing import List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from logsender.common.constants import TransportConstants
from logsender.common.exceptions import TransportError
from logsender.transport.base import MessageQueue, QueueMessage

logger = logging.getLogger(__name__)


class SqsMessageQueue(MessageQueue):
    """Message queue backed by an SQS queue.

    Acknowledging deletes the message. Releasing sets its visibility timeout
    to an exponentially growing delay derived from ApproximateReceiveCount, so
    the queue's own redrive policy decides when a message goes to its DLQ.
    """

    DEFAULT_REGION = "us-east-1"

    def __init__(self, name: str, region: Optional[str] = None,
                 aws_profile: Optional[str] = None, client=None,
                 redelivery_delay: float = TransportConstants.REDELIVERY_DELAY_SECONDS,
                 backoff_multiplier: float = TransportConstants.BACKOFF_MULTIPLIER,
                 max_redelivery_delay: float = TransportConstants.MAX_REDELIVERY_DELAY_SECONDS):
        self.name = name
        self.region = region or self.DEFAULT_REGION
        self.redelivery_delay = redelivery_delay
        self.backoff_multiplier = backoff_multiplier
        self.max_redelivery_delay = max_redelivery_delay

        if client is not None:
            self.sqs_client = client
        elif aws_profile:
            session = boto3.Session(profile_name=aws_profile)
            self.sqs_client = session.client("sqs", region_name=self.region)
        else:
            self.sqs_client = boto3.client("sqs", region_name=self.region)

        self.queue_url = self._resolve_queue_url()
        logger.info(f"Initialized SqsMessageQueue: queue={self.name}, region={self.region}")

    def _resolve_queue_url(self) -> str:
        try:
            response = self.sqs_client.get_queue_url(QueueName=self.name)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            raise TransportError(
                f"Could not resolve queue {self.name}: {code}",
                queue_name=self.name,
                details={"error_code": code},
            ) from e
        return response["QueueUrl"]

    def send(self, body: str) -> str:
        try:
            response = self.sqs_client.send_message(QueueUrl=self.queue_url, MessageBody=body)
        except (ClientError, BotoCoreError) as e:
            raise TransportError(f"Failed to send message to {self.name}: {e}", queue_name=self.name) from e
        return response["MessageId"]

    def receive(self, max_messages: int = 1, wait_seconds: float = 0.0) -> List[QueueMessage]:
        try:
            response = self.sqs_client.receive_message(
                QueueUrl=self.queue_url,
                MaxNumberOfMessages=max(1, min(max_messages, TransportConstants.SQS_MAX_MESSAGES)),
                WaitTimeSeconds=int(min(wait_seconds, TransportConstants.SQS_MAX_WAIT_SECONDS)),
                AttributeNames=["ApproximateReceiveCount"],
            )
        except (ClientError, BotoCoreError) as e:
            raise TransportError(f"Failed to receive from {self.name}: {e}", queue_name=self.name) from e

        messages = []
        for raw in response.get("Messages", []):
            attributes = raw.get("Attributes", {})
            messages.append(QueueMessage(
                body=raw["Body"],
                message_id=raw["MessageId"],
                receipt=raw["ReceiptHandle"],
                delivery_count=int(attributes.get("ApproximateReceiveCount", 1)),
                attributes=attributes,
            ))
        return messages

    def acknowledge(self, message: QueueMessage) -> None:
        try:
            self.sqs_client.delete_message(QueueUrl=self.queue_url, ReceiptHandle=message.receipt)
        except (ClientError, BotoCoreError) as e:
            raise TransportError(
                f"Failed to delete message {message.message_id} from {self.name}: {e}",
                queue_name=self.name,
            ) from e

    def release(self, message: QueueMessage) -> None:
        delay = min(
            self.redelivery_delay * self.backoff_multiplier ** (message.delivery_count - 1),
            self.max_redelivery_delay,
        )
        try:
            self.sqs_client.change_message_visibility(
                QueueUrl=self.queue_url,
                ReceiptHandle=message.receipt,
                VisibilityTimeout=int(delay),
            )
        except (ClientError, BotoCoreError) as e:
            # Message becomes visible again once its current visibility timeout expires
            logger.warning(f"Could not release message {message.message_id} on {self.name}: {e}")
