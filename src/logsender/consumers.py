"""Queue consumers - background loops driving the two pipeline stages."""

import logging
import threading
from typing import Optional

from logsender.common.constants import TransportConstants
from logsender.common.exceptions import MalformedEventError, NoResourcesError
from logsender.pipeline.aggregator import BatchAggregator
from logsender.pipeline.dispatcher import BatchDispatcher
from logsender.pipeline.router import FailureRouter
from logsender.pipeline.splitter import EventSplitter
from logsender.transport.base import MessageQueue, QueueMessage

logger = logging.getLogger(__name__)


class QueueConsumer:
    """Polls a queue on a daemon thread and hands each message to process()."""

    DEFAULT_SHUTDOWN_TIMEOUT = TransportConstants.SHUTDOWN_TIMEOUT_SECONDS

    def __init__(
        self,
        queue: MessageQueue,
        name: str,
        wait_seconds: float = TransportConstants.RECEIVE_WAIT_SECONDS,
        max_messages: int = TransportConstants.RECEIVE_MAX_MESSAGES,
    ):
        self.queue = queue
        self.name = name
        self.wait_seconds = wait_seconds
        self.max_messages = max_messages

        # Shutdown coordination
        self._shutdown_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

        # Statistics
        self._stats_lock = threading.Lock()
        self._received = 0
        self._poll_errors = 0

    def start(self) -> None:
        """Start the consumer thread."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._shutdown_event.clear()
        self._thread = threading.Thread(target=self._consume_loop, name=self.name, daemon=True)
        self._thread.start()
        logger.info(f"{self.name} started on {self.queue.name}")

    def _consume_loop(self) -> None:
        while not self._shutdown_event.is_set():
            try:
                self.poll()
            except Exception as e:
                with self._stats_lock:
                    self._poll_errors += 1
                logger.error(f"{self.name} failed to poll {self.queue.name}: {e}")
                self._shutdown_event.wait(self.wait_seconds)
        logger.info(f"{self.name} stopped")

    def poll(self, wait_seconds: Optional[float] = None) -> int:
        """Receive and process one round of messages.

        Returns:
            Number of messages processed.
        """
        wait = self.wait_seconds if wait_seconds is None else wait_seconds
        messages = self.queue.receive(max_messages=self.max_messages, wait_seconds=wait)
        for message in messages:
            with self._stats_lock:
                self._received += 1
            self.process(message)
        return len(messages)

    def process(self, message: QueueMessage) -> None:
        raise NotImplementedError

    def drain(self) -> int:
        """Process everything currently deliverable without waiting.

        Returns:
            Number of messages processed.
        """
        drained = 0
        while True:
            processed = self.poll(wait_seconds=0.0)
            if processed == 0:
                break
            drained += processed
        if drained > 0:
            logger.info(f"{self.name} drained {drained} messages during shutdown")
        return drained

    def shutdown(self, timeout: Optional[float] = None) -> None:
        """Stop the consumer thread, waiting at most timeout seconds."""
        timeout = timeout if timeout is not None else self.DEFAULT_SHUTDOWN_TIMEOUT

        self._shutdown_event.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning(f"{self.name} did not stop cleanly")

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def get_stats(self) -> dict:
        with self._stats_lock:
            return {"received": self._received, "poll_errors": self._poll_errors}


class RawEventConsumer(QueueConsumer):
    """Splits inbound log events and feeds them to the aggregator."""

    def __init__(
        self,
        queue: MessageQueue,
        aggregator: BatchAggregator,
        splitter: Optional[EventSplitter] = None,
        **kwargs,
    ):
        super().__init__(queue, name=kwargs.pop("name", "RawEventConsumer"), **kwargs)
        self.aggregator = aggregator
        self.splitter = splitter or EventSplitter()

        self._split_events = 0
        self._discarded = 0
        self._failed = 0

    def process(self, message: QueueMessage) -> None:
        try:
            for payload in self.splitter.split(message.body):
                self.aggregator.add(payload)
        except (MalformedEventError, NoResourcesError) as e:
            with self._stats_lock:
                self._discarded += 1
            logger.error(f"Discarding message {message.message_id}: {e.message}")
            self.queue.acknowledge(message)
            return
        except Exception as e:
            with self._stats_lock:
                self._failed += 1
            logger.error(f"Failed to aggregate message {message.message_id}, releasing it: {e}")
            self.queue.release(message)
            return

        with self._stats_lock:
            self._split_events += 1
        self.queue.acknowledge(message)

    def get_stats(self) -> dict:
        stats = super().get_stats()
        with self._stats_lock:
            stats.update({
                "split": self._split_events,
                "discarded": self._discarded,
                "failed": self._failed,
            })
        return stats


class BatchConsumer(QueueConsumer):
    """Dispatches aggregated batches and routes their outcome."""

    def __init__(
        self,
        queue: MessageQueue,
        dispatcher: BatchDispatcher,
        router: FailureRouter,
        **kwargs,
    ):
        super().__init__(queue, name=kwargs.pop("name", "BatchConsumer"), **kwargs)
        self.dispatcher = dispatcher
        self.router = router

    def process(self, message: QueueMessage) -> None:
        try:
            outcome = self.dispatcher.dispatch(message.body)
        except Exception as e:
            self.router.route_exception(message, e)
            return
        self.router.route(message, outcome)

    def get_stats(self) -> dict:
        stats = super().get_stats()
        stats.update(self.router.get_stats())
        return stats
