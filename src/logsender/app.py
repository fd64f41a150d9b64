"""LogSender application - wires queues, pipeline stages and consumers."""

import logging
import os
import signal
import threading
from typing import Optional

from logsender.common.config import Config, TransportType, get_config
from logsender.common.logging import configure_logging
from logsender.consumers import BatchConsumer, RawEventConsumer
from logsender.pipeline.aggregator import BatchAggregator
from logsender.pipeline.dispatcher import BatchDispatcher
from logsender.pipeline.router import FailureRouter
from logsender.pipeline.splitter import EventSplitter
from logsender.storelog.client import StoreLogService
from logsender.storelog.config import create_log_sender_client
from logsender.transport.config import QueueSet, create_queues

logger = logging.getLogger(__name__)


class LogSenderApp:
    """The log sender pipeline.

    inbound queue -> RawEventConsumer (split, aggregate) -> aggregated queue
    -> BatchConsumer (dispatch, route) -> StoreLog / dead-letter queue
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        queues: Optional[QueueSet] = None,
        store_log_service: Optional[StoreLogService] = None,
    ):
        self.config = config or get_config()
        self.queues = queues or create_queues(self.config)

        self.client = create_log_sender_client(self.config, service=store_log_service)
        self.aggregator = BatchAggregator(
            sink=self.queues.aggregated.send,
            bulk_size=self.config.bulk_size,
            bulk_timeout=self.config.bulk_timeout_seconds,
        )
        self.dispatcher = BatchDispatcher(self.client)
        self.router = FailureRouter(self.queues.aggregated, self.queues.dead_letter)

        self.raw_consumer = RawEventConsumer(
            self.queues.receive, self.aggregator, splitter=EventSplitter()
        )
        self.batch_consumer = BatchConsumer(
            self.queues.aggregated, self.dispatcher, self.router
        )
        self._stop_requested = threading.Event()
        self._stopped = threading.Event()

    def start(self) -> None:
        logger.info(
            f"Starting LogSender: bulk_size={self.config.bulk_size}, "
            f"bulk_timeout_ms={self.config.bulk_timeout_ms}, "
            f"transport={self.config.transport_type.value}, "
            f"store_log={self.config.store_log_type.value}"
        )
        self._stopped.clear()
        self._stop_requested.clear()
        self.raw_consumer.start()
        self.batch_consumer.start()

    def shutdown(self, timeout: Optional[float] = None) -> None:
        """Stop consuming, emit the open batch and stop dispatching.

        The batch consumer is stopped last so it can pick up the flushed batch
        while still running.
        """
        if self._stopped.is_set():
            return
        self._stopped.set()

        logger.info("Shutting down LogSender...")
        self.raw_consumer.shutdown(timeout)
        self.aggregator.flush()
        if self.aggregator.pending_count:
            logger.error(
                f"Open batch could not be handed off on shutdown, "
                f"{self.aggregator.pending_count} log events not delivered"
            )
        self.batch_consumer.shutdown(timeout)
        if self.config.transport_type == TransportType.MEMORY:
            # In-memory batches do not outlive the process
            self.batch_consumer.drain()

        logger.info(f"LogSender stopped. Stats: {self.get_stats()}")

    def run_forever(self) -> None:
        """Run until SIGINT or SIGTERM."""

        def _handle_signal(signum, frame):
            logger.info(f"Received signal {signal.Signals(signum).name}")
            self._stop_requested.set()

        signal.signal(signal.SIGINT, _handle_signal)
        signal.signal(signal.SIGTERM, _handle_signal)

        self.start()
        self._stop_requested.wait()
        self.shutdown()

    def get_stats(self) -> dict:
        return {
            "aggregator": self.aggregator.get_stats(),
            "raw_consumer": self.raw_consumer.get_stats(),
            "batch_consumer": self.batch_consumer.get_stats(),
        }


def main(config_path: Optional[str] = None) -> None:
    """Main entry point.

    Reads the properties file named by LOGSENDER_CONFIG_FILE if no path is given,
    otherwise configuration comes from the environment alone.
    """
    config_path = config_path or os.getenv("LOGSENDER_CONFIG_FILE")
    config = Config.from_yaml(config_path) if config_path else get_config()
    configure_logging(config.log_level.value)
    logger.info(f"LogSender initialized in {config.environment.value} mode")
    LogSenderApp(config).run_forever()
