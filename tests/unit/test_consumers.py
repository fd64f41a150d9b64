"""Tests for the queue consumers."""

import json
import time
import pytest
from unittest.mock import MagicMock

from logsender.consumers import BatchConsumer, RawEventConsumer
from logsender.pipeline.aggregator import BatchAggregator
from logsender.pipeline.outcome import Outcome
from logsender.pipeline.router import FailureRouter
from logsender.transport.memory import InMemoryMessageQueue

from conftest import PERSONNUMMER, SAMORDNINGSNUMMER, make_event_json


@pytest.fixture
def raw_queue():
    return InMemoryMessageQueue("raw", redelivery_delay=0.0)


@pytest.fixture
def batch_queue():
    return InMemoryMessageQueue("batches", redelivery_delay=0.0)


@pytest.fixture
def aggregator(batch_queue, timer_factory):
    return BatchAggregator(batch_queue.send, bulk_size=2, bulk_timeout=60.0,
                           timer_factory=timer_factory)


class TestRawEventConsumer:
    """Tests for RawEventConsumer."""

    @pytest.fixture
    def consumer(self, raw_queue, aggregator):
        return RawEventConsumer(raw_queue, aggregator, wait_seconds=0.0)

    def test_split_and_aggregate(self, consumer, raw_queue, batch_queue):
        """Test a multi-resource event is split into one full batch."""
        raw_queue.send(make_event_json(patient_ids=[PERSONNUMMER, SAMORDNINGSNUMMER]))

        assert consumer.poll() == 1

        assert raw_queue.size == 0
        assert raw_queue.in_flight_count == 0
        assert len(json.loads(batch_queue.bodies()[0])) == 2
        assert consumer.get_stats()["split"] == 1

    def test_malformed_event_is_discarded(self, consumer, raw_queue, aggregator):
        """Test malformed events are acknowledged and dropped."""
        raw_queue.send("garbage")

        consumer.poll()

        assert raw_queue.size == 0
        assert raw_queue.in_flight_count == 0
        assert aggregator.pending_count == 0
        assert consumer.get_stats()["discarded"] == 1

    def test_event_without_resources_is_discarded(self, consumer, raw_queue):
        """Test events without resources are acknowledged and dropped."""
        raw_queue.send(make_event_json(patient_ids=[]))

        consumer.poll()

        assert raw_queue.size == 0
        assert consumer.get_stats()["discarded"] == 1

    def test_refused_hand_off_keeps_acknowledged_events(self, raw_queue, batch_queue, timer_factory):
        """Test events from acknowledged messages survive a refused batch hand-off."""
        refusals = [RuntimeError("queue down")]

        def sink(payload):
            if refusals:
                raise refusals.pop()
            batch_queue.send(payload)

        aggregator = BatchAggregator(sink, bulk_size=3, bulk_timeout=60.0,
                                     timer_factory=timer_factory)
        consumer = RawEventConsumer(raw_queue, aggregator)
        for i in range(3):
            raw_queue.send(make_event_json(log_id=f"log-{i}"))

        assert consumer.drain() == 3
        assert raw_queue.size == 0
        assert raw_queue.in_flight_count == 0
        assert batch_queue.size == 0

        assert aggregator.flush() is True

        batch = [json.loads(item) for item in json.loads(batch_queue.bodies()[0])]
        assert len(batch) == 3
        assert [event["pdlResourceList"][0]["patient"]["patientId"] for event in batch] == [PERSONNUMMER] * 3

    def test_aggregator_error_releases_message(self, raw_queue):
        """Test the raw message is released when aggregation fails."""
        aggregator = MagicMock()
        aggregator.add.side_effect = RuntimeError("boom")
        consumer = RawEventConsumer(raw_queue, aggregator)
        raw_queue.send(make_event_json())

        consumer.poll(wait_seconds=0.0)

        assert raw_queue.size == 1
        assert consumer.get_stats()["failed"] == 1


class TestBatchConsumer:
    """Tests for BatchConsumer."""

    @pytest.fixture
    def dlq(self):
        return InMemoryMessageQueue("dlq")

    def _consumer(self, batch_queue, dlq, dispatcher):
        return BatchConsumer(batch_queue, dispatcher, FailureRouter(batch_queue, dlq),
                             wait_seconds=0.0)

    def test_accepted_batch_is_acknowledged(self, batch_queue, dlq):
        """Test accepted batches leave the queue."""
        dispatcher = MagicMock()
        dispatcher.dispatch.return_value = Outcome.accepted()
        consumer = self._consumer(batch_queue, dlq, dispatcher)
        batch_queue.send("[]")

        consumer.poll()

        dispatcher.dispatch.assert_called_once_with("[]")
        assert batch_queue.size == 0
        assert batch_queue.in_flight_count == 0
        assert consumer.get_stats()["accepted"] == 1

    def test_unexpected_error_is_dropped(self, batch_queue, dlq):
        """Test a dispatcher crash drops the batch as permanent."""
        dispatcher = MagicMock()
        dispatcher.dispatch.side_effect = RuntimeError("surprise")
        consumer = self._consumer(batch_queue, dlq, dispatcher)
        batch_queue.send("[]")

        consumer.poll()

        assert batch_queue.size == 0
        assert dlq.size == 0
        assert consumer.get_stats()["dropped"] == 1


class TestConsumerThread:
    """Tests for the consumer background thread."""

    def test_start_and_shutdown(self, raw_queue, aggregator, batch_queue):
        """Test the thread consumes messages and stops on shutdown."""
        consumer = RawEventConsumer(raw_queue, aggregator, wait_seconds=0.05)
        consumer.start()
        try:
            raw_queue.send(make_event_json(patient_ids=[PERSONNUMMER, SAMORDNINGSNUMMER]))
            deadline = time.monotonic() + 2.0
            while batch_queue.size == 0 and time.monotonic() < deadline:
                time.sleep(0.01)
            assert batch_queue.size == 1
            assert consumer.is_running
        finally:
            consumer.shutdown(timeout=2.0)

        assert not consumer.is_running

    def test_poll_errors_are_counted(self, aggregator):
        """Test a failing receive does not kill the thread."""
        queue = MagicMock()
        queue.name = "broken"
        queue.receive.side_effect = RuntimeError("no connection")
        consumer = RawEventConsumer(queue, aggregator, wait_seconds=0.01)

        consumer.start()
        deadline = time.monotonic() + 2.0
        while consumer.get_stats()["poll_errors"] == 0 and time.monotonic() < deadline:
            time.sleep(0.01)
        consumer.shutdown(timeout=2.0)

        assert consumer.get_stats()["poll_errors"] >= 1
