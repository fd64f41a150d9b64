"""Pipeline module - split, aggregate, dispatch and route.

Components:
- EventSplitter: One event per accessed resource
- BatchAggregator: Size-or-timeout batching
- BatchDispatcher: One downstream call per batch, classified as an Outcome
- FailureRouter: Acknowledge, dead-letter or release per Outcome
"""

from logsender.pipeline.outcome import Outcome, OutcomeStatus
from logsender.pipeline.codec import decode_batch, decode_events, encode_batch, encode_events
from logsender.pipeline.splitter import EventSplitter
from logsender.pipeline.aggregator import Batch, BatchAggregator, SealTrigger
from logsender.pipeline.dispatcher import BatchDispatcher
from logsender.pipeline.router import FailureRouter

__all__ = [
    "Outcome",
    "OutcomeStatus",
    "decode_batch",
    "decode_events",
    "encode_batch",
    "encode_events",
    "EventSplitter",
    "Batch",
    "BatchAggregator",
    "SealTrigger",
    "BatchDispatcher",
    "FailureRouter",
]
