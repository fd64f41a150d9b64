"""Batch Aggregator - size-or-timeout batching of split log events.

Events are appended to a single open batch. The batch is sealed when it
reaches bulk_size (synchronously, inside add()) or when bulk_timeout has
elapsed since its first item arrived, whichever comes first. Sealing is a
one-shot transition guarded by the aggregator lock, so a batch sealed by
count is never sealed again by its timer and vice versa.

If the sink refuses a sealed batch, its items are moved into a fresh open
batch with a new timer, so the next count, timeout or flush retries them.
"""

import logging
import threading
import time
from enum import Enum
from itertools import count
from typing import Callable, List, Optional

from logsender.common.logging import correlation_scope
from logsender.pipeline.codec import encode_batch

logger = logging.getLogger(__name__)

BatchSink = Callable[[str], None]
TimerFactory = Callable[..., threading.Timer]


class SealTrigger(str, Enum):
    COUNT = "count"
    TIMEOUT = "timeout"
    FLUSH = "flush"


class Batch:
    """An ordered group of event payloads, open until sealed."""

    def __init__(self, batch_id: int):
        self.batch_id = batch_id
        self.opened_at = time.monotonic()
        self._items: List[str] = []
        self._sealed_by: Optional[SealTrigger] = None

    def append(self, payload: str) -> None:
        if self.is_sealed:
            raise RuntimeError(f"Batch {self.batch_id} is sealed")
        self._items.append(payload)

    def seal(self, trigger: SealTrigger) -> bool:
        """Seal the batch.

        Returns:
            True if this call sealed it, False if it was already sealed.
        """
        if self._sealed_by is not None:
            return False
        self._sealed_by = trigger
        return True

    @property
    def is_sealed(self) -> bool:
        return self._sealed_by is not None

    @property
    def sealed_by(self) -> Optional[SealTrigger]:
        return self._sealed_by

    @property
    def items(self) -> List[str]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)


class BatchAggregator:
    """Groups event payloads into batches and hands encoded batches to a sink."""

    def __init__(
        self,
        sink: BatchSink,
        bulk_size: int,
        bulk_timeout: float,
        timer_factory: TimerFactory = threading.Timer,
    ):
        """Initialize the aggregator.

        Args:
            sink: Receives every sealed batch as an encoded batch payload.
            bulk_size: Number of items that seals a batch.
            bulk_timeout: Seconds after a batch's first item that seal it.
            timer_factory: threading.Timer compatible factory, replaceable in tests.
        """
        if bulk_size < 1:
            raise ValueError("bulk_size must be a positive integer")
        if bulk_timeout <= 0:
            raise ValueError("bulk_timeout must be positive")

        self.sink = sink
        self.bulk_size = bulk_size
        self.bulk_timeout = bulk_timeout
        self._timer_factory = timer_factory

        # Guards the open batch, its timer and the seal transition
        self._lock = threading.RLock()
        self._current: Optional[Batch] = None
        self._timer: Optional[threading.Timer] = None
        self._batch_ids = count(1)

        # Statistics
        self._items_aggregated = 0
        self._sealed_counts = {trigger: 0 for trigger in SealTrigger}
        self._emit_failures = 0

    def add(self, payload: str) -> None:
        """Append one event payload to the open batch.

        If the batch reaches bulk_size it is sealed and emitted before this
        call returns. A refused hand-off keeps the items pending.
        """
        with self._lock:
            batch = self._current
            if batch is None:
                batch = self._open_batch()

            batch.append(payload)
            self._items_aggregated += 1

            if len(batch) >= self.bulk_size:
                self._cancel_timer()
                self._seal_and_emit(batch, SealTrigger.COUNT)

    def flush(self) -> bool:
        """Seal and emit the open batch if it has any items.

        Returns:
            True if a batch was handed to the sink.
        """
        with self._lock:
            batch = self._current
            self._cancel_timer()
            if batch is None or len(batch) == 0:
                self._current = None
                return False
            return self._seal_and_emit(batch, SealTrigger.FLUSH)

    def _open_batch(self) -> Batch:
        batch = Batch(next(self._batch_ids))
        self._current = batch

        timer = self._timer_factory(self.bulk_timeout, self._on_timeout, args=(batch,))
        timer.daemon = True
        timer.name = f"BatchTimer-{batch.batch_id}"
        self._timer = timer
        timer.start()

        logger.debug(f"Opened batch {batch.batch_id}")
        return batch

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timeout(self, batch: Batch) -> None:
        with self._lock:
            if batch is not self._current or batch.is_sealed:
                # Already sealed by count or flush
                return

            self._timer = None
            if len(batch) == 0:
                self._current = None
                return

            self._seal_and_emit(batch, SealTrigger.TIMEOUT)

    def _seal_and_emit(self, batch: Batch, trigger: SealTrigger) -> bool:
        if not batch.seal(trigger):
            return False

        if self._current is batch:
            self._current = None

        with correlation_scope():
            payload = encode_batch(batch.items)
            logger.info(
                f"Sealed batch {batch.batch_id} with {len(batch)} log events "
                f"(trigger={trigger.value})"
            )
            try:
                self.sink(payload)
            except Exception as e:
                self._emit_failures += 1
                retry = self._retain(batch)
                logger.error(
                    f"Failed to hand off batch {batch.batch_id} sealed by {trigger.value}, "
                    f"keeping {len(batch)} log events in batch {retry.batch_id}: {e}"
                )
                return False

        self._sealed_counts[trigger] += 1
        return True

    def _retain(self, batch: Batch) -> Batch:
        # Called with the lock held and no open batch
        retry = self._open_batch()
        for payload in batch.items:
            retry.append(payload)
        return retry

    @property
    def pending_count(self) -> int:
        """Number of items in the open batch."""
        with self._lock:
            return len(self._current) if self._current is not None else 0

    def get_stats(self) -> dict:
        """Get aggregator statistics."""
        with self._lock:
            return {
                "items_aggregated": self._items_aggregated,
                "batches_sealed_by_count": self._sealed_counts[SealTrigger.COUNT],
                "batches_sealed_by_timeout": self._sealed_counts[SealTrigger.TIMEOUT],
                "batches_sealed_by_flush": self._sealed_counts[SealTrigger.FLUSH],
                "emit_failures": self._emit_failures,
                "pending_items": len(self._current) if self._current is not None else 0,
            }
