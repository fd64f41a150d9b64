"""Dispatch outcomes."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class OutcomeStatus(str, Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class Outcome:
    """Classification of a dispatched batch.

    ACCEPTED batches are done. REJECTED batches are never retried and go to
    the dead-letter destination. UNAVAILABLE batches are left for redelivery.
    """
    status: OutcomeStatus
    reason: Optional[str] = None
    note: Optional[str] = None

    @classmethod
    def accepted(cls, note: Optional[str] = None) -> "Outcome":
        return cls(OutcomeStatus.ACCEPTED, note=note)

    @classmethod
    def rejected(cls, reason: str) -> "Outcome":
        return cls(OutcomeStatus.REJECTED, reason=reason)

    @classmethod
    def unavailable(cls, reason: str) -> "Outcome":
        return cls(OutcomeStatus.UNAVAILABLE, reason=reason)

    @property
    def is_accepted(self) -> bool:
        return self.status == OutcomeStatus.ACCEPTED

    @property
    def is_rejected(self) -> bool:
        return self.status == OutcomeStatus.REJECTED

    @property
    def is_retryable(self) -> bool:
        return self.status == OutcomeStatus.UNAVAILABLE
