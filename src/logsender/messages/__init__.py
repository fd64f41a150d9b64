"""Message model - audit-log events and patient identifiers."""

from logsender.messages.schemas import (
    ActivityPurpose,
    ActivityType,
    CareUnit,
    LogEvent,
    Patient,
    Resource,
)
from logsender.messages.civic_number import (
    CivicNumber,
    parse_civic_number,
    require_civic_number,
)

__all__ = [
    "ActivityPurpose",
    "ActivityType",
    "CareUnit",
    "LogEvent",
    "Patient",
    "Resource",
    "CivicNumber",
    "parse_civic_number",
    "require_civic_number",
]
