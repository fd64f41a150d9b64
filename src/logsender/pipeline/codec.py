"""Batch payload codec.

A batch payload is a JSON array of strings where every element is itself a
serialized LogEvent: ["{\"logId\": ...}", "{\"logId\": ...}"].
"""

import json
from typing import List, Sequence

from pydantic import ValidationError

from logsender.common.exceptions import BatchValidationError
from logsender.messages.schemas import LogEvent


def encode_batch(payloads: Sequence[str]) -> str:
    """Encode event payloads into a batch payload, preserving order."""
    if not payloads:
        raise BatchValidationError("Refusing to encode an empty batch")
    return json.dumps(list(payloads), ensure_ascii=False)


def encode_events(events: Sequence[LogEvent]) -> str:
    """Encode LogEvent objects into a batch payload."""
    return encode_batch([event.to_json() for event in events])


def decode_batch(batch_payload: str) -> List[str]:
    """Decode the outer array of a batch payload.

    Raises:
        BatchValidationError: If the payload is not a JSON array of strings
    """
    try:
        items = json.loads(batch_payload)
    except (TypeError, ValueError) as e:
        raise BatchValidationError(f"Unparsable batch payload: {e}") from e

    if not isinstance(items, list):
        raise BatchValidationError(
            f"Batch payload must be a JSON array, got {type(items).__name__}"
        )

    for index, item in enumerate(items):
        if not isinstance(item, str):
            raise BatchValidationError(
                f"Batch element {index} must be a serialized log event string, "
                f"got {type(item).__name__}"
            )
    return items


def decode_events(batch_payload: str) -> List[LogEvent]:
    """Decode a batch payload into LogEvents.

    Any element failing to parse fails the whole batch.

    Raises:
        BatchValidationError: If the payload or any element is invalid
    """
    events = []
    for index, item in enumerate(decode_batch(batch_payload)):
        try:
            events.append(LogEvent.from_json(item))
        except ValidationError as e:
            raise BatchValidationError(
                f"Could not parse log event from batch element {index}: {e}",
                details={"index": index},
            ) from e
    return events
