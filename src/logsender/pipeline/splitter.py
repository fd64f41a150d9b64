"""Event splitter - one log event per accessed resource.

The StoreLog service does not accept several resources for different
patients bound to the same log event, so every inbound event referencing
more than one resource is split into one event per resource.
"""

import logging
from typing import List

from pydantic import ValidationError

from logsender.common.exceptions import MalformedEventError, NoResourcesError
from logsender.common.logging import correlation_scope
from logsender.messages.schemas import LogEvent

logger = logging.getLogger(__name__)


class EventSplitter:
    """Splits inbound event payloads into single-resource event payloads."""

    def split(self, payload: str) -> List[str]:
        """Split one inbound payload.

        Args:
            payload: JSON serialized LogEvent

        Returns:
            One payload per resource. A single-resource event is returned as is.

        Raises:
            MalformedEventError: If the payload is not a valid LogEvent
            NoResourcesError: If the event references no resources
        """
        with correlation_scope():
            event = self._parse(payload)

            if not event.resources:
                logger.error(f"No resources in log event {event.log_id}, not proceeding.")
                raise NoResourcesError(event.log_id)

            if len(event.resources) == 1:
                return [payload]

            logger.debug(
                f"Splitting log event {event.log_id} into {len(event.resources)} events"
            )
            return [event.copy_with_resource(resource).to_json() for resource in event.resources]

    def split_events(self, event: LogEvent) -> List[LogEvent]:
        """Split an already parsed event."""
        if not event.resources:
            raise NoResourcesError(event.log_id)
        if len(event.resources) == 1:
            return [event]
        return [event.copy_with_resource(resource) for resource in event.resources]

    @staticmethod
    def _parse(payload: str) -> LogEvent:
        try:
            return LogEvent.from_json(payload)
        except ValidationError as e:
            logger.error(f"Could not parse log event: {e.error_count()} validation errors")
            raise MalformedEventError(f"Could not parse log event from message: {e}") from e
