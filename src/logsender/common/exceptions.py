"""Custom exceptions for LogSender.

Provides a hierarchy of exceptions for different error types.
All LogSender exceptions inherit from LogSenderException.

The two main branches decide what happens to a message:
- PermanentError: never retried. The message is discarded or dead-lettered.
- TemporaryError: left to the transport for redelivery.
"""

from typing import Any, Dict, Optional


class LogSenderException(Exception):
    """Base exception for all LogSender errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        details: Additional context about the error
    """

    def __init__(
        self,
        message: str,
        code: str = "LOGSENDER_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for structured logging."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(LogSenderException):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONFIG_ERROR", details=details)


class PermanentError(LogSenderException):
    """Raised for defects that must never be retried."""

    def __init__(
        self,
        message: str,
        code: str = "PERMANENT_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code=code, details=details)


class MalformedEventError(PermanentError):
    """Raised when an inbound log event cannot be deserialized."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="MALFORMED_EVENT", details=details)


class NoResourcesError(PermanentError):
    """Raised when a log event references no resources."""

    def __init__(self, log_id: str, details: Optional[Dict[str, Any]] = None):
        details = details or {}
        details["log_id"] = log_id
        super().__init__(
            f"No resources in log event {log_id}, discarding message.",
            code="NO_RESOURCES",
            details=details,
        )


class BatchValidationError(PermanentError):
    """Raised when a batch cannot be parsed, converted or is rejected downstream.

    Batches failing this way are moved to the dead-letter destination.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="BATCH_VALIDATION", details=details)


class InvalidCivicNumberError(BatchValidationError):
    """Raised when a patient identifier is not a valid civic number."""

    def __init__(self, value: Optional[str], details: Optional[Dict[str, Any]] = None):
        details = details or {}
        details["value_length"] = len(value) if value else 0
        super().__init__(
            "Patient id must be a valid personnummer or samordningsnummer",
            details=details,
        )
        self.code = "INVALID_CIVIC_NUMBER"


class TemporaryError(LogSenderException):
    """Raised for failures that may succeed on redelivery."""

    def __init__(
        self,
        message: str,
        code: str = "TEMPORARY_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code=code, details=details)


class StoreLogExecutionError(TemporaryError):
    """Raised when the StoreLog service cannot be reached."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="STORELOG_EXECUTION", details=details)


class StoreLogTransportError(Exception):
    """Raised by a StoreLog service implementation on transport failure."""
    pass


class TransportError(TemporaryError):
    """Raised when the message queue transport fails."""

    def __init__(
        self,
        message: str,
        queue_name: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        details = details or {}
        if queue_name:
            details["queue_name"] = queue_name
        super().__init__(message, code="TRANSPORT_ERROR", details=details)
