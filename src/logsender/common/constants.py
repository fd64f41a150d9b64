"""Centralized constants for LogSender configuration."""


# ===== AGGREGATION =====
class AggregationConstants:
    DEFAULT_BULK_SIZE = 10
    DEFAULT_BULK_TIMEOUT_MS = 60000
    MIN_BULK_SIZE = 1
    MIN_BULK_TIMEOUT_MS = 1000


# ===== TRANSPORT =====
class TransportConstants:
    RECEIVE_WAIT_SECONDS = 1.0
    RECEIVE_MAX_MESSAGES = 10
    SHUTDOWN_TIMEOUT_SECONDS = 5.0

    # Broker-style redelivery policy
    MAX_REDELIVERIES = 6
    REDELIVERY_DELAY_SECONDS = 1.0
    BACKOFF_MULTIPLIER = 2.0
    MAX_REDELIVERY_DELAY_SECONDS = 900

    # SQS limits
    SQS_MAX_MESSAGES = 10
    SQS_MAX_WAIT_SECONDS = 20


# ===== STORELOG =====
class StoreLogConstants:
    DEFAULT_LOGICAL_ADDRESS = "SE165565594230-1000"
    DEFAULT_TIMEOUT_SECONDS = 30.0
    INVALID_SYSTEM_ID = "invalid"


# ===== PATIENT IDENTIFIERS =====
class CivicNumberConstants:
    PERSONNUMMER_ROOT = "1.2.752.129.2.1.3.1"
    SAMORDNINGSNUMMER_ROOT = "1.2.752.129.2.1.3.3"

    # Index of the first day digit in a normalized yyyyMMddNNNN number
    SAMORDNING_DAY_INDEX = 6
    SAMORDNING_DAY_MIN = 6
    SAMORDNING_DAY_OFFSET = 60
