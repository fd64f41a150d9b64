"""LogSender - batches audit-log events and delivers them to StoreLog."""

__version__ = "0.1.0"
__author__ = "LogSender Team"
