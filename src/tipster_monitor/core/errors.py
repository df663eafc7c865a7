"""Exceptions raised by the monitoring pipeline."""


class MonitorError(Exception):
    """Base class for pipeline errors."""


class FetchError(MonitorError):
    """Feed or page could not be retrieved or is unusable."""


class StorageError(MonitorError):
    """Seen posts could not be read or written."""
