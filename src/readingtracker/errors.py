"""Exceptions raised by the reading tracker.

Validation problems are raised before anything is written. Storage and
network failures propagate to the caller untouched by retries; front ends
catch ``ReadingTrackerError`` and show a generic retry message.
"""


class ReadingTrackerError(Exception):
    """Base exception for reading tracker errors."""

    pass


class InvalidInputError(ReadingTrackerError, ValueError):
    """Raised for bad page counts, empty titles and similar input."""

    pass


class NotFoundError(ReadingTrackerError, LookupError):
    """Raised when an operation references a book that does not exist."""

    pass


class NotAuthenticatedError(ReadingTrackerError):
    """Raised when no user session is available."""

    pass


class StorageError(ReadingTrackerError):
    """Raised when local persistence or a record store write fails."""

    pass


class NetworkError(ReadingTrackerError):
    """Raised when a remote call cannot be completed."""

    pass
