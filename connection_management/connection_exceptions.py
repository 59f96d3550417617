"""
Connection Management Exceptions

This module defines specialized exceptions for MongoDB connection bootstrap,
providing detailed error reporting for connection-related issues.
"""

from typing import Optional

from mongo_ops_exceptions import ConnectionError as BaseConnectionError


class ConnectionError(BaseConnectionError):
    """
    Base exception for all connection-related errors.

    Allows applications to catch all connection errors uniformly while
    still providing access to specific error details.
    """
    pass


class ConnectionInitializationError(ConnectionError):
    """
    Raised when the client cannot be created from the configured settings.

    This usually means a malformed connection string or invalid driver
    options, and is detected at startup rather than during a scrape.
    """
    pass


class ServerUnavailableError(ConnectionError):
    """
    Raised when the MongoDB server does not answer after all retries.

    Attributes:
        attempts: Number of ping attempts made
    """
    def __init__(self, message: str, attempts: Optional[int] = None):
        super().__init__(message)
        self.attempts = attempts
