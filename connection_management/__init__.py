"""
Connection Management Module

This module builds the MongoDB client used by the exporter and verifies the
server is reachable before the first collection cycle.

Key capabilities:
- MongoClient construction from pydantic settings
- Startup ping with exponential backoff and jitter
- Specific exception types for initialization and availability failures
- Context manager support for proper resource cleanup
"""

from .mongo_connector import (
    MongoConnector,
    ConnectionStatus,
    ConnectionFeedback,
    create_client,
    wait_for_server
)
from .connection_exceptions import (
    ConnectionError,
    ConnectionInitializationError,
    ServerUnavailableError
)

__all__ = [
    'MongoConnector',
    'ConnectionStatus',
    'ConnectionFeedback',
    'create_client',
    'wait_for_server',
    'ConnectionError',
    'ConnectionInitializationError',
    'ServerUnavailableError',
]
