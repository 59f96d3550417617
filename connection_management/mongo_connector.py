"""
MongoDB Connector - Simplified Connection Interface

This module builds the MongoClient the exporter runs its administrative
commands through, and waits for the server to answer before the first
scrape. Retrying happens here at startup only; collection cycles never
retry.
"""

import uuid
import logging
from enum import Enum
from dataclasses import dataclass
from typing import Optional

from pymongo import MongoClient
from pymongo.errors import ConfigurationError as DriverConfigurationError, PyMongoError
from tenacity import (
    RetryError,
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from config import ConnectionSettings
from connection_management.connection_exceptions import (
    ConnectionError,
    ConnectionInitializationError,
    ServerUnavailableError
)

logger = logging.getLogger(__name__)


class ConnectionStatus(str, Enum):
    """
    Defines the possible states of a connection attempt.
    """
    SUCCESS = "success"
    FAILURE = "failure"
    UNAVAILABLE = "unavailable"


@dataclass
class ConnectionFeedback:
    """
    Feedback on a connection attempt.

    Carries a correlation ID for tracing, the connection status, a message
    for logging and the connected client on success.
    """
    connection_id: str
    status: ConnectionStatus
    message: str
    client: Optional[MongoClient] = None


def create_client(settings: ConnectionSettings) -> MongoClient:
    """
    Build a MongoClient from connection settings.

    The driver connects lazily, so this does not contact the server.

    Raises:
        ConnectionInitializationError: If the URI or the driver options are invalid
    """
    try:
        return MongoClient(
            settings.uri,
            appname=settings.app_name,
            serverSelectionTimeoutMS=settings.server_selection_timeout_ms,
            connectTimeoutMS=settings.connect_timeout_ms,
            directConnection=settings.direct_connection,
        )
    except (DriverConfigurationError, ValueError) as e:
        raise ConnectionInitializationError(f"Invalid MongoDB connection settings: {e}") from e


def wait_for_server(client: MongoClient, settings: ConnectionSettings) -> None:
    """
    Ping the server until it answers, with exponential backoff and jitter.

    Raises:
        ServerUnavailableError: If the server still does not answer after
                                settings.retry_count retries
    """
    attempts = settings.retry_count + 1
    retrying = Retrying(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential_jitter(initial=settings.retry_interval, jitter=settings.retry_interval),
        retry=retry_if_exception_type(PyMongoError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )
    try:
        retrying(client.admin.command, "ping")
    except RetryError as e:
        last_error = e.last_attempt.exception()
        raise ServerUnavailableError(
            f"MongoDB server did not answer after {attempts} attempts: {last_error}",
            attempts=attempts
        ) from last_error


class MongoConnector:
    """
    High-level connector returning a ready MongoClient.

    Example:
        ```python
        with MongoConnector(settings.connection) as connector:
            collector = OperationsStatusCollector(connector.client)
        ```
    """

    def __init__(self, settings: Optional[ConnectionSettings] = None):
        """
        Initialize the connector.

        Args:
            settings: Connection settings. If None, defaults and environment
                      variables are used.
        """
        self.settings = settings or ConnectionSettings()
        self._client: Optional[MongoClient] = None

    @property
    def client(self) -> Optional[MongoClient]:
        return self._client

    def establish_connection(self) -> ConnectionFeedback:
        """
        Create the client and wait for the server to answer.

        Returns:
            ConnectionFeedback: Detailed feedback on the connection attempt.
        """
        connection_id = f"mongo-conn-{uuid.uuid4()}"
        logger.info(f"[{connection_id}] Attempting to establish MongoDB connection...")

        try:
            self._client = create_client(self.settings)
            wait_for_server(self._client, self.settings)
        except ServerUnavailableError as e:
            logger.error(f"[{connection_id}] {e}")
            return ConnectionFeedback(
                connection_id=connection_id,
                status=ConnectionStatus.UNAVAILABLE,
                message=str(e),
                client=self._client
            )
        except ConnectionError as e:
            logger.error(f"[{connection_id}] Failed to establish MongoDB connection: {e}")
            return ConnectionFeedback(
                connection_id=connection_id,
                status=ConnectionStatus.FAILURE,
                message=f"Failed to establish MongoDB connection: {e}"
            )

        logger.info(f"[{connection_id}] MongoDB connection established successfully.")
        return ConnectionFeedback(
            connection_id=connection_id,
            status=ConnectionStatus.SUCCESS,
            message="MongoDB connection established successfully.",
            client=self._client
        )

    def close_connection(self):
        """
        Close the client and release all resources.
        """
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("MongoDB connection closed.")
        else:
            logger.warning("No active connection to close.")

    def __enter__(self):
        """Enter context manager, establish connection."""
        feedback = self.establish_connection()
        if feedback.status != ConnectionStatus.SUCCESS:
            if self._client is not None:
                self.close_connection()
            raise ConnectionError(f"Failed to establish connection: {feedback.message}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager, close connection."""
        self.close_connection()
