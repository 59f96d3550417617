"""
Operations Monitoring Exceptions

This module defines the exception hierarchy used while deriving the
operations status from the server's currentOp output. These exceptions are
raised between the query, decode and reduce steps and are caught at the
collector boundary, which turns them into an absent status.

Typical usage:
    from operations_monitoring import OperationsQueryError

    try:
        response = run_current_op(client, command, query_name="index build")
    except OperationsQueryError as e:
        logger.error(f"{e.query_name} query failed: {e}")
"""

from typing import Optional

from mongo_ops_exceptions import MonitoringError, OperationTimeoutError, QueryError


class OperationsStatusError(MonitoringError):
    """
    Base exception for all operations status errors.

    Allows catch-all handling of a failed collection cycle while still
    providing granular exception types for the individual failure modes.
    """
    pass


class OperationsQueryError(OperationsStatusError, QueryError):
    """
    Raised when a currentOp command fails on the server or in the driver.

    Attributes:
        query_name: Which of the two cycle queries failed
        timed_out: Whether the failure was caused by the cycle deadline
    """
    def __init__(
        self,
        message: str,
        query_name: Optional[str] = None,
        timed_out: bool = False
    ):
        super().__init__(message)
        self.query_name = query_name
        self.timed_out = timed_out


class OperationsTimeoutError(OperationsQueryError, OperationTimeoutError):
    """
    Raised when a currentOp command is cut off by the cycle deadline.
    """
    def __init__(self, message: str, query_name: Optional[str] = None):
        super().__init__(message, query_name=query_name, timed_out=True)


class OperationsDecodeError(OperationsStatusError):
    """
    Raised when a currentOp response does not have the expected shape.

    Attributes:
        query_name: Which of the two cycle queries returned the response
    """
    def __init__(
        self,
        message: str,
        query_name: Optional[str] = None
    ):
        super().__init__(message)
        self.query_name = query_name
