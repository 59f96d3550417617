"""
Mongo Operations Exceptions

This module defines custom exceptions for the Mongo_Ops package
to provide clear error handling and reporting.
"""

class MongoOpsError(Exception):
    """Base exception for all Mongo_Ops errors"""
    pass


class ConnectionError(MongoOpsError):
    """Raised when connection to the MongoDB server fails"""
    pass


class ConfigurationError(MongoOpsError):
    """Raised when configuration is invalid or missing"""
    pass


class QueryError(MongoOpsError):
    """Raised when an administrative query fails"""
    pass


class MonitoringError(MongoOpsError):
    """Raised when a monitoring operation fails"""
    pass


class OperationTimeoutError(MongoOpsError):
    """Raised when an operation times out"""
    pass
