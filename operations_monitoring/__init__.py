"""
Operations Monitoring Module

Derives health signals from a MongoDB server's in-flight operations:
- Running time of the longest running query/command
- Whether an index build is in progress, with its done/total progress

Each collection cycle issues two currentOp commands against the admin
database and returns a single immutable OperationsStatus, or None when the
cycle fails. The collector keeps no state between cycles.

Typical usage from external projects:

    from pymongo import MongoClient
    from operations_monitoring import (
        OperationsStatusCollector,
        OperationsCollectorConfig
    )

    config = OperationsCollectorConfig(default_timeout=5.0)
    collector = OperationsStatusCollector(MongoClient(uri), config=config)

    status = collector.get_operations_status()
    if status is None:
        print("Operations status unavailable this cycle")
    elif status.index_building:
        print(f"Index build at {status.index_building_percentage:.1f}%")
"""

# Core collector (primary interface)
from .core.collector import (
    OperationsStatusCollector,
    get_operations_status,
    longest_running_duration,
    index_build_status,
    is_replication_getmore
)

# Configuration
from .config import OperationsCollectorConfig

# Models
from .models.entities import (
    OperationProgress,
    OperationRecord,
    OperationsList,
    OperationsStatus
)

# Exceptions
from .ops_exceptions import (
    OperationsStatusError,
    OperationsQueryError,
    OperationsTimeoutError,
    OperationsDecodeError
)

__all__ = [
    # Primary interface
    'OperationsStatusCollector',
    'get_operations_status',
    'longest_running_duration',
    'index_build_status',
    'is_replication_getmore',
    'OperationsCollectorConfig',

    # Models
    'OperationProgress',
    'OperationRecord',
    'OperationsList',
    'OperationsStatus',

    # Exceptions
    'OperationsStatusError',
    'OperationsQueryError',
    'OperationsTimeoutError',
    'OperationsDecodeError'
]
