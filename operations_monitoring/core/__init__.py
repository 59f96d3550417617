"""
Operations Monitoring Core

Contains the operations status collector and the currentOp command builders.
"""

from .collector import (
    OperationsStatusCollector,
    get_operations_status,
    longest_running_duration,
    index_build_status,
    is_replication_getmore
)
from .queries import (
    build_longest_query_command,
    build_index_build_command,
    run_current_op
)

__all__ = [
    'OperationsStatusCollector',
    'get_operations_status',
    'longest_running_duration',
    'index_build_status',
    'is_replication_getmore',
    'build_longest_query_command',
    'build_index_build_command',
    'run_current_op'
]
