"""
Operations Monitoring Models

Contains Pydantic models for currentOp records and derived status snapshots.
"""

from .entities import (
    OperationProgress,
    OperationRecord,
    OperationsList,
    OperationsStatus
)

__all__ = [
    'OperationProgress',
    'OperationRecord',
    'OperationsList',
    'OperationsStatus'
]
