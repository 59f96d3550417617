"""
Operations Collector Configuration

Centralized configuration for the operations status collector, providing a
single source of truth for where the currentOp queries are sent, which
operation kinds count toward query latency and how long a cycle may take.

Typical usage:
    from operations_monitoring import OperationsCollectorConfig

    config = OperationsCollectorConfig(default_timeout=5.0)
    collector = OperationsStatusCollector(client, config=config)
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import logging

logger = logging.getLogger(__name__)

DEFAULT_OPERATION_KINDS: Tuple[str, ...] = (
    "command",
    "query",
    "update",
    "delete",
    "insert",
    "getmore",
)

REPLICATION_NAMESPACE = "local.oplog.rs"


@dataclass
class OperationsCollectorConfig:
    """
    Configuration for the operations status collector.

    Attributes:
        admin_database: Database the currentOp command is run against.
        operation_kinds: Operation kinds considered for the longest running
                         query. A getmore on the replication namespace is
                         always skipped, whatever this contains.
        replication_namespace: Namespace of the oplog tail cursor.
        default_timeout: Deadline in seconds for one collection cycle.
                         None means no deadline.

    Example:
        ```python
        config = OperationsCollectorConfig(default_timeout=5.0)
        ```
    """

    admin_database: str = "admin"
    operation_kinds: Tuple[str, ...] = DEFAULT_OPERATION_KINDS
    replication_namespace: str = REPLICATION_NAMESPACE
    default_timeout: Optional[float] = 10.0

    def __post_init__(self):
        """Validate configuration parameters after initialization."""
        if not self.admin_database:
            logger.warning("admin_database cannot be empty. Setting to 'admin'.")
            self.admin_database = "admin"

        if not self.operation_kinds:
            logger.warning(
                f"operation_kinds cannot be empty. Setting to {list(DEFAULT_OPERATION_KINDS)}."
            )
            self.operation_kinds = DEFAULT_OPERATION_KINDS
        else:
            self.operation_kinds = tuple(self.operation_kinds)

        if self.default_timeout is not None and self.default_timeout < 0:
            logger.warning(
                f"default_timeout ({self.default_timeout}) cannot be negative. Setting to 10.0."
            )
            self.default_timeout = 10.0
