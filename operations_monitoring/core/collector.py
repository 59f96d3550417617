"""
Operations Status Collector

Derives the operations status of a MongoDB server from two currentOp
queries: the running time of the longest running query/command, and whether
an index build is in progress together with its progress counters.

A collection cycle either produces a complete OperationsStatus or nothing.
No exception crosses the collector boundary; failures are logged and
reported as None so the exporting layer can leave the metrics out for that
cycle instead of reporting zeros.

Typical usage:

    from pymongo import MongoClient
    from operations_monitoring import OperationsStatusCollector

    collector = OperationsStatusCollector(MongoClient("mongodb://localhost:27017"))
    status = collector.get_operations_status(timeout=5.0)
    if status is not None:
        print(f"Longest query: {status.longest_query_seconds:.3f}s")
"""

import logging
from datetime import timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pymongo
from pydantic import ValidationError
from pymongo import MongoClient

from operations_monitoring.config import OperationsCollectorConfig, REPLICATION_NAMESPACE
from operations_monitoring.core.queries import (
    INDEX_BUILD,
    LONGEST_QUERY,
    build_index_build_command,
    build_longest_query_command,
    run_current_op,
)
from operations_monitoring.models.entities import (
    OperationRecord,
    OperationsList,
    OperationsStatus,
)
from operations_monitoring.ops_exceptions import (
    OperationsDecodeError,
    OperationsQueryError,
    OperationsTimeoutError,
)

logger = logging.getLogger(__name__)


def is_replication_getmore(
    record: OperationRecord,
    replication_namespace: str = REPLICATION_NAMESPACE
) -> bool:
    """Whether the record is the replication tail cursor on the oplog."""
    return record.op == "getmore" and record.ns == replication_namespace


def longest_running_duration(
    records: Iterable[OperationRecord],
    replication_namespace: str = REPLICATION_NAMESPACE
) -> timedelta:
    """
    Running time of the longest running operation.

    Replication getmore cursors run for as long as the node is a member of
    the replica set and are skipped. Returns a zero duration when no record
    is left.
    """
    longest = timedelta(0)
    for record in records:
        if is_replication_getmore(record, replication_namespace):
            continue

        running_time = record.running_time
        if running_time > longest:
            longest = running_time

    return longest


def index_build_status(records: List[OperationRecord]) -> Tuple[bool, int, int]:
    """
    Index build indicator and (done, total) progress.

    Only the first reported build is taken into account; concurrent builds
    after it are ignored.
    """
    if not records:
        return False, 0, 0

    progress = records[0].progress
    if progress is None:
        return True, 0, 0
    return True, progress.done, progress.total


def decode_operations_lenient(response: Dict[str, Any], log: logging.Logger) -> List[OperationRecord]:
    """
    Decode a currentOp response, skipping records that do not decode.

    A missing or malformed ``inprog`` field decodes as an empty list.
    """
    inprog = response.get("inprog")
    if not isinstance(inprog, list):
        log.warning(f"failed to decode current operations list: unexpected inprog {type(inprog).__name__}")
        return []

    records = []
    for document in inprog:
        try:
            records.append(OperationRecord.model_validate(document))
        except ValidationError as e:
            log.warning(f"failed to decode current operation, skipping it: {e}")
    return records


def decode_operations_strict(response: Dict[str, Any], query_name: str) -> List[OperationRecord]:
    """
    Decode a currentOp response as a whole.

    Raises:
        OperationsDecodeError: If the response does not match the expected shape
    """
    if "inprog" not in response:
        raise OperationsDecodeError(
            f"failed to decode {query_name} operations list: missing inprog",
            query_name=query_name
        )
    try:
        return OperationsList.model_validate(response).inprog
    except ValidationError as e:
        raise OperationsDecodeError(
            f"failed to decode {query_name} operations list: {e}",
            query_name=query_name
        ) from e


class OperationsStatusCollector:
    """
    Collects the operations status of a MongoDB server.

    Holds only the client handle and its configuration; every call to
    get_operations_status is an independent collection cycle. The client is
    owned by the caller and must already be connected.

    Example:
        ```python
        collector = OperationsStatusCollector(client, OperationsCollectorConfig(default_timeout=5.0))
        status = collector.get_operations_status()
        ```
    """

    def __init__(
        self,
        client: MongoClient,
        config: Optional[OperationsCollectorConfig] = None,
        log: Optional[logging.Logger] = None
    ):
        """
        Initialize the collector.

        Args:
            client: Connected MongoClient used to run the currentOp commands
            config: Collector configuration. If None, uses default settings.
            log: Logger for query and decode failures. Defaults to the module logger.
        """
        self._client = client
        self._config = config or OperationsCollectorConfig()
        self._logger = log or logger

    @property
    def config(self) -> OperationsCollectorConfig:
        return self._config

    def get_operations_status(self, timeout: Optional[float] = None) -> Optional[OperationsStatus]:
        """
        Run one collection cycle.

        Both queries run sequentially under a single deadline. If either
        query fails, times out, or the index build response cannot be
        decoded, the cycle produces no status.

        Args:
            timeout: Deadline in seconds for the whole cycle. If None, the
                     configured default_timeout applies.

        Returns:
            The derived OperationsStatus, or None if the cycle failed
        """
        timeout = self._resolve_timeout(timeout)

        try:
            with pymongo.timeout(timeout):
                longest_query_time = self._get_longest_query_time()
                index_building, done, total = self._get_index_build_status()
        except OperationsTimeoutError as e:
            self._logger.error(f"operations status cycle exceeded its {timeout}s deadline: {e}")
            return None
        except OperationsQueryError as e:
            self._logger.error(str(e))
            return None
        except OperationsDecodeError as e:
            self._logger.error(str(e))
            return None

        return OperationsStatus(
            longest_query_time=longest_query_time,
            index_building=index_building,
            index_building_progress_total=total,
            index_building_progress_done=done,
        )

    def _resolve_timeout(self, timeout: Optional[float]) -> Optional[float]:
        """Per-call deadline, falling back to the configured one when unset or invalid."""
        if timeout is None:
            return self._config.default_timeout
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout < 0:
            self._logger.warning(
                f"timeout ({timeout!r}) must be a non-negative number. "
                f"Using default_timeout ({self._config.default_timeout})."
            )
            return self._config.default_timeout
        return timeout

    def _get_longest_query_time(self) -> timedelta:
        command = build_longest_query_command(self._config.operation_kinds)
        response = run_current_op(self._client, self._config.admin_database, command, LONGEST_QUERY)

        records = decode_operations_lenient(response, self._logger)
        self._logger.debug(f"ops running: {len(records)}")
        for record in records:
            self._logger.debug(
                f"  op={record.op} ns={record.ns} running={record.running_time.total_seconds():.6f}s"
            )

        return longest_running_duration(records, self._config.replication_namespace)

    def _get_index_build_status(self) -> Tuple[bool, int, int]:
        command = build_index_build_command()
        response = run_current_op(self._client, self._config.admin_database, command, INDEX_BUILD)

        records = decode_operations_strict(response, INDEX_BUILD)
        if len(records) > 1:
            self._logger.debug(f"{len(records)} index builds running, reporting the first one only")

        return index_build_status(records)


def get_operations_status(
    client: MongoClient,
    timeout: Optional[float] = None,
    config: Optional[OperationsCollectorConfig] = None,
    log: Optional[logging.Logger] = None
) -> Optional[OperationsStatus]:
    """
    Run one collection cycle with a throwaway collector.

    Returns:
        The derived OperationsStatus, or None if the cycle failed
    """
    return OperationsStatusCollector(client, config=config, log=log).get_operations_status(timeout)
