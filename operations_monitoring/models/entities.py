"""
Operations Status Entities

This module defines Pydantic models for the server's in-flight operations as
reported by the currentOp command, and for the status snapshot derived from
them on each collection cycle.

Typical usage:
    from operations_monitoring import OperationsStatusCollector

    status = collector.get_operations_status()
    if status is not None and status.index_building:
        print(f"Index build: {status.index_building_progress_done}/"
              f"{status.index_building_progress_total}")
"""

from datetime import timedelta
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class OperationProgress(BaseModel):
    """
    Progress counters of a long-running operation.

    Only index builds report these. Both counters default to zero when the
    server omits them.
    """
    model_config = ConfigDict(extra="ignore")

    done: int = 0
    total: int = 0


class OperationRecord(BaseModel):
    """
    A single in-flight server operation from the currentOp output.

    Attributes:
        op: Operation kind, e.g. "query", "insert", "getmore"
        ns: Target namespace ("database.collection")
        secs_running: Whole seconds the operation has been running
        microsecs_running: Microsecond component of the running time
        msg: Free-text status message (index builds report progress here)
        active: Whether the operation is currently active
        progress: Done/total counters, present only for index builds
    """
    model_config = ConfigDict(extra="ignore")

    op: str = ""
    ns: str = ""
    secs_running: int = 0
    microsecs_running: int = 0
    msg: Optional[str] = None
    active: bool = False
    progress: Optional[OperationProgress] = None

    @property
    def running_time(self) -> timedelta:
        """Elapsed running time of the operation."""
        return timedelta(seconds=self.secs_running) + timedelta(microseconds=self.microsecs_running)


class OperationsList(BaseModel):
    """Decoded currentOp response; the operations live under ``inprog``."""
    model_config = ConfigDict(extra="ignore")

    inprog: List[OperationRecord] = Field(default_factory=list)


class OperationsStatus(BaseModel):
    """
    Operations status derived in one collection cycle.

    Immutable. The progress counters are only meaningful while an index
    build is running and must be zero otherwise.

    Attributes:
        longest_query_time: Running time of the longest running operation
        index_building: Whether an index build is in progress
        index_building_progress_total: Total records of the reported build
        index_building_progress_done: Records processed by the reported build
    """
    model_config = ConfigDict(frozen=True)

    longest_query_time: timedelta = timedelta(0)
    index_building: bool = False
    index_building_progress_total: int = 0
    index_building_progress_done: int = 0

    @model_validator(mode="after")
    def check_progress_without_build(self):
        """Reject progress counters when no index build is reported."""
        if not self.index_building and (
            self.index_building_progress_total or self.index_building_progress_done
        ):
            raise ValueError("index build progress requires index_building to be true")
        return self

    @property
    def longest_query_seconds(self) -> float:
        """Longest running time in seconds."""
        return self.longest_query_time.total_seconds()

    @property
    def index_building_percentage(self) -> Optional[float]:
        """Completion percentage of the reported index build, if known."""
        if not self.index_building or self.index_building_progress_total <= 0:
            return None
        return self.index_building_progress_done / self.index_building_progress_total * 100.0
