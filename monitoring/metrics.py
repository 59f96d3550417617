"""
Prometheus metrics for MongoDB operations status.

Design principles:
- No module-level gauges; metric families are built fresh on every scrape
- One collection cycle per scrape
- A failed cycle exports nothing rather than zeros
"""

import logging
from typing import Dict, Iterator, List, Optional

from prometheus_client.core import GaugeMetricFamily
from prometheus_client.registry import Collector

from operations_monitoring import OperationsStatus, OperationsStatusCollector

logger = logging.getLogger(__name__)

SUBSYSTEM = "operations"


def _metric_name(namespace: str, name: str) -> str:
    return f"{namespace}_{SUBSYSTEM}_{name}" if namespace else f"{SUBSYSTEM}_{name}"


def status_to_metrics(
    status: OperationsStatus,
    namespace: str = "mongodb",
    const_labels: Optional[Dict[str, str]] = None
) -> List[GaugeMetricFamily]:
    """
    Translate an operations status snapshot into gauge metric families.

    The index build progress family is only present while a build is
    reported, since its counters are meaningless otherwise.
    """
    const_labels = const_labels or {}
    label_names = list(const_labels.keys())
    label_values = list(const_labels.values())

    longest_query = GaugeMetricFamily(
        _metric_name(namespace, "longest_query_seconds"),
        "Longest query running time in seconds",
        labels=label_names
    )
    longest_query.add_metric(label_values, status.longest_query_seconds)

    index_building = GaugeMetricFamily(
        _metric_name(namespace, "index_building"),
        "Is index building query running, 0 - no, 1 - yes",
        labels=label_names
    )
    index_building.add_metric(label_values, 1.0 if status.index_building else 0.0)

    metrics = [longest_query, index_building]

    if status.index_building:
        progress = GaugeMetricFamily(
            _metric_name(namespace, "index_building_progress"),
            "Holds count of building index total and done records",
            labels=label_names + ["records"]
        )
        progress.add_metric(label_values + ["total"], status.index_building_progress_total)
        progress.add_metric(label_values + ["done"], status.index_building_progress_done)
        metrics.append(progress)

    return metrics


class OperationsMetricsCollector(Collector):
    """
    Custom Prometheus collector running one operations status cycle per scrape.

    Register it in a CollectorRegistry; prometheus_client calls collect()
    on every scrape of the /metrics endpoint.

    Example:
        ```python
        registry = CollectorRegistry()
        registry.register(OperationsMetricsCollector(status_collector))
        ```
    """

    def __init__(
        self,
        status_collector: OperationsStatusCollector,
        namespace: str = "mongodb",
        const_labels: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None
    ):
        """
        Args:
            status_collector: Collector deriving the operations status
            namespace: Prefix of every metric name
            const_labels: Labels added to every sample
            timeout: Deadline in seconds for one scrape's collection cycle.
                     If None, the status collector's default applies.
        """
        self._status_collector = status_collector
        self._namespace = namespace
        self._const_labels = dict(const_labels or {})
        self._timeout = timeout

    def describe(self) -> List[GaugeMetricFamily]:
        """Metric families exported by this collector, without samples."""
        label_names = list(self._const_labels.keys())
        return [
            GaugeMetricFamily(_metric_name(self._namespace, "longest_query_seconds"),
                              "Longest query running time in seconds", labels=label_names),
            GaugeMetricFamily(_metric_name(self._namespace, "index_building"),
                              "Is index building query running, 0 - no, 1 - yes", labels=label_names),
            GaugeMetricFamily(_metric_name(self._namespace, "index_building_progress"),
                              "Holds count of building index total and done records",
                              labels=label_names + ["records"]),
        ]

    def collect(self) -> Iterator[GaugeMetricFamily]:
        status = self._status_collector.get_operations_status(self._timeout)
        if status is None:
            logger.warning("operations status unavailable, skipping operations metrics for this scrape")
            return

        yield from status_to_metrics(status, self._namespace, self._const_labels)
