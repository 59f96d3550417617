"""
Tests for the Prometheus operations metrics collector.
"""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from prometheus_client import CollectorRegistry

from monitoring import OperationsMetricsCollector, status_to_metrics
from operations_monitoring import OperationsStatus, OperationsStatusCollector


def make_registry(status, **kwargs):
    status_collector = MagicMock(spec=OperationsStatusCollector)
    status_collector.get_operations_status.return_value = status
    registry = CollectorRegistry()
    registry.register(OperationsMetricsCollector(status_collector, **kwargs))
    return registry, status_collector


class TestStatusToMetrics:

    def test_metric_names(self):
        status = OperationsStatus(index_building=True, index_building_progress_done=1,
                                  index_building_progress_total=2)

        names = [family.name for family in status_to_metrics(status)]

        assert names == [
            "mongodb_operations_longest_query_seconds",
            "mongodb_operations_index_building",
            "mongodb_operations_index_building_progress",
        ]

    def test_progress_only_while_building(self):
        names = [family.name for family in status_to_metrics(OperationsStatus())]

        assert "mongodb_operations_index_building_progress" not in names

    def test_custom_namespace(self):
        names = [family.name for family in status_to_metrics(OperationsStatus(), namespace="db")]

        assert names == ["db_operations_longest_query_seconds", "db_operations_index_building"]


class TestOperationsMetricsCollector:

    def test_exports_status(self):
        status = OperationsStatus(
            longest_query_time=timedelta(seconds=5, microseconds=250000),
            index_building=True,
            index_building_progress_done=40,
            index_building_progress_total=100,
        )
        registry, _ = make_registry(status)

        assert registry.get_sample_value("mongodb_operations_longest_query_seconds") == 5.25
        assert registry.get_sample_value("mongodb_operations_index_building") == 1.0
        assert registry.get_sample_value(
            "mongodb_operations_index_building_progress", {"records": "total"}) == 100.0
        assert registry.get_sample_value(
            "mongodb_operations_index_building_progress", {"records": "done"}) == 40.0

    def test_no_index_build(self):
        registry, _ = make_registry(OperationsStatus(longest_query_time=timedelta(seconds=2)))

        assert registry.get_sample_value("mongodb_operations_longest_query_seconds") == 2.0
        assert registry.get_sample_value("mongodb_operations_index_building") == 0.0
        assert registry.get_sample_value(
            "mongodb_operations_index_building_progress", {"records": "total"}) is None

    def test_failed_cycle_exports_nothing(self):
        registry, _ = make_registry(None)

        assert list(registry.collect()) == []
        assert registry.get_sample_value("mongodb_operations_longest_query_seconds") is None
        assert registry.get_sample_value("mongodb_operations_index_building") is None

    def test_one_cycle_per_scrape(self):
        registry, status_collector = make_registry(OperationsStatus(), timeout=3.0)

        list(registry.collect())
        list(registry.collect())

        assert status_collector.get_operations_status.call_count == 2
        status_collector.get_operations_status.assert_called_with(3.0)

    def test_registration_does_not_query_server(self):
        _, status_collector = make_registry(OperationsStatus())

        status_collector.get_operations_status.assert_not_called()

    def test_const_labels(self):
        status = OperationsStatus(index_building=True, index_building_progress_done=3,
                                  index_building_progress_total=9)
        registry, _ = make_registry(status, const_labels={"cl_role": "primary"})

        assert registry.get_sample_value(
            "mongodb_operations_index_building", {"cl_role": "primary"}) == 1.0
        assert registry.get_sample_value(
            "mongodb_operations_index_building_progress",
            {"cl_role": "primary", "records": "done"}) == 3.0

    @pytest.mark.parametrize("namespace", ["mongodb", "percona"])
    def test_describe_matches_collect(self, namespace):
        status = OperationsStatus(index_building=True)
        collector = OperationsMetricsCollector(MagicMock(**{"get_operations_status.return_value": status}),
                                               namespace=namespace)

        described = [family.name for family in collector.describe()]
        collected = [family.name for family in collector.collect()]

        assert described == collected
