"""
Monitoring Module

This module exposes the MongoDB operations status to Prometheus:
- A custom collector running one operations status cycle per scrape
- Translation of status snapshots into gauge metric families
- The exporter process serving /metrics over HTTP
"""

from .metrics import OperationsMetricsCollector, status_to_metrics

__all__ = [
    'OperationsMetricsCollector',
    'status_to_metrics'
]
