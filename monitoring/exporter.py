"""
MongoDB Operations Exporter

Serves the operations status metrics of one MongoDB server over HTTP for a
Prometheus server to scrape.

Usage:
    mongodb-ops-exporter --mongodb.uri mongodb://localhost:27017 --web.listen-address :9216
    mongodb-ops-exporter --config exporter.yaml --log-level debug
    mongodb-ops-exporter --config exporter.yaml --print-config
"""

import argparse
import logging
import os
import sys
import threading
from typing import List, Optional, Tuple

from prometheus_client import CollectorRegistry, start_http_server
from pydantic import ValidationError

from config import MongoOpsSettings, OperationsSettings, load_settings
from connection_management import ConnectionStatus, MongoConnector
from mongo_ops_exceptions import ConfigurationError
from monitoring.metrics import OperationsMetricsCollector
from operations_monitoring import OperationsCollectorConfig, OperationsStatusCollector

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def collector_config_from_settings(settings: OperationsSettings) -> OperationsCollectorConfig:
    """Build the collector configuration from the operations settings."""
    return OperationsCollectorConfig(
        admin_database=settings.admin_database,
        replication_namespace=settings.replication_namespace,
        default_timeout=settings.scrape_timeout,
    )


def parse_listen_address(value: str) -> Tuple[str, int]:
    """
    Split a HOST:PORT listen address. An empty host binds all interfaces.

    Raises:
        ConfigurationError: If the address has no valid port
    """
    host, sep, port = value.rpartition(":")
    if not sep or not port.isdigit():
        raise ConfigurationError(f"Invalid listen address {value!r}, expected HOST:PORT")
    return host.strip("[]") or "0.0.0.0", int(port)


def setup_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


class OperationsExporter:
    """
    Wires the operations status collector to a Prometheus HTTP endpoint.

    The exporter owns the MongoDB connection and a dedicated CollectorRegistry,
    so nothing is registered in the process-wide default registry.
    """

    def __init__(self, settings: MongoOpsSettings, connector: Optional[MongoConnector] = None):
        self.settings = settings
        self.registry = CollectorRegistry()
        self._connector = connector or MongoConnector(settings.connection)
        self._stop_event = threading.Event()

    def start(self) -> bool:
        """
        Connect to the server, register the collector and start the HTTP server.

        Returns:
            False if the server could not be reached or the listen address
            could not be bound, True otherwise
        """
        feedback = self._connector.establish_connection()
        if feedback.status != ConnectionStatus.SUCCESS:
            logger.error(f"Not starting exporter: {feedback.message}")
            return False

        exporter_settings = self.settings.exporter
        status_collector = OperationsStatusCollector(
            feedback.client,
            config=collector_config_from_settings(self.settings.operations)
        )
        self.registry.register(OperationsMetricsCollector(
            status_collector,
            namespace=exporter_settings.namespace,
            const_labels=exporter_settings.const_labels,
        ))

        try:
            start_http_server(exporter_settings.port, addr=exporter_settings.listen_address, registry=self.registry)
        except OSError as e:
            logger.error(
                f"Failed to serve metrics on {exporter_settings.listen_address}:{exporter_settings.port}: {e}"
            )
            self.close()
            return False
        logger.info(
            f"Serving operations metrics on {exporter_settings.listen_address}:{exporter_settings.port}/metrics"
        )
        return True

    def serve_forever(self) -> None:
        """Block until stop() is called or the process is interrupted."""
        try:
            self._stop_event.wait()
        except KeyboardInterrupt:
            logger.info("Interrupted, shutting down")
        finally:
            self.close()

    def stop(self) -> None:
        self._stop_event.set()

    def close(self) -> None:
        if self._connector.client is not None:
            self._connector.close_connection()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mongodb-ops-exporter",
        description="Export MongoDB longest running query and index build metrics to Prometheus"
    )
    parser.add_argument("--config", help="Path to a YAML settings file")
    parser.add_argument("--mongodb.uri", dest="mongodb_uri", help="MongoDB connection string")
    parser.add_argument("--web.listen-address", dest="listen_address",
                        help="Address to serve metrics on, as HOST:PORT")
    parser.add_argument("--namespace", help="Metric name prefix")
    parser.add_argument("--log-level", dest="log_level", help="Logging level (DEBUG, INFO, WARNING, ERROR)")
    parser.add_argument("--print-config", action="store_true",
                        help="Print the effective settings as YAML and exit")
    return parser


def apply_overrides(settings: MongoOpsSettings, args: argparse.Namespace) -> MongoOpsSettings:
    """Apply command-line overrides on top of the loaded settings."""
    connection = {}
    exporter = {}

    if args.mongodb_uri:
        connection["uri"] = args.mongodb_uri
    if args.listen_address:
        exporter["listen_address"], exporter["port"] = parse_listen_address(args.listen_address)
    if args.namespace is not None:
        exporter["namespace"] = args.namespace
    if args.log_level:
        exporter["log_level"] = args.log_level.upper()

    data = settings.model_dump()
    data["connection"].update(connection)
    data["exporter"].update(exporter)
    return MongoOpsSettings.model_validate(data)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.config and not os.path.isfile(args.config):
        print(f"Invalid configuration: config file {args.config} not found", file=sys.stderr)
        return 2

    try:
        settings = apply_overrides(load_settings(args.config), args)
    except (ConfigurationError, ValidationError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    if args.print_config:
        print(settings.to_yaml())
        return 0

    setup_logging(settings.exporter.log_level)

    exporter = OperationsExporter(settings)
    if not exporter.start():
        exporter.close()
        return 1

    exporter.serve_forever()
    return 0


if __name__ == "__main__":
    sys.exit(main())
