"""
Tests for the exporter process wiring and command line.
"""

from unittest.mock import MagicMock

import pytest

from config import MongoOpsSettings, OperationsSettings
from connection_management import ConnectionFeedback, ConnectionStatus, MongoConnector
from mongo_ops_exceptions import ConfigurationError
from monitoring import exporter
from monitoring.exporter import (
    OperationsExporter,
    apply_overrides,
    build_parser,
    collector_config_from_settings,
    main,
    parse_listen_address,
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    import os
    for name in list(os.environ):
        if name.upper().startswith("MONGO_OPS_"):
            monkeypatch.delenv(name)


@pytest.mark.parametrize("value, expected", [
    (":9216", ("0.0.0.0", 9216)),
    ("127.0.0.1:9100", ("127.0.0.1", 9100)),
    ("[::1]:9216", ("::1", 9216)),
])
def test_parse_listen_address(value, expected):
    assert parse_listen_address(value) == expected


@pytest.mark.parametrize("value", ["9216", "localhost:", "localhost:http"])
def test_parse_listen_address_rejects_invalid(value):
    with pytest.raises(ConfigurationError):
        parse_listen_address(value)


def test_collector_config_from_settings():
    config = collector_config_from_settings(OperationsSettings(
        admin_database="admin",
        replication_namespace="local.oplog.rs",
        scrape_timeout=4.0,
    ))

    assert config.default_timeout == 4.0
    assert config.replication_namespace == "local.oplog.rs"


def test_apply_overrides():
    args = build_parser().parse_args([
        "--mongodb.uri", "mongodb://db:27017",
        "--web.listen-address", "127.0.0.1:9300",
        "--namespace", "mongo",
        "--log-level", "debug",
    ])

    settings = apply_overrides(MongoOpsSettings(), args)

    assert settings.connection.uri == "mongodb://db:27017"
    assert settings.exporter.listen_address == "127.0.0.1"
    assert settings.exporter.port == 9300
    assert settings.exporter.namespace == "mongo"
    assert settings.exporter.log_level == "DEBUG"


def test_print_config(capsys):
    assert main(["--print-config", "--mongodb.uri", "mongodb://db:27017"]) == 0

    assert "mongodb://db:27017" in capsys.readouterr().out


def test_invalid_listen_address_exits_with_usage_error(capsys):
    assert main(["--web.listen-address", "nowhere"]) == 2

    assert "Invalid configuration" in capsys.readouterr().err


def test_exporter_does_not_start_without_server(monkeypatch):
    connector = MagicMock(spec=MongoConnector)
    connector.establish_connection.return_value = ConnectionFeedback(
        connection_id="mongo-conn-test",
        status=ConnectionStatus.UNAVAILABLE,
        message="MongoDB server did not answer",
    )
    start_http_server = MagicMock()
    monkeypatch.setattr(exporter, "start_http_server", start_http_server)

    assert OperationsExporter(MongoOpsSettings(), connector=connector).start() is False
    start_http_server.assert_not_called()


def test_exporter_registers_collector_and_serves(monkeypatch):
    connector = MagicMock(spec=MongoConnector)
    connector.establish_connection.return_value = ConnectionFeedback(
        connection_id="mongo-conn-test",
        status=ConnectionStatus.SUCCESS,
        message="ok",
        client=MagicMock(),
    )
    start_http_server = MagicMock()
    monkeypatch.setattr(exporter, "start_http_server", start_http_server)
    settings = MongoOpsSettings()

    operations_exporter = OperationsExporter(settings, connector=connector)

    assert operations_exporter.start() is True
    start_http_server.assert_called_once_with(9216, addr="0.0.0.0", registry=operations_exporter.registry)

    operations_exporter.stop()
    operations_exporter.serve_forever()
    connector.close_connection.assert_called_once()


def test_missing_config_file_exits_with_usage_error(tmp_path, capsys):
    missing = tmp_path / "exporter.yaml"

    assert main(["--config", str(missing), "--print-config"]) == 2

    assert "not found" in capsys.readouterr().err


def test_exporter_releases_connection_when_address_is_taken(monkeypatch):
    connector = MagicMock(spec=MongoConnector)
    connector.establish_connection.return_value = ConnectionFeedback(
        connection_id="mongo-conn-test",
        status=ConnectionStatus.SUCCESS,
        message="ok",
        client=MagicMock(),
    )
    connector.client = MagicMock()
    monkeypatch.setattr(exporter, "start_http_server", MagicMock(side_effect=OSError("Address already in use")))

    assert OperationsExporter(MongoOpsSettings(), connector=connector).start() is False
    connector.close_connection.assert_called_once()
