"""
Tests for settings loading.
"""

import pytest
import yaml
from pydantic import ValidationError

from config import ExporterSettings, MongoOpsSettings, load_settings


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    import os
    for name in list(os.environ):
        if name.upper().startswith("MONGO_OPS_"):
            monkeypatch.delenv(name)


def test_defaults():
    settings = MongoOpsSettings()

    assert settings.connection.uri == "mongodb://localhost:27017"
    assert settings.operations.admin_database == "admin"
    assert settings.operations.replication_namespace == "local.oplog.rs"
    assert settings.exporter.namespace == "mongodb"
    assert settings.exporter.port == 9216
    assert settings.exporter.log_level == "INFO"


def test_nested_environment_override(monkeypatch):
    monkeypatch.setenv("MONGO_OPS_EXPORTER__PORT", "9300")
    monkeypatch.setenv("MONGO_OPS_CONNECTION__URI", "mongodb://db.internal:27017")

    settings = MongoOpsSettings()

    assert settings.exporter.port == 9300
    assert settings.connection.uri == "mongodb://db.internal:27017"


def test_section_environment_override(monkeypatch):
    monkeypatch.setenv("MONGO_OPS_OPERATIONS_SCRAPE_TIMEOUT", "2.5")

    assert MongoOpsSettings().operations.scrape_timeout == 2.5


def test_log_level_is_normalized():
    assert ExporterSettings(log_level="debug").log_level == "DEBUG"


def test_invalid_port_is_rejected():
    with pytest.raises(ValidationError):
        ExporterSettings(port=70000)


def test_load_from_yaml(tmp_path):
    config_file = tmp_path / "exporter.yaml"
    config_file.write_text(yaml.safe_dump({
        "connection": {"uri": "mongodb://replica-0:27017", "retry_count": 5},
        "exporter": {"namespace": "mongo", "const_labels": {"cluster": "east"}},
    }))

    settings = load_settings(str(config_file))

    assert settings.connection.uri == "mongodb://replica-0:27017"
    assert settings.connection.retry_count == 5
    assert settings.exporter.namespace == "mongo"
    assert settings.exporter.const_labels == {"cluster": "east"}
    assert settings.exporter.port == 9216


def test_load_missing_file_falls_back_to_defaults(tmp_path):
    settings = load_settings(str(tmp_path / "missing.yaml"))

    assert settings.connection.uri == "mongodb://localhost:27017"


def test_yaml_round_trip():
    rendered = yaml.safe_load(MongoOpsSettings().to_yaml())

    assert rendered["connection"]["uri"] == "mongodb://localhost:27017"
    assert rendered["exporter"]["port"] == 9216
