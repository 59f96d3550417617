"""
Pydantic Settings for Mongo Operations

This module provides strongly-typed configuration settings using Pydantic,
with support for environment variables and YAML configuration files.
"""

from typing import Dict, Optional, Union
from enum import Enum
from pathlib import Path
import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_yaml import to_yaml_str


class LogLevel(str, Enum):
    """
    Logging levels accepted by the exporter.
    """
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ConnectionSettings(BaseSettings):
    """
    Connection settings for reaching the MongoDB server.

    These settings control how the client connects to the server, including:
    - Server location (a standard MongoDB connection string)
    - Driver-level timeouts for server selection and socket connect
    - Retry behavior while waiting for the server at startup
    """
    model_config = SettingsConfigDict(env_prefix="MONGO_OPS_CONNECTION_", case_sensitive=False)

    uri: str = Field("mongodb://localhost:27017",
                     description="MongoDB connection string (credentials, if any, belong here)")
    app_name: str = Field("mongo-ops-exporter",
                          description="Application name reported to the server in the handshake")
    server_selection_timeout_ms: int = Field(5000,
                                             description="How long the driver waits to find a suitable server")
    connect_timeout_ms: int = Field(5000,
                                    description="Socket connect timeout in milliseconds")
    direct_connection: bool = Field(True,
                                    description="Talk to the addressed node only, without replica set discovery")
    retry_count: int = Field(3,
                             description="Number of times to retry the startup ping")
    retry_interval: float = Field(1.0,
                                  description="Initial wait in seconds between startup ping attempts")


class OperationsSettings(BaseSettings):
    """
    Settings for the operations status collector.

    These settings determine where the currentOp queries are sent and
    how long a single collection cycle may take.
    """
    model_config = SettingsConfigDict(env_prefix="MONGO_OPS_OPERATIONS_", case_sensitive=False)

    admin_database: str = Field("admin",
                                description="Database the currentOp command is run against")
    replication_namespace: str = Field("local.oplog.rs",
                                       description="Namespace of the replication tail cursor excluded from query latency")
    scrape_timeout: Optional[float] = Field(10.0,
                                            description="Deadline in seconds for one collection cycle (None disables it)")


class ExporterSettings(BaseSettings):
    """
    Settings for the Prometheus exporter process.

    These settings configure how the metrics are named and served:
    - Metric namespace prefix
    - HTTP listen address and port
    - Logging verbosity
    - Constant labels attached to every sample
    """
    model_config = SettingsConfigDict(env_prefix="MONGO_OPS_EXPORTER_", case_sensitive=False,
                                      use_enum_values=True)

    namespace: str = Field("mongodb",
                           description="Prefix of every exported metric name")
    listen_address: str = Field("0.0.0.0",
                                description="Address the metrics HTTP server binds to")
    port: int = Field(9216,
                      description="Port the metrics HTTP server listens on")
    log_level: LogLevel = Field(LogLevel.INFO,
                                description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
    const_labels: Dict[str, str] = Field(default_factory=dict,
                                         description="Labels added to every exported sample")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept lower-case level names."""
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("port")
    @classmethod
    def validate_port(cls, v):
        """Ensure the port is a usable TCP port."""
        if not 0 < v < 65536:
            raise ValueError(f"port must be between 1 and 65535, got {v}")
        return v


class MongoOpsSettings(BaseSettings):
    """
    Main settings class that consolidates all configuration categories.

    This class serves as the central configuration hub for the entire Mongo_Ops package:
    - Provides a unified interface for all settings
    - Supports loading from YAML files
    - Enables environment variable overrides for all nested settings
    - Organizes settings into logical categories for better maintainability

    Usage:
        # Load from environment variables and defaults
        settings = MongoOpsSettings()

        # Load from YAML file
        settings = MongoOpsSettings.from_yaml('config.yaml')

        # Access nested settings
        uri = settings.connection.uri
        port = settings.exporter.port
    """
    model_config = SettingsConfigDict(env_prefix="MONGO_OPS_", case_sensitive=False,
                                      env_nested_delimiter="__")

    connection: ConnectionSettings = Field(default_factory=ConnectionSettings,
                                           description="Connection settings for the MongoDB server")
    operations: OperationsSettings = Field(default_factory=OperationsSettings,
                                           description="Operations status collector settings")
    exporter: ExporterSettings = Field(default_factory=ExporterSettings,
                                       description="Prometheus exporter settings")

    @classmethod
    def from_yaml(cls, yaml_file: Union[str, Path]) -> "MongoOpsSettings":
        """Load settings from YAML file"""
        import yaml
        with open(yaml_file, 'r') as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self) -> str:
        """Render the effective settings as YAML"""
        return to_yaml_str(self)


def load_settings(config_path: Optional[str] = None) -> MongoOpsSettings:
    """
    Load settings from file and/or environment variables.

    - If config_path is provided and exists, loads settings from the YAML file
    - Otherwise, creates a new settings instance with values from environment variables

    Args:
        config_path: Path to YAML configuration file. If None or file doesn't exist,
                    falls back to environment variables and default values.

    Returns:
        MongoOpsSettings object with loaded configuration

    Example:
        # Load from specific config file
        settings = load_settings("/path/to/config.yaml")

        # Load from environment variables and defaults
        settings = load_settings()
    """
    if config_path and os.path.exists(config_path):
        return MongoOpsSettings.from_yaml(config_path)
    return MongoOpsSettings()
