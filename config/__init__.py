"""
Configuration Module

This module provides centralized configuration management for Mongo operations:
- Connection configuration
- Operations status collector settings
- Prometheus exporter settings
- Configuration validation and loading

Implements an environment-aware configuration system
with sensible defaults and validation using Pydantic.
"""

from .settings import (
    MongoOpsSettings,
    ConnectionSettings,
    OperationsSettings,
    ExporterSettings,
    LogLevel,
    load_settings
)

__all__ = [
    'MongoOpsSettings',
    'ConnectionSettings',
    'OperationsSettings',
    'ExporterSettings',
    'LogLevel',
    'load_settings'
]
