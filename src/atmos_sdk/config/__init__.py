"""
Configuration management for Atmos Python SDK

This module loads client settings (endpoint, credential, logging) from
JSON, files or the environment.
"""

from .client_config import (
    AtmosClientConfig,
    LoggingConfig,
    ConfigError,
    configure_logging,
    load_client_config,
)

__all__ = [
    'AtmosClientConfig',
    'LoggingConfig',
    'ConfigError',
    'configure_logging',
    'load_client_config',
]
