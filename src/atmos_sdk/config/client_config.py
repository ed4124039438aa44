"""
Client configuration for the Atmos Python SDK

Loads the endpoint, credential and logging settings from JSON, a file or the
environment, and turns them into a signing configuration.
"""

import os
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from ..credentials import Credentials, UID_ENV_VAR, SECRET_ENV_VAR
from ..signing.types import SigningConfig, TimestampProvider
from ..signing.signing_config import create_from_credentials
from ..signing.wire import SignatureWire, SIGNATURE_LOGGER_NAME

ENDPOINT_ENV_VAR = "ATMOS_ENDPOINT"
LOG_LEVEL_ENV_VAR = "ATMOS_LOG_LEVEL"
SIGNATURE_WIRE_ENV_VAR = "ATMOS_SIGNATURE_WIRE"

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Configuration loading and validation error"""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "WARNING"
    log_signatures: bool = False


@dataclass
class AtmosClientConfig:
    """Atmos client configuration"""
    endpoint: str
    uid: str
    secret: str
    signature_wire: bool = False
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        self._validate()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AtmosClientConfig':
        """Build configuration from a parsed JSON object"""
        try:
            logging_data = data.get('logging', {})
            return cls(
                endpoint=data['endpoint'],
                uid=data['uid'],
                secret=data['secret'],
                signature_wire=bool(data.get('signature_wire', False)),
                logging=LoggingConfig(
                    level=logging_data.get('level', 'WARNING'),
                    log_signatures=bool(logging_data.get('log_signatures', False))
                )
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ConfigError(f"Invalid configuration format: {e}", "INVALID_FORMAT")

    @classmethod
    def from_json(cls, json_string: str) -> 'AtmosClientConfig':
        """Load configuration from JSON string"""
        try:
            data = json.loads(json_string)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Failed to parse configuration JSON: {e}", "PARSE_ERROR")
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a JSON object", "INVALID_FORMAT")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> 'AtmosClientConfig':
        """Load configuration from file"""
        path = Path(file_path)
        try:
            json_string = path.read_text(encoding='utf-8')
        except OSError as e:
            raise ConfigError(f"Failed to read configuration file {path}: {e}", "FILE_ERROR")
        return cls.from_json(json_string)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'AtmosClientConfig':
        """Load configuration from ATMOS_* environment variables"""
        env = os.environ if environ is None else environ
        missing = [name for name in (ENDPOINT_ENV_VAR, UID_ENV_VAR, SECRET_ENV_VAR) if not env.get(name)]
        if missing:
            raise ConfigError(
                f"Missing environment variables: {', '.join(missing)}",
                "MISSING_VALUE"
            )

        wire = env.get(SIGNATURE_WIRE_ENV_VAR, '').lower() in ('1', 'true', 'yes')
        return cls(
            endpoint=env[ENDPOINT_ENV_VAR],
            uid=env[UID_ENV_VAR],
            secret=env[SECRET_ENV_VAR],
            signature_wire=wire,
            logging=LoggingConfig(
                level=env.get(LOG_LEVEL_ENV_VAR, 'WARNING').upper(),
                log_signatures=wire
            )
        )

    @property
    def credentials(self) -> Credentials:
        return Credentials(uid=self.uid, secret=self.secret)

    def to_signing_config(self, timestamp_provider: Optional[TimestampProvider] = None) -> SigningConfig:
        """Convert to signing configuration"""
        wire = SignatureWire(enabled=True) if self.signature_wire else None
        return create_from_credentials(
            self.credentials,
            timestamp_provider=timestamp_provider,
            signature_wire=wire
        )

    def _validate(self) -> None:
        """Validate configuration"""
        if not self.endpoint:
            raise ConfigError("Endpoint cannot be empty", "MISSING_VALUE")

        if not self.endpoint.startswith(('http://', 'https://')):
            raise ConfigError(f"Endpoint must be an http(s) URL: {self.endpoint}", "INVALID_VALUE")

        if not self.uid:
            raise ConfigError("UID cannot be empty", "MISSING_VALUE")

        if not self.secret:
            raise ConfigError("Shared secret cannot be empty", "MISSING_VALUE")

        if self.logging.level.upper() not in VALID_LOG_LEVELS:
            raise ConfigError(f"Invalid log level: {self.logging.level}", "INVALID_VALUE")


def configure_logging(config: LoggingConfig) -> None:
    """
    Apply logging levels to the SDK loggers.

    The signature logger prints canonical strings and signed requests, so it
    stays silent unless ``log_signatures`` is set.
    """
    logging.getLogger('atmos_sdk').setLevel(config.level.upper())
    signature_level = logging.DEBUG if config.log_signatures else logging.WARNING
    logging.getLogger(SIGNATURE_LOGGER_NAME).setLevel(signature_level)


def load_client_config(file_path: Optional[Union[str, Path]] = None) -> AtmosClientConfig:
    """
    Load client configuration from a file, or from the environment when no
    file is given.
    """
    if file_path is not None:
        return AtmosClientConfig.from_file(file_path)
    return AtmosClientConfig.from_env()
