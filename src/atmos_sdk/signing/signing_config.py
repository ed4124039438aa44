"""
Configuration management for request signing

This module provides a fluent builder for Atmos signing configurations and
helpers that build one from stored credentials.
"""

from typing import Optional

from .types import (
    SigningConfig,
    SigningError,
    SigningErrorCodes,
    MalformedKeyError,
    TimestampProvider,
)
from .utils import generate_timestamp, decode_secret_key
from .wire import SignatureWire


class SigningConfigBuilder:
    """
    Builder for creating signing configurations with fluent API
    """

    def __init__(self):
        self._uid: Optional[str] = None
        self._secret_key: Optional[bytes] = None
        self._timestamp_provider: TimestampProvider = generate_timestamp
        self._signature_wire: Optional[SignatureWire] = None

    def uid(self, uid: str) -> 'SigningConfigBuilder':
        """
        Set the account identifier.

        Args:
            uid: Value of the ``x-emc-uid`` header, e.g. ``<subtenant>/<user>``

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._uid = uid
        return self

    def encoded_key(self, encoded_key: str) -> 'SigningConfigBuilder':
        """
        Set the shared secret as delivered by the service (base64).

        Raises:
            MalformedKeyError: If the secret is not valid base64
        """
        self._secret_key = decode_secret_key(encoded_key)
        return self

    def secret_key(self, secret_key: bytes) -> 'SigningConfigBuilder':
        """Set the already decoded shared secret."""
        self._secret_key = secret_key
        return self

    def timestamp_provider(self, provider: TimestampProvider) -> 'SigningConfigBuilder':
        """
        Set the source of Date header values.

        Args:
            provider: Callable returning an RFC 1123 date string

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._timestamp_provider = provider
        return self

    def signature_wire(self, wire: Optional[SignatureWire]) -> 'SigningConfigBuilder':
        """Attach a diagnostic sink for canonical strings and signatures."""
        self._signature_wire = wire
        return self

    def build(self) -> SigningConfig:
        """
        Build the signing configuration.

        Returns:
            SigningConfig: Validated configuration

        Raises:
            SigningError: If required fields are missing or invalid
        """
        if not self._uid:
            raise SigningError(
                "UID is required",
                SigningErrorCodes.INVALID_UID
            )

        if self._secret_key is None:
            raise SigningError(
                "Shared secret is required",
                SigningErrorCodes.INVALID_CONFIG
            )

        if not isinstance(self._secret_key, bytes) or not self._secret_key:
            raise MalformedKeyError("Shared secret must be non-empty bytes")

        try:
            return SigningConfig(
                uid=self._uid,
                secret_key=self._secret_key,
                timestamp_provider=self._timestamp_provider,
                signature_wire=self._signature_wire
            )
        except ValueError as e:
            raise SigningError(
                f"Invalid signing configuration: {e}",
                SigningErrorCodes.INVALID_CONFIG,
                {"original_error": str(e)}
            ) from e


def create_signing_config() -> SigningConfigBuilder:
    """
    Create a new signing configuration builder.

    Returns:
        SigningConfigBuilder: New builder instance
    """
    return SigningConfigBuilder()


def create_from_credentials(
    credentials,
    timestamp_provider: Optional[TimestampProvider] = None,
    signature_wire: Optional[SignatureWire] = None
) -> SigningConfig:
    """
    Create signing configuration from a credentials object.

    Args:
        credentials: Object with ``uid`` and base64 ``secret`` attributes
        timestamp_provider: Optional Date header source
        signature_wire: Optional diagnostic sink

    Returns:
        SigningConfig: Signing configuration
    """
    builder = (create_signing_config()
               .uid(credentials.uid)
               .encoded_key(credentials.secret)
               .signature_wire(signature_wire))
    if timestamp_provider is not None:
        builder.timestamp_provider(timestamp_provider)
    return builder.build()
