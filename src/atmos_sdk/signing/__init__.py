"""
Atmos Python SDK - Request Signing Module

Shared-secret HMAC-SHA1 request signing for Atmos object storage.
This module builds the string to sign for a request, signs it with the
account's shared secret and injects the uid, Date and signature headers.
"""

from .types import (
    AtmosRequest,
    AtmosHeaders,
    ECHOED_HEADERS,
    HeaderMultimap,
    Payload,
    SigningConfig,
    SigningError,
    SigningErrorCodes,
    MalformedKeyError,
    MissingHeaderError,
    SigningFailure,
    HttpMethod,
)

from .headers import (
    normalize_header_value,
    canonicalize_custom_headers,
    format_custom_headers,
)

from .canonical_string import (
    CanonicalStringBuilder,
    build_string_to_sign,
)

from .signer import (
    HmacSigner,
    sign_string,
    check_hmac_support,
)

from .request_filter import (
    SignRequest,
    create_request_signer,
    sign_request,
)

from .signing_config import (
    SigningConfigBuilder,
    create_signing_config,
    create_from_credentials,
)

from .wire import (
    SignatureWire,
    WireEntry,
    WireDirection,
    SIGNATURE_LOGGER_NAME,
)

from .utils import (
    generate_timestamp,
    decode_secret_key,
)

from .integration import (
    AtmosAuth,
    SigningSession,
    create_signing_session,
    sign_prepared_request,
)

# Public API exports
__all__ = [
    # Core signing functionality
    'SignRequest',
    'create_request_signer',
    'sign_request',
    'CanonicalStringBuilder',
    'build_string_to_sign',
    'HmacSigner',
    'sign_string',
    'check_hmac_support',
    'normalize_header_value',
    'canonicalize_custom_headers',
    'format_custom_headers',
    # Types
    'AtmosRequest',
    'AtmosHeaders',
    'ECHOED_HEADERS',
    'HeaderMultimap',
    'Payload',
    'SigningConfig',
    'SigningError',
    'SigningErrorCodes',
    'MalformedKeyError',
    'MissingHeaderError',
    'SigningFailure',
    'HttpMethod',
    # Configuration
    'SigningConfigBuilder',
    'create_signing_config',
    'create_from_credentials',
    # Diagnostics
    'SignatureWire',
    'WireEntry',
    'WireDirection',
    'SIGNATURE_LOGGER_NAME',
    # Utilities
    'generate_timestamp',
    'decode_secret_key',
    # HTTP Integration
    'AtmosAuth',
    'SigningSession',
    'create_signing_session',
    'sign_prepared_request',
]
