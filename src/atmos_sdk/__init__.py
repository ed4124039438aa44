"""
Atmos Python SDK
Shared-secret request signing for Atmos object storage
"""

from .version import __version__
from .exceptions import (
    AtmosSDKError,
    CredentialError,
    KeyMaterialError,
    DocumentParseError,
    ServerCommunicationError,
)
from .credentials import (
    Credentials,
    KeyringCredentialStore,
    load_credentials_from_env,
)
from .config import (
    AtmosClientConfig,
    LoggingConfig,
    ConfigError,
    configure_logging,
    load_client_config,
)
from .signing import (
    # Core signing functionality
    SignRequest,
    create_request_signer,
    sign_request,
    CanonicalStringBuilder,
    build_string_to_sign,
    HmacSigner,
    sign_string,
    check_hmac_support,
    canonicalize_custom_headers,
    # Types
    AtmosRequest,
    AtmosHeaders,
    HeaderMultimap,
    Payload,
    SigningConfig,
    SigningError,
    MalformedKeyError,
    MissingHeaderError,
    SigningFailure,
    HttpMethod,
    # Configuration
    SigningConfigBuilder,
    create_signing_config,
    create_from_credentials,
    # Diagnostics
    SignatureWire,
    # Utilities
    generate_timestamp,
    # HTTP Integration
    AtmosAuth,
    SigningSession,
    create_signing_session,
)
from .parsing import (
    DataBagItem,
    JsonAdapter,
    KeyMaterialKind,
    build_adapter_table,
    load_private_key,
    load_public_key,
    load_certificate,
)


def initialize_sdk():
    """
    Initialize the Atmos SDK and check platform compatibility.

    Returns:
        dict: Compatibility information with 'compatible' (bool) and 'warnings' (list)
    """
    warnings = []
    compatible = True

    support = check_hmac_support()
    if not support['hmac_sha1_supported']:
        warnings.append(f"HMAC-SHA1 not supported by cryptography backend: {support.get('error')}")
        compatible = False

    return {
        'compatible': compatible,
        'warnings': warnings
    }


# Public API exports
__all__ = [
    '__version__',
    'initialize_sdk',
    # Exceptions
    'AtmosSDKError',
    'CredentialError',
    'KeyMaterialError',
    'DocumentParseError',
    'ServerCommunicationError',
    # Credentials
    'Credentials',
    'KeyringCredentialStore',
    'load_credentials_from_env',
    # Configuration
    'AtmosClientConfig',
    'LoggingConfig',
    'ConfigError',
    'configure_logging',
    'load_client_config',
    # Request Signing - Core
    'SignRequest',
    'create_request_signer',
    'sign_request',
    'CanonicalStringBuilder',
    'build_string_to_sign',
    'HmacSigner',
    'sign_string',
    'check_hmac_support',
    'canonicalize_custom_headers',
    # Request Signing - Types
    'AtmosRequest',
    'AtmosHeaders',
    'HeaderMultimap',
    'Payload',
    'SigningConfig',
    'SigningError',
    'MalformedKeyError',
    'MissingHeaderError',
    'SigningFailure',
    'HttpMethod',
    # Request Signing - Configuration
    'SigningConfigBuilder',
    'create_signing_config',
    'create_from_credentials',
    'SignatureWire',
    'generate_timestamp',
    # Request Signing - HTTP Integration
    'AtmosAuth',
    'SigningSession',
    'create_signing_session',
    # JSON adapters
    'DataBagItem',
    'JsonAdapter',
    'KeyMaterialKind',
    'build_adapter_table',
    'load_private_key',
    'load_public_key',
    'load_certificate',
]
