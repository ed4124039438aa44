"""
PEM key material loading

Keys and certificates arrive as JSON strings in which line breaks may be
escaped as the two characters ``\\n``. They are unescaped and handed to the
cryptography package; a malformed document never yields a partial key.
"""

from enum import Enum
from typing import Union

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.types import (
    PrivateKeyTypes,
    PublicKeyTypes,
)

from ..exceptions import KeyMaterialError


class KeyMaterialKind(str, Enum):
    """Kinds of PEM material the loader understands"""
    PRIVATE_KEY = "private_key"
    PUBLIC_KEY = "public_key"
    CERTIFICATE = "certificate"


KeyMaterial = Union[PrivateKeyTypes, PublicKeyTypes, x509.Certificate]


def unescape_pem(text: str) -> str:
    """Turn literal ``\\n`` sequences into real newlines."""
    return text.replace("\\n", "\n")


def _pem_bytes(text: str) -> bytes:
    if not isinstance(text, str) or not text.strip():
        raise KeyMaterialError("PEM text must be a non-empty string", "INVALID_PEM_INPUT")
    try:
        return unescape_pem(text).encode('ascii')
    except UnicodeEncodeError as e:
        raise KeyMaterialError(f"PEM text must be ASCII: {e}", "INVALID_PEM_INPUT") from e


def load_private_key(text: str) -> PrivateKeyTypes:
    """
    Load an unencrypted PEM private key.

    Args:
        text: PEM text, possibly with escaped newlines

    Returns:
        Private key object from the cryptography package

    Raises:
        KeyMaterialError: If the text is not a valid private key
    """
    data = _pem_bytes(text)
    try:
        return serialization.load_pem_private_key(data, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise KeyMaterialError(f"Failed to parse PEM private key: {e}", "INVALID_PEM") from e


def load_public_key(text: str) -> PublicKeyTypes:
    """
    Load a PEM public key.

    Raises:
        KeyMaterialError: If the text is not a valid public key
    """
    data = _pem_bytes(text)
    try:
        return serialization.load_pem_public_key(data)
    except (ValueError, UnsupportedAlgorithm) as e:
        raise KeyMaterialError(f"Failed to parse PEM public key: {e}", "INVALID_PEM") from e


def load_certificate(text: str) -> x509.Certificate:
    """
    Load a PEM X.509 certificate.

    Raises:
        KeyMaterialError: If the text is not a valid certificate
    """
    data = _pem_bytes(text)
    try:
        return x509.load_pem_x509_certificate(data)
    except ValueError as e:
        raise KeyMaterialError(f"Failed to parse PEM certificate: {e}", "INVALID_PEM") from e


def load_key_material(text: str, kind: KeyMaterialKind) -> KeyMaterial:
    """Load PEM text as the given kind of key material."""
    if kind == KeyMaterialKind.PRIVATE_KEY:
        return load_private_key(text)
    if kind == KeyMaterialKind.PUBLIC_KEY:
        return load_public_key(text)
    if kind == KeyMaterialKind.CERTIFICATE:
        return load_certificate(text)
    raise KeyMaterialError(f"Unsupported key material kind: {kind}", "UNSUPPORTED_FORMAT")


def dump_private_key(key: PrivateKeyTypes) -> str:
    """Serialize a private key as unencrypted PKCS#8 PEM."""
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    ).decode('ascii')


def dump_public_key(key: PublicKeyTypes) -> str:
    """Serialize a public key as SubjectPublicKeyInfo PEM."""
    return key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo
    ).decode('ascii')


def dump_certificate(certificate: x509.Certificate) -> str:
    """Serialize a certificate as PEM."""
    return certificate.public_bytes(serialization.Encoding.PEM).decode('ascii')
