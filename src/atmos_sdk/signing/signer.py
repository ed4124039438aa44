"""
HMAC-SHA1 signer for Atmos requests

The signature is the base64 encoding of HMAC-SHA1(secret, utf8(string_to_sign)).
The HMAC itself is computed by the cryptography package.
"""

import base64
from typing import Any, Dict, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, hmac

from .types import MalformedKeyError, SigningFailure
from .utils import decode_secret_key


def sign_string(key: bytes, text: str) -> str:
    """
    Sign a string with HMAC-SHA1.

    Args:
        key: Decoded shared secret
        text: String to sign

    Returns:
        str: Base64-encoded HMAC digest

    Raises:
        SigningFailure: If the HMAC primitive is unavailable or fails
    """
    try:
        mac = hmac.HMAC(key, hashes.SHA1())
        mac.update(text.encode('utf-8'))
        digest = mac.finalize()
    except UnsupportedAlgorithm as e:
        raise SigningFailure(
            f"HMAC-SHA1 is not available: {e}",
            {"original_error": str(e)}
        ) from e
    except Exception as e:
        raise SigningFailure(
            f"error signing request: {e}",
            {"original_error": str(e)}
        ) from e

    return base64.b64encode(digest).decode('ascii')


class HmacSigner:
    """
    Signs strings with one shared secret

    The secret is decoded once at construction and never changes afterwards,
    so a single instance can be shared across threads.
    """

    def __init__(self, key: Union[str, bytes]):
        """
        Initialize the signer.

        Args:
            key: Base64-encoded shared secret, or already decoded key bytes

        Raises:
            MalformedKeyError: If the secret cannot be decoded
        """
        if isinstance(key, bytes):
            if not key:
                raise MalformedKeyError("Shared secret cannot be empty")
            self._key = bytes(key)
        else:
            self._key = decode_secret_key(key)

    @property
    def key(self) -> bytes:
        return self._key

    def sign(self, text: str) -> str:
        """Return the base64 HMAC-SHA1 signature of text."""
        return sign_string(self._key, text)


def check_hmac_support() -> Dict[str, Any]:
    """
    Check whether the installed cryptography backend can compute HMAC-SHA1.

    Returns:
        dict: ``hmac_sha1_supported`` flag plus an ``error`` when unsupported
    """
    try:
        sign_string(b"probe", "probe")
        return {"hmac_sha1_supported": True}
    except SigningFailure as e:
        return {"hmac_sha1_supported": False, "error": e.message}
