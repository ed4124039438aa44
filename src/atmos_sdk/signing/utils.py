"""
Utility functions for request signing

This module provides utility functions for Atmos request signing, including
Date header generation, shared secret decoding and request formatting for
the signature log.
"""

import time
import base64
import binascii
from email.utils import formatdate
from typing import Iterable, Optional

from .types import (
    AtmosRequest,
    MalformedKeyError,
)


def generate_timestamp(timestamp: Optional[float] = None) -> str:
    """
    Generate an RFC 1123 Date header value.

    Args:
        timestamp: Unix timestamp (uses current time if None)

    Returns:
        str: Date such as ``Tue, 01 Jan 2030 00:00:00 GMT``
    """
    if timestamp is None:
        timestamp = time.time()
    return formatdate(timestamp, usegmt=True)


def decode_secret_key(encoded_key: str) -> bytes:
    """
    Decode the base64 shared secret into HMAC key bytes.

    Args:
        encoded_key: Base64-encoded shared secret

    Returns:
        bytes: Decoded key

    Raises:
        MalformedKeyError: If the secret is empty or not valid base64
    """
    if not isinstance(encoded_key, str) or not encoded_key.strip():
        raise MalformedKeyError("Shared secret must be a non-empty base64 string")

    try:
        key = base64.b64decode(encoded_key.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedKeyError(
            f"Shared secret is not valid base64: {e}",
            {"original_error": str(e)}
        ) from e

    if not key:
        raise MalformedKeyError("Shared secret decodes to an empty key")

    return key


def value_or_empty(values: Iterable[str]) -> str:
    """First value of a header, or an empty string when there is none."""
    for value in values:
        return value
    return ""


def format_request_for_log(request: AtmosRequest, prefix: str) -> str:
    """
    Render a request the way the signature log prints it.

    Args:
        request: Request to render
        prefix: Direction marker, ``>>`` before signing and ``<<`` after

    Returns:
        str: Request line followed by one line per header
    """
    lines = [f"{prefix} {request.method.value} {request.endpoint} HTTP/1.1"]
    for name, value in request.headers.items():
        lines.append(f"{prefix} {name}: {value}")
    if request.content_type is not None:
        lines.append(f"{prefix} Content-Type: {request.content_type}")
    return "\n".join(lines)


class PerformanceTimer:
    """Simple performance timer for monitoring signing operations."""

    def __init__(self):
        self.start_time = time.perf_counter()

    def elapsed_ms(self) -> float:
        """Get elapsed time in milliseconds."""
        return (time.perf_counter() - self.start_time) * 1000
