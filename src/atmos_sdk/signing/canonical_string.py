"""
String-to-sign construction for Atmos shared-secret signatures

The string to sign is the newline-separated sequence of:

1. the HTTP method
2. the payload content type, or an empty line
3. the value of each echoed header (``Range``), lower-cased, or an empty line
4. the Date header value, verbatim
5. the request path, lower-cased
6. the normalized ``x-emc-*`` headers, one ``name:value`` per line

with no terminating newline.
"""

from typing import List, Optional

from .types import (
    AtmosRequest,
    AtmosHeaders,
    ECHOED_HEADERS,
    MissingHeaderError,
)
from .headers import canonicalize_custom_headers, format_custom_headers
from .utils import value_or_empty
from .wire import SignatureWire


class CanonicalStringBuilder:
    """
    Builds the string to sign for one request
    """

    def __init__(self, request: AtmosRequest, wire: Optional[SignatureWire] = None):
        """
        Initialize canonical string builder.

        Args:
            request: Request whose Date header is already set
            wire: Optional diagnostic sink receiving the result
        """
        self.request = request
        self.wire = wire

    def build(self) -> str:
        """
        Build the string to sign.

        Returns:
            str: Canonical string

        Raises:
            MissingHeaderError: If the Date header is absent
        """
        buffer: List[str] = []
        self._append_method(buffer)
        self._append_payload_metadata(buffer)
        self._append_http_headers(buffer)
        self._append_canonicalized_resource(buffer)
        self._append_canonicalized_headers(buffer)

        to_sign = "".join(buffer)
        # No terminating newline after the last line
        if to_sign.endswith("\n"):
            to_sign = to_sign[:-1]

        if self.wire is not None and self.wire.enabled():
            self.wire.output(to_sign)
        return to_sign

    def _append_method(self, buffer: List[str]) -> None:
        buffer.append(self.request.method.value + "\n")

    def _append_payload_metadata(self, buffer: List[str]) -> None:
        buffer.append((self.request.content_type or "") + "\n")

    def _append_http_headers(self, buffer: List[str]) -> None:
        headers = self.request.headers
        # Only the value is used, not the header name
        for header in ECHOED_HEADERS:
            buffer.append(value_or_empty(headers.get_all(header)).lower() + "\n")

        date = headers.get_first(AtmosHeaders.DATE)
        if not date:
            raise MissingHeaderError(AtmosHeaders.DATE)
        buffer.append(date + "\n")

    def _append_canonicalized_resource(self, buffer: List[str]) -> None:
        buffer.append(self.request.path.lower() + "\n")

    def _append_canonicalized_headers(self, buffer: List[str]) -> None:
        block = format_custom_headers(canonicalize_custom_headers(self.request.headers))
        if block:
            buffer.append(block + "\n")


def build_string_to_sign(request: AtmosRequest, wire: Optional[SignatureWire] = None) -> str:
    """
    Build the string to sign for a request.

    Args:
        request: Request to canonicalize
        wire: Optional diagnostic sink

    Returns:
        str: Canonical string
    """
    return CanonicalStringBuilder(request, wire).build()
