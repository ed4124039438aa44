"""
Type definitions for request signing functionality

This module provides the data model for Atmos shared-secret request signing:
HTTP methods, the case-insensitive header multimap, the immutable request
value handed to the signing filter, and the signing error taxonomy.
"""

from typing import Dict, List, Optional, Union, Callable, Any, Iterable, Iterator, Mapping, Tuple
from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import urlsplit


class AtmosHeaders:
    """Header names used by the Atmos signing protocol"""
    UID = "x-emc-uid"
    SIGNATURE = "x-emc-signature"
    DATE = "Date"
    RANGE = "Range"
    CUSTOM_PREFIX = "x-emc-"


# Headers whose value (not name) is echoed into the string to sign, in order
ECHOED_HEADERS: Tuple[str, ...] = (AtmosHeaders.RANGE,)


class HttpMethod(str, Enum):
    """HTTP methods supported for signing"""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


class HeaderMultimap:
    """
    Ordered header multimap.

    Names are stored exactly as supplied but every lookup matches them
    case-insensitively. A name may carry several values; their order is the
    order in which they were added.
    """

    def __init__(self, entries: Optional[Iterable[Tuple[str, str]]] = None):
        self._entries: List[Tuple[str, str]] = []
        if entries is not None:
            for name, value in entries:
                self.add(name, value)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Union[str, Iterable[str]]]) -> 'HeaderMultimap':
        """
        Build a multimap from a plain mapping.

        Args:
            mapping: Header name to a single value or a sequence of values

        Returns:
            HeaderMultimap: New multimap holding the same entries
        """
        headers = cls()
        for name, value in mapping.items():
            if isinstance(value, str):
                headers.add(name, value)
            else:
                for item in value:
                    headers.add(name, item)
        return headers

    def add(self, name: str, value: str) -> None:
        """Append a value under the given name."""
        if not isinstance(name, str) or not name:
            raise ValueError("Header name must be a non-empty string")
        if not isinstance(value, str):
            raise ValueError(f"Header value for {name} must be a string")
        self._entries.append((name, value))

    def get_all(self, name: str) -> List[str]:
        """Return every value stored under name, in insertion order."""
        wanted = name.lower()
        return [value for key, value in self._entries if key.lower() == wanted]

    def get_first(self, name: str) -> Optional[str]:
        """Return the first value stored under name, or None."""
        wanted = name.lower()
        for key, value in self._entries:
            if key.lower() == wanted:
                return value
        return None

    def replace_values(self, name: str, values: Iterable[str]) -> None:
        """Replace all values for name with the given values."""
        self.remove_all(name)
        for value in values:
            self.add(name, value)

    def remove_all(self, name: str) -> None:
        """Remove every value stored under name."""
        wanted = name.lower()
        self._entries = [(key, value) for key, value in self._entries if key.lower() != wanted]

    def names(self) -> List[str]:
        """Distinct header names as supplied, in first-seen order."""
        seen = []
        for key, _ in self._entries:
            if key not in seen:
                seen.append(key)
        return seen

    def items(self) -> List[Tuple[str, str]]:
        """All (name, value) entries in insertion order."""
        return list(self._entries)

    def copy(self) -> 'HeaderMultimap':
        return HeaderMultimap(self._entries)

    def to_dict(self) -> Dict[str, str]:
        """First value per distinct name, for transports that take plain dicts."""
        result: Dict[str, str] = {}
        for key, value in self._entries:
            if not any(existing.lower() == key.lower() for existing in result):
                result[key] = value
        return result

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return self.get_first(name) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeaderMultimap):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"HeaderMultimap({self._entries!r})"


@dataclass(frozen=True)
class Payload:
    """
    Payload metadata that participates in signing

    Attributes:
        content_type: MIME type of the body, if known
    """
    content_type: Optional[str] = None


@dataclass(frozen=True)
class AtmosRequest:
    """
    Request to be signed

    Attributes:
        method: HTTP method (GET, POST, etc.)
        endpoint: Request URL or absolute path
        headers: Request headers
        payload: Optional payload metadata
    """
    method: HttpMethod
    endpoint: str
    headers: HeaderMultimap = field(default_factory=HeaderMultimap)
    payload: Optional[Payload] = None

    def __post_init__(self):
        """Validate request after initialization"""
        if not self.endpoint:
            raise ValueError("Request endpoint cannot be empty")

        if not isinstance(self.method, HttpMethod):
            try:
                object.__setattr__(self, 'method', HttpMethod(str(self.method).upper()))
            except ValueError:
                raise ValueError(f"Unsupported HTTP method: {self.method}")

        if isinstance(self.headers, Mapping):
            object.__setattr__(self, 'headers', HeaderMultimap.from_mapping(self.headers))
        elif not isinstance(self.headers, HeaderMultimap):
            raise ValueError("Headers must be a HeaderMultimap or a mapping")

    @property
    def path(self) -> str:
        """Raw (still percent-encoded) path component of the endpoint."""
        return urlsplit(self.endpoint).path

    @property
    def content_type(self) -> Optional[str]:
        return self.payload.content_type if self.payload is not None else None


@dataclass(frozen=True)
class SigningConfig:
    """
    Configuration for request signing

    Attributes:
        uid: Account identifier sent in the identity header
        secret_key: Decoded shared secret used as the HMAC key
        timestamp_provider: Callable returning the Date header value
        signature_wire: Optional diagnostic sink for canonical strings
    """
    uid: str
    secret_key: bytes
    timestamp_provider: Callable[[], str]
    signature_wire: Optional[Any] = None

    def __post_init__(self):
        """Validate signing configuration"""
        if not self.uid:
            raise ValueError("UID cannot be empty")

        if not isinstance(self.secret_key, bytes):
            raise ValueError("Secret key must be bytes")

        if not callable(self.timestamp_provider):
            raise ValueError("Timestamp provider must be callable")


class SigningError(Exception):
    """
    Error class for signing operations

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Optional additional error details
    """

    def __init__(
        self,
        message: str,
        code: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (code: {self.code}, details: {self.details})"
        return f"{self.message} (code: {self.code})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message='{self.message}', code='{self.code}', details={self.details})"


class MalformedKeyError(SigningError):
    """The shared secret cannot be decoded or used as an HMAC key"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, SigningErrorCodes.INVALID_SECRET_KEY, details)


class MissingHeaderError(SigningError):
    """A header the string to sign depends on is absent"""

    def __init__(self, header: str):
        super().__init__(
            f"Required header not found: {header}",
            SigningErrorCodes.MISSING_REQUIRED_HEADER,
            {"header": header}
        )


class SigningFailure(SigningError):
    """The HMAC computation failed; the request must not be sent"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, SigningErrorCodes.SIGNING_FAILED, details)


class SigningErrorCodes:
    """Standard error codes for signing operations"""

    # Configuration errors
    INVALID_CONFIG = "INVALID_CONFIG"
    INVALID_SECRET_KEY = "INVALID_SECRET_KEY"
    INVALID_UID = "INVALID_UID"

    # Request errors
    INVALID_REQUEST = "INVALID_REQUEST"
    MISSING_REQUIRED_HEADER = "MISSING_REQUIRED_HEADER"

    # Signing errors
    SIGNING_FAILED = "SIGNING_FAILED"
    CRYPTOGRAPHY_UNAVAILABLE = "CRYPTOGRAPHY_UNAVAILABLE"


# Type aliases for convenience
TimestampProvider = Callable[[], str]
CustomHeaderPairs = List[Tuple[str, str]]
