"""
HTTP client integration for request signing

This module plugs the Atmos signing filter into the requests library so
that every outbound request is signed right before it is sent. Signing
failures propagate: an unsigned or half-signed request is never sent.
"""

import logging
from typing import Optional

import requests
from requests.auth import AuthBase
from requests.models import PreparedRequest

from .types import (
    AtmosRequest,
    AtmosHeaders,
    HeaderMultimap,
    HttpMethod,
    Payload,
    SigningConfig,
)
from .request_filter import SignRequest
from ..exceptions import ServerCommunicationError

logger = logging.getLogger(__name__)

SIGNED_HEADERS = (AtmosHeaders.UID, AtmosHeaders.DATE, AtmosHeaders.SIGNATURE)


def to_atmos_request(prepared_request: PreparedRequest) -> AtmosRequest:
    """
    Convert a prepared request into the value the filter signs.

    Args:
        prepared_request: Request prepared by requests

    Returns:
        AtmosRequest: Equivalent signable request
    """
    headers = HeaderMultimap()
    for name, value in (prepared_request.headers or {}).items():
        headers.add(name, value)

    content_type = headers.get_first('Content-Type')
    payload = Payload(content_type=content_type) if content_type is not None else None

    return AtmosRequest(
        method=HttpMethod(prepared_request.method.upper()),
        endpoint=prepared_request.url,
        headers=headers,
        payload=payload
    )


def sign_prepared_request(
    prepared_request: PreparedRequest,
    request_filter: SignRequest
) -> PreparedRequest:
    """
    Sign a prepared request.

    Args:
        prepared_request: Prepared request to sign
        request_filter: Filter holding the credential

    Returns:
        PreparedRequest: The same request with uid, Date and signature headers

    Raises:
        SigningError: If signing fails
    """
    signed = request_filter.filter(to_atmos_request(prepared_request))

    for name in SIGNED_HEADERS:
        # requests keeps one value per (case-insensitive) header name
        prepared_request.headers[name] = signed.headers.get_first(name)

    return prepared_request


class AtmosAuth(AuthBase):
    """
    requests authentication hook signing each request for Atmos.

    Usage::

        session.auth = AtmosAuth(config)
    """

    def __init__(self, config: SigningConfig):
        self.request_filter = SignRequest(config)

    def __call__(self, prepared_request: PreparedRequest) -> PreparedRequest:
        return sign_prepared_request(prepared_request, self.request_filter)


class SigningSession:
    """
    HTTP session wrapper with automatic request signing.

    This class wraps a requests.Session and signs every outgoing request
    with the configured credential.
    """

    def __init__(
        self,
        signing_config: SigningConfig,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize signing session.

        Args:
            signing_config: Signing configuration
            session: Optional existing requests session to wrap
        """
        self.session = session or requests.Session()
        self.signing_config = signing_config
        self.session.auth = AtmosAuth(signing_config)
        logger.info(f"Configured request signing for uid: {signing_config.uid}")

    def request(self, method: str, url: str, **kwargs) -> requests.Response:
        """
        Make a signed HTTP request.

        Args:
            method: HTTP method
            url: Request URL
            **kwargs: Additional arguments for requests

        Returns:
            requests.Response: HTTP response

        Raises:
            SigningError: If the request cannot be signed
            ServerCommunicationError: If the transport fails
        """
        try:
            return self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            raise ServerCommunicationError(
                f"Request to {url} failed: {e}",
                "NETWORK_ERROR",
                details={"method": method, "url": url}
            ) from e

    def get(self, url: str, **kwargs) -> requests.Response:
        """Make GET request."""
        return self.request('GET', url, **kwargs)

    def post(self, url: str, **kwargs) -> requests.Response:
        """Make POST request."""
        return self.request('POST', url, **kwargs)

    def put(self, url: str, **kwargs) -> requests.Response:
        """Make PUT request."""
        return self.request('PUT', url, **kwargs)

    def delete(self, url: str, **kwargs) -> requests.Response:
        """Make DELETE request."""
        return self.request('DELETE', url, **kwargs)

    def head(self, url: str, **kwargs) -> requests.Response:
        """Make HEAD request."""
        return self.request('HEAD', url, **kwargs)

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, *args):
        """Context manager exit."""
        self.close()


def create_signing_session(
    signing_config: SigningConfig,
    **session_kwargs
) -> SigningSession:
    """
    Create a new signing session.

    Args:
        signing_config: Signing configuration
        **session_kwargs: Attributes to set on the underlying requests.Session

    Returns:
        SigningSession: Configured signing session
    """
    session = requests.Session()

    # Apply session configuration
    for key, value in session_kwargs.items():
        if hasattr(session, key):
            setattr(session, key, value)

    return SigningSession(signing_config=signing_config, session=session)
