"""
Request signing filter for Atmos

The filter stamps the identity and Date headers, builds the string to sign,
computes the HMAC-SHA1 signature and writes it into ``x-emc-signature``.
It never modifies the request it is given: a new request carrying the
signed headers is returned, so a failure part way through leaves the
caller's request exactly as it was.
"""

import dataclasses
import logging
from typing import Optional

from .types import (
    AtmosRequest,
    AtmosHeaders,
    SigningConfig,
)
from .canonical_string import build_string_to_sign
from .signer import HmacSigner
from .utils import PerformanceTimer, format_request_for_log
from .wire import SignatureWire, signature_logger

logger = logging.getLogger(__name__)


class SignRequest:
    """
    Signs Atmos storage requests

    Holds only the uid, the decoded secret and the timestamp provider, none
    of which change after construction, so one instance serves every
    request made with the same credential.
    """

    def __init__(self, config: SigningConfig):
        """
        Initialize the filter with configuration.

        Args:
            config: Signing configuration
        """
        self.config = config
        self.uid = config.uid
        self.signer = HmacSigner(config.secret_key)
        self.timestamp_provider = config.timestamp_provider
        self.signature_wire: Optional[SignatureWire] = config.signature_wire

    def filter(self, request: AtmosRequest) -> AtmosRequest:
        """
        Sign a request.

        Args:
            request: Request to sign

        Returns:
            AtmosRequest: New request carrying uid, Date and signature headers

        Raises:
            SigningError: If the string to sign cannot be built or signed
        """
        timer = PerformanceTimer()

        headers = request.headers.copy()
        headers.remove_all(AtmosHeaders.SIGNATURE)
        headers.replace_values(AtmosHeaders.UID, [self.uid])
        headers.replace_values(AtmosHeaders.DATE, [self.timestamp_provider()])
        stamped = dataclasses.replace(request, headers=headers)

        to_sign = self.create_string_to_sign(stamped)
        signature = self.sign_string(to_sign)
        if self.signature_wire is not None and self.signature_wire.enabled():
            self.signature_wire.input(signature)

        signed_headers = headers.copy()
        signed_headers.replace_values(AtmosHeaders.SIGNATURE, [signature])
        signed = dataclasses.replace(request, headers=signed_headers)

        if signature_logger.isEnabledFor(logging.DEBUG):
            signature_logger.debug(format_request_for_log(signed, "<<"))

        elapsed_ms = timer.elapsed_ms()
        if elapsed_ms > 10:
            logger.warning(f"Signing operation took {elapsed_ms:.2f}ms (target: <10ms)")

        return signed

    def create_string_to_sign(self, request: AtmosRequest) -> str:
        """
        Build the string to sign for a request whose Date header is set.

        Args:
            request: Request to canonicalize

        Returns:
            str: Canonical string
        """
        if signature_logger.isEnabledFor(logging.DEBUG):
            signature_logger.debug(format_request_for_log(request, ">>"))
        return build_string_to_sign(request, self.signature_wire)

    def sign_string(self, to_sign: str) -> str:
        """
        Sign a canonical string with this filter's secret.

        Raises:
            SigningFailure: If the HMAC computation fails
        """
        return self.signer.sign(to_sign)


def create_request_signer(config: SigningConfig) -> SignRequest:
    """
    Create a new request signing filter.

    Args:
        config: Signing configuration

    Returns:
        SignRequest: Configured filter
    """
    return SignRequest(config)


def sign_request(request: AtmosRequest, config: SigningConfig) -> AtmosRequest:
    """
    Sign a request with the given configuration.

    Args:
        request: Request to sign
        config: Signing configuration

    Returns:
        AtmosRequest: Signed copy of the request
    """
    return create_request_signer(config).filter(request)
