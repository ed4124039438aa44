"""
Credential sources for the Atmos Python SDK

An Atmos credential is the account uid (``<subtenant id>/<user>``) plus the
base64 shared secret. Credentials can come from the environment or from the
OS keyring.
"""

import os
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from .exceptions import CredentialError

logger = logging.getLogger(__name__)

# Constants
KEYRING_SERVICE_NAME = "Atmos SDK"
UID_ENV_VAR = "ATMOS_UID"
SECRET_ENV_VAR = "ATMOS_SECRET"


@dataclass(frozen=True)
class Credentials:
    """
    Account identity and shared secret

    Attributes:
        uid: Account identifier sent in ``x-emc-uid``
        secret: Base64-encoded shared secret
    """
    uid: str
    secret: str

    def __post_init__(self):
        if not self.uid:
            raise CredentialError("UID cannot be empty", "INVALID_UID")
        if not self.secret:
            raise CredentialError("Shared secret cannot be empty", "INVALID_SECRET")

    def __repr__(self) -> str:
        return f"Credentials(uid={self.uid!r}, secret='***')"


def load_credentials_from_env(environ: Optional[Mapping[str, str]] = None) -> Credentials:
    """
    Load credentials from ``ATMOS_UID`` and ``ATMOS_SECRET``.

    Args:
        environ: Mapping to read instead of ``os.environ``

    Returns:
        Credentials: Loaded credentials

    Raises:
        CredentialError: If either variable is missing
    """
    env = os.environ if environ is None else environ
    uid = env.get(UID_ENV_VAR)
    secret = env.get(SECRET_ENV_VAR)

    missing = [name for name, value in ((UID_ENV_VAR, uid), (SECRET_ENV_VAR, secret)) if not value]
    if missing:
        raise CredentialError(
            f"Missing environment variables: {', '.join(missing)}",
            "CREDENTIALS_NOT_FOUND",
            {"missing": missing}
        )

    return Credentials(uid=uid, secret=secret)


class KeyringCredentialStore:
    """
    Stores shared secrets in the OS keyring, keyed by uid.
    """

    def __init__(self, service_name: str = KEYRING_SERVICE_NAME):
        self.service_name = service_name

    def store(self, credentials: Credentials) -> None:
        """
        Save a credential's secret under its uid.

        Raises:
            CredentialError: If the keyring rejects the write
        """
        try:
            keyring.set_password(self.service_name, credentials.uid, credentials.secret)
        except KeyringError as e:
            raise CredentialError(
                f"Failed to store secret in keyring: {e}",
                "KEYRING_ERROR",
                {"uid": credentials.uid}
            ) from e
        logger.info(f"Stored shared secret for uid {credentials.uid} in keyring")

    def load(self, uid: str) -> Credentials:
        """
        Load the credential for uid.

        Raises:
            CredentialError: If nothing is stored or the keyring fails
        """
        try:
            secret = keyring.get_password(self.service_name, uid)
        except KeyringError as e:
            raise CredentialError(
                f"Failed to read secret from keyring: {e}",
                "KEYRING_ERROR",
                {"uid": uid}
            ) from e

        if secret is None:
            raise CredentialError(
                f"No shared secret stored for uid {uid}",
                "CREDENTIALS_NOT_FOUND",
                {"uid": uid}
            )
        return Credentials(uid=uid, secret=secret)

    def delete(self, uid: str) -> bool:
        """Delete the stored secret for uid; returns False if none was stored."""
        try:
            keyring.delete_password(self.service_name, uid)
        except PasswordDeleteError:
            return False
        except KeyringError as e:
            raise CredentialError(
                f"Failed to delete secret from keyring: {e}",
                "KEYRING_ERROR",
                {"uid": uid}
            ) from e
        return True
