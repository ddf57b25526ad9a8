"""OS keyring lookup for locally stored Salesforce credentials."""

import logging
from typing import Optional

import keyring
from keyring.errors import KeyringError

logger = logging.getLogger(__name__)


class KeyringCredentialStore:
    """Reads secrets (bearer tokens, OAuth2 client secrets) from the OS keyring."""

    def __init__(self, service_name: str = "salesforce-revoke-session"):
        self.service_name = service_name

    def get_credential(self, key: str) -> Optional[str]:
        """
        Get a credential from the keyring.

        Args:
            key: Secret name, used as the keyring username (e.g. BEARER_AUTH_TOKEN)

        Returns:
            The credential value if found, None otherwise
        """
        try:
            value = keyring.get_password(self.service_name, key)
        except KeyringError as e:
            logger.debug(f"Keyring unavailable for {key}: {e}")
            return None

        if value:
            logger.debug(f"Found credential {key} in keyring")
        return value
