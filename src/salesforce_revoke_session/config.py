# src/salesforce_revoke_session/config.py

import copy
import os
import logging
from typing import Any, Dict, Optional

from .models import ExecutionContext, InvocationParams
from .errors import ConfigurationError
from .utils.credential_manager import KeyringCredentialStore
from .utils.yaml_loader import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS: Dict[str, Any] = {
    "salesforce": {"api_version": "v61.0", "timeout": 30},
    "oauth2": {"timeout": 30},
    "retry": {"delay_seconds": 5},
    "keyring": {"service_name": "salesforce-revoke-session"},
}


class Config:
    """Configuration manager for the session revocation action."""

    def __init__(self, settings: Optional[Dict[str, Any]] = None,
                 credential_store: Optional[KeyringCredentialStore] = None):
        """Initialize configuration from settings.yaml, falling back to built-in defaults."""
        if settings is None:
            try:
                settings = load_yaml('settings.yaml')
            except FileNotFoundError:
                logger.debug("settings.yaml not found, using default settings")
                settings = {}
        self.settings = _merge(DEFAULT_SETTINGS, settings)
        self.credential_store = credential_store or KeyringCredentialStore(
            self.settings['keyring']['service_name']
        )

    # ========== Property Methods ==========

    @property
    def api_version(self) -> str:
        """Default Salesforce REST API version."""
        return self.settings['salesforce']['api_version']

    @property
    def request_timeout(self) -> float:
        return float(self.settings['salesforce']['timeout'])

    @property
    def oauth2_timeout(self) -> float:
        return float(self.settings['oauth2']['timeout'])

    @property
    def retry_delay_seconds(self) -> float:
        """Delay hint applied by the error handler before a retry is requested."""
        return float(self.settings['retry']['delay_seconds'])

    # ========== Secrets and Environment ==========

    def get_secret(self, key: str, context: ExecutionContext) -> Optional[str]:
        """
        Get a secret value by key.
        Checks the execution context, environment variables, then the OS keyring.
        """
        value = context.secrets.get(key)
        if value:
            return value

        value = os.getenv(key)
        if value:
            return value

        return self.credential_store.get_credential(key)

    def get_env(self, key: str, context: ExecutionContext) -> Optional[str]:
        """Get a non-secret environment value from the execution context or process environment."""
        return context.environment.get(key) or os.getenv(key)

    def get_base_url(self, params: InvocationParams, context: ExecutionContext) -> str:
        """Resolve the Salesforce base URL from the address parameter or ADDRESS environment value."""
        address = params.address or self.get_env('ADDRESS', context)
        if not address:
            raise ConfigurationError(
                "No URL specified. Provide address parameter or ADDRESS environment variable"
            )
        return address.rstrip('/')

    def get_api_version(self, params: InvocationParams) -> str:
        return params.api_version or self.api_version


def _merge(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(defaults)
    for key, value in (overrides or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged
