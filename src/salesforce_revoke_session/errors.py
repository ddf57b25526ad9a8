"""
Error types raised by the session revocation action.

Each error knows whether the host framework should retry it.
"""

from typing import Optional

RETRYABLE_STATUS_CODES = frozenset({429, 502, 503, 504})


class SalesforceRevokeError(RuntimeError):
    """Base class for all revocation errors."""

    retryable = False


class InputError(SalesforceRevokeError):
    """A required invocation parameter is missing."""


class ConfigurationError(SalesforceRevokeError):
    """Base URL or credential material could not be resolved."""


class AuthenticationError(SalesforceRevokeError):
    """The OAuth2 token endpoint refused to issue a token."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status

    @property
    def retryable(self) -> bool:
        return self.status in RETRYABLE_STATUS_CODES


class NotFoundError(SalesforceRevokeError):
    pass


class UserNotFoundError(NotFoundError):
    def __init__(self, username: str):
        super().__init__(f"User not found: {username}")
        self.username = username


class UpstreamQueryError(SalesforceRevokeError):
    """A Salesforce query returned a non-success status."""

    step = "query"

    def __init__(self, status: int, status_text: Optional[str] = None):
        self.status = status
        self.status_text = status_text or ""
        super().__init__(f"Failed to {self.step}: {status} {self.status_text}".rstrip())

    @property
    def retryable(self) -> bool:
        return self.status in RETRYABLE_STATUS_CODES


class UserQueryError(UpstreamQueryError):
    step = "query user"


class SessionQueryError(UpstreamQueryError):
    step = "query sessions"


__all__ = [
    "RETRYABLE_STATUS_CODES",
    "SalesforceRevokeError",
    "InputError",
    "ConfigurationError",
    "AuthenticationError",
    "NotFoundError",
    "UserNotFoundError",
    "UpstreamQueryError",
    "UserQueryError",
    "SessionQueryError",
]
