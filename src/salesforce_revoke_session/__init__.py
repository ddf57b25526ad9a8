"""Revoke all non-current Salesforce sessions for a single user."""

from .constants import VERSION as __version__
from .workflows.revoke_sessions import RevokeSessionsJob, classify_error, error, halt, invoke

__all__ = ["RevokeSessionsJob", "classify_error", "invoke", "error", "halt", "__version__"]
