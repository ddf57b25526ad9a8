"""Shared constants for the session revocation action."""

VERSION = "1.0.0"
USER_AGENT = f"salesforce-revoke-session/{VERSION}"

# Delete responses that mean the session is gone. 404 happens when an earlier
# delete in the same batch cascaded to this session.
REVOKED_STATUS_CODES = frozenset({204, 404})
