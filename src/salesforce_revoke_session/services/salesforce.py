"""
Salesforce service for session revocation.

This module wraps the three Salesforce REST calls the action needs:
resolving a username to a user ID, listing the user's non-current
AuthSession records, and deleting those sessions one at a time.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote

import httpx

from salesforce_revoke_session.constants import REVOKED_STATUS_CODES, USER_AGENT
from salesforce_revoke_session.errors import SessionQueryError, UserNotFoundError, UserQueryError
from salesforce_revoke_session.models import SessionRecord

log = logging.getLogger(__name__)


class SalesforceService:
    """
    Minimal async Salesforce REST client used by the revocation workflow.

    Requires:
      - base_url    (e.g., https://mycompany.my.salesforce.com)
      - auth_header (fully formed Authorization header value)
    """

    def __init__(
        self,
        base_url: str,
        auth_header: str,
        api_version: str = "v61.0",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": auth_header,
                "Accept": "application/json",
                "Content-Type": "application/json",
                "User-Agent": USER_AGENT,
            },
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "SalesforceService":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    # ---- Endpoints -----------------------------------------------------------

    def user_query_endpoint(self, username: str) -> str:
        # Every reserved character is escaped, quotes included, so the
        # username cannot break out of the SOQL string literal.
        encoded_username = quote(username, safe="")
        return (
            f"/services/data/{self.api_version}/query"
            f"?q=SELECT+Id+FROM+User+WHERE+username+LIKE+'{encoded_username}'+ORDER+BY+Id+ASC"
        )

    def session_query_endpoint(self, user_id: str) -> str:
        encoded_user_id = quote(user_id, safe="")
        return (
            f"/services/data/{self.api_version}/query"
            f"?q=SELECT+Id,UsersId+FROM+AuthSession+WHERE+UsersId='{encoded_user_id}'"
            f"+AND+IsCurrent=false+ORDER+BY+Id+ASC"
        )

    def session_endpoint(self, session_id: str) -> str:
        return f"/services/data/{self.api_version}/sobjects/AuthSession/{quote(session_id, safe='')}"

    # ---- Operations ----------------------------------------------------------

    async def find_user_id(self, username: str) -> str:
        """Return the Salesforce user ID for username (lowest ID wins on duplicates)."""
        resp = await self.client.get(self.user_query_endpoint(username))
        if not resp.is_success:
            raise UserQueryError(resp.status_code, resp.reason_phrase)

        records = _records(resp.json())
        if not records:
            raise UserNotFoundError(username)

        user_id = records[0]["Id"]
        log.info(f"Found user ID: {user_id}")
        return user_id

    async def list_non_current_sessions(self, user_id: str) -> List[SessionRecord]:
        """List the user's AuthSession records that are not the current session, ordered by ID."""
        resp = await self.client.get(self.session_query_endpoint(user_id))
        if not resp.is_success:
            raise SessionQueryError(resp.status_code, resp.reason_phrase)

        sessions = [SessionRecord.model_validate(r) for r in _records(resp.json())]
        log.info(f"Found {len(sessions)} sessions to revoke")
        return sessions

    async def delete_session(self, session_id: str) -> httpx.Response:
        return await self.client.delete(self.session_endpoint(session_id))

    async def revoke_sessions(self, sessions: Sequence[SessionRecord]) -> int:
        """
        Delete each session in order, one request at a time.

        A failed delete is logged and skipped; it never stops the batch.

        Returns:
            Number of sessions counted as revoked
        """
        sessions_revoked = 0

        for session in sessions:
            try:
                resp = await self.delete_session(session.id)
            except httpx.HTTPError as e:
                log.warning(f"Error revoking session {session.id}: {e}")
                continue

            if resp.status_code in REVOKED_STATUS_CODES or resp.is_success:
                sessions_revoked += 1
                log.info(f"Successfully revoked session: {session.id}")
            else:
                log.warning(
                    f"Failed to revoke session {session.id}: {resp.status_code} {resp.reason_phrase}"
                )

        log.info(f"Successfully revoked {sessions_revoked} out of {len(sessions)} sessions")
        return sessions_revoked


def _records(payload: Any) -> List[Dict[str, Any]]:
    if not isinstance(payload, dict):
        return []
    return payload.get("records") or []
