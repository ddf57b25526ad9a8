"""
Salesforce session revocation workflow.

Revokes every non-current session for one user in three steps:
1. Query for the user ID by username
2. Query for the user's non-current AuthSession records
3. Delete each session individually

Exposes the job lifecycle callbacks the host framework calls:
invoke, error and halt.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from salesforce_revoke_session.auth import get_authorization_header
from salesforce_revoke_session.config import Config
from salesforce_revoke_session.errors import (
    RETRYABLE_STATUS_CODES,
    InputError,
    SalesforceRevokeError,
)
from salesforce_revoke_session.logger import log_revocation_action
from salesforce_revoke_session.models import (
    ExecutionContext,
    HaltResult,
    InvocationParams,
    RetryRequested,
    RevocationResult,
    utc_now_iso,
)
from salesforce_revoke_session.services.salesforce import SalesforceService

logger = logging.getLogger(__name__)

RETRY = "retry"
FATAL = "fatal"

_FATAL_MARKERS = (
    "401",
    "403",
    "User not found",
    "username is required",
    "No authentication configured",
    "No URL specified",
)


# ========== Error Classification ==========

def classify_error(error: BaseException) -> str:
    """
    Decide whether an error from invoke should be retried.

    Typed errors carry their own verdict. Anything else is judged by its
    message and defaults to retry.

    Returns:
        RETRY or FATAL
    """
    if isinstance(error, SalesforceRevokeError):
        return RETRY if error.retryable else FATAL

    message = str(error)
    if any(str(code) in message for code in RETRYABLE_STATUS_CODES):
        return RETRY
    if any(marker in message for marker in _FATAL_MARKERS):
        return FATAL
    return RETRY


# ========== Core Revocation Class ==========

class RevokeSessionsJob:
    """
    Job script revoking all non-current Salesforce sessions for one user.
    Each call is independent; nothing is shared between invocations.
    """

    def __init__(self, config: Optional[Config] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config or Config()
        self.transport = transport

    # ---- Input validation ----------------------------------------------------

    async def validate(self, params: InvocationParams, context: ExecutionContext):
        """
        Check required inputs before any Salesforce call.

        Returns:
            Tuple of (base_url, auth_header)
        """
        if not params.username or not params.username.strip():
            raise InputError("username is required")

        base_url = self.config.get_base_url(params, context)
        auth_header = await get_authorization_header(self.config, context, self.transport)
        return base_url, auth_header

    # ---- Lifecycle callbacks -------------------------------------------------

    async def invoke(self, params: Dict[str, Any], context: Dict[str, Any]) -> Dict[str, Any]:
        """
        Main execution handler - revokes all non-current sessions for a user.

        Args:
            params: Job input parameters (username, optional address, delay, apiVersion)
            context: Execution context with "environment" and "secrets" mappings

        Returns:
            Result record with status, username, userId, sessionsRevoked,
            processed_at and address
        """
        logger.info("Starting Salesforce session revocation")

        username = (params or {}).get("username")

        try:
            job_params = InvocationParams.model_validate(params or {})
            job_context = ExecutionContext.from_raw(context)
            api_version = self.config.get_api_version(job_params)

            base_url, auth_header = await self.validate(job_params, job_context)

            logger.info(f"Processing username: {username}")
            logger.info(f"Using API version: {api_version}")
            if job_params.delay:
                logger.info(f"Requested delay before revocation: {job_params.delay}")

            async with SalesforceService(
                base_url,
                auth_header,
                api_version=api_version,
                timeout=self.config.request_timeout,
                transport=self.transport,
            ) as salesforce:
                logger.info("Step 1: Querying for user ID...")
                user_id = await salesforce.find_user_id(username)

                logger.info("Step 2: Querying for user sessions...")
                sessions = await salesforce.list_non_current_sessions(user_id)

                if not sessions:
                    logger.info("No sessions found to revoke")
                    sessions_revoked = 0
                else:
                    logger.info("Step 3: Revoking sessions...")
                    sessions_revoked = await salesforce.revoke_sessions(sessions)

        except Exception as e:
            logger.error(f"Failed to revoke sessions for user {username}: {e}")
            log_revocation_action(username or "unknown", "REVOKE_SESSIONS", "FAILED", str(e))
            raise

        log_revocation_action(
            username, "REVOKE_SESSIONS", "SUCCESS",
            f"{sessions_revoked}/{len(sessions)} sessions revoked",
        )

        result = RevocationResult(
            username=username,
            userId=user_id,
            sessionsRevoked=sessions_revoked,
            processed_at=utc_now_iso(),
            address=base_url,
        )
        return result.model_dump(exclude_none=True)

    async def error(self, params: Dict[str, Any], context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Error recovery handler - requests a retry for transient failures,
        re-raises everything else unchanged.
        """
        error = params.get("error")
        username = params.get("username")
        if not isinstance(error, BaseException):
            error = RuntimeError(str(error))

        logger.error(f"Session revocation encountered error for user {username}: {error}")

        if classify_error(error) == FATAL:
            raise error

        delay = self.config.retry_delay_seconds
        logger.info(f"Detected retryable error, waiting {delay:g}s before requesting retry...")
        if delay > 0:
            await asyncio.sleep(delay)
        return RetryRequested().model_dump()

    async def halt(self, params: Dict[str, Any], context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Graceful shutdown handler. No Salesforce calls are made and nothing is undone."""
        reason = params.get("reason")
        username = params.get("username")
        logger.info(f"Session revocation is being halted ({reason}) for user: {username}")
        logger.info("Halting session revocation process - no cleanup needed")

        result = HaltResult(username=username or "unknown", reason=reason)
        return result.model_dump()


# ========== Module-level entry points ==========

async def invoke(params: Dict[str, Any], context: Dict[str, Any]) -> Dict[str, Any]:
    return await RevokeSessionsJob().invoke(params, context)


async def error(params: Dict[str, Any], context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return await RevokeSessionsJob().error(params, context)


async def halt(params: Dict[str, Any], context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return await RevokeSessionsJob().halt(params, context)
