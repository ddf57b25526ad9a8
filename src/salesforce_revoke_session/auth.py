"""
Authorization header resolution.

Supports bearer token, basic credentials, OAuth2 client credentials and
OAuth2 authorization code. The first configured scheme wins and is turned
into a single Authorization header value.
"""

from __future__ import annotations

import base64
import logging
from typing import Optional

import httpx
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from .config import Config
from .errors import AuthenticationError, ConfigurationError
from .models import ExecutionContext

log = logging.getLogger(__name__)

AUTH_STYLE_IN_PARAMS = "InParams"
AUTH_STYLE_IN_HEADER = "InHeader"


def _bearer(token: str) -> str:
    return token if token.lower().startswith("bearer ") else f"Bearer {token}"


async def get_authorization_header(
    config: Config,
    context: ExecutionContext,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Return a ready-to-use Authorization header for the configured auth scheme."""
    bearer_token = config.get_secret("BEARER_AUTH_TOKEN", context)
    if bearer_token:
        log.debug("Using bearer token authentication")
        return _bearer(bearer_token)

    basic_user = config.get_secret("BASIC_USERNAME", context)
    basic_password = config.get_secret("BASIC_PASSWORD", context)
    if basic_user and basic_password:
        log.debug("Using basic authentication")
        encoded = base64.b64encode(f"{basic_user}:{basic_password}".encode()).decode()
        return f"Basic {encoded}"

    client_secret = config.get_secret("OAUTH2_CLIENT_CREDENTIALS_CLIENT_SECRET", context)
    if client_secret:
        log.debug("Using OAuth2 client credentials authentication")
        token = await fetch_client_credentials_token(config, context, client_secret, transport)
        return _bearer(token)

    access_token = config.get_secret("OAUTH2_AUTHORIZATION_CODE_ACCESS_TOKEN", context)
    if access_token:
        log.debug("Using OAuth2 authorization code access token")
        return _bearer(access_token)

    raise ConfigurationError("No authentication configured")


async def fetch_client_credentials_token(
    config: Config,
    context: ExecutionContext,
    client_secret: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Exchange client credentials for an access token at the configured token URL."""
    token_url = config.get_env("OAUTH2_CLIENT_CREDENTIALS_TOKEN_URL", context)
    client_id = config.get_env("OAUTH2_CLIENT_CREDENTIALS_CLIENT_ID", context)
    if not token_url:
        raise ConfigurationError("OAUTH2_CLIENT_CREDENTIALS_TOKEN_URL is required for OAuth2 client credentials")
    if not client_id:
        raise ConfigurationError("OAUTH2_CLIENT_CREDENTIALS_CLIENT_ID is required for OAuth2 client credentials")

    data = {"grant_type": "client_credentials"}
    scope = config.get_env("OAUTH2_CLIENT_CREDENTIALS_SCOPE", context)
    audience = config.get_env("OAUTH2_CLIENT_CREDENTIALS_AUDIENCE", context)
    if scope:
        data["scope"] = scope
    if audience:
        data["audience"] = audience

    auth_style = config.get_env("OAUTH2_CLIENT_CREDENTIALS_AUTH_STYLE", context) or AUTH_STYLE_IN_PARAMS
    auth = None
    if auth_style == AUTH_STYLE_IN_HEADER:
        auth = httpx.BasicAuth(client_id, client_secret)
    else:
        data["client_id"] = client_id
        data["client_secret"] = client_secret

    async with httpx.AsyncClient(
        transport=transport,
        timeout=config.oauth2_timeout,
        headers={"Accept": "application/json"},
    ) as client:
        resp = await _post_token_request(client, token_url, data, auth)

    if resp.status_code >= 400:
        raise AuthenticationError(
            f"OAuth2 token request failed: {resp.status_code} {resp.reason_phrase}",
            status=resp.status_code,
        )

    try:
        payload = resp.json()
    except ValueError:
        payload = None
    token = payload.get("access_token") if isinstance(payload, dict) else None
    if not token:
        raise AuthenticationError("OAuth2 token response did not include an access_token")

    log.info("Obtained OAuth2 client credentials access token")
    return token


@retry(
    reraise=True,
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
    retry=retry_if_exception_type(httpx.TransportError),
)
async def _post_token_request(
    client: httpx.AsyncClient,
    token_url: str,
    data: dict,
    auth: Optional[httpx.BasicAuth],
) -> httpx.Response:
    if auth is not None:
        return await client.post(token_url, data=data, auth=auth)
    return await client.post(token_url, data=data)
