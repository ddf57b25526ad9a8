import httpx
import pytest

from salesforce_revoke_session.config import Config

AUTH_KEYS = [
    "ADDRESS",
    "BEARER_AUTH_TOKEN",
    "BASIC_USERNAME",
    "BASIC_PASSWORD",
    "OAUTH2_CLIENT_CREDENTIALS_CLIENT_SECRET",
    "OAUTH2_CLIENT_CREDENTIALS_TOKEN_URL",
    "OAUTH2_CLIENT_CREDENTIALS_CLIENT_ID",
    "OAUTH2_CLIENT_CREDENTIALS_SCOPE",
    "OAUTH2_CLIENT_CREDENTIALS_AUDIENCE",
    "OAUTH2_CLIENT_CREDENTIALS_AUTH_STYLE",
    "OAUTH2_AUTHORIZATION_CODE_ACCESS_TOKEN",
]


class EmptyCredentialStore:
    """Keyring stand-in that never finds anything."""

    def get_credential(self, key):
        return None


class RecordingTransport(httpx.MockTransport):
    """Replays queued responses in order and records every request."""

    def __init__(self, *responses):
        self.requests = []
        self.responses = list(responses)
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def records(*ids, **extra):
    return httpx.Response(200, json={"records": [{"Id": i, **extra} for i in ids]})


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in AUTH_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def config():
    return Config(settings={"retry": {"delay_seconds": 0}}, credential_store=EmptyCredentialStore())


@pytest.fixture
def context():
    return {
        "environment": {"ADDRESS": "https://mycompany.salesforce.com"},
        "secrets": {"BEARER_AUTH_TOKEN": "test-access-token-123456"},
    }
