import httpx
import pytest

from conftest import RecordingTransport, records
from salesforce_revoke_session.models import SessionRecord
from salesforce_revoke_session.services.salesforce import SalesforceService


def make_service(*responses, api_version="v61.0"):
    transport = RecordingTransport(*responses)
    service = SalesforceService(
        "https://mycompany.salesforce.com/",
        "Bearer token",
        api_version=api_version,
        transport=transport,
    )
    return service, transport


def test_endpoints_use_api_version():
    service, _ = make_service(api_version="v58.0")

    assert service.base_url == "https://mycompany.salesforce.com"
    assert service.user_query_endpoint("a b@x.com") == (
        "/services/data/v58.0/query?q=SELECT+Id+FROM+User+WHERE+username+LIKE+'a%20b%40x.com'+ORDER+BY+Id+ASC"
    )
    assert service.session_query_endpoint("005xx") == (
        "/services/data/v58.0/query?q=SELECT+Id,UsersId+FROM+AuthSession+WHERE+UsersId='005xx'"
        "+AND+IsCurrent=false+ORDER+BY+Id+ASC"
    )
    assert service.session_endpoint("0Ak1") == "/services/data/v58.0/sobjects/AuthSession/0Ak1"


@pytest.mark.asyncio
async def test_find_user_id_takes_first_record():
    service, _ = make_service(records("005A", "005B"))
    async with service:
        assert await service.find_user_id("dup@example.com") == "005A"


@pytest.mark.asyncio
async def test_list_non_current_sessions_keeps_order():
    service, _ = make_service(records("0Ak1", "0Ak2", "0Ak3", UsersId="005A"))
    async with service:
        sessions = await service.list_non_current_sessions("005A")

    assert [s.id for s in sessions] == ["0Ak1", "0Ak2", "0Ak3"]
    assert all(s.users_id == "005A" for s in sessions)


@pytest.mark.asyncio
async def test_revoke_sessions_deletes_one_at_a_time_in_order():
    service, transport = make_service(
        httpx.Response(204),
        httpx.Response(400),
        httpx.Response(404),
        httpx.ReadTimeout("timed out"),
        httpx.Response(204),
    )
    sessions = [SessionRecord(Id=f"0Ak{i}") for i in range(1, 6)]

    async with service:
        revoked = await service.revoke_sessions(sessions)

    assert revoked == 3
    assert [r.url.path.rsplit("/", 1)[-1] for r in transport.requests] == [s.id for s in sessions]
    assert all(r.method == "DELETE" for r in transport.requests)


@pytest.mark.asyncio
async def test_revoke_sessions_with_empty_list_makes_no_calls():
    service, transport = make_service()
    async with service:
        assert await service.revoke_sessions([]) == 0
    assert transport.requests == []
