import pytest

from farm_core.clients.farm_api_client import FarmApiClient
from farm_core.services import FarmService
from farm_fakes import FakeResp, FakeSession


@pytest.mark.asyncio
async def test_context_exit_closes_rpc_and_directory_session(cfg, rpc, fake_client):
    session = FakeSession(FakeResp(payload=[]))
    api = FarmApiClient(cfg, session=session)

    async with FarmService(cfg, rpc=rpc, api=api) as svc:
        assert svc.builder.rpc is rpc

    assert fake_client.closed is True
    assert session.closed is True


@pytest.mark.asyncio
async def test_directory_session_closed_when_rpc_close_fails(cfg, rpc, fake_client):
    async def broken_close():
        raise ConnectionError("socket gone")

    fake_client.close = broken_close
    session = FakeSession(FakeResp(payload=[]))
    svc = FarmService(cfg, rpc=rpc, api=FarmApiClient(cfg, session=session))

    with pytest.raises(ConnectionError):
        await svc.close()
    assert session.closed is True
