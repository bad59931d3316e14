import pytest
from solders.pubkey import Pubkey

from farm_core.clients.rpc_client import FarmRpcClient
from farm_core.constants import ASSOCIATED_TOKEN_PROGRAM, SYSVAR_CLOCK
from farm_core.errors import FarmNotFoundError
from farm_core.pdas import associated_token_address
from farm_core.utils import chunks
from farm_fakes import FakeAsyncClient, encode_clock


def test_chunks_keeps_order_and_bounds():
    assert chunks([1, 2, 3, 4, 5], 2) == [[1, 2], [3, 4], [5]]
    assert chunks([], 3) == []
    with pytest.raises(ValueError):
        chunks([1], 0)


@pytest.mark.asyncio
async def test_fetch_accounts_reassembles_by_chunk_index(cfg):
    keys = [Pubkey.new_unique() for _ in range(250)]
    accounts = {pk: bytes([i % 256]) * 4 for i, pk in enumerate(keys) if i % 7 != 0}
    # second chunk finishes first, first chunk last
    client = FakeAsyncClient(accounts, delays=[0.05, 0.0, 0.02])
    rpc = FarmRpcClient(cfg, client=client)

    out = await rpc.fetch_accounts(keys, chunk_size=100)

    assert [len(c) for c in client.multi_calls] == [100, 100, 50]
    assert client.max_in_flight == 3
    assert client.completed == [1, 2, 0]
    assert len(out) == 250
    for i, raw in enumerate(out):
        assert raw == (None if i % 7 == 0 else bytes([i % 256]) * 4)


@pytest.mark.asyncio
async def test_fetch_accounts_empty_input_issues_no_requests(rpc, fake_client):
    assert await rpc.fetch_accounts([]) == []
    assert fake_client.multi_calls == []


@pytest.mark.asyncio
async def test_fetch_accounts_chunk_failure_fails_whole_call(cfg):
    client = FakeAsyncClient()
    client.fail_on_call = 1
    rpc = FarmRpcClient(cfg, client=client)
    with pytest.raises(ConnectionError):
        await rpc.fetch_accounts([Pubkey.new_unique() for _ in range(150)], chunk_size=100)


@pytest.mark.asyncio
async def test_fetch_account_and_clock(rpc, fake_client):
    assert await rpc.fetch_account(Pubkey.new_unique()) is None
    with pytest.raises(FarmNotFoundError):
        await rpc.get_clock_time()
    fake_client.accounts[SYSVAR_CLOCK] = encode_clock(1_700_000_000)
    assert await rpc.get_clock_time() == 1_700_000_000


@pytest.mark.asyncio
async def test_recent_transaction_header(rpc, fake_client):
    payer = Pubkey.new_unique()
    header = await rpc.get_recent_transaction_header(payer)
    assert header.fee_payer == payer
    assert header.last_valid_block_height == 1_000
    assert fake_client.blockhash_calls == 1


@pytest.mark.asyncio
async def test_ensure_holding_account(rpc, fake_client):
    owner, mint = Pubkey.new_unique(), Pubkey.new_unique()
    ata = associated_token_address(owner, mint)

    addr, ix = await rpc.ensure_holding_account(mint, owner)
    assert addr == ata
    assert ix.program_id == ASSOCIATED_TOKEN_PROGRAM
    assert bytes(ix.data) == bytes([1])
    assert [m.pubkey for m in ix.accounts][:4] == [owner, ata, owner, mint]

    fake_client.accounts[ata] = b"\x00" * 165
    addr, ix = await rpc.ensure_holding_account(mint, owner)
    assert addr == ata and ix is None


@pytest.mark.asyncio
async def test_async_context_closes_client(cfg):
    client = FakeAsyncClient()
    async with FarmRpcClient(cfg, client=client):
        pass
    assert client.closed
