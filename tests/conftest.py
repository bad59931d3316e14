import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)
sys.path.insert(0, os.path.dirname(__file__))

from farm_core.clients.rpc_client import FarmRpcClient
from farm_core.config import FarmConfig
from farm_fakes import FakeAsyncClient


@pytest.fixture
def cfg():
    return FarmConfig(
        rpc_url="http://localhost:8899",
        cluster="devnet",
        commitment="confirmed",
        chunk_size=100,
        max_claim_all=2,
        claim_all_compute_units=1_400_000,
        priority_fee=None,
        api_url="https://farms.test",
    )


@pytest.fixture
def fake_client():
    return FakeAsyncClient()


@pytest.fixture
def rpc(cfg, fake_client):
    return FarmRpcClient(cfg, client=fake_client)
