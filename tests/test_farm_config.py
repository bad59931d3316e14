import pytest

from farm_core.config import FarmConfig
from farm_core.constants import CLAIM_ALL_COMPUTE_UNITS, FARM_API_URLS, MAX_CLAIM_ALL_ALLOWED

ENV_VARS = [
    "FARM_RPC_URL",
    "RPC_URL",
    "FARM_CLUSTER",
    "FARM_COMMITMENT",
    "FARM_CHUNK_SIZE",
    "FARM_MAX_CLAIM_ALL",
    "FARM_CLAIM_ALL_CU",
    "FARM_PRIORITY_FEE",
    "FARM_API_URL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    cfg = FarmConfig()
    assert cfg.rpc_url == "https://api.mainnet-beta.solana.com"
    assert cfg.chunk_size == 100
    assert cfg.max_claim_all == MAX_CLAIM_ALL_ALLOWED == 2
    assert cfg.claim_all_compute_units == CLAIM_ALL_COMPUTE_UNITS
    assert cfg.priority_fee is None
    assert cfg.api_url == FARM_API_URLS["mainnet-beta"]


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("RPC_URL", "http://fallback")
    monkeypatch.setenv("FARM_CLUSTER", "devnet")
    monkeypatch.setenv("FARM_CHUNK_SIZE", "25")
    monkeypatch.setenv("FARM_PRIORITY_FEE", "1000")
    cfg = FarmConfig()
    assert cfg.rpc_url == "http://fallback"
    assert cfg.api_url == FARM_API_URLS["devnet"]
    assert cfg.chunk_size == 25
    assert cfg.priority_fee == 1000

    monkeypatch.setenv("FARM_RPC_URL", "http://primary")
    monkeypatch.setenv("FARM_API_URL", "https://custom")
    cfg = FarmConfig()
    assert cfg.rpc_url == "http://primary"
    assert cfg.api_url == "https://custom"


def test_blank_env_uses_default(monkeypatch):
    monkeypatch.setenv("FARM_MAX_CLAIM_ALL", "   ")
    assert FarmConfig().max_claim_all == MAX_CLAIM_ALL_ALLOWED


@pytest.mark.parametrize("kwargs", [{"chunk_size": 0}, {"max_claim_all": 0}])
def test_invalid_sizes(kwargs):
    with pytest.raises(ValueError):
        FarmConfig(**kwargs)


def test_api_url_follows_cluster_field():
    assert FarmConfig(cluster="devnet").api_url == FARM_API_URLS["devnet"]
    assert FarmConfig(cluster="localnet").api_url == FARM_API_URLS["mainnet-beta"]


def test_api_url_override_wins_over_cluster(monkeypatch):
    monkeypatch.setenv("FARM_API_URL", "https://mirror")
    assert FarmConfig(cluster="devnet").api_url == "https://mirror"
    assert FarmConfig(cluster="devnet", api_url="https://explicit").api_url == "https://explicit"
