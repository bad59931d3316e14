from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from .constants import (
    CLAIM_ALL_COMPUTE_UNITS,
    DEFAULT_CHUNK_SIZE,
    FARM_API_URLS,
    MAX_CLAIM_ALL_ALLOWED,
)


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    return int(raw) if raw is not None else default


def _env_opt_int(name: str) -> Optional[int]:
    raw = _env(name)
    return int(raw) if raw is not None else None


def _rpc_url() -> str:
    return _env("FARM_RPC_URL") or _env("RPC_URL") or "https://api.mainnet-beta.solana.com"


@dataclass(frozen=True)
class FarmConfig:
    """Configuration container for farm RPC reads and transaction building."""

    rpc_url: str = field(default_factory=_rpc_url)
    cluster: str = field(default_factory=lambda: _env("FARM_CLUSTER", "mainnet-beta"))
    commitment: str = field(default_factory=lambda: _env("FARM_COMMITMENT", "finalized"))

    # getMultipleAccounts caps a single request at 100 keys
    chunk_size: int = field(default_factory=lambda: _env_int("FARM_CHUNK_SIZE", DEFAULT_CHUNK_SIZE))

    max_claim_all: int = field(default_factory=lambda: _env_int("FARM_MAX_CLAIM_ALL", MAX_CLAIM_ALL_ALLOWED))
    claim_all_compute_units: int = field(
        default_factory=lambda: _env_int("FARM_CLAIM_ALL_CU", CLAIM_ALL_COMPUTE_UNITS)
    )

    # micro-lamports per CU; None leaves the price instruction out
    priority_fee: Optional[int] = field(default_factory=lambda: _env_opt_int("FARM_PRIORITY_FEE"))

    # empty: resolved from `cluster` after init
    api_url: str = field(default_factory=lambda: _env("FARM_API_URL", ""))
    api_timeout: float = 20.0

    def __post_init__(self) -> None:
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.max_claim_all < 1:
            raise ValueError(f"max_claim_all must be positive, got {self.max_claim_all}")
        if not self.api_url:
            api_url = FARM_API_URLS.get(self.cluster, FARM_API_URLS["mainnet-beta"])
            object.__setattr__(self, "api_url", api_url)


def get_config() -> FarmConfig:
    """Return a ``FarmConfig`` with ``.env`` and environment defaults applied."""

    load_dotenv()
    return FarmConfig()
