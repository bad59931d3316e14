from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from solders.hash import Hash
from solders.pubkey import Pubkey


@dataclass(frozen=True)
class Pool:
    """Decoded farm pool account. Accumulators are scaled by ``REWARD_SCALE``."""

    authority: Pubkey
    paused: bool
    staking_mint: Pubkey
    staking_vault: Pubkey
    reward_a_mint: Pubkey
    reward_a_vault: Pubkey
    reward_b_mint: Pubkey
    reward_b_vault: Pubkey
    base_key: Pubkey
    reward_duration: int
    reward_duration_end: int
    last_update_time: int
    reward_a_per_token_stored: int
    reward_b_per_token_stored: int
    user_stake_count: int
    reward_a_rate_u128: int
    reward_b_rate_u128: int
    total_staked: int
    funders: Tuple[Pubkey, ...] = field(default_factory=tuple)
    pool_bump: int = 0

    @property
    def is_dual(self) -> bool:
        return self.reward_a_mint != self.reward_b_mint


@dataclass(frozen=True)
class User:
    """Decoded per-owner, per-pool staking record."""

    pool: Pubkey
    owner: Pubkey
    balance_staked: int
    reward_a_per_token_complete: int
    reward_b_per_token_complete: int
    reward_a_per_token_pending: int
    reward_b_per_token_pending: int
    nonce: int = 0


@dataclass(frozen=True)
class PoolFarm:
    """A pool snapshot paired with the farm address it was read from."""

    address: Pubkey
    pool: Pool


@dataclass(frozen=True)
class ClaimableReward:
    reward_a: int = 0
    reward_b: int = 0


@dataclass(frozen=True)
class FarmMeta:
    farm_address: Pubkey
    apy: Optional[float]
    expired: bool


@dataclass(frozen=True)
class TxHeader:
    """Fee payer and expiry metadata needed to finalize a transaction."""

    fee_payer: Pubkey
    recent_blockhash: Hash
    last_valid_block_height: Optional[int] = None
