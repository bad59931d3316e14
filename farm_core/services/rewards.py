"""Reward accrual from stale pool/user snapshots.

All arithmetic is on Python ints. Division truncates toward zero to match
on-chain settlement (``//`` floors, which differs for negative deltas).
"""
from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from solders.pubkey import Pubkey

from ..clients.rpc_client import FarmRpcClient
from ..constants import FARM_PROGRAM_ID, REWARD_SCALE, SYSVAR_CLOCK
from ..errors import FarmNotFoundError
from ..layouts import decode_clock_time, decode_pool, decode_user
from ..logging import log
from ..models import ClaimableReward, Pool, User
from ..pdas import derive_user_pda


def div_trunc(numerator: int, denominator: int) -> int:
    q = abs(numerator) // abs(denominator)
    return q if (numerator >= 0) == (denominator > 0) else -q


def reward_per_token(pool: Pool, reference_time: int) -> Tuple[int, int]:
    """Return the (A, B) accumulators advanced to ``reference_time``."""

    if pool.total_staked == 0:
        return pool.reward_a_per_token_stored, pool.reward_b_per_token_stored
    elapsed = int(reference_time) - pool.last_update_time
    acc_a = pool.reward_a_per_token_stored + div_trunc(elapsed * pool.reward_a_rate_u128, pool.total_staked)
    acc_b = pool.reward_b_per_token_stored + div_trunc(elapsed * pool.reward_b_rate_u128, pool.total_staked)
    return acc_a, acc_b


def last_time_reward_applicable(pool: Pool, now: int) -> int:
    return min(int(now), pool.reward_duration_end)


def accrued_reward_per_token(pool: Pool, now: int) -> Tuple[int, int]:
    """Accumulators at ``now``, never past the reward duration end."""

    return reward_per_token(pool, last_time_reward_applicable(pool, now))


def claimable_reward(pool: Pool, user: Optional[User], now: int) -> ClaimableReward:
    if user is None:
        return ClaimableReward()
    acc_a, acc_b = accrued_reward_per_token(pool, now)
    reward_a = (
        div_trunc(user.balance_staked * (acc_a - user.reward_a_per_token_complete), REWARD_SCALE)
        + user.reward_a_per_token_pending
    )
    reward_b = (
        div_trunc(user.balance_staked * (acc_b - user.reward_b_per_token_complete), REWARD_SCALE)
        + user.reward_b_per_token_pending
    )
    return ClaimableReward(reward_a=reward_a, reward_b=reward_b)


async def get_claimable_rewards(
    rpc: FarmRpcClient,
    owner: Pubkey,
    farms: Sequence[Pubkey],
    program_id: Pubkey = FARM_PROGRAM_ID,
) -> Dict[str, ClaimableReward]:
    """Claimable (A, B) per farm address, from one chunked read.

    The clock, every pool and every user record go out in a single batch.
    A missing pool fails the whole call; a missing user record is zero.
    """

    farms = list(farms)
    user_pdas: List[Pubkey] = [derive_user_pda(owner, farm, program_id) for farm in farms]
    raws = await rpc.fetch_accounts([SYSVAR_CLOCK, *farms, *user_pdas])

    clock_raw, rest = raws[0], raws[1:]
    if clock_raw is None:
        raise FarmNotFoundError("Clock sysvar not found", str(SYSVAR_CLOCK))
    on_chain_time = decode_clock_time(clock_raw)

    out: Dict[str, ClaimableReward] = {}
    for i, farm in enumerate(farms):
        pool_raw = rest[i]
        user_raw = rest[i + len(farms)]
        if pool_raw is None:
            raise FarmNotFoundError("Pool state not found", str(farm))
        pool = decode_pool(pool_raw)
        user = decode_user(user_raw) if user_raw is not None else None
        out[str(farm)] = claimable_reward(pool, user, on_chain_time)

    log.debug("claimable rewards computed", source="rewards", payload={"farms": len(out), "t": on_chain_time})
    return out


async def get_user_balances(
    rpc: FarmRpcClient,
    owner: Pubkey,
    farms: Sequence[Pubkey],
    program_id: Pubkey = FARM_PROGRAM_ID,
) -> Dict[str, int]:
    """Non-zero staked balances keyed by the pool each user record points at."""

    user_pdas = [derive_user_pda(owner, farm, program_id) for farm in farms]
    balances: Dict[str, int] = {}
    for raw in await rpc.fetch_accounts(user_pdas):
        if raw is None:
            continue
        user = decode_user(raw)
        if user.balance_staked == 0:
            continue
        balances[str(user.pool)] = user.balance_staked
    return balances
