"""Borsh layouts for the farm program accounts and the clock sysvar."""

from __future__ import annotations

import hashlib

from anchorpy.borsh_extension import BorshPubkey
from borsh_construct import Bool, CStruct, I64, U8, U32, U64, U128

from .errors import AccountDecodeError
from .models import Pool, User

DISCRIMINATOR_SIZE = 8


def account_discriminator(name: str) -> bytes:
    """Anchor discriminator = first 8 bytes of sha256(b"account:" + name)."""

    return hashlib.sha256(f"account:{name}".encode("utf-8")).digest()[:DISCRIMINATOR_SIZE]


POOL_DISCRIMINATOR = account_discriminator("Pool")
USER_DISCRIMINATOR = account_discriminator("User")

POOL_LAYOUT = CStruct(
    "authority" / BorshPubkey,
    "paused" / Bool,
    "staking_mint" / BorshPubkey,
    "staking_vault" / BorshPubkey,
    "reward_a_mint" / BorshPubkey,
    "reward_a_vault" / BorshPubkey,
    "reward_b_mint" / BorshPubkey,
    "reward_b_vault" / BorshPubkey,
    "base_key" / BorshPubkey,
    "reward_duration" / U64,
    "reward_duration_end" / U64,
    "last_update_time" / U64,
    "deprecated_reward_a_rate" / U64,
    "deprecated_reward_b_rate" / U64,
    "reward_a_per_token_stored" / U128,
    "reward_b_per_token_stored" / U128,
    "user_stake_count" / U32,
    "funders" / BorshPubkey[3],
    "reward_a_rate_u128" / U128,
    "reward_b_rate_u128" / U128,
    "pool_bump" / U8,
    "total_staked" / U64,
)

USER_LAYOUT = CStruct(
    "pool" / BorshPubkey,
    "owner" / BorshPubkey,
    "reward_a_per_token_complete" / U128,
    "reward_b_per_token_complete" / U128,
    "reward_a_per_token_pending" / U64,
    "reward_b_per_token_pending" / U64,
    "balance_staked" / U64,
    "nonce" / U8,
)

# slot, epoch_start_timestamp, epoch, leader_schedule_epoch precede it
CLOCK_UNIX_TIMESTAMP_OFFSET = 32


def _strip_discriminator(raw: bytes, expected: bytes, name: str) -> bytes:
    if raw is None or len(raw) < DISCRIMINATOR_SIZE:
        raise AccountDecodeError(f"{name} account too short ({0 if raw is None else len(raw)}B)")
    if raw[:DISCRIMINATOR_SIZE] != expected:
        raise AccountDecodeError(f"not a {name} account (discriminator {raw[:8].hex()})")
    return raw[DISCRIMINATOR_SIZE:]


def decode_pool(raw: bytes) -> Pool:
    body = _strip_discriminator(raw, POOL_DISCRIMINATOR, "Pool")
    try:
        c = POOL_LAYOUT.parse(body)
    except Exception as exc:
        raise AccountDecodeError(f"Pool layout parse failed: {exc}") from exc
    return Pool(
        authority=c.authority,
        paused=bool(c.paused),
        staking_mint=c.staking_mint,
        staking_vault=c.staking_vault,
        reward_a_mint=c.reward_a_mint,
        reward_a_vault=c.reward_a_vault,
        reward_b_mint=c.reward_b_mint,
        reward_b_vault=c.reward_b_vault,
        base_key=c.base_key,
        reward_duration=c.reward_duration,
        reward_duration_end=c.reward_duration_end,
        last_update_time=c.last_update_time,
        reward_a_per_token_stored=c.reward_a_per_token_stored,
        reward_b_per_token_stored=c.reward_b_per_token_stored,
        user_stake_count=c.user_stake_count,
        reward_a_rate_u128=c.reward_a_rate_u128,
        reward_b_rate_u128=c.reward_b_rate_u128,
        total_staked=c.total_staked,
        funders=tuple(c.funders),
        pool_bump=c.pool_bump,
    )


def decode_user(raw: bytes) -> User:
    body = _strip_discriminator(raw, USER_DISCRIMINATOR, "User")
    try:
        c = USER_LAYOUT.parse(body)
    except Exception as exc:
        raise AccountDecodeError(f"User layout parse failed: {exc}") from exc
    return User(
        pool=c.pool,
        owner=c.owner,
        balance_staked=c.balance_staked,
        reward_a_per_token_complete=c.reward_a_per_token_complete,
        reward_b_per_token_complete=c.reward_b_per_token_complete,
        reward_a_per_token_pending=c.reward_a_per_token_pending,
        reward_b_per_token_pending=c.reward_b_per_token_pending,
        nonce=c.nonce,
    )


def decode_clock_time(raw: bytes) -> int:
    """Return ``unix_timestamp`` from raw Clock sysvar data."""

    end = CLOCK_UNIX_TIMESTAMP_OFFSET + 8
    if raw is None or len(raw) < end:
        raise AccountDecodeError("clock sysvar data too short")
    return I64.parse(raw[CLOCK_UNIX_TIMESTAMP_OFFSET:end])
