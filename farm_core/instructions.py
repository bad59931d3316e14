"""Instruction encoders for the farm program.

Data layout is the Anchor convention: ``sha256("global:<name>")[:8]``
followed by the borsh-encoded arguments. Account order mirrors the
program's account structs.
"""
from __future__ import annotations

import hashlib
from typing import List, Optional

from borsh_construct import U64
from solders.compute_budget import set_compute_unit_limit, set_compute_unit_price
from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from .constants import ASSOCIATED_TOKEN_PROGRAM, FARM_PROGRAM_ID, SYSTEM_PROGRAM, TOKEN_PROGRAM
from .models import Pool


def anchor_sighash(ix_name_snake: str) -> bytes:
    return hashlib.sha256(f"global:{ix_name_snake}".encode()).digest()[:8]


def _meta(pubkey: Pubkey, *, signer: bool = False, writable: bool = False) -> AccountMeta:
    return AccountMeta(pubkey=pubkey, is_signer=signer, is_writable=writable)


def build_instruction(
    name: str,
    accounts: List[AccountMeta],
    args: bytes = b"",
    program_id: Pubkey = FARM_PROGRAM_ID,
) -> Instruction:
    return Instruction(program_id=program_id, accounts=accounts, data=anchor_sighash(name) + args)


def create_user_ix(pool: Pubkey, user: Pubkey, owner: Pubkey, program_id: Pubkey = FARM_PROGRAM_ID) -> Instruction:
    accounts = [
        _meta(pool, writable=True),
        _meta(user, writable=True),
        _meta(owner, signer=True, writable=True),
        _meta(SYSTEM_PROGRAM),
    ]
    return build_instruction("create_user", accounts, program_id=program_id)


def _stake_accounts(farm: Pubkey, pool: Pool, user: Pubkey, owner: Pubkey, stake_from: Pubkey) -> List[AccountMeta]:
    # deposit and withdraw share one account struct
    return [
        _meta(farm, writable=True),
        _meta(pool.staking_vault, writable=True),
        _meta(stake_from, writable=True),
        _meta(user, writable=True),
        _meta(owner, signer=True),
        _meta(TOKEN_PROGRAM),
    ]


def deposit_ix(
    farm: Pubkey,
    pool: Pool,
    user: Pubkey,
    owner: Pubkey,
    stake_from: Pubkey,
    amount: int,
    program_id: Pubkey = FARM_PROGRAM_ID,
) -> Instruction:
    accounts = _stake_accounts(farm, pool, user, owner, stake_from)
    return build_instruction("deposit", accounts, U64.build(int(amount)), program_id)


def withdraw_ix(
    farm: Pubkey,
    pool: Pool,
    user: Pubkey,
    owner: Pubkey,
    stake_from: Pubkey,
    spt_amount: int,
    program_id: Pubkey = FARM_PROGRAM_ID,
) -> Instruction:
    accounts = _stake_accounts(farm, pool, user, owner, stake_from)
    return build_instruction("withdraw", accounts, U64.build(int(spt_amount)), program_id)


def claim_ix(
    farm: Pubkey,
    pool: Pool,
    user: Pubkey,
    owner: Pubkey,
    reward_a_account: Pubkey,
    reward_b_account: Pubkey,
    program_id: Pubkey = FARM_PROGRAM_ID,
) -> Instruction:
    accounts = [
        _meta(farm, writable=True),
        _meta(pool.staking_vault),
        _meta(pool.reward_a_vault, writable=True),
        _meta(pool.reward_b_vault, writable=True),
        _meta(user, writable=True),
        _meta(owner, signer=True),
        _meta(reward_a_account, writable=True),
        _meta(reward_b_account, writable=True),
        _meta(TOKEN_PROGRAM),
    ]
    return build_instruction("claim", accounts, program_id=program_id)


def close_user_ix(farm: Pubkey, user: Pubkey, owner: Pubkey, program_id: Pubkey = FARM_PROGRAM_ID) -> Instruction:
    accounts = [
        _meta(farm, writable=True),
        _meta(user, writable=True),
        _meta(owner, signer=True, writable=True),
    ]
    return build_instruction("close_user", accounts, program_id=program_id)


def compute_limit_ix(units: int) -> Instruction:
    return set_compute_unit_limit(int(units))


def priority_fee_ixs(micro_lamports: Optional[int]) -> List[Instruction]:
    if micro_lamports is None:
        return []
    return [set_compute_unit_price(int(micro_lamports))]


def create_ata_idempotent_ix(payer: Pubkey, owner: Pubkey, mint: Pubkey, ata: Pubkey) -> Instruction:
    """Associated-token-account ``CreateIdempotent``; a no-op if ``ata`` exists."""

    accounts = [
        _meta(payer, signer=True, writable=True),
        _meta(ata, writable=True),
        _meta(owner),
        _meta(mint),
        _meta(SYSTEM_PROGRAM),
        _meta(TOKEN_PROGRAM),
    ]
    return Instruction(program_id=ASSOCIATED_TOKEN_PROGRAM, accounts=accounts, data=bytes([1]))
