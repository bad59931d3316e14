"""Deterministic account derivations. Pure functions, no network."""
from __future__ import annotations

from typing import List

from solders.pubkey import Pubkey
from spl.token.instructions import get_associated_token_address

from .constants import FARM_PROGRAM_ID

__all__ = [
    "find_program_address",
    "derive_user_pda",
    "associated_token_address",
]


def find_program_address(seeds: List[bytes], program_id: Pubkey) -> Pubkey:
    pda, _ = Pubkey.find_program_address(seeds, program_id)
    return pda


def derive_user_pda(owner: Pubkey, pool: Pubkey, program_id: Pubkey = FARM_PROGRAM_ID) -> Pubkey:
    """User record PDA: seeds = [owner, pool].

    ``owner`` must be the wallet key, never an already-derived user address.
    """

    return find_program_address([bytes(owner), bytes(pool)], program_id)


def associated_token_address(owner: Pubkey, mint: Pubkey) -> Pubkey:
    """Derive the SPL associated token account owned by ``owner`` for ``mint``."""

    return get_associated_token_address(owner, mint)
