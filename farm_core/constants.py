from __future__ import annotations

import os

from solders.pubkey import Pubkey

FARM_PROGRAM_ID = Pubkey.from_string(
    os.getenv("FARM_PROGRAM_ID", "FarmuwXPWXvefWUeqFAa5w6rifLkq5X6E8bimYvrhCB1")
)

TOKEN_PROGRAM            = Pubkey.from_string("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA")
SYSTEM_PROGRAM           = Pubkey.from_string("11111111111111111111111111111111")
ASSOCIATED_TOKEN_PROGRAM = Pubkey.from_string("ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL")
SYSVAR_CLOCK             = Pubkey.from_string("SysvarC1ock11111111111111111111111111111111")

# reward-per-token accumulators are scaled by 1e9
REWARD_SCALE = 1_000_000_000

DEFAULT_CHUNK_SIZE = 100

# max pools' claims per claim-all tx (size and CU ceiling)
# Empirical; revalidate if the runtime limits change.
MAX_CLAIM_ALL_ALLOWED = 2
CLAIM_ALL_COMPUTE_UNITS = 1_400_000

FARM_API_URLS = {
    "mainnet-beta": "https://amm-v2.meteora.ag",
    "devnet": "https://devnet-amm-v2.meteora.ag",
}
