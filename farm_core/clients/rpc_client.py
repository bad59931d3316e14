from __future__ import annotations

import asyncio
from typing import List, Optional, Sequence, Tuple

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solders.instruction import Instruction
from solders.pubkey import Pubkey

from ..config import FarmConfig, get_config
from ..constants import SYSVAR_CLOCK
from ..errors import FarmNotFoundError
from ..instructions import create_ata_idempotent_ix
from ..layouts import decode_clock_time
from ..logging import log
from ..models import TxHeader
from ..pdas import associated_token_address
from ..utils import chunks


class FarmRpcClient:
    """Async ledger reads used by the reward engine and the tx builder.

    Transport errors from ``solana-py`` propagate unchanged; nothing here
    retries. Caller must ``await close()`` (or use ``async with``).
    """

    def __init__(self, cfg: Optional[FarmConfig] = None, client: Optional[AsyncClient] = None) -> None:
        self.cfg = cfg or get_config()
        self.commitment = Commitment(self.cfg.commitment)
        self.client = client or AsyncClient(self.cfg.rpc_url, commitment=self.commitment)

    async def __aenter__(self) -> "FarmRpcClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def close(self) -> None:
        await self.client.close()

    # ---------- account reads ----------
    async def fetch_account(self, pubkey: Pubkey) -> Optional[bytes]:
        resp = await self.client.get_account_info(pubkey, commitment=self.commitment)
        acc = resp.value
        return None if acc is None else bytes(acc.data)

    async def _fetch_chunk(self, group: List[Pubkey]) -> List[Optional[bytes]]:
        resp = await self.client.get_multiple_accounts(group, commitment=self.commitment)
        values = list(resp.value)
        if len(values) != len(group):
            raise RuntimeError(
                f"getMultipleAccounts returned {len(values)} accounts for {len(group)} keys"
            )
        return [None if acc is None else bytes(acc.data) for acc in values]

    async def fetch_accounts(
        self, pubkeys: Sequence[Pubkey], chunk_size: Optional[int] = None
    ) -> List[Optional[bytes]]:
        """Fetch many accounts; result[i] is the data for pubkeys[i] or None.

        Chunks are requested concurrently and reassembled by chunk index, so
        completion order never affects output order. One failed chunk fails
        the whole call.
        """

        groups = chunks(list(pubkeys), chunk_size or self.cfg.chunk_size)
        if not groups:
            return []
        log.debug("fetching accounts", source="FarmRpcClient", payload={"keys": len(pubkeys), "chunks": len(groups)})
        with log.timed("getMultipleAccounts", source="FarmRpcClient"):
            per_chunk = await asyncio.gather(*(self._fetch_chunk(g) for g in groups))
        return [raw for group in per_chunk for raw in group]

    # ---------- clock / blockhash ----------
    async def get_clock_time(self) -> int:
        raw = await self.fetch_account(SYSVAR_CLOCK)
        if raw is None:
            raise FarmNotFoundError("Clock sysvar not found", str(SYSVAR_CLOCK))
        return decode_clock_time(raw)

    async def get_recent_transaction_header(self, fee_payer: Pubkey) -> TxHeader:
        resp = await self.client.get_latest_blockhash(self.commitment)
        return TxHeader(
            fee_payer=fee_payer,
            recent_blockhash=resp.value.blockhash,
            last_valid_block_height=resp.value.last_valid_block_height,
        )

    # ---------- sub-account bootstrap ----------
    async def ensure_holding_account(
        self, mint: Pubkey, owner: Pubkey, payer: Optional[Pubkey] = None
    ) -> Tuple[Pubkey, Optional[Instruction]]:
        """Return the owner's ATA for ``mint`` and a create ix if it is absent.

        The create ix is the idempotent variant, so an ATA created by someone
        else between this check and submission does not fail the tx.
        """

        ata = associated_token_address(owner, mint)
        if await self.fetch_account(ata) is not None:
            return ata, None
        return ata, create_ata_idempotent_ix(payer or owner, owner, mint, ata)
