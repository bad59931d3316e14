from __future__ import annotations

import asyncio
from typing import List, Optional, Sequence, Union

from solders.instruction import Instruction
from solders.message import Message
from solders.pubkey import Pubkey
from solders.transaction import Transaction

from ..clients.rpc_client import FarmRpcClient
from ..config import FarmConfig
from ..constants import FARM_PROGRAM_ID
from ..errors import FarmNotFoundError
from ..instructions import (
    claim_ix,
    close_user_ix,
    compute_limit_ix,
    create_user_ix,
    deposit_ix,
    priority_fee_ixs,
    withdraw_ix,
)
from ..layouts import decode_pool, decode_user
from ..logging import log
from ..models import PoolFarm, TxHeader, User
from ..pdas import derive_user_pda
from ..utils import chunks

FarmRef = Union[PoolFarm, Pubkey]

U64_MAX = 2**64 - 1


def _check_amount(amount: int) -> int:
    amount = int(amount)
    if not 0 < amount <= U64_MAX:
        raise ValueError(f"amount must be in (0, 2^64), got {amount}")
    return amount


def assemble_transaction(header: TxHeader, instructions: Sequence[Instruction]) -> Transaction:
    """Unsigned legacy transaction, ready for external signing."""

    message = Message.new_with_blockhash(list(instructions), header.fee_payer, header.recent_blockhash)
    return Transaction.new_unsigned(message)


class FarmTxBuilder:
    """Builds deposit/withdraw/claim transactions for one or many farms.

    Every ``build_*`` call returns unsigned transactions; all reads happen
    before assembly, so a failed read yields no transaction at all.
    """

    def __init__(self, rpc: FarmRpcClient, cfg: Optional[FarmConfig] = None, program_id: Pubkey = FARM_PROGRAM_ID) -> None:
        self.rpc = rpc
        self.cfg = cfg or rpc.cfg
        self.program_id = program_id

    # ---------- farm / user reads ----------
    async def load_farm(self, farm: Pubkey) -> PoolFarm:
        raw = await self.rpc.fetch_account(farm)
        if raw is None:
            raise FarmNotFoundError("No pool state found", str(farm))
        return PoolFarm(address=farm, pool=decode_pool(raw))

    async def load_farms(self, farms: Sequence[Pubkey]) -> List[PoolFarm]:
        raws = await self.rpc.fetch_accounts(list(farms))
        loaded: List[PoolFarm] = []
        for farm, raw in zip(farms, raws):
            if raw is None:
                raise FarmNotFoundError("No pool state found", str(farm))
            loaded.append(PoolFarm(address=farm, pool=decode_pool(raw)))
        return loaded

    async def _resolve(self, farm: FarmRef) -> PoolFarm:
        return farm if isinstance(farm, PoolFarm) else await self.load_farm(farm)

    def user_pda(self, farm: Pubkey, owner: Pubkey) -> Pubkey:
        return derive_user_pda(owner, farm, self.program_id)

    async def get_user_state(self, farm: Pubkey, owner: Pubkey) -> Optional[User]:
        raw = await self.rpc.fetch_account(self.user_pda(farm, owner))
        return decode_user(raw) if raw is not None else None

    async def get_user_balance(self, farm: Pubkey, owner: Pubkey) -> int:
        user = await self.get_user_state(farm, owner)
        return user.balance_staked if user else 0

    # ---------- instruction groups ----------
    async def _create_user_instruction(self, farm: PoolFarm, owner: Pubkey) -> Optional[Instruction]:
        if await self.get_user_state(farm.address, owner) is not None:
            return None
        return create_user_ix(farm.address, self.user_pda(farm.address, owner), owner, self.program_id)

    async def claim_instructions(self, farm: PoolFarm, owner: Pubkey) -> List[Instruction]:
        """Reward ATA bootstrap (if needed) followed by the claim ix."""

        pool = farm.pool
        if pool.is_dual:
            (ata_a, ix_a), (ata_b, ix_b) = await asyncio.gather(
                self.rpc.ensure_holding_account(pool.reward_a_mint, owner),
                self.rpc.ensure_holding_account(pool.reward_b_mint, owner),
            )
        else:
            # single-asset pool: the B leg is paid to the A account
            ata_a, ix_a = await self.rpc.ensure_holding_account(pool.reward_a_mint, owner)
            ata_b, ix_b = ata_a, None

        ixs = [ix for ix in (ix_a, ix_b) if ix is not None]
        ixs.append(
            claim_ix(farm.address, pool, self.user_pda(farm.address, owner), owner, ata_a, ata_b, self.program_id)
        )
        return ixs

    async def _finalize(self, owner: Pubkey, instructions: Sequence[Instruction]) -> Transaction:
        header = await self.rpc.get_recent_transaction_header(owner)
        return assemble_transaction(header, [*priority_fee_ixs(self.cfg.priority_fee), *instructions])

    # ---------- single-farm builders ----------
    async def build_deposit(self, farm: FarmRef, owner: Pubkey, amount: int) -> Transaction:
        amount = _check_amount(amount)
        farm = await self._resolve(farm)
        create_ix, (stake_ata, ata_ix) = await asyncio.gather(
            self._create_user_instruction(farm, owner),
            self.rpc.ensure_holding_account(farm.pool.staking_mint, owner),
        )
        ixs = [ix for ix in (create_ix, ata_ix) if ix is not None]
        ixs.append(
            deposit_ix(farm.address, farm.pool, self.user_pda(farm.address, owner), owner, stake_ata, amount, self.program_id)
        )
        return await self._finalize(owner, ixs)

    async def build_withdraw(self, farm: FarmRef, owner: Pubkey, amount: int) -> Transaction:
        amount = _check_amount(amount)
        farm = await self._resolve(farm)
        stake_ata, ata_ix = await self.rpc.ensure_holding_account(farm.pool.staking_mint, owner)
        ixs = [ata_ix] if ata_ix is not None else []
        ixs.append(
            withdraw_ix(farm.address, farm.pool, self.user_pda(farm.address, owner), owner, stake_ata, amount, self.program_id)
        )
        return await self._finalize(owner, ixs)

    async def build_claim(self, farm: FarmRef, owner: Pubkey) -> Transaction:
        farm = await self._resolve(farm)
        return await self._finalize(owner, await self.claim_instructions(farm, owner))

    async def build_close_user(self, farm: FarmRef, owner: Pubkey) -> Transaction:
        farm = await self._resolve(farm)
        ix = close_user_ix(farm.address, self.user_pda(farm.address, owner), owner, self.program_id)
        return await self._finalize(owner, [ix])

    # ---------- multi-farm ----------
    async def build_claim_all(self, owner: Pubkey, farms: Sequence[Pubkey]) -> List[Transaction]:
        """Claim every farm, packing at most ``max_claim_all`` farms per tx.

        Farms keep input order across and within the returned transactions;
        each tx ends with one compute-unit-limit ix.
        """

        pool_farms = await self.load_farms(farms)
        per_farm = await asyncio.gather(*(self.claim_instructions(pf, owner) for pf in pool_farms))
        groups = chunks(per_farm, self.cfg.max_claim_all)
        headers = await asyncio.gather(*(self.rpc.get_recent_transaction_header(owner) for _ in groups))

        txs: List[Transaction] = []
        for header, group in zip(headers, groups):
            ixs = [*priority_fee_ixs(self.cfg.priority_fee)]
            for farm_ixs in group:
                ixs.extend(farm_ixs)
            ixs.append(compute_limit_ix(self.cfg.claim_all_compute_units))
            txs.append(assemble_transaction(header, ixs))

        log.info("claim-all built", source="FarmTxBuilder", payload={"farms": len(pool_farms), "txs": len(txs)})
        return txs
