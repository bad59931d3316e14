from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from solders.pubkey import Pubkey
from solders.transaction import Transaction

from ..clients.farm_api_client import FarmApiClient
from ..clients.rpc_client import FarmRpcClient
from ..config import FarmConfig, get_config
from ..constants import FARM_PROGRAM_ID
from ..models import ClaimableReward, FarmMeta, PoolFarm, User
from . import rewards
from .tx_builder import FarmRef, FarmTxBuilder


class FarmService:
    """Query and transaction-building surface for farm clients."""

    def __init__(
        self,
        cfg: Optional[FarmConfig] = None,
        rpc: Optional[FarmRpcClient] = None,
        api: Optional[FarmApiClient] = None,
        program_id: Pubkey = FARM_PROGRAM_ID,
    ) -> None:
        self.cfg = cfg or (rpc.cfg if rpc else get_config())
        self.rpc = rpc or FarmRpcClient(self.cfg)
        self.api = api or FarmApiClient(self.cfg)
        self.program_id = program_id
        self.builder = FarmTxBuilder(self.rpc, self.cfg, program_id)

    async def __aenter__(self) -> "FarmService":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def close(self) -> None:
        try:
            await self.rpc.close()
        finally:
            self.api.close()

    # ---------- queries ----------
    async def get_user_balances(self, owner: Pubkey, farms: Sequence[Pubkey]) -> Dict[str, int]:
        return await rewards.get_user_balances(self.rpc, owner, farms, self.program_id)

    async def get_claimable_rewards(self, owner: Pubkey, farms: Sequence[Pubkey]) -> Dict[str, ClaimableReward]:
        return await rewards.get_claimable_rewards(self.rpc, owner, farms, self.program_id)

    async def load_farm(self, farm: Pubkey) -> PoolFarm:
        return await self.builder.load_farm(farm)

    async def load_farms(self, farms: Sequence[Pubkey]) -> List[PoolFarm]:
        return await self.builder.load_farms(farms)

    async def get_user_state(self, farm: Pubkey, owner: Pubkey) -> Optional[User]:
        return await self.builder.get_user_state(farm, owner)

    async def get_user_balance(self, farm: Pubkey, owner: Pubkey) -> int:
        return await self.builder.get_user_balance(farm, owner)

    # ---------- directory ----------
    def lookup_farms_by_pool(self, pool_address: Pubkey) -> List[FarmMeta]:
        return self.api.lookup_farms_by_pool(pool_address)

    def lookup_farms_by_asset(self, lp_mint: Pubkey) -> List[FarmMeta]:
        return self.api.lookup_farms_by_asset(lp_mint)

    # ---------- transactions ----------
    async def build_deposit(self, farm: FarmRef, owner: Pubkey, amount: int) -> Transaction:
        return await self.builder.build_deposit(farm, owner, amount)

    async def build_withdraw(self, farm: FarmRef, owner: Pubkey, amount: int) -> Transaction:
        return await self.builder.build_withdraw(farm, owner, amount)

    async def build_claim(self, farm: FarmRef, owner: Pubkey) -> Transaction:
        return await self.builder.build_claim(farm, owner)

    async def build_claim_all(self, owner: Pubkey, farms: Sequence[Pubkey]) -> List[Transaction]:
        return await self.builder.build_claim_all(owner, farms)

    async def build_close_user(self, farm: FarmRef, owner: Pubkey) -> Transaction:
        return await self.builder.build_close_user(farm, owner)
