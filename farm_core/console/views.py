"""Rich tables for the farm console. Builders return tables; callers print."""
from __future__ import annotations

from typing import Iterable, Mapping, Optional

from rich import box
from rich.table import Table
from solders.pubkey import Pubkey

from ..models import ClaimableReward, FarmMeta, PoolFarm, User


def _fields_table(title: str) -> Table:
    t = Table(title=title, box=box.SIMPLE, expand=False)
    t.add_column("Field", style="bold cyan")
    t.add_column("Value", overflow="fold")
    return t


def pool_table(farm: PoolFarm) -> Table:
    pool = farm.pool
    t = _fields_table(f"Farm {farm.address}")
    t.add_row("authority", str(pool.authority))
    t.add_row("paused", "[red]yes[/red]" if pool.paused else "no")
    t.add_row("staking_mint", str(pool.staking_mint))
    t.add_row("staking_vault", str(pool.staking_vault))
    if pool.is_dual:
        t.add_row("reward_a_mint", str(pool.reward_a_mint))
        t.add_row("reward_b_mint", str(pool.reward_b_mint))
    else:
        t.add_row("reward_mint", f"{pool.reward_a_mint} (single)")
    t.add_row("total_staked", f"{pool.total_staked:,}")
    t.add_row("user_stake_count", str(pool.user_stake_count))
    t.add_row("reward_duration_end", str(pool.reward_duration_end))
    t.add_row("last_update_time", str(pool.last_update_time))
    return t


def stake_table(farm: Pubkey, owner: Pubkey, user: Optional[User]) -> Table:
    t = _fields_table("Stake info")
    t.add_row("farm", str(farm))
    t.add_row("owner", str(owner))
    if user is None:
        t.add_row("position", "[dim]none[/dim]")
        return t
    t.add_row("balance_staked", f"{user.balance_staked:,}")
    for leg in ("a", "b"):
        t.add_row(f"reward_{leg}_per_token_complete", str(getattr(user, f"reward_{leg}_per_token_complete")))
        t.add_row(f"reward_{leg}_per_token_pending", str(getattr(user, f"reward_{leg}_per_token_pending")))
    return t


def balances_table(balances: Mapping[str, int]) -> Table:
    t = Table(title="Staked balances", box=box.MINIMAL_DOUBLE_HEAD, expand=False)
    t.add_column("Pool")
    t.add_column("Staked", justify="right")
    for pool, amount in sorted(balances.items()):
        t.add_row(pool, str(amount))
    if not balances:
        t.add_row("[dim]no positions[/dim]", "")
    return t


def rewards_table(claimable: Mapping[str, ClaimableReward]) -> Table:
    """Per-farm claimable amounts (raw token units), totals in the footer."""
    t = Table(title="Claimable rewards", box=box.MINIMAL_DOUBLE_HEAD, expand=False, show_footer=len(claimable) > 1)
    total_a = sum(r.reward_a for r in claimable.values())
    total_b = sum(r.reward_b for r in claimable.values())
    t.add_column("Farm", footer="total")
    t.add_column("Reward A", justify="right", footer=str(total_a))
    t.add_column("Reward B", justify="right", footer=str(total_b))
    for farm, reward in claimable.items():
        t.add_row(farm, str(reward.reward_a), str(reward.reward_b))
    return t


def farms_table(metas: Iterable[FarmMeta]) -> Table:
    t = Table(title="Farms", box=box.MINIMAL_DOUBLE_HEAD, expand=False)
    t.add_column("Farm")
    t.add_column("APY", justify="right")
    t.add_column("Status")
    for meta in metas:
        apy = "-" if meta.apy is None else f"{meta.apy:.2f}%"
        status = "[red]expired[/red]" if meta.expired else "[green]active[/green]"
        t.add_row(str(meta.farm_address), apy, status)
    return t
