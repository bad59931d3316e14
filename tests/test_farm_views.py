from io import StringIO

from rich.console import Console
from solders.pubkey import Pubkey

from farm_core.console.views import balances_table, farms_table, pool_table, rewards_table, stake_table
from farm_core.models import ClaimableReward, FarmMeta, PoolFarm
from farm_fakes import make_pool, make_user


def _render(table) -> str:
    console = Console(file=StringIO(), width=200)
    console.print(table)
    return console.file.getvalue()


def test_pool_table_single_asset_shows_one_mint():
    mint = Pubkey.new_unique()
    out = _render(pool_table(PoolFarm(Pubkey.new_unique(), make_pool(reward_a_mint=mint, reward_b_mint=mint))))
    assert f"{mint} (single)" in out
    assert "reward_b_mint" not in out


def test_pool_table_dual_lists_both_mints():
    pool = make_pool(total_staked=1_234_567)
    out = _render(pool_table(PoolFarm(Pubkey.new_unique(), pool)))
    assert str(pool.reward_a_mint) in out and str(pool.reward_b_mint) in out
    assert "1,234,567" in out


def test_stake_table_with_position():
    farm, owner = Pubkey.new_unique(), Pubkey.new_unique()
    out = _render(stake_table(farm, owner, make_user(farm, owner, reward_b_per_token_pending=9)))
    assert "500,000,000" in out
    assert "reward_b_per_token_pending" in out


def test_rewards_table_totals_footer():
    out = _render(rewards_table({"f1": ClaimableReward(10, 1), "f2": ClaimableReward(32, 2)}))
    assert "total" in out
    assert "42" in out


def test_rewards_table_single_farm_has_no_footer():
    assert "total" not in _render(rewards_table({"f1": ClaimableReward(5, 6)}))


def test_balances_table_empty():
    assert "no positions" in _render(balances_table({}))


def test_farms_table_status():
    out = _render(farms_table([FarmMeta(Pubkey.new_unique(), None, True), FarmMeta(Pubkey.new_unique(), 3.0, False)]))
    assert "expired" in out and "active" in out
    assert "3.00%" in out
