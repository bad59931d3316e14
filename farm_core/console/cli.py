"""Read-only farm console: pool info, stake info, balances, rewards."""
from __future__ import annotations

import argparse
import asyncio
from dataclasses import replace
from typing import List, Optional

from rich.console import Console
from solders.pubkey import Pubkey

from ..config import get_config
from ..logging import configure_console_log
from ..services import FarmService
from .views import balances_table, farms_table, pool_table, rewards_table, stake_table


def _pubkey(value: str) -> Pubkey:
    try:
        return Pubkey.from_string(value.strip())
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid pubkey: {value}") from exc


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="farm-core", description="Farm reward and stake inspector")
    ap.add_argument("--rpc-url", help="Override FARM_RPC_URL")
    ap.add_argument("--debug", action="store_true", help="Verbose logging")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("show-info", help="Decode and print a farm pool")
    p.add_argument("farm", type=_pubkey)

    p = sub.add_parser("stake-info", help="Print the owner's user record for a farm")
    p.add_argument("farm", type=_pubkey)
    p.add_argument("--owner", type=_pubkey, required=True)

    for name, text in (("balances", "Staked balances per farm"), ("rewards", "Claimable rewards per farm")):
        p = sub.add_parser(name, help=text)
        p.add_argument("farms", type=_pubkey, nargs="+")
        p.add_argument("--owner", type=_pubkey, required=True)

    p = sub.add_parser("lookup", help="Find farms in the directory")
    grp = p.add_mutually_exclusive_group(required=True)
    grp.add_argument("--pool", type=_pubkey)
    grp.add_argument("--lp", type=_pubkey)
    return ap


async def run(args: argparse.Namespace, svc: FarmService, console: Optional[Console] = None) -> None:
    cn = console or Console()
    if args.command == "show-info":
        cn.print(pool_table(await svc.load_farm(args.farm)))
    elif args.command == "stake-info":
        user = await svc.get_user_state(args.farm, args.owner)
        cn.print(stake_table(args.farm, args.owner, user))
    elif args.command == "balances":
        cn.print(balances_table(await svc.get_user_balances(args.owner, args.farms)))
    elif args.command == "rewards":
        cn.print(rewards_table(await svc.get_claimable_rewards(args.owner, args.farms)))
    elif args.command == "lookup":
        metas = svc.lookup_farms_by_pool(args.pool) if args.pool else svc.lookup_farms_by_asset(args.lp)
        cn.print(farms_table(metas))


async def _amain(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    configure_console_log(args.debug)
    cfg = get_config()
    if args.rpc_url:
        cfg = replace(cfg, rpc_url=args.rpc_url)
    async with FarmService(cfg) as svc:
        await run(args, svc)


def main(argv: Optional[List[str]] = None) -> None:
    asyncio.run(_amain(argv))


if __name__ == "__main__":
    main()
