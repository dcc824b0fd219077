"""Command line access to merkle drop claims and rewards snapshots.

Usage:
  merkle-rewards config 1 ETH
  merkle-rewards leaf 1 INFT 0xabc...
  merkle-rewards rewards 1 0xabc... --lenient
  merkle-rewards phases ethereum
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any

import click
from loguru import logger

from merkle_rewards.adapters.merkle_tree_adapter.adapter import MerkleTreeAdapter
from merkle_rewards.adapters.rewards_adapter.adapter import RewardsAdapter
from merkle_rewards.core.config import get_db_path, load_config
from merkle_rewards.core.constants.chains import CHAIN_CODE_TO_ID
from merkle_rewards.core.errors import MerkleRewardsError
from merkle_rewards.core.models.merkle import AirdropType
from merkle_rewards.core.store.sqlite import SqliteDocumentStore

AIRDROP_TYPE_CHOICES = [t.value for t in AirdropType] + [t.name for t in AirdropType]


class ChainIdParamType(click.ParamType):
    """Chain id as a number or a known chain code such as `ethereum`."""

    name = "chain"

    def convert(self, value, param, ctx):
        if isinstance(value, int):
            return value
        text = str(value).strip().lower()
        if text.isdigit():
            return int(text)
        if text in CHAIN_CODE_TO_ID:
            return CHAIN_CODE_TO_ID[text]
        self.fail(f"unknown chain {value!r}", param, ctx)


CHAIN_ID = ChainIdParamType()


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


def _parse_airdrop_type(value: str) -> AirdropType:
    if value in AirdropType.__members__:
        return AirdropType[value]
    return AirdropType(value)


def _run(ctx: click.Context, coro) -> None:
    try:
        result = asyncio.run(coro)
    except (MerkleRewardsError, ValueError) as exc:
        _echo_json({"ok": False, "error": type(exc).__name__, "details": str(exc)})
        ctx.exit(1)
    _echo_json({"ok": True, "result": result})


@click.group(name="merkle-rewards", help="Read merkle drop claims and rewards.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config JSON (defaults to MERKLE_REWARDS_CONFIG_PATH or ./config.json).",
)
@click.option(
    "--db",
    "db_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Sqlite document store exported by the publisher (opened read-only).",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
)
@click.pass_context
def cli(
    ctx: click.Context, config_path: Path | None, db_path: Path | None, log_level: str
) -> None:
    logger.remove()
    logger.add(sys.stderr, level=str(log_level).upper())
    if config_path is not None:
        load_config(config_path, require_exists=True)
    db_path = db_path or get_db_path()
    if not db_path.is_file():
        raise click.BadParameter(
            f"Document store {str(db_path)!r} does not exist.", param_hint="--db"
        )
    store = SqliteDocumentStore(db_path, read_only=True)
    ctx.call_on_close(store.close)
    ctx.obj = {"store": store}


@cli.command(name="config", help="Show the current merkle root config.")
@click.argument("chain_id", type=CHAIN_ID)
@click.argument("airdrop_type", type=click.Choice(AIRDROP_TYPE_CHOICES))
@click.pass_context
def config_cmd(ctx: click.Context, chain_id: int, airdrop_type: str) -> None:
    adapter = MerkleTreeAdapter(store=ctx.obj["store"])

    async def _go() -> dict[str, Any]:
        config = await adapter.get_config(chain_id, _parse_airdrop_type(airdrop_type))
        return config.to_document()

    _run(ctx, _go())


@cli.command(name="leaf", help="Show a user's leaf and claimable amount.")
@click.argument("chain_id", type=CHAIN_ID)
@click.argument("airdrop_type", type=click.Choice(AIRDROP_TYPE_CHOICES))
@click.argument("user")
@click.pass_context
def leaf_cmd(ctx: click.Context, chain_id: int, airdrop_type: str, user: str) -> None:
    adapter = MerkleTreeAdapter(store=ctx.obj["store"])

    async def _go() -> dict[str, Any]:
        claim = await adapter.get_claim(
            chain_id, _parse_airdrop_type(airdrop_type), user
        )
        return claim.to_document()

    _run(ctx, _go())


@cli.command(name="rewards", help="Show the user's combined rewards snapshot.")
@click.argument("chain_id", type=CHAIN_ID)
@click.argument("user")
@click.option(
    "--lenient/--strict",
    default=False,
    show_default=True,
    help="Report per-airdrop failures instead of failing the whole read.",
)
@click.pass_context
def rewards_cmd(ctx: click.Context, chain_id: int, user: str, lenient: bool) -> None:
    adapter = RewardsAdapter(store=ctx.obj["store"])

    async def _go() -> dict[str, Any]:
        rewards = await adapter.get_user_rewards(chain_id, user, strict=not lenient)
        return rewards.to_document()

    _run(ctx, _go())


@cli.command(name="phases", help="List the rewards program phases.")
@click.argument("chain_id", type=CHAIN_ID)
@click.pass_context
def phases_cmd(ctx: click.Context, chain_id: int) -> None:
    adapter = RewardsAdapter(store=ctx.obj["store"])

    async def _go() -> list[dict[str, Any]]:
        return [p.to_document() for p in await adapter.get_phases(chain_id)]

    _run(ctx, _go())


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
