from __future__ import annotations

import asyncio
import json
import sys
from typing import Any

import click
import httpx
from loguru import logger

from sumtokens.adapters import build_default_registry
from sumtokens.core.adapters.models import SumTokensRequest
from sumtokens.core.config import get_integration_config, load_config
from sumtokens.core.engine.dispatch import SumTokensEngine
from sumtokens.core.engine.integrations import cex_tvl
from sumtokens.core.errors import SumTokensError

_LOG_LEVELS = click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False)


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


def _configure_logging(log_level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=str(log_level).upper())


def _parse_lp(value: str) -> tuple[str, str | None]:
    lp, _, hint = value.partition(":")
    return lp, hint or None


async def _run_with_engine(fn):
    engine = SumTokensEngine(build_default_registry())
    try:
        return await fn(engine)
    finally:
        await engine.close()


@click.group(name="sumtokens", help="Sum token balances held by owners across chains.")
@click.option("--config", "config_path", default=None, help="Path to config.json.")
@click.option("--log-level", type=_LOG_LEVELS, default="WARNING", show_default=True)
def cli(config_path: str | None, log_level: str) -> None:
    _configure_logging(log_level)
    if config_path:
        load_config(config_path, require_exists=True)


@cli.command(name="aggregate", help="Aggregate balances for one chain.")
@click.option("--chain", required=True)
@click.option("--owner", "owners", multiple=True, help="Owner address (repeatable).")
@click.option("--token", "tokens", multiple=True, help="Token id filter (repeatable).")
@click.option("--blacklist", "blacklisted", multiple=True, help="Token id to exclude.")
@click.option(
    "--lp",
    "lp_positions",
    multiple=True,
    help="LP asset to decompose, optionally LP:HINT to pay out in the other leg.",
)
@click.option("--block", type=int, default=None)
def aggregate_cmd(
    chain: str,
    owners: tuple[str, ...],
    tokens: tuple[str, ...],
    blacklisted: tuple[str, ...],
    lp_positions: tuple[str, ...],
    block: int | None,
) -> None:
    request = SumTokensRequest(
        chain=chain,
        owners=list(owners),
        tokens=list(tokens),
        blacklisted_tokens=list(blacklisted),
        lp_positions=[_parse_lp(v) for v in lp_positions],
        block=block,
    )
    try:
        ledger = asyncio.run(_run_with_engine(lambda e: e.aggregate(request)))
    except (SumTokensError, httpx.HTTPError) as exc:
        _echo_json({"ok": False, "error": str(exc)})
        sys.exit(1)
    _echo_json({"ok": True, "result": ledger})


@cli.command(name="cex", help="Aggregate the exchange wallets in config.json 'integrations'.")
def cex_cmd() -> None:
    config = get_integration_config()
    if not config:
        _echo_json({"ok": False, "error": "no integrations configured"})
        sys.exit(1)
    results = asyncio.run(_run_with_engine(lambda e: cex_tvl(e, config)))
    _echo_json(
        {
            chain: {"ok": ok, "result" if ok else "error": value}
            for chain, (ok, value) in results.items()
        }
    )


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
