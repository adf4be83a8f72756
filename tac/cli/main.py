"""
TAC CLI - Command Line Interface for the Timed Auction Contract

Main entry point for all CLI commands.
"""

import json
import os
import click
from pathlib import Path

from tac.utils.logger import LOG_LEVEL_ENV, TACLogger, parse_level_spec, setup_logging


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--log-level", default=None,
              help="Level spec, e.g. INFO,auction=DEBUG (default: $TAC_LOG_LEVEL or WARNING)")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False),
              help="JSON config file")
@click.option("--env-file", default=None, type=click.Path(exists=True, dir_okay=False),
              help=".env file with TAC_* settings")
@click.option("--log-dir", default=None, help="Also write logs to this directory")
@click.version_option(version="0.1.0")
@click.pass_context
def cli(ctx, debug, log_level, config_path, env_file, log_dir):
    """Timed Auction Contract - single English auction with escrowed settlement"""
    import logging
    from pydantic import ValidationError
    from tac.core.config import load_config

    ctx.ensure_object(dict)
    try:
        # Also loads the .env file, which may set TAC_LOG_LEVEL
        ctx.obj["config"] = load_config(config_path, env_file=env_file)
    except (ValidationError, ValueError) as e:
        raise click.ClickException(f"Invalid configuration: {e}")

    spec = log_level or os.getenv(LOG_LEVEL_ENV, "")
    try:
        level, subsystem_levels = parse_level_spec(spec, default=logging.WARNING)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--log-level")
    if debug:
        level = logging.DEBUG

    TACLogger.reset()
    setup_logging(
        level=level,
        log_dir=log_dir,
        log_to_file=log_dir is not None,
        subsystem_levels=subsystem_levels,
    )


# =============================================================================
# Simulate Command
# =============================================================================


@cli.command("simulate")
@click.argument("scenario_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
@click.pass_context
def simulate(ctx, scenario_file, as_json):
    """Replay a JSON scenario against a fresh auction"""
    from dataclasses import asdict
    from tac.cli.scenario import run_scenario

    try:
        scenario = json.loads(Path(scenario_file).read_text(encoding="utf-8"))
        auction, transfer, results = run_scenario(scenario, ctx.obj["config"])
    except (ValueError, TypeError) as e:
        raise click.ClickException(f"Invalid scenario: {e}")

    if as_json:
        click.echo(json.dumps({
            "steps": [asdict(r) for r in results],
            "stats": auction.stats(),
            "balances": transfer.balances,
        }, indent=2, default=str))
        return

    click.echo(f"Scenario: {scenario_file}")
    click.echo("-" * 40)
    for r in results:
        who = f" {r.caller}" if r.caller else ""
        if r.ok:
            click.echo(f"  ✓ t={r.at}{who} {r.action}: {r.result}")
        else:
            click.echo(f"  ✗ t={r.at}{who} {r.action}: {r.error}")
    click.echo()

    click.echo("📊 Final state:")
    for key, value in auction.stats().items():
        click.echo(f"  {key}: {value}")
    click.echo()

    click.echo("💸 Payments:")
    if not transfer.balances:
        click.echo("  (none)")
    for recipient, amount in transfer.balances.items():
        click.echo(f"  {recipient}: {amount}")


# =============================================================================
# Demo Command
# =============================================================================


@cli.command("demo")
@click.option("--unit", default=10**17, type=int, help="Smallest-unit value of 0.1")
@click.pass_context
def demo(ctx, unit):
    """Run a walkthrough auction: two bidders, an excess withdrawal and settlement"""
    from tac.core import Auction, InMemoryTransfer, ManualClock

    click.echo("=" * 60)
    click.echo("  TIMED AUCTION CONTRACT - DEMO")
    click.echo("=" * 60)
    click.echo()

    clock = ManualClock(start=1_000)
    transfer = InMemoryTransfer()
    auction = Auction(
        owner="owner",
        duration=300,
        start_time=clock.now(),
        transfer=transfer,
        config=ctx.obj["config"],
    )
    click.echo(f"📦 Auction created, deadline t={auction.deadline}")
    click.echo()

    click.echo("🔨 Bidding...")
    auction.place_bid("alice", 10 * unit, clock.now())
    click.echo(f"  ✓ alice bids {10 * unit}")
    auction.place_bid("bob", 11 * unit, clock.advance(10))
    click.echo(f"  ✓ bob bids {11 * unit}")
    auction.place_bid("alice", 15 * unit, clock.advance(10))
    click.echo(f"  ✓ alice bids {15 * unit} (deposit now {auction.get_entry('alice').total_deposited})")
    click.echo()

    click.echo("↩️  Alice withdraws her excess...")
    excess = auction.withdraw_excess("alice", clock.advance(1))
    click.echo(f"  ✓ {excess} returned to alice")
    click.echo()

    click.echo("⚖️  Ending auction...")
    clock.set(auction.deadline)
    winner, amount = auction.end_auction("owner", clock.now())
    click.echo(f"  ✓ Winner: {winner} with {amount}")
    click.echo()

    click.echo("💸 Settling bob...")
    receipt = auction.withdraw("bob", clock.now())
    click.echo(f"  ✓ refund={receipt.refund}, commission={receipt.commission}")
    click.echo()

    click.echo("📊 Final Statistics:")
    for key, value in auction.stats().items():
        click.echo(f"  {key}: {value}")
    click.echo()
    click.echo("✅ Demo complete!")


# =============================================================================
# Config Command
# =============================================================================


@cli.command("config")
@click.pass_context
def show_config(ctx):
    """Show the effective auction configuration"""
    click.echo(json.dumps(ctx.obj["config"].model_dump(), indent=2))


if __name__ == "__main__":
    cli()
