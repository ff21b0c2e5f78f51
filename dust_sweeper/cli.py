"""Command-line interface for the dust sweeper."""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from .chains.solana import SolanaClient
from .config import AppConfig, load_config
from .errors import DiscoveryError
from .logging_setup import configure_logging
from .services import Sweeper
from .services.report import format_holdings, format_sweep_report
from .wallets import load_wallet

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="dust-sweeper",
        description="Swap small token balances into SOL in one batch",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    sub.add_parser("holdings", help="List token balances and their value")

    sweep_parser = sub.add_parser("sweep", help="Swap selected balances into SOL")
    target = sweep_parser.add_mutually_exclusive_group(required=True)
    target.add_argument(
        "--mint",
        action="append",
        dest="mints",
        default=None,
        help="Mint to swap (repeatable)",
    )
    target.add_argument(
        "--all",
        action="store_true",
        help="Swap every discovered balance",
    )
    sweep_parser.add_argument(
        "--min-value",
        type=float,
        default=None,
        help="With --all, skip balances worth less than this (in SOL)",
    )
    sweep_parser.add_argument(
        "--max-value",
        type=float,
        default=None,
        help="With --all, skip balances worth more than this (in SOL)",
    )

    return parser


def _build_sweeper(config: AppConfig) -> Sweeper:
    connection = SolanaClient(
        config.chain, poll_interval=config.sweep.confirm_poll_interval_seconds
    )
    wallet = load_wallet(config.wallet, connection)
    return Sweeper(config, wallet)


async def _run(args: argparse.Namespace) -> int:
    """Execute the selected command; returns the process exit status."""
    configure_logging(args.log_level)
    config = load_config(args.config)
    sweeper = _build_sweeper(config)

    try:
        holdings = await sweeper.refresh()
    except DiscoveryError as e:
        logger.error("%s", e)
        return 1

    if args.command == "holdings":
        print(format_holdings(holdings))
        return 0

    if args.all:
        sweeper.select_all(min_value=args.min_value, max_value=args.max_value)
    else:
        known = {h.mint for h in holdings}
        for mint in args.mints:
            if mint not in known:
                logger.warning("No balance found for %s, ignoring", mint)
                continue
            sweeper.selection.select(mint)

    if not sweeper.selection:
        print("Nothing selected to sweep.")
        return 0

    print(format_holdings(holdings, sweeper.selection))
    outcomes = await sweeper.sweep()
    if not outcomes:
        print("No swaps executed: the wallet cannot sign (watch-only?).")
        return 1

    print()
    print(format_sweep_report(outcomes, sweeper.wallet_identity))
    return 1 if any(not o.succeeded for o in outcomes) else 0


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "sweep" and args.mints and (
        args.min_value is not None or args.max_value is not None
    ):
        parser.error("--min-value/--max-value only apply with --all")

    sys.exit(asyncio.run(_run(args)))
