"""CLI for the market resolver.

Usage:
  resolver init-db
  resolver run
  resolver schedule --interval 300
  resolver verify 42
"""
import argparse
import asyncio
import json
import signal
import sys

from market_resolver.config import ResolverSettings
from market_resolver.db import MarketNotFoundError
from market_resolver.db.sessions import init_db
from market_resolver.main import configure_logging
from market_resolver.resolution import verify_outcome_hash
from market_resolver.services import run_periodically
from market_resolver.services.factory import (ResolverComponents,
                                              create_resolver)


def print_json(data: object) -> None:
    print(json.dumps(data, indent=2, default=str))


def cmd_init_db(components: ResolverComponents, _: argparse.Namespace) -> int:
    init_db(components.store.engine)
    print("Tables created")
    return 0


def cmd_run(components: ResolverComponents, _: argparse.Namespace) -> int:
    async def _run():
        try:
            return await components.resolver.run_pass()
        finally:
            await components.close()

    summary = asyncio.run(_run())
    print_json(summary.model_dump(mode="json"))
    return 0


def cmd_schedule(components: ResolverComponents, args: argparse.Namespace) -> int:
    interval = args.interval or components.settings.poll_interval_seconds

    async def _schedule() -> None:
        stop_event = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, stop_event.set)
            except NotImplementedError:
                pass  # not supported on Windows event loops
        try:
            await run_periodically(
                components.resolver,
                interval,
                stop_event,
                run_on_start=not args.no_run_on_start,
            )
        finally:
            await components.close()

    asyncio.run(_schedule())
    return 0


def cmd_verify(components: ResolverComponents, args: argparse.Namespace) -> int:
    try:
        market = components.store.get_market(args.market_id)
    except MarketNotFoundError as e:
        print(str(e), file=sys.stderr)
        return 1
    valid = verify_outcome_hash(market)
    print_json(
        {"market_id": market.id, "outcome_hash": market.outcome_hash, "valid": valid}
    )
    return 0 if valid else 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="resolver", description=__doc__.split("\n")[0])
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create tables").set_defaults(func=cmd_init_db)
    sub.add_parser("run", help="Run one resolution pass").set_defaults(func=cmd_run)

    schedule = sub.add_parser("schedule", help="Run passes on a fixed interval")
    schedule.add_argument("--interval", type=float, help="Seconds between passes")
    schedule.add_argument(
        "--no-run-on-start", action="store_true", help="Wait one interval before the first pass"
    )
    schedule.set_defaults(func=cmd_schedule)

    verify = sub.add_parser("verify", help="Recompute and check a market's outcome hash")
    verify.add_argument("market_id", type=int)
    verify.set_defaults(func=cmd_verify)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = ResolverSettings.from_env()
    if args.database_url:
        settings = settings.model_copy(update={"database_url": args.database_url})
    configure_logging(settings.log_level)
    components = create_resolver(settings)
    return args.func(components, args)


if __name__ == "__main__":
    sys.exit(main())
