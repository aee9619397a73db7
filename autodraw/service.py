from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional

from .client import HttpDrawClient
from .config import load_config
from .scheduler import AutoDrawScheduler
from .types import StopReason


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )


async def run(args: argparse.Namespace) -> int:
    settings = load_config(args.env_file)
    configure_logging(args.verbose)
    logger = logging.getLogger("bingo.autodraw")

    if args.interval is not None:
        settings = settings.copy(draw_interval_seconds=args.interval)

    client = HttpDrawClient(settings)
    scheduler = AutoDrawScheduler(settings, client, logger=logger)

    if args.once:
        outcome = await scheduler.run_once()
        if outcome:
            logger.info("Drew %s-%s for round %s", outcome.letter, outcome.number, outcome.round_id)
        return 0

    summary = await scheduler.run_forever()
    return 1 if summary.reason is StopReason.ERROR else 0


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Bingo auto-draw driver")
    parser.add_argument("--env-file", type=str, default=None, help="Path to .env file")
    parser.add_argument("--once", action="store_true", help="Draw a single number and exit.")
    parser.add_argument(
        "--interval", type=float, default=None, help="Seconds between draws (default 3)."
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging (default INFO)."
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    try:
        exit_code = asyncio.run(run(args))
    except KeyboardInterrupt:
        print("Auto-draw stopped by user.")
        return
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
