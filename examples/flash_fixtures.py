#!/usr/bin/env python
"""Discover fixtures and cycle them through a few solid colors."""
from __future__ import annotations

import argparse
import asyncio
import logging
import os

from ambientble import const
from ambientble.discovery import discover_fixtures
from ambientble.loop import disconnect_all, log_health, run_test_pattern


async def run(args: argparse.Namespace) -> None:
    """Run the test pattern example."""
    fixtures = await discover_fixtures(args.match, settle_time=args.settle)
    if not fixtures:
        print("no fixtures found")
        return

    for fixture in fixtures:
        print(f"fixture {fixture.name} at {fixture.address}")

    try:
        for _ in range(args.cycles):
            await run_test_pattern(fixtures, delay=args.delay)
        if args.off:
            for fixture in fixtures:
                await fixture.power_off()
    finally:
        await disconnect_all(fixtures)
        log_health(fixtures)


def parse_args() -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Flash red, green and blue on every matching fixture."
    )
    parser.add_argument(
        "--match",
        action="append",
        default=None,
        help="Name substring to match (env: AMBIENTBLE_MATCH_NAMES)",
    )
    parser.add_argument(
        "--settle",
        type=float,
        default=const.DEFAULT_SETTLE_TIME,
        help="Seconds to scan before connecting",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=const.DEFAULT_TEST_PATTERN_DELAY,
        help="Seconds to hold each color",
    )
    parser.add_argument("--cycles", type=int, default=3, help="Pattern repetitions")
    parser.add_argument(
        "--off",
        action="store_true",
        help="Switch the fixtures off afterwards",
    )
    args = parser.parse_args()
    if not args.match:
        env_names = os.environ.get("AMBIENTBLE_MATCH_NAMES")
        args.match = (
            [name.strip() for name in env_names.split(",") if name.strip()]
            if env_names
            else list(const.DEFAULT_MATCH_NAMES)
        )
    return args


def main() -> None:
    """Entry point."""
    logging.basicConfig(level=logging.INFO)
    args = parse_args()
    asyncio.run(run(args))


if __name__ == "__main__":
    main()
