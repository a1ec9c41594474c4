"""
Entry point for `python -m slack_sntp`.

Usage:
    python -m slack_sntp [--pool time.google.com] [--max-rtt 1000] [--timeout 10000]
"""

import asyncio
import argparse
import logging
import sys
from datetime import datetime, timezone

from .errors import AllRequestsFailure, ResolutionError
from .sntp_protocol import (
    DEFAULT_MAX_ROUND_TRIP_MS,
    DEFAULT_NTP_POOL,
    DEFAULT_SOURCE_ID,
    DEFAULT_SOURCE_PRIORITY,
    DEFAULT_TIMEOUT_MS,
    TimeSourceConfig,
    current_time_ms,
)
from .time_source import SlackSntpTimeSource

logger = logging.getLogger("SlackSntp")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Slack SNTP - median-of-five network time")
    parser.add_argument("--pool", "-p", default=DEFAULT_NTP_POOL, help="NTP pool hostname")
    parser.add_argument("--max-rtt", type=int, default=DEFAULT_MAX_ROUND_TRIP_MS,
                        help="Maximum allowed round trip (ms)")
    parser.add_argument("--timeout", type=int, default=DEFAULT_TIMEOUT_MS,
                        help="Per-query timeout (ms)")
    parser.add_argument("--id", default=DEFAULT_SOURCE_ID)
    parser.add_argument("--priority", type=int, default=DEFAULT_SOURCE_PRIORITY)
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser.parse_args(argv)


async def run(argv=None):
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    try:
        source = SlackSntpTimeSource(
            config=TimeSourceConfig(id=args.id, priority=args.priority),
            ntp_pool=args.pool,
            max_round_trip_ms=args.max_rtt,
            timeout_ms=args.timeout,
        )
    except ValueError as e:
        print(f"Invalid configuration: {e}")
        return 1
    logger.debug(f"Source {source.config.id} (priority={source.config.priority})")

    try:
        info = await source.request_time()
    except (AllRequestsFailure, ResolutionError) as e:
        print(f"Time request failed: {e}")
        return 1

    network_ms = info.now_ms()
    offset = network_ms - current_time_ms()
    utc = datetime.fromtimestamp(network_ms / 1000, tz=timezone.utc)

    print(f"Pool:    {args.pool}")
    print(f"Time:    {utc.isoformat()}")
    print(f"Offset:  {offset:+d}ms (network - local)")
    return 0


def main():
    try:
        sys.exit(asyncio.run(run()))
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    main()
