#!/usr/bin/env python3
"""
Check the pooled data source's max_active bound: N threads each hold a
connection for a while.

With --max-active 2 --concurrent 5 --hold 1 --max-wait-ms 200:
  Expected: 2x ok, 3x timeout (no connection within max_wait_ms).

Usage:
  python scripts/pool_concurrency.py [--concurrent N] [--max-active N] [--hold SEC] [--max-wait-ms MS]
  Or set env: DB_URL, CONCURRENT
"""

import argparse
import os
import time
from concurrent.futures import ThreadPoolExecutor, as_completed

from dbwiring.core.errors import DataSourceConnectionError
from dbwiring.core.pool import DataSource, create_data_source, execute
from dbwiring.models import DEFAULT_URL, ConnectionConfig


def hold_connection(data_source: DataSource, hold: float, index: int) -> tuple[int, str]:
    """Check out one connection, run SELECT 1, keep it for *hold* seconds."""
    try:
        with data_source.connection() as conn:
            execute(conn, "SELECT 1").close()
            time.sleep(hold)
        return (index, "ok")
    except DataSourceConnectionError:
        return (index, "timeout")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Check pooled data source limits with N parallel checkouts."
    )
    parser.add_argument("--url", default=os.environ.get("DB_URL", DEFAULT_URL))
    parser.add_argument(
        "--concurrent",
        type=int,
        default=int(os.environ.get("CONCURRENT", "5")),
        help="Number of concurrent checkouts (default 5)",
    )
    parser.add_argument("--max-active", type=int, default=2)
    parser.add_argument("--max-wait-ms", type=int, default=200)
    parser.add_argument("--hold", type=float, default=1.0, help="Seconds each thread holds its connection")
    args = parser.parse_args()

    config = ConnectionConfig(
        url=args.url,
        max_active=args.max_active,
        max_wait_ms=args.max_wait_ms,
        initial_size=min(1, args.max_active),
    )
    print(f"Testing {args.concurrent} concurrent checkouts against max_active={args.max_active}")
    print("---")

    results: list[tuple[int, str]] = []
    with create_data_source(config) as data_source:
        with ThreadPoolExecutor(max_workers=args.concurrent) as executor:
            futures = [
                executor.submit(hold_connection, data_source, args.hold, i)
                for i in range(1, args.concurrent + 1)
            ]
            for fut in as_completed(futures):
                idx, outcome = fut.result()
                results.append((idx, outcome))
                print(f"{idx} {outcome}")
        stats = data_source.stats()

    print("---")
    ok = sum(1 for _, o in results if o == "ok")
    print(f"Done. ok={ok} timeout={len(results) - ok} connects={stats['connects']}")


if __name__ == "__main__":
    main()
