#!/usr/bin/env python3
"""
zset_ts Demo
Writes points to a time series in a live Redis server, then runs range,
"last N seconds" and purge queries against it.

Usage:
    python zset_ts_demo.py 1000                         # 1K points (quick test)
    python zset_ts_demo.py 100000 --batch-size 5000     # Custom batch size
    python zset_ts_demo.py 10000 --uri redis://db:6379/1
    python zset_ts_demo.py 10000 --arrow                # Ingest through Arrow record batches
"""

import argparse
import sys
import time
from datetime import datetime, timedelta, timezone

import psutil
import pyarrow as pa

from zset_ts import TimeSeries, Timestamp, TimeValue, ZsetTSError
from zset_ts.config import get_config
from zset_ts.logger import ZsetTSLogger, get_logger


def calculate_optimal_batch_size(total_points: int) -> int:
    """Pick a batch size that keeps each ZADD call reasonably small."""
    if total_points < 10_000:
        return min(1000, total_points)
    elif total_points < 100_000:
        return 5_000
    else:
        return 10_000


def generate_points(batch_size: int, batch_idx: int, start_time: datetime) -> list:
    """One point per second, with a price-like value that varies per batch."""
    batch_start = start_time + timedelta(seconds=batch_idx * batch_size)
    base_price = 100.0 + batch_idx * 10
    return [
        TimeValue.with_timestamp(batch_start + timedelta(seconds=i), base_price + i * 0.01)
        for i in range(batch_size)
    ]


def generate_batch(batch_size: int, batch_idx: int, start_time: datetime) -> pa.RecordBatch:
    """Same data as generate_points(), as an Arrow record batch."""
    batch_start = start_time + timedelta(seconds=batch_idx * batch_size)
    base_price = 100.0 + batch_idx * 10
    schema = pa.schema([
        ('timestamp', pa.timestamp('us', tz='UTC')),
        ('value', pa.float64())
    ])
    return pa.RecordBatch.from_arrays([
        pa.array([batch_start + timedelta(seconds=i) for i in range(batch_size)],
                 type=pa.timestamp('us', tz='UTC')),
        pa.array([base_price + i * 0.01 for i in range(batch_size)], type=pa.float64())
    ], schema=schema)


def get_memory_usage():
    """Get current process memory usage."""
    memory_info = psutil.Process().memory_info()
    return {
        'rss_mb': memory_info.rss / (1024 * 1024),
        'vms_mb': memory_info.vms / (1024 * 1024)
    }


def timed(description: str, func, *args):
    """Run one query, print its size and latency, and return the result."""
    query_start = time.time()
    result = func(*args)
    query_time = (time.time() - query_start) * 1000
    if isinstance(result, pa.RecordBatch):
        size = result.num_rows
    elif isinstance(result, list):
        size = len(result)
    else:
        size = result
    print(f"  {description}: {size:,} in {query_time:.1f}ms")
    return result


def run_queries(series: TimeSeries, start_time: datetime, total_points: int):
    """Run the range query tests."""
    print("\nQUERY TESTS")
    print("-" * 40)

    start = Timestamp.from_datetime(start_time)
    window_end = start + min(600, total_points)

    timed("Range [start, start+10min)", series.get_range, start, window_end)
    timed("From midpoint", series.get_from, start + total_points / 2)
    timed("Last 60s of wall clock", series.get_last, 60)
    timed("All points", series.get_all)
    timed("Range as Arrow batch", series.get_range_batch, start, window_end)

    cutoff = start + total_points / 4
    removed = timed("Purge first quarter", series.purge_before, cutoff)
    remaining = len(series.get_all())
    print(f"  Remaining after purge: {remaining:,} (removed {removed:,})")


def demo(total_points: int, batch_size: int = None, uri: str = None,
         namespace: str = "zset-ts-demo", use_arrow: bool = False,
         run_query_tests: bool = True, keep: bool = False):
    """Main demonstration function."""
    config = get_config()

    if batch_size is None:
        batch_size = calculate_optimal_batch_size(total_points)
    total_batches = (total_points + batch_size - 1) // batch_size

    ZsetTSLogger.setup(log_level=config.logging.level, console_output=True)
    logger = get_logger("Demo")

    print("ZSET_TS DEMO")
    print("=" * 50)
    print(f"Target: {total_points:,} points in {total_batches:,} batches of {batch_size:,}")
    print(f"Server: {uri or config.redis.uri}")
    print(f"Codec: {config.series.codec}, resolution: {config.series.resolution}s")
    print()

    # Fixed start time so repeated runs write the same scores
    start_time = datetime(2024, 1, 1, tzinfo=timezone.utc)

    with TimeSeries(namespace, "prices", uri=uri) as series:
        series.delete()
        print(f"Series key: {series.key}")

        print("\nINGESTION")
        print("-" * 25)
        ingestion_start = time.time()
        total_ingested = 0

        for batch_idx in range(total_batches):
            current_batch_size = min(batch_size, total_points - total_ingested)
            if use_arrow:
                series.add_batch(generate_batch(current_batch_size, batch_idx, start_time))
            else:
                series.add_many(generate_points(current_batch_size, batch_idx, start_time))
            total_ingested += current_batch_size

            if batch_idx % 50 == 0 or batch_idx == total_batches - 1:
                elapsed = time.time() - ingestion_start
                throughput = total_ingested / elapsed if elapsed > 0 else 0
                memory = get_memory_usage()
                print(f"  Batch {batch_idx+1:4d}/{total_batches}: {total_ingested:8,} points "
                      f"| {throughput:8.0f} pts/s | RAM: {memory['rss_mb']:5.0f}MB")

        ingestion_time = time.time() - ingestion_start
        print(f"\nIngested {total_ingested:,} points in {ingestion_time:.2f}s")
        logger.info(f"Ingestion complete: {total_ingested:,} points")

        series.add_now(-1.0)
        print(f"Added one point at the current time ({Timestamp.now()})")

        if run_query_tests:
            run_queries(series, start_time, total_points)

        if not keep:
            series.delete()
            print(f"\nDeleted series {series.key}")

    print("\nDEMO COMPLETED")


def main():
    """Parse arguments and run the demo."""
    parser = argparse.ArgumentParser(
        description="zset_ts demo - time series on a Redis sorted set",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("points", type=int, help="Total number of points to write")
    parser.add_argument("--batch-size", type=int, help="Points per ZADD (auto-calculated if not specified)")
    parser.add_argument("--uri", type=str, help="Redis URI (defaults to the configured one)")
    parser.add_argument("--namespace", type=str, default="zset-ts-demo", help="Series namespace")
    parser.add_argument("--arrow", action="store_true", help="Ingest through Arrow record batches")
    parser.add_argument("--no-queries", action="store_true", help="Skip query tests")
    parser.add_argument("--keep", action="store_true", help="Do not delete the series at the end")

    args = parser.parse_args()

    if args.points <= 0:
        print("Error: Number of points must be positive")
        return 1
    if args.batch_size is not None and args.batch_size <= 0:
        print("Error: Batch size must be positive")
        return 1

    try:
        demo(
            total_points=args.points,
            batch_size=args.batch_size,
            uri=args.uri,
            namespace=args.namespace,
            use_arrow=args.arrow,
            run_query_tests=not args.no_queries,
            keep=args.keep
        )
    except KeyboardInterrupt:
        print("\nDemo interrupted by user")
        return 1
    except ZsetTSError as e:
        print(f"\nDemo failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
