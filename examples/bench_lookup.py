"""
Lookup benchmark: build a ring of N weighted targets, then time repeated
add_target, lookup and lookup_list calls and report latency statistics.

Usage:
    uv run python examples/bench_lookup.py [--targets 10] [--weight 10] \
        [--rounds 10000] [--count 2] [--hasher crc32]
"""

import argparse
import statistics
import time
from collections.abc import Callable

from flexihash.hashers import get_hasher
from flexihash.ring import Flexihash


def timed(fn: Callable[[int], object], rounds: int) -> list[float]:
    latencies: list[float] = []
    for i in range(rounds):
        t0 = time.perf_counter()
        fn(i)
        latencies.append(time.perf_counter() - t0)
    return latencies


def report(name: str, latencies: list[float]) -> None:
    mean = statistics.mean(latencies)
    p50 = statistics.median(latencies)
    stdev = statistics.stdev(latencies) if len(latencies) > 1 else 0.0
    print(f"  {name:<12}: mean {mean * 1e6:8.2f} us  p50 {p50 * 1e6:8.2f} us  "
          f"stdev {stdev * 1e6:8.2f} us  ({len(latencies)} ops)")


def build(hasher: str, targets: int, weight: int) -> Flexihash:
    fh = Flexihash(hasher=get_hasher(hasher))
    for n in range(targets):
        fh.add_target(f"olive{n}", weight)
    return fh


def run(targets: int, weight: int, rounds: int, count: int, hasher: str) -> None:
    print(f"bench_lookup: {targets} targets x weight {weight}, {rounds} rounds ({hasher})")
    print()

    report("new", timed(lambda _: Flexihash(hasher=get_hasher(hasher)), rounds))
    report("build ring", timed(lambda _: build(hasher, targets, weight), max(1, rounds // 1000)))

    fh = build(hasher, targets, weight)
    report("lookup", timed(lambda i: fh.lookup(f"foobar{i}"), rounds))
    report("lookup_list", timed(lambda i: fh.lookup_list(f"foobar{i}", count), rounds))
    report("overask", timed(lambda i: fh.lookup_list(f"foobar{i}", targets + 1), rounds))


def main() -> None:
    parser = argparse.ArgumentParser(description="flexihash lookup benchmark")
    parser.add_argument("--targets", type=int, default=10)
    parser.add_argument("--weight", type=int, default=10)
    parser.add_argument("--rounds", type=int, default=10000)
    parser.add_argument("--count", type=int, default=2,
                        help="Targets requested per lookup_list call")
    parser.add_argument("--hasher", default="crc32")
    args = parser.parse_args()
    run(args.targets, args.weight, args.rounds, args.count, args.hasher)


if __name__ == "__main__":
    main()
