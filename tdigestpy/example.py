"""Feed uniformly random samples into a digest and print its estimates."""

from __future__ import annotations

import argparse
import random
from collections.abc import Sequence

from .digest import TDigest
from .estimates import cdf, quantile

STREAM_SIZE = 1_000_000
COMPRESSION = 500


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--samples", type=int, default=STREAM_SIZE, help="number of samples to add"
    )
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    args = parser.parse_args(argv)
    if args.samples < 10:
        parser.error("--samples must be at least 10")
    return args


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    rng = random.Random(args.seed)

    digest = TDigest(COMPRESSION)
    print(f"compression is {digest.compression:f} capacity is {digest.capacity}")
    seeds = [rng.uniform(0, 10) for _ in range(args.samples)]
    for value in seeds:
        digest.add(value, 1)
    digest.compress()

    for value in seeds[:10]:
        print(f"value {value:f} is at percentile {cdf(digest, value):f}")
    print()
    for percent in range(0, 101, 10):
        print(f"{percent} percentile has value {quantile(digest, percent / 100.0):f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())