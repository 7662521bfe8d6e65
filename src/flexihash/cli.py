"""Command line lookups: ``flexihash --targets a,b,c resource ...``."""

import argparse
import logging
import os
import sys

from .errors import EmptyRingError, FlexihashError
from .hashers import HashAlgorithm, get_hasher
from .ring import DEFAULT_HASHER, DEFAULT_REPLICAS, Flexihash

log = logging.getLogger("flexihash")

# (flag, env_var, type, default, help)
_CLI_CONFIG = [
    (
        "--targets",
        "FLEXIHASH_TARGETS",
        str,
        "",
        "Comma separated target names",
    ),
    (
        "--replicas",
        "FLEXIHASH_REPLICAS",
        int,
        DEFAULT_REPLICAS,
        "Ring positions per target",
    ),
    (
        "--hasher",
        "FLEXIHASH_HASHER",
        str,
        DEFAULT_HASHER,
        f"Hash algorithm ({', '.join(a.value for a in HashAlgorithm)})",
    ),
    (
        "--count",
        "FLEXIHASH_COUNT",
        int,
        1,
        "Targets to print per resource",
    ),
]


def parse_targets(raw: str) -> list[str]:
    return [t.strip() for t in raw.split(",") if t.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="flexihash: map resources onto targets with consistent hashing"
    )
    for flag, env_var, typ, default, helptext in _CLI_CONFIG:
        parser.add_argument(
            flag, type=typ, default=default, help=f"{helptext} [env {env_var}]"
        )
    parser.add_argument("resources", nargs="+", help="Resource names to look up")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log ring changes"
    )
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse *argv*; an env var that is set overrides its flag."""
    args = build_parser().parse_args(argv)
    for flag, env_var, typ, *_ in _CLI_CONFIG:
        env_val = os.environ.get(env_var)
        if env_val is None:
            continue
        try:
            value = typ(env_val)
        except ValueError:
            log.warning("ignoring invalid %s=%r", env_var, env_val)
            continue
        setattr(args, flag.lstrip("-").replace("-", "_"), value)
    return args


def lookup_lines(fh: Flexihash, resources: list[str], count: int) -> list[str]:
    """Return one ``resource target[,target...]`` line per resource."""
    lines = []
    for resource in resources:
        targets = fh.lookup_list(resource, count)
        if count and not targets:
            raise EmptyRingError("no targets available (set --targets)")
        lines.append(f"{resource} {','.join(targets)}")
    return lines


def run(args: argparse.Namespace) -> list[str]:
    fh = Flexihash(hasher=get_hasher(args.hasher), replicas=args.replicas)
    fh.add_targets(parse_targets(args.targets))
    if not fh:
        raise EmptyRingError("no targets available (set --targets)")
    return lookup_lines(fh, args.resources, args.count)


def cli(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        lines = run(args)
    except FlexihashError as e:
        log.error("%s", e)
        return 1
    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(cli())
