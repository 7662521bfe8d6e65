"""Consistent hashing ring and the Flexihash engine that places targets on it."""

import logging
import os
from bisect import bisect_left
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from .errors import EmptyRingError, InvalidArgumentError, TargetNotFoundError
from .hashers import HashAlgorithm, Hasher, get_hasher

log = logging.getLogger("flexihash")


def getenv_int(key: str, default: int) -> int:
    val = os.environ.get(key)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        return default


def _env_replicas(default: int = 64) -> int:
    replicas = getenv_int("FLEXIHASH_REPLICAS", default)
    if replicas < 1:
        log.warning("ignoring FLEXIHASH_REPLICAS=%d; using %d", replicas, default)
        return default
    return replicas


def _env_hasher(default: str = HashAlgorithm.crc32.value) -> str:
    name = os.environ.get("FLEXIHASH_HASHER", default).lower()
    if name not in {a.value for a in HashAlgorithm}:
        log.warning("ignoring unknown FLEXIHASH_HASHER=%r; using %s", name, default)
        return default
    return name


# ---- Placement defaults ----
DEFAULT_REPLICAS = _env_replicas()  # positions per unit of weight
DEFAULT_HASHER = _env_hasher()


@dataclass
class Ring:
    """Sorted (position -> target) entries plus a target -> positions index.

    ``_positions`` and ``_targets`` are parallel lists kept in ascending
    position order, so successor queries are a single ``bisect``.
    """

    _positions: list[int] = field(default_factory=list)
    _targets: list[str] = field(default_factory=list)
    _owned: dict[str, list[int]] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self._positions)

    def __bool__(self) -> bool:
        return bool(self._positions)

    def has_target(self, target: str) -> bool:
        return target in self._owned

    def target_names(self) -> list[str]:
        """Targets in the order they were added."""
        return list(self._owned)

    def target_count(self) -> int:
        return len(self._owned)

    def owner(self, position: int) -> str | None:
        idx = bisect_left(self._positions, position)
        if idx < len(self._positions) and self._positions[idx] == position:
            return self._targets[idx]
        return None

    def positions_of(self, target: str) -> list[int]:
        try:
            return sorted(self._owned[target])
        except KeyError as e:
            raise TargetNotFoundError(target) from e

    def add_target(self, target: str, positions: Iterable[int]) -> list[int]:
        """Register *target* and place it at each of *positions*.

        A position held by another target stays with that target; the
        dropped positions are returned.
        """
        owned = self._owned.setdefault(target, [])
        dropped: list[int] = []
        for position in positions:
            idx = bisect_left(self._positions, position)
            if idx < len(self._positions) and self._positions[idx] == position:
                if self._targets[idx] != target:
                    dropped.append(position)
                continue
            self._positions.insert(idx, position)
            self._targets.insert(idx, target)
            owned.append(position)
        return dropped

    def remove_target(self, target: str) -> list[int]:
        try:
            owned = self._owned.pop(target)
        except KeyError as e:
            raise TargetNotFoundError(target) from e
        for position in owned:
            idx = bisect_left(self._positions, position)
            del self._positions[idx]
            del self._targets[idx]
        return owned

    def successor(self, position: int) -> int:
        """Index of the first entry at or after *position*, wrapping to 0."""
        idx = bisect_left(self._positions, position)
        if idx == len(self._positions):
            return 0
        return idx

    def walk(self, position: int) -> Iterator[str]:
        """Yield entry targets clockwise from *position*, visiting each entry once."""
        if not self._positions:
            return
        start = self.successor(position)
        n = len(self._targets)
        for i in range(n):
            yield self._targets[(start + i) % n]


def _validate_count(value, what: str, minimum: int) -> int:
    # bool is an int subclass but never a meaningful count
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{what} must be an integer, got {value!r}")
    if value < minimum:
        raise InvalidArgumentError(f"{what} must be >= {minimum}, got {value}")
    return value


def _validate_name(value, what: str) -> str:
    if not isinstance(value, str):
        raise InvalidArgumentError(f"{what} must be a string, got {value!r}")
    return value


class Flexihash:
    """Consistent hashing of resources onto a changing set of targets.

    Each target occupies ``replicas * weight`` positions on the ring, at
    ``hasher.hash(f"{target}{i}")`` for each replica index ``i``. A resource
    belongs to the first target found clockwise from its own hash.
    """

    def __init__(self, hasher: Hasher | None = None, replicas: int = DEFAULT_REPLICAS):
        self.replicas = _validate_count(replicas, "replicas", 1)
        self.hasher = hasher if hasher is not None else get_hasher(DEFAULT_HASHER)
        self._ring = Ring()

    def _hash(self, value: str) -> int:
        return self.hasher.hash(value.encode("utf-8"))

    # ---- target management ----

    def add_target(self, target: str, weight: int = 1) -> "Flexihash":
        _validate_name(target, "target")
        _validate_count(weight, "weight", 1)
        if self._ring.has_target(target):
            log.debug("target %r already present; ignoring", target)
            return self

        positions = [self._hash(f"{target}{i}") for i in range(self.replicas * weight)]
        dropped = self._ring.add_target(target, positions)
        for position in dropped:
            log.warning(
                "replica of %r dropped: position %d owned by %r",
                target,
                position,
                self._ring.owner(position),
            )
        log.debug(
            "added target %r (%d/%d replicas)",
            target,
            len(positions) - len(dropped),
            len(positions),
        )
        return self

    def add_targets(self, targets: Iterable[str]) -> "Flexihash":
        # materialize and check up front so a bad member leaves the ring untouched
        targets = list(targets)
        for target in targets:
            _validate_name(target, "target")
        for target in targets:
            self.add_target(target)
        return self

    def remove_target(self, target: str) -> "Flexihash":
        _validate_name(target, "target")
        removed = self._ring.remove_target(target)
        log.debug("removed target %r (%d replicas)", target, len(removed))
        return self

    def get_all_targets(self) -> list[str]:
        return sorted(self._ring.target_names())

    def positions_of(self, target: str) -> list[int]:
        return self._ring.positions_of(target)

    # ---- lookups ----

    def lookup(self, resource: str) -> str:
        targets = self.lookup_list(resource, 1)
        if not targets:
            raise EmptyRingError("no targets available")
        return targets[0]

    def lookup_list(self, resource: str, count: int) -> list[str]:
        """
        Up to *count* distinct targets for *resource*, in ring order.

        The first entry is what ``lookup`` returns; the rest are fallbacks
        for when it is unavailable. Returns fewer than *count* when the ring
        holds fewer distinct targets.
        """
        _validate_name(resource, "resource")
        _validate_count(count, "count", 0)
        if count == 0 or not self._ring:
            return []

        wanted = min(count, self._ring.target_count())
        results: list[str] = []
        seen: set[str] = set()
        for target in self._ring.walk(self._hash(resource)):
            if target in seen:
                continue
            seen.add(target)
            results.append(target)
            if len(results) == wanted:
                break
        return results

    # ---- introspection ----

    def __len__(self) -> int:
        return self._ring.target_count()

    def __contains__(self, target: object) -> bool:
        return isinstance(target, str) and self._ring.has_target(target)

    def __str__(self) -> str:
        return f"Flexihash({self._ring.target_names()!r})"

    def __repr__(self) -> str:
        return (
            f"Flexihash(hasher={self.hasher!r}, replicas={self.replicas}, "
            f"targets={self._ring.target_names()!r})"
        )
