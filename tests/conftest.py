import pytest

from flexihash.ring import Flexihash


class MappingHasher:
    """Hasher returning fixed positions, keyed by the decoded input."""

    def __init__(self, positions: dict[str, int]):
        self.positions = positions
        self.calls: list[bytes] = []

    def hash(self, data: bytes) -> int:
        self.calls.append(data)
        return self.positions[data.decode("utf-8")]


@pytest.fixture()
def mapping_hasher():
    return MappingHasher


@pytest.fixture()
def mapping_ring():
    """Build a one-replica ring with targets at hand-picked positions.

    Usage: ``mapping_ring({"t1": 10, "t2": 20}, resource=15)``; the resource
    name ``"resource"`` hashes to *resource*.
    """

    def _make(targets: dict[str, int], resource: int) -> Flexihash:
        positions = {f"{t}0": p for t, p in targets.items()}
        positions["resource"] = resource
        fh = Flexihash(hasher=MappingHasher(positions), replicas=1)
        fh.add_targets(targets)
        return fh

    return _make
