"""Unit tests for the Ring storage."""

import pytest

from flexihash.errors import TargetNotFoundError
from flexihash.ring import Ring


def _entries(ring: Ring) -> list[tuple[int, str]]:
    return list(zip(ring._positions, ring._targets))


class TestRingInsert:
    def test_empty(self):
        ring = Ring()
        assert len(ring) == 0
        assert not ring
        assert ring.target_count() == 0
        assert list(ring.walk(123)) == []

    def test_kept_sorted(self):
        ring = Ring()
        ring.add_target("a", [30, 10])
        ring.add_target("b", [20, 40, 5])
        assert _entries(ring) == [
            (5, "b"),
            (10, "a"),
            (20, "b"),
            (30, "a"),
            (40, "b"),
        ]

    def test_collision_first_owner_wins(self):
        ring = Ring()
        ring.add_target("a", [10, 20])
        dropped = ring.add_target("b", [20, 30])
        assert dropped == [20]
        assert ring.owner(20) == "a"
        assert ring.positions_of("b") == [30]
        assert len(ring) == 3

    def test_same_target_duplicate_position_recorded_once(self):
        ring = Ring()
        dropped = ring.add_target("a", [10, 10, 20])
        assert dropped == []
        assert ring.positions_of("a") == [10, 20]
        assert len(ring) == 2

    def test_fully_clobbered_target_still_registered(self):
        ring = Ring()
        ring.add_target("a", [10])
        assert ring.add_target("b", [10]) == [10]
        assert ring.has_target("b")
        assert ring.positions_of("b") == []

    def test_target_names_in_insertion_order(self):
        ring = Ring()
        ring.add_target("zeta", [1])
        ring.add_target("alpha", [2])
        assert ring.target_names() == ["zeta", "alpha"]

    def test_owner_missing(self):
        ring = Ring()
        ring.add_target("a", [10])
        assert ring.owner(11) is None
        assert ring.owner(0) is None


class TestRingRemove:
    def test_removes_only_owned(self):
        ring = Ring()
        ring.add_target("a", [10, 30])
        ring.add_target("b", [20, 40])
        assert sorted(ring.remove_target("a")) == [10, 30]
        assert _entries(ring) == [(20, "b"), (40, "b")]
        assert not ring.has_target("a")

    def test_remove_clobbering_target_keeps_original_owner(self):
        ring = Ring()
        ring.add_target("a", [10])
        ring.add_target("b", [10, 20])
        ring.remove_target("b")
        assert _entries(ring) == [(10, "a")]

    def test_missing_raises(self):
        ring = Ring()
        ring.add_target("a", [10])
        with pytest.raises(TargetNotFoundError, match="'nope' does not exist"):
            ring.remove_target("nope")
        assert _entries(ring) == [(10, "a")]

    def test_positions_of_missing_raises(self):
        with pytest.raises(TargetNotFoundError):
            Ring().positions_of("nope")


class TestRingSuccessor:
    @pytest.fixture()
    def ring(self):
        ring = Ring()
        ring.add_target("t1", [10])
        ring.add_target("t2", [20])
        ring.add_target("t3", [30])
        return ring

    def test_exact_match(self, ring):
        assert ring.successor(20) == 1

    def test_between(self, ring):
        assert ring.successor(15) == 1

    def test_before_first(self, ring):
        assert ring.successor(0) == 0

    def test_wraps_past_last(self, ring):
        assert ring.successor(31) == 0

    def test_walk_wraps_once(self, ring):
        assert list(ring.walk(25)) == ["t3", "t1", "t2"]

    def test_walk_from_end(self, ring):
        assert list(ring.walk(99)) == ["t1", "t2", "t3"]
