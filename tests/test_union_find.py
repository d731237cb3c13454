# tests/test_union_find.py
import pytest

from dcsim_core.topology import DisjointSet


class TestDisjointSet:

    def test_initial_singletons(self):
        ds = DisjointSet(4)
        assert len(ds) == 4
        assert ds.groups() == [[0], [1], [2], [3]]

    def test_union_and_connected(self):
        ds = DisjointSet(5)
        assert ds.union(0, 3) is True
        assert ds.union(3, 4) is True
        assert ds.union(0, 4) is False
        assert ds.connected(0, 4)
        assert not ds.connected(1, 2)
        assert ds.groups() == [[0, 3, 4], [1], [2]]

    def test_groups_ordered_by_smallest_member(self):
        ds = DisjointSet(6)
        ds.union(5, 2)
        ds.union(4, 1)
        assert ds.groups() == [[0], [1, 4], [2, 5], [3]]

    def test_long_chain_does_not_recurse(self):
        n = 200_000
        ds = DisjointSet(n)
        for i in range(n - 1):
            ds.union(i + 1, i)
        assert ds.find(n - 1) == ds.find(0)
        assert len(ds.groups()) == 1

    def test_empty(self):
        assert DisjointSet(0).groups() == []

    def test_negative_size_rejected(self):
        with pytest.raises(ValueError):
            DisjointSet(-1)
