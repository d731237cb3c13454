# src/dcsim_core/topology/union_find.py
"""
Disjoint-set forest over densely numbered items (0..n-1).

Both operations are iterative so large schematics cannot exhaust the call stack.
"""
import logging
from typing import Dict, List

logger = logging.getLogger(__name__)


class DisjointSet:
    """Flat parent-index disjoint set with union by size and full path compression."""

    def __init__(self, size: int):
        if size < 0:
            raise ValueError("DisjointSet size must be non-negative.")
        self._parent: List[int] = list(range(size))
        self._size: List[int] = [1] * size

    def __len__(self) -> int:
        return len(self._parent)

    def find(self, item: int) -> int:
        parent = self._parent
        root = item
        while parent[root] != root:
            root = parent[root]
        # Second pass: point every node on the path directly at the root.
        while parent[item] != root:
            parent[item], item = root, parent[item]
        return root

    def union(self, a: int, b: int) -> bool:
        """Merges the sets of `a` and `b`. Returns False if they were already joined."""
        root_a, root_b = self.find(a), self.find(b)
        if root_a == root_b:
            return False
        if self._size[root_a] < self._size[root_b]:
            root_a, root_b = root_b, root_a
        self._parent[root_b] = root_a
        self._size[root_a] += self._size[root_b]
        return True

    def connected(self, a: int, b: int) -> bool:
        return self.find(a) == self.find(b)

    def groups(self) -> List[List[int]]:
        """
        Returns the equivalence classes. Each class is sorted ascending, and classes are
        ordered by their smallest member.
        """
        by_root: Dict[int, List[int]] = {}
        for item in range(len(self._parent)):
            by_root.setdefault(self.find(item), []).append(item)
        return list(by_root.values())
