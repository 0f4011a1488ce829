"""Cycle guard for the recursive path counters.

Classic DFS colours nodes WHITE (unvisited), GRAY (on the current DFS
path) and BLACK (finished).  The path counters memoize finished nodes
in their own caches, so the only colour they need from us is GRAY: the
ActivePath below is the set of nodes currently on the recursion stack,
each tagged with its depth so a back edge can be turned into the cycle
it closes.

An edge to a GRAY node is a back edge.  It never lies on a simple
path, so the counters treat it as a dead end.  What it does tell them
is that the node they are finishing may sit on a cycle, in which case
its count depends on which nodes the enclosing path already uses and
must not be memoized.  Each counter call therefore also reports the
shallowest GRAY depth any back edge below it reached (``CLEAN`` if
none): a node whose subtree reached no deeper than its own depth is
safe to cache.  This is the lowlink idea from Tarjan's SCC algorithm.
"""
from __future__ import annotations

import sys
from contextlib import contextmanager
from typing import Iterator

from reachcount.graph.adjacency import Graph, NodeId

CLEAN = sys.maxsize


class CycleDetected(Exception):
    """Raised when a strict count meets a cycle that can reach the target."""

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = cycle
        super().__init__(f"Cycle detected: {' -> '.join(cycle)}")


class ActivePath:
    """Nodes on the current DFS path (the GRAY set), with their depths."""

    __slots__ = ("_stack",)

    def __init__(self) -> None:
        # insertion order is path order; values are depths
        self._stack: dict[NodeId, int] = {}

    @contextmanager
    def entered(self, node: NodeId) -> Iterator[int]:
        """Mark *node* GRAY for the duration of the block; yields its depth."""
        depth = len(self._stack)
        self._stack[node] = depth
        try:
            yield depth
        finally:
            del self._stack[node]

    def depth(self, node: NodeId) -> int:
        return self._stack[node]

    def __contains__(self, node: object) -> bool:
        return node in self._stack

    def __len__(self) -> int:
        return len(self._stack)

    def cycle_to(self, node: NodeId) -> list[NodeId]:
        """The cycle closed by a back edge from the top of the path to *node*.

        Returns [node, ..., top, node].  *node* must be on the path.
        """
        path = list(self._stack)
        return path[self._stack[node]:] + [node]

    def cycle_error(self, graph: Graph, node: NodeId) -> CycleDetected:
        return CycleDetected([graph.label(n) for n in self.cycle_to(node)])
