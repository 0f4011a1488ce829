"""Query configuration.

The counters recurse once or twice per node on the current path, so long
chains need more than the interpreter's default recursion limit of
1000.  A query raises the limit to at least ``recursion_limit``, or
enough for a path through every node of the graph if that is more,
while it runs and puts the old value back afterwards.
"""
from __future__ import annotations

import sys
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

DEFAULT_RECURSION_LIMIT = 10_000
# frames a counter may hold per node on the current path, plus slack
FRAMES_PER_NODE = 3
FRAME_SLACK = 100


@dataclass(frozen=True, slots=True)
class CountConfig:
    """Knobs for a single counting query.

    recursion_limit: minimum interpreter recursion limit during the query.
    resolver_shortcut: answer revisited nodes from the resolver sets
        (size of the intersection) instead of exact memoized totals.
        Faster, but only exact when every resolving child contributes
        exactly one qualifying path.
    strict_cycles: make both counters raise CycleDetected on a cycle
        that can reach the target instead of counting around it.
    """
    recursion_limit: int = DEFAULT_RECURSION_LIMIT
    resolver_shortcut: bool = False
    strict_cycles: bool = False

    def __post_init__(self) -> None:
        if self.recursion_limit < 100:
            raise ValueError(
                f"recursion_limit must be at least 100, got {self.recursion_limit}"
            )

    def limit_for(self, node_count: int) -> int:
        """Recursion limit for a query over a graph of *node_count* nodes.

        A simple path visits each node at most once, so the deepest
        recursion is bounded by the node count.
        """
        return max(self.recursion_limit, FRAMES_PER_NODE * node_count + FRAME_SLACK)


@contextmanager
def recursion_headroom(limit: int) -> Iterator[None]:
    """Temporarily raise the recursion limit to at least *limit*."""
    previous = sys.getrecursionlimit()
    if limit > previous:
        sys.setrecursionlimit(limit)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)
