"""Memoized count of simple paths to a fixed target.

count(v) = 1                                      if v is the target
         = sum(count(s) for s in successors(v))   otherwise

On a DAG every node is expanded once and later visits read the cache,
which makes the count O(V + E) instead of exponential.  Cycles need
care, because a memoized count cannot know which nodes an enclosing
path already used:

  * nodes that cannot reach the target count 0 without being
    expanded, so cycles in dead regions never matter;
  * self-loops are skipped, since a simple path never takes one;
  * an edge back onto the active path contributes 0, and every node
    whose subtree ran into its own or a shallower GRAY node is left
    out of the cache (see cycle_detector).

With strict=True the counter refuses cycles instead: the first back
edge in the region that can reach the target raises CycleDetected.
The target is never expanded, so cycles through it are harmless in
both modes.
"""
from __future__ import annotations

from reachcount.graph.adjacency import Graph, NodeId
from reachcount.graph.cycle_detector import CLEAN, ActivePath


class PathCountCache:
    """Per-node simple-path counts toward one fixed target.

    The counts are meaningless for any other target, so the cache
    records the target it was built for and refuses to be reused.
    """

    __slots__ = ("target", "counts", "_live")

    def __init__(self, target: NodeId) -> None:
        self.target = target
        self.counts: dict[NodeId, int] = {}
        self._live: frozenset[NodeId] | None = None

    def live(self, graph: Graph) -> frozenset[NodeId]:
        """Nodes that can reach the target, computed on first use."""
        if self._live is None:
            self._live = graph.ancestors(self.target)
        return self._live

    def get(self, node: NodeId) -> int | None:
        return self.counts.get(node)

    def __contains__(self, node: object) -> bool:
        return node in self.counts

    def __len__(self) -> int:
        return len(self.counts)


class PathCounter:
    """Recursive counter bound to one graph, cache and active path.

    The constrained counter shares its ActivePath with one of these so
    that unconstrained tails respect the nodes its path already holds.
    """

    __slots__ = ("graph", "target", "cache", "active", "strict", "_live")

    def __init__(
        self,
        graph: Graph,
        cache: PathCountCache,
        active: ActivePath | None = None,
        *,
        strict: bool = False,
    ) -> None:
        self.graph = graph
        self.target = cache.target
        self.cache = cache
        self.active = active if active is not None else ActivePath()
        self.strict = strict
        self._live = cache.live(graph)

    def count(self, node: NodeId) -> int:
        self.graph.check_node(node)
        total, _ = self.walk(node)
        return total

    def walk(self, node: NodeId) -> tuple[int, int]:
        """(path count, shallowest GRAY depth reached or CLEAN)."""
        if node == self.target:
            self.cache.counts[node] = 1
            return 1, CLEAN
        counts = self.cache.counts
        hit = counts.get(node)
        if hit is not None:
            return hit, CLEAN
        if node not in self._live:
            counts[node] = 0
            return 0, CLEAN

        active = self.active
        total = 0
        low = CLEAN
        with active.entered(node) as depth:
            for succ in self.graph.successors(node):
                if succ == node:
                    continue
                if succ in active:
                    if self.strict:
                        raise active.cycle_error(self.graph, succ)
                    low = min(low, active.depth(succ))
                    continue
                n, sub_low = self.walk(succ)
                total += n
                low = min(low, sub_low)
        if low > depth:
            counts[node] = total
            return total, CLEAN
        return total, low


def count_paths(
    graph: Graph,
    node: NodeId,
    target: NodeId,
    cache: PathCountCache | None = None,
    *,
    strict: bool = False,
) -> int:
    """Number of simple paths from *node* to *target*.

    Fills *cache* with the count of every node whose count does not
    depend on the path leading to it.  With strict=True, raises
    CycleDetected if a cycle can reach the target.
    """
    if cache is None:
        cache = PathCountCache(target)
    elif cache.target != target:
        raise ValueError(
            f"cache was built for target {graph.label(cache.target)!r}, "
            f"not {graph.label(target)!r}"
        )
    return PathCounter(graph, cache, strict=strict).count(node)
