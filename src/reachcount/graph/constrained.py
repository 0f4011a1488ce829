"""Count target-reaching simple paths that visit every requirement.

The search is a DFS from the start node carrying two pieces of state:

  outstanding -- requirements the current path has not visited yet.
                 Entering a node removes it; leaving puts it back.
  active      -- nodes on the current path.  An edge back onto the
                 path would repeat a node, so it contributes 0.

Three oracles keep the search small:

  * once nothing is outstanding, every onward path qualifies, so the
    unconstrained count for the node is the answer;
  * while something is outstanding, a node outside the waypoint
    closure cannot reach any requirement before the target: 0;
  * a node explored before is answered from the ResolverCache.

The ResolverCache records, per node, which successors led to at least
one qualifying path while each requirement was still outstanding
("resolvers").  The resolver shortcut answers a revisit with the size
of the intersection of the resolver sets of the outstanding
requirements.  That counts resolving children, not paths, so it
undercounts whenever one child carries several qualifying paths; it
is only used when CountConfig.resolver_shortcut asks for it.  By
default a revisit is answered from the exact total memoized for
(node, outstanding), and, as in the unconstrained counter, only nodes
whose subtree never ran back into their own or a shallower position
on the path are memoized.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import AbstractSet, Iterable, Iterator

from reachcount.graph.adjacency import Graph, NodeId
from reachcount.graph.closure import compute_closure
from reachcount.graph.cycle_detector import CLEAN, ActivePath
from reachcount.graph.path_count import PathCountCache, PathCounter

log = logging.getLogger(__name__)


class Outstanding:
    """Working set of requirements not yet visited by the current path."""

    __slots__ = ("_items",)

    def __init__(self, requirements: Iterable[NodeId]) -> None:
        self._items: set[NodeId] = set(requirements)

    @contextmanager
    def visiting(self, node: NodeId) -> Iterator[bool]:
        """Mark *node* visited for the block; yields whether it was outstanding.

        The removal is undone on every exit, early returns included.
        """
        removed = node in self._items
        self._items.discard(node)
        try:
            yield removed
        finally:
            if removed:
                self._items.add(node)

    def snapshot(self) -> frozenset[NodeId]:
        return frozenset(self._items)

    def __iter__(self) -> Iterator[NodeId]:
        return iter(self._items)

    def __contains__(self, node: object) -> bool:
        return node in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)


class ResolverCache:
    """Per-node record of which successors resolved which requirement.

    resolvers: node -> requirement -> successors that led to a
        qualifying path while that requirement was outstanding.
    totals: (node, outstanding) -> exact qualifying path count.
    """

    __slots__ = ("resolvers", "totals")

    def __init__(self) -> None:
        self.resolvers: dict[NodeId, dict[NodeId, set[NodeId]]] = {}
        self.totals: dict[tuple[NodeId, frozenset[NodeId]], int] = {}

    def record(self, node: NodeId, outstanding: Iterable[NodeId], child: NodeId) -> None:
        """*child* led to a qualifying path while *outstanding* was unmet."""
        by_req = self.resolvers.setdefault(node, {})
        for req in outstanding:
            by_req.setdefault(req, set()).add(child)

    def explored(self, node: NodeId) -> bool:
        return node in self.resolvers

    def resolving_children(
        self, node: NodeId, outstanding: Iterable[NodeId]
    ) -> set[NodeId]:
        """Children recorded as resolvers for every requirement in *outstanding*."""
        by_req = self.resolvers.get(node, {})
        happy: set[NodeId] | None = None
        for req in outstanding:
            children = by_req.get(req)
            if not children:
                return set()
            happy = set(children) if happy is None else happy & children
            if not happy:
                return set()
        return happy or set()

    def __len__(self) -> int:
        return len(self.resolvers)


class ConstrainedPathCounter:
    """One constrained-count query: start -> target covering requirements.

    Usage:
        counter = ConstrainedPathCounter(graph, target, requirements)
        n = counter.count(start)

    The counter owns its caches; build a new one per query.
    """

    __slots__ = (
        "_graph", "_target", "_requirements", "_shortcut",
        "path_counts", "resolvers", "closure",
        "_outstanding", "_active", "_paths",
    )

    def __init__(
        self,
        graph: Graph,
        target: NodeId,
        requirements: AbstractSet[NodeId],
        *,
        shortcut: bool = False,
        strict: bool = False,
    ) -> None:
        self._graph = graph
        self._target = target
        self._requirements = frozenset(requirements)
        self._shortcut = shortcut
        self.path_counts = PathCountCache(target)
        self.resolvers = ResolverCache()
        self.closure: frozenset[NodeId] = frozenset()
        self._outstanding = Outstanding(self._requirements)
        self._active = ActivePath()
        self._paths = PathCounter(graph, self.path_counts, self._active, strict=strict)

    def count(self, start: NodeId) -> int:
        """Count qualifying paths from *start*.

        Seeds the unconstrained cache and the closure, then runs the
        search.  With strict=True the seeding count raises CycleDetected
        for a cycle that can reach the target.
        """
        g = self._graph
        seeded = self._paths.count(start)
        self.closure = compute_closure(g, start, self._target, self._requirements)
        log.debug(
            "constrained search from %s: %d path(s) unconstrained, "
            "%d requirement(s), closure of %d node(s)",
            g.label(start), seeded, len(self._requirements), len(self.closure),
        )
        total, _ = self._visit(start)
        log.debug(
            "constrained search done: %d path(s), %d resolver entr(ies), %d total(s)",
            total, len(self.resolvers), len(self.resolvers.totals),
        )
        return total

    def _visit(self, node: NodeId) -> tuple[int, int]:
        with self._outstanding.visiting(node):
            return self._visit_inner(node)

    def _visit_inner(self, node: NodeId) -> tuple[int, int]:
        outstanding = self._outstanding
        if node == self._target:
            return (0 if outstanding else 1), CLEAN
        if not outstanding:
            return self._paths.walk(node)
        if node not in self.closure:
            return 0, CLEAN

        key = (node, outstanding.snapshot())
        if self._shortcut:
            if self.resolvers.explored(node):
                return len(self.resolvers.resolving_children(node, outstanding)), CLEAN
        else:
            hit = self.resolvers.totals.get(key)
            if hit is not None:
                return hit, CLEAN

        active = self._active
        total = 0
        low = CLEAN
        with active.entered(node) as depth:
            for succ in self._graph.successors(node):
                if succ == node:
                    continue
                if succ in active:
                    low = min(low, active.depth(succ))
                    continue
                n, sub_low = self._visit(succ)
                low = min(low, sub_low)
                if n:
                    total += n
                    self.resolvers.record(node, outstanding, succ)
        if low > depth:
            if not self._shortcut:
                self.resolvers.totals[key] = total
            return total, CLEAN
        return total, low
