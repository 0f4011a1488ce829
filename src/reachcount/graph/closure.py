"""Waypoint closure: where can an outstanding requirement still be met?

A node reachable from the search root is in the closure when it is a
requirement itself, or when one of its successors is in the closure.
The target is a boundary: a path ends there, so its successors never
count.  The constrained counter uses the closure purely as a pruning
oracle: while any requirement is outstanding, a node outside the
closure cannot lead to a qualifying path.

The recursive definition ("me or any child") is a least fixed point.
Evaluating it with a memoized DFS gets cycles wrong: a node whose only
route to a requirement runs through a GRAY ancestor would be memoized
as False.  We compute the same set in two passes instead, each node
classified once:

  1.  Forward DFS from the root, not expanding past the target, to
      find the reachable region.
  2.  Backward DFS from every reachable requirement over predecessor
      edges inside that region.  The walk never steps back onto the
      target, since the target's out-edges are excluded.
"""
from __future__ import annotations

from typing import AbstractSet

from reachcount.graph.adjacency import Graph, NodeId


def reachable_from(graph: Graph, root: NodeId, boundary: NodeId) -> set[NodeId]:
    """Nodes reachable from *root* without leaving through *boundary*."""
    seen = {root}
    stack = [root]
    while stack:
        node = stack.pop()
        if node == boundary:
            continue
        for succ in graph.successors(node):
            if succ not in seen:
                seen.add(succ)
                stack.append(succ)
    return seen


def compute_closure(
    graph: Graph,
    root: NodeId,
    target: NodeId,
    requirements: AbstractSet[NodeId],
) -> frozenset[NodeId]:
    """Nodes reachable from *root* that are, or can reach, a requirement."""
    region = reachable_from(graph, root, target)

    closure = {r for r in requirements if r in region}
    stack = list(closure)
    while stack:
        node = stack.pop()
        for pred in graph.predecessors(node):
            # the target's out-edges are not part of any path
            if pred == target or pred not in region or pred in closure:
                continue
            closure.add(pred)
            stack.append(pred)
    return frozenset(closure)
