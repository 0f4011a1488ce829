"""Graph model and path-counting algorithms."""

from reachcount.graph.adjacency import (
    Edge,
    Graph,
    GraphFrozen,
    NodeId,
    UnknownNode,
    build_graph,
)
from reachcount.graph.closure import compute_closure
from reachcount.graph.constrained import (
    ConstrainedPathCounter,
    Outstanding,
    ResolverCache,
)
from reachcount.graph.cycle_detector import ActivePath, CycleDetected
from reachcount.graph.path_count import PathCountCache, PathCounter, count_paths
from reachcount.graph.queries import count_all_paths, count_constrained_paths

__all__ = [
    "ActivePath",
    "ConstrainedPathCounter",
    "CycleDetected",
    "Edge",
    "Graph",
    "GraphFrozen",
    "NodeId",
    "Outstanding",
    "PathCountCache",
    "PathCounter",
    "ResolverCache",
    "UnknownNode",
    "build_graph",
    "compute_closure",
    "count_all_paths",
    "count_constrained_paths",
    "count_paths",
]
