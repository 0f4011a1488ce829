"""Label-level entry points: build a graph, count paths.

These functions are the whole public surface most callers need:

    graph = build_graph(edges)
    count_all_paths(graph, "svr", "out")
    count_constrained_paths(graph, "svr", "out", {"dac", "fft"})

Every label is resolved before any counting starts, so an unknown
label raises UnknownNode without touching a cache.  Each call builds
fresh caches; nothing is shared between queries.
"""
from __future__ import annotations

import logging
from typing import Iterable

from reachcount.config import CountConfig, recursion_headroom
from reachcount.graph.adjacency import Graph
from reachcount.graph.constrained import ConstrainedPathCounter
from reachcount.graph.path_count import PathCountCache, count_paths

log = logging.getLogger(__name__)


def count_all_paths(
    graph: Graph,
    start: str,
    target: str,
    config: CountConfig | None = None,
) -> int:
    """Number of simple paths from *start* to *target*.

    Raises UnknownNode for an unknown label.  With
    config.strict_cycles, raises CycleDetected when a cycle can reach
    the target.
    """
    config = config or CountConfig()
    s = graph.lookup(start)
    t = graph.lookup(target)
    cache = PathCountCache(t)
    with recursion_headroom(config.limit_for(graph.node_count)):
        total = count_paths(graph, s, t, cache, strict=config.strict_cycles)
    log.debug("%s -> %s: %d path(s), %d node(s) cached", start, target, total, len(cache))
    return total


def count_constrained_paths(
    graph: Graph,
    start: str,
    target: str,
    requirements: Iterable[str],
    config: CountConfig | None = None,
) -> int:
    """Number of simple *start* -> *target* paths visiting every requirement.

    With no requirements this equals count_all_paths.  With
    requirements, a path that starts at the target, or a requirement
    set that names the target, counts nothing.  strict_cycles applies as in
    count_all_paths.
    """
    config = config or CountConfig()
    s = graph.lookup(start)
    t = graph.lookup(target)
    reqs = frozenset(graph.lookup(label) for label in requirements)

    if reqs and (s == t or t in reqs):
        log.debug("%s -> %s: target is the start or a requirement, 0 paths", start, target)
        return 0

    counter = ConstrainedPathCounter(
        graph, t, reqs,
        shortcut=config.resolver_shortcut,
        strict=config.strict_cycles,
    )
    with recursion_headroom(config.limit_for(graph.node_count)):
        total = counter.count(s)
    log.debug(
        "%s -> %s via %s: %d path(s)",
        start, target, sorted(graph.label(r) for r in reqs), total,
    )
    return total
