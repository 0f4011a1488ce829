"""Shared fixtures for graph and path-counting tests."""
from __future__ import annotations

import pytest

from reachcount.graph.adjacency import Graph, build_graph

SEED = 42

SCENARIO_A = {
    "aaa": ["you", "hhh"],
    "you": ["bbb", "ccc"],
    "bbb": ["ddd", "eee"],
    "ccc": ["ddd", "eee", "fff"],
    "ddd": ["ggg"],
    "eee": ["out"],
    "fff": ["out"],
    "ggg": ["out"],
    "hhh": ["ccc", "fff", "iii"],
    "iii": ["out"],
}

SCENARIO_B = {
    "svr": ["aaa", "bbb"],
    "aaa": ["fft"],
    "fft": ["ccc"],
    "bbb": ["tty"],
    "tty": ["ccc"],
    "ccc": ["ddd", "eee"],
    "ddd": ["hub"],
    "hub": ["fff"],
    "eee": ["dac"],
    "dac": ["fff"],
    "fff": ["ggg", "hhh"],
    "ggg": ["out"],
    "hhh": ["out"],
}


def edges_of(adjacency: dict[str, list[str]]) -> list[tuple[str, str]]:
    return [(src, dst) for src, dsts in adjacency.items() for dst in dsts]


def enumerate_paths(
    adjacency: dict[str, list[str]], start: str, target: str
) -> list[list[str]]:
    """Every simple path start -> target, by brute force."""
    paths: list[list[str]] = []
    path = [start]

    def _walk(node: str) -> None:
        if node == target:
            paths.append(list(path))
            return
        for succ in adjacency.get(node, []):
            if succ in path:
                continue
            path.append(succ)
            _walk(succ)
            path.pop()

    _walk(start)
    return paths


@pytest.fixture
def empty_graph() -> Graph:
    return Graph()


@pytest.fixture
def scenario_a() -> Graph:
    return build_graph(edges_of(SCENARIO_A))


@pytest.fixture
def scenario_b() -> Graph:
    return build_graph(edges_of(SCENARIO_B))


@pytest.fixture
def diamond_graph() -> Graph:
    """
    A -> B -> D
    A -> C -> D
    """
    return build_graph([("A", "B"), ("A", "C"), ("B", "D"), ("C", "D")])
