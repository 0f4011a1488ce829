"""Tests for the label-level query functions."""
from __future__ import annotations

import logging
import sys

import pytest

from reachcount.config import CountConfig, recursion_headroom
from reachcount.graph.adjacency import Graph, UnknownNode, build_graph
from reachcount.graph.cycle_detector import CycleDetected
from reachcount.graph.queries import count_all_paths, count_constrained_paths

from .conftest import SCENARIO_B, edges_of


class TestCountAllPaths:
    def test_scenario_a(self, scenario_a: Graph) -> None:
        assert count_all_paths(scenario_a, "you", "out") == 5

    def test_scenario_b(self, scenario_b: Graph) -> None:
        assert count_all_paths(scenario_b, "svr", "out") == 8

    def test_start_is_target(self, scenario_a: Graph) -> None:
        assert count_all_paths(scenario_a, "out", "out") == 1

    def test_unknown_start(self, scenario_a: Graph) -> None:
        with pytest.raises(UnknownNode) as exc_info:
            count_all_paths(scenario_a, "nope", "out")
        assert exc_info.value.node == "nope"

    def test_unknown_target(self, scenario_a: Graph) -> None:
        with pytest.raises(UnknownNode):
            count_all_paths(scenario_a, "you", "nope")

    def test_strict_cycles(self) -> None:
        g = build_graph([("a", "b"), ("b", "a"), ("b", "out")])
        assert count_all_paths(g, "a", "out") == 1
        with pytest.raises(CycleDetected):
            count_all_paths(g, "a", "out", CountConfig(strict_cycles=True))

    def test_logs_result(self, scenario_b: Graph, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="reachcount"):
            count_all_paths(scenario_b, "svr", "out")
        assert "svr -> out: 8 path(s)" in caplog.text


class TestCountConstrainedPaths:
    def test_scenario_b(self, scenario_b: Graph) -> None:
        assert count_constrained_paths(scenario_b, "svr", "out", {"dac", "fft"}) == 2

    def test_scenario_b_single_waypoints(self, scenario_b: Graph) -> None:
        assert count_constrained_paths(scenario_b, "svr", "out", {"dac"}) == 4
        assert count_constrained_paths(scenario_b, "svr", "out", {"fft"}) == 4
        assert count_constrained_paths(scenario_b, "svr", "out", {"hub"}) == 4

    def test_scenario_a_waypoints(self, scenario_a: Graph) -> None:
        # you->bbb->ddd->ggg->out and you->ccc->ddd->ggg->out
        assert count_constrained_paths(scenario_a, "you", "out", {"ggg"}) == 2
        assert count_constrained_paths(scenario_a, "you", "out", {"ggg", "bbb"}) == 1
        assert count_constrained_paths(scenario_a, "you", "out", {"iii"}) == 0

    def test_empty_requirements_match_unconstrained(self, scenario_b: Graph) -> None:
        assert count_constrained_paths(scenario_b, "svr", "out", set()) == 8

    def test_start_is_target_with_requirements(self, scenario_b: Graph) -> None:
        assert count_constrained_paths(scenario_b, "out", "out", {"dac"}) == 0

    def test_start_is_target_without_requirements(self, scenario_b: Graph) -> None:
        assert count_constrained_paths(scenario_b, "out", "out", []) == 1

    def test_target_as_requirement(self, scenario_b: Graph) -> None:
        assert count_constrained_paths(scenario_b, "svr", "out", {"out"}) == 0
        assert count_constrained_paths(scenario_b, "svr", "out", {"out", "dac"}) == 0

    def test_start_as_requirement(self, scenario_b: Graph) -> None:
        assert count_constrained_paths(scenario_b, "svr", "out", {"svr"}) == 8

    def test_unknown_requirement(self, scenario_b: Graph) -> None:
        with pytest.raises(UnknownNode) as exc_info:
            count_constrained_paths(scenario_b, "svr", "out", {"dac", "zzz"})
        assert exc_info.value.node == "zzz"

    def test_unknown_start_checked_before_target_rule(self, scenario_b: Graph) -> None:
        with pytest.raises(UnknownNode):
            count_constrained_paths(scenario_b, "zzz", "out", {"out"})

    def test_back_edge_does_not_change_counts(self) -> None:
        g = build_graph(edges_of(SCENARIO_B) + [("fff", "ccc")])
        assert count_all_paths(g, "svr", "out") == 8
        assert count_constrained_paths(g, "svr", "out", {"dac", "fft"}) == 2
        assert count_constrained_paths(g, "svr", "out", {"dac"}) == 4

    def test_self_loop_does_not_change_counts(self) -> None:
        g = build_graph(edges_of(SCENARIO_B) + [("ccc", "ccc"), ("dac", "dac")])
        assert count_all_paths(g, "svr", "out") == 8
        assert count_constrained_paths(g, "svr", "out", {"dac", "fft"}) == 2

    def test_back_edge_to_start(self) -> None:
        g = build_graph(edges_of(SCENARIO_B) + [("hhh", "svr")])
        assert count_constrained_paths(g, "svr", "out", {"dac", "fft"}) == 2

    def test_strict_cycles(self, scenario_b: Graph) -> None:
        g = build_graph(edges_of(SCENARIO_B) + [("fff", "ccc")])
        strict = CountConfig(strict_cycles=True)
        with pytest.raises(CycleDetected):
            count_constrained_paths(g, "svr", "out", {"dac"}, strict)
        assert count_constrained_paths(scenario_b, "svr", "out", {"dac"}, strict) == 4

    def test_resolver_shortcut_config(self, scenario_b: Graph) -> None:
        config = CountConfig(resolver_shortcut=True)
        assert count_constrained_paths(scenario_b, "svr", "out", {"dac", "fft"}, config) == 2
        assert count_constrained_paths(scenario_b, "svr", "out", {"dac"}, config) == 3


class TestDeepGraphs:
    def test_long_chain_within_configured_limit(self) -> None:
        n = 3000
        edges = [(f"n{i}", f"n{i + 1}") for i in range(n)]
        g = build_graph(edges)
        config = CountConfig(recursion_limit=20_000)
        assert count_all_paths(g, "n0", f"n{n}", config) == 1
        assert count_constrained_paths(g, "n0", f"n{n}", {"n1500"}, config) == 1

    def test_long_chain_with_default_config(self) -> None:
        n = 6000
        g = build_graph([(f"n{i}", f"n{i + 1}") for i in range(n)])
        before = sys.getrecursionlimit()
        assert count_all_paths(g, "n0", f"n{n}") == 1
        assert count_constrained_paths(g, "n0", f"n{n}", {f"n{n - 1}"}) == 1
        assert sys.getrecursionlimit() == before

    def test_limit_grows_with_graph_size(self) -> None:
        config = CountConfig()
        assert config.limit_for(10) == config.recursion_limit
        assert config.limit_for(6001) > 2 * 6001

    def test_recursion_limit_restored(self) -> None:
        before = sys.getrecursionlimit()
        with recursion_headroom(before + 500):
            assert sys.getrecursionlimit() == before + 500
        assert sys.getrecursionlimit() == before

    def test_recursion_headroom_never_lowers(self) -> None:
        before = sys.getrecursionlimit()
        with recursion_headroom(100):
            assert sys.getrecursionlimit() == before

    def test_config_rejects_tiny_limit(self) -> None:
        with pytest.raises(ValueError, match="recursion_limit"):
            CountConfig(recursion_limit=10)
