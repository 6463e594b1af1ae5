# tests/test_graph.py
"""Tests for dependency ordering."""

import pytest

from atomforge.graph import CycleError, topological_sort


def assert_respects(order: list[str], edges: list[tuple[str, str]]) -> None:
    position = {name: i for i, name in enumerate(order)}
    for dependent, depends_on in edges:
        if dependent in position and depends_on in position and dependent != depends_on:
            assert position[depends_on] < position[dependent], (dependent, depends_on)


class TestTopologicalSort:
    def test_dependency_comes_first(self):
        order = topological_sort(["player_jump", "math_clamp"], [("player_jump", "math_clamp")])
        assert order == ["math_clamp", "player_jump"]

    def test_no_edges_keeps_input_order(self):
        assert topological_sort(["c", "a", "b"], []) == ["c", "a", "b"]

    def test_empty(self):
        assert topological_sort([], []) == []

    def test_diamond(self):
        nodes = ["game_loop", "render", "physics", "vec_add"]
        edges = [
            ("game_loop", "render"),
            ("game_loop", "physics"),
            ("render", "vec_add"),
            ("physics", "vec_add"),
        ]
        order = topological_sort(nodes, edges)
        assert order[0] == "vec_add"
        assert order[-1] == "game_loop"
        assert_respects(order, edges)

    def test_ready_nodes_emitted_in_discovery_order(self):
        # b and c become ready together once a is emitted; edge order decides
        nodes = ["a", "c", "b"]
        edges = [("b", "a"), ("c", "a")]
        assert topological_sort(nodes, edges) == ["a", "b", "c"]

    def test_deterministic(self):
        nodes = ["e", "d", "c", "b", "a"]
        edges = [("e", "a"), ("d", "a"), ("c", "b"), ("b", "a")]
        first = topological_sort(nodes, edges)
        for _ in range(5):
            assert topological_sort(nodes, edges) == first

    def test_duplicate_nodes_ignored(self):
        assert topological_sort(["a", "b", "a"], [("b", "a")]) == ["a", "b"]

    def test_self_edge_dropped(self):
        assert topological_sort(["a", "b"], [("a", "a"), ("b", "a")]) == ["a", "b"]

    def test_edge_to_unknown_node_dropped(self):
        order = topological_sort(["a", "b"], [("a", "ghost"), ("ghost", "b"), ("b", "a")])
        assert order == ["a", "b"]

    def test_output_is_permutation(self):
        nodes = [f"n{i}" for i in range(20)]
        edges = [(f"n{i}", f"n{i - 1}") for i in range(1, 20)]
        order = topological_sort(reversed(nodes), edges)
        assert sorted(order) == sorted(nodes)
        assert_respects(order, edges)


class TestCycles:
    def test_two_node_cycle(self):
        with pytest.raises(CycleError) as exc_info:
            topological_sort(["loop_a", "loop_b"], [("loop_a", "loop_b"), ("loop_b", "loop_a")])
        assert exc_info.value.remaining == ["loop_a", "loop_b"]
        assert "Cycle detected" in str(exc_info.value)
        assert "loop_a" in str(exc_info.value)

    def test_remaining_includes_downstream_of_cycle(self):
        nodes = ["ok", "x", "y", "uses_x"]
        edges = [("x", "y"), ("y", "x"), ("uses_x", "x"), ("x", "ok")]
        with pytest.raises(CycleError) as exc_info:
            topological_sort(nodes, edges)
        assert exc_info.value.remaining == ["x", "y", "uses_x"]

    def test_three_node_cycle(self):
        edges = [("a", "b"), ("b", "c"), ("c", "a")]
        with pytest.raises(CycleError) as exc_info:
            topological_sort(["a", "b", "c"], edges)
        assert set(exc_info.value.remaining) == {"a", "b", "c"}
