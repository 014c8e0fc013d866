"""Unit tests for the shared-attribute fraud graph."""

import threading

import pytest

from sentinel.domains.fraud.exceptions import InternalInconsistencyError
from sentinel.domains.fraud.graph import FraudGraph


@pytest.fixture
def ring_graph() -> FraudGraph:
    graph = FraudGraph()
    graph.add_edge("a", "b")
    graph.add_edge("b", "c")
    graph.add_edge("x", "y")
    graph.add_vertex("loner")
    return graph


class TestConnectivity:
    def test_edge_is_symmetric(self):
        graph = FraudGraph()
        graph.add_edge("a", "b")
        assert graph.are_connected("a", "b")
        assert graph.are_connected("b", "a")

    def test_transitive_connectivity(self, ring_graph):
        assert ring_graph.are_connected("a", "c")
        assert ring_graph.are_connected("c", "a")

    def test_separate_components_not_connected(self, ring_graph):
        assert not ring_graph.are_connected("a", "x")

    def test_unknown_vertex_not_connected(self, ring_graph):
        assert not ring_graph.are_connected("a", "ghost")
        assert not ring_graph.are_connected("ghost", "a")

    def test_vertex_connected_to_itself(self, ring_graph):
        assert ring_graph.are_connected("loner", "loner")

    def test_self_loop_only_adds_vertex(self):
        graph = FraudGraph()
        graph.add_edge("a", "a")
        assert graph.has_vertex("a")
        assert graph.neighbors("a") == {}
        assert graph.edge_count() == 0


class TestTraversal:
    def test_dfs_reaches_component(self, ring_graph):
        assert set(ring_graph.dfs("a")) == {"a", "b", "c"}
        assert ring_graph.dfs("a")[0] == "a"

    def test_bfs_reaches_component(self, ring_graph):
        order = ring_graph.bfs("a")
        assert order == ["a", "b", "c"]

    def test_traversal_from_unknown_vertex(self, ring_graph):
        assert ring_graph.dfs("ghost") == []
        assert ring_graph.bfs("ghost") == []

    def test_long_chain_does_not_recurse(self):
        graph = FraudGraph()
        for i in range(5000):
            graph.add_edge(f"v{i}", f"v{i + 1}")
        assert len(graph.dfs("v0")) == 5001
        assert graph.are_connected("v0", "v5000")


class TestComponentsAndStats:
    def test_components_exclude_isolated_vertices(self, ring_graph):
        components = ring_graph.connected_components()
        assert components == [{"a", "b", "c"}, {"x", "y"}]
        assert all("loner" not in component for component in components)

    def test_component_of(self, ring_graph):
        assert ring_graph.component_of("y") == {"x", "y"}

    def test_repeat_edges_accumulate_weight_not_edges(self):
        graph = FraudGraph()
        graph.add_edge("a", "b")
        graph.add_edge("b", "a")
        assert graph.neighbors("a") == {"b": 2}
        assert graph.edge_count() == 1

    def test_stats(self, ring_graph):
        stats = ring_graph.stats()
        assert stats.vertex_count == 6
        assert stats.edge_count == 3
        assert stats.ring_count == 2
        assert stats.largest_ring_size == 3

    def test_stats_on_empty_graph(self):
        stats = FraudGraph().stats()
        assert stats.vertex_count == 0
        assert stats.ring_count == 0
        assert stats.largest_ring_size == 0

    def test_verify_passes_for_symmetric_graph(self, ring_graph):
        ring_graph.verify()

    def test_verify_detects_self_loop(self, ring_graph):
        ring_graph._graph.add_edge("a", "a", weight=1)
        with pytest.raises(InternalInconsistencyError):
            ring_graph.verify()

    def test_verify_detects_non_positive_weight(self, ring_graph):
        ring_graph._graph["a"]["b"]["weight"] = 0
        with pytest.raises(InternalInconsistencyError):
            ring_graph.verify()

    def test_clear(self, ring_graph):
        ring_graph.clear()
        assert len(ring_graph) == 0


class TestConcurrency:
    def test_concurrent_links_keep_graph_consistent(self):
        graph = FraudGraph()
        hub_members = [f"member-{i}" for i in range(20)]

        def worker(offset: int):
            for i in range(50):
                graph.add_edge(hub_members[(offset + i) % 20], hub_members[(offset + i + 1) % 20])
                graph.add_edge(f"solo-{offset}-{i}", "hub")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        graph.verify()
        assert graph.edge_count() == 20 + 8 * 50
        ring_weight = sum(graph.neighbors(m).get(hub_members[(k + 1) % 20], 0) for k, m in enumerate(hub_members))
        assert ring_weight == 8 * 50
        assert graph.are_connected("solo-0-0", "solo-7-49")
        assert not graph.are_connected("hub", "member-0")
