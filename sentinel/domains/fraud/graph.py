"""Undirected shared-attribute graph used to surface fraud rings.

Vertices are actor identities (and any other attribute value a caller chooses
to link, such as an address); an edge means two vertices were seen together on
one transaction. A connected component of two or more vertices is a fraud
ring. networkx traversals are iterative, so deep rings never hit the recursion
limit.
"""

import threading
from collections.abc import Hashable

import networkx as nx
import structlog

from .exceptions import InternalInconsistencyError
from .models import GraphStats

logger = structlog.get_logger()


class FraudGraph:
    """``nx.Graph`` with a ``weight`` edge attribute counting repeat links.

    networkx graphs are not thread-safe; every access goes through the lock.
    """

    def __init__(self) -> None:
        self._graph = nx.Graph()
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return self._graph.number_of_nodes()

    def __contains__(self, vertex: object) -> bool:
        return self.has_vertex(vertex)

    def add_vertex(self, vertex: Hashable) -> None:
        with self._lock:
            self._graph.add_node(vertex)

    def add_edge(self, a: Hashable, b: Hashable, weight: int = 1) -> None:
        """Link two vertices. Repeated links accumulate weight; self-links only add the vertex."""
        with self._lock:
            if a == b:
                self._graph.add_node(a)
                return
            if self._graph.has_edge(a, b):
                self._graph[a][b]["weight"] += weight
            else:
                self._graph.add_edge(a, b, weight=weight)

    def has_vertex(self, vertex: object) -> bool:
        with self._lock:
            return vertex in self._graph

    def neighbors(self, vertex: Hashable) -> dict[Hashable, int]:
        with self._lock:
            if vertex not in self._graph:
                return {}
            return {neighbor: data["weight"] for neighbor, data in self._graph[vertex].items()}

    def dfs(self, start: Hashable) -> list[Hashable]:
        """Vertices reachable from start in depth-first order (empty if unknown)."""
        with self._lock:
            if start not in self._graph:
                return []
            return list(nx.dfs_preorder_nodes(self._graph, start))

    def bfs(self, start: Hashable) -> list[Hashable]:
        """Vertices reachable from start in breadth-first order (empty if unknown)."""
        with self._lock:
            if start not in self._graph:
                return []
            return [start] + [v for _, v in nx.bfs_edges(self._graph, start)]

    def are_connected(self, a: Hashable, b: Hashable) -> bool:
        """BFS from a, stopping as soon as b is reached."""
        with self._lock:
            if a not in self._graph or b not in self._graph:
                return False
            if a == b:
                return True
            for _, v in nx.bfs_edges(self._graph, a):
                if v == b:
                    return True
            return False

    def component_of(self, vertex: Hashable) -> set[Hashable]:
        with self._lock:
            if vertex not in self._graph:
                return set()
            return set(nx.node_connected_component(self._graph, vertex))

    def connected_components(self) -> list[set[Hashable]]:
        """Components with at least two vertices, largest first.

        Isolated vertices carry no ring evidence and are left out.
        """
        with self._lock:
            components = [
                set(component)
                for component in nx.connected_components(self._graph)
                if len(component) > 1
            ]
        components.sort(key=len, reverse=True)
        return components

    def edge_count(self) -> int:
        with self._lock:
            return self._graph.number_of_edges()

    def stats(self) -> GraphStats:
        with self._lock:
            components = self.connected_components()
            return GraphStats(
                vertex_count=self._graph.number_of_nodes(),
                edge_count=self._graph.number_of_edges(),
                ring_count=len(components),
                largest_ring_size=len(components[0]) if components else 0,
            )

    def verify(self) -> None:
        """Raise InternalInconsistencyError on a self-loop or a non-positive edge weight."""
        with self._lock:
            for a, b, weight in self._graph.edges(data="weight"):
                if a == b or not isinstance(weight, int) or weight < 1:
                    logger.error("graph_invalid_edge", vertex=str(a), neighbor=str(b), weight=weight)
                    raise InternalInconsistencyError(
                        f"Edge {a!r}-{b!r} is invalid (weight={weight!r})"
                    )

    def clear(self) -> None:
        with self._lock:
            self._graph.clear()
