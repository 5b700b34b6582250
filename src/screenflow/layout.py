"""
Layout module using networkx for layered screen placement.

Uses networkx for:
- Graph representation
- Cycle detection
- Topological sorting / layer assignment
- Node ordering within layers

Nodes are screen indexes rather than names, so a duplicated screen name still
gets its own slot.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

import networkx as nx

from .graph import ScreenGraph


@dataclass
class NodeLayout:
    """Represents a screen's layout information."""

    index: int
    name: str
    layer: int = 0
    position: int = 0  # Position within layer


@dataclass
class LayoutResult:
    """Result of the layout algorithm."""

    nodes: Dict[int, NodeLayout] = field(default_factory=dict)
    layers: List[List[int]] = field(default_factory=list)
    edges: List[Tuple[int, int]] = field(default_factory=list)
    back_edges: Set[Tuple[int, int]] = field(default_factory=set)
    has_cycles: bool = False


class NetworkXLayout:
    """
    Screen layout using networkx.

    For DAGs: longest-path layering over a topological order.
    For cyclic flows: identifies back edges, breaks cycles, then layouts.
    """

    def __init__(self, ordering_passes: int = 4):
        self.ordering_passes = ordering_passes
        self.graph: nx.DiGraph = None
        self.back_edges: Set[Tuple[int, int]] = set()

    def layout(self, screens: ScreenGraph) -> LayoutResult:
        """
        Compute layout for the given screens.

        Args:
            screens: Parsed ScreenGraph. Unresolved transitions are ignored.

        Returns:
            LayoutResult with layer and position per screen index
        """
        # Collapse the multigraph: parallel transitions share one slot.
        self.graph = nx.DiGraph(screens.to_networkx())

        has_cycles = not nx.is_directed_acyclic_graph(self.graph)
        self.back_edges = set()

        if has_cycles:
            self._break_cycles()

        layers = self._assign_layers()
        layers = self._order_layers(layers)

        result = LayoutResult()
        result.has_cycles = has_cycles
        result.back_edges = self.back_edges
        result.layers = layers
        result.edges = list(self.graph.edges())

        for layer_idx, layer in enumerate(layers):
            for pos_idx, index in enumerate(layer):
                result.nodes[index] = NodeLayout(
                    index=index,
                    name=screens[index].name,
                    layer=layer_idx,
                    position=pos_idx,
                )

        return result

    def _break_cycles(self) -> None:
        """
        Identify back edges with a DFS so the remaining edges form a DAG.

        Self-loops are always back edges.
        """
        visited = set()
        rec_stack = set()

        def dfs(node):
            visited.add(node)
            rec_stack.add(node)

            for successor in list(self.graph.successors(node)):
                if successor not in visited:
                    dfs(successor)
                elif successor in rec_stack:
                    self.back_edges.add((node, successor))

            rec_stack.remove(node)

        # Start from screen order so the first screen stays on top.
        for node in sorted(self.graph.nodes()):
            if node not in visited:
                dfs(node)

    def _assign_layers(self) -> List[List[int]]:
        """
        Assign screens to layers using the longest path method.
        """
        working_graph = self.graph.copy()
        working_graph.remove_edges_from(self.back_edges)

        node_layer: Dict[int, int] = {}

        # Ties broken by screen order for stable output.
        topo_order = list(
            nx.lexicographical_topological_sort(working_graph, key=lambda n: n)
        )

        for node in topo_order:
            predecessors = list(working_graph.predecessors(node))
            if not predecessors:
                node_layer[node] = 0
            else:
                node_layer[node] = max(node_layer[p] for p in predecessors) + 1

        if not node_layer:
            return []

        max_layer = max(node_layer.values())
        layers: List[List[int]] = [[] for _ in range(max_layer + 1)]

        for node in sorted(node_layer):
            layers[node_layer[node]].append(node)

        return layers

    def _order_layers(self, layers: List[List[int]]) -> List[List[int]]:
        """
        Order screens within each layer to reduce connector crossings.
        Uses barycenter heuristic.
        """
        if len(layers) <= 1:
            return layers

        working_graph = self.graph.copy()
        working_graph.remove_edges_from(self.back_edges)

        for _ in range(self.ordering_passes):
            for i in range(1, len(layers)):
                layers[i] = self._order_layer_by_barycenter(
                    layers[i], layers[i - 1], working_graph, use_predecessors=True
                )

            for i in range(len(layers) - 2, -1, -1):
                layers[i] = self._order_layer_by_barycenter(
                    layers[i], layers[i + 1], working_graph, use_predecessors=False
                )

        return layers

    def _order_layer_by_barycenter(
        self,
        layer: List[int],
        ref_layer: List[int],
        graph: nx.DiGraph,
        use_predecessors: bool,
    ) -> List[int]:
        """
        Order screens by barycenter (average position of connected screens).
        """
        ref_positions = {node: i for i, node in enumerate(ref_layer)}

        def barycenter(node: int) -> float:
            if use_predecessors:
                neighbors = list(graph.predecessors(node))
            else:
                neighbors = list(graph.successors(node))

            positions = [ref_positions[n] for n in neighbors if n in ref_positions]

            if not positions:
                # Keep current order for screens with no link to ref layer
                return layer.index(node)

            return sum(positions) / len(positions)

        return sorted(layer, key=barycenter)


def compute_layout(screens: ScreenGraph) -> LayoutResult:
    """Convenience function to lay out a ScreenGraph."""
    return NetworkXLayout().layout(screens)
