"""
Structural checks over a parsed ScreenGraph.

None of these findings stop rendering: unresolved transitions are simply not
drawn and duplicate names resolve to their first definition. The report
exists so tools and the CLI can point authors at likely typos.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

import networkx as nx

from .graph import ScreenGraph
from .models import Transition

logger = logging.getLogger(__name__)


@dataclass
class ValidationReport:
    """
    Findings for one graph.

    Attributes:
        duplicate_names: Screen name to every index defining it, for names
            defined more than once. Lookups use the first index.
        unresolved: (source screen index, transition) for each transition
            whose target names no screen.
        unreachable: Indexes of screens that cannot be reached from the
            first screen by following resolved transitions.
    """

    duplicate_names: Dict[str, List[int]] = field(default_factory=dict)
    unresolved: List[Tuple[int, Transition]] = field(default_factory=list)
    unreachable: List[int] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not (self.duplicate_names or self.unresolved or self.unreachable)

    def messages(self, graph: ScreenGraph) -> List[str]:
        """Human-readable lines describing each finding."""
        lines = []
        for name, indexes in self.duplicate_names.items():
            positions = ", ".join(str(i + 1) for i in indexes)
            lines.append(
                f"Screen '{name}' is defined {len(indexes)} times "
                f"(screens {positions}); connectors use the first"
            )
        for source, transition in self.unresolved:
            lines.append(
                f"Screen '{graph[source].name}' transitions to undefined "
                f"screen '{transition.target}'"
            )
        for index in self.unreachable:
            lines.append(f"Screen '{graph[index].name}' is unreachable")
        return lines


def find_duplicate_names(graph: ScreenGraph) -> Dict[str, List[int]]:
    """Map each repeated screen name to all indexes that define it."""
    seen: Dict[str, List[int]] = defaultdict(list)
    for index, screen in enumerate(graph):
        seen[screen.name].append(index)
    return {name: indexes for name, indexes in seen.items() if len(indexes) > 1}


def find_unreachable(graph: ScreenGraph) -> List[int]:
    """
    Indexes of screens not reachable from the first screen.

    The first screen is treated as the entry point of the flow.
    """
    if len(graph) == 0:
        return []
    nx_graph = graph.to_networkx()
    reachable = nx.descendants(nx_graph, 0) | {0}
    return sorted(set(nx_graph.nodes) - reachable)


def validate_graph(graph: ScreenGraph) -> ValidationReport:
    """
    Check a ScreenGraph for duplicate names, dangling and unreachable screens.

    Never raises; an empty graph yields a clean report.
    """
    report = ValidationReport(
        duplicate_names=find_duplicate_names(graph),
        unresolved=graph.unresolved_edges(),
        unreachable=find_unreachable(graph),
    )
    for message in report.messages(graph):
        logger.info(message)
    return report
