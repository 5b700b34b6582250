"""
Graph module for screen flow notation.

Provides the ScreenGraph container returned by the parser and the name
resolution rules used by everything downstream.
"""

from collections.abc import Sequence
from typing import Dict, Iterator, List, Optional, Tuple

import networkx as nx

from .models import Screen, Transition


class ScreenGraph(Sequence):
    """
    Ordered, immutable sequence of Screens with an implicit directed multigraph.

    Screens keep first-definition order. Duplicate names are all kept; name
    lookups resolve to the first screen defined with that name.
    """

    def __init__(self, screens=()):
        self._screens: Tuple[Screen, ...] = tuple(screens)
        self._first_index: Dict[str, int] = {}
        for index, screen in enumerate(self._screens):
            self._first_index.setdefault(screen.name, index)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return ScreenGraph(self._screens[index])
        return self._screens[index]

    def __len__(self) -> int:
        return len(self._screens)

    def __eq__(self, other):
        if isinstance(other, ScreenGraph):
            return self._screens == other._screens
        if isinstance(other, (list, tuple)):
            return list(self._screens) == list(other)
        return NotImplemented

    def __hash__(self):
        return hash(self._screens)

    def __repr__(self) -> str:
        names = ", ".join(screen.name for screen in self._screens)
        return f"ScreenGraph([{names}])"

    @property
    def screens(self) -> Tuple[Screen, ...]:
        return self._screens

    def names(self) -> List[str]:
        """Return screen names in definition order (duplicates included)."""
        return [screen.name for screen in self._screens]

    def index_of(self, name: str) -> Optional[int]:
        """Index of the first screen called ``name``, or None."""
        return self._first_index.get(name)

    def resolve(self, name: str) -> Optional[Screen]:
        """Return the first screen called ``name``, or None if undefined."""
        index = self.index_of(name)
        return None if index is None else self._screens[index]

    def edges(self) -> Iterator[Tuple[int, Optional[int], Transition]]:
        """
        Yield every transition as ``(source_index, target_index, transition)``.

        ``target_index`` is None when the target names no screen.
        """
        for source_index, screen in enumerate(self._screens):
            for transition in screen.transitions:
                yield source_index, self.index_of(transition.target), transition

    def resolved_edges(self) -> List[Tuple[int, int, Transition]]:
        """Edges whose target names a defined screen."""
        return [
            (source, target, transition)
            for source, target, transition in self.edges()
            if target is not None
        ]

    def unresolved_edges(self) -> List[Tuple[int, Transition]]:
        """Transitions whose target names no screen."""
        return [
            (source, transition)
            for source, target, transition in self.edges()
            if target is None
        ]

    def to_networkx(self) -> nx.MultiDiGraph:
        """
        Build a networkx MultiDiGraph keyed by screen index.

        Node attributes hold the screen name; edge attributes hold the
        transition and its label. Unresolved transitions are left out.
        """
        graph = nx.MultiDiGraph()
        for index, screen in enumerate(self._screens):
            graph.add_node(index, name=screen.name)
        for source, target, transition in self.resolved_edges():
            graph.add_edge(
                source, target, transition=transition, label=transition.label
            )
        return graph
