"""Unit tests for the models and graph modules."""

import dataclasses

import networkx as nx
import pytest

from screenflow.graph import ScreenGraph
from screenflow.models import (
    Component,
    ComponentKind,
    RequirementCategory,
    Screen,
    SectionBreak,
    Transition,
)


class TestEnums:
    """Tests for ComponentKind and RequirementCategory lookups."""

    @pytest.mark.parametrize(
        "prefix,kind",
        [
            ("T", ComponentKind.TEXT),
            ("E", ComponentKind.FIELD),
            ("B", ComponentKind.BUTTON),
            ("A", ComponentKind.ACTION),
            ("O", ComponentKind.OTHER),
        ],
    )
    def test_component_prefixes(self, prefix, kind):
        """Each notation prefix maps to one kind."""
        assert ComponentKind.from_prefix(prefix) is kind

    def test_unknown_prefix(self):
        """Unknown prefixes return None."""
        assert ComponentKind.from_prefix("Z") is None

    def test_requirement_codes(self):
        """Codes are trimmed and matched exactly."""
        assert RequirementCategory.from_code(" P ") is RequirementCategory.PERFORMANCE
        assert RequirementCategory.from_code("U") is RequirementCategory.USABILITY
        assert RequirementCategory.from_code("p") is None
        assert RequirementCategory.from_code("Usability") is None
        assert RequirementCategory.from_code("Q") is None


class TestTransition:
    """Tests for Transition labels."""

    def test_label_from_source(self):
        assert Transition(target="B", source_label="Go").label == "Go"

    def test_label_from_condition(self):
        assert Transition(target="B", condition="ok").label == "ok"

    def test_label_with_both(self):
        assert Transition(target="B", source_label="Go", condition="ok").label == "Go [ok]"

    def test_unconditional_label_is_empty(self):
        assert Transition(target="B").label == ""


class TestScreen:
    """Tests for the Screen record."""

    def test_screen_is_immutable(self):
        """Fields cannot be reassigned."""
        screen = Screen(name="A")
        with pytest.raises(dataclasses.FrozenInstanceError):
            screen.name = "B"

    def test_requirements_are_read_only(self):
        """The requirements mapping cannot be mutated."""
        source = {RequirementCategory.SECURITY: "2FA"}
        screen = Screen(name="A", requirements=source)
        source[RequirementCategory.SECURITY] = "changed"
        assert screen.requirements[RequirementCategory.SECURITY] == "2FA"
        with pytest.raises(TypeError):
            screen.requirements[RequirementCategory.SECURITY] = "x"

    def test_equality_and_hash(self):
        """Equal content means equal screens with equal hashes."""
        a = Screen(name="A", requirements={RequirementCategory.PERFORMANCE: "fast"})
        b = Screen(name="A", requirements={RequirementCategory.PERFORMANCE: "fast"})
        assert a == b
        assert hash(a) == hash(b)
        assert a != Screen(name="A")

    def test_breaks_before_first_action_after_section(self):
        """Only the first action following a break gets a separator."""
        screen = Screen(
            name="A",
            components=(
                Component(ComponentKind.ACTION, "early"),
                Component(ComponentKind.TEXT, "t"),
                Component(ComponentKind.ACTION, "first"),
                Component(ComponentKind.ACTION, "second"),
            ),
            sections=(SectionBreak(index=1),),
        )
        assert [screen.breaks_before(i) for i in range(4)] == [
            False,
            False,
            True,
            False,
        ]

    def test_no_separator_without_section(self):
        """Actions alone never get separators."""
        screen = Screen(
            name="A", components=(Component(ComponentKind.ACTION, "go"),)
        )
        assert screen.breaks_before(0) is False


class TestScreenGraph:
    """Tests for ScreenGraph resolution."""

    @pytest.fixture
    def graph(self):
        return ScreenGraph(
            [
                Screen(
                    name="A",
                    transitions=(
                        Transition(target="B", source_label="go"),
                        Transition(target="Missing"),
                        Transition(target="B", condition="again"),
                    ),
                ),
                Screen(name="B", components=(Component(ComponentKind.TEXT, "1"),)),
                Screen(name="B", components=(Component(ComponentKind.TEXT, "2"),)),
            ]
        )

    def test_sequence_behaviour(self, graph):
        """Graphs index, slice and iterate like sequences."""
        assert len(graph) == 3
        assert graph[0].name == "A"
        assert isinstance(graph[1:], ScreenGraph)
        assert [s.name for s in graph] == ["A", "B", "B"]

    def test_resolve_picks_first_occurrence(self, graph):
        """Duplicate names resolve to the first definition."""
        assert graph.index_of("B") == 1
        assert graph.resolve("B") is graph[1]

    def test_resolve_unknown(self, graph):
        assert graph.resolve("Missing") is None

    def test_edges(self, graph):
        """edges yields every transition with resolved indexes."""
        edges = list(graph.edges())
        assert [(s, t) for s, t, _ in edges] == [(0, 1), (0, None), (0, 1)]

    def test_unresolved_edges(self, graph):
        assert graph.unresolved_edges() == [(0, Transition(target="Missing"))]

    def test_to_networkx_is_multigraph(self, graph):
        """Parallel transitions become parallel edges; dangling ones vanish."""
        nx_graph = graph.to_networkx()
        assert isinstance(nx_graph, nx.MultiDiGraph)
        assert sorted(nx_graph.nodes) == [0, 1, 2]
        assert nx_graph.number_of_edges(0, 1) == 2
        assert nx_graph.nodes[2]["name"] == "B"
        labels = sorted(d["label"] for _, _, d in nx_graph.edges(data=True))
        assert labels == ["again", "go"]

    def test_equality_with_list(self, graph):
        assert graph == list(graph.screens)
        assert ScreenGraph() == []
