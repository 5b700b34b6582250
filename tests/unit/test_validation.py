"""Unit tests for the validation module."""

from screenflow import parse_screens
from screenflow.models import Transition
from screenflow.validation import (
    find_duplicate_names,
    find_unreachable,
    validate_graph,
)


class TestValidateGraph:
    """Tests for validate_graph."""

    def test_empty_graph_is_clean(self):
        report = validate_graph(parse_screens(""))
        assert report.is_clean
        assert report.messages(parse_screens("")) == []

    def test_connected_flow_is_clean(self, linear_input):
        assert validate_graph(parse_screens(linear_input)).is_clean

    def test_unresolved_target(self):
        """A dangling transition is reported, not raised."""
        graph = parse_screens("[A]\n=> Nowhere")
        report = validate_graph(graph)
        assert report.unresolved == [(0, Transition(target="Nowhere"))]
        assert not report.is_clean
        assert "undefined screen 'Nowhere'" in report.messages(graph)[0]

    def test_duplicate_names(self, duplicate_input):
        """Repeated names list every defining index."""
        graph = parse_screens(duplicate_input)
        report = validate_graph(graph)
        assert report.duplicate_names == {"Shared": [1, 2]}
        assert "connectors use the first" in report.messages(graph)[0]

    def test_second_duplicate_is_unreachable(self, duplicate_input):
        """Transitions resolve to the first occurrence only."""
        assert find_unreachable(parse_screens(duplicate_input)) == [2]


class TestHelpers:
    """Tests for the individual checks."""

    def test_find_duplicate_names_none(self):
        assert find_duplicate_names(parse_screens("[A]\n[B]")) == {}

    def test_unreachable_islands(self):
        """Screens not reachable from the first screen are listed."""
        graph = parse_screens("[A]\n=> B\n[B]\n[C]\n=> A")
        assert find_unreachable(graph) == [2]

    def test_cycle_is_reachable(self, cyclic_input):
        assert find_unreachable(parse_screens(cyclic_input)) == []

    def test_single_screen(self):
        assert find_unreachable(parse_screens("[Only]")) == []
