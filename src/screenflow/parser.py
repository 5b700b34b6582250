"""
Parser module for screen flow notation.

Turns line-oriented flow notation into a ScreenGraph. Each stripped line is
classified by an ordered list of rules; the first rule whose predicate
matches handles the line. Lines no rule accepts are skipped, never raised.

Notation summary:

    [Login]                 screen header
    // P: under 200ms       requirement (P, S, A, U)
    T Welcome back          text
    E Email                 field
    B Forgot password       button
    O Logo                  other
    --                      section break
    A Sign in => Home       action that also transitions to Home
    ={locked}=> Lockout     conditional transition
    => Help                 unconditional transition
"""

import functools
import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from .graph import ScreenGraph
from .models import (
    Component,
    ComponentKind,
    RequirementCategory,
    Screen,
    SectionBreak,
    Transition,
)

logger = logging.getLogger(__name__)

ARROW = "=>"
SECTION_BREAK = "--"
REQUIREMENT_PREFIX = "//"
ACTION_PREFIX = "A "


@dataclass
class SkippedLine:
    """A non-blank input line that produced no effect."""

    line_number: int
    text: str
    reason: str


@dataclass
class ParseResult:
    """Result of parsing input text, with diagnostics."""

    graph: ScreenGraph = field(default_factory=ScreenGraph)
    skipped: List[SkippedLine] = field(default_factory=list)


class _ScreenDraft:
    """Mutable screen under construction; frozen into a Screen on commit."""

    def __init__(self, name: str):
        self.name = name
        self.components: List[Component] = []
        self.requirements: Dict[RequirementCategory, str] = {}
        self.transitions: List[Transition] = []
        self.sections: List[SectionBreak] = []

    def freeze(self) -> Screen:
        return Screen(
            name=self.name,
            components=tuple(self.components),
            requirements=dict(self.requirements),
            transitions=tuple(self.transitions),
            sections=tuple(self.sections),
        )


class _Accumulator:
    """Fold state for a single parse: closed screens plus the open one."""

    def __init__(self):
        self.closed: List[Screen] = []
        self.current: Optional[_ScreenDraft] = None
        self.skipped: List[SkippedLine] = []

    def open(self, name: str) -> None:
        self.commit()
        self.current = _ScreenDraft(name)

    def commit(self) -> None:
        if self.current is not None:
            self.closed.append(self.current.freeze())
            self.current = None


# A handler returns None when it applied the line, or a reason for skipping it.
Handler = Callable[[_Accumulator, str], Optional[str]]
Rule = Tuple[str, Callable[[str], bool], Handler]


def _needs_screen(handler: Handler) -> Handler:
    """Wrap a handler so it skips lines appearing before any screen header."""

    @functools.wraps(handler)
    def wrapped(acc: _Accumulator, line: str) -> Optional[str]:
        if acc.current is None:
            return "outside of any screen"
        return handler(acc, line)

    return wrapped


class Parser:
    """
    Parses flow notation into a ScreenGraph.

    The parser holds no state between calls; each call folds over the
    lines with a fresh accumulator, so one instance may be reused freely.
    """

    # ={condition}=>target
    CONDITIONAL_PATTERN = re.compile(r"^=\{(.*)\}=>(.*)$")

    def __init__(self):
        self.rules: List[Rule] = [
            ("screen", self._is_header, self._handle_header),
            ("section", self._is_section, _needs_screen(self._handle_section)),
            (
                "action_transition",
                self._is_action_transition,
                _needs_screen(self._handle_action_transition),
            ),
            (
                "conditional_transition",
                self._is_conditional,
                _needs_screen(self._handle_conditional),
            ),
            (
                "transition",
                self._is_transition,
                _needs_screen(self._handle_transition),
            ),
            ("component", self._is_component, _needs_screen(self._handle_component)),
            (
                "requirement",
                self._is_requirement,
                _needs_screen(self._handle_requirement),
            ),
        ]

    def parse(self, input_text: str) -> ScreenGraph:
        """
        Parse input text and return the ScreenGraph.

        Args:
            input_text: Flow notation, any line terminators.

        Returns:
            ScreenGraph with screens in header order. Empty input gives an
            empty graph.
        """
        return self.parse_with_diagnostics(input_text).graph

    def parse_with_diagnostics(self, input_text: str) -> ParseResult:
        """
        Parse input text and also report every line that was ignored.

        Args:
            input_text: Flow notation, any line terminators.

        Returns:
            ParseResult with the graph and the skipped lines.
        """
        acc = _Accumulator()

        for line_num, raw in enumerate(input_text.splitlines(), 1):
            line = raw.strip()
            if not line:
                continue
            self._classify(acc, line_num, line)

        acc.commit()

        logger.debug(
            "Parsed %d screen(s), skipped %d line(s)",
            len(acc.closed),
            len(acc.skipped),
        )
        return ParseResult(graph=ScreenGraph(acc.closed), skipped=acc.skipped)

    def _classify(self, acc: _Accumulator, line_num: int, line: str) -> None:
        for rule_name, matches, handler in self.rules:
            if not matches(line):
                continue
            reason = handler(acc, line)
            if reason is not None:
                self._skip(acc, line_num, line, f"{rule_name}: {reason}")
            return
        self._skip(acc, line_num, line, "unrecognized")

    @staticmethod
    def _skip(acc: _Accumulator, line_num: int, line: str, reason: str) -> None:
        logger.debug("Line %d skipped (%s): %s", line_num, reason, line)
        acc.skipped.append(SkippedLine(line_number=line_num, text=line, reason=reason))

    # Predicates

    @staticmethod
    def _is_header(line: str) -> bool:
        return line.startswith("[") and line.endswith("]")

    @staticmethod
    def _is_section(line: str) -> bool:
        return line == SECTION_BREAK

    @staticmethod
    def _is_action_transition(line: str) -> bool:
        return line.startswith(ACTION_PREFIX) and ARROW in line

    def _is_conditional(self, line: str) -> bool:
        return self.CONDITIONAL_PATTERN.match(line) is not None

    @staticmethod
    def _is_transition(line: str) -> bool:
        return line.startswith(ARROW)

    @staticmethod
    def _is_component(line: str) -> bool:
        return (
            len(line) > 2
            and line[1] == " "
            and ComponentKind.from_prefix(line[0]) is not None
        )

    @staticmethod
    def _is_requirement(line: str) -> bool:
        return line.startswith(REQUIREMENT_PREFIX)

    # Handlers

    @staticmethod
    def _handle_header(acc: _Accumulator, line: str) -> Optional[str]:
        name = line[1:-1].strip()
        if not name:
            return "empty screen name"
        acc.open(name)
        return None

    @staticmethod
    def _handle_section(acc: _Accumulator, line: str) -> Optional[str]:
        screen = acc.current
        screen.sections.append(SectionBreak(index=len(screen.components)))
        return None

    @staticmethod
    def _handle_action_transition(acc: _Accumulator, line: str) -> Optional[str]:
        left, _, right = line.partition(ARROW)
        label = left[len(ACTION_PREFIX):].strip()
        target = right.strip()
        if not label:
            return "empty action label"
        if not target:
            return "empty target"
        # One line, two effects: the action is a UI element and an edge origin.
        acc.current.transitions.append(Transition(target=target, source_label=label))
        acc.current.components.append(Component(ComponentKind.ACTION, label))
        return None

    def _handle_conditional(self, acc: _Accumulator, line: str) -> Optional[str]:
        match = self.CONDITIONAL_PATTERN.match(line)
        condition = match.group(1).strip()
        target = match.group(2).strip()
        if not condition:
            return "empty condition"
        if not target:
            return "empty target"
        acc.current.transitions.append(Transition(target=target, condition=condition))
        return None

    @staticmethod
    def _handle_transition(acc: _Accumulator, line: str) -> Optional[str]:
        target = line[len(ARROW):].strip()
        if not target:
            return "empty target"
        acc.current.transitions.append(Transition(target=target))
        return None

    @staticmethod
    def _handle_component(acc: _Accumulator, line: str) -> Optional[str]:
        kind = ComponentKind.from_prefix(line[0])
        acc.current.components.append(Component(kind, line[2:].strip()))
        return None

    @staticmethod
    def _handle_requirement(acc: _Accumulator, line: str) -> Optional[str]:
        code, sep, description = line[len(REQUIREMENT_PREFIX):].partition(":")
        if not sep:
            return "missing ':'"
        category = RequirementCategory.from_code(code)
        if category is None:
            return f"unknown category {code.strip()!r}"
        acc.current.requirements[category] = description.strip()
        return None


def parse_screens(input_text: str) -> ScreenGraph:
    """
    Convenience function to parse flow notation.

    Args:
        input_text: Flow notation text.

    Returns:
        ScreenGraph
    """
    parser = Parser()
    return parser.parse(input_text)
