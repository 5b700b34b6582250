"""
Data models for screen flow notation.

This module contains the immutable records produced by the notation parser.
A parse yields Screens; each Screen carries its UI components, non-functional
requirements, outgoing transitions and section-break markers.

Classes:
    ComponentKind: Closed set of UI element kinds.
    RequirementCategory: Closed set of non-functional requirement categories.
    Component: A declared UI element belonging to a screen.
    Transition: A directed edge from a screen to a named target screen.
    SectionBreak: Rendering hint separating groups of components.
    Screen: A named unit of the flow.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


class ComponentKind(Enum):
    """Kinds of UI elements, keyed by their notation prefix letter."""

    TEXT = "T"
    FIELD = "E"
    BUTTON = "B"
    ACTION = "A"
    OTHER = "O"

    @classmethod
    def from_prefix(cls, prefix: str) -> Optional["ComponentKind"]:
        """Return the kind for a single-letter prefix, or None."""
        for kind in cls:
            if kind.value == prefix:
                return kind
        return None


class RequirementCategory(Enum):
    """Non-functional requirement categories, keyed by notation code."""

    PERFORMANCE = "P"
    SECURITY = "S"
    AVAILABILITY = "A"
    USABILITY = "U"

    @classmethod
    def from_code(cls, code: str) -> Optional["RequirementCategory"]:
        """
        Look up a category by its exact one-letter code (P, S, A or U).

        Returns None for anything else, including lowercase codes.
        """
        code = code.strip()
        for category in cls:
            if code == category.value:
                return category
        return None


@dataclass(frozen=True)
class Component:
    """
    A UI element declared on a screen.

    Attributes:
        kind: What sort of element this is.
        name: Free-text name as written after the prefix.
    """

    kind: ComponentKind
    name: str


@dataclass(frozen=True)
class Transition:
    """
    A directed edge from the containing screen to ``target``.

    Action transitions carry a ``source_label`` (the action that triggers
    them); conditional transitions carry a ``condition``. Unconditional
    transitions carry neither. The target may name a screen that is never
    defined.
    """

    target: str
    source_label: str = ""
    condition: str = ""

    @property
    def label(self) -> str:
        """Caption for the connector drawn for this transition."""
        if self.source_label and self.condition:
            return f"{self.source_label} [{self.condition}]"
        return self.source_label or self.condition


@dataclass(frozen=True)
class SectionBreak:
    """
    Section-break marker.

    Attributes:
        index: Number of components declared before the break, i.e. the
            index of the first component that follows it.
    """

    index: int


@dataclass(frozen=True)
class Screen:
    """
    A named unit of the flow.

    Attributes:
        name: Screen identifier as written in the header.
        components: UI elements in rendering order.
        requirements: Category to description, at most one per category.
        transitions: Outgoing edges in declaration order.
        sections: Section-break markers in declaration order.
    """

    name: str
    components: Tuple[Component, ...] = ()
    requirements: Mapping[RequirementCategory, str] = field(
        default_factory=lambda: MappingProxyType({})
    )
    transitions: Tuple[Transition, ...] = ()
    sections: Tuple[SectionBreak, ...] = ()

    def __post_init__(self):
        # Freeze whatever mapping was handed in so the record stays immutable.
        frozen = MappingProxyType(dict(self.requirements))
        object.__setattr__(self, "requirements", frozen)

    def __eq__(self, other):
        if not isinstance(other, Screen):
            return NotImplemented
        return (
            self.name == other.name
            and self.components == other.components
            and dict(self.requirements) == dict(other.requirements)
            and self.transitions == other.transitions
            and self.sections == other.sections
        )

    def __hash__(self):
        return hash(
            (
                self.name,
                self.components,
                tuple(sorted((c.value, d) for c, d in self.requirements.items())),
                self.transitions,
                self.sections,
            )
        )

    def breaks_before(self, component_index: int) -> bool:
        """
        Whether a separator belongs before the component at ``component_index``.

        A separator is drawn before the first ACTION component that follows
        a section break.
        """
        component = self.components[component_index]
        if component.kind is not ComponentKind.ACTION:
            return False
        for section in self.sections:
            if section.index > component_index:
                continue
            first_action = next(
                (
                    i
                    for i in range(section.index, len(self.components))
                    if self.components[i].kind is ComponentKind.ACTION
                ),
                None,
            )
            if first_action == component_index:
                return True
        return False
