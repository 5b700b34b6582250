"""
Diagram builder boundary.

A DiagramBuilder turns a ScreenGraph into shapes and connectors. Rendering
runs in two passes: every screen is placed first, then connectors are drawn
by looking up target handles by name. A transition whose target was never
defined is skipped rather than treated as an error.

Builders are async so they can wait on resources such as fonts; the passes
themselves run sequentially on one event loop.
"""

import abc
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Tuple, TypeVar

from .errors import RenderError
from .graph import ScreenGraph
from .models import RequirementCategory, Screen, Transition

logger = logging.getLogger(__name__)

Handle = TypeVar("Handle")

SECTION_SEPARATOR = "-" * 12


@dataclass
class RenderSummary:
    """What one render_graph call did."""

    placed: int = 0
    connected: int = 0
    skipped: List[Tuple[str, Transition]] = field(default_factory=list)
    artifact: Any = None


class DiagramBuilder(abc.ABC, Generic[Handle]):
    """
    Base class for diagram builders.

    Subclasses implement place_screen and connect. start and finish are
    optional hooks around the two passes.
    """

    async def start(self, graph: ScreenGraph) -> None:
        """Called once before any screen is placed."""
        return None

    @abc.abstractmethod
    async def place_screen(self, screen: Screen) -> Handle:
        """Place one screen and return an opaque handle for it."""

    @abc.abstractmethod
    async def connect(self, source: Handle, target: Handle, label: str) -> None:
        """Draw a connector between two placed screens."""

    async def finish(self) -> Any:
        """Called once after every connector is drawn; returns the artifact."""
        return None


async def render_graph(graph: ScreenGraph, builder: DiagramBuilder) -> RenderSummary:
    """
    Render a ScreenGraph with the given builder.

    Args:
        graph: Parsed screens.
        builder: Builder receiving place/connect calls.

    Returns:
        RenderSummary including the builder's artifact

    Raises:
        RenderError: If the builder fails. Other exceptions are wrapped.
    """
    try:
        return await _render(graph, builder)
    except RenderError:
        raise
    except Exception as exc:
        raise RenderError(str(exc)) from exc


async def _render(graph: ScreenGraph, builder: DiagramBuilder) -> RenderSummary:
    summary = RenderSummary()
    await builder.start(graph)

    # Pass one: place every screen before any connector exists.
    handles: List[Any] = []
    by_name: Dict[str, Any] = {}
    for screen in graph:
        handle = await builder.place_screen(screen)
        handles.append(handle)
        by_name.setdefault(screen.name, handle)
        summary.placed += 1

    # Pass two: connect, resolving targets to their first definition.
    for screen, source in zip(graph, handles):
        for transition in screen.transitions:
            if transition.target not in by_name:
                logger.debug(
                    "Skipping connector %s -> %s: undefined screen",
                    screen.name,
                    transition.target,
                )
                summary.skipped.append((screen.name, transition))
                continue
            target = by_name[transition.target]
            await builder.connect(source, target, transition.label)
            summary.connected += 1

    summary.artifact = await builder.finish()
    logger.debug(
        "Rendered %d screen(s), %d connector(s), skipped %d",
        summary.placed,
        summary.connected,
        len(summary.skipped),
    )
    return summary


def screen_card_lines(screen: Screen) -> List[str]:
    """
    Text content of a screen card.

    Layout:
        [Name]

        P: ...            (requirements, when present, in P S A U order)

        TEXT: ...         (components in order)
        ------------      (before the first action after a section break)
        ACTION: ...
    """
    lines = [f"[{screen.name}]", ""]

    if screen.requirements:
        for category in RequirementCategory:
            if category in screen.requirements:
                lines.append(f"{category.value}: {screen.requirements[category]}")
        lines.append("")

    for index, component in enumerate(screen.components):
        if screen.breaks_before(index):
            lines.append(SECTION_SEPARATOR)
        lines.append(f"{component.kind.name}: {component.name}")

    while lines and not lines[-1]:
        lines.pop()

    return lines
