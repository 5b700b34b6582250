"""
screenflow - Screen flow diagrams from plain text

Compiles a line-oriented notation describing application screens, their UI
elements, requirements and transitions into a screen graph, and renders it
as a text or PNG diagram.

Example:
    >>> from screenflow import parse_screens
    >>> graph = parse_screens('''
    ...     [Login]
    ...     E Email
    ...     A Sign in => Home
    ...     [Home]
    ... ''')
    >>> [screen.name for screen in graph]
    ['Login', 'Home']

Rendering Example:
    >>> from screenflow import ScreenFlowGenerator
    >>> print(ScreenFlowGenerator().generate("[Login]\\n=> Home\\n[Home]"))
"""

from .builder import DiagramBuilder, RenderSummary, render_graph, screen_card_lines
from .errors import FontLoadError, RenderError, ScreenflowError
from .generator import ScreenFlowGenerator, generate_screen_flow
from .graph import ScreenGraph
from .host import FlowHost, Notification
from .layout import LayoutResult, NetworkXLayout, NodeLayout, compute_layout
from .models import (
    Component,
    ComponentKind,
    RequirementCategory,
    Screen,
    SectionBreak,
    Transition,
)
from .parser import ParseResult, Parser, SkippedLine, parse_screens
from .png_builder import PNGDiagramBuilder
from .text_builder import TextDiagramBuilder
from .validation import ValidationReport, validate_graph

__version__ = "0.3.0"

__all__ = [
    # Main API
    "ScreenFlowGenerator",
    "generate_screen_flow",
    # Parser
    "Parser",
    "ParseResult",
    "SkippedLine",
    "parse_screens",
    # Model
    "Screen",
    "Component",
    "ComponentKind",
    "Transition",
    "SectionBreak",
    "RequirementCategory",
    "ScreenGraph",
    # Validation
    "ValidationReport",
    "validate_graph",
    # Layout
    "NetworkXLayout",
    "LayoutResult",
    "NodeLayout",
    "compute_layout",
    # Builders
    "DiagramBuilder",
    "RenderSummary",
    "render_graph",
    "screen_card_lines",
    "TextDiagramBuilder",
    "PNGDiagramBuilder",
    # Host
    "FlowHost",
    "Notification",
    # Errors
    "ScreenflowError",
    "RenderError",
    "FontLoadError",
]
