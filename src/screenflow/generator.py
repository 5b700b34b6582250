"""
Main screen flow generator module.

Combines parsing, layout and rendering to produce screen flow diagrams
as text or PNG.
"""

import asyncio
from pathlib import Path
from typing import Optional

from .builder import RenderSummary, render_graph
from .graph import ScreenGraph
from .parser import Parser
from .png_builder import PNGDiagramBuilder
from .text_builder import TextDiagramBuilder
from .validation import ValidationReport, validate_graph


class ScreenFlowGenerator:
    """
    Generate screen flow diagrams from flow notation.

    Example:
        >>> generator = ScreenFlowGenerator()
        >>> diagram = generator.generate('''
        ...     [Login]
        ...     E Email
        ...     A Sign in => Home
        ...     [Home]
        ... ''')
        >>> print(diagram)
    """

    def __init__(
        self,
        max_text_width: int = 36,
        horizontal_spacing: int = 4,
        vertical_spacing: int = 2,
        shadow: bool = True,
        font: Optional[str] = None,
    ):
        """
        Initialize the screen flow generator.

        Args:
            max_text_width: Maximum width for card text before wrapping
            horizontal_spacing: Space between cards horizontally
            vertical_spacing: Space between layers vertically
            shadow: Whether to draw card shadows
            font: Font file or name for PNG output. If set and it cannot be
                loaded, PNG output fails with FontLoadError.
        """
        self.max_text_width = max_text_width
        self.horizontal_spacing = horizontal_spacing
        self.vertical_spacing = vertical_spacing
        self.shadow = shadow
        self.font = font

        self.parser = Parser()

    def parse(self, input_text: str) -> ScreenGraph:
        """Parse flow notation without rendering."""
        return self.parser.parse(input_text)

    def validate(self, input_text: str) -> ValidationReport:
        """Parse flow notation and report duplicate, dangling and unreachable screens."""
        return validate_graph(self.parser.parse(input_text))

    def generate(self, input_text: str) -> str:
        """
        Generate a text diagram from flow notation.

        Args:
            input_text: Flow notation

        Returns:
            Text diagram; empty string for input without screens
        """
        summary = self._render(input_text, self._text_builder())
        return summary.artifact

    def save_txt(self, input_text: str, filename: str) -> None:
        """
        Generate a text diagram and save it to a file.

        Args:
            input_text: Flow notation
            filename: Output filename (should end in .txt)
        """
        diagram = self.generate(input_text)
        Path(filename).write_text(diagram, encoding="utf-8")

    def save_png(
        self,
        input_text: str,
        filename: str,
        font_size: int = 12,
        scale: int = 2,
        font: Optional[str] = None,
    ) -> str:
        """
        Generate a diagram and save it as a PNG image.

        Args:
            input_text: Flow notation
            filename: Output filename (should end in .png)
            font_size: Font size in points
            font: Font name to use (overrides instance font if provided)
            scale: Resolution multiplier for crisp output

        Returns:
            The path written

        Raises:
            FontLoadError: If the configured font cannot be loaded
        """
        builder = PNGDiagramBuilder(
            output_path=filename,
            font=font or self.font,
            font_size=font_size,
            scale=scale,
        )
        return self._render(input_text, builder).artifact

    def _text_builder(self) -> TextDiagramBuilder:
        return TextDiagramBuilder(
            max_text_width=self.max_text_width,
            horizontal_spacing=self.horizontal_spacing,
            vertical_spacing=self.vertical_spacing,
            shadow=self.shadow,
        )

    def _render(self, input_text: str, builder) -> RenderSummary:
        graph = self.parser.parse(input_text)
        return asyncio.run(render_graph(graph, builder))


def generate_screen_flow(input_text: str, **kwargs) -> str:
    """
    Convenience function to generate a text diagram.

    Args:
        input_text: Flow notation
        **kwargs: Additional parameters for ScreenFlowGenerator

    Returns:
        Text diagram
    """
    generator = ScreenFlowGenerator(**kwargs)
    return generator.generate(input_text)
