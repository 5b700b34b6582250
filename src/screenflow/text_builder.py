"""
Character-canvas diagram builder.

Screens are drawn as cards on a Canvas, one row of cards per layout layer.
Connectors are listed underneath the cards, since straight ASCII lines
between multi-line cards would cut through their text.
"""

from typing import Dict, List, Tuple

from .builder import DiagramBuilder, screen_card_lines
from .graph import ScreenGraph
from .layout import LayoutResult, NetworkXLayout
from .models import Screen
from .renderer import BoxDimensions, BoxRenderer, Canvas


class TextDiagramBuilder(DiagramBuilder[int]):
    """
    Builds a plain-text diagram.

    Handles are screen indexes in placement order.

    Example:
        >>> builder = TextDiagramBuilder()
        >>> summary = asyncio.run(render_graph(parse_screens(text), builder))
        >>> print(summary.artifact)
    """

    def __init__(
        self,
        max_text_width: int = 36,
        horizontal_spacing: int = 4,
        vertical_spacing: int = 2,
        shadow: bool = True,
    ):
        """
        Initialize the builder.

        Args:
            max_text_width: Maximum width for card text before wrapping
            horizontal_spacing: Columns between cards in the same layer
            vertical_spacing: Rows between layers
            shadow: Whether to draw card shadows
        """
        self.horizontal_spacing = horizontal_spacing
        self.vertical_spacing = vertical_spacing
        self.shadow = shadow
        self.box_renderer = BoxRenderer(max_text_width=max_text_width, shadow=shadow)
        self._reset()

    def _reset(self) -> None:
        self.layout: LayoutResult = LayoutResult()
        self.names: List[str] = []
        self.dimensions: List[BoxDimensions] = []
        self.connectors: List[Tuple[int, int, str]] = []

    async def start(self, graph: ScreenGraph) -> None:
        self._reset()
        self.layout = NetworkXLayout().layout(graph)

    async def place_screen(self, screen: Screen) -> int:
        index = len(self.names)
        self.names.append(screen.name)
        self.dimensions.append(
            self.box_renderer.calculate_box_dimensions(screen_card_lines(screen))
        )
        return index

    async def connect(self, source: int, target: int, label: str) -> None:
        self.connectors.append((source, target, label))

    async def finish(self) -> str:
        parts = []
        if self.names:
            parts.append(self._draw_cards())
        if self.connectors:
            parts.append(self._connector_listing())
        return "\n\n".join(parts)

    def _calculate_positions(self) -> Dict[int, Tuple[int, int]]:
        """
        Calculate x,y positions for each card.
        Layers stack top to bottom; cards in a layer run left to right.
        """
        positions: Dict[int, Tuple[int, int]] = {}
        shadow = 1 if self.shadow else 0
        y = 0

        layers = [
            [i for i in layer if i < len(self.names)] for layer in self.layout.layers
        ]
        layers = [layer for layer in layers if layer]
        laid_out = {i for layer in layers for i in layer}
        # Screens placed without start() share a final row.
        leftover = [i for i in range(len(self.names)) if i not in laid_out]
        if leftover:
            layers.append(leftover)

        for layer in layers:
            x = 0
            layer_height = 0
            for index in layer:
                dims = self.dimensions[index]
                positions[index] = (x, y)
                x += dims.width + shadow + self.horizontal_spacing
                layer_height = max(layer_height, dims.height + shadow)
            y += layer_height + self.vertical_spacing

        return positions

    def _draw_cards(self) -> str:
        positions = self._calculate_positions()
        shadow = 1 if self.shadow else 0

        width = max(
            x + self.dimensions[i].width + shadow for i, (x, _) in positions.items()
        )
        height = max(
            y + self.dimensions[i].height + shadow for i, (_, y) in positions.items()
        )

        canvas = Canvas(width + 1, height + 1)
        for index, (x, y) in positions.items():
            self.box_renderer.draw_box(canvas, x, y, self.dimensions[index])
        return canvas.render()

    def _connector_listing(self) -> str:
        lines = ["Transitions:"]
        for source, target, label in self.connectors:
            arrow = f"──{label}──►" if label else "──►"
            lines.append(f"  [{self.names[source]}] {arrow} [{self.names[target]}]")
        return "\n".join(lines)
