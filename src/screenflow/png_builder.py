"""
PNG diagram builder.

Renders screen cards as boxes with hatched shadows and connectors as
straight arrows with captions, using Pillow. Fonts are loaded off the event
loop before the first screen is placed.
"""

import asyncio
import logging
import math
import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from PIL import Image, ImageDraw, ImageFont

from .builder import SECTION_SEPARATOR, DiagramBuilder, screen_card_lines
from .errors import FontLoadError
from .graph import ScreenGraph
from .layout import LayoutResult, NetworkXLayout
from .models import Screen

logger = logging.getLogger(__name__)

# Tried in order when no font is configured
SYSTEM_FONTS = [
    # Linux
    "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf",
    "/usr/share/fonts/truetype/freefont/FreeMono.ttf",
    # macOS
    "/System/Library/Fonts/Menlo.ttc",
    "/System/Library/Fonts/Monaco.ttf",
    # Windows
    "C:/Windows/Fonts/consola.ttf",
]

Box = Tuple[int, int, int, int]  # x, y, width, height


def load_font(size: int, font: Optional[str] = None) -> ImageFont.ImageFont:
    """
    Load a font for card text.

    Args:
        size: Font size in pixels
        font: Font file path or name. When given, failure is fatal.

    Returns:
        A Pillow font

    Raises:
        FontLoadError: If ``font`` was given and cannot be loaded
    """
    if font:
        try:
            return ImageFont.truetype(font, size)
        except OSError as exc:
            raise FontLoadError(font, str(exc)) from exc

    for path in SYSTEM_FONTS:
        if os.path.exists(path):
            try:
                return ImageFont.truetype(path, size)
            except OSError:
                logger.debug("Font %s exists but could not be loaded", path)
                continue

    try:
        return ImageFont.load_default(size=size)
    except TypeError:
        # Older Pillow versions don't support size parameter
        return ImageFont.load_default()


class PNGDiagramBuilder(DiagramBuilder[int]):
    """
    Builds a PNG image of the screen flow.

    Handles are screen indexes in placement order. ``finish`` saves the
    image when ``output_path`` is set and returns the path; otherwise it
    returns the Pillow image.
    """

    def __init__(
        self,
        output_path: Optional[Union[str, Path]] = None,
        font: Optional[str] = None,
        font_size: int = 12,
        scale: int = 2,
        box_padding: int = 12,
        box_min_width: int = 140,
        horizontal_spacing: int = 80,
        vertical_spacing: int = 70,
        shadow_offset: int = 5,
        margin: int = 40,
    ):
        self.output_path = output_path
        self.font_name = font
        self.font_size = font_size
        self.scale = scale
        self.box_padding = box_padding
        self.box_min_width = box_min_width
        self.horizontal_spacing = horizontal_spacing
        self.vertical_spacing = vertical_spacing
        self.shadow_offset = shadow_offset
        self.margin = margin

        # Colors
        self.bg_color = (255, 255, 255)
        self.box_fill = (255, 250, 205)
        self.box_outline = (0, 0, 0)
        self.shadow_color = (160, 160, 160)
        self.text_color = (0, 0, 0)
        self.line_color = (0, 0, 0)
        self.label_color = (60, 60, 60)

        self.font: Optional[ImageFont.ImageFont] = None
        self._reset()

    def _reset(self) -> None:
        self.layout: LayoutResult = LayoutResult()
        self.cards: List[List[str]] = []
        self.connectors: List[Tuple[int, int, str]] = []
        self.node_positions: Dict[int, Box] = {}

    async def start(self, graph: ScreenGraph) -> None:
        self._reset()
        self.font = await asyncio.to_thread(
            load_font, self.font_size * self.scale, self.font_name
        )
        self.layout = NetworkXLayout().layout(graph)

    async def place_screen(self, screen: Screen) -> int:
        if self.font is None:
            self.font = await asyncio.to_thread(
                load_font, self.font_size * self.scale, self.font_name
            )
        self.cards.append(screen_card_lines(screen))
        return len(self.cards) - 1

    async def connect(self, source: int, target: int, label: str) -> None:
        self.connectors.append((source, target, label))

    async def finish(self) -> Union[str, Image.Image]:
        image = self.render_image()
        if self.output_path is None:
            return image
        output_path = str(self.output_path)
        await asyncio.to_thread(image.save, output_path, "PNG")
        logger.info("Saved screen flow to %s", output_path)
        return output_path

    def render_image(self) -> Image.Image:
        """Draw every placed card and recorded connector onto a new image."""
        temp_draw = ImageDraw.Draw(Image.new("RGB", (10, 10), self.bg_color))
        sizes = [self._calculate_box_dimensions(lines, temp_draw) for lines in self.cards]

        if not sizes:
            # Placeholder for an empty flow
            return Image.new("RGB", (200 * self.scale, 100 * self.scale), self.bg_color)

        canvas_width, canvas_height = self._calculate_positions(sizes)

        img = Image.new("RGB", (canvas_width, canvas_height), self.bg_color)
        draw = ImageDraw.Draw(img)

        for x, y, w, h in self.node_positions.values():
            self._draw_hatched_shadow(draw, x, y, w, h)

        for index, (x, y, w, h) in self.node_positions.items():
            self._draw_box(draw, x, y, w, h, self.cards[index])

        for source, target, label in self.connectors:
            self._draw_connector(draw, source, target, label)

        return img

    def _layers(self) -> List[List[int]]:
        layers = [
            [i for i in layer if i < len(self.cards)] for layer in self.layout.layers
        ]
        layers = [layer for layer in layers if layer]
        laid_out = {i for layer in layers for i in layer}
        leftover = [i for i in range(len(self.cards)) if i not in laid_out]
        if leftover:
            layers.append(leftover)
        return layers

    def _calculate_box_dimensions(
        self, lines: List[str], draw: ImageDraw.ImageDraw
    ) -> Tuple[int, int]:
        """Calculate box dimensions based on text content."""
        line_spacing = 4 * self.scale
        max_width = 0
        total_height = 0

        for i, line in enumerate(lines):
            bbox = draw.textbbox((0, 0), line or " ", font=self.font)
            max_width = max(max_width, bbox[2] - bbox[0])
            total_height += self._line_height(draw)
            if i > 0:
                total_height += line_spacing

        padding = self.box_padding * 2 * self.scale
        width = max(self.box_min_width * self.scale, max_width + padding)
        height = total_height + padding
        return width, height

    def _line_height(self, draw: ImageDraw.ImageDraw) -> int:
        bbox = draw.textbbox((0, 0), "Mg", font=self.font)
        return bbox[3] - bbox[1]

    def _calculate_positions(self, sizes: List[Tuple[int, int]]) -> Tuple[int, int]:
        """
        Assign pixel boxes per layer, top to bottom, centering each layer.

        Returns:
            Canvas width and height
        """
        margin = self.margin * self.scale
        h_gap = self.horizontal_spacing * self.scale
        v_gap = self.vertical_spacing * self.scale

        layers = self._layers()
        layer_widths = [
            sum(sizes[i][0] for i in layer) + h_gap * (len(layer) - 1)
            for layer in layers
        ]
        max_layer_width = max(layer_widths)

        y = margin
        for layer, layer_width in zip(layers, layer_widths):
            x = margin + (max_layer_width - layer_width) // 2
            layer_height = max(sizes[i][1] for i in layer)
            for index in layer:
                w, h = sizes[index]
                self.node_positions[index] = (x, y, w, h)
                x += w + h_gap
            y += layer_height + v_gap

        canvas_width = max_layer_width + 2 * margin
        canvas_height = y - v_gap + margin
        return canvas_width, canvas_height

    def _draw_hatched_shadow(
        self, draw: ImageDraw.ImageDraw, x: int, y: int, w: int, h: int
    ) -> None:
        """Draw a shadow effect using a checkerboard pattern."""
        s = self.shadow_offset * self.scale
        pixel_size = max(2, self.scale)

        def draw_checkerboard(region_x, region_y, region_w, region_h):
            row = 0
            for py in range(region_y, region_y + region_h, pixel_size):
                col = 0
                for px in range(region_x, region_x + region_w, pixel_size):
                    if (row + col) % 2 == 0:
                        draw.rectangle(
                            [px, py, px + pixel_size - 1, py + pixel_size - 1],
                            fill=self.shadow_color,
                        )
                    col += 1
                row += 1

        draw_checkerboard(x + w, y + s, s, h)
        draw_checkerboard(x + s, y + h, w - s, s)

    def _draw_box(
        self,
        draw: ImageDraw.ImageDraw,
        x: int,
        y: int,
        w: int,
        h: int,
        lines: List[str],
    ) -> None:
        """Draw a card with left-aligned text and separator rules."""
        line_width = max(1, self.scale)
        draw.rectangle(
            [x, y, x + w, y + h],
            fill=self.box_fill,
            outline=self.box_outline,
            width=line_width,
        )

        line_spacing = 4 * self.scale
        line_height = self._line_height(draw)
        text_x = x + self.box_padding * self.scale
        current_y = y + self.box_padding * self.scale

        for line in lines:
            if line == SECTION_SEPARATOR:
                rule_y = current_y + line_height // 2
                draw.line(
                    [(x, rule_y), (x + w, rule_y)],
                    fill=self.box_outline,
                    width=line_width,
                )
            elif line:
                draw.text((text_x, current_y), line, fill=self.text_color, font=self.font)
            current_y += line_height + line_spacing

    def _draw_connector(
        self, draw: ImageDraw.ImageDraw, source: int, target: int, label: str
    ) -> None:
        line_width = max(1, self.scale)

        if source == target:
            points = self._self_loop_points(self.node_positions[source])
        else:
            points = self._straight_points(
                self.node_positions[source], self.node_positions[target]
            )

        draw.line(points, fill=self.line_color, width=line_width)
        self._draw_arrowhead(draw, points[-2], points[-1])

        if label:
            mid = points[len(points) // 2 - 1]
            nxt = points[len(points) // 2]
            self._draw_label(
                draw, ((mid[0] + nxt[0]) // 2, (mid[1] + nxt[1]) // 2), label
            )

    @staticmethod
    def _box_center(box: Box) -> Tuple[float, float]:
        x, y, w, h = box
        return x + w / 2, y + h / 2

    def _clip_to_border(
        self, box: Box, toward: Tuple[float, float]
    ) -> Tuple[int, int]:
        """Point where the ray from the box center toward ``toward`` exits it."""
        cx, cy = self._box_center(box)
        _, _, w, h = box
        dx = toward[0] - cx
        dy = toward[1] - cy
        if dx == 0 and dy == 0:
            return int(cx), int(cy)
        scales = []
        if dx:
            scales.append((w / 2) / abs(dx))
        if dy:
            scales.append((h / 2) / abs(dy))
        t = min(scales)
        return int(cx + dx * t), int(cy + dy * t)

    def _straight_points(self, source: Box, target: Box) -> List[Tuple[int, int]]:
        start = self._clip_to_border(source, self._box_center(target))
        end = self._clip_to_border(target, self._box_center(source))
        return [start, end]

    def _self_loop_points(self, box: Box) -> List[Tuple[int, int]]:
        x, y, w, h = box
        reach = 20 * self.scale
        right = x + w
        top = y + h // 3
        bottom = y + 2 * h // 3
        return [
            (right, top),
            (right + reach, top),
            (right + reach, bottom),
            (right, bottom),
        ]

    def _draw_label(
        self, draw: ImageDraw.ImageDraw, center: Tuple[int, int], text: str
    ) -> None:
        bbox = draw.textbbox((0, 0), text, font=self.font)
        tw = bbox[2] - bbox[0]
        th = bbox[3] - bbox[1]
        pad = 2 * self.scale
        left = center[0] - tw // 2
        top = center[1] - th // 2
        draw.rectangle(
            [left - pad, top - pad, left + tw + pad, top + th + pad],
            fill=self.bg_color,
        )
        draw.text((left, top - bbox[1]), text, fill=self.label_color, font=self.font)

    def _draw_arrowhead(
        self,
        draw: ImageDraw.ImageDraw,
        from_point: Tuple[int, int],
        to_point: Tuple[int, int],
    ) -> None:
        """Draw an arrowhead at the end of a line."""
        x1, y1 = from_point
        x2, y2 = to_point

        arrow_size = 8 * self.scale
        angle = math.atan2(y2 - y1, x2 - x1)

        angle1 = angle + math.pi * 0.8
        angle2 = angle - math.pi * 0.8

        ax1 = x2 + arrow_size * math.cos(angle1)
        ay1 = y2 + arrow_size * math.sin(angle1)
        ax2 = x2 + arrow_size * math.cos(angle2)
        ay2 = y2 + arrow_size * math.sin(angle2)

        draw.polygon([(x2, y2), (ax1, ay1), (ax2, ay2)], fill=self.line_color)
