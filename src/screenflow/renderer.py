"""
ASCII renderer module for screen flow diagrams.

Handles drawing screen cards with shadows and wrapped text using Unicode
box-drawing characters.
"""

from dataclasses import dataclass, field
from typing import List, Set

# Unicode box-drawing characters
BOX_CHARS = {
    "top_left": "┌",
    "top_right": "┐",
    "bottom_left": "└",
    "bottom_right": "┘",
    "horizontal": "─",
    "vertical": "│",
    "tee_right": "├",
    "tee_left": "┤",
    "shadow": "░",
}


@dataclass
class BoxDimensions:
    """Dimensions of a rendered card."""

    width: int  # Total width including border
    height: int  # Total height including border
    text_lines: List[str]  # Wrapped text lines
    padding: int = 1  # Internal horizontal padding
    rule_rows: Set[int] = field(default_factory=set)  # text_lines drawn as rules


class Canvas:
    """
    A 2D character canvas for drawing ASCII art.
    """

    def __init__(self, width: int, height: int, fill_char: str = " "):
        self.width = width
        self.height = height
        self.grid: List[List[str]] = [
            [fill_char for _ in range(width)] for _ in range(height)
        ]

    def set(self, x: int, y: int, char: str) -> None:
        """Set a character at position (x, y)."""
        if 0 <= x < self.width and 0 <= y < self.height:
            self.grid[y][x] = char

    def get(self, x: int, y: int) -> str:
        """Get character at position (x, y)."""
        if 0 <= x < self.width and 0 <= y < self.height:
            return self.grid[y][x]
        return " "

    def draw_text(self, x: int, y: int, text: str) -> None:
        """Draw text starting at position (x, y)."""
        for i, char in enumerate(text):
            self.set(x + i, y, char)

    def render(self) -> str:
        """Render the canvas to a string."""
        lines = []
        for row in self.grid:
            line = "".join(row).rstrip()
            lines.append(line)

        # Remove trailing empty lines
        while lines and not lines[-1]:
            lines.pop()

        return "\n".join(lines)


def wrap_text(text: str, max_width: int) -> List[str]:
    """
    Greedy word wrap. Words longer than max_width are split hard.

    Leading indentation is not preserved; an empty string yields [""].
    """
    max_width = max(1, max_width)
    words: List[str] = []
    for word in text.split():
        while len(word) > max_width:
            words.append(word[:max_width])
            word = word[max_width:]
        words.append(word)

    lines: List[str] = []
    current_line: List[str] = []
    current_length = 0

    for word in words:
        space_needed = 1 if current_line else 0

        if current_length + space_needed + len(word) <= max_width:
            current_line.append(word)
            current_length += space_needed + len(word)
        else:
            lines.append(" ".join(current_line))
            current_line = [word]
            current_length = len(word)

    if current_line:
        lines.append(" ".join(current_line))

    return lines or [""]


class BoxRenderer:
    """
    Renders screen cards with shadows and wrapped, left-aligned text.

    A content line consisting only of ``separator_char`` is drawn as a
    horizontal rule across the card.
    """

    def __init__(
        self,
        max_text_width: int = 36,
        padding: int = 1,
        shadow: bool = True,
        separator_char: str = "-",
    ):
        self.max_text_width = max_text_width
        self.padding = padding
        self.shadow = shadow
        self.separator_char = separator_char

    def is_separator(self, line: str) -> bool:
        return bool(line) and set(line) == {self.separator_char}

    def calculate_box_dimensions(self, content: List[str]) -> BoxDimensions:
        """
        Calculate card dimensions for the given content lines.

        Each line is wrapped to max_text_width; blank lines are kept.
        Separators are recognized before wrapping, so wrapped pieces of a
        long line are always drawn as text.
        """
        lines: List[str] = []
        rule_rows: Set[int] = set()
        for line in content:
            if self.is_separator(line):
                rule_rows.add(len(lines))
                lines.append(line)
            elif not line.strip():
                lines.append(line)
            else:
                lines.extend(wrap_text(line, self.max_text_width))

        if not lines:
            lines = [""]

        text_lines = [line for i, line in enumerate(lines) if i not in rule_rows]
        text_width = max([len(line) for line in text_lines] + [1])

        # Box width = text_width + 2*padding + 2 (for borders)
        box_width = text_width + 2 * self.padding + 2
        box_height = len(lines) + 2

        return BoxDimensions(
            width=box_width,
            height=box_height,
            text_lines=lines,
            padding=self.padding,
            rule_rows=rule_rows,
        )

    def draw_box(
        self, canvas: Canvas, x: int, y: int, dimensions: BoxDimensions
    ) -> None:
        """
        Draw a card with shadow at position (x, y).

        ┌──────────────┐
        │ [Login]      │░
        │              │░
        │ TEXT: Hello  │░
        ├──────────────┤░
        │ ACTION: Next │░
        └──────────────┘░
         ░░░░░░░░░░░░░░░░
        """
        w = dimensions.width
        h = dimensions.height

        canvas.set(x, y, BOX_CHARS["top_left"])
        for i in range(1, w - 1):
            canvas.set(x + i, y, BOX_CHARS["horizontal"])
        canvas.set(x + w - 1, y, BOX_CHARS["top_right"])

        for row in range(1, h - 1):
            line = dimensions.text_lines[row - 1]
            if row - 1 in dimensions.rule_rows:
                canvas.set(x, y + row, BOX_CHARS["tee_right"])
                for i in range(1, w - 1):
                    canvas.set(x + i, y + row, BOX_CHARS["horizontal"])
                canvas.set(x + w - 1, y + row, BOX_CHARS["tee_left"])
            else:
                canvas.set(x, y + row, BOX_CHARS["vertical"])
                canvas.set(x + w - 1, y + row, BOX_CHARS["vertical"])
                canvas.draw_text(x + 1 + dimensions.padding, y + row, line)

            if self.shadow:
                canvas.set(x + w, y + row, BOX_CHARS["shadow"])

        canvas.set(x, y + h - 1, BOX_CHARS["bottom_left"])
        for i in range(1, w - 1):
            canvas.set(x + i, y + h - 1, BOX_CHARS["horizontal"])
        canvas.set(x + w - 1, y + h - 1, BOX_CHARS["bottom_right"])

        if self.shadow:
            canvas.set(x + w, y + h - 1, BOX_CHARS["shadow"])
            for i in range(1, w + 1):
                canvas.set(x + i, y + h, BOX_CHARS["shadow"])
