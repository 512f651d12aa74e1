"""
A canvas that rasterises onto a character grid for terminal output.

Each cell stands for ``cell_width`` x ``cell_height`` device pixels. Boxes at
least half a cell tall fill with a block glyph, thinner ones become a
horizontal rule, so an intron line and an exon box on the same baseline read
as ``───███───``.
"""

import logging
import math
from typing import List

import numpy as np

from ovb.display.canvas import BaseContext, Canvas
from ovb.draw.colors import Colors

logger = logging.getLogger(__name__)

BLOCK = "█"
HLINE = "─"
VLINE = "│"
DOT = "·"


class TextContext(BaseContext):

    def __init__(self, canvas: 'TextCanvas'):
        super().__init__()
        self.canvas = canvas
        self.allocate()

    def allocate(self):
        rows = max(1, math.ceil(self.canvas.height / self.canvas.cell_height))
        cols = max(1, math.ceil(self.canvas.width / self.canvas.cell_width))
        self.glyphs = np.full((rows, cols), " ", dtype="<U1")
        self.colors = np.full((rows, cols), None, dtype=object)

    @property
    def shape(self):
        return self.glyphs.shape

    def _col(self, x):
        return int(math.floor(x / self.canvas.cell_width))

    def _row(self, y):
        return int(math.floor(y / self.canvas.cell_height))

    def _span(self, lo, hi, cell, limit):
        c0 = int(math.floor(lo / cell))
        c1 = int(math.ceil(hi / cell))
        if c1 <= c0:
            c1 = c0 + 1
        return max(0, c0), min(limit, c1)

    def _device_clear(self, x, y, width, height):
        rows, cols = self.shape
        r0, r1 = self._span(y, y + height, self.canvas.cell_height, rows)
        c0, c1 = self._span(x, x + width, self.canvas.cell_width, cols)
        self.glyphs[r0:r1, c0:c1] = " "
        self.colors[r0:r1, c0:c1] = None

    def _device_fill(self, x, y, width, height):
        rows, cols = self.shape
        r0, r1 = self._span(y, y + height, self.canvas.cell_height, rows)
        c0, c1 = self._span(x, x + width, self.canvas.cell_width, cols)
        if r0 >= r1 or c0 >= c1:
            return
        glyph = BLOCK if height >= self.canvas.cell_height / 2 else HLINE
        self.glyphs[r0:r1, c0:c1] = glyph
        self.colors[r0:r1, c0:c1] = self.fill_style

    def _device_text(self, text, x, y):
        rows, cols = self.shape
        # y is the text baseline; the glyphs sit in the cell just above it
        row = self._row(max(0, y - 1))
        if row < 0 or row >= rows:
            return
        col = self._col(x)
        if self.text_align == "center":
            col -= len(text) // 2
        elif self.text_align in ("right", "end"):
            col -= len(text)
        for i, ch in enumerate(text):
            c = col + i
            if 0 <= c < cols:
                self.glyphs[row, c] = ch
                self.colors[row, c] = self.fill_style

    def _device_line(self, x0, y0, x1, y1):
        rows, cols = self.shape
        cw = self.canvas.cell_width
        ch = self.canvas.cell_height
        if self._row(y0) == self._row(y1):
            row = self._row(y0)
            if not 0 <= row < rows:
                return
            c0, c1 = self._span(min(x0, x1), max(x0, x1), cw, cols)
            self.glyphs[row, c0:c1] = HLINE
            self.colors[row, c0:c1] = self.stroke_style
        elif self._col(x0) == self._col(x1):
            col = self._col(x0)
            if not 0 <= col < cols:
                return
            lo, hi = min(y0, y1), max(y0, y1)
            r0 = max(0, self._row(lo))
            r1 = min(rows, self._row(math.nextafter(hi, -math.inf)) + 1)
            self.glyphs[r0:r1, col] = VLINE
            self.colors[r0:r1, col] = self.stroke_style
        else:
            steps = max(abs(x1 - x0) / cw, abs(y1 - y0) / ch, 1)
            for t in np.linspace(0.0, 1.0, int(math.ceil(steps)) + 1):
                r = self._row(y0 + (y1 - y0) * t)
                c = self._col(x0 + (x1 - x0) * t)
                if 0 <= r < rows and 0 <= c < cols:
                    self.glyphs[r, c] = DOT
                    self.colors[r, c] = self.stroke_style

    def to_lines(self, color: bool = True) -> List[str]:
        lines = []
        for glyph_row, color_row in zip(self.glyphs, self.colors):
            if not color:
                lines.append("".join(glyph_row).rstrip())
                continue
            parts = []
            current = None
            for glyph, clr in zip(glyph_row, color_row):
                if clr != current:
                    parts.append(Colors.get_color(clr) if clr else Colors.RESET)
                    current = clr
                parts.append(glyph)
            parts.append(Colors.RESET)
            lines.append("".join(parts))
        return lines


class TextCanvas(Canvas):
    """
    Terminal surface.

    Args:
        client_width: Logical width in pixels
        client_height: Logical height in pixels
        cell_width: Device pixels per character column
        cell_height: Device pixels per character row
    """

    def __init__(self, client_width: float = 960, client_height: float = 400,
                 cell_width: int = 8, cell_height: int = 10, device_pixel_ratio: float = 1.0):
        if cell_width <= 0 or cell_height <= 0:
            raise ValueError(f"Cell size must be positive, got {cell_width}x{cell_height}")
        self.cell_width = cell_width
        self.cell_height = cell_height
        super().__init__(client_width, client_height, device_pixel_ratio)

    @classmethod
    def for_terminal(cls, columns: int, rows: int, cell_width: int = 8, cell_height: int = 10) -> 'TextCanvas':
        return cls(columns * cell_width, rows * cell_height, cell_width=cell_width, cell_height=cell_height)

    def set_backing_size(self, width: int, height: int):
        super().set_backing_size(width, height)
        if self._context is not None:
            self._context.allocate()

    def _create_context(self):
        return TextContext(self)

    def to_lines(self, color: bool = True) -> List[str]:
        return self.get_context().to_lines(color=color)

    def to_string(self, color: bool = True) -> str:
        return "\n".join(self.to_lines(color=color))
