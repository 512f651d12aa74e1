"""
Mapping between genomic coordinates and canvas pixels.

The viewport covers ``[genomic_start, genomic_end]`` of one reference sequence
across the canvas' logical width. It is mutated in place by ``pan``, ``zoom``
and ``set_region``; listeners are told after every change so layout can follow.
"""

import logging
import math
from typing import TYPE_CHECKING, Callable, List, Optional, Tuple

from ovb.core.schema import Region

if TYPE_CHECKING:
    from ovb.display.canvas import Canvas

logger = logging.getLogger(__name__)

# genomic_to_pixel result for positions that are not on screen
OFF_SCREEN = -1

MIN_RANGE = 1


class Viewport:

    def __init__(self, canvas: 'Canvas', initial_genomic_start: int, initial_genomic_end: int,
                 ref_name: str = ""):
        """
        Args:
            canvas: Surface whose logical width the viewport spans
            initial_genomic_start: First visible position (0-based)
            initial_genomic_end: Last visible position, must be > start
            ref_name: Reference sequence the viewport is on
        """
        self._check_bounds(initial_genomic_start, initial_genomic_end)
        self.canvas = canvas
        self.ref_name = ref_name
        self.genomic_start = int(initial_genomic_start)
        self.genomic_end = int(initial_genomic_end)
        self._listeners: List[Callable[['Viewport'], None]] = []

    @staticmethod
    def _check_bounds(start, end):
        if end <= start:
            raise ValueError(f"Viewport range must be positive, got {start}-{end}")

    @property
    def canvas_width(self) -> float:
        return max(0, self.canvas.client_width)

    @property
    def canvas_height(self) -> float:
        return max(0, self.canvas.client_height)

    @property
    def genomic_range(self) -> int:
        return self.genomic_end - self.genomic_start

    @property
    def bp_per_pixel(self) -> float:
        width = self.canvas_width
        if width <= 0:
            return 0.0
        return self.genomic_range / width

    def region(self) -> Region:
        return Region(self.ref_name, max(0, self.genomic_start), max(0, self.genomic_end))

    def genomic_to_pixel(self, genomic_position: float) -> float:
        """x on the canvas, or OFF_SCREEN outside [genomic_start, genomic_end] or with no canvas width."""
        if genomic_position < self.genomic_start or genomic_position > self.genomic_end:
            return OFF_SCREEN
        width = self.canvas_width
        if width <= 0 or self.genomic_range <= 0:
            return OFF_SCREEN
        relative = genomic_position - self.genomic_start
        return (relative / self.genomic_range) * width

    def pixel_to_genomic(self, x: float) -> float:
        return self.genomic_start + x * self.bp_per_pixel

    def pixel_extent(self, start: int, end: int) -> Optional[Tuple[float, float]]:
        """
        Pixel span of ``[start, end)`` clipped to the visible range.

        Returns None when the interval is not visible at all.
        """
        if self.canvas_width <= 0:
            return None
        if start >= self.genomic_end or end <= self.genomic_start:
            return None
        x0 = self.genomic_to_pixel(max(start, self.genomic_start))
        x1 = self.genomic_to_pixel(min(end, self.genomic_end))
        return x0, x1

    def pan(self, pixel_delta: float):
        """Shift the view by ``pixel_delta`` pixels (positive moves right)."""
        genomic_delta = int(round(pixel_delta * self.bp_per_pixel))
        if genomic_delta == 0:
            return
        self.genomic_start += genomic_delta
        self.genomic_end += genomic_delta
        self._notify()

    def zoom(self, factor: float, center_x: float):
        """
        Zoom around the pixel ``center_x``; ``factor`` > 1 zooms in.

        The genomic position under ``center_x`` stays under it.
        """
        if not math.isfinite(factor) or factor <= 0:
            raise ValueError(f"Zoom factor must be a positive number, got {factor}")

        width = self.canvas_width
        if width > 0:
            fraction = center_x / width
        else:
            fraction = 0.5
        center_genomic = self.genomic_start + fraction * self.genomic_range
        new_range = max(MIN_RANGE, self.genomic_range / factor)

        new_start = int(round(center_genomic - fraction * new_range))
        new_end = int(round(new_start + new_range))
        if new_end <= new_start:
            new_end = new_start + MIN_RANGE
        self._set_bounds(new_start, new_end)

    def set_region(self, start: int, end: int, ref_name: Optional[str] = None):
        self._check_bounds(start, end)
        changed_ref = ref_name is not None and ref_name != self.ref_name
        if changed_ref:
            self.ref_name = ref_name
        if not self._set_bounds(int(start), int(end)) and changed_ref:
            self._notify()

    def _set_bounds(self, start: int, end: int) -> bool:
        if start == self.genomic_start and end == self.genomic_end:
            return False
        self.genomic_start = start
        self.genomic_end = end
        self._notify()
        return True

    def add_listener(self, callback: Callable[['Viewport'], None]):
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: Callable[['Viewport'], None]):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self):
        logger.debug(f"viewport moved to {self.ref_name}:{self.genomic_start}-{self.genomic_end}")
        for callback in list(self._listeners):
            callback(self)

    def __repr__(self):
        return f"Viewport({self.ref_name}:{self.genomic_start}-{self.genomic_end}, width={self.canvas_width})"
