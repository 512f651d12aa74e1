"""
Drawing surfaces and the Canvas-2D style context the renderer draws through.

A canvas has a logical size (``client_width`` x ``client_height``) in which
all drawing coordinates are expressed, and a backing size in device pixels
(logical size times the device pixel ratio). Contexts keep a save/restore
stack of fill/stroke/font state and an axis-aligned transform.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Any, Callable, Iterator, List, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)


class DrawContext(Protocol):
    fill_style: str
    stroke_style: str
    font: str
    text_align: str

    def clear_rect(self, x: float, y: float, width: float, height: float) -> None: ...
    def fill_rect(self, x: float, y: float, width: float, height: float) -> None: ...
    def fill_text(self, text: str, x: float, y: float) -> None: ...
    def begin_path(self) -> None: ...
    def move_to(self, x: float, y: float) -> None: ...
    def line_to(self, x: float, y: float) -> None: ...
    def stroke(self) -> None: ...
    def save(self) -> None: ...
    def restore(self) -> None: ...
    def translate(self, dx: float, dy: float) -> None: ...
    def scale(self, sx: float, sy: float) -> None: ...
    def reset_transform(self) -> None: ...


@dataclass
class ContextState:
    fill_style: str = "#000000"
    stroke_style: str = "#000000"
    font: str = "10px sans-serif"
    text_align: str = "left"
    # axis-aligned transform: device = logical * scale + offset
    sx: float = 1.0
    sy: float = 1.0
    tx: float = 0.0
    ty: float = 0.0


class BaseContext:
    """
    State and transform bookkeeping shared by the software contexts.

    Subclasses receive every primitive already mapped to device pixels through
    the ``_device_*`` hooks.
    """

    def __init__(self):
        self._state = ContextState()
        self._stack: List[ContextState] = []
        self._path: List[List[Tuple[float, float]]] = []

    @property
    def fill_style(self):
        return self._state.fill_style

    @fill_style.setter
    def fill_style(self, value):
        self._state.fill_style = value

    @property
    def stroke_style(self):
        return self._state.stroke_style

    @stroke_style.setter
    def stroke_style(self, value):
        self._state.stroke_style = value

    @property
    def font(self):
        return self._state.font

    @font.setter
    def font(self, value):
        self._state.font = value

    @property
    def text_align(self):
        return self._state.text_align

    @text_align.setter
    def text_align(self, value):
        self._state.text_align = value

    def save(self):
        self._stack.append(replace(self._state))

    def restore(self):
        if self._stack:
            self._state = self._stack.pop()

    def translate(self, dx, dy):
        s = self._state
        s.tx += dx * s.sx
        s.ty += dy * s.sy

    def scale(self, sx, sy):
        self._state.sx *= sx
        self._state.sy *= sy

    def reset_transform(self):
        s = self._state
        s.sx, s.sy, s.tx, s.ty = 1.0, 1.0, 0.0, 0.0

    def to_device(self, x, y) -> Tuple[float, float]:
        s = self._state
        return x * s.sx + s.tx, y * s.sy + s.ty

    def _device_rect(self, x, y, width, height):
        x0, y0 = self.to_device(x, y)
        x1, y1 = self.to_device(x + width, y + height)
        return min(x0, x1), min(y0, y1), abs(x1 - x0), abs(y1 - y0)

    def clear_rect(self, x, y, width, height):
        self._device_clear(*self._device_rect(x, y, width, height))

    def fill_rect(self, x, y, width, height):
        self._device_fill(*self._device_rect(x, y, width, height))

    def fill_text(self, text, x, y):
        dx, dy = self.to_device(x, y)
        self._device_text(str(text), dx, dy)

    def begin_path(self):
        self._path = []

    def move_to(self, x, y):
        self._path.append([self.to_device(x, y)])

    def line_to(self, x, y):
        if not self._path:
            self._path.append([self.to_device(x, y)])
            return
        self._path[-1].append(self.to_device(x, y))

    def stroke(self):
        for subpath in self._path:
            for (x0, y0), (x1, y1) in zip(subpath, subpath[1:]):
                self._device_line(x0, y0, x1, y1)

    def _device_clear(self, x, y, width, height):
        pass

    def _device_fill(self, x, y, width, height):
        pass

    def _device_text(self, text, x, y):
        pass

    def _device_line(self, x0, y0, x1, y1):
        pass


class Canvas:
    """
    A drawing surface with a logical size and a device-pixel backing store.

    Subclasses provide the context through ``_create_context``; returning None
    means the surface cannot be drawn on.
    """

    def __init__(self, client_width: float, client_height: float, device_pixel_ratio: float = 1.0):
        self.client_width = client_width
        self.client_height = client_height
        self.device_pixel_ratio = device_pixel_ratio or 1.0
        self.width = int(client_width * self.device_pixel_ratio)
        self.height = int(client_height * self.device_pixel_ratio)
        self._context = None
        self._resize_listeners: List[Callable[[], None]] = []

    def bounding_size(self) -> Tuple[float, float]:
        return self.client_width, self.client_height

    def set_backing_size(self, width: int, height: int):
        self.width = int(width)
        self.height = int(height)

    def set_client_size(self, width: float, height: float):
        """Change the logical size, as a host window resize would, and notify listeners."""
        self.client_width = width
        self.client_height = height
        for callback in list(self._resize_listeners):
            callback()

    def add_resize_listener(self, callback: Callable[[], None]):
        if callback not in self._resize_listeners:
            self._resize_listeners.append(callback)

    def remove_resize_listener(self, callback: Callable[[], None]):
        if callback in self._resize_listeners:
            self._resize_listeners.remove(callback)

    def get_context(self, kind: str = "2d") -> Optional[Any]:
        if kind != "2d":
            return None
        if self._context is None:
            self._context = self._create_context()
        return self._context

    def _create_context(self):
        return None

    @contextmanager
    def frame(self) -> Iterator[Any]:
        """Bracket one frame of drawing."""
        yield self.get_context()


class RecordingContext(BaseContext):
    """Records every primitive, in device pixels, for inspection."""

    def __init__(self):
        super().__init__()
        self.calls: List[Tuple] = []

    def reset(self):
        self.calls = []

    def _device_clear(self, x, y, width, height):
        self.calls.append(("clear_rect", x, y, width, height))

    def _device_fill(self, x, y, width, height):
        self.calls.append(("fill_rect", x, y, width, height, self.fill_style))

    def _device_text(self, text, x, y):
        self.calls.append(("fill_text", text, x, y, self.fill_style, self.text_align))

    def _device_line(self, x0, y0, x1, y1):
        self.calls.append(("line", x0, y0, x1, y1, self.stroke_style))

    def ops(self, name: str) -> List[Tuple]:
        return [c for c in self.calls if c[0] == name]

    def texts(self) -> List[str]:
        return [c[1] for c in self.ops("fill_text")]


class RecordingCanvas(Canvas):
    """Canvas whose context records draw calls; each frame starts a fresh record."""

    def __init__(self, client_width: float = 960, client_height: float = 400, device_pixel_ratio: float = 1.0):
        super().__init__(client_width, client_height, device_pixel_ratio)
        self.frame_count = 0

    def _create_context(self):
        return RecordingContext()

    @contextmanager
    def frame(self):
        ctx = self.get_context()
        ctx.reset()
        self.frame_count += 1
        yield ctx
