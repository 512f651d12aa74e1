"""
PyQt6 drawing surface.

The renderer draws each frame into an offscreen ``QImage`` sized for the
device pixel ratio; the widget only blits that image in ``paintEvent``.
"""

import logging
import re
import time
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import List, Optional, Set

from PyQt6.QtCore import QPointF, QRectF, QTimer
from PyQt6.QtGui import QColor, QFont, QFontMetricsF, QImage, QPainter, QPainterPath, QPen
from PyQt6.QtWidgets import QWidget

from ovb.display.canvas import Canvas

logger = logging.getLogger(__name__)

_FONT_RE = re.compile(r"(?:(?P<weight>bold)\s+)?(?P<size>\d+(?:\.\d+)?)px\s+(?P<family>.+)")


def parse_css_font(spec: str) -> QFont:
    """'12px sans-serif' / 'bold 10px monospace' -> QFont."""
    font = QFont()
    m = _FONT_RE.match(spec.strip())
    if m is None:
        return font
    family = m.group("family").strip().strip("'\"")
    if family == "sans-serif":
        font.setStyleHint(QFont.StyleHint.SansSerif)
    elif family == "monospace":
        font.setStyleHint(QFont.StyleHint.Monospace)
    else:
        font.setFamily(family)
    font.setPixelSize(max(1, int(round(float(m.group("size"))))))
    if m.group("weight"):
        font.setBold(True)
    return font


@dataclass
class _Style:
    fill_style: str = "#000000"
    stroke_style: str = "#000000"
    font: str = "10px sans-serif"
    text_align: str = "left"


class QtContext:
    """Canvas-2D style calls forwarded to a QPainter bound for one frame."""

    def __init__(self, background: str = "#ffffff"):
        self.background = background
        self.painter: Optional[QPainter] = None
        self._style = _Style()
        self._stack: List[_Style] = []
        self._base_scale = (1.0, 1.0)
        self._path: Optional[QPainterPath] = None

    @property
    def fill_style(self):
        return self._style.fill_style

    @fill_style.setter
    def fill_style(self, value):
        self._style.fill_style = value

    @property
    def stroke_style(self):
        return self._style.stroke_style

    @stroke_style.setter
    def stroke_style(self, value):
        self._style.stroke_style = value

    @property
    def font(self):
        return self._style.font

    @font.setter
    def font(self, value):
        self._style.font = value

    @property
    def text_align(self):
        return self._style.text_align

    @text_align.setter
    def text_align(self, value):
        self._style.text_align = value

    def bind(self, painter: QPainter):
        self.painter = painter
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.scale(*self._base_scale)

    def unbind(self):
        self.painter = None
        self._stack = []

    def _p(self) -> QPainter:
        if self.painter is None:
            raise RuntimeError("QtContext used outside of a frame")
        return self.painter

    def save(self):
        self._stack.append(replace(self._style))
        self._p().save()

    def restore(self):
        if self._stack:
            self._style = self._stack.pop()
        self._p().restore()

    def translate(self, dx, dy):
        self._p().translate(dx, dy)

    def scale(self, sx, sy):
        if self.painter is None:
            bx, by = self._base_scale
            self._base_scale = (bx * sx, by * sy)
            return
        self.painter.scale(sx, sy)

    def reset_transform(self):
        if self.painter is None:
            self._base_scale = (1.0, 1.0)
            return
        self.painter.resetTransform()

    def clear_rect(self, x, y, width, height):
        self._p().fillRect(QRectF(x, y, width, height), QColor(self.background))

    def fill_rect(self, x, y, width, height):
        self._p().fillRect(QRectF(x, y, width, height), QColor(self.fill_style))

    def fill_text(self, text, x, y):
        painter = self._p()
        font = parse_css_font(self.font)
        painter.setFont(font)
        painter.setPen(QColor(self.fill_style))
        advance = QFontMetricsF(font).horizontalAdvance(str(text))
        if self.text_align == "center":
            x -= advance / 2
        elif self.text_align in ("right", "end"):
            x -= advance
        painter.drawText(QPointF(x, y), str(text))

    def begin_path(self):
        self._path = QPainterPath()

    def move_to(self, x, y):
        if self._path is None:
            self._path = QPainterPath()
        self._path.moveTo(x, y)

    def line_to(self, x, y):
        if self._path is None:
            self._path = QPainterPath()
            self._path.moveTo(x, y)
            return
        self._path.lineTo(x, y)

    def stroke(self):
        if self._path is None:
            return
        self._p().strokePath(self._path, QPen(QColor(self.stroke_style)))


class _CanvasWidget(QWidget):
    """
    Blits the canvas image and hands mouse input to ``canvas.input_handler``.

    The handler may define any of ``mouse_press``, ``mouse_move``,
    ``mouse_release`` and ``wheel``; events it does not handle go to QWidget.
    """

    def __init__(self, canvas: 'QtCanvas', parent=None):
        super().__init__(parent)
        self.canvas = canvas

    def _forward(self, name, event) -> bool:
        handler = getattr(self.canvas.input_handler, name, None)
        if handler is None:
            return False
        handler(event)
        event.accept()
        return True

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.drawImage(QRectF(0, 0, self.canvas.client_width, self.canvas.client_height), self.canvas.image)
        painter.end()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        size = event.size()
        self.canvas.device_pixel_ratio = self.devicePixelRatioF()
        self.canvas.set_client_size(size.width(), size.height())

    def mousePressEvent(self, event):
        if not self._forward("mouse_press", event):
            super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        if not self._forward("mouse_move", event):
            super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        if not self._forward("mouse_release", event):
            super().mouseReleaseEvent(event)

    def wheelEvent(self, event):
        if not self._forward("wheel", event):
            super().wheelEvent(event)


class QtCanvas(Canvas):
    """Canvas backed by a QWidget; ``widget`` is what gets put in a layout."""

    def __init__(self, client_width: int = 960, client_height: int = 500, parent=None,
                 background: str = "#ffffff"):
        self.background = background
        self.input_handler = None
        self.widget = _CanvasWidget(self, parent)
        self.image = QImage()
        super().__init__(client_width, client_height, self.widget.devicePixelRatioF())
        self._allocate_image()
        self.widget.resize(client_width, client_height)

    def _allocate_image(self):
        self.image = QImage(max(1, self.width), max(1, self.height), QImage.Format.Format_ARGB32_Premultiplied)
        self.image.fill(QColor(self.background))

    def set_backing_size(self, width: int, height: int):
        super().set_backing_size(width, height)
        self._allocate_image()

    def _create_context(self):
        return QtContext(background=self.background)

    @contextmanager
    def frame(self):
        ctx = self.get_context()
        painter = QPainter(self.image)
        ctx.bind(painter)
        try:
            yield ctx
        finally:
            ctx.unbind()
            painter.end()
            self.widget.update()


class QtScheduler:
    """Frame scheduler on the Qt event loop (single-shot QTimers)."""

    def __init__(self, frames_per_second: float = 60):
        if frames_per_second <= 0:
            raise ValueError(f"frames_per_second must be positive, got {frames_per_second}")
        self.interval_ms = max(1, int(round(1000 / frames_per_second)))
        self._timers: Set[QTimer] = set()

    def request_frame(self, callback) -> QTimer:
        timer = QTimer()
        timer.setSingleShot(True)

        def fire():
            self._timers.discard(timer)
            callback(time.monotonic())

        timer.timeout.connect(fire)
        self._timers.add(timer)
        timer.start(self.interval_ms)
        return timer

    def cancel_frame(self, handle: QTimer):
        handle.stop()
        self._timers.discard(handle)
