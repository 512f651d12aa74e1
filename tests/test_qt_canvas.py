from __future__ import annotations

import asyncio
import os

import pytest

pytest.importorskip("PyQt6.QtWidgets")
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtCore import QEvent, QPointF, Qt  # noqa: E402
from PyQt6.QtGui import QColor, QMouseEvent  # noqa: E402
from PyQt6.QtWidgets import QApplication  # noqa: E402

from ovb.adapters import MemoryAdapter  # noqa: E402
from ovb.config import TrackSettings  # noqa: E402
from ovb.core.schema import Feature, FeatureType  # noqa: E402
from ovb.display.renderer import Renderer  # noqa: E402
from ovb.display.scheduler import ManualScheduler  # noqa: E402
from ovb.display.tracks import FeatureTrack  # noqa: E402
from ovb.gui.browser_window import BrowserWindow  # noqa: E402
from ovb.gui.qt_canvas import QtCanvas, QtScheduler, parse_css_font  # noqa: E402


@pytest.fixture(scope="module")
def app():
    return QApplication.instance() or QApplication([])


def test_parse_css_font(app) -> None:
    font = parse_css_font("bold 12px monospace")
    assert font.pixelSize() == 12
    assert font.bold()
    assert parse_css_font("10px sans-serif").pixelSize() == 10


def test_renderer_paints_feature_box(app) -> None:
    canvas = QtCanvas(200, 100)
    renderer = Renderer(canvas, "chr1:0-200", scheduler=ManualScheduler())
    exon = Feature(id="e1", ref_name="chr1", start=50, end=100, type=FeatureType.EXON)
    renderer.tracks.append(FeatureTrack("f", "F", MemoryAdapter([exon])))
    asyncio.run(renderer.layout_all_tracks())
    renderer.draw()

    scale = canvas.device_pixel_ratio
    inside = canvas.image.pixelColor(int(75 * scale), int(75 * scale))
    outside = canvas.image.pixelColor(int(150 * scale), int(75 * scale))
    assert inside != QColor("#ffffff")
    assert outside == QColor("#ffffff")


def test_qt_scheduler_rejects_bad_rate(app) -> None:
    with pytest.raises(ValueError):
        QtScheduler(0)
    assert QtScheduler(50).interval_ms == 20


def _mouse(kind, x, y):
    pos = QPointF(x, y)
    return QMouseEvent(kind, pos, pos, Qt.MouseButton.LeftButton, Qt.MouseButton.LeftButton,
                       Qt.KeyboardModifier.NoModifier)


class PressRecorder:

    def __init__(self):
        self.presses = []

    def mouse_press(self, event):
        self.presses.append((event.position().x(), event.position().y()))


def test_mouse_events_go_to_input_handler(app) -> None:
    canvas = QtCanvas(200, 100)
    handler = PressRecorder()
    canvas.input_handler = handler

    event = _mouse(QEvent.Type.MouseButtonPress, 10, 20)
    canvas.widget.mousePressEvent(event)
    assert handler.presses == [(10.0, 20.0)]
    assert event.isAccepted()

    # no mouse_move on the handler, so QWidget gets the event and ignores it
    event = _mouse(QEvent.Type.MouseMove, 30, 20)
    event.setAccepted(True)
    canvas.widget.mouseMoveEvent(event)
    assert not event.isAccepted()


def test_mouse_events_without_handler(app) -> None:
    canvas = QtCanvas(200, 100)
    canvas.widget.mousePressEvent(_mouse(QEvent.Type.MouseButtonPress, 10, 20))
    canvas.widget.mouseReleaseEvent(_mouse(QEvent.Type.MouseButtonRelease, 10, 20))
    assert canvas.input_handler is None


def test_browser_window_drag_pans(app) -> None:
    spec = {"kind": "gene", "id": "genes", "name": "Genes", "adapter": {"type": "mock_gff3"}}
    window = BrowserWindow("chr1:1000-5000", [spec],
                           track_settings=TrackSettings(geometry={"gene": {"height": 80}}))
    try:
        assert window.renderer.tracks[0].height == 80
        assert window.canvas.input_handler is window

        widget = window.canvas.widget
        widget.mousePressEvent(_mouse(QEvent.Type.MouseButtonPress, 100, 50))
        widget.mouseMoveEvent(_mouse(QEvent.Type.MouseMove, 50, 50))
        widget.mouseReleaseEvent(_mouse(QEvent.Type.MouseButtonRelease, 50, 50))

        vp = window.renderer.viewport
        assert vp.genomic_start > 1000
        assert vp.genomic_end - vp.genomic_start == 4000
        assert window._drag_x is None
    finally:
        window.renderer.stop()
