#!/usr/bin/env python3
"""
PyQt6 window around the renderer, with keyboard and mouse navigation.

Arrow keys pan, +/- zoom around the centre, the wheel zooms around the
cursor, dragging pans, and hovering shows the feature under the cursor in the
status bar.
"""

import asyncio
import logging
import sys
from typing import Any, Dict, List, Optional

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QApplication, QMainWindow

from ovb.config import RenderSettings, TrackSettings
from ovb.display.renderer import Renderer
from ovb.display.tracks import track_from_config
from ovb.gui.qt_canvas import QtCanvas, QtScheduler

logger = logging.getLogger(__name__)

PAN_FRACTION = 0.1
ZOOM_STEP = 2.0
WHEEL_ZOOM = 1.25


class BrowserWindow(QMainWindow):

    def __init__(self, locus: str, track_specs: List[Dict[str, Any]],
                 settings: Optional[RenderSettings] = None,
                 track_settings: Optional[TrackSettings] = None):
        super().__init__()
        self.settings = settings or RenderSettings()
        self.setWindowTitle(f"ovb - {locus}")

        self.canvas = QtCanvas(self.settings.width, self.settings.height, parent=self)
        self.setCentralWidget(self.canvas.widget)
        self.canvas.widget.setMouseTracking(True)
        self.canvas.input_handler = self

        self.renderer = Renderer(self.canvas, locus,
                                 scheduler=QtScheduler(self.settings.frames_per_second),
                                 settings=self.settings)
        for spec in track_specs:
            self.renderer.add_track(track_from_config(spec, track_settings))
        self.renderer.viewport.add_listener(lambda vp: self.relayout())
        # pixel positions are cached per width
        self.canvas.add_resize_listener(self.relayout)

        self._drag_x: Optional[float] = None
        self.relayout()

    def relayout(self):
        # no asyncio loop runs under Qt here, so each pass runs to completion
        asyncio.run(self.renderer.layout_all_tracks())
        vp = self.renderer.viewport
        self.statusBar().showMessage(f"{vp.ref_name}:{vp.genomic_start:,}-{vp.genomic_end:,}")

    def keyPressEvent(self, event):
        key = event.key()
        width = self.renderer.viewport.canvas_width
        if key == Qt.Key.Key_Left:
            self.renderer.pan(-width * PAN_FRACTION)
        elif key == Qt.Key.Key_Right:
            self.renderer.pan(width * PAN_FRACTION)
        elif key in (Qt.Key.Key_Plus, Qt.Key.Key_Equal):
            self.renderer.zoom(ZOOM_STEP)
        elif key == Qt.Key.Key_Minus:
            self.renderer.zoom(1 / ZOOM_STEP)
        elif key in (Qt.Key.Key_Q, Qt.Key.Key_Escape):
            self.close()
        else:
            super().keyPressEvent(event)

    def mouse_press(self, event):
        self._drag_x = event.position().x()

    def mouse_release(self, event):
        self._drag_x = None

    def mouse_move(self, event):
        pos = event.position()
        if self._drag_x is not None:
            # dragging right shows what is to the left
            self.renderer.pan(self._drag_x - pos.x())
            self._drag_x = pos.x()
            return
        hit = self.renderer.hit_test(pos.x(), pos.y())
        if hit is not None:
            track, feature = hit
            self.statusBar().showMessage(f"{track.name}: {feature.name} {feature.ref_name}:{feature.start:,}-{feature.end:,}")

    def wheel(self, event):
        steps = event.angleDelta().y() / 120
        if steps:
            self.renderer.zoom(WHEEL_ZOOM ** steps, event.position().x())

    def closeEvent(self, event):
        self.canvas.remove_resize_listener(self.relayout)
        asyncio.run(self.renderer.close())
        super().closeEvent(event)


def run_browser(locus: str, cfg: Dict[str, Any]) -> int:
    app = QApplication.instance() or QApplication(sys.argv)
    window = BrowserWindow(locus, cfg.get("default_tracks", []),
                           settings=RenderSettings.from_config(cfg),
                           track_settings=TrackSettings.from_config(cfg))
    window.show()
    return app.exec()
