"""Qt front end. Needs the optional PyQt6 dependency (``pip install ovb[gui]``)."""

from .qt_canvas import QtCanvas, QtContext, QtScheduler, parse_css_font
from .browser_window import BrowserWindow, run_browser

__all__ = ['QtCanvas', 'QtContext', 'QtScheduler', 'parse_css_font', 'BrowserWindow', 'run_browser']
