#!/usr/bin/env python3
"""
Launcher: render the configured tracks for a locus.

Prints a frame to the terminal by default; ``--gui`` opens the PyQt6 window.
"""

import argparse
import asyncio
import logging
import shutil
import sys
from typing import List, Optional

from ovb.config import RenderSettings, TrackSettings, get_config
from ovb.display.renderer import Renderer
from ovb.display.scheduler import ManualScheduler
from ovb.display.text_canvas import TextCanvas
from ovb.display.tracks import track_from_config
from ovb.errors import LocusError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ovb-browse", description="Render genomic tracks for a locus.")
    parser.add_argument("locus", nargs="?", default=None,
                        help="Locus as <ref>:<start>-<end> (default from config)")
    parser.add_argument("--frames", "-n", default=1, type=int,
                        help="Frames to draw before printing (default 1)")
    parser.add_argument("--columns", "-c", default=None, type=int,
                        help="Terminal columns to use (default: terminal width)")
    parser.add_argument("--zoom", "-z", default=None, type=float,
                        help="Zoom factor applied around the centre before drawing (>1 zooms in)")
    parser.add_argument("--pan", "-p", default=None, type=float,
                        help="Pixels to pan before drawing (positive moves right)")
    parser.add_argument("--no-color", default=False, action="store_true",
                        help="Plain text output")
    parser.add_argument("--config", default=None, type=str,
                        help="YAML file overriding the default configuration")
    parser.add_argument("--gui", default=False, action="store_true",
                        help="Open the Qt window instead of printing (needs PyQt6)")
    parser.add_argument("--debug", "-d", default=False, action="store_true",
                        help="Debug logging")
    return parser


async def render_text(locus: str, cfg: dict, frames: int = 1, columns: Optional[int] = None,
                      zoom: Optional[float] = None, pan: Optional[float] = None,
                      color: bool = True) -> List[str]:
    """Lay out the configured tracks for ``locus`` and return the last frame as lines."""
    settings = RenderSettings.from_config(cfg)
    cell = cfg.get("text_canvas", {}) or {}
    cell_width = cell.get("cell_width", 8)
    cell_height = cell.get("cell_height", 10)

    width = settings.width
    if columns:
        width = columns * cell_width
    canvas = TextCanvas(width, settings.height, cell_width=cell_width, cell_height=cell_height)

    scheduler = ManualScheduler()
    renderer = Renderer(canvas, locus, scheduler=scheduler, settings=settings)
    renderer.on_layout_error(lambda track, err: print(f"warning: {err}", file=sys.stderr))
    try:
        track_settings = TrackSettings.from_config(cfg)
        for spec in cfg.get("default_tracks", []):
            renderer.add_track(track_from_config(spec, track_settings))

        if zoom:
            renderer.zoom(zoom)
        if pan:
            renderer.pan(pan)

        await renderer.wait_for_layout()
        scheduler.step(max(1, frames))
        return canvas.to_lines(color=color)
    finally:
        await renderer.close()


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    cfg = get_config(args.config)
    level = "DEBUG" if args.debug else cfg.get("log_level", "WARNING")
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    locus = args.locus or cfg.get("locus", "chr1:1000-5000")

    if args.gui:
        from ovb.gui import run_browser
        try:
            return run_browser(locus, cfg)
        except LocusError as e:
            parser.exit(2, f"error: {e}\n")

    columns = args.columns
    if columns is None:
        columns = shutil.get_terminal_size((120, 40)).columns

    try:
        lines = asyncio.run(render_text(locus, cfg, frames=args.frames, columns=columns,
                                        zoom=args.zoom, pan=args.pan, color=not args.no_color))
    except LocusError as e:
        parser.exit(2, f"error: {e}\n")

    print("\n".join(lines))
    return 0


if __name__ == "__main__":
    sys.exit(main())
