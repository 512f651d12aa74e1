"""
Main renderer for the genome browser.

Owns the canvas, the viewport, the ordered track list and the frame loop, and
decides when tracks are laid out. Layout (async, talks to adapters) and
drawing (sync, reads caches only) are separate phases.
"""

import asyncio
import logging
from typing import Any, Callable, List, Optional, Set, Tuple

import numpy as np

from ovb.config import RenderSettings
from ovb.core.schema import Feature, parse_locus
from ovb.display.canvas import Canvas
from ovb.display.scheduler import FrameScheduler, ManualScheduler
from ovb.display.tracks.base import Track, has_capability
from ovb.display.viewport import Viewport
from ovb.draw.format import format_position
from ovb.errors import LayoutError, RenderSurfaceError

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[Track, Exception], None]


class Renderer:
    """
    Canvas renderer for a stack of genomic tracks.

    Example usage:
        async def main():
            canvas = TextCanvas(960, 400)
            renderer = Renderer(canvas, "chr1:1000-5000", scheduler=AsyncioScheduler())
            renderer.add_track(GeneTrack(id="genes", name="Genes", adapter=MockGff3Adapter()))
            ...
            renderer.zoom(2.0, 480)     # viewport change re-lays-out every track
            await renderer.close()

        asyncio.run(main())
    """

    def __init__(self, canvas: Canvas, initial_locus: str,
                 scheduler: Optional[FrameScheduler] = None,
                 settings: Optional[RenderSettings] = None,
                 auto_start: bool = True):
        """
        Args:
            canvas: Drawing surface
            initial_locus: "<ref>:<start>-<end>"
            scheduler: Frame source; defaults to a ManualScheduler
            settings: Axis and track placement; defaults to RenderSettings()
            auto_start: Start the frame loop immediately

        Raises:
            LocusError: malformed locus
            RenderSurfaceError: canvas has no 2D context
        """
        region = parse_locus(initial_locus)

        self.canvas = canvas
        ctx = canvas.get_context("2d")
        if ctx is None:
            raise RenderSurfaceError("Could not get 2D rendering context")
        self.ctx = ctx

        self.settings = settings or RenderSettings()
        self.scheduler: FrameScheduler = scheduler or ManualScheduler(1.0 / self.settings.frames_per_second)

        self._layout_width: Optional[float] = None
        self.resize()
        self.canvas.add_resize_listener(self.resize)

        self.viewport = Viewport(canvas, region.start, region.end, ref_name=region.ref_name)
        self.viewport.add_listener(self._on_viewport_change)

        self.tracks: List[Track] = []
        self.last_errors: List[LayoutError] = []
        self._layout_pass = 0
        self._error_handlers: List[ErrorHandler] = []
        self._layout_tasks: Set[asyncio.Task] = set()
        self._frame_handle: Any = None
        self._running = False
        self.frames_drawn = 0

        if auto_start:
            self.start()

    # ------------------------------------------------------------------
    # tracks and layout
    # ------------------------------------------------------------------

    def add_track(self, track: Track) -> Optional[asyncio.Task]:
        """Append a track and re-lay-out all tracks."""
        self.tracks.append(track)
        logger.debug(f"added track {track.id!r} ({track.kind}), {len(self.tracks)} tracks")
        return self.request_layout()

    async def remove_track(self, track: Track):
        if track not in self.tracks:
            return
        self.tracks.remove(track)
        if has_capability(track, "destroy"):
            await track.destroy()

    def request_layout(self) -> Optional[asyncio.Task]:
        """
        Schedule a layout pass over every track on the running event loop.

        Without a running loop nothing is scheduled and the caller is expected
        to await ``layout_all_tracks`` itself.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("no running event loop, layout deferred")
            return None

        task = loop.create_task(self.layout_all_tracks())
        self._layout_tasks.add(task)
        task.add_done_callback(self._layout_tasks.discard)
        return task

    async def layout_all_tracks(self):
        """Lay out tracks in list order; a failing track does not stop the others."""
        self._layout_pass += 1
        layout_pass = self._layout_pass
        errors = []
        for track in list(self.tracks):
            try:
                await track.layout(self.viewport)
            except Exception as e:
                errors.append(self._report_layout_error(track, e))
        # a pass overtaken by a newer one keeps its errors out of last_errors
        if layout_pass == self._layout_pass:
            self.last_errors = errors

    async def wait_for_layout(self):
        """Wait until every scheduled layout pass has finished."""
        while self._layout_tasks:
            await asyncio.gather(*list(self._layout_tasks), return_exceptions=True)

    def on_layout_error(self, handler: ErrorHandler):
        self._error_handlers.append(handler)

    def _report_layout_error(self, track: Track, exc: Exception) -> LayoutError:
        err = exc if isinstance(exc, LayoutError) else LayoutError(track.id, exc)
        logger.error(f"{err}; keeping previous layout")
        for handler in list(self._error_handlers):
            try:
                handler(track, err)
            except Exception:
                logger.exception(f"layout error handler failed for track {track.id!r}")
        return err

    def _on_viewport_change(self, viewport: Viewport):
        self.request_layout()

    # ------------------------------------------------------------------
    # input-handler conveniences
    # ------------------------------------------------------------------

    def navigate(self, locus: str):
        region = parse_locus(locus)
        self.viewport.set_region(region.start, region.end, ref_name=region.ref_name)

    def pan(self, pixel_delta: float):
        self.viewport.pan(pixel_delta)

    def zoom(self, factor: float, center_x: Optional[float] = None):
        if center_x is None:
            center_x = self.viewport.canvas_width / 2
        self.viewport.zoom(factor, center_x)

    def hit_test(self, x: float, y: float) -> Optional[Tuple[Track, Feature]]:
        """Feature under a canvas point, with the track it belongs to."""
        y_offset = self.settings.track_top
        for track in self.tracks:
            if y_offset <= y < y_offset + track.height:
                if not has_capability(track, "hit_test"):
                    return None
                feature = track.hit_test(x, y - y_offset)
                return (track, feature) if feature is not None else None
            y_offset += track.height
        return None

    # ------------------------------------------------------------------
    # surface
    # ------------------------------------------------------------------

    def resize(self):
        """
        Size the backing store for the device pixel ratio.

        Cached layouts are in pixels of the old width, so a width change also
        requests a new layout.
        """
        dpr = self.canvas.device_pixel_ratio or 1.0
        width, height = self.canvas.bounding_size()
        self.canvas.set_backing_size(int(width * dpr), int(height * dpr))
        self.ctx.reset_transform()
        self.ctx.scale(dpr, dpr)
        logger.debug(f"canvas resized to {width}x{height} @ {dpr}x")

        width_changed = self._layout_width is not None and width != self._layout_width
        self._layout_width = width
        if width_changed:
            self.request_layout()

    # ------------------------------------------------------------------
    # frame loop
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self):
        if self._running:
            self.stop()
        self._running = True
        self._render_loop()

    def stop(self):
        if self._frame_handle is not None:
            self.scheduler.cancel_frame(self._frame_handle)
            self._frame_handle = None
        self._running = False

    def _render_loop(self, timestamp: Optional[float] = None):
        self._frame_handle = None
        if not self._running:
            return
        try:
            self.draw()
        except Exception:
            logger.exception("frame draw failed")
        if self._running:
            try:
                self._frame_handle = self.scheduler.request_frame(self._render_loop)
            except Exception:
                self._running = False
                raise

    def draw(self):
        with self.canvas.frame() as ctx:
            ctx.clear_rect(0, 0, self.canvas.client_width, self.canvas.client_height)

            self.draw_axis(ctx)

            y_offset = self.settings.track_top
            for track in self.tracks:
                ctx.save()
                try:
                    ctx.translate(0, y_offset)
                    track.render(ctx, self.viewport)
                finally:
                    ctx.restore()
                y_offset += track.height
        self.frames_drawn += 1

    def draw_axis(self, ctx=None):
        """Axis line with tick_count + 1 evenly spaced, labelled ticks."""
        ctx = ctx or self.ctx
        s = self.settings
        y = s.axis_y
        width = self.viewport.canvas_width

        ctx.stroke_style = s.axis_color
        ctx.begin_path()
        ctx.move_to(0, y)
        ctx.line_to(width, y)
        ctx.stroke()

        ctx.font = s.font
        ctx.fill_style = s.axis_color
        ctx.text_align = "center"

        tick_xs = np.linspace(0, width, s.tick_count + 1)
        positions = np.linspace(self.viewport.genomic_start, self.viewport.genomic_end, s.tick_count + 1)
        for x, pos in zip(tick_xs, positions):
            ctx.begin_path()
            ctx.move_to(x, y)
            ctx.line_to(x, y - s.axis_tick_length)
            ctx.stroke()

            ctx.fill_text(format_position(pos), x, y - s.axis_label_gap)

    async def close(self):
        self.stop()
        self.canvas.remove_resize_listener(self.resize)
        self.viewport.remove_listener(self._on_viewport_change)
        for task in list(self._layout_tasks):
            task.cancel()
        for track in list(self.tracks):
            await self.remove_track(track)

    def __repr__(self):
        return f"Renderer({self.viewport!r}, tracks={[t.id for t in self.tracks]})"
