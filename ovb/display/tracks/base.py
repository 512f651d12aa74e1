"""
Track contract and the layout engine every track variant composes.

A track is anything with the attributes and methods of ``Track``. Variants
share behaviour by holding a ``TrackLayout``, not by subclassing; optional
capabilities (``hit_test``, ``destroy``) are discovered at run time with
``has_capability``.
"""

import logging
from dataclasses import dataclass
from typing import (TYPE_CHECKING, Any, Callable, Iterable, Optional, Protocol, Sequence, Tuple,
                    runtime_checkable)

from ovb.core.adapter import DataAdapter, close_adapter
from ovb.core.schema import CancellationToken, Feature, FetchOptions, Region
from ovb.errors import LayoutError

if TYPE_CHECKING:
    from ovb.display.canvas import DrawContext
    from ovb.display.viewport import Viewport

logger = logging.getLogger(__name__)

TITLE_X = 5
TITLE_Y = 15


@dataclass(frozen=True)
class LaidOutFeature:
    feature: Feature
    x: float
    y: float
    width: float
    height: float

    def contains(self, x: float, y: float) -> bool:
        return self.x <= x <= self.x + self.width and self.y <= y <= self.y + self.height


@runtime_checkable
class Track(Protocol):
    id: str
    name: str
    kind: str
    adapter: DataAdapter
    height: int

    @property
    def laid_out_features(self) -> Sequence[LaidOutFeature]: ...

    async def layout(self, viewport: 'Viewport') -> None: ...

    def render(self, ctx: 'DrawContext', viewport: 'Viewport') -> None: ...


def has_capability(track: Any, name: str) -> bool:
    return callable(getattr(track, name, None))


PlaceFn = Callable[[Feature, 'Viewport'], Iterable[LaidOutFeature]]


class TrackLayout:
    """
    Streams one region from an adapter into a cache of laid-out primitives.

    The cache is an immutable tuple swapped in one assignment when a pass
    completes, so a render running in between always sees a whole previous
    result. Starting a pass cancels the token of the pass still in flight and
    bumps a generation counter; an older pass that still finishes is thrown
    away.
    """

    def __init__(self, track_id: str, adapter: DataAdapter):
        self.track_id = track_id
        self.adapter = adapter
        self.items: Tuple[LaidOutFeature, ...] = ()
        self.region: Optional[Region] = None
        self.passes = 0
        self._generation = 0
        self._token: Optional[CancellationToken] = None
        self._adapter_ready = False

    @property
    def in_flight(self) -> bool:
        return self._token is not None

    async def ensure_adapter(self):
        if not self._adapter_ready:
            await self.adapter.init()
            self._adapter_ready = True

    def cancel(self):
        if self._token is not None:
            self._token.cancel()
            self._token = None

    async def run(self, viewport: 'Viewport', place: PlaceFn) -> bool:
        """
        Lay out the viewport's current region.

        Returns:
            True if this pass replaced the cache, False if it was superseded

        Raises:
            LayoutError: the adapter failed; the previous cache is kept
        """
        self._generation += 1
        generation = self._generation
        self.cancel()
        token = CancellationToken()
        self._token = token

        region = viewport.region()
        laid_out = []
        skipped = 0
        try:
            await self.ensure_adapter()
            async for feature in self.adapter.get_features(region, FetchOptions(token=token)):
                if token.cancelled:
                    break
                if not feature.overlaps(region):
                    skipped += 1
                    continue
                laid_out.extend(place(feature, viewport))
        except Exception as e:
            if generation == self._generation:
                raise LayoutError(self.track_id, e) from e
            logger.debug(f"track {self.track_id}: superseded layout pass failed: {e}")
            return False
        finally:
            if self._token is token:
                self._token = None

        if skipped:
            logger.warning(f"track {self.track_id}: adapter yielded {skipped} features outside {region}")

        if generation != self._generation or token.cancelled:
            logger.debug(f"track {self.track_id}: discarding stale layout for {region}")
            return False

        self.items = tuple(laid_out)
        self.region = region
        self.passes += 1
        logger.debug(f"track {self.track_id}: laid out {len(self.items)} primitives for {region}")
        return True

    def hit_test(self, x: float, y: float) -> Optional[Feature]:
        for item in reversed(self.items):
            if item.contains(x, y):
                return item.feature
        return None

    async def destroy(self):
        self.cancel()
        self._generation += 1
        self.items = ()
        self.region = None
        await close_adapter(self.adapter)
        self._adapter_ready = False


def draw_title(ctx: 'DrawContext', name: str, color: str = "#000000", font: str = "12px sans-serif"):
    ctx.fill_style = color
    ctx.font = font
    ctx.text_align = "left"
    ctx.fill_text(name, TITLE_X, TITLE_Y)


def box_extent(viewport: 'Viewport', feature: Feature) -> Optional[Tuple[float, float]]:
    """(x, width) of a feature clipped to the view, width floored at one pixel."""
    extent = viewport.pixel_extent(feature.start, feature.end)
    if extent is None:
        return None
    x0, x1 = extent
    return x0, max(1.0, x1 - x0)
