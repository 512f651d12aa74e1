
import logging
from typing import TYPE_CHECKING, List, Optional, Sequence

from ovb.core.adapter import DataAdapter
from ovb.core.schema import Feature
from ovb.display.tracks.base import LaidOutFeature, TrackLayout, box_extent, draw_title
from ovb.draw.colors import GenomeColors

if TYPE_CHECKING:
    from ovb.display.canvas import DrawContext
    from ovb.display.viewport import Viewport

logger = logging.getLogger(__name__)


class FeatureTrack:
    """One box per feature on a single row, coloured by type and sub-type."""

    kind = "feature"

    def __init__(self, id: str, name: str, adapter: DataAdapter, height: int = 50,
                 row_top: float = 20, box_height: float = 10, font: str = "12px sans-serif"):
        self.id = id
        self.name = name
        self.adapter = adapter
        self.height = height
        self.row_top = row_top
        self.box_height = box_height
        self.font = font
        self._layout = TrackLayout(id, adapter)

    @property
    def laid_out_features(self) -> Sequence[LaidOutFeature]:
        return self._layout.items

    def place(self, feature: Feature, viewport: 'Viewport') -> List[LaidOutFeature]:
        extent = box_extent(viewport, feature)
        if extent is None:
            return []
        x, width = extent
        return [LaidOutFeature(feature, x, self.row_top, width, self.box_height)]

    async def layout(self, viewport: 'Viewport'):
        await self._layout.run(viewport, self.place)

    def render(self, ctx: 'DrawContext', viewport: 'Viewport'):
        draw_title(ctx, self.name, font=self.font)

        for lo in self._layout.items:
            ctx.fill_style = GenomeColors.get_feature_color(lo.feature)
            ctx.fill_rect(lo.x, lo.y, lo.width, lo.height)

    def hit_test(self, x: float, y: float) -> Optional[Feature]:
        return self._layout.hit_test(x, y)

    async def destroy(self):
        await self._layout.destroy()

    def __repr__(self):
        return f"FeatureTrack(id={self.id!r}, name={self.name!r})"
