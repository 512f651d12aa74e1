
import logging
from typing import TYPE_CHECKING, List, Optional, Sequence

from ovb.core.adapter import DataAdapter
from ovb.core.schema import Feature, FeatureType
from ovb.display.tracks.base import LaidOutFeature, TrackLayout, box_extent, draw_title
from ovb.draw.colors import GenomeColors

if TYPE_CHECKING:
    from ovb.display.canvas import DrawContext
    from ovb.display.viewport import Viewport

logger = logging.getLogger(__name__)


class GeneTrack:
    """
    Genes as thin intron lines with exon boxes on the same baseline.

    A gene spans its full extent as a line ``intron_height`` tall, centred on
    the exon row; exons are filled boxes ``exon_height`` tall. Gene names are
    written ``label_offset`` pixels below the top of the gene line.
    """

    kind = "gene"

    def __init__(self, id: str, name: str, adapter: DataAdapter, height: int = 100,
                 row_top: float = 20, exon_height: float = 10, intron_height: float = 2,
                 label_offset: float = 30, color: str = GenomeColors.GENE,
                 font: str = "12px sans-serif"):
        self.id = id
        self.name = name
        self.adapter = adapter
        self.height = height
        self.row_top = row_top
        self.exon_height = exon_height
        self.intron_height = intron_height
        self.label_offset = label_offset
        self.color = color
        self.font = font
        self._layout = TrackLayout(id, adapter)

    @property
    def laid_out_features(self) -> Sequence[LaidOutFeature]:
        return self._layout.items

    def place(self, feature: Feature, viewport: 'Viewport') -> List[LaidOutFeature]:
        if feature.type not in (FeatureType.GENE, FeatureType.EXON):
            return []
        extent = box_extent(viewport, feature)
        if extent is None:
            return []
        x, width = extent

        if feature.type == FeatureType.GENE:
            y = self.row_top + self.exon_height / 2 - self.intron_height / 2
            return [LaidOutFeature(feature, x, y, width, self.intron_height)]
        return [LaidOutFeature(feature, x, self.row_top, width, self.exon_height)]

    async def layout(self, viewport: 'Viewport'):
        await self._layout.run(viewport, self.place)

    def render(self, ctx: 'DrawContext', viewport: 'Viewport'):
        draw_title(ctx, self.name, font=self.font)

        ctx.fill_style = self.color
        for lo in self._layout.items:
            ctx.fill_rect(lo.x, lo.y, lo.width, lo.height)

            if lo.feature.type == FeatureType.GENE:
                ctx.fill_text(lo.feature.name, lo.x, lo.y + self.label_offset)

    def hit_test(self, x: float, y: float) -> Optional[Feature]:
        return self._layout.hit_test(x, y)

    async def destroy(self):
        await self._layout.destroy()

    def __repr__(self):
        return f"GeneTrack(id={self.id!r}, name={self.name!r})"
