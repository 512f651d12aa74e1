
import asyncio
import logging
from typing import AsyncIterator, Iterable, List, Optional

from ovb.core.adapter import iter_overlapping
from ovb.core.schema import Feature, FetchOptions, Region

logger = logging.getLogger(__name__)


class MemoryAdapter:
    """
    Adapter over an in-memory list of features.

    Features are kept sorted by (ref_name, start, end). ``delay`` adds a pause
    before every yielded feature to imitate a slow source.
    """

    def __init__(self, features: Iterable[Feature] = (), delay: float = 0.0, header: Optional[dict] = None):
        self.features: List[Feature] = sorted(features, key=lambda f: (f.ref_name, f.start, f.end))
        self.delay = delay
        self.header = header
        self.initialized = False
        self.closed = False
        self.fetch_count = 0

    async def init(self):
        if self.initialized:
            return
        logger.debug(f"MemoryAdapter initialized with {len(self.features)} features")
        self.initialized = True
        self.closed = False

    async def get_features(self, region: Region, options: Optional[FetchOptions] = None) -> AsyncIterator[Feature]:
        self.fetch_count += 1
        async for feature in iter_overlapping(self.features, region, options):
            if self.delay:
                await asyncio.sleep(self.delay)
                if options is not None and options.cancelled:
                    return
            yield feature

    async def get_header(self):
        return self.header

    async def close(self):
        self.initialized = False
        self.closed = True
