"""
The data-adapter contract.

An adapter turns some data source into a stream of Features for a Region.
Only ``init`` and ``get_features`` are required; ``get_header`` and ``close``
are optional capabilities, reached through the helpers below.
"""

import logging
from typing import Any, AsyncIterator, Iterable, Mapping, Optional, Protocol, runtime_checkable

from ovb.core.schema import Feature, FetchOptions, Region

logger = logging.getLogger(__name__)


@runtime_checkable
class DataAdapter(Protocol):

    async def init(self) -> None:
        """Open handles, parse indices. Idempotent."""

    def get_features(self, region: Region, options: Optional[FetchOptions] = None) -> AsyncIterator[Feature]:
        """Stream the features overlapping ``region``. Each call starts a fresh stream."""


async def get_header(adapter) -> Optional[Mapping[str, Any]]:
    """Header metadata (samples, contigs...) or None if the adapter has none."""
    getter = getattr(adapter, "get_header", None)
    if getter is None:
        return None
    return await getter()


async def close_adapter(adapter):
    closer = getattr(adapter, "close", None)
    if closer is None:
        return
    await closer()


async def iter_overlapping(features: Iterable[Feature], region: Region,
                           options: Optional[FetchOptions] = None) -> AsyncIterator[Feature]:
    """
    Yield the features that overlap ``region``, stopping once the fetch is cancelled.

    Shared by the in-memory adapters so they all honour the overlap and
    cancellation rules the same way.
    """
    for feature in features:
        if options is not None and options.cancelled:
            logger.debug(f"fetch for {region} cancelled")
            return
        if feature.overlaps(region):
            yield feature
