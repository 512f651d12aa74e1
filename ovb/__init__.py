"""Open Variant Browser.

A small genome browser core: a viewport coordinate engine, an asynchronous
track layout/render pipeline and the streaming data-adapter contract that
feeds it.
"""

import logging

from ovb.config import get_config, RenderSettings, TrackSettings
from ovb.core import Region, Feature, FeatureType, Strand, FetchOptions, CancellationToken, parse_locus
from ovb.errors import LocusError, RenderSurfaceError, LayoutError

__all__ = ['logger',
            'get_config', 'RenderSettings', 'TrackSettings',
            'Region', 'Feature', 'FeatureType', 'Strand', 'FetchOptions', 'CancellationToken', 'parse_locus',
            'LocusError', 'RenderSurfaceError', 'LayoutError']

# Configure logging
logger = logging.getLogger(__name__)
