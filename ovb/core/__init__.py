
from .schema import Region, Feature, FeatureType, Strand, FetchOptions, CancellationToken, parse_locus
from .adapter import DataAdapter, get_header, close_adapter, iter_overlapping

__all__ = [
    'Region', 'Feature', 'FeatureType', 'Strand', 'FetchOptions', 'CancellationToken', 'parse_locus',
    'DataAdapter', 'get_header', 'close_adapter', 'iter_overlapping',
]
