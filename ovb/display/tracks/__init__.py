
from typing import Any, Dict, Optional

from ovb.adapters import adapter_from_config
from ovb.config import TrackSettings

from .base import LaidOutFeature, Track, TrackLayout, has_capability
from .feature_track import FeatureTrack
from .gene_track import GeneTrack

TRACK_TYPES = {
    FeatureTrack.kind: FeatureTrack,
    GeneTrack.kind: GeneTrack,
}


def create_track(kind: str, **options: Any):
    """Build a track from its kind tag ("feature", "gene")."""
    cls = TRACK_TYPES.get(kind)
    if cls is None:
        raise ValueError(f"Unknown track kind: {kind!r} (known: {', '.join(sorted(TRACK_TYPES))})")
    return cls(**options)


def track_from_config(spec: Dict[str, Any], settings: Optional[TrackSettings] = None):
    """
    Build a track and its adapter from a config entry.

    ``settings`` holds the per-kind geometry defaults (the ``tracks`` config
    section); keys in the entry itself win.
    """
    options = dict(spec)
    kind = options.pop("kind", FeatureTrack.kind)
    adapter_spec = options.pop("adapter", None)
    if adapter_spec is None:
        raise ValueError(f"Track config {spec.get('id')!r} is missing 'adapter'")

    merged = settings.for_kind(kind) if settings is not None else {}
    merged.update(options)
    merged.setdefault("name", merged.get("id", kind))
    return create_track(kind, adapter=adapter_from_config(adapter_spec), **merged)


__all__ = [
    'LaidOutFeature', 'Track', 'TrackLayout', 'has_capability',
    'FeatureTrack', 'GeneTrack',
    'TRACK_TYPES', 'create_track', 'track_from_config',
]
