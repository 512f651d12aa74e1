
from .viewport import Viewport, OFF_SCREEN
from .canvas import Canvas, DrawContext, BaseContext, RecordingCanvas, RecordingContext
from .text_canvas import TextCanvas, TextContext
from .scheduler import FrameScheduler, ManualScheduler, AsyncioScheduler
from .tracks import (LaidOutFeature, Track, TrackLayout, has_capability, FeatureTrack, GeneTrack,
                     TRACK_TYPES, create_track, track_from_config)
from .renderer import Renderer

__all__ = [
    'Viewport', 'OFF_SCREEN',
    'Canvas', 'DrawContext', 'BaseContext', 'RecordingCanvas', 'RecordingContext',
    'TextCanvas', 'TextContext',
    'FrameScheduler', 'ManualScheduler', 'AsyncioScheduler',
    'LaidOutFeature', 'Track', 'TrackLayout', 'has_capability', 'FeatureTrack', 'GeneTrack',
    'TRACK_TYPES', 'create_track', 'track_from_config',
    'Renderer',
]
