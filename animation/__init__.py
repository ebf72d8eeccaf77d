"""
Animation Module
Timeline extraction and clip segmentation
"""

from .timeline import TimelineExtractor, PROPERTY_PARSERS
from .clips import build_action_ranges, segment_clip, segment_clips, select_frames

__all__ = [
    'TimelineExtractor',
    'PROPERTY_PARSERS',
    'build_action_ranges',
    'segment_clip',
    'segment_clips',
    'select_frames',
]
