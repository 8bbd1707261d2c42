"""Coordinate transforms and line segmentation."""

from .segmenter import SegmentLevel, TextSegment, segment_candidate, uses_space_delimiters
from .transform import PixelBox, round_fixed, to_pixel_box

__all__ = [
    "PixelBox",
    "SegmentLevel",
    "TextSegment",
    "round_fixed",
    "segment_candidate",
    "to_pixel_box",
    "uses_space_delimiters",
]
