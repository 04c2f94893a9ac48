"""Computer vision for artymap.

This sub-package turns a map screenshot into target rectangles, either by
segmenting enemy-colored blobs or by matching debug-overlay markers.
"""

from .classifier import TargetClassifier
from .markers import find_spawner_markers, find_worm_markers, remap_positions_to_rects
from .pixel_buffer import PixelBuffer
from .scanner import BlobScanner, deduce_unit_size, detect_targets
from .trace import FrameTraceRecorder, NullTraceRecorder, TraceRecorder

__all__ = [
    "BlobScanner",
    "FrameTraceRecorder",
    "NullTraceRecorder",
    "PixelBuffer",
    "TargetClassifier",
    "TraceRecorder",
    "deduce_unit_size",
    "detect_targets",
    "find_spawner_markers",
    "find_worm_markers",
    "remap_positions_to_rects",
]
