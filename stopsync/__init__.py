"""Align transcript sentences to silence boundaries in a WAV recording.

The CLI script imports from here; the scanner, segmenter and aligner are
also usable on their own.
"""

from stopsync.aligner import align, align_files, apply_edge_correction
from stopsync.audio import detect_stops, scan_samples
from stopsync.sentences import segment
from stopsync.types import (
    AlignmentConfig,
    AlignmentResult,
    EdgeCorrection,
    InputMode,
    SegmentationPolicy,
    Stop,
)

__all__ = [
    "AlignmentConfig",
    "AlignmentResult",
    "EdgeCorrection",
    "InputMode",
    "SegmentationPolicy",
    "Stop",
    "align",
    "align_files",
    "apply_edge_correction",
    "detect_stops",
    "scan_samples",
    "segment",
]
