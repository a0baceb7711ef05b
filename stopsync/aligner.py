from __future__ import annotations

from typing import List, Optional, Sequence

from stopsync.audio import detect_stops
from stopsync.logging_utils import get_logger
from stopsync.sentences import read_transcript, segment
from stopsync.types import AlignmentConfig, AlignmentResult, EdgeCorrection, Stop

log = get_logger(__name__)


def shift_to_starts(stops: List[Stop]) -> List[Stop]:
    """Move each time one entry later and start the first sentence at 0.0.

    A silence boundary marks where the previous sentence ended, so after the
    shift every stop carries the time its own sentence begins. Walks from
    the last index down to 1 so each entry reads its neighbour's original
    value. The last boundary is discarded.
    """
    for i in range(len(stops) - 1, 0, -1):
        stops[i].audio_stop = stops[i - 1].audio_stop
    if stops:
        stops[0].audio_stop = 0.0
    return stops


def zero_first(stops: List[Stop]) -> List[Stop]:
    """Start the first sentence at 0.0 and leave the rest untouched."""
    if stops:
        stops[0].audio_stop = 0.0
    return stops


def apply_edge_correction(stops: List[Stop], mode: EdgeCorrection) -> List[Stop]:
    mode = EdgeCorrection(mode)
    if mode is EdgeCorrection.SHIFT:
        return shift_to_starts(stops)
    if mode is EdgeCorrection.ZERO_FIRST:
        return zero_first(stops)
    return stops


def align(sentences: Sequence[str], boundaries: Sequence[float],
          edge_correction: EdgeCorrection = EdgeCorrection.NONE) -> List[Stop]:
    """Pair sentences with boundaries by position.

    The shorter input decides the length; surplus sentences or boundaries
    are dropped.
    """
    stops = [Stop(sentence=s, audio_stop=float(t)) for s, t in zip(sentences, boundaries)]
    return apply_edge_correction(stops, edge_correction)


def align_files(audio_path: str, text_path: str, config: Optional[AlignmentConfig] = None) -> AlignmentResult:
    """Scan the recording, segment the transcript and merge the two."""
    config = (config or AlignmentConfig()).validate()
    log.info("alignment start", extra={
        "audio_path": audio_path, "text_path": text_path, "policy": config.policy.value,
        "edge_correction": config.edge_correction.value,
    })

    sentences = segment(read_transcript(text_path), config.policy)
    boundaries = detect_stops(audio_path, config.silence_threshold, config.min_silence_duration)

    if len(sentences) != len(boundaries):
        log.warning("sentence/boundary count mismatch; extra entries dropped", extra={
            "sentences": len(sentences), "boundaries": len(boundaries),
        })

    stops = align(sentences, boundaries, config.edge_correction)
    log.info("alignment done", extra={"stops": len(stops)})
    return AlignmentResult(audio_path=audio_path, text_path=text_path, stops=stops)
