from __future__ import annotations

from typing import List

from stopsync.errors import TranscriptDecodeError, TranscriptNotFoundError
from stopsync.logging_utils import get_logger
from stopsync.types import SegmentationPolicy

log = get_logger(__name__)

TERMINAL_MARKS = ".?!"


def read_transcript(path: str) -> str:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except FileNotFoundError as e:
        raise TranscriptNotFoundError(f"Transcript file not found: {path}") from e
    except UnicodeDecodeError as e:
        raise TranscriptDecodeError(f"Transcript is not valid UTF-8: {path}: {e}") from e


def split_on_marks(text: str) -> List[str]:
    """Cut text after every '.', '?' or '!', keeping the mark on its sentence.

    Pieces with no text before the mark (the extra dots of "...") are
    dropped, and unterminated trailing text gets a '.'.
    """
    sentences: List[str] = []
    buf: List[str] = []
    for ch in text:
        if ch in TERMINAL_MARKS:
            body = "".join(buf).strip()
            if body:
                sentences.append(body + ch)
            buf = []
        else:
            buf.append(ch)
    tail = "".join(buf).strip()
    if tail:
        sentences.append(tail + ".")
    return sentences


def split_on_periods(text: str) -> List[str]:
    """Split on '.' only; the period is not kept and '?'/'!' are plain text."""
    return [piece.strip() for piece in text.split(".") if piece.strip()]


def segment(text: str, policy: SegmentationPolicy = SegmentationPolicy.PUNCTUATION) -> List[str]:
    policy = SegmentationPolicy(policy)
    if policy is SegmentationPolicy.PUNCTUATION:
        sentences = split_on_marks(text)
    else:
        sentences = split_on_periods(text)
    log.debug("transcript segmented", extra={"policy": policy.value, "sentences": len(sentences)})
    return sentences
