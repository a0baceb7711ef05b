from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from stopsync.errors import ConfigError, SerializationError


class SegmentationPolicy(str, Enum):
    """How transcript text is cut into sentences."""

    PUNCTUATION = "punctuation"  # split on . ? ! and keep the mark
    PERIOD = "period"  # split on . only, mark dropped


class EdgeCorrection(str, Enum):
    """Post-processing applied to stop times after zipping."""

    NONE = "none"
    ZERO_FIRST = "zero_first"
    SHIFT = "shift"


class InputMode(str, Enum):
    ARGS = "args"
    STDIN = "stdin"


@dataclass
class AlignmentConfig:
    """Tuning and behaviour switches for one alignment run.

    Defaults reproduce the command-line variant: a threshold of 1 (only
    digital zero counts as silence), half-second windows, punctuation-aware
    sentences and a zeroed first stop.
    """

    silence_threshold: int = 1
    min_silence_duration: float = 0.5
    policy: SegmentationPolicy = SegmentationPolicy.PUNCTUATION
    edge_correction: EdgeCorrection = EdgeCorrection.ZERO_FIRST
    input_mode: InputMode = InputMode.ARGS

    def validate(self) -> "AlignmentConfig":
        try:
            self.policy = SegmentationPolicy(self.policy)
            self.edge_correction = EdgeCorrection(self.edge_correction)
            self.input_mode = InputMode(self.input_mode)
        except ValueError as e:
            raise ConfigError(str(e)) from e
        if self.silence_threshold < 0:
            raise ConfigError(f"silence_threshold must be >= 0 (got {self.silence_threshold})")
        if not self.min_silence_duration > 0:
            raise ConfigError(f"min_silence_duration must be > 0 (got {self.min_silence_duration})")
        return self


@dataclass
class Stop:
    sentence: str
    audio_stop: float

    def to_dict(self) -> Dict[str, Any]:
        return {"sentence": self.sentence, "audio_stop": self.audio_stop}


@dataclass
class AlignmentResult:
    audio_path: str
    text_path: str
    stops: List[Stop] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "audio_path": self.audio_path,
            "text_path": self.text_path,
            "stops": [s.to_dict() for s in self.stops],
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        try:
            return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent, allow_nan=False)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to encode alignment result: {e}") from e
