from __future__ import annotations


class AlignmentError(Exception):
    """Base error for the sentence stop aligner."""


class ArgumentError(AlignmentError):
    """Raised when the audio or transcript path is missing from the input."""


class ConfigError(AlignmentError, ValueError):
    """Raised when tuning parameters are out of range."""


class DecodeError(AlignmentError):
    """Raised when the audio file is not a readable PCM WAV container."""


class SampleReadError(AlignmentError):
    """Raised when frame data cannot be decoded partway through the stream."""


class SerializationError(AlignmentError):
    """Raised when the alignment result cannot be encoded as JSON."""


class AudioNotFoundError(AlignmentError, FileNotFoundError):
    """Raised when the audio path does not exist."""


class TranscriptNotFoundError(AlignmentError, FileNotFoundError):
    """Raised when the transcript path does not exist."""


class TranscriptDecodeError(AlignmentError):
    """Raised when the transcript is not valid UTF-8 text."""
