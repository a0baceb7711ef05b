"""WAV reading and silence boundary detection.

The scanner counts consecutive samples whose magnitude is below a threshold
and emits a timestamp every time a run reaches the minimum silence length.
Runs are counted in non-overlapping windows, so one long pause yields one
boundary per full window.
"""

from __future__ import annotations

import wave
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Sequence

import numpy as np

from stopsync.errors import AudioNotFoundError, DecodeError, SampleReadError
from stopsync.logging_utils import get_logger

log = get_logger(__name__)

DEFAULT_BLOCK_FRAMES = 65536

_DTYPES = {
    1: np.dtype("u1"),
    2: np.dtype("<i2"),
}


@dataclass(frozen=True)
class WavInfo:
    channels: int
    sample_rate: int
    sample_width: int
    total_frames: int

    @property
    def duration(self) -> float:
        return self.total_frames / float(self.sample_rate)


def _open(path: str) -> wave.Wave_read:
    try:
        return wave.open(path, 'rb')
    except FileNotFoundError as e:
        raise AudioNotFoundError(f"Audio file not found: {path}") from e
    except (wave.Error, EOFError) as e:
        raise DecodeError(f"Not a readable PCM WAV file: {path}: {e}") from e


def _info_from(handle: wave.Wave_read, path: str) -> WavInfo:
    info = WavInfo(
        channels=handle.getnchannels(),
        sample_rate=handle.getframerate(),
        sample_width=handle.getsampwidth(),
        total_frames=handle.getnframes(),
    )
    if info.sample_rate <= 0:
        raise DecodeError(f"Sample rate must be positive: {path}")
    if info.channels <= 0:
        raise DecodeError(f"Channel count must be positive: {path}")
    if info.sample_width not in _DTYPES:
        raise DecodeError(f"Unsupported sample width {info.sample_width * 8} bits: {path}")
    return info


def read_wav_info(path: str) -> WavInfo:
    """Return header metadata, raising DecodeError for unsupported files."""
    with _open(path) as handle:
        return _info_from(handle, path)


def decode_frames(data: bytes, info: WavInfo) -> np.ndarray:
    """Decode raw frame bytes into one int16 value per frame.

    Multi-channel frames keep their first channel. 8-bit data is unsigned in
    WAV and is re-centred around zero.
    """
    frame_size = info.sample_width * info.channels
    if len(data) % frame_size:
        raise SampleReadError(
            f"Partial frame: {len(data)} bytes is not a multiple of frame size {frame_size}"
        )
    samples = np.frombuffer(data, dtype=_DTYPES[info.sample_width])
    if info.sample_width == 1:
        samples = samples.astype(np.int16) - 128
    if info.channels > 1:
        samples = samples.reshape(-1, info.channels)[:, 0]
    return samples.astype(np.int16, copy=False)


def _read_blocks(handle: wave.Wave_read, info: WavInfo, path: str, block_frames: int) -> Iterator[np.ndarray]:
    log.debug("wav opened", extra={
        "path": path, "rate": info.sample_rate, "channels": info.channels,
        "width": info.sample_width, "frames": info.total_frames,
    })
    remaining = info.total_frames
    while remaining > 0:
        try:
            data = handle.readframes(min(block_frames, remaining))
        except (wave.Error, EOFError) as e:
            raise SampleReadError(f"Failed to read frames from {path}: {e}") from e
        if not data:
            raise SampleReadError(
                f"Unexpected end of data in {path}: "
                f"{info.total_frames - remaining} of {info.total_frames} frames read"
            )
        block = decode_frames(data, info)
        remaining -= block.size
        yield block


def iter_sample_blocks(path: str, block_frames: int = DEFAULT_BLOCK_FRAMES) -> Iterator[np.ndarray]:
    """Yield int16 sample blocks, reading the file once from start to end."""
    with _open(path) as handle:
        info = _info_from(handle, path)
        yield from _read_blocks(handle, info, path, block_frames)


class SilenceScanner:
    """Incremental silence boundary detector.

    Blocks may be fed one at a time; the run counter and the elapsed sample
    count carry over between calls, so splitting the stream anywhere gives
    the same boundaries as scanning it whole.
    """

    def __init__(self, sample_rate: int, silence_threshold: int = 1, min_silence_duration: float = 0.5) -> None:
        if sample_rate <= 0:
            raise ValueError("sample_rate must be positive")
        self.sample_rate = sample_rate
        self.silence_threshold = silence_threshold
        self.min_silence_samples = max(1, int(min_silence_duration * sample_rate))
        self.boundaries: List[float] = []
        self._run = 0
        self._consumed = 0

    @property
    def samples_consumed(self) -> int:
        return self._consumed

    def feed(self, block: Iterable[int]) -> List[float]:
        """Scan one block and return the boundaries it completed."""
        samples = np.asarray(block).astype(np.int32, copy=False).ravel()
        n = samples.size
        if n == 0:
            return []
        window = self.min_silence_samples
        silent = np.abs(samples) < self.silence_threshold

        # run starts/ends as indices into this block, end exclusive
        edges = np.diff(np.concatenate(([0], silent.astype(np.int8), [0])))
        starts = np.flatnonzero(edges == 1)
        ends = np.flatnonzero(edges == -1)

        found: List[float] = []
        run_after = 0
        for start, end in zip(starts.tolist(), ends.tolist()):
            carried = self._run if start == 0 else 0
            first = start + (window - carried) - 1
            for idx in range(first, end, window):
                found.append((self._consumed + idx + 1) / self.sample_rate)
            run_after = (carried + end - start) % window

        self._run = run_after if silent[-1] else 0
        self._consumed += n
        self.boundaries.extend(found)
        return found


def scan_samples(
    samples: Sequence[int],
    sample_rate: int,
    silence_threshold: int = 1,
    min_silence_duration: float = 0.5,
) -> List[float]:
    """Run the silence scan over samples already held in memory."""
    scanner = SilenceScanner(sample_rate, silence_threshold, min_silence_duration)
    scanner.feed(samples)
    return scanner.boundaries


def detect_stops(path: str, silence_threshold: int = 1, min_silence_duration: float = 0.5,
                 block_frames: int = DEFAULT_BLOCK_FRAMES) -> List[float]:
    """Return silence boundary timestamps (seconds) for a PCM WAV file.

    Raises:
        AudioNotFoundError: the file does not exist.
        DecodeError: the file is not a supported PCM WAV container.
        SampleReadError: frame data is truncated or corrupt mid-stream.
    """
    with _open(path) as handle:
        info = _info_from(handle, path)
        scanner = SilenceScanner(info.sample_rate, silence_threshold, min_silence_duration)
        for block in _read_blocks(handle, info, path, block_frames):
            scanner.feed(block)
    log.info("silence scan done", extra={
        "path": path, "boundaries": len(scanner.boundaries),
        "seconds": round(info.duration, 3), "window_samples": scanner.min_silence_samples,
    })
    return scanner.boundaries
