"""Pytest configuration helpers."""

from __future__ import annotations

import sys
import wave
from pathlib import Path

import numpy as np
import pytest


def _ensure_repo_on_path() -> None:
    """Allow tests to import from repo modules without setting PYTHONPATH."""
    repo_root = Path(__file__).resolve().parents[1]
    path_str = str(repo_root)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)


_ensure_repo_on_path()


def write_wav(path: Path, samples: np.ndarray, sample_rate: int = 16_000, channels: int = 1,
              sample_width: int = 2) -> Path:
    data = np.asarray(samples)
    if sample_width == 1:
        raw = data.astype(np.uint8).tobytes()
    else:
        raw = data.astype("<i2").tobytes()
    with wave.open(str(path), "wb") as handle:
        handle.setnchannels(channels)
        handle.setsampwidth(sample_width)
        handle.setframerate(sample_rate)
        handle.writeframes(raw)
    return path


@pytest.fixture
def wav_factory(tmp_path):
    counter = {"n": 0}

    def _make(samples, sample_rate: int = 16_000, channels: int = 1, sample_width: int = 2) -> str:
        counter["n"] += 1
        path = tmp_path / f"clip_{counter['n']}.wav"
        write_wav(path, samples, sample_rate, channels, sample_width)
        return str(path)

    return _make


@pytest.fixture
def text_factory(tmp_path):
    def _make(text: str, name: str = "transcript.txt") -> str:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)

    return _make
