from __future__ import annotations

import argparse
import sys
from typing import List, Optional, TextIO, Tuple

from stopsync.aligner import align_files
from stopsync.errors import (
    AlignmentError,
    ArgumentError,
    ConfigError,
    DecodeError,
    SampleReadError,
)
from stopsync.logging_utils import get_logger, setup_logging
from stopsync.types import AlignmentConfig, EdgeCorrection, InputMode, SegmentationPolicy

log = get_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_ARGUMENT = 2
EXIT_NOT_FOUND = 3
EXIT_DECODE = 4


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments for sentence stop alignment."""
    defaults = AlignmentConfig()
    parser = argparse.ArgumentParser(
        description="Align transcript sentences to silence boundaries in a WAV file and print JSON")
    parser.add_argument("audio_path", nargs="?", default=None, help="PCM WAV recording")
    parser.add_argument("text_path", nargs="?", default=None, help="Plain-text transcript")
    parser.add_argument("--input_mode", choices=[m.value for m in InputMode], default=defaults.input_mode.value,
                        help="Take paths from positional args or from two stdin lines; "
                             "stdin mode rejects positional paths (default: args)")
    parser.add_argument("--policy", choices=[p.value for p in SegmentationPolicy], default=defaults.policy.value,
                        help="Sentence splitting policy (default: punctuation)")
    parser.add_argument("--edge_correction", choices=[e.value for e in EdgeCorrection],
                        default=defaults.edge_correction.value,
                        help="Stop time correction after pairing (default: zero_first)")
    parser.add_argument("--silence_threshold", type=int, default=defaults.silence_threshold,
                        help="Samples with |amplitude| below this count as silent (default: 1)")
    parser.add_argument("--min_silence_duration", type=float, default=defaults.min_silence_duration,
                        help="Seconds of silence per boundary (default: 0.5)")
    parser.add_argument("--indent", type=int, default=None, help="Pretty-print JSON with this indent")
    parser.add_argument("--output", type=str, default=None, help="Write JSON here instead of stdout")
    parser.add_argument("--log_level", type=str, default=None, help="Log level (e.g., INFO, DEBUG)")
    return parser.parse_args(argv)


def read_paths_from_stdin(stream: TextIO) -> Tuple[str, str]:
    """Read the audio path then the transcript path, one per line."""
    audio_path = stream.readline().strip()
    text_path = stream.readline().strip()
    if not audio_path or not text_path:
        raise ArgumentError("Expected two lines on stdin: audio path, then transcript path")
    return audio_path, text_path


def resolve_paths(args: argparse.Namespace, stdin: TextIO) -> Tuple[str, str]:
    if InputMode(args.input_mode) is InputMode.STDIN:
        if args.audio_path or args.text_path:
            raise ArgumentError("Positional paths cannot be combined with --input_mode stdin")
        return read_paths_from_stdin(stdin)
    if not args.audio_path or not args.text_path:
        raise ArgumentError("Both audio_path and text_path are required")
    return args.audio_path, args.text_path


def build_config(args: argparse.Namespace) -> AlignmentConfig:
    return AlignmentConfig(
        silence_threshold=args.silence_threshold,
        min_silence_duration=args.min_silence_duration,
        policy=SegmentationPolicy(args.policy),
        edge_correction=EdgeCorrection(args.edge_correction),
        input_mode=InputMode(args.input_mode),
    ).validate()


def run(args: argparse.Namespace, stdin: TextIO, stdout: TextIO) -> None:
    audio_path, text_path = resolve_paths(args, stdin)
    result = align_files(audio_path, text_path, build_config(args))
    payload = result.to_json(indent=args.indent)
    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            f.write(payload + "\n")
        log.info("result written", extra={"file": args.output, "stops": len(result.stops)})
    else:
        stdout.write(payload + "\n")


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point. Returns the process exit status.

    Examples:
      python3 sentence_stop_aligner.py narration.wav narration.txt
      printf 'narration.wav\\nnarration.txt\\n' | python3 sentence_stop_aligner.py --input_mode stdin --policy period
    """
    args = parse_args(argv)
    setup_logging(args.log_level, force=args.log_level is not None)

    try:
        run(args, sys.stdin, sys.stdout)
    except (ArgumentError, ConfigError) as e:
        log.error("bad arguments: %s", e)
        return EXIT_ARGUMENT
    except FileNotFoundError as e:
        log.error("file not found: %s", e)
        return EXIT_NOT_FOUND
    except (DecodeError, SampleReadError) as e:
        log.error("audio decode failed: %s", e)
        return EXIT_DECODE
    except (AlignmentError, OSError) as e:
        log.error("alignment failed: %s", e)
        return EXIT_ERROR
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
