"""Command line entry point: render a test tone or a score to a WAVE file."""

from __future__ import annotations

import argparse
import math
import os
import sys
import xml.etree.ElementTree as ET
from collections.abc import Iterable, Iterator, Sequence

from .synthesizer import Synthesizer
from .wave import WaveError, WaveWriter

SAMPLE_MIN = -32768
SAMPLE_MAX = 32767
OUTPUT_CHANNELS = 2
OUTPUT_SAMPLE_SIZE = 16
DEFAULT_SAMPLE_RATE = 44100.0
TONE_AMPLITUDE = 3200
DEFAULT_TONE_FREQ = 1000.0
DEFAULT_TONE_DURATION = 5.0


def range_bound(value: float) -> int:
    """Clamp a value to the signed 16-bit range, truncating toward zero."""
    if value < SAMPLE_MIN:
        return SAMPLE_MIN
    if value > SAMPLE_MAX:
        return SAMPLE_MAX
    return int(value)


def tone_frames(
    freq: float = DEFAULT_TONE_FREQ,
    duration: float = DEFAULT_TONE_DURATION,
    sample_rate: float = DEFAULT_SAMPLE_RATE,
) -> Iterator[tuple[int, int]]:
    """Yield stereo 16-bit frames of a sine tone lasting ``duration`` seconds."""
    if sample_rate <= 0:
        raise ValueError("sample rate must be positive")
    step = 1.0 / sample_rate
    time = 0.0
    while time < duration:
        sample = int(TONE_AMPLITUDE * math.sin(time * 2 * math.pi * freq))
        yield (sample, sample)
        time += step


def synthesizer_frames(synthesizer: Synthesizer) -> Iterator[tuple[int, ...]]:
    """Play a synthesizer from the start, yielding 16-bit frames."""
    for frame in synthesizer.frames():
        yield tuple(range_bound(value * SAMPLE_MAX) for value in frame)


def _write_frames(
    frames: Iterable[Sequence[int]],
    output_path: str | os.PathLike[str],
    sample_rate: float,
) -> int:
    count = 0
    with WaveWriter(
        output_path,
        channels=OUTPUT_CHANNELS,
        sample_size=OUTPUT_SAMPLE_SIZE,
        sample_rate=sample_rate,
    ) as writer:
        for frame in frames:
            writer.write_frame(frame)
            count += 1
    return count


def render_score(
    score_path: str | os.PathLike[str],
    output_path: str | os.PathLike[str],
    sample_rate: float = DEFAULT_SAMPLE_RATE,
) -> int:
    """Render a score file to a stereo 16-bit WAVE file; return the frames written."""
    synthesizer = Synthesizer(sample_rate, OUTPUT_CHANNELS)
    synthesizer.open_score(score_path)
    return _write_frames(synthesizer_frames(synthesizer), output_path, sample_rate)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="synthie", description="Render audio to WAVE files.")
    commands = parser.add_subparsers(dest="command", required=True)

    tone = commands.add_parser("tone", help="render a sine test tone")
    tone.add_argument("output", help="WAVE file to write")
    tone.add_argument("--freq", type=float, default=DEFAULT_TONE_FREQ, help="frequency in Hz")
    tone.add_argument(
        "--duration", type=float, default=DEFAULT_TONE_DURATION, help="length in seconds"
    )
    tone.add_argument("--rate", type=float, default=DEFAULT_SAMPLE_RATE, help="sample rate")

    score = commands.add_parser("score", help="render a score file")
    score.add_argument("score", help="score file to play")
    score.add_argument("output", help="WAVE file to write")
    score.add_argument("--rate", type=float, default=DEFAULT_SAMPLE_RATE, help="sample rate")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line; return the process exit status."""
    args = _build_parser().parse_args(argv)
    if args.rate <= 0:
        print("synthie: sample rate must be positive", file=sys.stderr)
        return 2
    try:
        if args.command == "tone":
            count = _write_frames(
                tone_frames(args.freq, args.duration, args.rate), args.output, args.rate
            )
        else:
            count = render_score(args.score, args.output, args.rate)
    except (OSError, ET.ParseError, WaveError) as exc:
        print(f"synthie: {exc}", file=sys.stderr)
        return 1
    print(f"wrote {count} frames to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())