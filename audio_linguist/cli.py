"""Command-line interface for splitting numbered recordings."""

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from .audio_io import write_segments
from .data_models import SegmentBuffer, SplitInfo
from .detector import DEFAULT_MIN_SEGMENT_DURATION
from .exceptions import SplitterError
from .splitter import AudioSplitter
from .transcriber import Transcriber, TranscriptFileTranscriber

logger = logging.getLogger(__name__)


def format_time(seconds: float) -> str:
    """Format seconds as M:SS, e.g. 75.4 -> "1:15"."""
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}:{secs:02d}"


def create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="audio-linguist",
        description=(
            "Split a recording into one WAV file per spoken number "
            "(segment_001.wav, segment_002.wav, ...)."
        ),
    )
    parser.add_argument("audio", help="Audio file (.wav, .mp3, .ogg, .m4a, .flac)")
    parser.add_argument(
        "-o", "--output-dir",
        default="segments",
        help="Directory for segment files (default: segments)",
    )
    parser.add_argument(
        "--min-duration",
        type=float,
        default=DEFAULT_MIN_SEGMENT_DURATION,
        help="Minimum segment duration in seconds (default: 2.0, usual range 1-5)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker threads for extraction and encoding (default: serial)",
    )
    parser.add_argument(
        "--no-write",
        action="store_true",
        help="List detected segments without writing files",
    )

    backend = parser.add_argument_group("transcription")
    backend.add_argument(
        "--transcript",
        help="JSON transcript with word timestamps; skips speech recognition",
    )
    backend.add_argument(
        "--model",
        default="v3_e2e_rnnt",
        help="GigaAM model used when no transcript is given (default: v3_e2e_rnnt)",
    )
    backend.add_argument(
        "--device",
        choices=["cpu", "cuda"],
        default="cpu",
        help="Device for the GigaAM model (default: cpu)",
    )
    backend.add_argument(
        "--batch-size",
        type=int,
        default=1,
        help="GigaAM chunks per batch (default: 1)",
    )
    backend.add_argument(
        "--chunk-length",
        type=float,
        default=4.0,
        help="GigaAM chunk length in seconds (default: 4.0)",
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Warnings only")
    return parser


def build_transcriber(args: argparse.Namespace) -> Transcriber:
    """Load the transcription backend selected on the command line."""
    if args.transcript:
        return TranscriptFileTranscriber(args.transcript)

    # Imported here so the transcript path works without torch installed
    from .gigaam_transcriber import GigaAMTranscriber

    return GigaAMTranscriber(
        model_name=args.model,
        device=args.device,
        compute_type="float16" if args.device == "cuda" else "float32",
        batch_size=args.batch_size,
        chunk_length=args.chunk_length,
    )


def print_segments(segments: List[SegmentBuffer], info: SplitInfo) -> None:
    print(
        f"{info.duration:.1f}s audio, {info.channels} channel(s) at {info.sample_rate}Hz, "
        f"{info.num_tokens} token(s)"
    )
    if not info.found_segments:
        print("No segments detected.")
        return

    for segment in segments:
        print(
            f"[{segment.descriptor.name}] #{segment.marker:<6} "
            f"{format_time(segment.start)} - {format_time(segment.end)} "
            f"({segment.duration:.1f}s) \"{segment.text}\""
        )
    print(
        f"Finished processing! {info.num_segments} segments extracted "
        f"in {info.processing_time:.1f}s"
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the CLI.

    Returns:
        Exit status: 0 on success (including "no segments"), 1 on failure
    """
    args = create_argument_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level="DEBUG", format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    elif args.quiet:
        logging.basicConfig(level="WARNING", format="%(levelname)s - %(message)s")
    else:
        logging.basicConfig(
            level="INFO", format="%(asctime)s - %(levelname)s - %(message)s"
        )

    try:
        transcriber = build_transcriber(args)
        try:
            splitter = AudioSplitter(
                transcriber,
                min_segment_duration=args.min_duration,
                max_workers=args.workers,
            )
            segments, info = splitter.split_file(args.audio)
        finally:
            transcriber.close()

        print_segments(segments, info)
        if segments and not args.no_write:
            paths = write_segments(segments, args.output_dir, max_workers=args.workers)
            print(f"Wrote {len(paths)} file(s) to {args.output_dir}")

    except (SplitterError, FileNotFoundError, ValueError, TypeError) as e:
        logger.error(f"Error processing audio: {e}")
        return 1
    except ImportError as e:
        logger.error(
            f"Speech recognition needs the gigaam extra "
            f"(pip install audio-linguist[gigaam]) or --transcript: {e}"
        )
        return 1
    except KeyboardInterrupt:
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
