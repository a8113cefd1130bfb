"""Benchmark extraction and encoding with different worker counts.

This script cuts and encodes many segments from a long synthetic recording
to find a good max_workers setting for the extractor and segment writer.
"""

import argparse
import sys
import tempfile
import time
from pathlib import Path

import numpy as np

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from audio_linguist import AudioExtractor, Signal, Token, detect, write_segments


def generate_test_signal(duration: float, sample_rate: int, channels: int) -> Signal:
    """Generate synthetic multi-channel audio.

    Args:
        duration: Audio duration in seconds
        sample_rate: Sample rate in Hz
        channels: Number of channels

    Returns:
        Signal filled with noise
    """
    num_samples = int(duration * sample_rate)
    samples = 0.1 * np.random.randn(channels, num_samples).astype(np.float32)
    return Signal(samples, sample_rate)


def generate_lesson_tokens(duration: float, segment_length: float = 5.0):
    """Generate a transcript with one numbered phrase every segment_length seconds."""
    tokens = []
    number = 1
    start = 0.0
    while start + segment_length <= duration:
        tokens.append(Token(str(number), start, start + 0.4))
        tokens.append(Token("phrase", start + 0.5, start + segment_length - 0.5))
        number += 1
        start += segment_length
    return tokens


def benchmark_workers(signal: Signal, descriptors, max_workers, num_runs: int = 3):
    """Benchmark extraction and writing with a specific worker count.

    Returns:
        Dictionary of results
    """
    print(f"\nTesting max_workers={max_workers}...")
    extractor = AudioExtractor(max_workers=max_workers)

    extract_times = []
    write_times = []
    for _ in range(num_runs):
        start_time = time.time()
        segments = extractor.extract(signal, descriptors)
        extract_times.append(time.time() - start_time)

        with tempfile.TemporaryDirectory() as output_dir:
            start_time = time.time()
            write_segments(segments, output_dir, max_workers=max_workers)
            write_times.append(time.time() - start_time)

    result = {
        "max_workers": max_workers,
        "extract_time": float(np.mean(extract_times)),
        "write_time": float(np.mean(write_times)),
    }
    result["total_time"] = result["extract_time"] + result["write_time"]

    print(f"  Extract: {result['extract_time']:.3f}s")
    print(f"  Write: {result['write_time']:.3f}s")
    return result


def print_summary(results, num_segments):
    if not results:
        print("\nNo successful results to summarize")
        return

    print(f"\n{'='*70}")
    print(f"Worker Comparison ({num_segments} segments)")
    print(f"{'='*70}\n")

    print(f"{'Workers':<12} {'Extract (s)':<14} {'Write (s)':<14} {'Total (s)':<14} {'Speedup':<10}")
    print("-" * 70)

    baseline = results[0]["total_time"]
    for result in results:
        workers = result["max_workers"] or 1
        print(
            f"{workers:<12} "
            f"{result['extract_time']:<14.3f} "
            f"{result['write_time']:<14.3f} "
            f"{result['total_time']:<14.3f} "
            f"{baseline / result['total_time']:.2f}x"
        )

    best = min(results, key=lambda r: r["total_time"])
    print(f"\nFastest: max_workers={best['max_workers'] or 1}")


def main():
    parser = argparse.ArgumentParser(description="Benchmark extraction worker counts")
    parser.add_argument(
        "--duration",
        type=float,
        default=600.0,
        help="Synthetic audio duration in seconds (default: 600)",
    )
    parser.add_argument(
        "--sample-rate",
        type=int,
        default=44100,
        help="Sample rate in Hz (default: 44100)",
    )
    parser.add_argument(
        "--channels",
        type=int,
        default=2,
        help="Number of channels (default: 2)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        nargs="+",
        default=[1, 2, 4, 8],
        help="Worker counts to test (default: 1 2 4 8)",
    )
    parser.add_argument(
        "--runs",
        type=int,
        default=3,
        help="Runs per worker count (default: 3)",
    )
    args = parser.parse_args()

    signal = generate_test_signal(args.duration, args.sample_rate, args.channels)
    descriptors = detect(generate_lesson_tokens(args.duration))
    print(
        f"{args.duration:.0f}s of {args.channels}-channel audio at {args.sample_rate}Hz, "
        f"{len(descriptors)} segments"
    )

    results = [
        benchmark_workers(signal, descriptors, workers, args.runs)
        for workers in args.workers
    ]
    print_summary(results, len(descriptors))


if __name__ == "__main__":
    main()
