"""Basic usage example for audio-linguist.

This example demonstrates:
1. Splitting a recording with a transcript file
2. Reading the segment metadata
3. Writing segments and encoding them in memory
4. Working with in-memory signals and a custom transcriber
"""

import json
import tempfile
from pathlib import Path

import numpy as np
import soundfile as sf

from audio_linguist import (
    AudioSplitter,
    Signal,
    SplitterError,
    Token,
    Transcriber,
    TranscriptFileTranscriber,
    encode,
    write_segments,
)

workdir = Path(tempfile.mkdtemp(prefix="audio-linguist-"))

# Build a small stereo "lesson": three tones, each announced by a number
sample_rate = 44100
t = np.arange(int(12 * sample_rate)) / sample_rate
tone = 0.3 * np.sin(2 * np.pi * 330 * t)
sf.write(str(workdir / "lesson.wav"), np.stack([tone, 0.5 * tone], axis=1), sample_rate)

words = [
    {"text": "1", "start": 0.0, "end": 0.4},
    {"text": "bonjour", "start": 0.6, "end": 1.4},
    {"text": "madame", "start": 1.5, "end": 2.7},
    {"text": "2", "start": 4.0, "end": 4.3},
    {"text": "merci", "start": 4.5, "end": 6.8},
    {"text": "3", "start": 8.0, "end": 8.3},
]
(workdir / "lesson.json").write_text(json.dumps(words), encoding="utf-8")

# =============================================================================
# Example 1: Splitting a File
# =============================================================================
print("=" * 70)
print("Example 1: Splitting a File")
print("=" * 70)

# - min_segment_duration: segments shorter than this are dropped (seconds)
# - max_workers: threads used to cut segments (None extracts serially)
splitter = AudioSplitter(
    TranscriptFileTranscriber(workdir / "lesson.json"),
    min_segment_duration=2.0,
    max_workers=2,
)

try:
    segments, info = splitter.split_file(workdir / "lesson.wav")
except SplitterError as e:
    print(f"Error during splitting: {e}")
    raise SystemExit(1)

print(f"\nAudio duration: {info.duration:.2f}s")
print(f"Channels: {info.channels} at {info.sample_rate}Hz")
print(f"Transcript: {info.transcript}")
print(f"Processing time: {info.processing_time:.3f}s")
print()

# "3" never gathers two seconds of speech, so only two segments remain
print("Segments:")
print("-" * 70)
for segment in segments:
    print(
        f"{segment.filename}  marker={segment.marker}  "
        f"[{segment.start:5.2f}s - {segment.end:5.2f}s]  {segment.text}"
    )

# =============================================================================
# Example 2: Writing and Encoding Segments
# =============================================================================
print("\n" + "=" * 70)
print("Example 2: Writing and Encoding Segments")
print("=" * 70)

paths = write_segments(segments, workdir / "segments")
for path in paths:
    print(f"  {path} ({path.stat().st_size} bytes)")

# encode() returns the WAV bytes without touching the filesystem
data = encode(segments[0])
print(f"\nIn-memory WAV for segment 1: {len(data)} bytes, header {data[:4]!r}")

# =============================================================================
# Example 3: Custom Transcriber and In-Memory Signals
# =============================================================================
print("\n" + "=" * 70)
print("Example 3: Custom Transcriber and In-Memory Signals")
print("=" * 70)


class FixedTranscriber(Transcriber):
    """Any backend works as long as it returns timed tokens."""

    def transcribe(self, audio, sample_rate, cancel_token=None):
        return [Token("42", 0.0, 0.5), Token("answer", 0.6, 3.0)]


signal = Signal.mono(np.zeros(4 * 16000, dtype=np.float32), 16000)
segments, info = AudioSplitter(FixedTranscriber()).split(signal)
print(f"\nFound {info.num_segments} segment(s): {[s.text for s in segments]}")
