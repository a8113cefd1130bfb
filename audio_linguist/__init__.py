"""audio-linguist: Split recordings into numbered segments.

This module finds spoken numbers ("1", "2", "15", ...) in a transcript of
a recording and cuts the recording into one WAV file per numbered
segment, keeping the source's channels and sample rate.

Example:
    >>> from audio_linguist import AudioSplitter, TranscriptFileTranscriber, write_segments
    >>> splitter = AudioSplitter(TranscriptFileTranscriber("lesson.json"))
    >>> segments, info = splitter.split_file("lesson.wav")
    >>> for segment in segments:
    ...     print(f"{segment.filename} [{segment.start:.2f}s - {segment.end:.2f}s] {segment.text}")
    >>> write_segments(segments, "segments")
"""

from .audio_io import decode_bytes, load_signal, write_segments
from .cancellation import CancellationToken
from .chunker import AudioChunker
from .data_models import (
    AudioChunk,
    SegmentBuffer,
    SegmentDescriptor,
    Signal,
    SplitInfo,
    Token,
    segment_filename,
)
from .detector import SegmentDetector, detect, is_marker
from .encoder import build_header, encode
from .exceptions import (
    AudioDecodeError,
    InvalidDescriptorError,
    PipelineCancelledError,
    PreconditionError,
    SplitterError,
    TranscriberUnavailableError,
    TranscriptionError,
)
from .extractor import AudioExtractor, extract
from .profiler import PerformanceProfiler, PerformanceStats
from .resampler import downmix, normalize, resample
from .splitter import AudioSplitter
from .transcriber import Transcriber, TranscriptFileTranscriber, tokens_from_json

__version__ = "0.1.0"

__all__ = [
    "AudioChunk",
    "AudioChunker",
    "AudioDecodeError",
    "AudioExtractor",
    "AudioSplitter",
    "CancellationToken",
    "InvalidDescriptorError",
    "PerformanceProfiler",
    "PerformanceStats",
    "PipelineCancelledError",
    "PreconditionError",
    "SegmentBuffer",
    "SegmentDescriptor",
    "SegmentDetector",
    "Signal",
    "SplitInfo",
    "SplitterError",
    "Token",
    "TranscriberUnavailableError",
    "Transcriber",
    "TranscriptFileTranscriber",
    "TranscriptionError",
    "build_header",
    "decode_bytes",
    "detect",
    "downmix",
    "encode",
    "extract",
    "is_marker",
    "load_signal",
    "normalize",
    "resample",
    "segment_filename",
    "tokens_from_json",
    "write_segments",
]
