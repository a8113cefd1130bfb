"""Core data models for audio-linguist.

This module defines the data structures used throughout the splitting
pipeline for representing decoded audio, transcript tokens, detected
segments and the metadata of a splitting run.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

import numpy as np

from .exceptions import PreconditionError


@dataclass(frozen=True, eq=False)
class Signal:
    """Multi-channel floating point PCM audio.

    Samples are stored as a 2-D float32 array shaped (channels, frames),
    so every channel has the same length by construction. Nominal sample
    range is [-1.0, 1.0].

    Attributes:
        samples: Audio samples with shape (channels, frames)
        sample_rate: Sample rate in Hz
    """
    samples: np.ndarray
    sample_rate: int

    def __post_init__(self):
        samples = np.asarray(self.samples, dtype=np.float32)
        if samples.ndim != 2:
            raise PreconditionError(
                f"samples must be 2-dimensional (channels, frames), "
                f"got shape {samples.shape}"
            )
        if not isinstance(self.sample_rate, (int, np.integer)) or isinstance(self.sample_rate, bool):
            raise TypeError(
                f"sample_rate must be int, got {type(self.sample_rate).__name__}"
            )
        if self.sample_rate <= 0:
            raise PreconditionError(
                f"sample_rate must be positive, got {self.sample_rate}"
            )
        object.__setattr__(self, "samples", samples)
        object.__setattr__(self, "sample_rate", int(self.sample_rate))

    @classmethod
    def mono(cls, audio: np.ndarray, sample_rate: int) -> "Signal":
        """Wrap a 1-D sample array as a single-channel signal."""
        audio = np.asarray(audio, dtype=np.float32)
        if audio.ndim != 1:
            raise PreconditionError(
                f"audio must be 1-dimensional, got shape {audio.shape}"
            )
        return cls(audio[np.newaxis, :], sample_rate)

    @classmethod
    def from_channels(
        cls,
        channels: Sequence[np.ndarray],
        sample_rate: int,
    ) -> "Signal":
        """Build a signal from one 1-D array per channel.

        Raises:
            PreconditionError: If channel arrays differ in length
        """
        arrays = [np.asarray(channel, dtype=np.float32) for channel in channels]
        lengths = {len(array) for array in arrays}
        if len(lengths) > 1:
            raise PreconditionError(
                f"all channels must have the same length, got lengths {sorted(lengths)}"
            )
        if not arrays:
            return cls(np.zeros((0, 0), dtype=np.float32), sample_rate)
        return cls(np.stack(arrays), sample_rate)

    @property
    def channels(self) -> int:
        return self.samples.shape[0]

    @property
    def num_samples(self) -> int:
        """Number of sample frames per channel."""
        return self.samples.shape[1]

    @property
    def duration(self) -> float:
        return self.num_samples / self.sample_rate


@dataclass(frozen=True)
class Token:
    """A transcribed word with timing information.

    Attributes:
        text: Token text as emitted by the transcriber
        start: Start time in seconds
        end: End time in seconds
    """
    text: str
    start: float
    end: float

    def __post_init__(self):
        if not (math.isfinite(self.start) and math.isfinite(self.end)):
            raise PreconditionError(
                f"token times must be finite, got [{self.start}, {self.end}]"
            )
        if self.start < 0 or self.end < 0:
            raise PreconditionError(
                f"token times must be non-negative, got [{self.start}, {self.end}]"
            )
        if self.end < self.start:
            raise PreconditionError(
                f"token end ({self.end}s) must not precede start ({self.start}s)"
            )


@dataclass(frozen=True)
class SegmentDescriptor:
    """A detected segment introduced by a spoken number.

    Attributes:
        id: Ordinal identifier (1-based, detection order)
        start: Start time in seconds, the onset of the marker token
        end: End time in seconds, the end of the last absorbed token
        marker: Number recognized in the marker token
        text: Marker text followed by the absorbed words
        tokens: Marker token followed by the absorbed tokens
    """
    id: int
    start: float
    end: float
    marker: int
    text: str
    tokens: Tuple[Token, ...] = ()

    @property
    def duration(self) -> float:
        return self.end - self.start

    @property
    def name(self) -> str:
        """Zero-padded ordinal used for file naming, e.g. 7 -> "007"."""
        return f"{self.id:03d}"


@dataclass(frozen=True, eq=False)
class SegmentBuffer:
    """A segment descriptor with its audio cut from the source signal.

    Attributes:
        descriptor: Segment the audio belongs to
        signal: Extracted audio with the source's channel count and rate
    """
    descriptor: SegmentDescriptor
    signal: Signal

    @property
    def id(self) -> int:
        return self.descriptor.id

    @property
    def start(self) -> float:
        return self.descriptor.start

    @property
    def end(self) -> float:
        return self.descriptor.end

    @property
    def duration(self) -> float:
        return self.descriptor.duration

    @property
    def marker(self) -> int:
        return self.descriptor.marker

    @property
    def text(self) -> str:
        return self.descriptor.text

    @property
    def filename(self) -> str:
        return segment_filename(self.descriptor.id)


@dataclass
class AudioChunk:
    """Represents a chunk of audio with metadata.

    Used by chunked transcription backends to split long audio into
    pieces the model can handle.

    Attributes:
        audio: Audio samples as numpy array
        start_time: Start time in seconds relative to original audio
        end_time: End time in seconds relative to original audio
        chunk_index: Index in the sequence of chunks (0-based)
    """
    audio: np.ndarray
    start_time: float
    end_time: float
    chunk_index: int


@dataclass
class SplitInfo:
    """Metadata about a splitting run.

    Attributes:
        duration: Source audio duration in seconds
        sample_rate: Source sample rate in Hz
        channels: Source channel count
        num_tokens: Number of tokens returned by the transcriber
        num_segments: Number of segments extracted
        min_segment_duration: Minimum segment duration in effect
        transcript: Transcript text, tokens joined by spaces
        processing_time: Total wall-clock time for the run in seconds
        stage_times: Wall-clock time per pipeline stage in seconds
    """
    duration: float
    sample_rate: int
    channels: int
    num_tokens: int
    num_segments: int
    min_segment_duration: float
    transcript: str
    processing_time: float
    stage_times: Dict[str, float] = field(default_factory=dict)

    @property
    def found_segments(self) -> bool:
        """False when the transcript yielded no segment above the minimum."""
        return self.num_segments > 0


def segment_filename(segment_id: int) -> str:
    """Download name for a segment, e.g. 7 -> "segment_007.wav"."""
    return f"segment_{segment_id:03d}.wav"


def transcript_text(tokens: List[Token]) -> str:
    """Join the non-blank token texts with single spaces."""
    return " ".join(
        token.text.strip() for token in tokens if token.text.strip()
    )
