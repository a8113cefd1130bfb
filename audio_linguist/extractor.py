"""Extraction of segment audio from the source signal.

Segments are cut from the original decoded signal rather than from the
mono 16 kHz copy used for transcription, so extracted audio keeps the
source channel layout and sample rate.
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .data_models import SegmentBuffer, SegmentDescriptor, Signal
from .exceptions import InvalidDescriptorError
from .resampler import ensure_valid_signal

logger = logging.getLogger(__name__)


def sample_range(descriptor: SegmentDescriptor, sample_rate: int) -> Tuple[int, int]:
    """Map a descriptor's time interval onto sample indices.

    Returns:
        start_sample: floor(start * sample_rate)
        length: floor(end * sample_rate) - start_sample

    Raises:
        InvalidDescriptorError: If the interval is not finite, starts
            before 0 or covers no samples
    """
    if not (math.isfinite(descriptor.start) and math.isfinite(descriptor.end)):
        raise InvalidDescriptorError(
            f"segment {descriptor.id} has non-finite times "
            f"({descriptor.start}s - {descriptor.end}s)"
        )
    start_sample = math.floor(descriptor.start * sample_rate)
    end_sample = math.floor(descriptor.end * sample_rate)
    length = end_sample - start_sample

    if start_sample < 0:
        raise InvalidDescriptorError(
            f"segment {descriptor.id} starts before the audio ({descriptor.start}s)"
        )
    if length <= 0:
        raise InvalidDescriptorError(
            f"segment {descriptor.id} ({descriptor.start}s - {descriptor.end}s) "
            f"covers no samples at {sample_rate}Hz"
        )
    return start_sample, length


class AudioExtractor:
    """Cuts segment buffers out of a source signal.

    Each segment depends only on the shared, read-only source samples, so
    segments can be cut concurrently.

    Attributes:
        max_workers: Number of worker threads (None or 1 extracts serially)
    """

    def __init__(self, max_workers: Optional[int] = None):
        """Initialize audio extractor.

        Args:
            max_workers: Worker threads used to cut segments (default: None,
                serial extraction)

        Raises:
            TypeError: If max_workers is not an int
            ValueError: If max_workers is not positive
        """
        if max_workers is not None:
            if not isinstance(max_workers, int) or isinstance(max_workers, bool):
                raise TypeError(
                    f"max_workers must be int, got {type(max_workers).__name__}"
                )
            if max_workers < 1:
                raise ValueError(
                    f"max_workers must be positive integer, got {max_workers}"
                )

        self.max_workers = max_workers

    def extract(
        self,
        signal: Signal,
        descriptors: Sequence[SegmentDescriptor],
    ) -> List[SegmentBuffer]:
        """Extract one buffer per descriptor, in descriptor order.

        Args:
            signal: Original decoded signal (not the resampled copy)
            descriptors: Detected segments

        Returns:
            Segment buffers with the source channel count and sample rate

        Raises:
            PreconditionError: If the signal is empty
            InvalidDescriptorError: If a descriptor covers no samples
        """
        ensure_valid_signal(signal)
        if not descriptors:
            return []

        # Reject malformed descriptors before cutting any audio
        for descriptor in descriptors:
            sample_range(descriptor, signal.sample_rate)

        logger.info(f"Extracting {len(descriptors)} audio segment(s)")

        if self.max_workers is None or self.max_workers == 1:
            return [self.extract_one(signal, d) for d in descriptors]

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return list(
                executor.map(lambda d: self.extract_one(signal, d), descriptors)
            )

    @staticmethod
    def extract_one(signal: Signal, descriptor: SegmentDescriptor) -> SegmentBuffer:
        """Copy a descriptor's samples out of the signal.

        Samples past the end of the signal are zero-padded.
        """
        start_sample, length = sample_range(descriptor, signal.sample_rate)

        segment = np.zeros((signal.channels, length), dtype=np.float32)
        available = signal.samples[:, start_sample:start_sample + length]
        segment[:, :available.shape[1]] = available

        if available.shape[1] < length:
            logger.debug(
                f"Segment {descriptor.id} runs past the end of the audio, "
                f"padded {length - available.shape[1]} sample(s)"
            )

        return SegmentBuffer(
            descriptor=descriptor,
            signal=Signal(segment, signal.sample_rate),
        )


def extract(
    signal: Signal,
    descriptors: Sequence[SegmentDescriptor],
    max_workers: Optional[int] = None,
) -> List[SegmentBuffer]:
    """Extract segment buffers with a one-off AudioExtractor."""
    return AudioExtractor(max_workers).extract(signal, descriptors)
