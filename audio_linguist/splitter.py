"""Main API class for audio-linguist.

This module provides the AudioSplitter class, which runs the splitting
pipeline for one audio file: normalize the audio for the transcriber,
transcribe it, detect numbered segments in the transcript, and cut the
segments out of the original audio.
"""

import logging
import os
from typing import List, Optional, Tuple, Union

from .audio_io import load_signal
from .cancellation import CancellationToken
from .data_models import SegmentBuffer, Signal, SplitInfo, Token, transcript_text
from .detector import DEFAULT_MIN_SEGMENT_DURATION, SegmentDetector
from .exceptions import SplitterError, TranscriptionError
from .extractor import AudioExtractor
from .profiler import PerformanceProfiler
from .resampler import ensure_valid_signal, normalize
from .transcriber import Transcriber

logger = logging.getLogger(__name__)

# Range offered to users for the minimum segment duration, in seconds
PRACTICAL_MIN_DURATION_RANGE = (1.0, 5.0)


class AudioSplitter:
    """Splits a recording into one segment per spoken number.

    The splitter holds no state between runs; every call to split()
    starts from the decoded signal it is given.

    Example:
        >>> splitter = AudioSplitter(TranscriptFileTranscriber("lesson.json"))
        >>> segments, info = splitter.split_file("lesson.wav")
        >>> for segment in segments:
        ...     print(f"{segment.filename} [{segment.start:.2f}s - {segment.end:.2f}s] {segment.text}")

    Attributes:
        transcriber: Backend producing word tokens
        min_segment_duration: Shortest segment kept, in seconds
        max_workers: Worker threads used for extraction
        detector: SegmentDetector configured with min_segment_duration
        extractor: AudioExtractor configured with max_workers
    """

    def __init__(
        self,
        transcriber: Transcriber,
        min_segment_duration: float = DEFAULT_MIN_SEGMENT_DURATION,
        max_workers: Optional[int] = None,
    ):
        """Initialize the splitter.

        Args:
            transcriber: Loaded transcription backend
            min_segment_duration: Minimum segment duration in seconds
                (default: 2.0)
            max_workers: Worker threads for extraction (default: None, serial)

        Raises:
            TypeError: If transcriber is not a Transcriber or parameters
                have invalid types
            ValueError: If parameters are invalid
        """
        if not isinstance(transcriber, Transcriber):
            raise TypeError(
                f"transcriber must be Transcriber, got {type(transcriber).__name__}"
            )

        self.detector = SegmentDetector(min_segment_duration)
        self.extractor = AudioExtractor(max_workers)

        low, high = PRACTICAL_MIN_DURATION_RANGE
        if not low <= min_segment_duration <= high:
            logger.warning(
                f"min_segment_duration={min_segment_duration}s is outside "
                f"the usual range [{low}, {high}]s"
            )

        self.transcriber = transcriber
        self.min_segment_duration = self.detector.min_segment_duration
        self.max_workers = max_workers

    def split(
        self,
        signal: Signal,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Tuple[List[SegmentBuffer], SplitInfo]:
        """Split decoded audio into numbered segments.

        Args:
            signal: Decoded source audio
            cancel_token: Optional token to abandon the run

        Returns:
            segments: Extracted segments in detection order (may be empty)
            info: Run metadata; info.found_segments is False when the
                transcript held no segment above the minimum duration

        Raises:
            PreconditionError: If the signal is empty
            TranscriptionError: If transcription fails or returns no text
            PipelineCancelledError: If cancel_token is cancelled
        """
        ensure_valid_signal(signal)
        profiler = PerformanceProfiler()

        self._check_cancelled(cancel_token, "normalization")
        with profiler.stage("normalize"):
            normalized = normalize(signal, self.transcriber.sample_rate)

        self._check_cancelled(cancel_token, "transcription")
        with profiler.stage("transcribe"):
            tokens = self._transcribe(normalized, cancel_token)

        self._check_cancelled(cancel_token, "segment detection")
        with profiler.stage("detect"):
            descriptors = self.detector.detect(tokens)

        self._check_cancelled(cancel_token, "extraction")
        with profiler.stage("extract"):
            segments = self.extractor.extract(signal, descriptors)

        stats = PerformanceProfiler.calculate_stats(
            audio_duration=signal.duration,
            processing_time=profiler.elapsed,
            num_segments=len(segments),
            stage_times=profiler.stage_times,
        )

        info = SplitInfo(
            duration=signal.duration,
            sample_rate=signal.sample_rate,
            channels=signal.channels,
            num_tokens=len(tokens),
            num_segments=len(segments),
            min_segment_duration=self.min_segment_duration,
            transcript=transcript_text(tokens),
            processing_time=stats.processing_time,
            stage_times=stats.stage_times,
        )

        if segments:
            logger.info(
                f"Finished processing! {len(segments)} segments extracted "
                f"in {info.processing_time:.1f}s"
            )
        else:
            logger.info("No segments detected")
        logger.debug(str(stats))

        return segments, info

    def split_file(
        self,
        path: Union[str, os.PathLike],
        cancel_token: Optional[CancellationToken] = None,
    ) -> Tuple[List[SegmentBuffer], SplitInfo]:
        """Decode an audio file and split it.

        Raises:
            FileNotFoundError: If the file does not exist
            AudioDecodeError: If the file cannot be decoded
        """
        signal = load_signal(path)
        return self.split(signal, cancel_token)

    def _transcribe(
        self,
        normalized: Signal,
        cancel_token: Optional[CancellationToken],
    ) -> List[Token]:
        """Run the transcriber, turning any failure into TranscriptionError."""
        try:
            tokens = self.transcriber.transcribe(
                normalized.samples[0],
                normalized.sample_rate,
                cancel_token=cancel_token,
            )
        except SplitterError:
            raise
        except Exception as e:
            raise TranscriptionError(
                f"Transcription failed. Error: {str(e)}"
            ) from e

        tokens = list(tokens or [])
        for i, token in enumerate(tokens):
            if not isinstance(token, Token):
                raise TranscriptionError(
                    f"transcriber returned {type(token).__name__} at index {i}, expected Token"
                )
        if not transcript_text(tokens):
            raise TranscriptionError("Transcription returned empty text")

        ordered = sorted(tokens, key=lambda token: token.start)
        if ordered != tokens:
            logger.warning("Transcriber returned tokens out of order; sorted by start time")
        logger.info(f"Transcribed {len(ordered)} token(s)")
        return ordered

    @staticmethod
    def _check_cancelled(cancel_token: Optional[CancellationToken], stage: str) -> None:
        if cancel_token is not None:
            cancel_token.raise_if_cancelled(stage)
