"""Performance profiling utilities.

This module provides tools for timing the stages of a splitting run and
summarizing its throughput.
"""

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict


@dataclass
class PerformanceStats:
    """Performance statistics for a splitting run.

    Attributes:
        audio_duration: Source audio duration in seconds
        processing_time: Wall-clock processing time in seconds
        rtf: Real-time factor (processing_time / audio_duration)
        throughput: Audio seconds processed per wall-clock second
        num_segments: Number of segments extracted
        stage_times: Wall-clock time per stage in seconds
    """
    audio_duration: float
    processing_time: float
    rtf: float
    throughput: float
    num_segments: int
    stage_times: Dict[str, float] = field(default_factory=dict)

    def __str__(self) -> str:
        stages = ", ".join(
            f"{name}: {seconds:.2f}s" for name, seconds in self.stage_times.items()
        )
        return (
            f"Performance: {self.audio_duration:.1f}s audio in {self.processing_time:.2f}s "
            f"(RTF: {self.rtf:.3f}, throughput: {self.throughput:.1f}x, "
            f"segments: {self.num_segments}"
            + (f", {stages}" if stages else "")
            + ")"
        )


class PerformanceProfiler:
    """Records wall-clock time per pipeline stage.

    Example:
        >>> profiler = PerformanceProfiler()
        >>> with profiler.stage("transcribe"):
        ...     tokens = transcriber.transcribe(audio, 16000)
        >>> profiler.stage_times["transcribe"]
    """

    def __init__(self):
        self.stage_times: Dict[str, float] = {}
        self._start_time = time.perf_counter()

    @contextmanager
    def stage(self, name: str):
        """Time the enclosed block and record it under name.

        Time is recorded even if the block raises.
        """
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start
            self.stage_times[name] = self.stage_times.get(name, 0.0) + elapsed

    @property
    def elapsed(self) -> float:
        """Seconds since the profiler was created."""
        return time.perf_counter() - self._start_time

    @staticmethod
    def calculate_stats(
        audio_duration: float,
        processing_time: float,
        num_segments: int,
        stage_times: Dict[str, float] = None,
    ) -> PerformanceStats:
        """Calculate performance statistics.

        Args:
            audio_duration: Source audio duration in seconds
            processing_time: Wall-clock processing time in seconds
            num_segments: Number of segments extracted
            stage_times: Wall-clock time per stage in seconds

        Returns:
            PerformanceStats object with calculated metrics
        """
        rtf = processing_time / audio_duration if audio_duration > 0 else 0.0
        throughput = audio_duration / processing_time if processing_time > 0 else 0.0

        return PerformanceStats(
            audio_duration=audio_duration,
            processing_time=processing_time,
            rtf=rtf,
            throughput=throughput,
            num_segments=num_segments,
            stage_times=dict(stage_times or {}),
        )
