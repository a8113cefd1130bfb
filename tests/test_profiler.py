"""Tests for performance profiling."""

import time

import pytest

from audio_linguist import PerformanceProfiler, PerformanceStats


class TestPerformanceProfiler:
    """Test stage timing."""

    def test_stage_recorded(self):
        """Test a stage's time is recorded under its name."""
        profiler = PerformanceProfiler()

        with profiler.stage("detect"):
            time.sleep(0.01)

        assert profiler.stage_times["detect"] > 0.0
        assert profiler.elapsed >= profiler.stage_times["detect"]

    def test_stage_accumulates(self):
        """Test repeated stages add up."""
        profiler = PerformanceProfiler()

        with profiler.stage("extract"):
            time.sleep(0.005)
        first = profiler.stage_times["extract"]
        with profiler.stage("extract"):
            time.sleep(0.005)

        assert profiler.stage_times["extract"] > first

    def test_stage_recorded_on_error(self):
        """Test time is recorded when the block raises."""
        profiler = PerformanceProfiler()

        with pytest.raises(RuntimeError):
            with profiler.stage("transcribe"):
                raise RuntimeError("boom")

        assert "transcribe" in profiler.stage_times

    def test_calculate_stats(self):
        """Test real-time factor and throughput."""
        stats = PerformanceProfiler.calculate_stats(
            audio_duration=60.0,
            processing_time=3.0,
            num_segments=12,
            stage_times={"transcribe": 2.5},
        )

        assert isinstance(stats, PerformanceStats)
        assert stats.rtf == pytest.approx(0.05)
        assert stats.throughput == pytest.approx(20.0)
        assert stats.num_segments == 12
        assert "transcribe: 2.50s" in str(stats)

    def test_calculate_stats_zero_durations(self):
        """Test zero durations do not divide by zero."""
        stats = PerformanceProfiler.calculate_stats(0.0, 0.0, 0)

        assert stats.rtf == 0.0
        assert stats.throughput == 0.0
        assert stats.stage_times == {}
