"""Tests for BatchProcessor functionality."""

import numpy as np
import pytest

torch = pytest.importorskip("torch")

from audio_linguist import CancellationToken, PipelineCancelledError  # noqa: E402
from audio_linguist.batch_processor import BatchProcessor, pad_chunks  # noqa: E402


class FakeDecoding:
    """Decodes every sequence to a word naming its length."""

    def __init__(self):
        self.batches = []

    def decode(self, head, encoded, encoded_len):
        self.batches.append(encoded.shape[0])
        return [f"len{int(length)}" for length in encoded_len]


class FakeModel(torch.nn.Module):
    """Stand-in for a GigaAM ASR model with the same call surface."""

    def __init__(self, error=None):
        super().__init__()
        self.head = torch.nn.Linear(1, 1)
        self.decoding = FakeDecoding()
        self.error = error

    def forward(self, features, lengths):
        if self.error is not None:
            raise self.error
        return features, lengths


def generate_test_audio(duration=1.0, sr=16000):
    """Generate synthetic test audio."""
    t = np.linspace(0, duration, int(sr * duration))
    return (0.5 * np.sin(2 * np.pi * 220 * t)).astype(np.float32)


class TestBatchProcessorInitialization:
    """Test BatchProcessor initialization and parameter validation."""

    def test_init_valid_parameters(self):
        """Test initialization with valid parameters."""
        model = FakeModel()
        processor = BatchProcessor(model, batch_size=4)

        assert processor.model is model
        assert processor.batch_size == 4
        assert processor._device == next(model.parameters()).device

    def test_init_default_batch_size(self):
        """Test initialization with default batch size."""
        assert BatchProcessor(FakeModel()).batch_size == 1

    @pytest.mark.parametrize("batch_size", [0, -1])
    def test_init_invalid_batch_size_value(self, batch_size):
        """Test non-positive batch size raises ValueError."""
        with pytest.raises(ValueError, match="batch_size must be positive"):
            BatchProcessor(FakeModel(), batch_size=batch_size)

    def test_init_invalid_batch_size_type(self):
        """Test non-integer batch size raises TypeError."""
        with pytest.raises(TypeError, match="batch_size must be int"):
            BatchProcessor(FakeModel(), batch_size=2.5)


class TestPadChunks:
    """Test stacking numpy chunks into a padded batch."""

    def test_different_lengths(self):
        """Test chunks are zero-padded to the longest one."""
        chunks = [
            np.ones(1000, dtype=np.float32),
            np.ones(2000),
            np.ones(1500, dtype=np.float32),
        ]

        padded, lengths = pad_chunks(chunks)

        assert padded.shape == (3, 2000)
        assert padded.dtype == torch.float32
        assert torch.all(lengths == torch.tensor([1000, 2000, 1500]))
        assert torch.all(padded[0, :1000] == 1)
        assert torch.all(padded[0, 1000:] == 0)

    def test_float64_chunk_converted(self):
        """Test float64 chunks are stored as float32 values."""
        padded, _ = pad_chunks([np.full(10, 0.25, dtype=np.float64)])

        assert padded.dtype == torch.float32
        assert torch.allclose(padded[0], torch.full((10,), 0.25))

    def test_non_contiguous_chunk(self):
        """Test strided views are copied correctly."""
        chunk = np.arange(20, dtype=np.float32)[::2]

        padded, lengths = pad_chunks([chunk])

        assert lengths.tolist() == [10]
        assert padded[0].tolist() == chunk.tolist()

    def test_empty_list(self):
        """Test an empty chunk list raises ValueError."""
        with pytest.raises(ValueError, match="chunks cannot be empty"):
            pad_chunks([])


class TestBatchProcessorProcessing:
    """Test batched inference."""

    def test_results_in_input_order(self):
        """Test one transcription per chunk, in input order."""
        processor = BatchProcessor(FakeModel(), batch_size=2)
        chunks = [np.zeros(n, dtype=np.float32) for n in (300, 100, 200)]

        assert processor.process_batch(chunks) == ["len300", "len100", "len200"]

    def test_batches_respect_batch_size(self):
        """Test chunks are grouped into batches of at most batch_size."""
        model = FakeModel()
        processor = BatchProcessor(model, batch_size=2)

        processor.process_batch([generate_test_audio() for _ in range(5)])

        assert model.decoding.batches == [2, 2, 1]

    def test_empty_chunk_list(self):
        """Test an empty chunk list raises ValueError."""
        with pytest.raises(ValueError, match="audio_chunks cannot be empty"):
            BatchProcessor(FakeModel()).process_batch([])

    def test_invalid_chunk_type(self):
        """Test non-array chunks raise ValueError."""
        with pytest.raises(ValueError, match=r"audio_chunks\[0\] must be np.ndarray"):
            BatchProcessor(FakeModel()).process_batch([[0.0, 0.1]])

    def test_invalid_chunk_shape(self):
        """Test multi-dimensional chunks raise ValueError."""
        with pytest.raises(ValueError, match="must be 1-dimensional"):
            BatchProcessor(FakeModel()).process_batch([np.zeros((2, 10), dtype=np.float32)])

    def test_empty_chunk(self):
        """Test zero-length chunks raise ValueError."""
        with pytest.raises(ValueError, match=r"audio_chunks\[1\] cannot be empty"):
            BatchProcessor(FakeModel()).process_batch(
                [np.zeros(10, dtype=np.float32), np.zeros(0, dtype=np.float32)]
            )

    def test_cancelled(self):
        """Test a cancelled token stops processing before the next batch."""
        model = FakeModel()
        token = CancellationToken()
        token.cancel()

        with pytest.raises(PipelineCancelledError):
            BatchProcessor(model).process_batch([generate_test_audio()], cancel_token=token)
        assert model.decoding.batches == []

    def test_out_of_memory(self):
        """Test out-of-memory errors suggest a smaller batch size."""
        model = FakeModel(error=RuntimeError("CUDA out of memory"))

        with pytest.raises(RuntimeError, match="Try reducing batch_size from 4 to 2"):
            BatchProcessor(model, batch_size=4).process_batch([generate_test_audio()])

    def test_other_runtime_error_propagates(self):
        """Test other runtime errors propagate unchanged."""
        model = FakeModel(error=RuntimeError("shape mismatch"))

        with pytest.raises(RuntimeError, match="shape mismatch"):
            BatchProcessor(model).process_batch([generate_test_audio()])
