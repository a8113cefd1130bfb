"""Batch processing for chunked GigaAM inference.

This module transcribes many audio chunks by padding them into batches,
so a long recording runs through the model in a few forward passes.
"""

import logging
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

import numpy as np
import torch
from torch import Tensor

from .cancellation import CancellationToken

if TYPE_CHECKING:
    from gigaam.model import GigaAMASR

logger = logging.getLogger(__name__)


class BatchProcessor:
    """Manages batched inference for multiple audio chunks.

    The BatchProcessor pads variable-length chunks to a common length,
    runs them through the model batch by batch, and returns the
    transcriptions in input order.

    Attributes:
        model: GigaAM model instance for inference
        batch_size: Maximum number of chunks to process simultaneously
    """

    def __init__(
        self,
        model: "GigaAMASR",
        batch_size: int = 1,
    ):
        """Initialize batch processor.

        Args:
            model: GigaAM model instance
            batch_size: Maximum batch size (default: 1)

        Raises:
            ValueError: If batch_size is not a positive integer
            TypeError: If batch_size is not an integer
        """
        if not isinstance(batch_size, int) or isinstance(batch_size, bool):
            raise TypeError(
                f"batch_size must be int, got {type(batch_size).__name__}"
            )
        if batch_size < 1:
            raise ValueError(
                f"batch_size must be positive integer, got {batch_size}"
            )

        self.model = model
        self.batch_size = batch_size
        self._device = next(model.parameters()).device

    @torch.inference_mode()
    def process_batch(
        self,
        audio_chunks: Sequence[np.ndarray],
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[str]:
        """Transcribe audio chunks batch by batch.

        Args:
            audio_chunks: 1-D float audio arrays of variable length
            cancel_token: Optional token checked before every batch

        Returns:
            One transcription per chunk, in input order

        Raises:
            ValueError: If audio_chunks is empty or contains invalid arrays
            RuntimeError: If the device runs out of memory
            PipelineCancelledError: If cancel_token is cancelled
        """
        if not audio_chunks:
            raise ValueError("audio_chunks cannot be empty")

        chunks = []
        for i, chunk in enumerate(audio_chunks):
            if not isinstance(chunk, np.ndarray):
                raise ValueError(
                    f"audio_chunks[{i}] must be np.ndarray, "
                    f"got {type(chunk).__name__}"
                )
            if chunk.ndim != 1:
                raise ValueError(
                    f"audio_chunks[{i}] must be 1-dimensional, "
                    f"got shape {chunk.shape}"
                )
            if len(chunk) == 0:
                raise ValueError(f"audio_chunks[{i}] cannot be empty")
            chunks.append(chunk)

        all_transcriptions = []

        for batch_start in range(0, len(chunks), self.batch_size):
            if cancel_token is not None:
                cancel_token.raise_if_cancelled("transcription")

            batch = chunks[batch_start:batch_start + self.batch_size]

            try:
                padded_batch, lengths = pad_chunks(batch)
                padded_batch = padded_batch.to(self._device)
                lengths = lengths.to(self._device)

                if self._device.type == "cuda":
                    with torch.autocast(device_type="cuda", dtype=torch.float16):
                        encoded, encoded_len = self.model.forward(padded_batch, lengths)
                else:
                    encoded, encoded_len = self.model.forward(padded_batch, lengths)

                transcriptions = self.model.decoding.decode(
                    self.model.head, encoded, encoded_len
                )
                all_transcriptions.extend(transcriptions)

            except RuntimeError as e:
                if "out of memory" in str(e).lower():
                    if self._device.type == "cuda" and torch.cuda.is_available():
                        torch.cuda.empty_cache()
                    raise RuntimeError(
                        f"Out of memory. Try reducing batch_size from "
                        f"{self.batch_size} to {max(1, self.batch_size // 2)}"
                    ) from e
                raise

            logger.debug(
                f"Transcribed chunks {batch_start}-{batch_start + len(batch) - 1} "
                f"of {len(chunks)}"
            )

        if self._device.type == "cuda" and torch.cuda.is_available():
            torch.cuda.empty_cache()

        return all_transcriptions


def pad_chunks(chunks: Sequence[np.ndarray]) -> Tuple[Tensor, Tensor]:
    """Stack 1-D float chunks into a zero-padded float32 batch.

    Returns:
        padded: Tensor with shape [batch, longest chunk]
        lengths: Original chunk lengths as a long tensor

    Raises:
        ValueError: If chunks is empty
    """
    if not chunks:
        raise ValueError("chunks cannot be empty")

    lengths = torch.tensor([len(chunk) for chunk in chunks], dtype=torch.long)
    padded = torch.zeros((len(chunks), int(lengths.max())), dtype=torch.float32)
    for row, chunk in enumerate(chunks):
        padded[row, :len(chunk)] = torch.from_numpy(
            np.ascontiguousarray(chunk, dtype=np.float32)
        )
    return padded, lengths
