"""GigaAM transcription backend.

This module provides GigaAMTranscriber, a Transcriber that runs a GigaAM
ASR model over fixed-length chunks of the normalized audio. GigaAM returns
one transcript per chunk; words inside a chunk receive times spread over
the chunk, so shorter chunks give finer word timing at some cost in
recognition context.

PyTorch and GigaAM are not installed with audio-linguist; install them
with `pip install audio-linguist[gigaam]` or separately.
"""

import logging
from typing import List, Optional

import numpy as np
import torch

import gigaam
from gigaam.model import GigaAMASR

from .batch_processor import BatchProcessor
from .cancellation import CancellationToken
from .chunker import AudioChunker, spread_words
from .data_models import Token
from .exceptions import PreconditionError, TranscriberUnavailableError
from .transcriber import Transcriber

logger = logging.getLogger(__name__)


class GigaAMTranscriber(Transcriber):
    """Word-level transcription with a GigaAM model.

    Example:
        >>> transcriber = GigaAMTranscriber("v3_e2e_rnnt", device="cpu")
        >>> tokens = transcriber.transcribe(audio, 16000)
        >>> for token in tokens:
        ...     print(f"[{token.start:.2f}s - {token.end:.2f}s] {token.text}")

    Attributes:
        model: Loaded GigaAM model instance
        device: Device being used for inference
        compute_type: Precision type being used
        batch_size: Number of chunks to process simultaneously
        chunk_length: Length of each chunk in seconds
        chunk_overlap: Overlap between chunks in seconds
    """

    def __init__(
        self,
        model_name: str = "v3_e2e_rnnt",
        device: str = "cpu",
        compute_type: str = "float32",
        batch_size: int = 1,
        chunk_length: float = 4.0,
        chunk_overlap: float = 0.0,
        download_root: Optional[str] = None,
    ):
        """Load a GigaAM model.

        Args:
            model_name: GigaAM model version (e.g., "v3_e2e_rnnt", "v3_ctc")
            device: Device to run on ("cuda" or "cpu")
            compute_type: Precision ("float16" or "float32")
            batch_size: Number of chunks to process simultaneously
            chunk_length: Length of each chunk in seconds
            chunk_overlap: Overlap between chunks in seconds
            download_root: Optional directory for model downloads

        Raises:
            TypeError: If parameters have invalid types
            ValueError: If parameters are invalid
            TranscriberUnavailableError: If CUDA is requested but not
                available, or the model cannot be loaded
        """
        if not isinstance(device, str):
            raise TypeError(
                f"device must be str, got {type(device).__name__}"
            )
        if device not in ["cuda", "cpu"]:
            raise ValueError(
                f"device must be 'cuda' or 'cpu', got '{device}'"
            )
        if device == "cuda" and not torch.cuda.is_available():
            raise TranscriberUnavailableError(
                "CUDA device requested but not available. "
                "Install CUDA toolkit or use device='cpu'"
            )

        if not isinstance(compute_type, str):
            raise TypeError(
                f"compute_type must be str, got {type(compute_type).__name__}"
            )
        if compute_type not in ["float16", "float32"]:
            raise ValueError(
                f"compute_type must be 'float16' or 'float32', got '{compute_type}'"
            )

        if not isinstance(batch_size, int) or isinstance(batch_size, bool):
            raise TypeError(
                f"batch_size must be int, got {type(batch_size).__name__}"
            )
        if batch_size < 1:
            raise ValueError(
                f"batch_size must be positive integer, got {batch_size}"
            )

        if not isinstance(chunk_length, (int, float)):
            raise TypeError(
                f"chunk_length must be numeric, got {type(chunk_length).__name__}"
            )
        if not isinstance(chunk_overlap, (int, float)):
            raise TypeError(
                f"chunk_overlap must be numeric, got {type(chunk_overlap).__name__}"
            )
        # AudioChunker enforces the ranges of chunk_length and chunk_overlap
        self.chunker = AudioChunker(
            chunk_length=chunk_length,
            overlap=chunk_overlap,
            sample_rate=self.sample_rate,
        )

        self.device = device
        self.compute_type = compute_type
        self.batch_size = batch_size
        self.chunk_length = chunk_length
        self.chunk_overlap = chunk_overlap

        logger.info(f"Loading model '{model_name}' on device '{device}'")
        fp16_encoder = (compute_type == "float16" and device == "cuda")

        try:
            self.model = gigaam.load_model(
                model_name=model_name,
                fp16_encoder=fp16_encoder,
                use_flash=False,
                device=device,
                download_root=download_root,
            )
        except (ValueError, FileNotFoundError) as e:
            raise TranscriberUnavailableError(
                f"Failed to load model '{model_name}'. {str(e)}"
            ) from e

        if not isinstance(self.model, GigaAMASR):
            raise TranscriberUnavailableError(
                f"Model '{model_name}' is not an ASR model. "
                f"Only ASR models (CTC/RNNT) can transcribe."
            )

        self.batch_processor = BatchProcessor(
            model=self.model,
            batch_size=batch_size,
        )

        logger.info(
            f"GigaAMTranscriber initialized: device={device}, "
            f"compute_type={compute_type}, batch_size={batch_size}, "
            f"chunk_length={chunk_length}s"
        )

    def transcribe(
        self,
        audio: np.ndarray,
        sample_rate: int,
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[Token]:
        """Transcribe mono 16 kHz audio into word tokens.

        Raises:
            PreconditionError: If audio is not 1-D, empty, or not at 16 kHz
            PipelineCancelledError: If cancel_token is cancelled
        """
        if sample_rate != self.sample_rate:
            raise PreconditionError(
                f"sample_rate must be {self.sample_rate}, got {sample_rate}"
            )
        if audio.ndim != 1:
            raise PreconditionError(
                f"audio array must be 1-dimensional, got shape {audio.shape}"
            )
        if len(audio) == 0:
            raise PreconditionError("audio array cannot be empty")

        chunks = self.chunker.chunk_audio(audio)
        logger.info(
            f"Transcribing {len(audio) / self.sample_rate:.1f}s of audio "
            f"in {len(chunks)} chunk(s)"
        )

        texts = self.batch_processor.process_batch(
            [chunk.audio for chunk in chunks],
            cancel_token=cancel_token,
        )

        tokens_per_chunk = [
            spread_words(text, chunk.start_time, chunk.end_time)
            for chunk, text in zip(chunks, texts)
        ]
        return self.chunker.merge_tokens(tokens_per_chunk, chunks)

    def close(self) -> None:
        if self.device == "cuda" and torch.cuda.is_available():
            torch.cuda.empty_cache()
