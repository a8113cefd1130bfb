"""Audio chunking for chunked transcription backends.

This module splits mono audio into overlapping chunks a model can
transcribe in one pass, spreads each chunk's words over the chunk's time
span, and merges the resulting tokens back together while handling
overlaps.
"""

from typing import List, Sequence

import numpy as np

from .data_models import AudioChunk, Token


class AudioChunker:
    """Handles splitting long audio into processable chunks.

    Attributes:
        chunk_length: Duration of each chunk in seconds
        overlap: Overlap duration between consecutive chunks in seconds
        sample_rate: Audio sample rate in Hz
    """

    def __init__(
        self,
        chunk_length: float = 4.0,
        overlap: float = 0.0,
        sample_rate: int = 16000,
    ):
        """Initialize audio chunker.

        Args:
            chunk_length: Chunk duration in seconds (default: 4.0)
            overlap: Overlap duration in seconds (default: 0.0)
            sample_rate: Audio sample rate in Hz (default: 16000)

        Raises:
            ValueError: If chunk_length <= overlap or if values are non-positive
        """
        if chunk_length <= 0:
            raise ValueError(
                f"chunk_length must be positive, got {chunk_length}"
            )
        if overlap < 0:
            raise ValueError(
                f"overlap must be non-negative, got {overlap}"
            )
        if overlap >= chunk_length:
            raise ValueError(
                f"overlap ({overlap}s) must be less than chunk_length ({chunk_length}s)"
            )
        if sample_rate <= 0:
            raise ValueError(
                f"sample_rate must be positive, got {sample_rate}"
            )

        self.chunk_length = chunk_length
        self.overlap = overlap
        self.sample_rate = sample_rate

    def chunk_audio(
        self,
        audio: np.ndarray,
    ) -> List[AudioChunk]:
        """Split audio into overlapping chunks.

        For audio shorter than chunk_length, returns a single chunk.

        Args:
            audio: Audio samples as numpy array (1D)

        Returns:
            List of AudioChunk objects with audio data and metadata

        Raises:
            ValueError: If audio is empty or has invalid shape
        """
        if audio.ndim != 1:
            raise ValueError(
                f"audio must be 1-dimensional, got shape {audio.shape}"
            )
        if len(audio) == 0:
            raise ValueError("audio cannot be empty")

        audio_duration = len(audio) / self.sample_rate

        if audio_duration <= self.chunk_length:
            return [
                AudioChunk(
                    audio=audio,
                    start_time=0.0,
                    end_time=audio_duration,
                    chunk_index=0,
                )
            ]

        chunk_samples = int(self.chunk_length * self.sample_rate)
        overlap_samples = int(self.overlap * self.sample_rate)
        stride_samples = chunk_samples - overlap_samples

        chunks = []
        start_sample = 0

        while start_sample < len(audio):
            end_sample = min(start_sample + chunk_samples, len(audio))

            chunks.append(
                AudioChunk(
                    audio=audio[start_sample:end_sample],
                    start_time=start_sample / self.sample_rate,
                    end_time=end_sample / self.sample_rate,
                    chunk_index=len(chunks),
                )
            )

            if end_sample >= len(audio):
                break
            start_sample += stride_samples

        return chunks

    def merge_tokens(
        self,
        tokens_per_chunk: Sequence[List[Token]],
        chunks: List[AudioChunk],
    ) -> List[Token]:
        """Merge per-chunk tokens, dropping duplicates from overlaps.

        A token is kept by the chunk it came from only if it starts before
        the midpoint of that chunk's overlap with the next chunk; the next
        chunk covers the rest.

        Args:
            tokens_per_chunk: Tokens of each chunk, in chunk order
            chunks: Chunks that produced the tokens

        Returns:
            Tokens ordered by start time

        Raises:
            ValueError: If tokens and chunks are inconsistent
        """
        if len(tokens_per_chunk) != len(chunks):
            raise ValueError(
                f"got tokens for {len(tokens_per_chunk)} chunk(s) "
                f"but {len(chunks)} chunk(s)"
            )

        merged = []
        for i, (chunk, tokens) in enumerate(zip(chunks, tokens_per_chunk)):
            if i < len(chunks) - 1:
                next_chunk = chunks[i + 1]
                cutoff_time = (next_chunk.start_time + chunk.end_time) / 2.0
            else:
                cutoff_time = float("inf")

            # The previous chunk already kept tokens before its cutoff
            if i > 0:
                previous = chunks[i - 1]
                floor_time = (chunk.start_time + previous.end_time) / 2.0
            else:
                floor_time = chunk.start_time

            merged.extend(
                token for token in tokens if floor_time <= token.start < cutoff_time
            )

        return sorted(merged, key=lambda token: token.start)


def spread_words(text: str, start_time: float, end_time: float) -> List[Token]:
    """Assign times to the words of a chunk transcript.

    The chunk's span is divided between its words in proportion to their
    character counts, so word order and chunk boundaries are preserved
    while individual word times are approximate.

    Args:
        text: Transcript of one chunk
        start_time: Chunk start in seconds
        end_time: Chunk end in seconds

    Returns:
        One token per whitespace-separated word
    """
    words = text.split()
    if not words:
        return []

    weights = np.array([len(word) for word in words], dtype=np.float64)
    bounds = np.concatenate([[0.0], np.cumsum(weights) / weights.sum()])
    span = end_time - start_time
    times = start_time + bounds * span

    tokens = []
    for i, word in enumerate(words):
        tokens.append(
            Token(
                text=word,
                start=float(times[i]),
                end=float(min(times[i + 1], end_time)),
            )
        )
    return tokens
