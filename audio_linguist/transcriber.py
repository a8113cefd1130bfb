"""Transcriber interface and a transcript-file backend.

The splitting pipeline never performs speech recognition itself. It holds
a Transcriber, loaded once by the caller, and asks it for word-level
tokens of the normalized (mono, 16 kHz) audio.
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, List, Optional, Union

import numpy as np

from .cancellation import CancellationToken
from .data_models import Token
from .exceptions import PreconditionError, TranscriberUnavailableError, TranscriptionError

logger = logging.getLogger(__name__)


class Transcriber(ABC):
    """Speech-to-text backend producing word-level tokens.

    Implementations load their resources in the constructor and fail
    there (TranscriberUnavailableError) rather than on first use.

    Attributes:
        sample_rate: Sample rate in Hz the backend expects its audio at
    """

    sample_rate: int = 16000

    @abstractmethod
    def transcribe(
        self,
        audio: np.ndarray,
        sample_rate: int,
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[Token]:
        """Transcribe mono audio into tokens ordered by start time.

        Args:
            audio: Mono samples as a 1-D float32 array
            sample_rate: Sample rate of audio in Hz
            cancel_token: Optional token checked between units of work

        Returns:
            Tokens with trimmed text and [start, end] times in seconds

        Raises:
            TranscriptionError: If transcription fails
            PipelineCancelledError: If cancel_token is cancelled
        """

    def close(self) -> None:
        """Release backend resources."""


def tokens_from_json(payload: Any) -> List[Token]:
    """Build tokens from a decoded JSON transcript.

    Two shapes are accepted:

    - a list (or {"tokens": [...]}) of {"text", "start", "end"} objects;
    - a speech-recognition pipeline result with word chunks,
      {"text": ..., "chunks": [{"text": ..., "timestamp": [start, end]}]}.
      A chunk whose end time is null ends at its start time.

    Raises:
        TranscriptionError: If the payload does not match either shape
    """
    if isinstance(payload, dict):
        if "chunks" in payload:
            return [_token_from_chunk(chunk, i) for i, chunk in enumerate(payload["chunks"] or [])]
        if "tokens" in payload:
            payload = payload["tokens"]
        else:
            raise TranscriptionError(
                "transcript object must contain 'chunks' or 'tokens'"
            )

    if not isinstance(payload, list):
        raise TranscriptionError(
            f"transcript must be a list or an object, got {type(payload).__name__}"
        )
    return [_token_from_entry(entry, i) for i, entry in enumerate(payload)]


def _token_from_chunk(chunk: Any, index: int) -> Token:
    try:
        start, end = chunk["timestamp"]
        if end is None:
            end = start
        return Token(text=str(chunk["text"]).strip(), start=float(start), end=float(end))
    except (KeyError, TypeError, ValueError) as e:
        raise TranscriptionError(f"chunks[{index}] is malformed: {e}") from e


def _token_from_entry(entry: Any, index: int) -> Token:
    try:
        return Token(
            text=str(entry["text"]).strip(),
            start=float(entry["start"]),
            end=float(entry["end"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise TranscriptionError(f"tokens[{index}] is malformed: {e}") from e


class TranscriptFileTranscriber(Transcriber):
    """Serves a transcript produced elsewhere from a JSON file.

    The file is read and validated once, in the constructor; transcribe()
    returns the stored tokens regardless of the audio passed in.

    Example:
        >>> transcriber = TranscriptFileTranscriber("lesson.json")
        >>> splitter = AudioSplitter(transcriber)
    """

    def __init__(self, path: Union[str, os.PathLike]):
        """Load a transcript file.

        Args:
            path: JSON file in one of the shapes accepted by tokens_from_json

        Raises:
            TranscriberUnavailableError: If the file is missing or unreadable
            TranscriptionError: If the file content is not a transcript
        """
        self.path = Path(path)
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise TranscriberUnavailableError(
                f"Transcript file '{self.path}' not found"
            ) from e
        except (OSError, json.JSONDecodeError) as e:
            raise TranscriberUnavailableError(
                f"Failed to read transcript file '{self.path}'. Error: {str(e)}"
            ) from e

        self.tokens = tokens_from_json(payload)
        logger.info(f"Loaded {len(self.tokens)} token(s) from '{self.path.name}'")

    def transcribe(
        self,
        audio: np.ndarray,
        sample_rate: int,
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[Token]:
        if sample_rate != self.sample_rate:
            raise PreconditionError(
                f"sample_rate must be {self.sample_rate}, got {sample_rate}"
            )
        if cancel_token is not None:
            cancel_token.raise_if_cancelled("transcription")
        return list(self.tokens)
