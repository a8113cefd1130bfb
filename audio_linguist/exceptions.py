"""Exceptions raised by the audio-linguist pipeline."""


class SplitterError(Exception):
    """Base exception for audio splitting errors."""

    pass


class PreconditionError(SplitterError, ValueError):
    """Raised when an input violates the contract of a pipeline stage."""

    pass


class InvalidDescriptorError(PreconditionError):
    """Raised when a segment descriptor cannot be mapped onto samples."""

    pass


class TranscriptionError(SplitterError):
    """Raised when the transcriber fails or returns an empty transcript."""

    pass


class TranscriberUnavailableError(TranscriptionError):
    """Raised when a transcription backend cannot be loaded."""

    pass


class AudioDecodeError(SplitterError):
    """Raised when an audio file cannot be decoded."""

    pass


class PipelineCancelledError(SplitterError):
    """Raised when a run is abandoned through its cancellation token."""

    pass
