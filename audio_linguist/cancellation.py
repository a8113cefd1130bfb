"""Cooperative cancellation for splitting runs."""

import threading

from .exceptions import PipelineCancelledError


class CancellationToken:
    """Flag shared between a caller and a running pipeline.

    A caller that starts processing a new file cancels the token of the
    previous run; the pipeline checks the token between stages and the
    transcriber checks it between batches.

    Example:
        >>> token = CancellationToken()
        >>> worker = threading.Thread(target=splitter.split, args=(signal, token))
        >>> worker.start()
        >>> token.cancel()
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, stage: str = "") -> None:
        """Raise PipelineCancelledError if cancel() has been called."""
        if self._event.is_set():
            where = f" during {stage}" if stage else ""
            raise PipelineCancelledError(f"Run cancelled{where}")
