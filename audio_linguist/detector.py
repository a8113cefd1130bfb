"""Segment boundary detection over a time-stamped transcript.

A segment starts at a marker token, a token made only of decimal digits
such as "951", and absorbs the words that follow it for up to
ABSORPTION_WINDOW seconds after the marker onset. Segments shorter than
the configured minimum duration are dropped, which filters out stray
numbers that never gather enough speech around them.

Detection is a single left fold over the token sequence. The accumulator
holds the segment currently open (if any) and the descriptors emitted so
far; no other state is carried between tokens.
"""

import logging
import math
import re
from functools import reduce
from typing import Iterable, List, NamedTuple, Optional, Tuple

from .data_models import SegmentDescriptor, Token
from .exceptions import PreconditionError

logger = logging.getLogger(__name__)

# Seconds after a marker's onset during which following words still belong to it
ABSORPTION_WINDOW = 10.0

DEFAULT_MIN_SEGMENT_DURATION = 2.0

# ASCII digits only; str.isdigit() would also accept superscripts and other scripts
MARKER_PATTERN = re.compile(r"[0-9]+")


def is_marker(text: str) -> bool:
    """Return True if text, once trimmed, consists solely of decimal digits."""
    return MARKER_PATTERN.fullmatch(text.strip()) is not None


class _OpenSegment(NamedTuple):
    start: float
    end: float
    marker: int
    tokens: Tuple[Token, ...]


class _Accumulator(NamedTuple):
    open_segment: Optional[_OpenSegment]
    emitted: Tuple[SegmentDescriptor, ...]


class SegmentDetector:
    """Groups transcript tokens into numbered segments.

    Attributes:
        min_segment_duration: Minimum segment duration in seconds
    """

    def __init__(self, min_segment_duration: float = DEFAULT_MIN_SEGMENT_DURATION):
        """Initialize segment detector.

        Args:
            min_segment_duration: Minimum duration in seconds for a segment
                to be kept (default: 2.0)

        Raises:
            TypeError: If min_segment_duration is not numeric
            PreconditionError: If min_segment_duration is not finite and positive
        """
        if not isinstance(min_segment_duration, (int, float)) or isinstance(min_segment_duration, bool):
            raise TypeError(
                f"min_segment_duration must be numeric, "
                f"got {type(min_segment_duration).__name__}"
            )
        if not math.isfinite(min_segment_duration):
            raise PreconditionError(
                f"min_segment_duration must be finite, got {min_segment_duration}"
            )
        if min_segment_duration <= 0:
            raise PreconditionError(
                f"min_segment_duration must be positive, got {min_segment_duration}"
            )

        self.min_segment_duration = float(min_segment_duration)

    def detect(self, tokens: Iterable[Token]) -> List[SegmentDescriptor]:
        """Find numbered segments in a transcript.

        Args:
            tokens: Transcript tokens ordered by start time

        Returns:
            Segment descriptors in detection order, ids starting at 1
        """
        initial = _Accumulator(open_segment=None, emitted=())
        final = reduce(self._step, tokens, initial)
        emitted = self._close(final)

        logger.info(f"Found {len(emitted)} segment(s)")
        return list(emitted)

    def _step(self, acc: _Accumulator, token: Token) -> _Accumulator:
        text = token.text.strip()

        if is_marker(text):
            emitted = self._close(acc)
            logger.debug(f"Started new segment with number: {text}")
            opened = _OpenSegment(
                start=token.start,
                end=token.end,
                marker=int(text),
                tokens=(token,),
            )
            return _Accumulator(open_segment=opened, emitted=emitted)

        current = acc.open_segment
        if current is None:
            return acc

        if token.start - current.start < ABSORPTION_WINDOW:
            logger.debug(f"Added {text!r} to segment {current.marker}")
            extended = current._replace(
                end=token.end,
                tokens=current.tokens + (token,),
            )
            return acc._replace(open_segment=extended)

        # Too far from the marker: the segment ends and this word is dropped
        return _Accumulator(open_segment=None, emitted=self._close(acc))

    def _close(self, acc: _Accumulator) -> Tuple[SegmentDescriptor, ...]:
        """Emit the open segment if it is long enough, otherwise drop it."""
        current = acc.open_segment
        if current is None:
            return acc.emitted

        duration = current.end - current.start
        if duration < self.min_segment_duration:
            logger.debug(
                f"Dropped segment {current.marker} "
                f"({duration:.2f}s < {self.min_segment_duration:.2f}s)"
            )
            return acc.emitted

        descriptor = SegmentDescriptor(
            id=len(acc.emitted) + 1,
            start=current.start,
            end=current.end,
            marker=current.marker,
            text=" ".join(
                token.text.strip() for token in current.tokens if token.text.strip()
            ),
            tokens=current.tokens,
        )
        logger.debug(
            f"Added segment: {descriptor.text} "
            f"({descriptor.start}s - {descriptor.end}s)"
        )
        return acc.emitted + (descriptor,)


def detect(
    tokens: Iterable[Token],
    min_segment_duration: float = DEFAULT_MIN_SEGMENT_DURATION,
) -> List[SegmentDescriptor]:
    """Detect numbered segments with a one-off SegmentDetector."""
    return SegmentDetector(min_segment_duration).detect(tokens)
