"""Reading source audio and writing segment files.

Decoding is delegated to soundfile (libsndfile). Written segments use the
project's own WAV encoder so their headers are byte-exact.
"""

import io
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence, Union

import numpy as np
import soundfile as sf

from .data_models import SegmentBuffer, Signal
from .encoder import encode
from .exceptions import AudioDecodeError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".wav", ".mp3", ".ogg", ".m4a", ".flac")


def decode_bytes(data: bytes) -> Signal:
    """Decode an in-memory audio file.

    Raises:
        AudioDecodeError: If the bytes are not a decodable audio file
    """
    if not data:
        raise AudioDecodeError("audio data cannot be empty")
    try:
        samples, sample_rate = sf.read(io.BytesIO(data), dtype="float32", always_2d=True)
    except (sf.LibsndfileError, RuntimeError, TypeError) as e:
        raise AudioDecodeError(
            f"Failed to decode audio data. Error: {str(e)}"
        ) from e
    return Signal(np.ascontiguousarray(samples.T), int(sample_rate))


def load_signal(path: Union[str, os.PathLike]) -> Signal:
    """Decode an audio file into a Signal.

    Args:
        path: Path to a .wav, .mp3, .ogg, .m4a or .flac file

    Returns:
        Signal with the file's channels at its native sample rate

    Raises:
        FileNotFoundError: If the file does not exist
        AudioDecodeError: If the extension is unsupported or decoding fails
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(
            f"Audio file '{path}' not found. Check file path and permissions"
        )
    if path.suffix.lower() not in SUPPORTED_EXTENSIONS:
        raise AudioDecodeError(
            f"Unsupported audio file '{path.name}'. "
            f"Supported formats: {', '.join(SUPPORTED_EXTENSIONS)}"
        )

    logger.info(
        f"Loading '{path.name}' ({path.stat().st_size / (1024 * 1024):.2f} MB)"
    )
    try:
        samples, sample_rate = sf.read(str(path), dtype="float32", always_2d=True)
    except (sf.LibsndfileError, RuntimeError) as e:
        raise AudioDecodeError(
            f"Failed to load audio file '{path}'. "
            f"Check that the file is a valid audio format. Error: {str(e)}"
        ) from e

    return Signal(np.ascontiguousarray(samples.T), int(sample_rate))


def write_segments(
    segments: Sequence[SegmentBuffer],
    output_dir: Union[str, os.PathLike],
    max_workers: Optional[int] = None,
) -> List[Path]:
    """Encode each segment and write it to output_dir.

    Args:
        segments: Extracted segment buffers
        output_dir: Directory to write into (created if missing)
        max_workers: Worker threads used for encoding (default: serial)

    Returns:
        Written file paths, in segment order
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    def write_one(segment: SegmentBuffer) -> Path:
        target = output_dir / segment.filename
        target.write_bytes(encode(segment))
        logger.debug(f"Wrote segment {segment.id} to {target}")
        return target

    if max_workers is None or max_workers == 1:
        paths = [write_one(segment) for segment in segments]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            paths = list(executor.map(write_one, segments))

    logger.info(f"Wrote {len(paths)} segment file(s) to {output_dir}")
    return paths
