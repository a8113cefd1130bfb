"""Serialization of segment audio to 16-bit PCM WAV.

The container is the canonical 44-byte RIFF/WAVE header followed by
interleaved little-endian int16 samples. For a mono buffer of n samples
the output is exactly 44 + 2n bytes.
"""

import struct
from typing import Union

import numpy as np

from .data_models import SegmentBuffer, Signal
from .resampler import ensure_valid_signal

HEADER_SIZE = 44
BITS_PER_SAMPLE = 16
BYTES_PER_SAMPLE = BITS_PER_SAMPLE // 8
PCM_FORMAT_TAG = 1
FMT_CHUNK_SIZE = 16

# RIFF, size, WAVE, "fmt ", fmt size, format, channels, rate,
# byte rate, block align, bits per sample, "data", data size
_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


def build_header(num_frames: int, channels: int, sample_rate: int) -> bytes:
    """Build the 44-byte WAV header for a PCM16 payload.

    Args:
        num_frames: Samples per channel
        channels: Number of interleaved channels
        sample_rate: Sample rate in Hz

    Returns:
        Header bytes, all fields little-endian
    """
    block_align = channels * BYTES_PER_SAMPLE
    data_size = num_frames * block_align
    return _HEADER.pack(
        b"RIFF",
        36 + data_size,
        b"WAVE",
        b"fmt ",
        FMT_CHUNK_SIZE,
        PCM_FORMAT_TAG,
        channels,
        sample_rate,
        sample_rate * block_align,
        block_align,
        BITS_PER_SAMPLE,
        b"data",
        data_size,
    )


def float_to_pcm16(samples: np.ndarray) -> np.ndarray:
    """Quantize float samples to little-endian int16.

    Samples are clamped to [-1.0, 1.0]; negative values scale by 32768 and
    non-negative values by 32767, so +1.0 maps to 32767 without overflow.
    Fractions are truncated toward zero and NaN maps to 0.
    """
    values = np.nan_to_num(
        np.asarray(samples, dtype=np.float64), nan=0.0, posinf=1.0, neginf=-1.0
    )
    clamped = np.clip(values, -1.0, 1.0)
    scaled = np.where(clamped < 0, clamped * 32768.0, clamped * 32767.0)
    return np.trunc(scaled).astype("<i2")


def encode_signal(signal: Signal) -> bytes:
    """Encode a signal as WAV bytes, interleaving its channels."""
    ensure_valid_signal(signal)
    header = build_header(signal.num_samples, signal.channels, signal.sample_rate)
    # (frames, channels) in C order interleaves one frame after another
    payload = float_to_pcm16(signal.samples.T).tobytes()
    return header + payload


def encode(segment: Union[SegmentBuffer, Signal]) -> bytes:
    """Encode a segment buffer as a self-contained WAV file.

    Args:
        segment: Extracted segment (or a bare Signal)

    Returns:
        WAV file bytes: 44-byte header plus 16-bit PCM payload
    """
    if isinstance(segment, SegmentBuffer):
        return encode_signal(segment.signal)
    return encode_signal(segment)
