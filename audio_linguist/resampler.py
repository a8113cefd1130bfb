"""Downmixing and resampling of decoded audio.

This module normalizes arbitrary-channel, arbitrary-rate audio into the
mono, fixed-rate form expected by transcription backends. Resampling is
polyphase (scipy.signal.resample_poly) with the up/down ratio reduced by
the GCD of the two rates, which makes the output length exactly
ceil(frames * target_rate / source_rate).
"""

import logging
from math import gcd

import numpy as np
from scipy.signal import resample_poly

from .data_models import Signal
from .exceptions import PreconditionError

logger = logging.getLogger(__name__)

# Sample rate expected by the transcription backends
TARGET_SAMPLE_RATE = 16000


def ensure_valid_signal(signal: Signal) -> None:
    """Reject signals that cannot enter the pipeline.

    Raises:
        TypeError: If signal is not a Signal
        PreconditionError: If the signal has no channels or no samples
    """
    if not isinstance(signal, Signal):
        raise TypeError(
            f"signal must be Signal, got {type(signal).__name__}"
        )
    if signal.channels == 0:
        raise PreconditionError("signal must have at least one channel")
    if signal.num_samples == 0:
        raise PreconditionError("signal cannot be empty")


def downmix(signal: Signal) -> Signal:
    """Average all channels into one.

    Mono input is returned unchanged.
    """
    ensure_valid_signal(signal)
    if signal.channels == 1:
        return signal
    mono = signal.samples.mean(axis=0, dtype=np.float64).astype(np.float32)
    return Signal(mono[np.newaxis, :], signal.sample_rate)


def resample(signal: Signal, target_rate: int) -> Signal:
    """Resample every channel of a signal to target_rate.

    Input already at target_rate is returned unchanged.

    Raises:
        PreconditionError: If target_rate is not positive
    """
    ensure_valid_signal(signal)
    _validate_rate(target_rate)
    if signal.sample_rate == target_rate:
        return signal

    common = gcd(signal.sample_rate, target_rate)
    up = target_rate // common
    down = signal.sample_rate // common
    resampled = resample_poly(signal.samples, up, down, axis=1)
    return Signal(resampled.astype(np.float32), target_rate)


def normalize(signal: Signal, target_rate: int = TARGET_SAMPLE_RATE) -> Signal:
    """Convert a signal to mono at target_rate for transcription.

    Args:
        signal: Decoded source audio
        target_rate: Output sample rate in Hz (default: 16000)

    Returns:
        Single-channel Signal at target_rate with
        ceil(frames * target_rate / source_rate) samples

    Raises:
        PreconditionError: If the signal is empty or target_rate is invalid
    """
    ensure_valid_signal(signal)
    _validate_rate(target_rate)

    if signal.channels == 1 and signal.sample_rate == target_rate:
        logger.info(f"Audio is already mono {target_rate}Hz")
        return signal

    logger.info(
        f"Converting audio: {signal.channels} channel(s) at "
        f"{signal.sample_rate}Hz to mono {target_rate}Hz"
    )
    return resample(downmix(signal), target_rate)


def _validate_rate(target_rate: int) -> None:
    if not isinstance(target_rate, int) or isinstance(target_rate, bool):
        raise TypeError(
            f"target_rate must be int, got {type(target_rate).__name__}"
        )
    if target_rate <= 0:
        raise PreconditionError(
            f"target_rate must be positive, got {target_rate}"
        )
