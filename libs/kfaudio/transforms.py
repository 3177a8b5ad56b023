"""In-place channel and rate reducing transforms on a SampleBuffer.

Both transforms are destructive: storage is rewritten from position zero
and there is no undo.
"""

from __future__ import annotations

import logging

import numpy as np

from kfcore.errors import PreconditionError
from .buffer import SampleBuffer

logger = logging.getLogger(__name__)


def _frames(buffer: SampleBuffer) -> np.ndarray:
    """Current samples as a ``(frames, channels)`` array, validating the layout."""
    channels = buffer.get_channels()
    if channels < 1:
        raise PreconditionError(f"Buffer has {channels} channels; expected at least 1")
    count = buffer.get_sample_count()
    if count % channels:
        raise PreconditionError(
            f"Sample count {count} is not a multiple of the channel count {channels}"
        )
    return buffer.view().samples.reshape(-1, channels)


def reduce_to_mono(buffer: SampleBuffer) -> None:
    """Downmix every frame to the equal-weight mean of its channels.

    After the call ``channels == 1`` and ``sample_count`` equals the previous
    frame count. Amplitude is not renormalized beyond the averaging.

    Raises:
        PreconditionError: if the channel count is below 1 or the sample
            count does not split into whole frames.
    """
    frames = _frames(buffer)
    channels = frames.shape[1]
    if channels == 1:
        buffer.mark_ready()
        return

    # accumulate in float64 so averaging does not add float32 rounding
    mono = frames.mean(axis=1, dtype=np.float64).astype(np.float32)
    buffer._rewrite(mono, channels=1, frame_rate=buffer.get_frame_rate())
    logger.debug("Reduced %d channels to mono (%d frames)", channels, mono.shape[0])


def downsample(buffer: SampleBuffer, factor: int) -> None:
    """Keep every ``factor``-th frame, starting with frame 0.

    Plain decimation, with no anti-alias filtering. The stored frame rate is
    divided by ``factor`` (floor division) so metadata keeps matching the
    samples; a warning is logged when the rate does not divide evenly.

    Raises:
        PreconditionError: if ``factor`` is not a positive integer, or the
            buffer layout is inconsistent.
    """
    if isinstance(factor, bool) or not isinstance(factor, (int, np.integer)):
        raise PreconditionError(f"Downsample factor must be an integer, got {factor!r}")
    if factor <= 0:
        raise PreconditionError(f"Downsample factor must be positive, got {factor}")

    frames = _frames(buffer)
    factor = int(factor)
    if factor == 1:
        buffer.mark_ready()
        return

    rate = buffer.get_frame_rate()
    if rate % factor:
        logger.warning(
            "Frame rate %d is not divisible by %d; stored rate rounded down to %d",
            rate,
            factor,
            rate // factor,
        )
    kept = frames[::factor].reshape(-1)
    buffer._rewrite(kept.copy(), channels=frames.shape[1], frame_rate=rate // factor)
    logger.debug(
        "Downsampled by %d: %d -> %d frames at %d Hz",
        factor,
        frames.shape[0],
        kept.shape[0] // frames.shape[1],
        rate // factor,
    )


__all__ = ["reduce_to_mono", "downsample"]
