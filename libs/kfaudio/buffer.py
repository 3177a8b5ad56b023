"""Interleaved float32 sample storage with a write-iterator ingestion protocol.

A ``SampleBuffer`` is created empty, configured with a frame rate and a
channel count, then filled one sample at a time::

    buf = SampleBuffer()
    buf.set_frame_rate(44100)
    buf.set_channels(2)
    for s in samples:
        buf.set_sample_at_write_iterator(s)
        buf.advance_write_iterator()

The loop must set before it advances. The cursor starts at position 0, so
advancing first leaves a zero at index 0, shifts every sample up by one and
counts one sample too many.

Sample ``i`` belongs to channel ``i % channels``. Setters and iterators are
permissive: they never reject values, and the write path grows
storage instead of failing. Consistency is checked where it matters, in
``get_frame_count`` and by the transforms and the classifier.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

import numpy as np

from kfcore.errors import PreconditionError

logger = logging.getLogger(__name__)

_INITIAL_CAPACITY = 1024


class BufferPhase(str, Enum):
    """Caller-driven lifecycle of a buffer. Informational, never enforced."""
    CONFIGURING = "configuring"
    INGESTING = "ingesting"
    READY = "ready"


@dataclass(frozen=True)
class BufferView:
    """Read-only snapshot of a buffer handed to detectors.

    ``samples`` is a non-writeable numpy view onto the buffer's storage and
    is only valid until the buffer is mutated again.
    """

    samples: np.ndarray
    frame_rate: int
    channels: int
    sample_count: int
    frame_count: int

    def frames(self) -> np.ndarray:
        """Samples reshaped to ``(frame_count, channels)``."""
        return self.samples[: self.frame_count * self.channels].reshape(-1, self.channels)


class SampleBuffer:
    def __init__(self, frame_rate: int = 0, channels: int = 0) -> None:
        self._storage = np.zeros(0, dtype=np.float32)
        self._length = 0
        self._frame_rate = int(frame_rate)
        self._channels = int(channels)
        self._sample_count = 0
        self._write_pos = 0
        self._read_pos = 0
        self.phase = BufferPhase.CONFIGURING

    def __repr__(self) -> str:
        return (
            f"SampleBuffer(frame_rate={self._frame_rate}, channels={self._channels}, "
            f"sample_count={self._sample_count}, phase={self.phase.value})"
        )

    # ---------- Configuration ----------

    def set_frame_rate(self, rate: int) -> None:
        self._warn_if_reconfigured("frame rate")
        self._frame_rate = int(rate)

    def set_channels(self, count: int) -> None:
        self._warn_if_reconfigured("channel count")
        self._channels = int(count)

    def get_frame_rate(self) -> int:
        return self._frame_rate

    def get_channels(self) -> int:
        return self._channels

    def get_sample_count(self) -> int:
        return self._sample_count

    def get_frame_count(self) -> int:
        """Number of whole frames, ``sample_count // channels``.

        Raises:
            PreconditionError: if the channel count is below 1.
        """
        if self._channels < 1:
            raise PreconditionError(f"Cannot count frames with {self._channels} channels")
        return self._sample_count // self._channels

    @property
    def storage_length(self) -> int:
        return self._length

    @property
    def write_iterator_position(self) -> int:
        return self._write_pos

    @property
    def read_iterator_position(self) -> int:
        return self._read_pos

    # ---------- Write path ----------

    def add_to_sample_count(self, n: int) -> None:
        """Reserve ``n`` more logical samples without writing data.

        Storage is zero-extended so that it always covers ``sample_count``;
        the reserved slots are then filled through the write iterator.
        """
        self._sample_count += int(n)
        self._extend_to(self._sample_count)

    def reset_iterators(self) -> None:
        self._write_pos = 0
        self._read_pos = 0

    def advance_write_iterator(self, by: int = 1) -> None:
        self._write_pos += int(by)
        self._extend_to(self._write_pos)

    def set_sample_at_write_iterator(self, value: float) -> None:
        pos = self._write_pos
        if self.phase is BufferPhase.READY:
            logger.warning("Writing to a buffer already marked ready (position %d)", pos)
        elif self.phase is BufferPhase.CONFIGURING:
            self.phase = BufferPhase.INGESTING
        self._extend_to(pos + 1)
        self._storage[pos] = value
        if pos >= self._sample_count:
            self._sample_count = pos + 1

    def add_samples(self, values: Iterable[float]) -> None:
        """Append ``values`` after the current samples using the write iterator."""
        values = list(values)
        old_count = self._sample_count
        self.add_to_sample_count(len(values))
        self.reset_iterators()
        self.advance_write_iterator(old_count)
        for v in values:
            self.set_sample_at_write_iterator(v)
            self.advance_write_iterator()

    def mark_ready(self) -> None:
        self.phase = BufferPhase.READY

    # ---------- Read path ----------

    def get_sample(self, index: int) -> float:
        if not 0 <= index < self._sample_count:
            raise IndexError(f"Sample index {index} out of range (sample_count={self._sample_count})")
        return float(self._storage[index])

    def get_sample_by_frame(self, frame: int, channel: int) -> float:
        if not 0 <= channel < self._channels:
            raise IndexError(f"Channel {channel} out of range (channels={self._channels})")
        if not 0 <= frame < self.get_frame_count():
            raise IndexError(f"Frame {frame} out of range (frame_count={self.get_frame_count()})")
        return float(self._storage[frame * self._channels + channel])

    def read_iterator_valid(self) -> bool:
        return 0 <= self._read_pos < self._sample_count

    def advance_read_iterator(self, by: int = 1) -> None:
        self._read_pos += int(by)

    def get_sample_at_read_iterator(self) -> float:
        return self.get_sample(self._read_pos)

    def view(self) -> BufferView:
        samples = self._storage[: self._sample_count]
        samples.flags.writeable = False
        frame_count = self._sample_count // self._channels if self._channels > 0 else 0
        return BufferView(
            samples=samples,
            frame_rate=self._frame_rate,
            channels=self._channels,
            sample_count=self._sample_count,
            frame_count=frame_count,
        )

    def to_array(self) -> np.ndarray:
        """Copy of the logical samples as a flat float32 array."""
        return self._storage[: self._sample_count].copy()

    # ---------- Transform support ----------

    def _rewrite(self, data: np.ndarray, channels: int, frame_rate: int) -> None:
        """Overwrite storage from position zero with ``data`` and shrink to fit.

        ``data`` must not be longer than the current sample count. Used by
        the transforms, which never move the buffer to a larger layout.
        """
        self.reset_iterators()
        n = data.shape[0]
        self._storage[:n] = data
        self.advance_write_iterator(n)
        self._sample_count = n
        self._length = n
        self._channels = channels
        self._frame_rate = frame_rate
        self.phase = BufferPhase.READY

    def _extend_to(self, length: int) -> None:
        if length <= self._length:
            return
        capacity = self._storage.shape[0]
        if length > capacity:
            new_capacity = max(_INITIAL_CAPACITY, capacity * 2, length)
            grown = np.zeros(new_capacity, dtype=np.float32)
            grown[: self._length] = self._storage[: self._length]
            self._storage = grown
        else:
            # slots past the logical end may hold data from before a truncate
            self._storage[self._length : length] = 0.0
        self._length = length

    def _warn_if_reconfigured(self, what: str) -> None:
        if self._sample_count > 0:
            logger.warning(
                "Changing %s after %d samples were written; frame counts now use the new value",
                what,
                self._sample_count,
            )


__all__ = ["SampleBuffer", "BufferView", "BufferPhase"]
