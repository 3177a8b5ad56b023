"""Audio I/O helpers that feed decoded PCM into a SampleBuffer.

Uses soundfile for WAV/FLAC decoding. Waveforms are float32 arrays in range
[-1.0, 1.0]; every loader hands samples to the buffer through its write
iterator, in interleaved frame order.
"""

from __future__ import annotations

import io
from typing import Tuple

import numpy as np
import soundfile as sf

from kfaudio.buffer import SampleBuffer


def read_wav(path: str) -> Tuple[np.ndarray, int]:
    """Read an audio file and return (audio, sample_rate).

    Audio is returned as float32 np.ndarray with shape (frames, channels).
    """
    audio, sr = sf.read(path, dtype="float32", always_2d=True)
    return audio, sr


def read_wav_bytes(data: bytes) -> Tuple[np.ndarray, int]:
    """Read audio from bytes and return (audio, sample_rate)."""
    with io.BytesIO(data) as buf:
        audio, sr = sf.read(buf, dtype="float32", always_2d=True)
    return audio, sr


def duration_of_bytes(data: bytes) -> float:
    """Duration in seconds from the file header, without decoding samples."""
    with io.BytesIO(data) as buf:
        return float(sf.info(buf).duration)


def read_pcm_f32le(data: bytes, frame_rate: int, channels: int = 1) -> SampleBuffer:
    """Load raw little-endian 32-bit float interleaved PCM into a buffer.

    Raises:
        ValueError: if ``data`` is not a whole number of float32 samples.
    """
    if len(data) % 4:
        raise ValueError(f"PCM byte length {len(data)} is not a multiple of 4")
    samples = np.frombuffer(data, dtype="<f4")
    buffer = SampleBuffer()
    buffer.set_frame_rate(frame_rate)
    buffer.set_channels(channels)
    buffer.add_samples(samples.tolist())
    return buffer


def buffer_from_array(audio: np.ndarray, sample_rate: int) -> SampleBuffer:
    """Build a buffer from audio of shape (frames,) or (frames, channels)."""
    audio = np.asarray(audio, dtype=np.float32)
    if audio.ndim == 1:
        audio = audio.reshape(-1, 1)
    if audio.ndim != 2:
        raise ValueError(f"Expected 1-D or 2-D audio, got shape {audio.shape}")

    buffer = SampleBuffer()
    buffer.set_frame_rate(sample_rate)
    buffer.set_channels(audio.shape[1])
    # row-major ravel gives interleaved order
    buffer.add_samples(audio.ravel().tolist())
    return buffer


def load_buffer(path: str) -> SampleBuffer:
    audio, sr = read_wav(path)
    return buffer_from_array(audio, sr)


def load_buffer_bytes(data: bytes) -> SampleBuffer:
    audio, sr = read_wav_bytes(data)
    return buffer_from_array(audio, sr)


__all__ = [
    "read_wav",
    "read_wav_bytes",
    "duration_of_bytes",
    "read_pcm_f32le",
    "buffer_from_array",
    "load_buffer",
    "load_buffer_bytes",
]
