"""Key Finder Audio

Sample buffer storage, write-iterator ingestion, and in-place transforms.
"""

__version__ = "0.1.0"

from .buffer import BufferPhase, BufferView, SampleBuffer
from .transforms import downsample, reduce_to_mono

__all__ = [
    # Storage
    "SampleBuffer",
    "BufferView",
    "BufferPhase",
    # Transforms
    "reduce_to_mono",
    "downsample",
]
