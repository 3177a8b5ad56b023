"""Key Finder Features

Key codes, the chroma key detector, and the buffer classifier adapter.
The detector (and librosa) is imported on first use.
"""

__version__ = "0.1.0"

from .classifier import KeyClassifier, KeyDetector, detect_key
from .keys import Key, TONIC_NAMES

__all__ = [
    "Key",
    "TONIC_NAMES",
    "KeyClassifier",
    "KeyDetector",
    "detect_key",
]
