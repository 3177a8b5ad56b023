"""Adapter between a finished SampleBuffer and a key detection engine."""

from __future__ import annotations

import logging
import operator
from typing import Callable, Optional, Union

from kfaudio.buffer import BufferView, SampleBuffer
from kfcore.errors import KeyDetectionError, PreconditionError
from .keys import Key

logger = logging.getLogger(__name__)

KeyDetector = Callable[[BufferView], Union[Key, int]]


def _check_ready(buffer: SampleBuffer) -> None:
    count = buffer.get_sample_count()
    channels = buffer.get_channels()
    if count == 0:
        raise PreconditionError("Cannot detect the key of an empty buffer")
    if channels < 1:
        raise PreconditionError(f"Buffer has {channels} channels; expected at least 1")
    if buffer.get_frame_rate() < 1:
        raise PreconditionError(f"Buffer frame rate {buffer.get_frame_rate()} is not positive")
    if count % channels:
        raise PreconditionError(
            f"Sample count {count} is not a multiple of the channel count {channels}"
        )


class KeyClassifier:
    """Hands a buffer to a detector and returns the resulting ``Key``.

    The detector receives a read-only ``BufferView``; the buffer itself is
    never mutated and no reference to it is kept after ``detect_key``
    returns. Pass a stub detector to test callers without running the
    spectral analysis.
    """

    def __init__(self, detector: Optional[KeyDetector] = None) -> None:
        if detector is None:
            from .key_detection import detect_key as detector
        self._detector = detector

    def detect_key(self, buffer: SampleBuffer) -> Key:
        """Classify ``buffer``.

        Raises:
            PreconditionError: if the buffer is empty or its layout is
                inconsistent.
            KeyDetectionError: if the detector fails or returns a code that
                is not a known key.
        """
        _check_ready(buffer)
        view = buffer.view()

        try:
            result = self._detector(view)
        except PreconditionError:
            raise
        except Exception as e:
            logger.error(f"Key detection failed: {e}")
            raise KeyDetectionError(f"Key detection failed: {e}") from e

        # only exact integer codes; bools and floats would coerce to a wrong key
        if isinstance(result, bool):
            raise KeyDetectionError(f"Detector returned unknown key code {result!r}")
        try:
            key = Key(operator.index(result))
        except (TypeError, ValueError) as e:
            raise KeyDetectionError(f"Detector returned unknown key code {result!r}") from e

        logger.debug("Detected %s over %d frames", key.label, view.frame_count)
        return key


_default_classifier: Optional[KeyClassifier] = None


def detect_key(buffer: SampleBuffer) -> Key:
    """Classify ``buffer`` with the default chroma detector."""
    global _default_classifier
    if _default_classifier is None:
        _default_classifier = KeyClassifier()
    return _default_classifier.detect_key(buffer)


__all__ = ["KeyClassifier", "KeyDetector", "detect_key"]
