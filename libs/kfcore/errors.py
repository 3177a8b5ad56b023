"""Exception types shared by the key finder libraries."""

from __future__ import annotations


class KeyFinderError(Exception):
    """Base class for errors raised by the key finder libraries."""


class PreconditionError(KeyFinderError, ValueError):
    """An operation was called on a buffer or with arguments it cannot handle.

    Raised instead of dividing by zero or walking corrupted indices, e.g. a
    zero channel count before a downmix, a non-positive decimation factor,
    or an empty buffer handed to classification.
    """


class KeyDetectionError(KeyFinderError, RuntimeError):
    """The detection engine failed or returned an unknown key code."""


__all__ = ["KeyFinderError", "PreconditionError", "KeyDetectionError"]
