"""Musical key detection using chroma features.

Returns a best key guess among 24 keys (12 pitch classes × {major, minor})
as a ``Key`` code, or ``Key.SILENCE`` for near-silent input.
"""

from __future__ import annotations

import logging
import math
from typing import Dict

import numpy as np
import librosa

from kfaudio.buffer import BufferView
from kfcore.config import get_settings
from kfcore.errors import PreconditionError
from .keys import Key

logger = logging.getLogger(__name__)

# Krumhansl-Schmuckler key profiles, tonic first
MAJOR_PROFILE = np.array([6.35, 2.23, 3.48, 2.33, 4.38, 4.09, 2.52, 5.19, 2.39, 3.66, 2.29, 2.88])
MINOR_PROFILE = np.array([6.33, 2.68, 3.52, 5.38, 2.60, 3.53, 2.54, 4.75, 3.98, 2.69, 3.34, 3.17])

CQT_FMIN = librosa.note_to_hz("C1")
MAX_OCTAVES = 7
# Headroom between the top CQT bin and Nyquist for the filter bandwidth
_NYQUIST_MARGIN = 1.05


def _normalize(v: np.ndarray) -> np.ndarray:
    v = np.asarray(v, dtype=float)
    s = v.sum()
    return v / s if s > 0 else v


def octaves_below_nyquist(sr: int) -> int:
    """Number of whole CQT octaves from C1 that fit under the Nyquist frequency."""
    ceiling = (sr / 2.0) / (CQT_FMIN * _NYQUIST_MARGIN)
    if ceiling < 2.0:
        return 0
    return min(MAX_OCTAVES, int(math.floor(math.log2(ceiling))))


def is_silent(audio: np.ndarray, threshold: float) -> bool:
    return audio.size == 0 or float(np.max(np.abs(audio))) < threshold


def chroma_from_audio(audio: np.ndarray, sr: int) -> np.ndarray:
    """Compute mean chroma vector from audio.

    Raises:
        PreconditionError: if ``sr`` is too low to cover one CQT octave.
    """
    # Ensure mono for chroma stability
    if audio.ndim == 2:
        audio = audio.mean(axis=1)
    n_octaves = octaves_below_nyquist(sr)
    if n_octaves < 1:
        raise PreconditionError(f"Frame rate {sr} Hz is too low for chroma analysis")
    chroma = librosa.feature.chroma_cqt(
        y=np.ascontiguousarray(audio, dtype=np.float32), sr=sr, n_octaves=n_octaves
    )
    return chroma.mean(axis=1)


def estimate_key(audio: np.ndarray, sr: int) -> Dict[str, object]:
    """Estimate musical key from audio.

    Returns dict: {"key": Key, "confidence": 0.0..1.0}
    """
    threshold = get_settings().KF_SILENCE_THRESHOLD
    if is_silent(audio, threshold):
        return {"key": Key.SILENCE, "confidence": 1.0}

    chroma = _normalize(chroma_from_audio(audio, sr))

    scores = []
    for shift in range(12):
        rot = np.roll(chroma, -shift)
        major_score = float(np.corrcoef(rot, MAJOR_PROFILE)[0, 1])
        minor_score = float(np.corrcoef(rot, MINOR_PROFILE)[0, 1])
        scores.append((shift, False, major_score))
        scores.append((shift, True, minor_score))

    # a flat chroma has no correlation with any profile
    scores = [(s, m, 0.0 if np.isnan(c) else c) for s, m, c in scores]
    best = max(scores, key=lambda x: x[2])
    total = sum(max(c, 0.0) for _, _, c in scores)
    confidence = (max(best[2], 0.0) / total) if total > 0 else 0.0

    key = Key.from_pitch_class(best[0], minor=best[1])
    return {"key": key, "confidence": confidence}


def detect_key(view: BufferView) -> Key:
    """Detect the key of a prepared buffer view."""
    audio = view.frames() if view.channels > 1 else view.samples
    result = estimate_key(audio, view.frame_rate)
    logger.debug(
        "Chroma key estimate %s (confidence %.3f) over %d frames at %d Hz",
        result["key"].label,
        result["confidence"],
        view.frame_count,
        view.frame_rate,
    )
    return result["key"]


__all__ = ["detect_key", "estimate_key", "chroma_from_audio", "octaves_below_nyquist", "is_silent"]
