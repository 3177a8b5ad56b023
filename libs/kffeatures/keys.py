"""Key codes returned by key detection.

The numeric values are the detection engine's discriminants and must not be
renumbered: tonics ascend chromatically from A, each with a major then a
minor code, followed by SILENCE.
"""

from __future__ import annotations

from enum import IntEnum
from typing import List

# Tonic spelling used for key labels, indexed by pitch class
TONIC_NAMES: List[str] = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]

_A_PITCH_CLASS = 9


class Key(IntEnum):
    A_MAJOR = 0
    A_MINOR = 1
    B_FLAT_MAJOR = 2
    B_FLAT_MINOR = 3
    B_MAJOR = 4
    B_MINOR = 5
    C_MAJOR = 6
    C_MINOR = 7
    D_FLAT_MAJOR = 8
    D_FLAT_MINOR = 9
    D_MAJOR = 10
    D_MINOR = 11
    E_FLAT_MAJOR = 12
    E_FLAT_MINOR = 13
    E_MAJOR = 14
    E_MINOR = 15
    F_MAJOR = 16
    F_MINOR = 17
    G_FLAT_MAJOR = 18
    G_FLAT_MINOR = 19
    G_MAJOR = 20
    G_MINOR = 21
    A_FLAT_MAJOR = 22
    A_FLAT_MINOR = 23
    SILENCE = 24

    @classmethod
    def from_pitch_class(cls, pitch_class: int, minor: bool) -> "Key":
        """Key for a tonic pitch class (C=0) and mode."""
        steps_from_a = (int(pitch_class) - _A_PITCH_CLASS) % 12
        return cls(steps_from_a * 2 + (1 if minor else 0))

    @property
    def is_silence(self) -> bool:
        return self is Key.SILENCE

    @property
    def is_minor(self) -> bool:
        return not self.is_silence and self.value % 2 == 1

    @property
    def pitch_class(self) -> int:
        """Tonic pitch class (C=0); -1 for SILENCE."""
        if self.is_silence:
            return -1
        return (self.value // 2 + _A_PITCH_CLASS) % 12

    @property
    def label(self) -> str:
        """Human-readable name, e.g. "Bb minor"."""
        if self.is_silence:
            return "silence"
        mode = "minor" if self.is_minor else "major"
        return f"{TONIC_NAMES[self.pitch_class]} {mode}"


__all__ = ["Key", "TONIC_NAMES"]
