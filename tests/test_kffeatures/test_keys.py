"""Tests for Key codes."""

import pytest

from kffeatures import Key, TONIC_NAMES


def test_codes_match_engine_discriminants():
    assert len(Key) == 25
    assert Key.A_MAJOR == 0
    assert Key.C_MAJOR == 6
    assert Key.D_MINOR == 11
    assert Key.A_FLAT_MINOR == 23
    assert Key.SILENCE == 24


@pytest.mark.parametrize(
    "pitch_class, minor, expected",
    [
        (0, False, Key.C_MAJOR),
        (9, True, Key.A_MINOR),
        (2, True, Key.D_MINOR),
        (10, False, Key.B_FLAT_MAJOR),
        (8, True, Key.A_FLAT_MINOR),
        (6, False, Key.G_FLAT_MAJOR),
    ],
)
def test_from_pitch_class(pitch_class, minor, expected):
    assert Key.from_pitch_class(pitch_class, minor) is expected


def test_pitch_class_inverts_from_pitch_class():
    for key in Key:
        if key.is_silence:
            continue
        assert Key.from_pitch_class(key.pitch_class, key.is_minor) is key


def test_labels():
    assert Key.D_MINOR.label == "D minor"
    assert Key.B_FLAT_MAJOR.label == "Bb major"
    assert Key.SILENCE.label == "silence"
    assert Key.SILENCE.pitch_class == -1
    assert not Key.SILENCE.is_minor


def test_labels_use_tonic_table():
    import kffeatures

    assert "PITCH_CLASSES" not in kffeatures.__all__
    for key in Key:
        if key.is_silence:
            continue
        assert key.label.split()[0] == TONIC_NAMES[key.pitch_class]
