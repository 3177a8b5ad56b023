"""Tests for reduce_to_mono and downsample."""

import logging

import numpy as np
import pytest

from kfaudio import BufferPhase, SampleBuffer, downsample, reduce_to_mono
from kfcore.errors import PreconditionError


def make_buffer(values, channels=1, frame_rate=44100):
    buf = SampleBuffer()
    buf.set_frame_rate(frame_rate)
    buf.set_channels(channels)
    for v in values:
        buf.set_sample_at_write_iterator(v)
        buf.advance_write_iterator()
    return buf


class TestReduceToMono:
    """Tests for equal-weight downmix."""

    def test_stereo_pairs_are_averaged(self):
        buf = make_buffer([0.5, 0.25, -1.0, 0.5], channels=2)
        reduce_to_mono(buf)
        assert buf.get_channels() == 1
        np.testing.assert_array_equal(buf.to_array(), [0.375, -0.25])

    def test_sample_count_becomes_frame_count(self):
        buf = make_buffer(np.arange(12, dtype=np.float32), channels=3)
        frames = buf.get_frame_count()
        reduce_to_mono(buf)
        assert buf.get_sample_count() == frames == 4
        assert buf.get_frame_count() == buf.get_sample_count()
        np.testing.assert_allclose(buf.to_array(), [1.0, 4.0, 7.0, 10.0])

    def test_opposite_channels_cancel(self):
        buf = make_buffer([1.0, -1.0, 0.5, -0.5], channels=2, frame_rate=44100)
        reduce_to_mono(buf)
        np.testing.assert_array_equal(buf.to_array(), [0.0, 0.0])
        assert buf.get_frame_rate() == 44100

    def test_mono_is_noop(self):
        buf = make_buffer([0.1, 0.2, 0.3])
        reduce_to_mono(buf)
        np.testing.assert_allclose(buf.to_array(), [0.1, 0.2, 0.3], rtol=1e-6)
        assert buf.phase is BufferPhase.READY

    def test_iterators_reset_after_rewrite(self):
        buf = make_buffer([1.0, 3.0, 5.0, 7.0], channels=2)
        reduce_to_mono(buf)
        assert buf.write_iterator_position == buf.get_sample_count() == 2
        assert buf.read_iterator_position == 0
        # appending continues after the downmixed data
        buf.set_sample_at_write_iterator(9.0)
        np.testing.assert_array_equal(buf.to_array(), [2.0, 6.0, 9.0])

    def test_zero_channels_raises(self):
        buf = SampleBuffer()
        buf.set_frame_rate(44100)
        with pytest.raises(PreconditionError):
            reduce_to_mono(buf)

    def test_partial_frame_raises(self):
        buf = make_buffer([0.1, 0.2, 0.3], channels=2)
        with pytest.raises(PreconditionError):
            reduce_to_mono(buf)


class TestDownsample:
    """Tests for integer-factor decimation."""

    def test_factor_two_keeps_even_frames(self):
        buf = make_buffer([0.1, 0.2, 0.3, 0.4], frame_rate=44100)
        downsample(buf, 2)
        np.testing.assert_allclose(buf.to_array(), [0.1, 0.3], rtol=1e-6)
        assert buf.get_sample_count() == 2

    def test_frame_rate_follows_factor(self):
        buf = make_buffer(np.zeros(40), frame_rate=44100)
        downsample(buf, 10)
        assert buf.get_frame_rate() == 4410
        assert buf.get_frame_count() == 4

    def test_uneven_rate_rounds_down_with_warning(self, caplog):
        buf = make_buffer(np.zeros(9), frame_rate=44100)
        with caplog.at_level(logging.WARNING, logger="kfaudio.transforms"):
            downsample(buf, 4)
        assert buf.get_frame_rate() == 11025
        assert "not divisible" not in caplog.text

        buf = make_buffer(np.zeros(9), frame_rate=22050)
        with caplog.at_level(logging.WARNING, logger="kfaudio.transforms"):
            downsample(buf, 4)
        assert buf.get_frame_rate() == 5512
        assert "not divisible" in caplog.text

    def test_partial_last_group_keeps_its_first_frame(self):
        buf = make_buffer([0.0, 1.0, 2.0, 3.0, 4.0])
        downsample(buf, 2)
        np.testing.assert_array_equal(buf.to_array(), [0.0, 2.0, 4.0])

    def test_multichannel_keeps_whole_frames(self):
        buf = make_buffer([1.0, -1.0, 2.0, -2.0, 3.0, -3.0, 4.0, -4.0], channels=2)
        downsample(buf, 2)
        assert buf.get_channels() == 2
        assert buf.get_frame_count() == 2
        np.testing.assert_array_equal(buf.to_array(), [1.0, -1.0, 3.0, -3.0])

    def test_factor_one_is_noop(self):
        buf = make_buffer([0.5, 0.25, 0.125], frame_rate=8000)
        downsample(buf, 1)
        np.testing.assert_array_equal(buf.to_array(), [0.5, 0.25, 0.125])
        assert buf.get_frame_rate() == 8000

    @pytest.mark.parametrize("factor", [0, -2, 1.5, "2", True])
    def test_invalid_factor_raises(self, factor):
        buf = make_buffer([0.0, 0.0])
        with pytest.raises(PreconditionError):
            downsample(buf, factor)

    def test_mono_then_downsample_pipeline(self):
        left = np.arange(8, dtype=np.float32)
        right = -left + 2.0
        interleaved = np.stack([left, right], axis=1).ravel()
        buf = make_buffer(interleaved, channels=2, frame_rate=48000)

        reduce_to_mono(buf)
        downsample(buf, 4)

        assert buf.get_channels() == 1
        assert buf.get_frame_rate() == 12000
        np.testing.assert_array_equal(buf.to_array(), [1.0, 1.0])
