import numpy as np
import pytest

from ringabell.config import Config
from ringabell.exceptions import PreconditionViolation
from ringabell.spectrogram import (
    create_spectrogram,
    downsample,
    hamming_window,
    low_pass_filter,
)

from conftest import SR, sine


def test_low_pass_filter_zeroes_samples_at_or_above_cutoff():
    cutoff = 5000.0 / 44100.0
    samples = np.array([-0.9, 0.0, 0.05, cutoff, 0.5, 1.0])
    out = low_pass_filter(samples, 5000.0, 44100.0)
    np.testing.assert_allclose(out, [-0.9, 0.0, 0.05, 0.0, 0.0, 0.0])


def test_downsample_keeps_every_nth_sample():
    samples = np.arange(10)
    np.testing.assert_array_equal(downsample(samples, 44100, 11025), [0, 4, 8])


def test_downsample_rejects_upsampling():
    with pytest.raises(PreconditionViolation):
        downsample(np.arange(4), 11025, 44100)


def test_hamming_window():
    w = hamming_window(1024)
    assert w[0] == pytest.approx(0.08)
    assert w[-1] == pytest.approx(0.08)
    i = 300
    assert w[i] == pytest.approx(0.54 - 0.46 * np.cos(2 * np.pi * i / 1023))


def test_frame_count_and_shape(fingerprinter):
    """Frame count is len(downsampled) // (freq_bin_size - hop_size)."""
    audio = sine(duration=2.0)
    S = fingerprinter.compute_spectrogram(audio, SR)
    downsampled_len = len(audio[::4])
    assert S.shape == (downsampled_len // 512, 1024)
    assert np.all(S >= 0)


def test_empty_input_gives_empty_spectrogram():
    S = create_spectrogram(np.zeros(0))
    assert S.shape == (0, 1024)


def test_short_input_gives_empty_spectrogram():
    # 4 * 511 samples downsample to 511, one short of a frame
    S = create_spectrogram(np.zeros(4 * 511))
    assert len(S) == 0


def test_sine_energy_lands_in_expected_bin():
    # negative half-cycles survive the amplitude gate; 440 Hz at 11025 Hz
    # sits near bin 440 / (11025 / 1024) ~= 40.9
    S = create_spectrogram(sine(duration=1.0))
    # the gate leaves a large DC offset, so skip the lowest bins
    band = S[5, 10:512]
    assert abs(int(np.argmax(band)) + 10 - 41) <= 1


def test_recursive_backend_matches_vectorized():
    audio = sine(duration=0.1)
    fast = create_spectrogram(audio, Config())
    slow = create_spectrogram(audio, Config(fft_backend="recursive"))
    assert fast.shape == slow.shape
    np.testing.assert_allclose(fast, slow, atol=1e-8)


def test_other_sample_rates_are_resampled():
    audio = sine(duration=2.0, sr=22050)
    S = create_spectrogram(audio, Config(), sample_rate=22050)
    # resampled to 88200 samples -> 22050 downsampled -> 43 frames
    assert S.shape == (43, 1024)
