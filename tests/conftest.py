import io

import numpy as np
import pytest
import soundfile as sf

from ringabell.audio_fingerprinter import AudioFingerprinter, Recognizer
from ringabell.config import Config
from ringabell.index import FingerprintIndex

SR = 44100


def make_wav(samples: np.ndarray, sr: int = SR, subtype: str = "PCM_16") -> bytes:
    buf = io.BytesIO()
    sf.write(buf, samples, sr, format="WAV", subtype=subtype)
    return buf.getvalue()


def sine(freq: float = 440.0, duration: float = 2.0, sr: int = SR, amp: float = 0.8) -> np.ndarray:
    t = np.arange(int(sr * duration)) / sr
    return amp * np.sin(2 * np.pi * freq * t)


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def fingerprinter(config):
    """Provide a fresh fingerprinter instance for each test."""
    return AudioFingerprinter(config)


@pytest.fixture
def index():
    """Provide a fresh index for each test."""
    return FingerprintIndex(min_score=10)


@pytest.fixture
def recognizer(config):
    return Recognizer(config=config)


@pytest.fixture
def sine_wav():
    """2 s, 440 Hz sine clip."""
    return make_wav(sine())


@pytest.fixture
def noise_wav():
    """2 s of white noise, same length as sine_wav, kept under the amplitude gate."""
    rng = np.random.default_rng(1234)
    return make_wav(rng.uniform(-0.1, 0.1, 2 * SR))
