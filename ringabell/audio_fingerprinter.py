"""
Audio Fingerprinting Library

Band-peak fingerprinting of 16-bit PCM WAV clips, after the Shazam algorithm,
plus the register/search entry points built on top of it.
"""

import logging
from typing import List, Optional

import numpy as np

from .config import BANDS, Config
from .fingerprint import create_fingerprints
from .index import FingerprintIndex, SearchResult
from .peaks import Peak, extract_peaks
from .spectrogram import create_spectrogram
from .wav import DecodedAudio, decode_wav

logger = logging.getLogger(__name__)


class AudioFingerprinter:
    """
    Core audio fingerprinting algorithm.

    Turns WAV bytes into a list of 64-bit fingerprint hashes:
    samples -> spectrogram -> band peaks -> peak-pair hashes.
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Args:
            config: Signal processing parameters, defaults to Config()
        """
        self.config = config or Config()

    def read_audio(self, data: bytes) -> DecodedAudio:
        """Decode WAV bytes; raises MalformedAudioError on bad input."""
        return decode_wav(data)

    def compute_spectrogram(self, audio: np.ndarray, sr: int) -> np.ndarray:
        """
        Compute the magnitude spectrogram.

        Returns:
            Array with shape (time_frames, freq_bin_size)
        """
        return create_spectrogram(audio, self.config, sample_rate=sr)

    def extract_peaks(self, spectrogram: np.ndarray, duration: float) -> List[Peak]:
        return extract_peaks(spectrogram, duration, BANDS)

    def generate_fingerprints(self, peaks: List[Peak]) -> List[int]:
        return create_fingerprints(peaks, self.config.target_zone_size)

    def process(self, data: bytes) -> List[int]:
        """
        Complete fingerprinting pipeline for one WAV clip.

        Args:
            data: WAV file contents

        Returns:
            List of fingerprint hashes
        """
        audio = self.read_audio(data)
        S = self.compute_spectrogram(audio.samples, audio.sample_rate)
        peaks = self.extract_peaks(S, audio.duration)
        hashes = self.generate_fingerprints(peaks)

        logger.debug(
            "Processed %.2f s clip: %d frames, %d peaks, %d fingerprints",
            audio.duration,
            len(S),
            len(peaks),
            len(hashes),
        )
        return hashes


class Recognizer:
    """
    Register known recordings and identify query clips.

    Owns one FingerprintIndex; decoding and hashing finish before the index
    is touched, so a failed register leaves it unchanged.
    """

    def __init__(
        self,
        index: Optional[FingerprintIndex] = None,
        config: Optional[Config] = None,
    ):
        self.config = config or Config()
        self.fingerprinter = AudioFingerprinter(self.config)
        self.index = index if index is not None else FingerprintIndex(self.config.min_score)

    def register(self, name: str, data: bytes) -> None:
        fingerprints = self.fingerprinter.process(data)
        self.index.register(name, fingerprints)

    def search_result(self, data: bytes) -> SearchResult:
        fingerprints = self.fingerprinter.process(data)
        return self.index.search(fingerprints)

    def search(self, data: bytes) -> str:
        """Search and return the result as JSON text: {"songName": ..., "score": ...}."""
        return self.search_result(data).to_json()
