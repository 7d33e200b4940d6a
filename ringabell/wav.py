"""
WAV decoding for the recognition pipeline.

Only uncompressed 16-bit PCM is accepted. Samples are normalised by
``INT16_MAX`` so that a full-scale positive value maps to 1.0.
"""

import io
import logging
from typing import NamedTuple

import librosa
import numpy as np
import soundfile as sf

from .exceptions import MalformedAudioError

logger = logging.getLogger(__name__)

INT16_MAX = 32767
ACCEPTED_SUBTYPES = ("PCM_16",)


class DecodedAudio(NamedTuple):
    samples: np.ndarray  # mono float64, approximately in [-1, 1]
    sample_rate: int
    duration: float  # seconds


def _normalize(pcm: np.ndarray) -> np.ndarray:
    return pcm.astype(np.float64) / INT16_MAX


def bytes_to_samples(data: bytes) -> np.ndarray:
    """
    Convert a headerless little-endian 16-bit PCM stream to float samples.

    Raises:
        MalformedAudioError: if the byte count is odd
    """
    if len(data) % 2 != 0:
        raise MalformedAudioError(
            f"PCM stream must hold whole 16-bit samples, got {len(data)} bytes"
        )
    return _normalize(np.frombuffer(data, dtype="<i2"))


def decode_wav(data: bytes) -> DecodedAudio:
    """
    Decode a RIFF/WAVE byte string into mono samples and its duration.

    Args:
        data: Complete WAV file contents

    Returns:
        DecodedAudio(samples, sample_rate, duration)

    Raises:
        MalformedAudioError: on odd length, unreadable header or a
            sample format other than 16-bit PCM
    """
    if len(data) % 2 != 0:
        raise MalformedAudioError(f"WAV data has odd length ({len(data)} bytes)")
    if not data:
        raise MalformedAudioError("WAV data is empty")

    try:
        with sf.SoundFile(io.BytesIO(data)) as f:
            if f.subtype not in ACCEPTED_SUBTYPES:
                raise MalformedAudioError(
                    f"Unsupported sample format {f.subtype}; expected 16-bit PCM"
                )
            sample_rate = int(f.samplerate)
            frames = f.frames
            pcm = f.read(dtype="int16", always_2d=True)
    except (RuntimeError, TypeError, ValueError) as e:
        raise MalformedAudioError(f"Could not parse WAV container: {e}") from e

    if sample_rate <= 0:
        raise MalformedAudioError(f"WAV header declares sample rate {sample_rate}")

    samples = _normalize(pcm)
    if samples.shape[1] > 1:
        samples = librosa.to_mono(samples.T)
    else:
        samples = samples[:, 0]

    duration = frames / sample_rate
    logger.debug(
        "Decoded %d samples at %d Hz (%.3f s)", len(samples), sample_rate, duration
    )
    return DecodedAudio(np.ascontiguousarray(samples), sample_rate, duration)
