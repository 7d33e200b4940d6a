import logging
from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from .config import BANDS
from .exceptions import PreconditionViolation

logger = logging.getLogger(__name__)


class Peak(NamedTuple):
    time_ms: int
    freq_bin: int


def band_maxima(
    frame: np.ndarray,
    bands: Sequence[Tuple[int, int]] = BANDS,
) -> List[Tuple[int, float]]:
    """
    Locate the strongest bin of every band in one spectrum frame.

    Bands are clipped to the frame length. Ties go to the lowest index and
    bands whose maximum is zero are left out.

    Returns:
        List of (freq_bin, magnitude), in band order
    """
    maxima = []
    for lo, hi in bands:
        hi = min(hi, len(frame))
        if lo >= hi:
            continue
        local = int(np.argmax(frame[lo:hi]))
        magnitude = float(frame[lo + local])
        if magnitude > 0.0:
            maxima.append((lo + local, magnitude))
    return maxima


def extract_peaks(
    spectrogram: np.ndarray,
    audio_duration: float,
    bands: Optional[Sequence[Tuple[int, int]]] = None,
) -> List[Peak]:
    """
    Extract band peaks that stand out from the rest of their frame.

    A band's maximum becomes a peak when it is strictly above the mean of
    the frame's non-zero band maxima.

    Args:
        spectrogram: Array of shape (frames, bins)
        audio_duration: Length of the clip in seconds
        bands: Half-open (lo, hi) bin ranges, defaults to BANDS

    Returns:
        Peaks in frame order, then band order. Times are in milliseconds.
    """
    if audio_duration < 0:
        raise PreconditionViolation(f"Audio duration must not be negative, got {audio_duration}")

    n_frames = len(spectrogram)
    if n_frames == 0:
        return []

    bands = BANDS if bands is None else bands
    bin_duration = audio_duration / n_frames
    peaks = []

    for frame_idx, frame in enumerate(spectrogram):
        maxima = band_maxima(frame, bands)
        if not maxima:
            continue

        avg = sum(mag for _, mag in maxima) / len(maxima)
        frame_len = len(frame)

        for freq_idx, mag in maxima:
            if mag > avg:
                offset = freq_idx * bin_duration / frame_len
                seconds = frame_idx * bin_duration + offset
                peaks.append(Peak(int(seconds * 1000), freq_idx))

    logger.debug("Extracted %d peaks from %d frames", len(peaks), n_frames)
    return peaks
